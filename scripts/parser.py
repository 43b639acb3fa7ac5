#!/usr/bin/env python3
# scripts/parser.py
# Erzeugt OpenMensa v2 XML Feeds für die Mensen des Studierendenwerks Berlin

from openmensa_berlin.cli import main

if __name__ == "__main__":
    main()
