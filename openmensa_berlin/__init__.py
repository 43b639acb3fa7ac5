# openmensa_berlin/__init__.py
# OpenMensa v2 Feeds für die Mensen des Studierendenwerks Berlin

__version__ = "0.3.0"
