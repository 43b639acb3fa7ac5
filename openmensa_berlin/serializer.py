# openmensa_berlin/serializer.py
# Ausgabe einer Mensa als OpenMensa v2.1 XML
#
# canteen_tree() bringt das Modell in Form (leere Kategorien weg, <closed/>
# für Tage ohne Gerichte, feste Wochentagsreihenfolge), render() macht daraus
# ElementTree-Elemente und write() schreibt Kopf, <canteen> und Fuß.

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import InvariantViolation
from .model import WEEKDAYS

NAMESPACE = "http://openmensa.org/open-mensa-v2"
XML_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<openmensa version="2.1"\n'
    '           xmlns="' + NAMESPACE + '"\n'
    '           xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"\n'
    '           xsi:schemaLocation="' + NAMESPACE + ' http://openmensa.org/open-mensa-v2.xsd">\n'
)
XML_FOOTER = "\n</openmensa>\n"


@dataclass
class Node:
    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    children: List["Node"] = field(default_factory=list)


def _attrs(**kwargs):
    return {k: v for k, v in kwargs.items() if v}


def times_node(times):
    hours = times.opening_hours
    if len(hours) != len(WEEKDAYS):
        raise InvariantViolation("opening hours need 7 entries, got %d" % len(hours))
    node = Node("times", {"type": "opening"})
    for weekday, h in zip(WEEKDAYS, hours):
        node.children.append(Node(weekday, {"open": h} if h else {"closed": "true"}))
    return node


def feed_node(feed):
    node = Node("feed", {"name": feed.name})
    s = feed.schedule
    if s is not None:
        node.children.append(Node("schedule", _attrs(hour=s.hour, retry=s.retry)))
    node.children.append(Node("url", text=feed.url))
    if feed.source:
        node.children.append(Node("source", text=feed.source))
    return node


def meal_node(meal):
    node = Node("meal", children=[Node("name", text=meal.name)])
    node.children.extend(Node("note", text=n) for n in meal.notes)
    node.children.extend(Node("price", {"role": p.role}, text=p.price) for p in meal.prices)
    return node


def day_node(day):
    node = Node("day", {"date": day.date})
    if day.closed:
        node.children.append(Node("closed"))
        return node
    for c in day.categories:
        if c.meals:
            node.children.append(
                Node("category", {"name": c.name}, children=[meal_node(m) for m in c.meals]))
    return node


def canteen_tree(canteen):
    node = Node("canteen")
    for tag in ("name", "address", "city", "phone", "email"):
        value = getattr(canteen, tag)
        if value:
            node.children.append(Node(tag, text=value))
    if canteen.location is not None:
        node.children.append(Node("location", {
            "latitude": canteen.location.latitude,
            "longitude": canteen.location.longitude,
        }))
    if canteen.availability:
        node.children.append(Node("availability", text=canteen.availability))
    if canteen.times is not None and canteen.times.opening_hours:
        node.children.append(times_node(canteen.times))
    node.children.extend(feed_node(f) for f in canteen.feeds)
    node.children.extend(day_node(d) for d in canteen.days)
    return node


def render(node, parent=None):
    if parent is None:
        el = ET.Element(node.tag, node.attrs)
    else:
        el = ET.SubElement(parent, node.tag, node.attrs)
    el.text = node.text
    for child in node.children:
        render(child, el)
    return el


def to_string(canteen):
    el = render(canteen_tree(canteen))
    ET.indent(el, space="  ", level=1)
    return XML_HEADER + "  " + ET.tostring(el, encoding="unicode") + XML_FOOTER


def to_bytes(canteen):
    return to_string(canteen).encode("utf-8")


def write(canteen, stream):
    stream.write(to_bytes(canteen))
