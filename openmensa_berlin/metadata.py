# openmensa_berlin/metadata.py
# Stammdaten einer Mensa (Name, Adresse, Kontakt, Lage, Öffnungszeiten)

import json
import logging
import re

from .config import AVAILABILITY, CITY, FEED_HOUR, FEED_RETRY, URL_FEED_BASE, URL_META
from .errors import FetchError, InvariantViolation
from .model import Canteen, Feed, FeedSchedule, Location, Times, WEEKDAYS

logger = logging.getLogger(__name__)

DAY_ABBREVIATIONS = ("Mo", "Di", "Mi", "Do", "Fr", "Sa", "So")
TITLE_PREFIX = "studierendenWERK BERLIN - "

_DAY = r"Mo|Di|Mi|Do|Fr|Sa|So"
HOURS_RE = re.compile(
    r"(?P<day_start>" + _DAY + r")\.(?:\s*[–-]\s*(?P<day_end>" + _DAY + r")\.)?"
    r"\D*?(?P<hours_start>\d{2}:\d{2})\s*[–-]\s*(?P<hours_end>\d{2}:\d{2})(?: Uhr)?"
)
LOCATION_RE = re.compile(
    r"fromLonLat\(\[ (?P<longitude>-?\d+\.\d+), (?P<latitude>-?\d+\.\d+)"
)
BEZIRK_RE = re.compile(r"\(Bezirk.*?\)", re.S)
IFRAME_MENSA_RE = re.compile(r"mensa=(\d+)")


def _marker_sibling(doc, icon):
    marker = doc.select_one("i.glyphicon." + icon)
    if marker is None or marker.parent is None:
        return None
    return marker.parent.find_next_sibling(True)


def parse_address(text):
    """Drop the district annotation and join the remaining lines with ", "."""
    text = BEZIRK_RE.sub("", text)
    lines = (" ".join(line.split()) for line in text.splitlines())
    return ", ".join(line for line in lines if line)


def parse_location(script_text):
    m = LOCATION_RE.search(script_text)
    if m is None:
        return None
    return Location(latitude=m.group("latitude"), longitude=m.group("longitude"))


def parse_opening_hours(blocks):
    """Expand blocks like "Mo. – Fr. / 08:00 – 16:00 Uhr" into 7 weekday slots.

    Scanning stops at the first block that does not match.
    """
    opening_hours = [""] * len(WEEKDAYS)
    for text in blocks[:len(WEEKDAYS)]:
        m = HOURS_RE.search(text)
        if m is None:
            break
        start = DAY_ABBREVIATIONS.index(m.group("day_start"))
        end = start
        if m.group("day_end"):
            end = DAY_ABBREVIATIONS.index(m.group("day_end"))
        if end < start:
            raise InvariantViolation(
                "weekday range ends before it starts: %r" % m.group(0))
        hours = m.group("hours_start") + "-" + m.group("hours_end")
        for day in range(start, end + 1):
            opening_hours[day] = hours
    return Times(opening_hours)


def _name_from_directlink(fetcher, canteen_id, link):
    try:
        doc = fetcher.fetch(link)
    except FetchError as e:
        logger.warning("%s: unable to determine name via direct link %s: %s", canteen_id, link, e)
        return ""
    title = doc.title.get_text() if doc.title is not None else ""
    if title.startswith(TITLE_PREFIX):
        title = title[len(TITLE_PREFIX):]
    name = title.strip()
    logger.info("%s: name `%s` determined with directlink method", canteen_id, name)
    return name


def _name_from_iframe(fetcher, canteen_id, src):
    m = IFRAME_MENSA_RE.search(src)
    if m is None:
        logger.warning("%s: unable to determine name with mensatogo method", canteen_id)
        return ""
    try:
        doc = fetcher.fetch(src)
    except FetchError as e:
        logger.warning("%s: unable to fetch mensatogo page %s: %s", canteen_id, src, e)
        return ""

    scripts = "\n".join(s.get_text() for s in doc.select("script"))
    pattern = re.compile(
        r'var locations = JSON\.parse\(.*"' + re.escape(m.group(1))
        + r'":("(?:[^"\\]|\\.)*")')
    found = pattern.search(scripts)
    if found is None:
        logger.warning("%s: unable to determine name with mensatogo method", canteen_id)
        return ""
    try:
        name = json.loads(found.group(1)).strip()
    except ValueError as e:
        logger.warning("%s: undecodable mensatogo name %s: %s", canteen_id, found.group(1), e)
        return ""
    logger.info("%s: name `%s` determined with mensatogo method", canteen_id, name)
    return name


def extract_name(fetcher, canteen_id, doc):
    option = doc.select_one("select#listboxEinrichtungen.listboxStandorte option[selected]")
    name = option.get_text(strip=True) if option is not None else ""
    if name:
        return name

    directlink = doc.select_one("div#directlink")
    link = directlink.get_text(strip=True) if directlink is not None else ""
    if link:
        return _name_from_directlink(fetcher, canteen_id, link)

    iframe = doc.select_one("iframe[src]")
    if iframe is not None:
        return _name_from_iframe(fetcher, canteen_id, iframe["src"])

    logger.warning("%s: unable to determine name", canteen_id)
    return ""


def extract_metadata(fetcher, canteen_id, feed_base=URL_FEED_BASE, key=None):
    """Build the metadata part of a canteen, or None if its page is unavailable."""
    try:
        doc = fetcher.fetch(URL_META, {"resources_id": canteen_id})
    except FetchError as e:
        logger.warning("%s: no metadata: %s", canteen_id, e)
        return None

    name = extract_name(fetcher, canteen_id, doc)

    node = _marker_sibling(doc, "glyphicon-map-marker")
    address = parse_address(node.get_text()) if node is not None else ""

    node = _marker_sibling(doc, "glyphicon-earphone")
    phone = node.get_text().strip() if node is not None else ""

    node = _marker_sibling(doc, "glyphicon-envelope")
    email = ""
    if node is not None:
        email = "".join(c.get_text() for c in node.find_all(True, recursive=False)).strip()

    directlink = doc.select_one("div#directlink")
    source = directlink.get_text(strip=True) if directlink is not None else ""

    location = None
    scripts = doc.select("script")
    if scripts:
        script_text = "\n".join(s.get_text() for s in scripts)
        location = parse_location(script_text)
        if location is None:
            logger.warning("%s: %s: did not find location coordinates", canteen_id, name)

    times = None
    marker = doc.select_one("i.glyphicon.glyphicon-time")
    if marker is not None and marker.parent is not None and marker.parent.parent is not None:
        blocks = [b.get_text() for b in marker.parent.parent.find_next_siblings(True)]
        times = parse_opening_hours(blocks)

    return Canteen(
        name=name,
        address=address,
        city=CITY,
        phone=phone,
        email=email,
        location=location,
        times=times,
        availability=AVAILABILITY,
        feeds=[Feed(
            name="full",
            url=feed_base + (key or canteen_id) + "/full.xml",
            schedule=FeedSchedule(hour=FEED_HOUR, retry=FEED_RETRY),
            source=source,
        )],
    )
