# openmensa_berlin/config.py
# Endpunkte und Standardwerte für den Berliner Feed

from dataclasses import dataclass

URL_BASE = "https://www.stw.berlin/xhr/"
URL_META = URL_BASE + "speiseplan-und-standortdaten.html"
URL_MEAL = URL_BASE + "speiseplan-wochentag.html"
DEFAULT_ID = "321"  # Mensa TU Hardenbergstraße

URL_FEED_BASE = "https://raw.githubusercontent.com/escrl/openmensa-feed-berlin/master/"

HTTP_MAX_RETRIES = 10
HTTP_SLEEP_STEP = 1.0
HTTP_TIMEOUT = 15
HTTP_STATUS_OVERLOADED = 509  # bandwidth limit exceeded (inofficial)

DAYS_BEFORE = -1
DAYS_AFTER = 21

CITY = "Berlin"
AVAILABILITY = "public"
FEED_HOUR = "8"
FEED_RETRY = "45 3 1440"

CATALOG_MODES = ("ids", "names")
PRICE_MODES = ("scan", "slash")


@dataclass
class Settings:
    repo: str = "berlin"
    feed_base: str = URL_FEED_BASE
    days_before: int = DAYS_BEFORE
    days_after: int = DAYS_AFTER
    catalog_mode: str = "ids"
    price_mode: str = "scan"
    update_ids: bool = False
