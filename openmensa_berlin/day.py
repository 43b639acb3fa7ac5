# openmensa_berlin/day.py
# Speiseplan eines Tages: Kategorien, Gerichte, Preise und Hinweise

import logging
import re

from .config import URL_MEAL
from .errors import FetchError
from .model import Category, Day, MEAL_PLACEHOLDER, Meal, Price, ROLES

logger = logging.getLogger(__name__)

NO_OFFER = ("Kein Speisenangebot", "Kein Speiseangebot")
PRICE_RE = re.compile(r"\d+,\d{2}")
AMOUNT_RE = re.compile(r"^\d+,\d{2}$")

# icon file name -> note
ICON_NOTES = {
    "ampel_gruen_70x65.png": "grün (Ampel)",
    "ampel_gelb_70x65.png": "gelb (Ampel)",
    "ampel_rot_70x65.png": "rot (Ampel)",
    "15.png": "vegan",
    "43.png": "Klimaessen",
    "1.png": "vegetarisch",
    "18.png": "bio",
    "38.png": "MSC",
}


class PriceError(ValueError):
    pass


class PriceCountError(PriceError):
    pass


class PriceFormatError(PriceError):
    pass


def _price(value, role):
    return Price(price=value.replace(",", ".", 1), role=role)


def parse_prices(text):
    """Scan for "3,50"-like amounts: none, one ("other") or three (by role)."""
    found = PRICE_RE.findall(text)
    if not found:
        return []
    if len(found) == 1:
        return [_price(found[0], "other")]
    if len(found) == len(ROLES):
        return [_price(p, role) for p, role in zip(found, ROLES)]
    raise PriceCountError("found %d prices but expected 0, 1 or 3" % len(found))


def parse_prices_slash(text):
    """Legacy mode: "2,10 € / 3,20 € / 4,00 €" split on "/".

    A single amount applies to every role.
    """
    parts = [p.replace("€", "").strip() for p in text.split("/")]
    parts = [p for p in parts if p]
    if not parts:
        return []
    if len(parts) > len(ROLES):
        raise PriceCountError("found %d prices but expected at most 3" % len(parts))
    for p in parts:
        if not AMOUNT_RE.match(p):
            raise PriceFormatError("not a price: %r" % p)
    if len(parts) == 1:
        parts = parts * len(ROLES)
    return [_price(p, role) for p, role in zip(parts, ROLES)]


PRICE_PARSERS = {"scan": parse_prices, "slash": parse_prices_slash}


def _is_no_offer(block):
    return block.find("div") is None and block.get_text(strip=True) in NO_OFFER


def icon_note(src):
    return ICON_NOTES.get(src.rsplit("/", 1)[-1])


def parse_meal(block, canteen_id, date, category, price_mode="scan"):
    name = block.select_one("span.bold")
    name = name.get_text(strip=True) if name is not None else ""
    if not name:
        logger.warning("%s: %s: %s: encountered a meal without a name tag",
                       canteen_id, date, category)
        name = MEAL_PLACEHOLDER
    meal = Meal(name=name)

    prices = block.select_one("div.text-right")
    prices = prices.get_text().strip() if prices is not None else ""
    try:
        meal.prices = PRICE_PARSERS[price_mode](prices)
    except PriceError as e:
        logger.warning("%s: %s: %s: %s within %r", canteen_id, date, name, e, prices)

    for img in block.select("img.splIcon"):
        note = icon_note(img.get("src", ""))
        if note is not None:
            meal.notes.append(note)

    for td in block.select("div.kennz td:not(.text-right)"):
        text = td.get_text(strip=True)
        if text:
            meal.notes.append(text)
    return meal


def parse_day(doc, canteen_id, date, price_mode="scan"):
    day = Day(date=date)
    groups = doc.select("div.splGroupWrapper")
    if len(groups) == 1 and _is_no_offer(groups[0]):
        return day

    for i, group in enumerate(groups):
        # only the first block can carry the "no offer" notice
        if i == 0 and _is_no_offer(group):
            logger.info("%s: %s: kein Speiseangebot", canteen_id, date)
            break
        caption = group.select_one("div.splGroup")
        category = Category(name=caption.get_text(strip=True) if caption is not None else "")
        for block in group.select("div.splMeal"):
            category.meals.append(parse_meal(block, canteen_id, date, category.name, price_mode))
        day.categories.append(category)
    return day


def extract_day(fetcher, canteen_id, date, price_mode="scan"):
    try:
        doc = fetcher.fetch(URL_MEAL, {"resources_id": canteen_id, "date": date})
    except FetchError as e:
        logger.warning("%s: %s: no meal plan: %s", canteen_id, date, e)
        return Day(date=date)
    return parse_day(doc, canteen_id, date, price_mode)
