# openmensa_berlin/model.py
# Datenmodell eines OpenMensa-Feeds (Mensa, Tage, Kategorien, Gerichte)

from dataclasses import dataclass, field
from typing import List, Optional

MEAL_PLACEHOLDER = "N. N."
ROLES = ("student", "employee", "other")
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass
class Location:
    latitude: str
    longitude: str


@dataclass
class Times:
    """Opening hours Monday..Sunday, "" marks a closed day."""

    opening_hours: List[str] = field(default_factory=list)


@dataclass
class Price:
    price: str
    role: str


@dataclass
class Meal:
    name: str = MEAL_PLACEHOLDER
    prices: List[Price] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)


@dataclass
class Category:
    name: str
    meals: List[Meal] = field(default_factory=list)


@dataclass
class Day:
    date: str
    categories: List[Category] = field(default_factory=list)

    @property
    def closed(self):
        return all(not c.meals for c in self.categories)


@dataclass
class FeedSchedule:
    hour: str
    retry: str = ""


@dataclass
class Feed:
    name: str
    url: str
    schedule: Optional[FeedSchedule] = None
    source: str = ""


@dataclass
class Canteen:
    name: str = ""
    address: str = ""
    city: str = ""
    phone: str = ""
    email: str = ""
    location: Optional[Location] = None
    times: Optional[Times] = None
    availability: str = ""
    feeds: List[Feed] = field(default_factory=list)
    days: List[Day] = field(default_factory=list)
