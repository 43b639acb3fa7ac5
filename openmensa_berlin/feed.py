# openmensa_berlin/feed.py
# Speisepläne über ein Datumsfenster zu einem Feed zusammensetzen

from datetime import date, timedelta

from .day import extract_day
from .model import Canteen


def day_range(days_before, days_after, today=None):
    """ISO dates for every offset in ``[days_before, days_after]`` from today."""
    today = today or date.today()
    return [(today + timedelta(days=i)).isoformat()
            for i in range(days_before, days_after + 1)]


def build_feed(fetcher, canteen_id, days_before, days_after, today=None, price_mode="scan"):
    canteen = Canteen()
    for d in day_range(days_before, days_after, today):
        canteen.days.append(extract_day(fetcher, canteen_id, d, price_mode))
    return canteen
