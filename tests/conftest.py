import pytest
from bs4 import BeautifulSoup

from openmensa_berlin.errors import RetriesExhausted


class FakeFetcher:
    """Serves canned HTML keyed by (url, resources_id, date)."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls = []

    def fetch(self, url, params=None):
        params = params or {}
        self.calls.append((url, params))
        key = (url, params.get("resources_id"), params.get("date"))
        if key not in self.pages:
            raise RetriesExhausted("no page", url, params)
        return BeautifulSoup(self.pages[key], "html.parser")


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()
