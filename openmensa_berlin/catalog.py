# openmensa_berlin/catalog.py
# Verwaltung der Mensa-IDs über mehrere Läufe (aktuell / Archiv / alle)

import json
import logging
from pathlib import Path

from .config import DEFAULT_ID, URL_FEED_BASE, URL_META
from .errors import InvalidIdentifier
from .storage import write_atomic

logger = logging.getLogger(__name__)

IDS_CURRENT_FILE = "ids_current"
IDS_ARCHIVE_FILE = "ids_archive"
IDS_ALL_FILE = "ids_all"
NAMES_FILE = "names.json"
INDEX_FILE = "index.json"

_TRANSLITERATION = {"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss", "é": "e"}


def discover_ids(fetcher):
    """Return ``{id: display name}`` of every canteen in the facility list."""
    doc = fetcher.fetch(URL_META, {"resources_id": DEFAULT_ID})
    found = {}
    for option in doc.select("select#listboxEinrichtungen.listboxStandorte option[value]"):
        found[option["value"]] = option.get_text(strip=True)
    logger.info("found %d canteen ids", len(found))
    return found


def id_key(value):
    # numeric ids by value, anything else after them in string order
    if value.isascii() and value.isdigit():
        return (0, int(value), value)
    return (1, 0, value)


def sort_ids(ids):
    return sorted(set(ids), key=id_key)


def diff_sorted(a, b):
    """Set difference ``b \\ a`` of two lists sorted by :func:`id_key`."""
    diff = []
    i = j = 0
    while i < len(a) and j < len(b):
        ka, kb = id_key(a[i]), id_key(b[j])
        if ka < kb:
            i += 1
        elif ka > kb:
            diff.append(b[j])
            j += 1
        else:
            i += 1
            j += 1
    diff.extend(b[j:])
    return diff


def reconcile(fresh, historical_all):
    """Return ``(current, archive, all)`` for a fresh fetch and the stored union.

    ``archive`` holds the ids known from earlier runs which are missing now.
    """
    current = sort_ids(fresh)
    all_ids = sort_ids(list(historical_all) + current)
    return current, diff_sorted(current, all_ids), all_ids


def save_ids(ids, path):
    for i in ids:
        if "\n" in i:
            raise InvalidIdentifier("id contains newline: %r" % i)
    logger.info("generate %s", path)
    write_atomic(path, "".join(i + "\n" for i in ids).encode("utf-8"), backup=True)


def load_ids(path):
    path = Path(path)
    if not path.exists():
        return []
    logger.info("restore IDs from %s", path)
    with open(path, encoding="utf-8") as f:
        return [line.rstrip("\n") for line in f if line.strip()]


def safe_name(display):
    """Transliterate a canteen name into ``[a-z0-9_]+`` for paths and URLs."""
    out = []
    gap = False
    for c in display.lower():
        if ("a" <= c <= "z") or ("0" <= c <= "9"):
            piece = c
        else:
            piece = _TRANSLITERATION.get(c)
        if piece is None:
            gap = True
            continue
        if gap:
            out.append("_")
        gap = False
        out.append(piece)
    # a trailing run is dropped instead of becoming "_"
    return "".join(out)


def save_names(mapping, path):
    for i in mapping:
        if "\n" in i:
            raise InvalidIdentifier("id contains newline: %r" % i)
    logger.info("generate %s", path)
    data = json.dumps(mapping, indent=4, ensure_ascii=False) + "\n"
    write_atomic(path, data.encode("utf-8"), backup=True)


def load_names(path):
    path = Path(path)
    if not path.exists():
        return {}
    logger.info("restore names from %s", path)
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_index(keys, path, feed_base=URL_FEED_BASE):
    logger.info("generate %s (index)", path)
    index = {k: feed_base + k + "/metadata.xml" for k in keys}
    write_atomic(path, (json.dumps(index, indent=4, ensure_ascii=False) + "\n").encode("utf-8"))


class Catalog:
    """The canteen ids of one run, backed by files in ``repo``.

    In ``ids`` mode the current, archive and all lists are kept as plain
    files and every canteen is addressed by its id. In ``names`` mode a
    single JSON object maps id to safe name and the safe name is used as
    directory and URL segment.
    """

    def __init__(self, repo, mode="ids", feed_base=URL_FEED_BASE):
        self.repo = Path(repo)
        self.mode = mode
        self.feed_base = feed_base
        self.current = []
        self.archive = []
        self.all = []
        self.names = {}

    def _path(self, name):
        return self.repo / name

    def load(self):
        if self.mode == "names":
            self.names = load_names(self._path(NAMES_FILE))
            self.current = sort_ids(self.names)
        else:
            self.current = load_ids(self._path(IDS_CURRENT_FILE))
        return self.current

    def update(self, fetcher):
        found = discover_ids(fetcher)
        if self.mode == "names":
            self.current = sort_ids(found)
            self.names = {i: safe_name(found[i]) or i for i in self.current}
            save_names(self.names, self._path(NAMES_FILE))
        else:
            self.current, self.archive, self.all = reconcile(
                found, load_ids(self._path(IDS_ALL_FILE)))
            if self.archive:
                logger.info("archived ids: %s", ", ".join(self.archive))
            save_ids(self.current, self._path(IDS_CURRENT_FILE))
            save_ids(self.archive, self._path(IDS_ARCHIVE_FILE))
            save_ids(self.all, self._path(IDS_ALL_FILE))
        write_index(self.keys(), self._path(INDEX_FILE), self.feed_base)
        return self.current

    def key_for(self, canteen_id):
        if self.mode == "names":
            return self.names.get(canteen_id) or canteen_id
        return canteen_id

    def keys(self):
        return [self.key_for(i) for i in self.current]
