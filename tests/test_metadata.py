"""Tests for the canteen metadata extractor."""

import pytest

from openmensa_berlin.config import URL_META
from openmensa_berlin.errors import InvariantViolation
from openmensa_berlin.metadata import (
    extract_metadata,
    parse_address,
    parse_location,
    parse_opening_hours,
)

DIRECTLINK = "https://www.stw.berlin/mensen/einrichtungen/tu/mensa-tu.html"

FACILITY = """
<select id="listboxEinrichtungen" class="listboxStandorte">
  <option value="96">Café Skyline</option>
  <option value="321" selected>Mensa TU Hardenbergstraße</option>
</select>
<div class="row">
  <div class="col-xs-1"><i class="glyphicon glyphicon-map-marker"></i></div>
  <div class="col-xs-10">Hardenbergstraße   34
      10623 Berlin (Bezirk Charlottenburg-Wilmersdorf)</div>
</div>
<div class="row">
  <div class="col-xs-1"><i class="glyphicon glyphicon-earphone"></i></div>
  <div class="col-xs-10"> 030 939390 </div>
</div>
<div class="row">
  <div class="col-xs-1"><i class="glyphicon glyphicon-envelope"></i></div>
  <div class="col-xs-10">Mail: <a href="mailto:info@stw.berlin">info@stw.berlin</a></div>
</div>
<div class="row">
  <div class="col-xs-12"><div><i class="glyphicon glyphicon-time"></i> Öffnungszeiten</div></div>
  <div>Mo. – Fr.
    08:00 – 16:00 Uhr</div>
  <div>Sa.
    10:00 – 14:00 Uhr</div>
  <div>An Feiertagen geschlossen</div>
  <div>So.
    10:00 – 12:00 Uhr</div>
</div>
<div id="directlink">%s</div>
<script>
var map = new ol.Map({view: new ol.View({center: ol.proj.fromLonLat([ 13.326355, 52.509796 ]), zoom: 17})});
</script>
""" % DIRECTLINK


def test_parse_address():
    text = "Hardenbergstraße   34\n   10623 Berlin (Bezirk Charlottenburg)\n"
    assert parse_address(text) == "Hardenbergstraße 34, 10623 Berlin"


def test_parse_location_keeps_precision():
    loc = parse_location("ol.proj.fromLonLat([ 13.3263550, -52.509796 ])")
    assert loc.longitude == "13.3263550"
    assert loc.latitude == "-52.509796"
    assert parse_location("no map here") is None


def test_parse_opening_hours_range():
    times = parse_opening_hours(["Mo. – Fr.\n08:00 – 16:00 Uhr"])
    assert times.opening_hours == ["08:00-16:00"] * 5 + ["", ""]


def test_parse_opening_hours_stops_at_first_mismatch():
    times = parse_opening_hours([
        "Mo. – Do.\n11:00 – 14:30 Uhr",
        "Fr.\n11:00 – 14:00 Uhr",
        "Hinweis",
        "Sa.\n10:00 – 13:00 Uhr",
    ])
    assert times.opening_hours == ["11:00-14:30"] * 4 + ["11:00-14:00", "", ""]


def test_parse_opening_hours_reversed_range_is_fatal():
    with pytest.raises(InvariantViolation):
        parse_opening_hours(["Fr. – Mo.\n08:00 – 16:00 Uhr"])


def test_parse_opening_hours_nothing_matches():
    assert parse_opening_hours(["geschlossen"]).opening_hours == [""] * 7


def test_extract_metadata(fake_fetcher):
    fake_fetcher.pages[(URL_META, "321", None)] = FACILITY
    canteen = extract_metadata(fake_fetcher, "321", "https://feeds.example/")

    assert canteen.name == "Mensa TU Hardenbergstraße"
    assert canteen.address == "Hardenbergstraße 34, 10623 Berlin"
    assert canteen.city == "Berlin"
    assert canteen.phone == "030 939390"
    assert canteen.email == "info@stw.berlin"
    assert canteen.availability == "public"
    assert canteen.location.latitude == "52.509796"
    assert canteen.location.longitude == "13.326355"
    assert canteen.times.opening_hours == ["08:00-16:00"] * 5 + ["10:00-14:00", ""]

    feed, = canteen.feeds
    assert feed.name == "full"
    assert feed.url == "https://feeds.example/321/full.xml"
    assert feed.schedule.hour == "8"
    assert feed.schedule.retry == "45 3 1440"
    assert feed.source == DIRECTLINK
    assert canteen.days == []


def test_extract_metadata_uses_key_for_feed_url(fake_fetcher):
    fake_fetcher.pages[(URL_META, "321", None)] = FACILITY
    canteen = extract_metadata(fake_fetcher, "321", "https://feeds.example/", "mensa_tu")
    assert canteen.feeds[0].url == "https://feeds.example/mensa_tu/full.xml"


def test_extract_metadata_unavailable(fake_fetcher):
    assert extract_metadata(fake_fetcher, "999") is None


def test_extract_metadata_without_coordinates(fake_fetcher, caplog):
    fake_fetcher.pages[(URL_META, "321", None)] = FACILITY.replace("fromLonLat", "center")
    with caplog.at_level("WARNING"):
        canteen = extract_metadata(fake_fetcher, "321")
    assert canteen.location is None
    assert "did not find location coordinates" in caplog.text


def test_name_from_directlink(fake_fetcher):
    page = FACILITY.replace(" selected>", ">")
    fake_fetcher.pages[(URL_META, "321", None)] = page
    fake_fetcher.pages[(DIRECTLINK, None, None)] = (
        "<html><head><title>studierendenWERK BERLIN - Mensa TU</title></head></html>")
    assert extract_metadata(fake_fetcher, "321").name == "Mensa TU"


def test_name_from_iframe(fake_fetcher):
    iframe = "https://www.mensatogo.de/widget?mensa=42"
    page = (
        '<select id="listboxEinrichtungen" class="listboxStandorte"></select>'
        '<iframe src="%s"></iframe>' % iframe
    )
    fake_fetcher.pages[(URL_META, "777", None)] = page
    fake_fetcher.pages[(iframe, None, None)] = (
        "<script>var locations = JSON.parse('{\"41\":\"Andere\",\"42\":\" Mensa \\u00dcber \"}');"
        "</script>"
    )
    assert extract_metadata(fake_fetcher, "777").name == "Mensa Über"


def test_name_fallback_failure_is_not_fatal(fake_fetcher, caplog):
    fake_fetcher.pages[(URL_META, "5", None)] = "<p>leer</p>"
    with caplog.at_level("WARNING"):
        canteen = extract_metadata(fake_fetcher, "5")
    assert canteen.name == ""
    assert canteen.times is None
    assert canteen.location is None
    assert "unable to determine name" in caplog.text


def test_parse_opening_hours_without_uhr():
    times = parse_opening_hours(["Mo. – Fr. 08:00 – 16:00"])
    assert times.opening_hours == ["08:00-16:00"] * 5 + ["", ""]
