from geopick.geocode.normalize import address_from_payload, has_non_ascii
from geopick.models import Address


def test_new_york_payload():
    payload = {
        "address": {"city": "New York", "state": "New York", "country": "United States"},
    }
    assert address_from_payload(payload) == Address("New York", "New York", "United States")


def test_locality_fallback_order():
    payload = {"address": {"county": "Kings County", "village": "Smallville", "country": "United States"}}
    assert address_from_payload(payload).city == "Smallville"
    payload = {"address": {"county": "Kings County", "municipality": "Brooklyn"}}
    assert address_from_payload(payload).city == "Brooklyn"
    payload = {"address": {"county": "Kings County"}}
    assert address_from_payload(payload).city == "Kings County"


def test_region_fallback_order():
    assert address_from_payload({"address": {"region": "Île-de-France", "province": "Ontario"}}).state == "Ontario"
    assert address_from_payload({"address": {"region": "Wales"}}).state == "Wales"


def test_missing_fields_are_empty_strings():
    address = address_from_payload({"address": {}})
    assert address == Address("", "", "")


def test_payload_without_address_means_no_address():
    assert address_from_payload({"error": "Unable to geocode"}) is None
    assert address_from_payload([]) is None


def test_non_ascii_locality_uses_english_name():
    payload = {
        "address": {"city": "دبي", "state": "Dubai", "country": "United Arab Emirates"},
        "namedetails": {"name": "دبي", "name:en": "Dubai"},
    }
    assert address_from_payload(payload) == Address("Dubai", "Dubai", "United Arab Emirates")


def test_non_ascii_region_uses_english_name():
    payload = {
        "address": {"town": "Springfield", "state": "Québec", "country": "Canada"},
        "namedetails": {"name:en": "Quebec"},
    }
    assert address_from_payload(payload).state == "Quebec"


def test_feature_english_name_replaces_both_locality_and_region():
    payload = {
        "address": {"city": "渋谷区", "state": "東京都", "country": "Japan"},
        "namedetails": {"name": "渋谷駅", "name:en": "Shibuya Station"},
    }
    assert address_from_payload(payload) == Address("Shibuya Station", "Shibuya Station", "Japan")


def test_non_ascii_kept_without_english_alternative():
    payload = {"address": {"city": "Zürich", "country": "Switzerland"}, "namedetails": {"name": "Zürich"}}
    assert address_from_payload(payload).city == "Zürich"


def test_has_non_ascii():
    assert has_non_ascii("Québec")
    assert not has_non_ascii("Quebec")
