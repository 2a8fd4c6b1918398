from geopick.models import Address, Coordinate
from geopick.widget.presentation import (
    LocationFields,
    format_coordinate,
    format_radius,
    selection_notice,
    selection_summary,
)
from geopick.widget.state import SelectionState


def test_summary_lines():
    state = SelectionState(radius_meters=5000)
    assert selection_summary(state) == []
    state.select(Coordinate(40.730610, -73.935242), generation=1)
    assert selection_summary(state) == [
        "Selected Location: 40.730610, -73.935242",
        "Search radius: 5.0 km",
    ]


def test_formatting():
    assert format_coordinate(Coordinate(1.5, -2.25), places=2) == "1.50, -2.25"
    assert format_radius(12500) == "12.5 km"


def test_notice_text():
    assert selection_notice(40.7306, -73.9352, Address("New York", "", "United States")) == "New York, United States"
    assert selection_notice(40.7306, -73.9352, Address()) == "Coordinates updated"
    assert selection_notice(40.730610, -73.935242, None) == "Lat: 40.7306, Lng: -73.9352"


def test_fields_keep_previous_values_for_empty_parts():
    fields = LocationFields(city="Boston", state="Massachusetts", country="United States")
    updated = fields.apply(40.73, -73.93, Address(city="New York", state="", country="United States"))
    assert updated.city == "New York"
    assert updated.state == "Massachusetts"
    assert (updated.latitude, updated.longitude) == (40.73, -73.93)

    coordinates_only = updated.apply(41.0, -74.0, None)
    assert coordinates_only.city == "New York"
    assert (coordinates_only.latitude, coordinates_only.longitude) == (41.0, -74.0)
