import math

import pytest

from geopick.models import Address, Coordinate


def test_coordinate_keeps_values_unrounded():
    coordinate = Coordinate(40.730610123, -73.935242987)
    assert coordinate.latitude == 40.730610123
    assert coordinate.longitude == -73.935242987
    assert coordinate.to_dict() == {"latitude": 40.730610123, "longitude": -73.935242987}


@pytest.mark.parametrize(
    "latitude,longitude",
    [(90.5, 0.0), (-91.0, 0.0), (0.0, 180.01), (0.0, -181.0), (math.nan, 0.0), (0.0, math.inf)],
)
def test_coordinate_rejects_out_of_range(latitude, longitude):
    with pytest.raises(ValueError):
        Coordinate(latitude, longitude)


def test_coordinate_accepts_bounds():
    assert Coordinate(90.0, 180.0).latitude == 90.0
    assert Coordinate(-90.0, -180.0).longitude == -180.0


def test_address_parts_skip_empty_fields():
    assert Address(city="Paris", state="", country="France").parts() == ["Paris", "France"]
    assert Address().parts() == []
    assert Address().to_dict() == {"city": "", "state": "", "country": ""}
