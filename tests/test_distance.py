import math

import pytest

from leadroute.models import GeoPoint
from leadroute.routing.distance import distance


def test_distance_is_symmetric_and_zero_on_same_point():
    a = GeoPoint(21.1702, 72.8311)
    b = GeoPoint(23.0225, 72.5714)

    assert distance(a, b) == pytest.approx(distance(b, a))
    assert distance(a, a) == 0


def test_distance_one_degree_of_longitude_at_equator():
    expected = 6371 * math.pi / 180
    assert distance(GeoPoint(0, 0), GeoPoint(0, 1)) == pytest.approx(expected)


def test_distance_antipodal_points():
    assert distance(GeoPoint(0, 0), GeoPoint(0, 180)) == pytest.approx(6371 * math.pi)


@pytest.mark.parametrize("lat,lng", [(91, 0), (0, -181), (float("nan"), 0)])
def test_geopoint_rejects_invalid_coordinates(lat, lng):
    with pytest.raises(ValueError):
        GeoPoint(lat, lng)
