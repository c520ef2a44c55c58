from collections import Counter

from leadroute.models import GeoPoint, Lead
from leadroute.routing.optimizer import optimize

ORIGIN = GeoPoint(0, 0)


def _lead(lead_id, lat, lng):
    return Lead(id=lead_id, location=GeoPoint(lat, lng))


def test_empty_and_single_stop_are_unchanged():
    only = _lead("a", 5, 5)
    assert optimize(ORIGIN, []) == []
    assert optimize(ORIGIN, [only]) == [only]


def test_nearest_stop_first():
    near = _lead("near", 0, 1)
    far = _lead("far", 0, 2)

    assert optimize(ORIGIN, [near, far]) == [near, far]
    assert optimize(ORIGIN, [far, near]) == [near, far]


def test_moves_from_last_stop_not_origin():
    stops = [_lead("c", 0, 3), _lead("a", 0, 1), _lead("d", 0, -1.5), _lead("b", 0, 2)]

    assert [stop.id for stop in optimize(ORIGIN, stops)] == ["a", "b", "c", "d"]


def test_result_is_permutation_with_duplicate_locations():
    stops = [_lead("x", 1, 1), _lead("y", 1, 1), _lead("z", 0.5, 0.5), _lead("w", 1, 1)]

    result = optimize(ORIGIN, stops)

    assert Counter(stop.id for stop in result) == Counter(stop.id for stop in stops)
    # Ties keep input order.
    assert [stop.id for stop in result] == ["z", "x", "y", "w"]


def test_does_not_mutate_input():
    stops = [_lead("far", 0, 2), _lead("near", 0, 1)]
    optimize(ORIGIN, stops)
    assert [stop.id for stop in stops] == ["far", "near"]
