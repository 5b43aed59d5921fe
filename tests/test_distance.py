"""
tests/test_distance.py
~~~~~~~~~~~~~~~~~~~~~~
Haversine maths and closest-record selection.
"""

from __future__ import annotations

import math

import pytest
from conftest import make_record

from dxfinder import distance as dist
from dxfinder.constants import KM_TO_MILES
from dxfinder.errors import EmptySourceError
from dxfinder.models import ObserverLocation

NASHVILLE = ObserverLocation(lat=36.1627, lon=-86.7816, label="Nashville, TN")


def _supplied(cabinet_id: str, miles: float):
    return make_record(cabinet_id, distance_km=miles / KM_TO_MILES)


# ------------------------------------------------------------------ #
# haversine_miles
# ------------------------------------------------------------------ #
def test_same_point_is_zero():
    assert dist.haversine_miles(36.1627, -86.7816, 36.1627, -86.7816) == 0.0


def test_symmetric():
    a = dist.haversine_miles(36.1627, -86.7816, 35.1495, -90.0490)
    b = dist.haversine_miles(35.1495, -90.0490, 36.1627, -86.7816)
    assert a == pytest.approx(b)


def test_one_degree_of_latitude():
    expected = 3958.8 * math.radians(1.0)
    assert dist.haversine_miles(0.0, 0.0, 1.0, 0.0) == pytest.approx(expected)


def test_points_on_one_great_circle_add_up():
    """B sits between A and C on the equator."""
    ab = dist.haversine_miles(0.0, 10.0, 0.0, 25.0)
    bc = dist.haversine_miles(0.0, 25.0, 0.0, 40.0)
    ac = dist.haversine_miles(0.0, 10.0, 0.0, 40.0)
    assert ac == pytest.approx(ab + bc)


def test_meridian_points_add_up():
    ab = dist.haversine_miles(10.0, -86.0, 30.0, -86.0)
    bc = dist.haversine_miles(30.0, -86.0, 50.0, -86.0)
    ac = dist.haversine_miles(10.0, -86.0, 50.0, -86.0)
    assert ac == pytest.approx(ab + bc)


def test_antipodal_points_do_not_blow_up():
    half_circumference = math.pi * 3958.8
    assert dist.haversine_miles(0.0, 0.0, 0.0, 180.0) == pytest.approx(half_circumference)


# ------------------------------------------------------------------ #
# find_closest – supplied distances
# ------------------------------------------------------------------ #
def test_selects_smallest_supplied_distance():
    records = [_supplied("a", 5.2), _supplied("b", 1.1), _supplied("c", 9.8)]

    best, miles = dist.find_closest(NASHVILLE, records)

    assert best.id == "b"
    assert miles == pytest.approx(1.1)


def test_supplied_distance_is_not_recomputed():
    """Bogus coordinates on one record must not influence supplied ranking."""
    records = [
        _supplied("a", 2.0),
        make_record("b", distance_km=8.0 / KM_TO_MILES, lat=36.1627, lon=-86.7816),
    ]

    best, miles = dist.find_closest(NASHVILLE, records)

    assert best.id == "a"
    assert miles == pytest.approx(2.0)


def test_page_distance_wins_when_every_record_has_both_forms():
    """The page says *a* is nearest, whatever its coordinates say."""
    records = [
        make_record("a", distance_km=1.0 / KM_TO_MILES, lat=35.1495, lon=-90.0490),
        make_record("b", distance_km=50.0 / KM_TO_MILES, lat=36.1627, lon=-86.7816),
    ]

    best, miles = dist.find_closest(NASHVILLE, records)

    assert best.id == "a"
    assert miles == pytest.approx(1.0)


def test_tie_goes_to_first_record():
    records = [_supplied("first", 3.0), _supplied("second", 3.0)]

    best, _ = dist.find_closest(NASHVILLE, records)

    assert best.id == "first"


def test_mixed_page_ranks_only_supplied_records(caplog):
    records = [make_record("coords-only", lat=36.1627, lon=-86.7816), _supplied("km", 4.0)]

    best, miles = dist.find_closest(NASHVILLE, records)

    assert best.id == "km"
    assert miles == pytest.approx(4.0)
    assert "left out of the ranking" in caplog.text


# ------------------------------------------------------------------ #
# find_closest – coordinates
# ------------------------------------------------------------------ #
def test_selects_nearest_coordinates():
    records = [
        make_record("memphis", lat=35.1495, lon=-90.0490),
        make_record("downtown", lat=36.1700, lon=-86.7800),
        make_record("knoxville", lat=35.9606, lon=-83.9207),
    ]

    best, miles = dist.find_closest(NASHVILLE, records)

    assert best.id == "downtown"
    assert miles == pytest.approx(
        dist.haversine_miles(36.1627, -86.7816, 36.1700, -86.7800)
    )
    assert miles < 1.0


def test_ranking_mode():
    coords = make_record("a", lat=1.0, lon=2.0)
    km = make_record("b", distance_km=3.0)
    assert dist.ranking_mode([coords]) == dist.MODE_COORDINATES
    assert dist.ranking_mode([km]) == dist.MODE_SUPPLIED
    assert dist.ranking_mode([coords, km]) == dist.MODE_SUPPLIED
    both = make_record("c", distance_km=3.0, lat=1.0, lon=2.0)
    assert dist.ranking_mode([both]) == dist.MODE_SUPPLIED
    assert dist.ranking_mode([coords, both]) == dist.MODE_SUPPLIED


def test_record_without_any_position_is_left_out_of_coordinate_ranking(caplog):
    records = [make_record("bare"), make_record("downtown", lat=36.17, lon=-86.78)]

    best, _ = dist.find_closest(NASHVILLE, records)

    assert best.id == "downtown"
    assert "no coordinates" in caplog.text


def test_empty_input_raises():
    with pytest.raises(EmptySourceError):
        dist.find_closest(NASHVILLE, [])
