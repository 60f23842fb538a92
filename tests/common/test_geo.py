import pytest

from src.hr_attendance.hr_attendance.common.geo import GeoPoint, distance_between, distance_km, within_radius

from conftest import OFFICE, north_of


def test_distance_to_itself_is_zero():
    assert distance_between(OFFICE, OFFICE) == 0.0


def test_distance_is_symmetric():
    home = GeoPoint(12.9352, 77.6245)
    assert distance_between(OFFICE, home) == pytest.approx(distance_between(home, OFFICE))


def test_known_distance_between_bangalore_points():
    # MG Road metro -> Indiranagar metro, roughly 3.7 km apart.
    assert distance_km(12.9756, 77.6067, 12.9784, 77.6408) == pytest.approx(3.7, abs=0.2)


def test_eighty_metres_is_inside_office_radius():
    d = distance_between(north_of(OFFICE, 80), OFFICE)
    assert d == pytest.approx(0.08, abs=1e-6)
    assert within_radius(d, 0.1)


def test_one_hundred_fifty_metres_is_outside_office_radius():
    d = distance_between(north_of(OFFICE, 150), OFFICE)
    assert d == pytest.approx(0.15, abs=1e-6)
    assert not within_radius(d, 0.1)


def test_radius_boundary_is_inclusive():
    assert within_radius(0.1, 0.1)
