import math

import numpy as np
import pytest

from pykessler.utils.simulation.satellite import Satellite, SatKind, characteristic_length_from_mass
from pykessler.utils.handlers.errors import InvalidConstruction, InvalidKindCode


def test_characteristic_length_derived_from_mass():
    sat = Satellite([0, 0, 0], [0, 0, 0], 849.0, SatKind.ROCKET_BODY)
    expected = (6 * 849.0 / (92.937 * math.pi)) ** (1 / 2.26)
    assert sat.characteristic_length == pytest.approx(expected, rel=1e-12)
    assert characteristic_length_from_mass(849.0) == pytest.approx(expected, rel=1e-12)


@pytest.mark.parametrize("mass", [0.5, 1.0, 100.0, 5000.0])
def test_mass_length_relation_round_trip(mass):
    sat = Satellite([0, 0, 0], [0, 0, 0], mass, SatKind.SPACECRAFT)
    recovered_mass = sat.characteristic_length ** 2.26 * 92.937 * math.pi / 6
    assert recovered_mass == pytest.approx(mass, rel=1e-9)


def test_explicit_characteristic_length_is_kept():
    sat = Satellite([0, 0, 0], [0, 0, 0], 849.0, SatKind.ROCKET_BODY, characteristic_length=0.3)
    assert sat.characteristic_length == 0.3


@pytest.mark.parametrize("vector", [[0, 0], [0, 0, 0, 0], [[0, 0, 0]], ["a", 0, 0], [np.nan, 0, 0], None])
def test_malformed_vectors_rejected(vector):
    with pytest.raises(InvalidConstruction):
        Satellite(vector, [0, 0, 0], 10.0, SatKind.SOC)
    with pytest.raises(InvalidConstruction):
        Satellite([0, 0, 0], vector, 10.0, SatKind.SOC)


@pytest.mark.parametrize("mass", [0.0, -1.0, float("inf"), float("nan"), "10", True, 10 + 0j, np.complex128(10 + 0j)])
def test_invalid_mass_rejected(mass):
    with pytest.raises(InvalidConstruction):
        Satellite([0, 0, 0], [0, 0, 0], mass, SatKind.SOC)


@pytest.mark.parametrize("mass", [np.float32(10.0), np.int64(10), 10])
def test_numpy_real_mass_accepted(mass):
    sat = Satellite([0, 0, 0], [0, 0, 0], mass, SatKind.SOC)
    assert sat.mass == 10.0
    assert isinstance(sat.mass, float)


@pytest.mark.parametrize("length", [0.0, -0.1, float("nan"), "big", np.complex128(0.5 + 0j)])
def test_invalid_characteristic_length_rejected(length):
    with pytest.raises(InvalidConstruction):
        Satellite([0, 0, 0], [0, 0, 0], 10.0, SatKind.SOC, characteristic_length=length)


def test_accessors_return_copies():
    sat = Satellite([1, 2, 3], [4, 5, 6], 10.0, SatKind.SOC)
    position = sat.get_position()
    position[0] = 100.0
    velocity = sat.get_velocity()
    velocity[0] = 100.0
    np.testing.assert_array_equal(sat.get_position(), [1, 2, 3])
    np.testing.assert_array_equal(sat.get_velocity(), [4, 5, 6])


def test_setters_update_and_validate():
    sat = Satellite([1, 2, 3], [4, 5, 6], 10.0, SatKind.SOC)
    sat.set_position([7, 8, 9])
    sat.set_velocity([0, 0, 1])
    np.testing.assert_array_equal(sat.get_position(), [7, 8, 9])
    np.testing.assert_array_equal(sat.get_velocity(), [0, 0, 1])
    with pytest.raises(InvalidConstruction):
        sat.set_position([1, 2])


def test_copy_is_independent():
    sat = Satellite([1, 2, 3], [4, 5, 6], 10.0, SatKind.SOC)
    clone = sat.copy()
    clone.set_position([0, 0, 0])
    np.testing.assert_array_equal(sat.get_position(), [1, 2, 3])
    assert clone.mass == sat.mass
    assert clone.sat_kind is sat.sat_kind


def test_from_dict():
    sat = Satellite.from_dict({"position": [1, 2, 3], "velocity": [0, 0, 0], "mass": 12.5, "sat_kind": "rb"})
    assert sat.sat_kind == SatKind.ROCKET_BODY
    assert sat.mass == 12.5

    with pytest.raises(InvalidConstruction, match="mass"):
        Satellite.from_dict({"position": [1, 2, 3], "velocity": [0, 0, 0], "sat_kind": 1})


class TestSatKind:

    @pytest.mark.parametrize("code, kind", [(0, SatKind.ROCKET_BODY), (1, SatKind.SOC), (2, SatKind.SPACECRAFT)])
    def test_from_code(self, code, kind):
        assert SatKind.from_code(code) is kind

    @pytest.mark.parametrize("code", [-1, 3, 42, 1.0, True, "1"])
    def test_invalid_code(self, code):
        with pytest.raises(InvalidKindCode):
            SatKind.from_code(code)

    def test_invalid_code_is_value_error(self):
        with pytest.raises(ValueError):
            SatKind.from_code(7)

    def test_ordering(self):
        assert SatKind.ROCKET_BODY < SatKind.SOC < SatKind.SPACECRAFT
        assert sorted([SatKind.SPACECRAFT, SatKind.ROCKET_BODY, SatKind.SOC]) == [
            SatKind.ROCKET_BODY, SatKind.SOC, SatKind.SPACECRAFT]

    @pytest.mark.parametrize("name, kind", [
        ("RB", SatKind.ROCKET_BODY), ("rocket_body", SatKind.ROCKET_BODY),
        ("Debris", SatKind.SOC), ("soc", SatKind.SOC),
        ("SC", SatKind.SPACECRAFT), ("spacecraft", SatKind.SPACECRAFT),
    ])
    def test_parse_names(self, name, kind):
        assert SatKind.parse(name) is kind

    def test_parse_unknown_name(self):
        with pytest.raises(InvalidKindCode):
            SatKind.parse("station")

    def test_satellite_with_bad_kind(self):
        with pytest.raises(InvalidKindCode):
            Satellite([0, 0, 0], [0, 0, 0], 10.0, 5)
