import copy
import numbers
from enum import IntEnum
from math import pi

import numpy as np

from ..handlers.errors import InvalidConstruction, InvalidKindCode


class SatKind(IntEnum):
    """
    Object class of a body taking part in a fragmentation event.

    The integer values follow the codes used by the host simulation:
    0 rocket body, 1 debris (SOC), 2 spacecraft.
    """
    ROCKET_BODY = 0
    SOC = 1
    SPACECRAFT = 2

    @classmethod
    def from_code(cls, code):
        """
        Convert a small integer code into a SatKind.

        Raises:
            InvalidKindCode: If the code is not 0, 1 or 2.
        """
        if isinstance(code, bool) or not isinstance(code, (int, np.integer)):
            raise InvalidKindCode(f"SatKind code must be an integer, got {code!r}")
        try:
            return cls(int(code))
        except ValueError:
            raise InvalidKindCode(f"Invalid SatKind code {code}, expected one of 0, 1, 2") from None

    @classmethod
    def parse(cls, value):
        """
        Accept a SatKind, an integer code or a name such as "RB", "debris" or "spacecraft".
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return _KIND_ALIASES[value.strip().lower()]
            except KeyError:
                raise InvalidKindCode(f"Unknown SatKind name '{value}'") from None
        return cls.from_code(value)


_KIND_ALIASES = {
    "rb": SatKind.ROCKET_BODY,
    "rocket_body": SatKind.ROCKET_BODY,
    "rocketbody": SatKind.ROCKET_BODY,
    "soc": SatKind.SOC,
    "debris": SatKind.SOC,
    "sc": SatKind.SPACECRAFT,
    "spacecraft": SatKind.SPACECRAFT,
}


def characteristic_length_from_mass(mass):
    """
    Empirical mass to size relation, L = (6 m / (92.937 pi)) ** (1 / 2.26).

    Args:
        mass (float): Mass of the body [kg]

    Returns:
        float: Characteristic length [m]
    """
    return (6 * mass / (92.937 * pi)) ** (1 / 2.26)


def _as_vector(value, name):
    try:
        vec = np.array(value, dtype=float)
    except (TypeError, ValueError):
        raise InvalidConstruction(f"{name} must be a numeric 3-vector, got {value!r}") from None
    if vec.shape != (3,):
        raise InvalidConstruction(f"{name} must have exactly 3 elements, got shape {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise InvalidConstruction(f"{name} must only contain finite values")
    return vec


class Satellite:
    """
    A physical body that can collide or explode.

    Attributes:
        position (np.ndarray): Earth-centered position [m]
        velocity (np.ndarray): Velocity [m/s]
        mass (float): Mass [kg]
        characteristic_length (float): Characteristic length [m]
        sat_kind (SatKind): Object class used to select breakup parameters
    """
    def __init__(self, position, velocity, mass, sat_kind, characteristic_length=None):
        """
        Args:
            position (array-like): 3-element position vector [m]
            velocity (array-like): 3-element velocity vector [m/s]
            mass (float): Mass of the body [kg], must be positive
            sat_kind (SatKind, int or str): Object class
            characteristic_length (float, optional): Size of the body [m]. Derived from the
                mass when not given.

        Raises:
            InvalidConstruction: If a vector is malformed or mass/length are not positive.
            InvalidKindCode: If sat_kind can not be converted.
        """
        self.position = _as_vector(position, "position")
        self.velocity = _as_vector(velocity, "velocity")

        if not isinstance(mass, numbers.Real) or isinstance(mass, bool):
            raise InvalidConstruction(f"mass must be a number, got {mass!r}")
        if not np.isfinite(mass) or mass <= 0:
            raise InvalidConstruction(f"mass must be a positive finite number, got {mass}")
        self.mass = float(mass)

        if characteristic_length is None:
            characteristic_length = characteristic_length_from_mass(self.mass)
        else:
            if not isinstance(characteristic_length, numbers.Real) or isinstance(characteristic_length, bool):
                raise InvalidConstruction(
                    f"characteristic_length must be a number, got {characteristic_length!r}")
            characteristic_length = float(characteristic_length)
            if not np.isfinite(characteristic_length) or characteristic_length <= 0:
                raise InvalidConstruction(
                    f"characteristic_length must be a positive finite number, got {characteristic_length}")
        self.characteristic_length = float(characteristic_length)

        self.sat_kind = SatKind.parse(sat_kind)

    @classmethod
    def from_dict(cls, properties):
        """
        Build a satellite from a configuration mapping with the keys position, velocity,
        mass, sat_kind and optionally characteristic_length.
        """
        missing = [key for key in ("position", "velocity", "mass", "sat_kind") if key not in properties]
        if missing:
            raise InvalidConstruction(f"Satellite definition is missing: {', '.join(missing)}")
        return cls(properties["position"], properties["velocity"], properties["mass"],
                   properties["sat_kind"], properties.get("characteristic_length"))

    def get_position(self):
        return self.position.copy()

    def set_position(self, position):
        self.position = _as_vector(position, "position")

    def get_velocity(self):
        return self.velocity.copy()

    def set_velocity(self, velocity):
        self.velocity = _as_vector(velocity, "velocity")

    def copy(self):
        return copy.deepcopy(self)

    def __repr__(self):
        return (f"Satellite(mass={self.mass}, characteristic_length={self.characteristic_length:.4g}, "
                f"sat_kind={self.sat_kind.name})")
