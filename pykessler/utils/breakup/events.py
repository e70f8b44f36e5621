from abc import ABC, abstractmethod

import numpy as np

from ..simulation.satellite import Satellite, SatKind
from ..handlers.errors import InvalidBounds, InvalidConstruction


class FragmentationEvent(ABC):
    """
    A single breakup, either a collision of two bodies or the explosion of one.

    The fragment generation engine only talks to an event through this interface:
    the number of fragments above a size, where the event happened, the size bounds,
    the size distribution exponent, the object class and the delta-v law constants.
    """
    def __init__(self, satellites, min_characteristic_length, sat_kind, input_mass, max_characteristic_length):
        self._satellites = tuple(satellites)
        self._min_characteristic_length = float(min_characteristic_length)
        self._sat_kind = sat_kind
        self._input_mass = float(input_mass)
        self._max_characteristic_length = float(max_characteristic_length)

    @property
    def satellites(self):
        return tuple(satellite.copy() for satellite in self._satellites)

    @property
    def min_characteristic_length(self):
        return self._min_characteristic_length

    @property
    def max_characteristic_length(self):
        return self._max_characteristic_length

    @property
    def input_mass(self):
        return self._input_mass

    def kind(self):
        return self._sat_kind

    @abstractmethod
    def fragment_count(self, min_characteristic_len):
        """Number of fragments with a characteristic length of at least min_characteristic_len [m]."""

    @abstractmethod
    def location(self):
        """Position at which the event occurred."""

    @abstractmethod
    def power_law_exponent(self):
        """Exponent of the differential size distribution dN/dL."""

    @abstractmethod
    def delta_velocity_offset(self):
        """(slope, offset) of the mean of log10(delta-v) as a function of log10(A/M)."""


def _check_length(min_characteristic_len):
    if not np.isfinite(min_characteristic_len) or min_characteristic_len <= 0:
        raise InvalidBounds(f"Characteristic length must be positive and finite, got {min_characteristic_len}")
    return float(min_characteristic_len)


def _check_satellite(satellite):
    if not isinstance(satellite, Satellite):
        raise InvalidConstruction(f"Expected a Satellite, got {type(satellite).__name__}")
    return satellite.copy()


class CollisionEvent(FragmentationEvent):
    """
    Collision between two satellites. The larger body (by characteristic length) is the
    target and is always stored first; the smaller one is the projectile.
    """
    catastrophic_threshold = 40  # [J/g]

    def __init__(self, satellites, min_characteristic_length):
        """
        Args:
            satellites (sequence of Satellite): Exactly two colliding bodies
            min_characteristic_length (float): Smallest fragment size of interest [m]

        Raises:
            InvalidConstruction: If not given exactly two satellites.
        """
        try:
            satellites = list(satellites)
        except TypeError:
            raise InvalidConstruction("A collision requires a sequence of two satellites") from None
        if len(satellites) != 2:
            raise InvalidConstruction(f"A collision requires exactly 2 satellites, got {len(satellites)}")

        satellite_1, satellite_2 = (_check_satellite(sat) for sat in satellites)
        max_characteristic_length = max(satellite_1.characteristic_length, satellite_2.characteristic_length)

        sat_kind = SatKind.SOC
        if SatKind.ROCKET_BODY in (satellite_1.sat_kind, satellite_2.sat_kind):
            sat_kind = SatKind.ROCKET_BODY

        input_mass = satellite_1.mass + satellite_2.mass

        if satellite_2.characteristic_length > satellite_1.characteristic_length:
            satellite_1, satellite_2 = satellite_2, satellite_1

        super().__init__((satellite_1, satellite_2), min_characteristic_length, sat_kind,
                         input_mass, max_characteristic_length)

    def impact_velocity(self):
        """Norm of the relative velocity between the target and the projectile."""
        return float(np.linalg.norm(self._satellites[0].velocity - self._satellites[1].velocity))

    @staticmethod
    def rel_ke(m_proj, m_targ, v_impact):
        """
        Relative kinetic energy of the collision divided by the mass of the target [J/g].

        Args:
            m_proj (float): Mass of the projectile [kg]
            m_targ (float): Mass of the target [g]
            v_impact (float): Impact velocity [m/s]
        """
        ke = 0.5 * m_proj * v_impact ** 2
        return ke / m_targ

    def is_catastrophic(self, m_proj, m_targ, v_impact):
        """
        True if the collision is catastrophic.

        Args:
            m_proj (float): Mass of the projectile [kg]
            m_targ (float): Mass of the target [kg]
            v_impact (float): Impact velocity [km/s]
        """
        # kg -> g and km/s -> m/s
        rel_ke = self.rel_ke(m_proj, m_targ * 1e3, v_impact * 1e3)
        return rel_ke > self.catastrophic_threshold

    @property
    def catastrophic(self):
        target, projectile = self._satellites
        return self.is_catastrophic(projectile.mass, target.mass, self.impact_velocity())

    def effective_mass(self):
        """
        Mass entering the fragment count law: the total mass for a catastrophic collision,
        projectile mass times impact velocity otherwise.
        """
        target, projectile = self._satellites
        v_impact = self.impact_velocity()
        if self.is_catastrophic(projectile.mass, target.mass, v_impact):
            return projectile.mass + target.mass
        return projectile.mass * v_impact

    def fragment_count(self, min_characteristic_len):
        """
        Power law for the number of collision fragments larger than a size.

        Args:
            min_characteristic_len (float): Characteristic length [m]
        """
        min_characteristic_len = _check_length(min_characteristic_len)
        m = self.effective_mass()
        return 0.1 * m ** 0.75 * min_characteristic_len ** -1.71

    def location(self):
        return self._satellites[0].get_position()

    def power_law_exponent(self):
        return -2.71

    def delta_velocity_offset(self):
        return (0.9, 2.9)

    def __repr__(self):
        return (f"CollisionEvent(kind={self._sat_kind.name}, input_mass={self._input_mass}, "
                f"min_characteristic_length={self._min_characteristic_length}, "
                f"max_characteristic_length={self._max_characteristic_length:.4g})")


class ExplosionEvent(FragmentationEvent):
    """
    Explosion of a single satellite.

    The fragment count uses a fixed scale factor S = 1 and does not depend on the mass
    of the exploding body.
    """
    scale_factor = 1.0

    def __init__(self, satellite, min_characteristic_length):
        """
        Args:
            satellite (Satellite): The exploding body, or a one-element sequence holding it
            min_characteristic_length (float): Smallest fragment size of interest [m]

        Raises:
            InvalidConstruction: If not given exactly one satellite.
        """
        if not isinstance(satellite, Satellite):
            try:
                satellites = list(satellite)
            except TypeError:
                raise InvalidConstruction(f"Expected a Satellite, got {type(satellite).__name__}") from None
            if len(satellites) != 1:
                raise InvalidConstruction(f"An explosion requires exactly 1 satellite, got {len(satellites)}")
            satellite = satellites[0]
        satellite = _check_satellite(satellite)

        super().__init__((satellite,), min_characteristic_length, satellite.sat_kind,
                         satellite.mass, satellite.characteristic_length)

    def fragment_count(self, min_characteristic_len):
        """
        Number of explosion fragments larger than a size.

        Args:
            min_characteristic_len (float): Characteristic length [m]
        """
        min_characteristic_len = _check_length(min_characteristic_len)
        return 6 * self.scale_factor * min_characteristic_len ** -1.6

    def location(self):
        return self._satellites[0].get_position()

    def power_law_exponent(self):
        return -2.6

    def delta_velocity_offset(self):
        return (0.2, 1.85)

    def __repr__(self):
        return (f"ExplosionEvent(kind={self._sat_kind.name}, input_mass={self._input_mass}, "
                f"min_characteristic_length={self._min_characteristic_length}, "
                f"max_characteristic_length={self._max_characteristic_length:.4g})")
