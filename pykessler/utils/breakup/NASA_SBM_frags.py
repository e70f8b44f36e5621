import warnings

import numpy as np
import pandas as pd

from .events import FragmentationEvent
from ..simulation.satellite import SatKind
from ..handlers.errors import InvalidBounds, NegativeOrNonFiniteCount

# Column layout of the fragment table returned by generate_fragments
FRAGMENT_COLUMNS = (
    "characteristic_length",  # [m]
    "mass",                   # [kg]
    "area_to_mass",           # [m^2/kg]
    "dv_x", "dv_y", "dv_z",   # [m/s]
    "pos_x", "pos_y", "pos_z",
)

ROUNDING_POLICIES = ("floor", "stochastic")

# Johnson 2001: A/M uses the small object law below 8 cm and the bimodal laws above 11 cm
SMALL_FRAGMENT_LIMIT = 0.08
LARGE_FRAGMENT_LIMIT = 0.11
DELTA_V_SIGMA = 0.4


def area_from_characteristic_length(Lc):
    """
    Average cross sectional area from characteristic length, equations 8 and 9 of Johnson 2001.

    Args:
        Lc (float or np.ndarray): Characteristic length [m]

    Returns:
        np.ndarray: Area [m^2]
    """
    Lc = np.asarray(Lc, dtype=float)
    return np.where(Lc < 0.00167, 0.540424 * Lc ** 2, 0.556945 * Lc ** 2.0047077)


def calculate_amsms_for_rocket_body(logd):
    """
    Calculate alpha, mu1, sigma1, mu2, sigma2 for rocket body related objects.
    """
    alpha = np.where(logd <= -1.4, 1.0, np.where(logd < 0, 1 - 0.3571 * (logd + 1.4), 0.5))
    mu1 = np.where(logd <= -0.5, -0.45, np.where(logd < 0, -0.45 - 0.9 * (logd + 0.5), -0.9))
    sigma1 = np.full_like(logd, 0.55)
    mu2 = np.full_like(logd, -0.9)
    sigma2 = np.where(logd <= -1.0, 0.28, np.where(logd < 0.1, 0.28 - 0.1636 * (logd + 1), 0.1))

    return alpha, mu1, sigma1, mu2, sigma2


def calculate_amsms_not_rocket_body(logd):
    """
    Calculate alpha, mu1, sigma1, mu2, sigma2 for non-rocket body related objects.
    """
    alpha = np.where(logd <= -1.95, 0.0, np.where(logd < 0.55, 0.3 + 0.4 * (logd + 1.2), 1.0))
    mu1 = np.where(logd <= -1.1, -0.6, np.where(logd < 0, -0.6 - 0.318 * (logd + 1.1), -0.95))
    sigma1 = np.where(logd <= -1.3, 0.1, np.where(logd < -0.3, 0.1 + 0.2 * (logd + 1.3), 0.3))
    mu2 = np.where(logd <= -0.7, -1.2, np.where(logd < -0.1, -1.2 - 1.333 * (logd + 0.7), -2.0))
    sigma2 = np.where(logd <= -0.5, 0.5, np.where(logd < -0.3, 0.5 - (logd + 0.5), 0.3))

    return alpha, mu1, sigma1, mu2, sigma2


def calculate_amsms_small_object(logd):
    """
    Calculate mu, sigma of the single mode distribution used for fragments smaller than 8 cm.
    """
    mu = np.where(logd <= -1.75, -0.3, np.where(logd < -1.25, -0.3 - 1.4 * (logd + 1.75), -1.0))
    sigma = np.where(logd <= -3.5, 0.2, 0.2 + 0.1333 * (logd + 3.5))

    return mu, sigma


def func_Am(d, sat_kind, rng=None):
    """
    Calculates the area-to-mass ratio of fragments based on the NASA standard breakup model.

    Fragments above 11 cm follow the bimodal rocket body or spacecraft law, fragments below
    8 cm the small object law. In between both are evaluated with the same normal variates
    and blended linearly in log space. Two standard normals are drawn per fragment, as one
    (n, 2) block.

    Args:
        d (np.ndarray): Characteristic lengths [m]
        sat_kind (SatKind): Object class of the parent event
        rng (np.random.Generator, optional): Random source

    Returns:
        np.ndarray: Area-to-mass ratio for each fragment [m^2/kg]
    """
    rng = np.random.default_rng(rng)
    d = np.asarray(d, dtype=float)
    logds = np.log10(d)

    z = rng.standard_normal((d.size, 2))

    if sat_kind == SatKind.ROCKET_BODY:
        alpha, mu1, sigma1, mu2, sigma2 = calculate_amsms_for_rocket_body(logds)
    else:
        alpha, mu1, sigma1, mu2, sigma2 = calculate_amsms_not_rocket_body(logds)

    N1 = mu1 + sigma1 * z[:, 0]
    N2 = mu2 + sigma2 * z[:, 1]
    log_am_large = alpha * N1 + (1 - alpha) * N2

    mu_soc, sigma_soc = calculate_amsms_small_object(logds)
    log_am_small = mu_soc + sigma_soc * z[:, 0]

    w = np.clip((d - SMALL_FRAGMENT_LIMIT) / (LARGE_FRAGMENT_LIMIT - SMALL_FRAGMENT_LIMIT), 0.0, 1.0)

    return 10 ** (w * log_am_large + (1 - w) * log_am_small)


def func_dv(Am, delta_velocity_offset, rng=None):
    """
    Calculate the change in velocity (delta-v) magnitude for debris fragments based on their
    area-to-mass ratio.

    log10(dv) is normal with mean c0 * log10(A/M) + c1 and standard deviation 0.4, where
    (c0, c1) is the event's delta-velocity offset ((0.9, 2.9) for collisions and
    (0.2, 1.85) for explosions).

    Args:
        Am (np.ndarray): Area-to-mass ratio of fragments [m^2/kg]
        delta_velocity_offset (tuple): (c0, c1) constants of the law
        rng (np.random.Generator, optional): Random source

    Returns:
        np.ndarray: delta-v magnitudes [m/s]
    """
    rng = np.random.default_rng(rng)
    Am = np.asarray(Am, dtype=float)
    c0, c1 = delta_velocity_offset

    mu = c0 * np.log10(Am) + c1
    N = mu + DELTA_V_SIGMA * rng.standard_normal(Am.size)

    return 10 ** N


def random_unit_vectors(n, rng=None):
    """
    Directions uniformly distributed on the unit sphere, shape (n, 3).
    """
    rng = np.random.default_rng(rng)
    cos_theta = rng.uniform(-1.0, 1.0, n)
    phi = rng.uniform(0.0, 2 * np.pi, n)
    sin_theta = np.sqrt(1.0 - cos_theta ** 2)

    return np.column_stack((sin_theta * np.cos(phi), sin_theta * np.sin(phi), cos_theta))


def sample_characteristic_lengths(u, min_characteristic_length, max_characteristic_length, power_law_exponent):
    """
    Inverse transform sampling of the size distribution dN/dL ~ L**power_law_exponent,
    truncated to [min_characteristic_length, max_characteristic_length].

    The exponent is read as the slope of the density dN/dL, not of the cumulative count, so the
    cumulative law is N(>L) = N(>L_min) * (L / L_min) ** (power_law_exponent + 1). For -2.71 and
    -2.6 that is -1.71 and -1.6, the slopes of the collision and explosion fragment_count laws.
    Using power_law_exponent directly as the cumulative slope would make sampled sizes steeper
    than the counts the events report.

    Args:
        u (np.ndarray): Uniform variates in [0, 1)
        min_characteristic_length (float): Lower bound [m]
        max_characteristic_length (float): Upper bound [m]
        power_law_exponent (float): Exponent of the differential distribution, below -1

    Returns:
        np.ndarray: Characteristic lengths [m]
    """
    beta = power_law_exponent + 1
    if beta >= 0:
        raise ValueError(f"power_law_exponent must be below -1, got {power_law_exponent}")

    ratio = (max_characteristic_length / min_characteristic_length) ** beta
    Lc = min_characteristic_length * (1 - np.asarray(u) * (1 - ratio)) ** (1 / beta)

    return np.clip(Lc, min_characteristic_length, max_characteristic_length)


def generate_fragments(event, seed=None, rounding="floor"):
    """
    Fragment generation following the NASA standard breakup model (Johnson 2001) for a single
    collision or explosion.

    The number of fragments is the event's fragment count at its minimum characteristic length.
    For every fragment a characteristic length is sampled from the truncated power law, the
    area follows from the length, the area-to-mass ratio is sampled from the NASA SBM
    distributions for the event's object class, and the delta-v magnitude from the
    log-normal law parameterised by the event's delta-velocity offset. Directions are
    uniform on the sphere. All fragments are placed at the event location.

    Random numbers are consumed in this order: the rounding variate (stochastic rounding only),
    n size uniforms, an (n, 2) block of normals for A/M, n normals for the delta-v magnitude,
    n uniforms for cos(theta) and n uniforms for phi.

    Sizes follow dN/dL ~ L**power_law_exponent, i.e. a cumulative slope of power_law_exponent + 1,
    which matches the event's fragment_count law (see sample_characteristic_lengths).

    Parameters:
    - event: CollisionEvent or ExplosionEvent
    - seed: int, np.random.SeedSequence or np.random.Generator. None draws fresh entropy.
    - rounding: "floor" truncates the fractional fragment count, "stochastic" keeps the
      extra fragment with probability equal to the fraction.

    Returns:
    - np.ndarray of shape (n, 9), columns as in FRAGMENT_COLUMNS

    Raises:
    - InvalidBounds: if the minimum characteristic length is not positive or exceeds the maximum
    - NegativeOrNonFiniteCount: if the event reports a negative, NaN or infinite fragment count
    """
    if not isinstance(event, FragmentationEvent):
        raise TypeError(f"event must be a CollisionEvent or ExplosionEvent, got {type(event).__name__}")
    if rounding not in ROUNDING_POLICIES:
        raise ValueError(f"Unknown rounding policy '{rounding}', expected one of {ROUNDING_POLICIES}")

    L_min = event.min_characteristic_length
    L_max = event.max_characteristic_length
    if not (np.isfinite(L_min) and np.isfinite(L_max)) or L_min <= 0:
        raise InvalidBounds(f"Characteristic length bounds must be positive and finite, got [{L_min}, {L_max}]")
    if L_min > L_max:
        raise InvalidBounds(f"min_characteristic_length {L_min} m is larger than "
                            f"max_characteristic_length {L_max} m")

    num = event.fragment_count(L_min)
    if not np.isfinite(num) or num < 0:
        raise NegativeOrNonFiniteCount(f"Fragment count must be finite and non-negative, got {num}")

    rng = np.random.default_rng(seed)

    n_frags = int(np.floor(num))
    if rounding == "stochastic" and rng.random() < num - n_frags:
        n_frags += 1

    if n_frags == 0:
        warnings.warn(f"{event!r} produced no fragments above {L_min} m (fragment count {num:.3g})")
        return np.empty((0, len(FRAGMENT_COLUMNS)))

    # Sizes
    d = sample_characteristic_lengths(rng.random(n_frags), L_min, L_max, event.power_law_exponent())

    # Area, A/M and mass
    A = area_from_characteristic_length(d)
    Am = func_Am(d, event.kind(), rng)
    m = A / Am

    # delta-v, magnitude and direction
    dv = func_dv(Am, event.delta_velocity_offset(), rng)
    dv_vec = dv[:, np.newaxis] * random_unit_vectors(n_frags, rng)

    position = np.broadcast_to(np.asarray(event.location(), dtype=float), (n_frags, 3))

    return np.column_stack((d, m, Am, dv_vec, position))


def fragments_to_dataframe(fragments):
    """
    Wrap a fragment table in a DataFrame with the FRAGMENT_COLUMNS names.
    """
    return pd.DataFrame(np.asarray(fragments, dtype=float).reshape(-1, len(FRAGMENT_COLUMNS)),
                        columns=list(FRAGMENT_COLUMNS))
