import numpy as np
from scipy import stats

from .NASA_SBM_frags import FRAGMENT_COLUMNS


def characteristic_length_cdf(Lc, event):
    """
    Analytic cumulative distribution of fragment sizes for an event, i.e. the fraction of
    fragments between the minimum characteristic length and Lc under the truncated power law.
    """
    L_min = event.min_characteristic_length
    L_max = event.max_characteristic_length
    beta = event.power_law_exponent() + 1

    Lc = np.clip(np.asarray(Lc, dtype=float), L_min, L_max)
    if L_max == L_min:
        return np.ones_like(Lc)

    return (1 - (Lc / L_min) ** beta) / (1 - (L_max / L_min) ** beta)


def size_distribution_test(fragments, event):
    """
    Kolmogorov-Smirnov test of the sampled characteristic lengths against the event's size law.

    Args:
        fragments (np.ndarray): Fragment table from generate_fragments
        event (FragmentationEvent): The event the table was generated for

    Returns:
        scipy.stats KstestResult with statistic and pvalue
    """
    lengths = np.asarray(fragments)[:, FRAGMENT_COLUMNS.index("characteristic_length")]
    if lengths.size == 0:
        raise ValueError("Can not test the size distribution of an empty fragment table")

    return stats.kstest(lengths, lambda x: characteristic_length_cdf(x, event))


def expected_fragments_between(event, L_low, L_high):
    """
    Expected number of fragments with L_low <= L < L_high from the event's cumulative count law.
    """
    if L_low > L_high:
        raise ValueError(f"L_low ({L_low}) must not exceed L_high ({L_high})")
    return event.fragment_count(L_low) - event.fragment_count(L_high)
