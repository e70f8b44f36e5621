import numpy as np
import pytest

from pykessler.utils.simulation.satellite import Satellite, SatKind
from pykessler.utils.breakup.events import CollisionEvent, ExplosionEvent
from pykessler.utils.breakup.NASA_SBM_frags import generate_fragments, FRAGMENT_COLUMNS
from pykessler.utils.breakup.diagnostics import (
    characteristic_length_cdf, size_distribution_test, expected_fragments_between,
)


@pytest.fixture
def explosion():
    satellite = Satellite([0.0, 0.0, 0.0], [0.0, 0.0, 0.0], 849.0, SatKind.ROCKET_BODY)
    return ExplosionEvent(satellite, 0.01)


def test_cdf_endpoints(explosion):
    cdf = characteristic_length_cdf([explosion.min_characteristic_length, explosion.max_characteristic_length], explosion)
    np.testing.assert_allclose(cdf, [0.0, 1.0], atol=1e-12)


def test_cdf_is_monotonic(explosion):
    lengths = np.logspace(-2, np.log10(explosion.max_characteristic_length), 100)
    assert np.all(np.diff(characteristic_length_cdf(lengths, explosion)) >= 0)


def test_sampled_sizes_follow_power_law(explosion):
    fragments = generate_fragments(explosion, seed=10)
    result = size_distribution_test(fragments, explosion)
    assert result.statistic < 0.05


def test_collision_sizes_follow_power_law():
    target = Satellite([0.0, 0.0, 0.0], [0.0, 7.5, 0.0], 950.0, SatKind.SPACECRAFT)
    projectile = Satellite([0.0, 0.0, 0.0], [0.0, -1.5, 7.3], 560.0, SatKind.SPACECRAFT)
    event = CollisionEvent([target, projectile], 0.1)

    result = size_distribution_test(generate_fragments(event, seed=10), event)
    assert result.statistic < 0.1


def test_wrong_exponent_is_detected(explosion):
    fragments = generate_fragments(explosion, seed=10)
    # a flat log-uniform size distribution over the same bounds
    rng = np.random.default_rng(0)
    fragments[:, 0] = 10 ** rng.uniform(np.log10(explosion.min_characteristic_length),
                                         np.log10(explosion.max_characteristic_length), len(fragments))
    assert size_distribution_test(fragments, explosion).pvalue < 1e-6


def test_empty_table_rejected(explosion):
    with pytest.raises(ValueError):
        size_distribution_test(np.empty((0, len(FRAGMENT_COLUMNS))), explosion)


def test_expected_fragments_between(explosion):
    expected = expected_fragments_between(explosion, 0.1, 1.0)
    assert expected == pytest.approx(6 * 0.1 ** -1.6 - 6 * 1.0 ** -1.6)
    with pytest.raises(ValueError):
        expected_fragments_between(explosion, 1.0, 0.1)
