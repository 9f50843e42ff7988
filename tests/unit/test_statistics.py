"""
Unit tests for the closed-form and sampled moments.
"""
import math

import pytest
import numpy as np


class TestPredictedVariance:
    """Test the Campbell's theorem variance."""

    @pytest.mark.unit
    def test_default_value(self):
        from pygabor.noise import NoiseParams, predicted_variance

        assert predicted_variance(NoiseParams()) == pytest.approx(0.218, rel=0.02)

    @pytest.mark.unit
    def test_truncation_removes_little(self):
        from pygabor.noise import NoiseParams, predicted_variance
        from pygabor.noise.statistics import truncated_energy_fraction

        full = predicted_variance(NoiseParams(), truncated=False)
        cut = predicted_variance(NoiseParams(), truncated=True)
        assert cut < full
        assert cut == pytest.approx(full * truncated_energy_fraction())
        assert 0.99 < truncated_energy_fraction() < 1.0

    @pytest.mark.unit
    def test_chi2_cdf(self):
        from pygabor.noise.statistics import _chi2_3_cdf

        assert _chi2_3_cdf(0.0) == pytest.approx(0.0)
        # median of chi-square with 3 degrees of freedom
        assert _chi2_3_cdf(2.365974) == pytest.approx(0.5, abs=1e-5)

    @pytest.mark.unit
    def test_rejects_other_types(self):
        from pygabor.noise import predicted_variance

        with pytest.raises(TypeError):
            predicted_variance({"bandwidth": 1.0})

    @pytest.mark.unit
    def test_sample_moments(self):
        from pygabor.noise import sample_moments

        mean, var = sample_moments(np.array([1.0, 2.0, 3.0, 4.0]))
        assert mean == pytest.approx(2.5)
        assert var == pytest.approx(5.0 / 3.0)
        with pytest.raises(ValueError):
            sample_moments(np.array([1.0]))


def _r3_points(n, extent):
    """Low-discrepancy points in [0, extent)^3 (additive recurrence on the plastic number)."""
    alpha = np.array([0.81917251339616437, 0.67104360670378904, 0.54970047790197007])
    i = np.arange(n)[:, None]
    return np.mod(0.5 + alpha * i, 1.0) * extent


class TestSampledStatistics:
    """Compare sampled noise with the closed-form and recorded moments."""

    @pytest.mark.unit
    def test_point_set(self):
        points = _r3_points(3000, 400.0)
        assert points.shape == (3000, 3)
        np.testing.assert_allclose(points[1], [127.66900535846571, 68.417442681515610, 19.880191160788030])

    @pytest.mark.unit
    @pytest.mark.slow
    @pytest.mark.parametrize(
        "params_kwargs, recorded_mean, recorded_var",
        [
            ({}, 0.0066162602191783011, 0.22141694181779314),
            ({"bandwidth": 2.0, "seed": 5}, -0.018867747771396257, 1.2718857346282424),
            ({"anisotropic": 1, "direction": (0.0, 1.0, 1.0), "seed": 9}, 0.0076304204540871773, 0.21193162200720470),
            ({"impulses": 4.0, "seed": 17}, -0.0019407486282197264, 0.056640849169368443),
        ],
    )
    def test_mean_and_variance(self, params_kwargs, recorded_mean, recorded_var):
        from pygabor.noise import GaborEvaluator, NoiseParams, predicted_variance, sample_moments

        params = NoiseParams(**params_kwargs)
        ev = GaborEvaluator(params, lane_width=3000)
        mean, var = sample_moments(ev.evaluate(_r3_points(3000, 400.0)))

        assert mean == pytest.approx(recorded_mean, abs=1e-9)
        assert var == pytest.approx(recorded_var, rel=1e-9)

        expected = predicted_variance(ev.setup)
        assert abs(mean) < 0.05 + 3.0 * math.sqrt(expected / 3000)
        assert var == pytest.approx(expected, rel=0.15)
