"""
Unit tests for Gabor kernel evaluation, slicing and filtering.
"""
import pytest
import numpy as np


def _position(val):
    from pygabor.general_algorithms.dual import Dual

    val = np.atleast_2d(np.asarray(val, dtype=float))
    d = np.zeros((2,) + val.shape)
    d[0, :, 0] = 1.0
    d[1, :, 1] = 1.0
    return Dual(val, d)


class TestGaborKernel:
    """Test the harmonic-Gaussian kernel."""

    @pytest.mark.unit
    def test_value_at_centre(self):
        from pygabor.noise.kernel import gabor_kernel

        out = gabor_kernel(2.0, np.array([[1.0, 0.0, 0.0]]), 0.0, 1.4, _position([0.0, 0.0, 0.0]))
        assert out.val[0] == pytest.approx(2.0)
        np.testing.assert_allclose(out.d[:, 0], 0.0, atol=1e-14)

    @pytest.mark.unit
    def test_closed_form(self):
        from pygabor.noise.kernel import gabor_kernel

        a, phi = 1.2, 0.4
        omega = np.array([[0.6, 0.8, 0.0]])
        x = np.array([0.2, -0.1, 0.3])
        out = gabor_kernel(1.0, omega, phi, a, _position(x))
        expected = np.exp(-np.pi * a * a * x.dot(x)) * np.cos(2 * np.pi * omega[0].dot(x) + phi)
        assert out.val[0] == pytest.approx(expected)

    @pytest.mark.unit
    def test_derivative_matches_finite_difference(self):
        from pygabor.noise.kernel import gabor_kernel

        a, phi, h = 1.1, 1.3, 1e-6
        omega = np.array([[0.0, 0.6, 0.8]])
        x = np.array([0.15, 0.05, -0.2])
        out = gabor_kernel(1.0, omega, phi, a, _position(x))
        plus = gabor_kernel(1.0, omega, phi, a, _position(x + [h, 0, 0])).val[0]
        minus = gabor_kernel(1.0, omega, phi, a, _position(x - [h, 0, 0])).val[0]
        assert out.dx(0)[0] == pytest.approx((plus - minus) / (2 * h), rel=1e-5, abs=1e-8)


class TestSliceAndFilter:
    """Test kernel slicing and analytic filtering."""

    @pytest.mark.unit
    def test_slice(self):
        from pygabor.general_algorithms.dual import dual_constant
        from pygabor.noise.kernel import slice_gabor_kernel_3d

        a, d = 1.3, 0.25
        omega = np.array([[0.3, 0.4, 0.5]])
        w_s, omega_s, phi_s = slice_gabor_kernel_3d(dual_constant(np.array([d])), 2.0, a, omega, 0.7)
        assert w_s.val[0] == pytest.approx(2.0 * np.exp(-np.pi * a * a * d * d))
        np.testing.assert_allclose(omega_s, [[0.3, 0.4]])
        assert phi_s.val[0] == pytest.approx(0.7 - 2 * np.pi * d * 0.3)

    @pytest.mark.unit
    def test_zero_filter_is_identity(self):
        from pygabor.general_algorithms.dual import dual_constant
        from pygabor.noise.kernel import filter_gabor_kernel_2d

        omega = np.array([[0.6, -0.8], [1.0, 0.0]])
        w = dual_constant(np.array([1.5, -1.0]))
        w_f, a_f, omega_f, phi_f = filter_gabor_kernel_2d(np.zeros((2, 2)), w, 1.4, omega, np.array([0.1, 0.2]))
        np.testing.assert_allclose(w_f.val, w.val)
        np.testing.assert_allclose(a_f, 1.4)
        np.testing.assert_allclose(omega_f, omega)
        np.testing.assert_allclose(phi_f.val, [0.1, 0.2])

    @pytest.mark.unit
    def test_filter_attenuates_and_widens(self):
        from pygabor.general_algorithms.dual import dual_constant
        from pygabor.noise.kernel import filter_gabor_kernel_2d

        omega = np.array([[2.0, 0.0]])
        w = dual_constant(np.array([1.0]))
        cov = 0.01 * np.eye(2)
        w_f, a_f, omega_f, _ = filter_gabor_kernel_2d(cov, w, 1.4, omega, np.array([0.0]))
        assert 0.0 < w_f.val[0] < 1.0
        # the filtered envelope is wider in space, i.e. a smaller 'a'
        assert a_f[0] < 1.4
        assert 0.0 < omega_f[0, 0] < 2.0
        assert omega_f[0, 1] == pytest.approx(0.0)

    @pytest.mark.unit
    def test_wide_filter_stays_finite(self):
        from pygabor.general_algorithms.dual import dual_constant
        from pygabor.noise.kernel import filter_gabor_kernel_2d

        w = dual_constant(np.array([1.0]))
        w_f, a_f, omega_f, _ = filter_gabor_kernel_2d(1e6 * np.eye(2), w, 1.4, np.array([[2.0, 0.0]]), np.array([0.0]))
        assert np.isfinite(w_f.val[0])
        assert abs(w_f.val[0]) < 1e-6
        assert np.all(np.isfinite(a_f))
        assert np.all(np.isfinite(omega_f))
