"""
Unit tests for general algorithms: dual numbers, lane batches, linear algebra.
"""
import pytest
import numpy as np


class TestDual:
    """Test derivative propagation through the dual helpers."""

    @pytest.mark.unit
    def test_product_and_quotient_rules(self):
        from pygabor.general_algorithms.dual import dual_div, dual_mul, dual_variable

        x = np.array([0.5, 2.0])
        a = dual_variable(x, [np.ones(2), np.zeros(2)])
        b = dual_variable(x * x, [2 * x, np.ones(2)])
        p = dual_mul(a, b)
        np.testing.assert_allclose(p.val, x ** 3)
        np.testing.assert_allclose(p.dx(0), 3 * x ** 2)
        np.testing.assert_allclose(p.dx(1), x)

        q = dual_div(b, a)
        np.testing.assert_allclose(q.val, x)
        np.testing.assert_allclose(q.dx(0), np.ones(2))
        np.testing.assert_allclose(q.dx(1), 1.0 / x)

    @pytest.mark.unit
    def test_elementary_functions(self):
        from pygabor.general_algorithms.dual import dual_cos, dual_exp, dual_sqrt, dual_variable

        x = np.array([0.3, 1.7])
        a = dual_variable(x, [np.ones(2), 2 * np.ones(2)])
        np.testing.assert_allclose(dual_exp(a).dx(1), 2 * np.exp(x))
        np.testing.assert_allclose(dual_cos(a).dx(0), -np.sin(x))
        np.testing.assert_allclose(dual_sqrt(a).dx(0), 0.5 / np.sqrt(x))

    @pytest.mark.unit
    def test_sqrt_at_zero_is_finite(self):
        from pygabor.general_algorithms.dual import dual_sqrt, dual_variable

        s = dual_sqrt(dual_variable(np.zeros(3), [np.ones(3), np.ones(3)]))
        assert np.all(s.d == 0.0)

    @pytest.mark.unit
    def test_vector_helpers(self):
        from pygabor.general_algorithms.dual import (
            Dual,
            dual_component,
            dual_dot,
            dual_dot_const,
            dual_matvec_const,
            dual_stack,
        )

        val = np.array([[1.0, 2.0, 3.0]])
        d = np.zeros((2, 1, 3))
        d[0, 0, 0] = 1.0
        d[1, 0, 1] = 1.0
        v = Dual(val, d)

        sq = dual_dot(v, v)
        assert sq.val[0] == pytest.approx(14.0)
        assert sq.dx(0)[0] == pytest.approx(2.0)
        assert sq.dx(1)[0] == pytest.approx(4.0)

        proj = dual_dot_const(v, np.array([0.0, 1.0, 0.0]))
        assert proj.dx(1)[0] == pytest.approx(1.0)

        back = dual_stack([dual_component(v, i) for i in range(3)])
        np.testing.assert_array_equal(back.val, v.val)
        np.testing.assert_array_equal(back.d, v.d)

        m = np.array([[0.0, 1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 2.0]])
        mv = dual_matvec_const(m, v)
        np.testing.assert_allclose(mv.val, [[2.0, 1.0, 6.0]])
        np.testing.assert_allclose(mv.d[0], [[0.0, 1.0, 0.0]])

    @pytest.mark.unit
    def test_where_selects_lanes(self):
        from pygabor.general_algorithms.dual import dual_constant, dual_where

        a = dual_constant(np.ones((3, 3)))
        b = dual_constant(np.zeros((3, 3)))
        out = dual_where(np.array([True, False, True]), a, b)
        np.testing.assert_array_equal(out.val[:, 0], [1.0, 0.0, 1.0])
        assert out.d.shape == (2, 3, 3)

    @pytest.mark.unit
    def test_lift_broadcasts(self):
        from pygabor.general_algorithms.dual import Dual, lift

        x = lift(2.0, 2, (4,))
        assert x.val.shape == (4,)
        assert x.d.shape == (2, 4)
        same = Dual(np.zeros(2), np.zeros((2, 2)))
        assert lift(same) is same


class TestLanes:
    """Test lane batching."""

    @pytest.mark.unit
    def test_lane_blocks_cover_input(self):
        from pygabor.general_algorithms.lanes import lane_blocks

        assert list(lane_blocks(10, 4)) == [(0, 4), (4, 4), (8, 2)]
        assert list(lane_blocks(0, 4)) == []
        with pytest.raises(ValueError):
            list(lane_blocks(3, 0))

    @pytest.mark.unit
    def test_load_pads_and_store_trims(self):
        from pygabor.general_algorithms.dual import Dual
        from pygabor.general_algorithms.lanes import load, store

        val = np.arange(15, dtype=float).reshape(5, 3)
        d = np.stack([val + 100, val + 200])
        block, active = load(Dual(val, d), 3, 2, 4)
        assert block.val.shape == (4, 3)
        assert active.tolist() == [True, True, False, False]
        np.testing.assert_array_equal(block.val[3], val[4])

        out_val = np.zeros(5)
        out_d = np.zeros((2, 5))
        scalar = Dual(block.val[:, 0], block.d[:, :, 0])
        store(out_val, out_d, scalar, 3, 2)
        np.testing.assert_array_equal(out_val, [0, 0, 0, 9, 12])
        np.testing.assert_array_equal(out_d[1], [0, 0, 0, 209, 212])


class TestLinalg:
    """Test small vector and matrix helpers."""

    @pytest.mark.unit
    @pytest.mark.parametrize("v", [(1.0, 0.0, 0.0), (0.0, 0.0, 1.0), (1.0, 2.0, -0.5), (0.95, 0.1, 0.0)])
    def test_make_orthonormals(self, v):
        from pygabor.general_algorithms.linalg import dot, make_orthonormals

        n, a, b = make_orthonormals(np.array(v))
        for x in (n, a, b):
            assert dot(x, x) == pytest.approx(1.0)
        assert dot(n, a) == pytest.approx(0.0, abs=1e-12)
        assert dot(n, b) == pytest.approx(0.0, abs=1e-12)
        assert dot(a, b) == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.unit
    def test_inv2(self):
        from pygabor.general_algorithms.linalg import identity2, inv2

        m = np.array([[[2.0, 1.0], [1.0, 3.0]], [[4.0, 0.0], [0.0, 0.5]]])
        np.testing.assert_allclose(inv2(m) @ m, identity2((2,)), atol=1e-12)

    @pytest.mark.unit
    def test_inv2_singular_is_finite(self):
        from pygabor.general_algorithms.linalg import inv2

        assert np.all(np.isfinite(inv2(np.zeros((2, 2)))))

    @pytest.mark.unit
    def test_outer_cols2(self):
        from pygabor.general_algorithms.linalg import outer_cols2

        c0 = np.array([1.0, 2.0])
        c1 = np.array([3.0, 4.0])
        j = np.stack([c0, c1], axis=-1)
        np.testing.assert_allclose(outer_cols2(c0, c1), j @ j.T)

    @pytest.mark.unit
    def test_normalize_keeps_zero(self):
        from pygabor.general_algorithms.linalg import normalize

        out = normalize(np.array([[0.0, 0.0, 0.0], [0.0, 3.0, 4.0]]))
        np.testing.assert_allclose(out, [[0, 0, 0], [0, 0.6, 0.8]])
