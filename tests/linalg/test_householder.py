# householderpca/tests/linalg/test_householder.py
#
# Copyright (c) 2026, Giacomo Petrillo
#
# This file is part of householderpca.
#
# householderpca is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# householderpca is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with householderpca.  If not, see <http://www.gnu.org/licenses/>.

import pytest
import numpy as np
import jax
from jax import numpy as jnp

import householderpca as hpca
from householderpca._linalg import _seqalg
from .. import util

def unit_lower(D, Q, rng):
    """ random lower triangular matrix with unit columns """
    V = np.tril(rng.standard_normal((D, Q)))
    return V / np.linalg.norm(V, axis=0)

class TestNormalize:

    def test_unit_norm(self, rng):
        V = np.tril(rng.standard_normal((5, 3)))
        Vn = hpca.normalize_columns(V)
        util.assert_allclose(np.linalg.norm(Vn, axis=0), 1, rtol=1e-15)
        util.assert_allclose(Vn * np.linalg.norm(V, axis=0), V, rtol=1e-15)

    def test_already_normalized(self):
        V = np.array([[1.], [0.]])
        util.assert_equal(hpca.normalize_columns(V), V)

    def test_batch(self, rng):
        V = rng.standard_normal((4, 5, 3))
        Vn = hpca.normalize_columns(V)
        for Vi, Vni in zip(V, Vn):
            util.assert_allclose(Vni, hpca.normalize_columns(Vi), rtol=1e-15)

    def test_zero_column(self):
        V = np.array([[0., 0], [0, 1], [0, 1]])
        with pytest.raises(hpca.DegenerateParameterization, match=r'\(0,\)'):
            hpca.normalize_columns(V)

    def test_nonfinite_column(self):
        V = np.array([[1., 0], [np.inf, 1]])
        with pytest.raises(hpca.DegenerateParameterization):
            hpca.normalize_columns(V)

    def test_zero_column_jit(self):
        V = np.array([[0., 0], [0, 1], [0, 1]])
        Vn = jax.jit(hpca.normalize_columns)(V)
        assert np.all(np.isnan(Vn[:, 0]))
        util.assert_allclose(Vn[:, 1], [0, 2 ** -0.5, 2 ** -0.5], rtol=1e-15)

class TestHouseholder:

    @pytest.mark.parametrize('D,Q', [(1, 1), (3, 2), (6, 4), (4, 4)])
    def test_orthogonal(self, D, Q, rng):
        Vn = unit_lower(D, Q, rng)
        for k in range(Q):
            H = hpca.householder(k, Vn)
            util.assert_close_matrices(H.T @ H, np.eye(D), atol=1e-14)

    @pytest.mark.parametrize('D,Q', [(1, 1), (3, 2), (6, 4), (4, 4)])
    def test_maps_axis_to_column(self, D, Q, rng):
        Vn = unit_lower(D, Q, rng)
        for k in range(Q):
            H = hpca.householder(k, Vn)
            util.assert_allclose(H[:, k], Vn[:, k], atol=1e-15)

    def test_leading_block_is_identity(self, rng):
        Vn = unit_lower(6, 4, rng)
        k = 2
        H = hpca.householder(k, Vn)
        util.assert_equal(H[:k, :], np.eye(6)[:k, :])
        util.assert_equal(H[:, :k], np.eye(6)[:, :k])

    def test_hand_computed(self):
        Vn = np.array([[1.], [0.]])
        H = hpca.householder(0, Vn)
        util.assert_allclose(H, [[1, 0], [0, -1]], atol=1e-15)

    def test_negative_pivot(self):
        Vn = np.array([[-1.], [0.]])
        H = hpca.householder(0, Vn)
        util.assert_allclose(H, [[-1, 0], [0, 1]], atol=1e-15)

    def test_sign_of_zero(self):
        Vn = np.array([[0.], [0.], [1.]])
        H = hpca.householder(0, Vn)
        util.assert_allclose(H, [[0, 0, 1], [0, -1, 0], [1, 0, 0]], atol=1e-15)

    def test_traced_index(self, rng):
        Vn = unit_lower(5, 3, rng)
        H = jax.jit(hpca.householder)(1, Vn)
        util.assert_allclose(H, hpca.householder(1, Vn), rtol=1e-15, atol=1e-15)

    def test_degenerate(self):
        Vn = np.array([[np.nan], [0.]])
        with pytest.raises(hpca.DegenerateParameterization, match='reflection'):
            hpca.householder(0, Vn)

class TestProducts:

    @pytest.mark.parametrize('D,Q', [(1, 1), (2, 1), (4, 2), (5, 5)])
    def test_recursion(self, D, Q, rng):
        Vn = unit_lower(D, Q, rng)
        P = hpca.householder_products(Vn)
        assert P.shape == (Q + 1, D, D)
        util.assert_equal(P[0], np.eye(D))
        for q in range(1, Q + 1):
            H = hpca.householder(Q - q, Vn)
            util.assert_close_matrices(P[q], H @ P[q - 1], rtol=1e-14)

    @pytest.mark.parametrize('D,Q', [(3, 2), (7, 4)])
    def test_orthogonal(self, D, Q, rng):
        P = hpca.householder_products(unit_lower(D, Q, rng))
        util.assert_orthonormal_columns(P)

    def test_batch(self, rng):
        Vn = np.stack([unit_lower(4, 3, rng) for _ in range(3)])
        P = hpca.householder_products(Vn)
        assert P.shape == (3, 4, 4, 4)
        for Vni, Pi in zip(Vn, P):
            util.assert_allclose(Pi, hpca.householder_products(Vni), rtol=1e-14, atol=1e-15)

class TestSequentialAlgorithm:

    def test_forward_reference(self, rng):
        Vn = unit_lower(3, 2, rng)
        with pytest.raises(ValueError, match='forward'):
            _seqalg.sequential_algorithm(2, [
                _seqalg.LeftProduct(1),
                _seqalg.Reflections(Vn),
            ])

    def test_left_product(self, rng):
        Vn = unit_lower(5, 3, rng)
        refl, prod = _seqalg.sequential_algorithm(3, [
            _seqalg.Reflections(Vn),
            _seqalg.LeftProduct(0),
        ])
        assert refl is None
        expected = np.eye(5)
        for k in range(3):
            expected = hpca.householder(2 - k, Vn) @ expected
        util.assert_close_matrices(prod, expected, rtol=1e-14)

    def test_stack(self, rng):
        Vn = unit_lower(4, 2, rng)
        _, stack = _seqalg.sequential_algorithm(2, [
            _seqalg.Reflections(Vn),
            _seqalg.Stack(0),
        ])
        util.assert_allclose(stack[0], hpca.householder(1, Vn), atol=1e-15)
        util.assert_allclose(stack[1], hpca.householder(0, Vn), atol=1e-15)

    def test_self_reference(self):
        with pytest.raises(ValueError, match='forward'):
            _seqalg.sequential_algorithm(2, [_seqalg.LeftProduct(0)])

    def test_default_operation(self, rng):
        Vn = unit_lower(3, 2, rng)
        noop, refl, prod = _seqalg.sequential_algorithm(2, [
            _seqalg.SequentialOperation(),
            _seqalg.Reflections(Vn),
            _seqalg.LeftProduct(1),
        ])
        assert noop is None and refl is None
        util.assert_close_matrices(prod, hpca.householder(0, Vn) @ hpca.householder(1, Vn), rtol=1e-14)
