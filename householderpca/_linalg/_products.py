# householderpca/_linalg/_products.py
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

import functools

from jax import numpy as jnp

from . import _seqalg

@functools.partial(jnp.vectorize, signature='(d,q)->(p,d,d)')
def householder_products(vn):
    """
    Cumulative products of the Householder reflections of the columns.

    Parameters
    ----------
    vn : (..., D, Q) array
        Lower triangular matrix with unit columns.

    Returns
    -------
    prods : (..., Q + 1, D, D) array
        ``prods[0]`` is the identity, ``prods[q] = H_q @ prods[q - 1]``, where
        ``H_q`` is the reflection built from column ``Q - q`` of `vn`. The
        columns are consumed from the last to the first, and the product
        accumulates on the left.
    """
    d, q = vn.shape
    assert q <= d, (d, q)
    reflections = _seqalg.Reflections(vn)
    _, _, stack = _seqalg.sequential_algorithm(q, [
        reflections,
        _seqalg.LeftProduct(0),
        _seqalg.Stack(1),
    ])
    eye = jnp.eye(d, dtype=stack.dtype)
    return jnp.concatenate([eye[None], stack])
