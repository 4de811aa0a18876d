# householderpca/_linalg/_householder.py
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

"""

Householder reflections used to map a lower triangular matrix to a matrix
with orthonormal columns.

The construction follows Nirwan and Bertschinger (2019), "Rotation invariant
householder parameterization for Bayesian PCA". Given a D×Q matrix V with unit
columns and zeros above the diagonal, the reflection built from column k
sends the k-th axis to that column, up to the sign fixed by the flip of the
trailing block. Multiplying the reflections of all columns gives an orthogonal
D×D matrix whose first Q columns are the basis.

"""

import numpy
from jax import numpy as jnp

from .. import _jaxext
from .. import _errors

def column_norms(v):
    """ Euclidean norms of the columns of a (..., D, Q) matrix """
    v = jnp.asarray(v)
    return jnp.sqrt(jnp.sum(jnp.square(v), axis=-2))

def _check_nonnull(norms, what):
    with _jaxext.skipifabstract():
        norms = numpy.asarray(norms)
        bad = ~(numpy.isfinite(norms) & (norms > 0))
        if numpy.any(bad):
            index = tuple(map(int, numpy.argwhere(bad)[0]))
            where = f' at index {index}' if index else ''
            raise _errors.DegenerateParameterization(
                f'{what}{where} has norm {norms[index]}')

def normalize_columns(v):
    """
    Scale the columns of a matrix to unit norm.

    Parameters
    ----------
    v : (..., D, Q) array
        The matrix.

    Returns
    -------
    vn : (..., D, Q) array
        The matrix with each column divided by its norm.

    Raises
    ------
    DegenerateParameterization :
        If a column has zero or non-finite norm. Not checked under jax
        tracing, in that case the output contains nan.
    """
    v = jnp.asarray(v)
    norms = column_norms(v)
    _check_nonnull(norms, 'column')
    norms = jnp.where(norms > 0, norms, jnp.nan)
    return v / norms[..., None, :]

def householder(k, vn):
    """
    Householder reflection from a column of a matrix with unit columns.

    Parameters
    ----------
    k : int
        The (0-based) index of the column. It can be a traced integer.
    vn : (D, Q) array
        The matrix. Its columns should have unit norm and zeros above the
        diagonal, but this is not checked.

    Returns
    -------
    h : (D, D) array
        The matrix ``I - 2 u u^T / (u^T u)``, where u is the k-th column of `vn`
        with ``sign(u[k])`` added to its k-th component, and with the
        trailing block ``h[k:, k:]`` multiplied by ``-sign(u[k])``. The sign of
        zero is taken to be +1.

    Raises
    ------
    DegenerateParameterization :
        If ``u^T u`` is zero or not finite.
    """
    vn = jnp.asarray(vn)
    d = vn.shape[-2]
    u = vn[:, k]
    sgn = jnp.where(u[k] >= 0, 1, -1).astype(u.dtype)
    u = u.at[k].add(sgn)
    uu = u @ u
    _check_nonnull(uu, 'reflection vector')
    uu = jnp.where(uu > 0, uu, jnp.nan)
    h = jnp.eye(d, dtype=u.dtype) - 2 / uu * jnp.outer(u, u)
    trailing = jnp.arange(d) >= k
    block = trailing[:, None] & trailing[None, :]
    return jnp.where(block, -sgn * h, h)
