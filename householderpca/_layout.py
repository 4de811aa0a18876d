# householderpca/_layout.py
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

Map between the flat vector of free parameters and the lower triangular
matrix. The vector fills the matrix column by column, left to right, and
within each column from the diagonal downwards, so column j takes the D - j
entries of rows j, j+1, ..., D-1 (0-based). The entries above the diagonal are
zero.

"""

import functools
import operator

import numpy
from jax import numpy as jnp

from . import _errors
from . import _jaxext

def stiefel_dim(D, Q):
    """
    Number of free parameters of a D×Q matrix with orthonormal columns in the
    Householder parameterization, i.e., ``D*Q - Q*(Q-1)/2``.
    """
    D = operator.index(D)
    Q = operator.index(Q)
    if not 1 <= Q <= D:
        raise _errors.ShapeMismatch(f'need 1 <= Q <= D, found D={D}, Q={Q}')
    return D * Q - Q * (Q - 1) // 2

@functools.lru_cache(maxsize=None)
def triangular_indices(D, Q):
    """
    Row and column indices of the free parameters.

    Returns
    -------
    rows, cols : (stiefel_dim(D, Q),) int arrays
        The position in the matrix of each element of the parameter vector.
    """
    n = stiefel_dim(D, Q)
    cols = numpy.repeat(numpy.arange(Q), D - numpy.arange(Q))
    rows = numpy.concatenate([numpy.arange(j, D) for j in range(Q)])
    assert rows.shape == cols.shape == (n,)
    rows.flags.writeable = False
    cols.flags.writeable = False
    return rows, cols

def check_length(v, D, Q):
    """ raise ShapeMismatch if the last axis of `v` does not fit D, Q """
    n = stiefel_dim(D, Q)
    shape = numpy.shape(v)
    if not shape or shape[-1] != n:
        raise _errors.ShapeMismatch(f'parameter vector has shape {shape}, '
            f'expected (..., {n}) for D={D}, Q={Q}')

def lower_triangular(v, D, Q):
    """
    Arrange the free parameters into a lower triangular matrix.

    Parameters
    ----------
    v : (..., D*Q - Q*(Q-1)/2) array
        The free parameters.
    D, Q : int
        The shape of the matrix.

    Returns
    -------
    V : (..., D, Q) array
        The matrix, with zeros above the diagonal.

    Raises
    ------
    ShapeMismatch :
        If the length of `v` is not ``D*Q - Q*(Q-1)/2``.
    """
    check_length(v, D, Q)
    v = jnp.asarray(v)
    v = v.astype(_jaxext.float_type(v))
    rows, cols = triangular_indices(D, Q)
    out = jnp.zeros(v.shape[:-1] + (D, Q), v.dtype)
    return out.at[..., rows, cols].set(v)

def triangular_vector(V):
    """
    Inverse of `lower_triangular`: extract the free parameters from the lower
    triangle of a (..., D, Q) matrix. The entries above the diagonal are
    ignored.
    """
    V = jnp.asarray(V)
    if V.ndim < 2:
        raise _errors.ShapeMismatch(f'expected a matrix, found shape {V.shape}')
    D, Q = V.shape[-2:]
    rows, cols = triangular_indices(D, Q)
    return V[..., rows, cols]
