# householderpca/_logdensity.py
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

Log-density corrections for the Householder parameterization of the loading
matrix of Bayesian PCA.

The loading matrix is W = U diag(sigma), where U has orthonormal columns and
is obtained from an unconstrained lower triangular matrix V (see
`orthogonal_matrix`), and sigma is the ascending vector of scales. The terms
computed here must be added to the log-probability of the model to get the
correct density of the parameters (V, sigma) in place of the density of W.

"""

from jax import numpy as jnp
import numpy

from . import _errors
from . import _linalg
from . import _layout
from ._linalg import _householder

def _check_sigma(sigma, q=None):
    sigma = jnp.asarray(sigma)
    if sigma.ndim < 1 or q is not None and sigma.shape[-1] != q:
        raise _errors.ShapeMismatch(f'sigma has shape {sigma.shape}, '
            f'expected (..., {q})')
    return sigma

def normalization_correction(v):
    """
    Jacobian of the normalization of the columns.

    Parameters
    ----------
    v : (..., D, Q) array
        The lower triangular matrix before normalization.

    Returns
    -------
    corr : (...) array
        ``sum_q -log(r_q) (D - q - 1)``, where ``r_q`` is the norm of the q-th
        (0-based) column.
    """
    v = jnp.asarray(v)
    d, q = v.shape[-2:]
    r = _linalg.column_norms(v)
    _householder._check_nonnull(r, 'column')
    return jnp.sum(-jnp.log(r) * (d - 1 - jnp.arange(q)), axis=-1)

def scale_prior_correction(sigma, d):
    """ ``-1/2 sum(sigma^2) + (D - Q - 1) sum(log(sigma))`` """
    sigma = _check_sigma(sigma)
    q = sigma.shape[-1]
    return (
        -1/2 * jnp.sum(jnp.square(sigma), axis=-1)
        + (d - q - 1) * jnp.sum(jnp.log(sigma), axis=-1)
    )

def stiefel_volume_correction(sigma):
    """
    Pairwise terms of the volume element of the Stiefel manifold.

    Parameters
    ----------
    sigma : (..., Q) array
        The scales in ascending order.

    Returns
    -------
    corr : (...) array
        The sum over ``0 <= i < j < Q`` of
        ``log(sigma[Q-1-i]^2) - sigma[Q-1-j]^2``.
    """
    sigma = _check_sigma(sigma)
    q = sigma.shape[-1]
    s2 = jnp.square(sigma[..., ::-1])
    terms = jnp.log(s2)[..., :, None] - s2[..., None, :]
    upper = numpy.triu(numpy.ones((q, q), bool), 1)
    return jnp.sum(jnp.where(upper, terms, 0), axis=(-2, -1))

def scale_jacobian_correction(sigma):
    """ ``sum(log(2 sigma))`` """
    sigma = _check_sigma(sigma)
    return jnp.sum(jnp.log(2 * sigma), axis=-1)

def matrix_correction(v, sigma):
    """
    Sum of all the corrections, starting from the triangular matrix.

    Parameters
    ----------
    v : (..., D, Q) array
        The lower triangular matrix before normalization.
    sigma : (..., Q) array
        The scales in ascending order.

    Returns
    -------
    corr : (...) array
        The total log-density correction.
    """
    v = jnp.asarray(v)
    d, q = v.shape[-2:]
    sigma = _check_sigma(sigma, q)
    return (
        normalization_correction(v)
        + scale_prior_correction(sigma, d)
        + stiefel_volume_correction(sigma)
        + scale_jacobian_correction(sigma)
    )

def log_density_correction(v, sigma, D, Q):
    """
    Total log-density correction of the Householder parameterization.

    Parameters
    ----------
    v : (..., D*Q - Q*(Q-1)/2) array
        The free parameters of the lower triangular matrix, see
        `lower_triangular`.
    sigma : (..., Q) array
        The scales in ascending order.
    D, Q : int
        The number of rows and columns of the basis.

    Returns
    -------
    corr : (...) array
        The sum of `normalization_correction`, `scale_prior_correction`,
        `stiefel_volume_correction` and `scale_jacobian_correction`.

    Raises
    ------
    ShapeMismatch :
        If the lengths of `v` and `sigma` are not consistent with `D` and `Q`.
    DegenerateParameterization :
        If a column of the triangular matrix is null.
    """
    _check_sigma(sigma, Q)
    return matrix_correction(_layout.lower_triangular(v, D, Q), sigma)
