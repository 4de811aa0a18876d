# householderpca/_stiefel.py
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

""" define orthogonal_matrix, HouseholderBasis """

import functools

import numpy
from jax import numpy as jnp

from . import _errors
from . import _layout
from . import _linalg
from . import _logdensity
from . import _gvarext

def _orthogonal_matrix(v, D, Q):
    vn = _linalg.normalize_columns(_layout.lower_triangular(v, D, Q))
    prods = _linalg.householder_products(vn)
    return prods[..., Q, :, :Q]

def orthogonal_matrix(v, D, Q):
    """

    Matrix with orthonormal columns from unconstrained parameters.

    The parameters are arranged into a lower triangular matrix (see
    `lower_triangular`), whose columns are normalized. The Householder
    reflections of the columns are multiplied starting from the last column,
    and the first Q columns of the product are the result.

    Parameters
    ----------
    v : (..., D*Q - Q*(Q-1)/2) array
        The free parameters. Can be an array of gvars, in which case the
        output is an array of gvars, propagated linearly.
    D, Q : int
        The shape of the output. Must be 1 <= Q <= D.

    Returns
    -------
    U : (..., D, Q) array
        A matrix with ``U.T @ U = I``.

    Raises
    ------
    ShapeMismatch :
        If the length of `v` is not ``D*Q - Q*(Q-1)/2``.
    DegenerateParameterization :
        If a column of the lower triangular matrix is null. Under jit or vmap
        this is not checked and the output is nan.

    See also
    --------
    HouseholderBasis : Also computes the intermediate steps and the loading
        matrix.

    """
    if not hasattr(v, 'dtype'):
        v = numpy.asarray(v)
    _layout.check_length(v, D, Q)
    func = functools.partial(_orthogonal_matrix, D=D, Q=Q)
    return _gvarext.gvar_gufunc(func, signature='(n)->(d,q)')(v)

def loading_matrix(U, sigma):
    """ The loading matrix ``W = U diag(sigma)``, with broadcasting """
    U = jnp.asarray(U)
    sigma = jnp.asarray(sigma)
    if U.ndim < 2 or sigma.ndim < 1 or U.shape[-1] != sigma.shape[-1]:
        raise _errors.ShapeMismatch(f'cannot scale the columns of a matrix '
            f'with shape {U.shape} by a vector with shape {sigma.shape}')
    return U * sigma[..., None, :]

class HouseholderBasis(_linalg._pytree.AutoPyTree):

    def __init__(self, v, D, Q, sigma=None):
        """

        Compute the orthonormal basis and all the intermediate steps.

        The object is a jax pytree, so it can be returned by jitted or
        vmapped functions. It holds no state besides the result of the
        computation.

        Parameters
        ----------
        v : (..., D*Q - Q*(Q-1)/2) array
            The free parameters, see `lower_triangular`.
        D, Q : int
            The shape of the basis.
        sigma : (..., Q) array, optional
            The scales of the latent axes, in ascending order. If specified,
            the loading matrix and the log-density correction are computed
            too.

        Attributes
        ----------
        D, Q : int
            The shape of the basis.
        V : (..., D, Q) array
            The lower triangular matrix.
        norms : (..., Q) array
            The norms of the columns of `V`.
        Vn : (..., D, Q) array
            `V` with normalized columns.
        products : (..., Q + 1, D, D) array
            The cumulative products of the reflections, see
            `householder_products`.
        U : (..., D, Q) array
            The basis, i.e., the first Q columns of ``products[Q]``.
        sigma : (..., Q) array or None
            The scales.
        W : (..., D, Q) array or None
            The loading matrix ``U diag(sigma)``.
        logcorr : (...) array or None
            The log-density correction, see `log_density_correction`.

        Raises
        ------
        ShapeMismatch, DegenerateParameterization :
            See `orthogonal_matrix`.

        """
        if sigma is not None:
            sigma = _logdensity._check_sigma(sigma, Q)
        self.D = D
        self.Q = Q
        self.V = _layout.lower_triangular(v, D, Q)
        self.norms = _linalg.column_norms(self.V)
        self.Vn = _linalg.normalize_columns(self.V)
        self.products = _linalg.householder_products(self.Vn)
        self.U = self.products[..., Q, :, :Q]
        self.sigma = sigma
        if sigma is None:
            self.W = None
            self.logcorr = None
        else:
            self.W = loading_matrix(self.U, sigma)
            self.logcorr = _logdensity.matrix_correction(self.V, sigma)

def householder_basis(v, sigma, D, Q):
    """
    Orthonormal basis and log-density correction in a single call.

    Parameters
    ----------
    v : (..., D*Q - Q*(Q-1)/2) array
        The free parameters.
    sigma : (..., Q) array
        The scales in ascending order.
    D, Q : int
        The shape of the basis.

    Returns
    -------
    U : (..., D, Q) array
        The basis.
    logcorr : (...) array
        The term to add to the log-probability of the model.
    """
    basis = HouseholderBasis(v, D, Q, sigma)
    return basis.U, basis.logcorr
