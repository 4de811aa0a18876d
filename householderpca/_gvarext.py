# householderpca/_gvarext.py
#
# Copyright (c) 2022, 2023, 2026, Giacomo Petrillo
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

""" linear propagation of gvars through jax functions """

import functools
import string

import gvar
import jax
import numpy
from jax import numpy as jnp

try:
    from numpy.lib import function_base # numpy 1
except ImportError:
    from numpy.lib import _function_base_impl as function_base # numpy 2

def _getsvec(x):
    """
    Get the sparse vector of derivatives of a GVar.
    """
    if isinstance(x, gvar.GVar):
        return x.internaldata[1]
    else:
        return gvar.svec(0)

def _merge_svec(gvlist, start, stop):
    n = stop - start
    if n <= 0:
        return gvar.svec(0)
    if n == 1:
        return _getsvec(gvlist[start])
    left = _merge_svec(gvlist, start, start + n // 2)
    right = _merge_svec(gvlist, start + n // 2, stop)
    return left.add(right, 1, 1)

def jacobian(g):
    """
    Extract the jacobian of gvars w.r.t. primary gvars.

    Parameters
    ----------
    g : array_like
        An array of numbers or gvars.

    Returns
    -------
    jac : array
        The shape is g.shape + (m,), where m is the total number of primary
        gvars that g depends on.
    indices : (m,) int array
        The indices that map the last axis of jac to primary gvars in the
        global covariance matrix.
    """
    g = numpy.asarray(g)
    flat = list(g.flat)
    indices = _merge_svec(flat, 0, len(flat)).indices()
    jac = numpy.zeros((g.size, len(indices)), float)
    for i, x in enumerate(flat):
        v = _getsvec(x)
        ind = numpy.searchsorted(indices, v.indices())
        jac[i, ind] = v.values()
    return jac.reshape(g.shape + indices.shape), indices

def from_jacobian(mean, jac, indices):
    """
    Create new gvars from a jacobian w.r.t. primary gvars, inverse of
    `jacobian`.
    """
    cov = gvar.gvar.cov
    mean = numpy.asarray(mean)
    jac = numpy.asarray(jac).reshape(mean.size, len(indices))
    g = numpy.empty(mean.size, object)
    for i, (m, jacrow) in enumerate(zip(mean.flat, jac)):
        der = gvar.svec(len(indices))
        der._assign(jacrow, indices)
        g[i] = gvar.GVar(m, der, cov)
    return g.reshape(mean.shape)

def _parse_signature(signature):
    incores, outcores = function_base._parse_gufunc_signature(signature)
    if len(incores) != 1 or len(outcores) != 1:
        raise ValueError(f'signature {signature!r} must have exactly one '
            'input and one output')
    return incores[0], outcores[0]

def gvar_gufunc(func, *, signature='()->()'):
    """

    Wraps a jax-traceable function of one array to support gvars.

    Parameters
    ----------
    func : callable
        A function from one array to one array, vectorized according to
        `signature` over leading axes, and differentiable with `jax`.
    signature : str
        The signature of the generalized ufunc, with one input and one
        output, e.g., ``'(n)->(d,q)'``. Default scalar to scalar.

    Returns
    -------
    decorated_func : callable
        A function that, in addition to numerical arrays, accepts arrays of
        gvars and returns gvars, propagated to first order.

    """

    inp, out = _parse_signature(signature)
    deriv = jnp.vectorize(
        jax.jacfwd(func),
        signature=f'({",".join(inp)})->({",".join(out + inp)})',
    )

    # einsum formula contracting the jacobian of func with the jacobian of
    # the input w.r.t. the primary gvars
    letters = iter(string.ascii_letters)
    out_indices = ''.join(next(letters) for _ in out)
    in_indices = ''.join(next(letters) for _ in inp)
    gvar_index = next(letters)
    formula = (f'...{out_indices}{in_indices},...{in_indices}{gvar_index}'
        f'->...{out_indices}{gvar_index}')

    def gvar_function(x):
        in_mean = gvar.mean(x)
        in_jac, indices = jacobian(x)
        out_mean = func(in_mean)
        out_jac = jnp.einsum(formula, deriv(in_mean), in_jac)
        return from_jacobian(out_mean, out_jac, indices)

    @functools.wraps(func)
    def decorated_func(x):
        if isinstance(x, gvar.GVar):
            return gvar_function(numpy.asarray(x)).item()
        elif getattr(x, 'dtype', None) == object:
            return gvar_function(x)
        else:
            return func(x)

    return decorated_func
