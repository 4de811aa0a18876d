# householderpca/_ordered.py
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

Bijection between unconstrained vectors and ascending vectors of positive
scales, used to sample the scales of the latent axes with the ordering
required by the Householder parameterization.

"""

import numpy
from jax import numpy as jnp

from . import _jaxext
from . import _errors

def ordered_positive(x):
    """

    Map an unconstrained vector to an ascending positive vector.

    Parameters
    ----------
    x : (..., Q) array
        Unconstrained reals. Since the increments ``exp(x[i])`` are summed in
        log space, the scales stay finite only while ``z[-1]`` is below the
        log of the largest float, about 709; in practice ``x[1:]`` must stay
        below about 6.5. Very negative ``x[1:]`` make consecutive scales
        equal in floating point.

    Returns
    -------
    sigma : (..., Q) array
        ``sigma = exp(z)``, with ``z[0] = x[0]`` and
        ``z[i] = z[i - 1] + exp(x[i])``.
    logjac : (...) array
        The log of the absolute value of the determinant of the jacobian of
        the transformation, ``sum(x[1:]) + sum(z)``, to be added to the
        log-density of `sigma` to obtain the log-density of `x`.

    Raises
    ------
    DegenerateParameterization :
        If `sigma` overflows or is not strictly ascending in floating point.
        Not checked under jax tracing, in that case `sigma` may contain inf
        or repeated values.

    """
    x = jnp.asarray(x)
    if x.ndim < 1 or x.shape[-1] < 1:
        raise _errors.ShapeMismatch(f'expected a non-empty vector, found '
            f'shape {x.shape}')
    x = x.astype(_jaxext.float_type(x))
    steps = jnp.concatenate([x[..., :1], jnp.exp(x[..., 1:])], axis=-1)
    z = jnp.cumsum(steps, axis=-1)
    logjac = jnp.sum(x[..., 1:], axis=-1) + jnp.sum(z, axis=-1)
    sigma = jnp.exp(z)
    with _jaxext.skipifabstract():
        s = numpy.asarray(sigma)
        if not numpy.all(numpy.isfinite(s) & (s > 0)):
            raise _errors.DegenerateParameterization(f'scales {s!r} overflow, '
                'the unconstrained parameters are too large')
        if not numpy.all(numpy.diff(s, axis=-1) > 0):
            raise _errors.DegenerateParameterization(f'scales {s!r} are not '
                'strictly ascending in floating point')
    return sigma, logjac

def ordered_positive_inverse(sigma):
    """

    Inverse of `ordered_positive`.

    Parameters
    ----------
    sigma : (..., Q) array
        Positive scales in strictly ascending order.

    Returns
    -------
    x : (..., Q) array
        The unconstrained vector such that ``ordered_positive(x)[0]`` is
        `sigma`.

    Raises
    ------
    ValueError :
        If `sigma` is not positive or not strictly ascending. Not checked
        under jax tracing.

    """
    sigma = jnp.asarray(sigma)
    if sigma.ndim < 1 or sigma.shape[-1] < 1:
        raise _errors.ShapeMismatch(f'expected a non-empty vector, found '
            f'shape {sigma.shape}')
    with _jaxext.skipifabstract():
        s = numpy.asarray(sigma)
        if not numpy.all(s > 0) or not numpy.all(numpy.diff(s, axis=-1) > 0):
            raise ValueError(f'sigma={s!r} is not positive and strictly '
                'ascending')
    z = jnp.log(sigma)
    return jnp.concatenate([z[..., :1], jnp.log(jnp.diff(z, axis=-1))], axis=-1)
