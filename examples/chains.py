# householderpca/examples/chains.py
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

"""Evaluate the loading matrix and the log-density correction for a batch of
parallel chains, then propagate an uncertainty on the parameters to the
basis."""

import numpy as np
import jax
from jax import numpy as jnp
import gvar

import householderpca as hpca

D, Q = 6, 3
nchains = 4
n = hpca.stiefel_dim(D, Q)
rng = np.random.default_rng(20261018)

def unnormalized_logprior(params):
    """ standard normal prior on the unconstrained parameters, plus the
    corrections of the Householder parameterization """
    v, x = params[:n], params[n:]
    sigma, logjac = hpca.ordered_positive(x)
    U, logcorr = hpca.householder_basis(v, sigma, D, Q)
    W = hpca.loading_matrix(U, sigma)
    logp = -1/2 * jnp.sum(jnp.square(params)) + logjac + logcorr
    return logp, W

print('evaluate chains...')
params = rng.standard_normal((nchains, n + Q))
func = jax.jit(jax.vmap(jax.value_and_grad(unnormalized_logprior, has_aux=True)))
(logp, W), grad = func(params)
for i in range(nchains):
    print(f'chain {i}: logp = {logp[i]:.3f}, |grad| = {np.linalg.norm(grad[i]):.3f}')
    print(np.array2string(np.asarray(W[i]), precision=3))

print('\ncheck the first chain...')
basis = hpca.HouseholderBasis(params[0, :n], D, Q)
hpca.BasisDiagnostics(basis, verbosity=2)

print('\npropagate uncertainty...')
v = gvar.gvar(params[0, :n], np.full(n, 0.05))
U = hpca.orthogonal_matrix(v, D, Q)
print(U)
