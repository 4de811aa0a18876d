# householderpca/tests/conftest.py
#
# Copyright (c) 2023, 2026, Giacomo Petrillo
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
import gvar
import numpy as np

@pytest.fixture(autouse=True)
def clean_gvar_env():
    """ Create a new hidden global covariance matrix for primary gvars, restore
    the previous one during teardown. Otherwise the global covariance matrix
    grows arbitrarily. """
    yield gvar.switch_gvar()
    gvar.restore_gvar()

@pytest.fixture
def rng(request):
    """ A random generator with a deterministic per-test seed """
    nodeid = request.node.nodeid
    seed = np.array([nodeid], np.bytes_).view(np.uint8)
    return np.random.default_rng(seed)

@pytest.fixture(autouse=True)
def reset_random_seeds(rng):
    """ Set seeds of global state random generators for tests that still use
    them. Prefer `rng` for new tests. """
    bitgen1 = rng.bit_generator.jumped(1)
    bitgen2 = bitgen1.jumped(2)
    def toseed(bitgen):
        return np.array([bitgen.random_raw()], np.uint64).view(np.uint32)
    np.random.seed(toseed(bitgen1))
    gvar.ranseed(toseed(bitgen2))

@pytest.fixture(params=[(1, 1), (2, 1), (3, 2), (5, 3), (6, 6)], ids=lambda p: f'D{p[0]}Q{p[1]}')
def shape(request):
    """ The (D, Q) shape of the basis """
    return request.param

@pytest.fixture
def v(shape, rng):
    """ Random free parameters for the basis """
    D, Q = shape
    return rng.standard_normal(D * Q - Q * (Q - 1) // 2)

@pytest.fixture
def sigma(shape, rng):
    """ Random ascending scales """
    _, Q = shape
    return np.sort(rng.gamma(2, size=Q))
