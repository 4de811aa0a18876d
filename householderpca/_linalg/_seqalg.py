# householderpca/_linalg/_seqalg.py
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

"""

Products of Householder reflections executed step by step with
`jax.lax.fori_loop`.

An algorithm is a list of operations. Each operation may read, at every step,
the output of the operations that precede it in the list, and returns a final
result when the loop is over. The operations are pytrees, so their state is
the carry of the loop.

"""

from jax import numpy as jnp
from jax import lax

from . import _pytree
from . import _householder

class SequentialOperation(_pytree.AutoPyTree):
    """
    One operation of a sequential algorithm. Subclasses override the steps
    they need; by default an operation has no inputs, no state, no step
    output and no final result.
    """

    inputs = ()
    """indices of the earlier operations whose step output is read"""

    def init(self, n, *inputs):
        """called before the loop with the step-0 outputs of the inputs"""

    def iter_out(self, i):
        """output of step i, read by later operations"""

    def iter(self, i, *inputs):
        """update at step i, 1 <= i < n"""

    def finalize(self):
        """result after the last step"""

def sequential_algorithm(n, ops):
    """
    Run a sequential algorithm.

    Parameters
    ----------
    n : int
        Number of steps. Step 0 is handled by `init`, steps 1 to n - 1 by the
        loop.
    ops : list of SequentialOperation
        The operations, in dependency order.

    Returns
    -------
    results : tuple
        The result of `finalize` of each operation.

    Raises
    ------
    ValueError :
        If an operation reads from itself or from a later operation.
    """
    for i, op in enumerate(ops):
        if any(j >= i for j in op.inputs):
            raise ValueError(f'operation {i} ({op.__class__.__name__}) reads '
                f'from {op.inputs!r}, forward references are not allowed')
        op.init(n, *(ops[j].iter_out(0) for j in op.inputs))
    def step(i, ops):
        for op in ops:
            op.iter(i, *(ops[j].iter_out(i) for j in op.inputs))
        return ops
    ops = lax.fori_loop(1, n, step, ops)
    return tuple(op.finalize() for op in ops)

class Reflections(SequentialOperation):
    """
    At step i, outputs the reflection of column ``Q - 1 - i`` of a (D, Q)
    matrix with unit columns, so the columns are visited last to first.
    """

    def __init__(self, vn):
        self.vn = jnp.asarray(vn)

    def init(self, n):
        assert n == self.vn.shape[-1], (n, self.vn.shape)

    def iter_out(self, i):
        return _householder.householder(self.vn.shape[-1] - 1 - i, self.vn)

class LeftProduct(SequentialOperation):
    """
    Reads square matrices M_0, M_1, ... from operation `input`; at step i
    outputs M_i @ ... @ M_1 @ M_0, and the full product at the end.
    """

    def __init__(self, input):
        self.inputs = (input,)

    def init(self, n, m0):
        assert m0.ndim == 2 and m0.shape[0] == m0.shape[1], m0.shape
        self.prod = m0

    def iter_out(self, i):
        return self.prod

    def iter(self, i, mi):
        self.prod = mi @ self.prod

    def finalize(self):
        return self.prod

class Stack(SequentialOperation):
    """ Collects the step outputs of operation `input` in an (n, ...) array """

    def __init__(self, input):
        self.inputs = (input,)

    def init(self, n, a0):
        self.out = jnp.zeros((n,) + a0.shape, a0.dtype).at[0].set(a0)

    def iter(self, i, ai):
        self.out = self.out.at[i].set(ai)

    def finalize(self):
        return self.out
