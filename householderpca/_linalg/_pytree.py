# householderpca/_linalg/_pytree.py
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

""" result objects that can go through jax transformations """

import numpy
import jax
from jax import tree_util

class AutoPyTree:
    """
    Base class registering subclasses as jax pytrees.

    The array attributes are the leaves, every other attribute (sizes, index
    tuples, None for optional results) is static. The split is computed the
    first time the object is flattened and then stored on the object, so that
    a copy rebuilt by jax with placeholder leaves keeps the same structure.
    """

    def __init_subclass__(cls, **kw):
        super().__init_subclass__(**kw)
        tree_util.register_pytree_node_class(cls)

    def _structure(self):
        structure = self.__dict__.get('_pytree_structure')
        if structure is None:
            attrs = vars(self).items()
            leaves = tuple(
                n for n, v in attrs
                if isinstance(v, (jax.Array, numpy.ndarray))
            )
            static = tuple((n, v) for n, v in attrs if n not in leaves)
            structure = leaves, static
            self._pytree_structure = structure
        return structure

    def tree_flatten(self):
        """ see `jax.tree_util.register_pytree_node_class` """
        structure = self._structure()
        leaves, _ = structure
        return tuple(getattr(self, n) for n in leaves), structure

    @classmethod
    def tree_unflatten(cls, structure, children):
        """ see `jax.tree_util.register_pytree_node_class` """
        self = cls.__new__(cls)
        leaves, static = structure
        self.__dict__.update(static)
        self.__dict__.update(zip(leaves, children))
        self._pytree_structure = structure
        return self

    def __repr__(self):
        leaves, static = self._structure()
        args = [f'{n}={v!r}' for n, v in static if not n.startswith('_')]
        args += [f'{n}={getattr(self, n).shape}' for n in leaves]
        return f'{self.__class__.__name__}({", ".join(args)})'
