# householderpca/_errors.py
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

""" exceptions raised by the orthogonal basis construction """

class ShapeMismatch(ValueError):
    """
    The sizes of the inputs are not consistent with each other, e.g., the
    length of the parameter vector is not ``D*Q - Q*(Q-1)/2``. Raised before
    doing any computation.
    """

class DegenerateParameterization(ValueError):
    """
    The parameters do not define an orthonormal basis: a column of the
    triangular parameter matrix has null or non-finite norm, or a reflection
    vector has null or non-finite squared norm.
    """
