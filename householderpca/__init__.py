# householderpca/__init__.py
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
Rotation invariant Householder parameterization for Bayesian PCA

Build a matrix with orthonormal columns from unconstrained parameters with a
product of Householder reflections, and the log-density corrections needed to
sample the loading matrix of probabilistic PCA in this parameterization.
"""

__version__ = '0.1.0'

# this first because it modifies global state
from . import _jaxext

from ._errors import (
    ShapeMismatch,
    DegenerateParameterization,
)
from ._layout import (
    stiefel_dim,
    triangular_indices,
    lower_triangular,
    triangular_vector,
)
from ._linalg import (
    column_norms,
    normalize_columns,
    householder,
    householder_products,
)
from ._stiefel import (
    orthogonal_matrix,
    loading_matrix,
    HouseholderBasis,
    householder_basis,
)
from ._logdensity import (
    normalization_correction,
    scale_prior_correction,
    stiefel_volume_correction,
    scale_jacobian_correction,
    matrix_correction,
    log_density_correction,
)
from ._ordered import ordered_positive, ordered_positive_inverse
from ._diagnostics import BasisDiagnostics, orthogonality_error
from ._gvarext import gvar_gufunc
