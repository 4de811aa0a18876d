# householderpca/_diagnostics.py
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

import textwrap
import warnings

import numpy
from scipy import linalg

from . import _errors

class Logger:
    """ Class to manage a log. Can be used as superclass. Each line of the log
    has a verbosity level (an integer >= 0) and is printed only if this level is
    below a threshold. All lines are saved and the log can be retrieved.

    The indentation level entered with ``with self.loglevel:`` is a class
    attribute shared by all loggers, so nested diagnostics indent each other's
    lines. It is not protected by a lock: loggers used from several threads
    at once, e.g., one per chain, may record lines with the wrong indentation.
    """

    def __init__(self, target_verbosity=0):
        """ set the threshold used to exclude log lines """
        self._verbosity = target_verbosity
        self._loggedlines = []

    def _indent(self, text, level=0):
        """ indent a text by provided level or by global current level """
        level = max(0, level + self.loglevel._level)
        prefix = 4 * level * ' '
        return textwrap.indent(text, prefix)

    def _select(self, verbosity, target_verbosity=None):
        if target_verbosity is None:
            target_verbosity = self._verbosity
        if isinstance(verbosity, int):
            return target_verbosity >= verbosity
        else:
            return target_verbosity in verbosity

    def log(self, message, verbosity=1, *, level=0):
        """
        Print and record a message.

        Parameters
        ----------
        message : str
            The message to print. A newline is added unconditionally.
        verbosity : int or set, default 1
            The verbosity level(s) at which the message is printed. If an
            integer, it's printed at all levels >= that integer. If a set, at
            the specified levels.
        level : int, default 0
            The indentation level of the message.
        """
        if self._select(verbosity):
            print(self._indent(message, level))
        self._loggedlines.append((message, verbosity, level + self.loglevel._level))

    def getlog(self, target_verbosity=None, *, base_level=0):
        """ return all logged line as a single string """
        return '\n'.join(
            self._indent(message, base_level + level)
            for message, verbosity, level in self._loggedlines
            if self._select(verbosity, target_verbosity)
        )

    class _LogLevel:
        """ context manager to indent messages, the level is shared by all
        instances of `Logger` and is not thread-safe """

        _level = 0

        @classmethod
        def __enter__(cls):
            cls._level += 1

        @classmethod
        def __exit__(cls, *_):
            cls._level -= 1

    loglevel = _LogLevel()

def orthogonality_error(m):
    """
    Distance from orthonormality of the columns of a matrix.

    Parameters
    ----------
    m : (..., D, Q) array
        The matrix.

    Returns
    -------
    err : float
        The maximum over the leading axes of the 2-norm of ``m.T @ m - I``.
        nan if `m` contains nan.
    """
    m = numpy.asarray(m)
    q = m.shape[-1]
    gram = numpy.swapaxes(m, -1, -2) @ m - numpy.eye(q)
    gram = gram.reshape((-1, q, q))
    if not numpy.all(numpy.isfinite(gram)):
        return numpy.nan
    return max(linalg.norm(g, 2) for g in gram)

class BasisDiagnostics(Logger):

    def __init__(self, basis, *, atol=1e-6, verbosity=0, raises=False):
        """

        Check the orthogonality of a `HouseholderBasis`.

        Safe to call on concrete results of parallel chains one at a time.
        From several threads at once the values are correct but the
        indentation of the log may be mixed up, see `Logger`.

        Parameters
        ----------
        basis : HouseholderBasis
            The basis to check. Its arrays must be concrete, i.e., this can
            not be used under jit.
        atol : float, default 1e-6
            Tolerance on the 2-norm of ``M.T @ M - I`` for each cumulative
            product M and for the basis.
        verbosity : int, default 0
            An integer indicating how much information is printed:

            0
                Nothing.
            1
                The maximum deviation from orthogonality.
            2
                The deviation of each cumulative product.

            The log is saved anyway and can be retrieved with `getlog`.
        raises : bool, default False
            If True, raise `DegenerateParameterization` when a deviation
            exceeds `atol`, otherwise emit a warning.

        Attributes
        ----------
        product_errors : (Q + 1,) array
            The deviation from orthogonality of each cumulative product.
        basis_error : float
            The deviation from orthonormality of the columns of the basis.
        ok : bool
            Whether all the deviations are within `atol`.

        """
        Logger.__init__(self, verbosity)
        del verbosity

        self.log(f'**** check basis D={basis.D}, Q={basis.Q} ****', 2)

        products = numpy.asarray(basis.products)
        self.product_errors = numpy.array([
            orthogonality_error(products[..., q, :, :])
            for q in range(basis.Q + 1)
        ])
        with self.loglevel:
            for q, err in enumerate(self.product_errors):
                self.log(f'product of {q} reflections: error {err:.2g}', 2)
        self.basis_error = orthogonality_error(basis.U)

        errors = numpy.append(self.product_errors, self.basis_error)
        self.ok = bool(numpy.all(errors <= atol))
        self.log(f'maximum orthogonality error {numpy.max(errors):.2g} '
            f'(atol {atol:.2g})')

        if not self.ok:
            msg = (f'basis not orthonormal within atol={atol:.2g}, '
                f'basis error {self.basis_error:.2g}, product errors '
                f'{numpy.array2string(self.product_errors, precision=2)}')
            if raises:
                raise _errors.DegenerateParameterization(msg)
            else:
                warnings.warn(msg)
