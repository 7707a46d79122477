###############################################################################
# Copyright (C) 2023 Oliver Michael Kamperis
# Email: olliekampo@gmail.com
#
# This program is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free Software
# Foundation, either version 3 of the License, or any later version.
#
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE. See the GNU General Public License for details.
#
# You should have received a copy of the GNU General Public License along with
# this program. If not, see <https://www.gnu.org/licenses/>.

"""Module defining the errors raised by genetic searches."""

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "GeneticSearchError",
    "PopulationEmptyError"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


class GeneticSearchError(Exception):
    """Base class for all errors raised by genetic searches."""
    pass


class PopulationEmptyError(GeneticSearchError):
    """
    Raised when an operation needs at least one individual in the population
    but the population is empty, i.e. it has not been seeded yet or was
    created with a non-positive size.
    """
    pass
