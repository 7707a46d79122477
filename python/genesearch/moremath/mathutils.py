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

"""Module defining various math utility functions."""

from typing import Iterable, TypeVar

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "0.0.1"

__all__ = (
    "normalize_between",
    "clamp"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


_NT = TypeVar("_NT", float, int)


def normalize_between(
    iterable: Iterable[_NT],
    lower: float = 0.0,
    upper: float = 1.0,
    fallback: float | None = None
) -> list[float]:
    """
    Linearly rescale an iterable of numbers such that its minimum maps to
    `lower` and its maximum maps to `upper`.

    If all the numbers are equal then the range is degenerate, and every
    number maps to `fallback` (which defaults to `upper`).
    """
    list_: list[_NT] = (
        list(iterable)
        if not isinstance(iterable, list)
        else iterable
    )
    if not list_:
        return []
    min_: float = min(list_)
    max_: float = max(list_)
    min_max_range: float = max_ - min_
    if min_max_range <= 0:
        if fallback is None:
            fallback = upper
        return [float(fallback)] * len(list_)
    lower_upper_range: float = upper - lower
    return [
        lower
        + (lower_upper_range
           * ((item - min_)
              / min_max_range))
        for item in list_
    ]


def clamp(value: _NT, min_: _NT, max_: _NT) -> _NT:
    """Clamp a value to the given range (inclusive)."""
    return max(min_, min(value, max_))
