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

"""Module defining additional functions for operating on iterables."""

__all__ = (
    "chunk",
    "count_unique"
)

from typing import Hashable, Iterable, Iterator, Sequence, TypeVar

_VT = TypeVar("_VT")


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


def chunk(
    sequence: Sequence[_VT],
    size: int,
    quantity: int | None = None
) -> Iterator[tuple[_VT, ...]]:
    """
    Yield an iterator over the size and quantity of chunks of the sequence.

    If quantity is not given or None, then as many complete chunks as fit in
    the sequence are yielded, and any trailing elements that do not fill a
    complete chunk are dropped.
    """
    if size < 1:
        raise ValueError(f"Chunk size must be greater than zero. Got; {size=}.")
    if quantity is not None:
        if size * quantity > len(sequence):
            raise ValueError("Size and quantity are too large. "
                             f"Got; size={size}, quantity={quantity}, "
                             f"sequence length={len(sequence)}.")
    else:
        quantity = len(sequence) // size
    yield from (
        tuple(sequence[index:index + size])
        for index in range(0, quantity * size, size)
    )


def count_unique(iterable: Iterable[Hashable]) -> int:
    """Return the number of distinct elements of an iterable."""
    return len(set(iterable))
