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

"""Module defining a CLI progress bar for generational loops."""

import os
from types import TracebackType

import psutil
from tqdm import tqdm

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"

__all__ = (
    "GenerationProgressBar",
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


class GenerationProgressBar:
    """
    Class defining a tqdm based progress bar for generational loops, which
    displays the current best fitness alongside memory and CPU usage.

    Resource usage is sampled when the bar is updated, i.e. once per
    generation, so no background thread is needed.
    """

    __slots__ = {
        "__process": "Process used for getting resource usage statistics.",
        "__progress_bar": "The progress bar itself."
    }

    def __init__(
        self,
        total: int | None = None,
        desc: str | None = "Generations",
        leave: bool = False,
        disable: bool = False,
        colour: str = "cyan"
    ) -> None:
        """
        Create a generation progress bar.

        See `tqdm.tqdm` for a description of parameters.
        """
        self.__process = psutil.Process(os.getpid())
        self.__progress_bar = tqdm(
            total=total,
            desc=desc,
            unit="gen",
            leave=leave,
            disable=disable,
            colour=colour
        )

    def __enter__(self) -> "GenerationProgressBar":
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None
    ) -> None:
        self.close()

    def __get_mem(self) -> str:
        """Get current memory usage in megabytes."""
        memory = self.__process.memory_info().rss / (1024 ** 2)
        return str(int(memory)).zfill(5)

    def __get_cpu(self) -> str:
        """Get cpu usage in percent."""
        return format(self.__process.cpu_percent(), "0.2f").zfill(6)

    @property
    def n(self) -> int:
        """Get the current progress bar value."""
        return self.__progress_bar.n

    def update(
        self,
        n: int = 1, /,
        best_fitness: float | None = None
    ) -> None:
        """
        Update the progress bar.

        Parameters
        ----------
        `n: int = 1` - The number of generations ran since the last update.

        `best_fitness: float | None = None` - The best fitness found so far,
        None leaves it out of the postfix.
        """
        postfix = {
            "Mem(Mb)": self.__get_mem(),
            "CPU(%)": self.__get_cpu()
        }
        if best_fitness is not None:
            postfix = {"Best fitness": f"{best_fitness:.4f}"} | postfix
        self.__progress_bar.set_postfix(postfix)
        self.__progress_bar.update(n)

    def close(self) -> None:
        """Close the progress bar."""
        self.__progress_bar.close()
