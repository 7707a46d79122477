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

"""Module defining monitoring of the progress of genetic searches."""

import dataclasses
import logging
from typing import Sequence

import numpy as np

from genesearch.auxiliary.moreitertools import count_unique
from genesearch.evolutionary.chromosomes import Chromosome

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "GenerationStatistics",
    "EvolutionMonitor"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


@dataclasses.dataclass(frozen=True)
class GenerationStatistics:
    """
    Statistics of the population of one generation.

    Fields
    ------
    `generation: int` - The generation the statistics were recorded at.

    `population_size: int` - The number of individuals in the population.

    `best_fitness: float` - The highest fitness in the population.

    `worst_fitness: float` - The lowest fitness in the population.

    `mean_fitness: float` - The mean fitness of the population.

    `median_fitness: float` - The median fitness of the population.

    `fitness_std: float` - The standard deviation of fitness.

    `diversity: float` - The fraction of individuals with a unique genome,
    in the range (0, 1].
    """

    generation: int
    population_size: int
    best_fitness: float
    worst_fitness: float
    mean_fitness: float
    median_fitness: float
    fitness_std: float
    diversity: float


class EvolutionMonitor:
    """
    Records statistics of the population of a genetic search at each
    generation, and detects convergence of the best fitness.
    """

    __MONITOR_LOGGER = logging.getLogger("EvolutionMonitor")

    __slots__ = {
        "__history": "List of recorded generation statistics."
    }

    def __init__(self) -> None:
        """Create an evolution monitor with an empty history."""
        self.__history: list[GenerationStatistics] = []

    def __len__(self) -> int:
        """Return the number of recorded generations."""
        return len(self.__history)

    @property
    def history(self) -> list[GenerationStatistics]:
        """Get a copy of the recorded statistics in order of recording."""
        return list(self.__history)

    @property
    def best_fitness_evolution(self) -> list[float]:
        """Get the best fitness of each recorded generation."""
        return [stats.best_fitness for stats in self.__history]

    @property
    def average_fitness_evolution(self) -> list[float]:
        """Get the mean fitness of each recorded generation."""
        return [stats.mean_fitness for stats in self.__history]

    @property
    def diversity_evolution(self) -> list[float]:
        """Get the diversity of each recorded generation."""
        return [stats.diversity for stats in self.__history]

    def record_generation(
        self,
        generation: int,
        population: Sequence[Chromosome]
    ) -> GenerationStatistics | None:
        """
        Record the statistics of the given population.

        Empty populations are not recorded and None is returned, otherwise
        the recorded statistics are returned.
        """
        if not population:
            return None
        fitness = np.array([individual.fitness() for individual in population],
                           dtype=float)
        stats = GenerationStatistics(
            generation=generation,
            population_size=len(population),
            best_fitness=float(fitness.max()),
            worst_fitness=float(fitness.min()),
            mean_fitness=float(fitness.mean()),
            median_fitness=float(np.median(fitness)),
            fitness_std=float(fitness.std()),
            diversity=(count_unique(individual.genes
                                    for individual in population)
                       / len(population))
        )
        self.__history.append(stats)
        self.__MONITOR_LOGGER.debug(
            "Generation %s: best=%s, mean=%s, diversity=%s",
            generation, stats.best_fitness, stats.mean_fitness,
            stats.diversity
        )
        return stats

    def converged(
        self,
        last_n: int = 10,
        tolerance: float = 1e-6
    ) -> bool:
        """
        Whether the best fitness has changed by less than the tolerance over
        the last n recorded generations.

        Returns False if fewer than n generations have been recorded.
        """
        if last_n < 1:
            raise ValueError(f"Last n must be greater than zero. Got; {last_n=}.")
        if len(self.__history) < last_n:
            return False
        recent = self.best_fitness_evolution[-last_n:]
        return (max(recent) - min(recent)) < tolerance

    def summary(self) -> str:
        """Return a readable summary of the recorded evolution."""
        if not self.__history:
            return "No evolution data recorded."
        first = self.__history[0]
        last = self.__history[-1]
        mean_std = sum(stats.fitness_std for stats in self.__history) \
            / len(self.__history)
        return "\n".join([
            "Evolution Summary",
            "=================",
            f"Generations recorded: {len(self.__history)}",
            f"Initial best fitness: {first.best_fitness:.4f}",
            f"Final best fitness: {last.best_fitness:.4f}",
            f"Improvement: {last.best_fitness - first.best_fitness:.4f}",
            f"Final diversity: {last.diversity:.4f}",
            f"Average fitness std: {mean_std:.4f}"
        ])

    def clear(self) -> None:
        """Clear the recorded history."""
        self.__history.clear()
