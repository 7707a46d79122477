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

"""General implementation of a generational genetic search."""

import dataclasses
import enum
import logging
import time
from numbers import Real
from typing import Callable, Generic, Iterable, Sequence, TypeVar

import numpy as np
from numpy.random import Generator, default_rng

from genesearch.auxiliary.moreitertools import chunk
from genesearch.auxiliary.progressbars import GenerationProgressBar
from genesearch.evolutionary._search_errors import PopulationEmptyError
from genesearch.evolutionary.chromosomes import Chromosome, ChromosomeFactory
from genesearch.evolutionary.configuration import GeneticSearchConfig
from genesearch.evolutionary.monitor import EvolutionMonitor
from genesearch.moremath.mathutils import normalize_between

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "SearchState",
    "GeneticSearchSolution",
    "GeneticSearch",
    "roulette_wheel"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


# Generic gene type.
GT = TypeVar("GT")

# Normalized fitness given to every individual when all fitness values in
# the population are equal.
EQUAL_FITNESS_NORMALIZED: float = 1.0


@enum.unique
class SearchState(enum.Enum):
    """The states of a genetic search."""

    NOT_STARTED = "not-started"
    SEEDING = "seeding"
    SELECTING = "selecting"
    REPRODUCING = "reproducing"
    REPLACING = "replacing"
    TERMINATED = "terminated"


@dataclasses.dataclass(frozen=True)
class GeneticSearchSolution(Generic[GT]):
    """
    The result of running a genetic search.

    Fields
    ------
    `best_chromosome: Chromosome | None` - The fittest chromosome of the
    final population, None if the population was empty.

    `best_fitness: Real | None` - The fitness of the best chromosome.

    `population: list[Chromosome]` - The final population, in descending
    order of fitness.

    `generations: int` - The number of generations that were run.

    The remaining fields are flags for the stop condition that ended the
    search.
    """

    best_chromosome: Chromosome[GT] | None
    best_fitness: Real | None
    population: list[Chromosome[GT]]
    generations: int
    max_generations_reached: bool = False
    fitness_threshold_reached: bool = False
    stagnation_limit_reached: bool = False
    time_limit_reached: bool = False
    stopped: bool = False

    def __str__(self) -> str:
        """Return a description of the best chromosome and the stop condition."""
        if self.best_chromosome is None:
            return "No solution, the population was empty."
        stop_condition: str = "Unknown"
        if self.max_generations_reached:
            stop_condition = "Maximum generations reached"
        elif self.fitness_threshold_reached:
            stop_condition = "Fitness threshold reached"
        elif self.stagnation_limit_reached:
            stop_condition = "Stagnation limit reached"
        elif self.time_limit_reached:
            stop_condition = "Time limit reached"
        elif self.stopped:
            stop_condition = "Stopped"
        return (f"Best genes: {list(self.best_chromosome.genes)}, "
                f"best fitness: {self.best_fitness}, "
                f"generations: {self.generations}, "
                f"stop condition: {stop_condition}")


class GeneticSearch(Generic[GT]):
    """
    A generational genetic search.

    Algorithm procedure
    -------------------
    1. Seed the initial population with the chromosome factory,

    2. Repeat until a stop condition is reached;

        1. Select individuals to breed with probability proportional to
           their normalized fitness (roulette-wheel selection),

        2. Breed offspring from consecutive pairs of selected individuals and
           mutate them, such that less fit offspring mutate more,

        3. Replace the worst ranked individuals of the population with the
           offspring.

    3. Return the best chromosome.

    Since the best individuals of the current population always survive
    replacement, the best fitness of the population never decreases from one
    generation to the next.

    The search is agnostic to the encoding of chromosomes, all operations that
    depend on the encoding are delegated to the chromosome factory.
    """

    __SEARCH_LOGGER = logging.getLogger("GeneticSearch")

    __slots__ = {
        "__population_size": "The number of individuals in the population.",
        "__max_generation": "The maximum number of generations to run.",
        "__factory": "The chromosome factory.",
        "__generator": "The random number generator used for selection.",
        "__fitness_threshold": "Fitness at which the search stops.",
        "__stagnation_limit": "Generations without improvement before the "
                              "search stops.",
        "__time_limit": "Seconds after which the search stops.",
        "__monitor": "Monitor recording statistics of each generation.",
        "__progress_bar": "Whether to display a progress bar.",
        "__population": "The current population.",
        "__generation": "The number of generations run.",
        "__state": "The current state of the search.",
        "__stop_requested": "Whether a stop has been requested.",
        "__solution": "The solution of the last run."
    }

    def __init__(
        self,
        population_size: int,
        max_generation: int,
        factory: ChromosomeFactory[GT],
        *,
        rng: Generator | int | None = None,
        fitness_threshold: Real | None = None,
        stagnation_limit: int | None = None,
        time_limit: float | None = None,
        monitor: EvolutionMonitor | None = None,
        progress_bar: bool = False
    ) -> None:
        """
        Create a genetic search.

        Parameters
        ----------
        `population_size: int` - The number of individuals in the population.
        A non-positive size gives an empty population.

        `max_generation: int` - The maximum number of generations to run.
        A non-positive value runs no generations.

        `factory: ChromosomeFactory` - The chromosome factory used to seed,
        evaluate, mutate and reproduce chromosomes.

        `rng: Generator | int | None` - Either an random number generator
        instance, or a seed for the search to create its own, None generates
        a random seed. Used only for selection, the factory has its own.

        `fitness_threshold: Real | None = None` - If given, stop once the
        best fitness reaches or exceeds this value.

        `stagnation_limit: int | None = None` - If given, stop once the best
        fitness has not increased for this many generations.

        `time_limit: float | None = None` - If given, stop once the search
        has run for this many seconds.

        `monitor: EvolutionMonitor | None = None` - If given, statistics of
        the population are recorded to it at the start of a run and after
        each generation.

        `progress_bar: bool = False` - Whether to display a progress bar.

        Raises
        ------
        `TypeError` - If the population size or maximum generation is not an
        integer.

        `ValueError` - If the stagnation or time limit is not positive.
        """
        if not isinstance(population_size, int):
            raise TypeError("Population size must be an integer. "
                            f"Got; {population_size!r} of type "
                            f"{type(population_size)}.")
        if not isinstance(max_generation, int):
            raise TypeError("Maximum generation must be an integer. "
                            f"Got; {max_generation!r} of type "
                            f"{type(max_generation)}.")
        if stagnation_limit is not None and stagnation_limit < 1:
            raise ValueError("Stagnation limit must be greater than zero. "
                             f"Got; {stagnation_limit=}.")
        if time_limit is not None and time_limit <= 0.0:
            raise ValueError("Time limit must be greater than zero. "
                             f"Got; {time_limit=}.")

        self.__population_size: int = population_size
        self.__max_generation: int = max_generation
        self.__factory: ChromosomeFactory[GT] = factory
        if isinstance(rng, Generator):
            self.__generator: Generator = rng
        else:
            self.__generator = default_rng(rng)

        self.__fitness_threshold: Real | None = fitness_threshold
        self.__stagnation_limit: int | None = stagnation_limit
        self.__time_limit: float | None = time_limit
        self.__monitor: EvolutionMonitor | None = monitor
        self.__progress_bar: bool = progress_bar

        self.__population: list[Chromosome[GT]] = []
        self.__generation: int = 0
        self.__state: SearchState = SearchState.NOT_STARTED
        self.__stop_requested: bool = False
        self.__solution: GeneticSearchSolution[GT] | None = None

    @classmethod
    def from_config(
        cls,
        config: GeneticSearchConfig,
        factory: ChromosomeFactory[GT],
        rng: Generator | int | None = None,
        monitor: EvolutionMonitor | None = None
    ) -> "GeneticSearch[GT]":
        """
        Create a genetic search from a configuration.

        The mutation and crossover rates of the configuration are owned by
        the chromosome factory, so they must be given to the factory on its
        construction.

        Raises
        ------
        `ValueError` - If the mutation or crossover rate of the factory
        differs from that of the configuration.
        """
        if (factory.mutation_rate != config.mutation_rate
                or factory.crossover_rate != config.crossover_rate):
            raise ValueError(
                "Rates of the chromosome factory must match the "
                f"configuration. Got; {factory.mutation_rate=}, "
                f"{factory.crossover_rate=}, {config.mutation_rate=} and "
                f"{config.crossover_rate=}."
            )
        return cls(
            config.population_size,
            config.max_generation,
            factory,
            rng=rng,
            fitness_threshold=config.fitness_threshold,
            stagnation_limit=config.stagnation_limit,
            time_limit=config.time_limit,
            monitor=monitor,
            progress_bar=config.progress_bar
        )

    @property
    def population_size(self) -> int:
        """Get the number of individuals in the population."""
        return self.__population_size

    @property
    def max_generation(self) -> int:
        """Get the maximum number of generations to run."""
        return self.__max_generation

    @property
    def generation(self) -> int:
        """Get the number of generations run by the current or last run."""
        return self.__generation

    @property
    def factory(self) -> ChromosomeFactory[GT]:
        """Get the chromosome factory."""
        return self.__factory

    @property
    def state(self) -> SearchState:
        """Get the current state of the search."""
        return self.__state

    @property
    def monitor(self) -> EvolutionMonitor | None:
        """Get the evolution monitor, None if not given."""
        return self.__monitor

    @property
    def solution(self) -> GeneticSearchSolution[GT] | None:
        """Get the solution of the last run, None if not yet run."""
        return self.__solution

    @property
    def population(self) -> list[Chromosome[GT]]:
        """Get the current population."""
        return self.__population

    @population.setter
    def population(self, population: Iterable[Chromosome[GT]]) -> None:
        """Replace the current population."""
        self.__population = list(population)

    def generate_initial_population(self) -> None:
        """
        Fill the population with new chromosomes seeded by the factory.

        A non-positive population size gives an empty population.
        """
        self.__state = SearchState.SEEDING
        self.__population = [
            self.__factory.seed()
            for _ in range(max(self.__population_size, 0))
        ]
        self.__SEARCH_LOGGER.info(
            "Seeded initial population of %s individuals.",
            len(self.__population)
        )

    def selection(self) -> list[Chromosome[GT]]:
        """
        Select individuals to breed by roulette-wheel selection.

        Steps
        -----
        1. The population is sorted in descending order of fitness,

        2. The fitness values are normalized, such that the best individual
           has normalized fitness 1 and the worst has 0. If all fitness values
           are equal, all individuals have normalized fitness 1. The value is
           stored in the `normalized_fitness` attribute of the chromosomes,

        3. A random number R is drawn from [0, S), where S is the sum of the
           normalized fitness values,

        4. The selected individual is the first whose accumulated normalized
           fitness (its own plus all those before it) exceeds R,

        5. Steps 3 and 4 are repeated `floor(2 * population_size / 3)` times.

        Individuals are selected with replacement. If S is zero, individuals
        are instead selected with uniform probability.

        Raises
        ------
        `PopulationEmptyError` - If the population is empty.
        """
        if not self.__population:
            raise PopulationEmptyError(
                "Population is empty, it must be seeded before selection."
            )
        self.__state = SearchState.SELECTING
        self.__population.sort(key=lambda chromosome: chromosome.fitness(),
                               reverse=True)

        normalized_fitness = normalize_between(
            (chromosome.fitness() for chromosome in self.__population),
            fallback=EQUAL_FITNESS_NORMALIZED
        )
        for chromosome, value in zip(self.__population, normalized_fitness):
            chromosome.normalized_fitness = value

        quantity: int = max((2 * self.__population_size) // 3, 0)
        indices = roulette_wheel(normalized_fitness, quantity,
                                 self.__generator)
        return [self.__population[index] for index in indices]

    def reproduction(
        self,
        selected: Iterable[Chromosome[GT]]
    ) -> list[Chromosome[GT]]:
        """
        Breed offspring from the selected individuals.

        Consecutive pairs of selected individuals (first with second, third
        with fourth, and so on) are reproduced by the factory into one
        offspring each. A trailing unpaired individual is dropped. Pairs the
        factory cannot reproduce (it returns None) give no offspring.

        Each offspring inherits the mean normalized fitness of its parents,
        and is then given to the factory to be mutated, such that offspring of
        less fit parents are more likely to mutate.
        """
        self.__state = SearchState.REPRODUCING
        offspring: list[Chromosome[GT]] = []
        for parent_1, parent_2 in chunk(list(selected), 2):
            child = self.__factory.reproduce(parent_1, parent_2)
            if child is None:
                continue
            child.normalized_fitness = _inherited_normalized_fitness(
                parent_1, parent_2
            )
            self.__factory.mutate(child)
            offspring.append(child)
        return offspring

    def replace_worst_ranked(
        self,
        offsprings: Iterable[Chromosome[GT] | None]
    ) -> None:
        """
        Replace the worst ranked individuals of the population with the given
        offspring.

        The best `population_size - len(offsprings)` individuals of the
        current population survive, and the new population is sorted in
        descending order of fitness. Any None offspring are ignored.
        """
        self.__state = SearchState.REPLACING
        offsprings = [child for child in offsprings if child is not None]
        survivors: int = max(self.__population_size - len(offsprings), 0)
        self.__population.sort(key=lambda chromosome: chromosome.fitness(),
                               reverse=True)
        population = self.__population[:survivors] + offsprings
        population.sort(key=lambda chromosome: chromosome.fitness(),
                        reverse=True)
        del population[max(self.__population_size, 0):]
        self.__population = population

    def best_chromosome(self) -> Chromosome[GT]:
        """
        Return the chromosome with the highest fitness in the population.

        Raises
        ------
        `PopulationEmptyError` - If the population is empty.
        """
        if not self.__population:
            raise PopulationEmptyError("Population is empty.")
        return max(self.__population,
                   key=lambda chromosome: chromosome.fitness())

    def worst_chromosome(self) -> Chromosome[GT]:
        """
        Return the chromosome with the lowest fitness in the population.

        Raises
        ------
        `PopulationEmptyError` - If the population is empty.
        """
        if not self.__population:
            raise PopulationEmptyError("Population is empty.")
        return min(self.__population,
                   key=lambda chromosome: chromosome.fitness())

    def stop(self) -> None:
        """
        Request the search to stop.

        The search stops before starting its next generation.
        """
        self.__stop_requested = True

    def run(
        self,
        callback: Callable[["GeneticSearch[GT]"], None] | None = None
    ) -> Chromosome[GT] | None:
        """
        Run the genetic search and return the best chromosome.

        The population is seeded if it is empty. Generations are then run
        until the maximum generation is reached, or one of the optional stop
        conditions given on construction is reached, or `stop` is called.

        Parameters
        ----------
        `callback: ((GeneticSearch) -> None) | None = None` - If given, called
        with the search after each generation, it may call `stop`.

        Returns
        -------
        `Chromosome | None` - The best chromosome of the final population,
        None if the population is empty after seeding (i.e. the population
        size is not positive). The full result is available from `solution`.
        """
        self.__generation = 0
        self.__stop_requested = False
        if not self.__population:
            self.generate_initial_population()
        if not self.__population:
            self.__SEARCH_LOGGER.warning(
                "Population is empty after seeding with population size %s, "
                "no generations will be run.",
                self.__population_size
            )
            self.__state = SearchState.TERMINATED
            self.__solution = GeneticSearchSolution(None, None, [], 0)
            return None

        start_time: float = time.monotonic()
        best_fitness: Real = self.best_chromosome().fitness()
        stagnated_generations: int = 0
        if self.__monitor is not None:
            self.__monitor.record_generation(0, self.__population)

        progress_bar = GenerationProgressBar(
            total=max(self.__max_generation, 0),
            disable=not self.__progress_bar
        )
        with progress_bar:
            while (stop_condition := self.__stop_condition(
                    start_time, best_fitness, stagnated_generations)) is None:
                selected = self.selection()
                offspring = self.reproduction(selected)
                self.replace_worst_ranked(offspring)
                self.__generation += 1

                max_fitness: Real = self.best_chromosome().fitness()
                if max_fitness > best_fitness:
                    best_fitness = max_fitness
                    stagnated_generations = 0
                else:
                    stagnated_generations += 1

                self.__SEARCH_LOGGER.debug(
                    "Generation %s: selected=%s, offspring=%s, "
                    "best fitness=%s",
                    self.__generation, len(selected), len(offspring),
                    best_fitness
                )
                if self.__monitor is not None:
                    self.__monitor.record_generation(self.__generation,
                                                     self.__population)
                progress_bar.update(best_fitness=float(best_fitness))
                if callback is not None:
                    callback(self)

        self.__state = SearchState.TERMINATED
        best = self.best_chromosome()
        self.__solution = GeneticSearchSolution(
            best,
            best.fitness(),
            list(self.__population),
            self.__generation,
            max_generations_reached=(stop_condition == "max_generations"),
            fitness_threshold_reached=(stop_condition == "fitness_threshold"),
            stagnation_limit_reached=(stop_condition == "stagnation_limit"),
            time_limit_reached=(stop_condition == "time_limit"),
            stopped=(stop_condition == "stopped")
        )
        self.__SEARCH_LOGGER.info(
            "Search terminated after %s generations (%s), best fitness %s.",
            self.__generation, stop_condition, best.fitness()
        )
        return best

    def __stop_condition(
        self,
        start_time: float,
        best_fitness: Real,
        stagnated_generations: int
    ) -> str | None:
        """Return the name of the stop condition reached, None if none are."""
        if self.__stop_requested:
            return "stopped"
        if (self.__fitness_threshold is not None
                and best_fitness >= self.__fitness_threshold):
            return "fitness_threshold"
        if (self.__stagnation_limit is not None
                and stagnated_generations >= self.__stagnation_limit):
            return "stagnation_limit"
        if (self.__time_limit is not None
                and time.monotonic() - start_time >= self.__time_limit):
            return "time_limit"
        if self.__generation >= self.__max_generation:
            return "max_generations"
        return None


def roulette_wheel(
    weights: Sequence[float],
    quantity: int,
    rng: Generator
) -> np.ndarray:
    """
    Return the indices of the given quantity of weights drawn by roulette
    wheel, with replacement.

    Each draw takes a random number R from [0, S), where S is the sum of the
    weights, and selects the first index whose accumulated weight exceeds R.
    If S is not positive (e.g. all weights are zero), indices are instead
    drawn with uniform probability.
    """
    if quantity <= 0 or len(weights) == 0:
        return np.empty(0, dtype=np.int64)
    accumulated = np.cumsum(weights)
    total: float = float(accumulated[-1])
    if total <= 0.0:
        return rng.integers(len(weights), size=quantity)
    draws = rng.random(quantity) * total
    indices = np.searchsorted(accumulated, draws, side="right")
    return np.minimum(indices, len(weights) - 1)


def _inherited_normalized_fitness(
    parent_1: Chromosome,
    parent_2: Chromosome
) -> float | None:
    """Return the mean normalized fitness of two parents, None if unknown."""
    if parent_1.normalized_fitness is None or parent_2.normalized_fitness is None:
        return None
    return (parent_1.normalized_fitness + parent_2.normalized_fitness) / 2.0
