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

"""
Module defining chromosomes and the chromosome factory contract used by
genetic searches.

A chromosome is the encoded representation of a candidate solution (its
genotype) together with its fitness. A chromosome factory knows how to seed,
evaluate, mutate and reproduce chromosomes of one particular encoding, and is
handed to a genetic search which is otherwise agnostic to the encoding.
"""

from abc import ABCMeta, abstractmethod
from numbers import Real
from typing import Any, Callable, Generic, Iterable, TypeVar

from numpy.random import Generator, default_rng

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "Chromosome",
    "ChromosomeFactory"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


# Generic gene type.
GT = TypeVar("GT", bound=Any)


class Chromosome(Generic[GT]):
    """
    Class defining chromosomes.

    The genes of a chromosome are stored as a tuple, and the only way to
    change them is to assign a new sequence to `genes`. Fitness is evaluated
    lazily on first access and memoized until the genes are reassigned, such
    that it is always a pure function of the current genes.

    `normalized_fitness` is written by the selection phase of a genetic
    search, it is None until the chromosome has been through one.
    """

    __slots__ = {
        "__genes": "The sequence of genes.",
        "__evaluator": "Function evaluating the fitness of the genes.",
        "__fitness": "The memoized fitness, None if not yet evaluated.",
        "normalized_fitness": "Fitness rescaled to [0, 1] within the "
                              "population at the last selection."
    }

    def __init__(
        self,
        genes: Iterable[GT],
        evaluator: Callable[[tuple[GT, ...]], Real]
    ) -> None:
        """
        Create a chromosome.

        Parameters
        ----------
        `genes: Iterable[GT]` - The genes of the chromosome.

        `evaluator: (tuple[GT, ...]) -> Real` - A function returning the
        fitness of a sequence of genes, higher fitness is better.
        """
        self.__genes: tuple[GT, ...] = tuple(genes)
        self.__evaluator: Callable[[tuple[GT, ...]], Real] = evaluator
        self.__fitness: Real | None = None
        self.normalized_fitness: float | None = None

    def __repr__(self) -> str:
        """Return a description of the genes and fitness of the chromosome."""
        return (f"{self.__class__.__name__}(genes={list(self.__genes)!r}, "
                f"fitness={self.fitness()!r})")

    def __len__(self) -> int:
        """Return the number of genes in the chromosome."""
        return len(self.__genes)

    def __getitem__(self, index: int) -> GT:
        """Return the gene at the given index."""
        return self.__genes[index]

    @property
    def genes(self) -> tuple[GT, ...]:
        """Get the genes of the chromosome."""
        return self.__genes

    @genes.setter
    def genes(self, genes: Iterable[GT]) -> None:
        """Replace the genes of the chromosome, discarding memoized fitness."""
        self.__genes = tuple(genes)
        self.__fitness = None

    @property
    def is_evaluated(self) -> bool:
        """Whether the fitness of the current genes has been evaluated."""
        return self.__fitness is not None

    def fitness(self) -> Real:
        """Return the fitness of the chromosome, evaluating it if needed."""
        if self.__fitness is None:
            self.__fitness = self.__evaluator(self.__genes)
        return self.__fitness

    def copy(self) -> "Chromosome[GT]":
        """
        Return a new chromosome with the same genes, sharing the memoized
        fitness but not the normalized fitness.
        """
        chromosome = Chromosome(self.__genes, self.__evaluator)
        chromosome.__fitness = self.__fitness
        return chromosome


class ChromosomeFactory(Generic[GT], metaclass=ABCMeta):
    """
    Base class for chromosome factories.

    A chromosome factory defines one genetic encoding of a problem. It is
    responsible for; seeding random chromosomes for an initial population,
    evaluating the fitness of genes, and the two genetic operators that
    depend on the encoding, recombination (`reproduce`) and `mutate`. The
    designer must ensure that these operators only ever produce chromosomes
    that are valid in the encoding, e.g. that a permutation stays a
    permutation.

    Any configuration a problem needs (e.g. a cost matrix) is given to the
    factory on construction, such that several problems can be searched
    independently at the same time.
    """

    __slots__ = {
        "__generator": "The random number generator.",
        "__mutation_rate": "Scalar of the probability of mutation.",
        "__crossover_rate": "Probability used by the recombination operator."
    }

    def __init__(
        self,
        mutation_rate: float = 0.3,
        crossover_rate: float = 0.4,
        rng: Generator | int | None = None
    ) -> None:
        """
        Super constructor for chromosome factories.

        Parameters
        ----------
        `mutation_rate: float = 0.3` - The probability that the least fit
        chromosome in a population is mutated. The fittest chromosome is
        never mutated, and the probability is linear in normalized fitness
        in between, see `mutation_probability`.

        `crossover_rate: float = 0.4` - A probability used by the
        recombination operator, its exact meaning depends on the encoding.

        `rng: Generator | int | None` - Either an random number generator
        instance, or a seed for the factory to create its own, None generates
        a random seed.

        Raises
        ------
        `ValueError` - If either rate is not in the range [0, 1].
        """
        if not 0.0 <= mutation_rate <= 1.0:
            raise ValueError("Mutation rate must be between 0.0 and 1.0. "
                             f"Got; {mutation_rate=}.")
        if not 0.0 <= crossover_rate <= 1.0:
            raise ValueError("Crossover rate must be between 0.0 and 1.0. "
                             f"Got; {crossover_rate=}.")
        self.__mutation_rate: float = mutation_rate
        self.__crossover_rate: float = crossover_rate
        if isinstance(rng, Generator):
            self.__generator: Generator = rng
        else:
            self.__generator = default_rng(rng)

    @property
    def generator(self) -> Generator:
        """Get the random number generator used by the factory."""
        return self.__generator

    @property
    def mutation_rate(self) -> float:
        """Get the mutation rate."""
        return self.__mutation_rate

    @property
    def crossover_rate(self) -> float:
        """Get the crossover rate."""
        return self.__crossover_rate

    def create(self, genes: Iterable[GT]) -> Chromosome[GT]:
        """Create a chromosome with the given genes evaluated by this factory."""
        return Chromosome(genes, self.evaluate_fitness)

    def mutation_probability(self, chromosome: Chromosome[GT]) -> float:
        """
        Return the probability that the given chromosome is mutated.

        This is `(1 - normalized_fitness) * mutation_rate`, such that fitter
        chromosomes mutate less. A chromosome that has never been normalized
        is never mutated.
        """
        if chromosome.normalized_fitness is None:
            return 0.0
        return (1.0 - chromosome.normalized_fitness) * self.__mutation_rate

    @abstractmethod
    def seed(self) -> Chromosome[GT]:
        """Return a new chromosome with randomly generated genes."""
        ...

    @abstractmethod
    def evaluate_fitness(self, genes: tuple[GT, ...]) -> Real:
        """Return the fitness of the given genes, higher is better."""
        ...

    @abstractmethod
    def mutate(self, chromosome: Chromosome[GT]) -> None:
        """
        Possibly mutate the genes of the given chromosome in place.

        Implementations should mutate with probability given by
        `mutation_probability`.
        """
        ...

    @abstractmethod
    def reproduce(
        self,
        parent_1: Chromosome[GT],
        parent_2: Chromosome[GT]
    ) -> Chromosome[GT] | None:
        """
        Return a new offspring chromosome recombined from the given parents,
        or None if either parent has no genes.

        The parents must not be modified.
        """
        ...
