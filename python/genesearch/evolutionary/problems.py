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
Module defining chromosome factories for common problem encodings.

Three encodings are provided;
    - Permutation encoding for the travelling salesman problem,
    - Bit-string encoding, by default for the OneMax problem,
    - Real-valued encoding over a bounded range, for continuous problems.
"""

__all__ = (
    "CostMatrix",
    "PermutationCrossover",
    "PermutationMutation",
    "BitStringCrossover",
    "TravellingSalesmanFactory",
    "BitStringFactory",
    "RealValuedFactory"
)

import enum
from numbers import Real
from typing import Callable, Iterator, Sequence

import numpy as np
import numpy.typing as npt
from numpy.random import Generator
from typing_extensions import override

from genesearch.evolutionary.chromosomes import Chromosome, ChromosomeFactory
from genesearch.moremath.mathutils import clamp


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


class CostMatrix:
    """
    Class defining an immutable square matrix of travel costs between cities.

    The cost of travelling from city `i` to city `j` is at row `i` and
    column `j`, cities are identified by their index.
    """

    __slots__ = {
        "__costs": "The read-only matrix of costs."
    }

    def __init__(self, costs: npt.ArrayLike) -> None:
        """
        Create a new cost matrix from a nested sequence or array of costs.

        Raises
        ------
        `ValueError` - If the costs are not a square two-dimensional matrix.

        `TypeError` - If the costs are not numeric.
        """
        array = np.array(costs)
        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise ValueError("Cost matrix must be square and two-dimensional. "
                             f"Got; shape={array.shape}.")
        if array.size != 0 and not np.issubdtype(array.dtype, np.number):
            raise TypeError("Cost matrix must contain numbers. "
                            f"Got; dtype={array.dtype}.")
        array.setflags(write=False)
        self.__costs: np.ndarray = array

    def __str__(self) -> str:
        """Return a string representation of the matrix."""
        return str(self.__costs)

    def __len__(self) -> int:
        """Return the number of cities."""
        return len(self.__costs)

    def __iter__(self) -> Iterator[np.ndarray]:
        """Iterate over the rows of the matrix."""
        return iter(self.__costs)

    def __getitem__(self, key: tuple[int, int]) -> Real:
        """Return the cost of travelling between the given pair of cities."""
        return self.__costs[key].item()

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        """
        Return the matrix as a numpy array.

        The array is read-only and shared with the matrix, unless a copy is
        requested or a different data type is given.
        """
        if dtype is not None:
            return self.__costs.astype(dtype)
        if copy:
            return self.__costs.copy()
        return self.__costs

    def path_cost(self, route: Sequence[int]) -> Real:
        """
        Return the total cost of visiting the cities of the given route in
        order, without returning to the first city.
        """
        if len(route) < 2:
            return 0
        indices = np.asarray(route)
        return self.__costs[indices[:-1], indices[1:]].sum().item()


@enum.unique
class PermutationCrossover(enum.Enum):
    """
    Recombination operators for permutation encodings.

    Items
    -----
    `edge_recombination` - Builds the route by following the successors of
    each city in the parents, so that adjacency is inherited.

    `order` - Order crossover (OX). Copies a random segment of the first
    parent, and fills the remaining positions with the missing cities in the
    order they appear in the second parent.

    `cycle` - Cycle crossover (CX). Every city keeps the position it has in
    one of the parents, the parents alternate between the position cycles.
    """

    edge_recombination = "edge_recombination"
    order = "order"
    cycle = "cycle"


@enum.unique
class PermutationMutation(enum.Enum):
    """
    Mutation operators for permutation encodings.

    Items
    -----
    `adjacent_swap` - Swaps a random pair of adjacent genes.

    `inversion` - Reverses the order of a random segment of genes.

    `scramble` - Shuffles a random segment of genes.
    """

    adjacent_swap = "adjacent_swap"
    inversion = "inversion"
    scramble = "scramble"


@enum.unique
class BitStringCrossover(enum.Enum):
    """
    Recombination operators for bit-string encodings.

    Items
    -----
    `single_point` - The head of the first parent and the tail of the second,
    split at one random point.

    `two_point` - The first parent with a random middle segment taken from
    the second parent.

    `uniform` - Each bit is taken from either parent with equal probability.
    """

    single_point = "single_point"
    two_point = "two_point"
    uniform = "uniform"


class TravellingSalesmanFactory(ChromosomeFactory[int]):
    """
    Chromosome factory for the travelling salesman problem.

    Chromosomes are permutations of the city indices of a cost matrix, their
    fitness is the negated cost of the route, such that shorter routes are
    fitter. All the mutation and recombination operators preserve
    permutations.
    """

    __slots__ = {
        "__cost_matrix": "The cost matrix of the problem.",
        "__crossover": "The recombination operator.",
        "__mutation": "The mutation operator."
    }

    def __init__(
        self,
        cost_matrix: CostMatrix | npt.ArrayLike,
        mutation_rate: float = 0.3,
        crossover_rate: float = 0.4,
        rng: Generator | int | None = None,
        *,
        crossover: PermutationCrossover | str = (
            PermutationCrossover.edge_recombination),
        mutation: PermutationMutation | str = PermutationMutation.adjacent_swap
    ) -> None:
        """
        Create a travelling salesman chromosome factory.

        Parameters
        ----------
        `cost_matrix: CostMatrix | ArrayLike` - The costs of travelling
        between each pair of cities.

        `mutation_rate: float = 0.3` - The probability that the least fit
        chromosome in a population is mutated.

        `crossover_rate: float = 0.4` - For edge recombination, the
        probability that the roles of the two parents are swapped after each
        step. For order and cycle crossover, the probability that crossover
        is applied, otherwise offspring are copies of the first parent.

        `rng: Generator | int | None` - Either an random number generator
        instance, or a seed for the factory to create its own, None generates
        a random seed.

        `crossover: PermutationCrossover | str = "edge_recombination"` - The
        recombination operator, or its name.

        `mutation: PermutationMutation | str = "adjacent_swap"` - The
        mutation operator, or its name.

        Raises
        ------
        `ValueError` - If the operator names are not known.
        """
        super().__init__(mutation_rate, crossover_rate, rng)
        if not isinstance(cost_matrix, CostMatrix):
            cost_matrix = CostMatrix(cost_matrix)
        self.__cost_matrix: CostMatrix = cost_matrix
        self.__crossover = PermutationCrossover(crossover)
        self.__mutation = PermutationMutation(mutation)

    @property
    def crossover(self) -> PermutationCrossover:
        """Get the recombination operator."""
        return self.__crossover

    @property
    def mutation(self) -> PermutationMutation:
        """Get the mutation operator."""
        return self.__mutation

    @property
    def cost_matrix(self) -> CostMatrix:
        """Get the cost matrix of the problem."""
        return self.__cost_matrix

    @property
    def cities(self) -> int:
        """Get the number of cities."""
        return len(self.__cost_matrix)

    @override
    def seed(self) -> Chromosome[int]:
        """Return a chromosome visiting all cities in a random order."""
        return self.create(self.generator.permutation(self.cities).tolist())

    @override
    def evaluate_fitness(self, genes: tuple[int, ...]) -> Real:
        """Return the negated cost of the route."""
        return -self.__cost_matrix.path_cost(genes)

    @override
    def mutate(self, chromosome: Chromosome[int]) -> None:
        """
        Possibly mutate the route with the mutation operator, routes with
        fewer than two cities are never mutated.
        """
        genes = list(chromosome.genes)
        if len(genes) < 2:
            return
        if self.generator.random() >= self.mutation_probability(chromosome):
            return
        if self.__mutation is PermutationMutation.adjacent_swap:
            index = int(self.generator.integers(len(genes) - 1))
            genes[index], genes[index + 1] = genes[index + 1], genes[index]
        else:
            start, end = sorted(
                self.generator.choice(len(genes), size=2, replace=False)
            )
            segment = genes[start:end + 1]
            if self.__mutation is PermutationMutation.inversion:
                segment.reverse()
            else:
                segment = [segment[index]
                           for index in self.generator.permutation(len(segment))]
            genes[start:end + 1] = segment
        chromosome.genes = genes

    @override
    def reproduce(
        self,
        parent_1: Chromosome[int],
        parent_2: Chromosome[int]
    ) -> Chromosome[int] | None:
        """
        Return an offspring recombined from the parents by the recombination
        operator, or None if either parent is empty.

        Raises
        ------
        `ValueError` - If order or cycle crossover is used and the parents
        have different lengths.
        """
        if not parent_1.genes or not parent_2.genes:
            return None
        if self.__crossover is PermutationCrossover.edge_recombination:
            return self.create(self.__edge_recombination(parent_1.genes,
                                                         parent_2.genes))
        if len(parent_1) != len(parent_2):
            raise ValueError("Parents must have the same number of genes. "
                             f"Got; {len(parent_1)} and {len(parent_2)}.")
        if self.generator.random() >= self.crossover_rate:
            return self.create(parent_1.genes)
        if self.__crossover is PermutationCrossover.order:
            return self.create(self.__order_crossover(parent_1.genes,
                                                      parent_2.genes))
        return self.create(self.__cycle_crossover(parent_1.genes,
                                                  parent_2.genes))

    def __order_crossover(
        self,
        genes_1: tuple[int, ...],
        genes_2: tuple[int, ...]
    ) -> list[int]:
        """
        Copy a random segment of the first parent, then fill the positions
        after it (wrapping around) with the missing cities in the order they
        appear in the second parent, starting after the segment.
        """
        length: int = len(genes_1)
        start, end = sorted(int(index)
                            for index in self.generator.integers(length,
                                                                 size=2))
        route: list[int | None] = [None] * length
        route[start:end + 1] = genes_1[start:end + 1]
        used: set[int] = set(genes_1[start:end + 1])
        positions = [(end + 1 + offset) % length
                     for offset in range(length - (end - start + 1))]
        cities = (genes_2[(end + 1 + offset) % length]
                  for offset in range(length))
        missing = (city for city in cities if city not in used)
        for position, city in zip(positions, missing):
            route[position] = city
        return route

    @staticmethod
    def __cycle_crossover(
        genes_1: tuple[int, ...],
        genes_2: tuple[int, ...]
    ) -> list[int]:
        """
        Split the positions into the cycles formed by the parents, and take
        the cities of alternate cycles from alternate parents.
        """
        position_in_1: dict[int, int] = {
            city: index for index, city in enumerate(genes_1)
        }
        route: list[int | None] = [None] * len(genes_1)
        filled: list[bool] = [False] * len(genes_1)
        from_first: bool = True
        for start in range(len(genes_1)):
            if filled[start]:
                continue
            source = genes_1 if from_first else genes_2
            index = start
            while not filled[index]:
                route[index] = source[index]
                filled[index] = True
                index = position_in_1[genes_2[index]]
            from_first = not from_first
        return route

    def __edge_recombination(
        self,
        genes_1: tuple[int, ...],
        genes_2: tuple[int, ...]
    ) -> list[int]:
        """
        The route starts at the first city of the first parent. The next city
        is the successor of the current city in the other parent if it has
        not been visited yet, otherwise its successor in the current parent,
        otherwise a random unvisited city. After each step the roles of the
        parents are swapped with probability equal to the crossover rate.
        """
        current: dict[int, int] = dict(zip(genes_1, genes_1[1:]))
        other: dict[int, int] = dict(zip(genes_2, genes_2[1:]))

        city: int = genes_1[0]
        unvisited: dict[int, None] = dict.fromkeys(range(self.cities))
        unvisited.pop(city, None)
        route: list[int] = [city]
        while unvisited:
            next_city = other.get(city)
            if next_city not in unvisited:
                next_city = current.get(city)
                if next_city not in unvisited:
                    next_city = list(unvisited)[
                        int(self.generator.integers(len(unvisited)))
                    ]
            city = next_city
            del unvisited[city]
            route.append(city)
            if self.generator.random() < self.crossover_rate:
                current, other = other, current
        return route


class BitStringFactory(ChromosomeFactory[int]):
    """
    Chromosome factory for bit-string encodings.

    Chromosomes are fixed length lists of zeros and ones. Unless a fitness
    function is given, fitness is the number of ones (the OneMax problem).
    """

    __slots__ = {
        "__length": "The number of bits in a chromosome.",
        "__fitness_function": "Function evaluating the fitness of the bits.",
        "__crossover": "The recombination operator."
    }

    def __init__(
        self,
        length: int,
        fitness_function: Callable[[tuple[int, ...]], Real] | None = None,
        mutation_rate: float = 0.3,
        crossover_rate: float = 0.4,
        rng: Generator | int | None = None,
        *,
        crossover: BitStringCrossover | str = BitStringCrossover.single_point
    ) -> None:
        """
        Create a bit-string chromosome factory.

        Parameters
        ----------
        `length: int` - The number of bits in a chromosome.

        `fitness_function: ((tuple[int, ...]) -> Real) | None = None` - The
        fitness function, None counts the number of ones.

        `mutation_rate: float = 0.3` - The probability that each bit of the
        least fit chromosome in a population is flipped.

        `crossover_rate: float = 0.4` - The probability that offspring are
        produced by crossover, otherwise offspring are copies of the first
        parent.

        `rng: Generator | int | None` - Either an random number generator
        instance, or a seed for the factory to create its own, None generates
        a random seed.

        `crossover: BitStringCrossover | str = "single_point"` - The
        recombination operator, or its name.

        Raises
        ------
        `ValueError` - If the length is not positive, or the operator name is
        not known.
        """
        super().__init__(mutation_rate, crossover_rate, rng)
        self.__crossover = BitStringCrossover(crossover)
        if not isinstance(length, int) or length < 1:
            raise ValueError("Length must be an integer greater than zero. "
                             f"Got; {length} of type {type(length)}.")
        self.__length: int = length
        self.__fitness_function = fitness_function

    @property
    def length(self) -> int:
        """Get the number of bits in a chromosome."""
        return self.__length

    @property
    def crossover(self) -> BitStringCrossover:
        """Get the recombination operator."""
        return self.__crossover

    @override
    def seed(self) -> Chromosome[int]:
        """Return a chromosome of random bits."""
        return self.create(
            self.generator.integers(0, 2, size=self.__length).tolist()
        )

    @override
    def evaluate_fitness(self, genes: tuple[int, ...]) -> Real:
        """Return the fitness of the bits."""
        if self.__fitness_function is not None:
            return self.__fitness_function(genes)
        return sum(genes)

    @override
    def mutate(self, chromosome: Chromosome[int]) -> None:
        """Flip each bit with probability given by `mutation_probability`."""
        flips = (self.generator.random(len(chromosome))
                 < self.mutation_probability(chromosome))
        if flips.any():
            chromosome.genes = [
                1 - bit if flip else bit
                for bit, flip in zip(chromosome.genes, flips)
            ]

    @override
    def reproduce(
        self,
        parent_1: Chromosome[int],
        parent_2: Chromosome[int]
    ) -> Chromosome[int] | None:
        """
        Return an offspring recombined from the parents by the recombination
        operator, or None if either parent is empty.

        Two-point crossover of fewer than three bits falls back to
        single-point crossover.

        Raises
        ------
        `ValueError` - If uniform crossover is used and the parents have
        different lengths.
        """
        if not parent_1.genes or not parent_2.genes:
            return None
        if (self.__crossover is BitStringCrossover.uniform
                and len(parent_1) != len(parent_2)):
            raise ValueError("Parents must have the same number of genes. "
                             f"Got; {len(parent_1)} and {len(parent_2)}.")
        if (len(parent_1) < 2
                or self.generator.random() >= self.crossover_rate):
            return self.create(parent_1.genes)
        genes_1 = parent_1.genes
        genes_2 = parent_2.genes
        if self.__crossover is BitStringCrossover.uniform:
            choices = self.generator.random(len(genes_1)) < 0.5
            return self.create(
                bit_2 if choice_ else bit_1
                for bit_1, bit_2, choice_ in zip(genes_1, genes_2, choices)
            )
        if (self.__crossover is BitStringCrossover.two_point
                and len(genes_1) >= 3):
            start, end = sorted(
                int(point) for point in self.generator.choice(
                    np.arange(1, len(genes_1)), size=2, replace=False
                )
            )
            return self.create(
                genes_1[:start] + genes_2[start:end] + genes_1[end:]
            )
        point = int(self.generator.integers(1, len(genes_1)))
        return self.create(genes_1[:point] + genes_2[point:])


class RealValuedFactory(ChromosomeFactory[float]):
    """
    Chromosome factory for real-valued encodings over a bounded range.

    Genes are uniformly seeded from the range, recombined by uniform gene
    swapping, and mutated by adding Gaussian noise (creep mutation) clamped
    to the range.
    """

    __slots__ = {
        "__length": "The number of genes in a chromosome.",
        "__lower": "The lower bound of a gene.",
        "__upper": "The upper bound of a gene.",
        "__fitness_function": "Function evaluating the fitness of the genes.",
        "__mutation_strength": "Standard deviation of mutation noise."
    }

    def __init__(
        self,
        length: int,
        lower: float,
        upper: float,
        fitness_function: Callable[[tuple[float, ...]], Real],
        mutation_strength: float = 1.0,
        mutation_rate: float = 0.3,
        crossover_rate: float = 0.4,
        rng: Generator | int | None = None
    ) -> None:
        """
        Create a real-valued chromosome factory.

        Parameters
        ----------
        `length: int` - The number of genes in a chromosome.

        `lower: float` - The lower bound of a gene (inclusive).

        `upper: float` - The upper bound of a gene (inclusive).

        `fitness_function: (tuple[float, ...]) -> Real` - The fitness
        function.

        `mutation_strength: float = 1.0` - The standard deviation of the
        noise added to a mutated gene.

        `mutation_rate: float = 0.3` - The probability that one gene of the
        least fit chromosome in a population is mutated.

        `crossover_rate: float = 0.4` - The probability that each gene of an
        offspring comes from the second parent.

        `rng: Generator | int | None` - Either an random number generator
        instance, or a seed for the factory to create its own, None generates
        a random seed.
        """
        super().__init__(mutation_rate, crossover_rate, rng)
        if not isinstance(length, int) or length < 1:
            raise ValueError("Length must be an integer greater than zero. "
                             f"Got; {length} of type {type(length)}.")
        if lower >= upper:
            raise ValueError("Lower bound must be less than upper bound. "
                             f"Got; {lower=} and {upper=}.")
        if mutation_strength <= 0.0:
            raise ValueError("Mutation strength must be greater than zero. "
                             f"Got; {mutation_strength=}.")
        self.__length: int = length
        self.__lower: float = lower
        self.__upper: float = upper
        self.__fitness_function = fitness_function
        self.__mutation_strength: float = mutation_strength

    @property
    def bounds(self) -> tuple[float, float]:
        """Get the lower and upper bounds of a gene."""
        return (self.__lower, self.__upper)

    @override
    def seed(self) -> Chromosome[float]:
        """Return a chromosome of genes drawn uniformly from the bounds."""
        return self.create(
            self.generator.uniform(
                self.__lower, self.__upper, size=self.__length
            ).tolist()
        )

    @override
    def evaluate_fitness(self, genes: tuple[float, ...]) -> Real:
        """Return the fitness of the genes."""
        return self.__fitness_function(genes)

    @override
    def mutate(self, chromosome: Chromosome[float]) -> None:
        """Possibly add Gaussian noise to one random gene."""
        if len(chromosome) == 0:
            return
        if self.generator.random() < self.mutation_probability(chromosome):
            genes = list(chromosome.genes)
            index = int(self.generator.integers(len(genes)))
            noise = float(self.generator.normal(0.0, self.__mutation_strength))
            genes[index] = clamp(genes[index] + noise,
                                 self.__lower, self.__upper)
            chromosome.genes = genes

    @override
    def reproduce(
        self,
        parent_1: Chromosome[float],
        parent_2: Chromosome[float]
    ) -> Chromosome[float] | None:
        """Return an offspring made by uniform swapping of the parents' genes."""
        if not parent_1.genes or not parent_2.genes:
            return None
        if len(parent_1) != len(parent_2):
            raise ValueError("Parents must have the same number of genes. "
                             f"Got; {len(parent_1)} and {len(parent_2)}.")
        choices = self.generator.random(len(parent_1)) < self.crossover_rate
        return self.create(
            gene_2 if choice_ else gene_1
            for gene_1, gene_2, choice_ in zip(
                parent_1.genes, parent_2.genes, choices
            )
        )
