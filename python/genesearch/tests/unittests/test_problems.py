
import unittest

import numpy as np

from genesearch.evolutionary.problems import (BitStringCrossover,
                                              BitStringFactory, CostMatrix,
                                              PermutationCrossover,
                                              PermutationMutation,
                                              RealValuedFactory,
                                              TravellingSalesmanFactory)

COSTS = [[0, 10, 15],
         [10, 0, 20],
         [15, 20, 0]]


def random_costs(cities: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    costs = rng.integers(1, 100, size=(cities, cities))
    np.fill_diagonal(costs, 0)
    return costs


class TestCostMatrix(unittest.TestCase):
    def test_path_cost(self):
        matrix = CostMatrix(COSTS)
        self.assertEqual(matrix.path_cost([0, 1, 2]), 30)
        self.assertEqual(matrix.path_cost([2, 0, 1]), 25)

    def test_path_cost_short_routes(self):
        matrix = CostMatrix(COSTS)
        self.assertEqual(matrix.path_cost([]), 0)
        self.assertEqual(matrix.path_cost([1]), 0)

    def test_getitem(self):
        matrix = CostMatrix(COSTS)
        self.assertEqual(matrix[1, 2], 20)
        self.assertEqual(len(matrix), 3)

    def test_immutable(self):
        matrix = CostMatrix(COSTS)
        with self.assertRaises(ValueError):
            np.asarray(matrix)[0, 1] = 99

    def test_array_copy(self):
        matrix = CostMatrix(COSTS)
        copy_ = np.array(matrix, copy=True)
        copy_[0, 1] = 99
        self.assertEqual(matrix[0, 1], 10)
        self.assertFalse(np.shares_memory(copy_, np.asarray(matrix)))

    def test_not_square(self):
        with self.assertRaises(ValueError):
            CostMatrix([[0, 1, 2], [1, 0, 2]])
        with self.assertRaises(ValueError):
            CostMatrix([0, 1, 2])

    def test_not_numeric(self):
        with self.assertRaises(TypeError):
            CostMatrix([["a", "b"], ["c", "d"]])


class TestTravellingSalesmanFactory(unittest.TestCase):
    def test_fitness_is_negated_cost(self):
        factory = TravellingSalesmanFactory(COSTS, rng=1)
        self.assertEqual(factory.create([0, 1, 2]).fitness(), -30)

    def test_single_city(self):
        factory = TravellingSalesmanFactory([[0]], rng=1)
        self.assertEqual(factory.create([0]).fitness(), 0)
        self.assertEqual(factory.seed().genes, (0,))

    def test_seed_is_permutation(self):
        factory = TravellingSalesmanFactory(random_costs(10, 0), rng=2)
        for _ in range(20):
            self.assertEqual(sorted(factory.seed().genes), list(range(10)))

    def test_reproduce_identical_parents(self):
        factory = TravellingSalesmanFactory(COSTS, rng=3)
        parent = factory.create([0, 1, 2])
        child = factory.reproduce(parent, parent.copy())
        self.assertEqual(child.genes, (0, 1, 2))

    def test_reproduce_preserves_permutation(self):
        factory = TravellingSalesmanFactory(random_costs(12, 1),
                                            crossover_rate=0.5, rng=4)
        for _ in range(50):
            parent_1 = factory.seed()
            parent_2 = factory.seed()
            genes_1 = parent_1.genes
            genes_2 = parent_2.genes
            child = factory.reproduce(parent_1, parent_2)
            self.assertEqual(sorted(child.genes), list(range(12)))
            self.assertEqual(child.genes[0], genes_1[0])
            self.assertEqual(parent_1.genes, genes_1)
            self.assertEqual(parent_2.genes, genes_2)

    def test_reproduce_empty_parent(self):
        factory = TravellingSalesmanFactory(COSTS, rng=5)
        empty = factory.create([])
        self.assertIsNone(factory.reproduce(empty, factory.seed()))
        self.assertIsNone(factory.reproduce(factory.seed(), empty))

    def test_mutate_swaps_adjacent(self):
        factory = TravellingSalesmanFactory(random_costs(8, 2),
                                            mutation_rate=1.0, rng=6)
        chromosome = factory.create(range(8))
        chromosome.normalized_fitness = 0.0
        factory.mutate(chromosome)
        self.assertEqual(sorted(chromosome.genes), list(range(8)))
        differences = [index for index, gene in enumerate(chromosome.genes)
                       if gene != index]
        self.assertEqual(len(differences), 2)
        self.assertEqual(differences[1] - differences[0], 1)

    def test_fittest_never_mutates(self):
        factory = TravellingSalesmanFactory(random_costs(8, 3),
                                            mutation_rate=1.0, rng=7)
        chromosome = factory.create(range(8))
        chromosome.normalized_fitness = 1.0
        for _ in range(20):
            factory.mutate(chromosome)
        self.assertEqual(chromosome.genes, tuple(range(8)))

    def test_mutate_short_route(self):
        factory = TravellingSalesmanFactory([[0]], mutation_rate=1.0, rng=8)
        chromosome = factory.create([0])
        chromosome.normalized_fitness = 0.0
        factory.mutate(chromosome)
        self.assertEqual(chromosome.genes, (0,))


class TestPermutationOperators(unittest.TestCase):
    def test_default_operators(self):
        factory = TravellingSalesmanFactory(COSTS)
        self.assertIs(factory.crossover, PermutationCrossover.edge_recombination)
        self.assertIs(factory.mutation, PermutationMutation.adjacent_swap)

    def test_operator_names(self):
        factory = TravellingSalesmanFactory(COSTS, crossover="cycle",
                                            mutation="scramble")
        self.assertIs(factory.crossover, PermutationCrossover.cycle)
        self.assertIs(factory.mutation, PermutationMutation.scramble)
        with self.assertRaises(ValueError):
            TravellingSalesmanFactory(COSTS, crossover="partially_mapped")

    def test_crossovers_preserve_permutation(self):
        for crossover in PermutationCrossover:
            factory = TravellingSalesmanFactory(random_costs(12, 5),
                                                crossover_rate=1.0, rng=9,
                                                crossover=crossover)
            for _ in range(50):
                child = factory.reproduce(factory.seed(), factory.seed())
                self.assertEqual(sorted(child.genes), list(range(12)))

    def test_mutations_preserve_permutation(self):
        for mutation in PermutationMutation:
            factory = TravellingSalesmanFactory(random_costs(12, 6),
                                                mutation_rate=1.0, rng=10,
                                                mutation=mutation)
            chromosome = factory.seed()
            for _ in range(50):
                chromosome.normalized_fitness = 0.0
                factory.mutate(chromosome)
                self.assertEqual(sorted(chromosome.genes), list(range(12)))

    def test_inversion_reverses_segment(self):
        factory = TravellingSalesmanFactory(random_costs(10, 7),
                                            mutation_rate=1.0, rng=11,
                                            mutation="inversion")
        chromosome = factory.create(range(10))
        chromosome.normalized_fitness = 0.0
        factory.mutate(chromosome)
        changed = [index for index, gene in enumerate(chromosome.genes)
                   if gene != index]
        start = changed[0]
        end = changed[-1]
        self.assertEqual(list(chromosome.genes[start:end + 1]),
                         list(range(end, start - 1, -1)))

    def test_order_crossover_keeps_relative_order(self):
        factory = TravellingSalesmanFactory(random_costs(9, 8),
                                            crossover_rate=1.0, rng=12,
                                            crossover="order")
        parent_1 = factory.create(range(9))
        parent_2 = factory.create(reversed(range(9)))
        for _ in range(20):
            child = factory.reproduce(parent_1, parent_2)
            self.assertEqual(sorted(child.genes), list(range(9)))
            segment = [index for index, gene in enumerate(child.genes)
                       if gene == index]
            self.assertTrue(segment)

    def test_cycle_crossover_keeps_positions(self):
        factory = TravellingSalesmanFactory(random_costs(8, 9),
                                            crossover_rate=1.0, rng=13,
                                            crossover="cycle")
        parent_1 = factory.create([0, 1, 2, 3, 4, 5, 6, 7])
        parent_2 = factory.create([1, 0, 3, 2, 5, 4, 7, 6])
        child = factory.reproduce(parent_1, parent_2)
        self.assertEqual(child.genes, (0, 1, 3, 2, 4, 5, 7, 6))
        for index, gene in enumerate(child.genes):
            self.assertIn(gene, (parent_1[index], parent_2[index]))

    def test_no_crossover_copies_first_parent(self):
        for crossover in ("order", "cycle"):
            factory = TravellingSalesmanFactory(random_costs(6, 10),
                                                crossover_rate=0.0, rng=14,
                                                crossover=crossover)
            parent_1 = factory.seed()
            child = factory.reproduce(parent_1, factory.seed())
            self.assertEqual(child.genes, parent_1.genes)

    def test_mismatched_parents(self):
        factory = TravellingSalesmanFactory(COSTS, rng=15, crossover="order")
        with self.assertRaises(ValueError):
            factory.reproduce(factory.create([0, 1, 2]), factory.create([0, 1]))


class TestBitStringFactory(unittest.TestCase):
    def test_seed(self):
        factory = BitStringFactory(16, rng=1)
        chromosome = factory.seed()
        self.assertEqual(len(chromosome), 16)
        self.assertTrue(set(chromosome.genes) <= {0, 1})

    def test_onemax_fitness(self):
        factory = BitStringFactory(4, rng=1)
        self.assertEqual(factory.create([1, 0, 1, 1]).fitness(), 3)

    def test_custom_fitness(self):
        factory = BitStringFactory(4, fitness_function=lambda bits: -sum(bits))
        self.assertEqual(factory.create([1, 1, 0, 0]).fitness(), -2)

    def test_mutate_flips_all_bits(self):
        factory = BitStringFactory(6, mutation_rate=1.0, rng=2)
        chromosome = factory.create([1, 0, 1, 0, 1, 0])
        chromosome.normalized_fitness = 0.0
        factory.mutate(chromosome)
        self.assertEqual(chromosome.genes, (0, 1, 0, 1, 0, 1))

    def test_reproduce_without_crossover(self):
        factory = BitStringFactory(4, crossover_rate=0.0, rng=3)
        child = factory.reproduce(factory.create([1, 1, 1, 1]),
                                  factory.create([0, 0, 0, 0]))
        self.assertEqual(child.genes, (1, 1, 1, 1))

    def test_reproduce_single_point(self):
        factory = BitStringFactory(8, crossover_rate=1.0, rng=4)
        for _ in range(20):
            child = factory.reproduce(factory.create([1] * 8),
                                      factory.create([0] * 8))
            point = child.genes.index(0)
            self.assertGreaterEqual(point, 1)
            self.assertEqual(child.genes, (1,) * point + (0,) * (8 - point))

    def test_reproduce_two_point(self):
        factory = BitStringFactory(10, crossover_rate=1.0, rng=5,
                                   crossover=BitStringCrossover.two_point)
        for _ in range(20):
            child = factory.reproduce(factory.create([1] * 10),
                                      factory.create([0] * 10))
            start = child.genes.index(0)
            end = start + child.genes[start:].index(1)
            self.assertGreaterEqual(start, 1)
            self.assertEqual(child.genes,
                             (1,) * start + (0,) * (end - start)
                             + (1,) * (10 - end))

    def test_reproduce_two_point_short(self):
        factory = BitStringFactory(2, crossover_rate=1.0, rng=6,
                                   crossover="two_point")
        child = factory.reproduce(factory.create([1, 1]),
                                  factory.create([0, 0]))
        self.assertEqual(child.genes, (1, 0))

    def test_reproduce_uniform(self):
        factory = BitStringFactory(64, crossover_rate=1.0, rng=7,
                                   crossover="uniform")
        child = factory.reproduce(factory.create([1] * 64),
                                  factory.create([0] * 64))
        self.assertEqual(len(child), 64)
        self.assertIn(0, child.genes)
        self.assertIn(1, child.genes)

    def test_reproduce_uniform_mismatched_lengths(self):
        factory = BitStringFactory(2, rng=8, crossover="uniform")
        with self.assertRaises(ValueError):
            factory.reproduce(factory.create([0, 1]), factory.create([1]))

    def test_invalid_length(self):
        with self.assertRaises(ValueError):
            BitStringFactory(0)
        with self.assertRaises(ValueError):
            BitStringFactory(4, crossover="three_point")


class TestRealValuedFactory(unittest.TestCase):
    def test_seed_within_bounds(self):
        factory = RealValuedFactory(5, -2.0, 2.0, sum, rng=1)
        for _ in range(20):
            self.assertTrue(all(-2.0 <= gene <= 2.0
                                for gene in factory.seed().genes))

    def test_mutate_stays_within_bounds(self):
        factory = RealValuedFactory(3, 0.0, 1.0, sum, mutation_strength=10.0,
                                    mutation_rate=1.0, rng=2)
        chromosome = factory.create([0.5, 0.5, 0.5])
        for _ in range(20):
            chromosome.normalized_fitness = 0.0
            factory.mutate(chromosome)
            self.assertTrue(all(0.0 <= gene <= 1.0
                                for gene in chromosome.genes))
        self.assertNotEqual(chromosome.genes, (0.5, 0.5, 0.5))

    def test_reproduce_uniform(self):
        factory = RealValuedFactory(10, 0.0, 1.0, sum, crossover_rate=0.5,
                                    rng=3)
        child = factory.reproduce(factory.create([0.0] * 10),
                                  factory.create([1.0] * 10))
        self.assertEqual(len(child), 10)
        self.assertTrue(set(child.genes) <= {0.0, 1.0})

    def test_reproduce_mismatched_lengths(self):
        factory = RealValuedFactory(2, 0.0, 1.0, sum, rng=4)
        with self.assertRaises(ValueError):
            factory.reproduce(factory.create([0.0, 0.0]),
                              factory.create([0.0]))

    def test_invalid_bounds(self):
        with self.assertRaises(ValueError):
            RealValuedFactory(2, 1.0, 1.0, sum)
        with self.assertRaises(ValueError):
            RealValuedFactory(2, 0.0, 1.0, sum, mutation_strength=0.0)


if __name__ == "__main__":
    unittest.main()
