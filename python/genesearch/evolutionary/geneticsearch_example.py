import logging

import numpy as np

from genesearch.evolutionary.configuration import GeneticSearchPresets
from genesearch.evolutionary.geneticsearch import GeneticSearch
from genesearch.evolutionary.monitor import EvolutionMonitor
from genesearch.evolutionary.problems import (BitStringFactory, CostMatrix,
                                              RealValuedFactory,
                                              TravellingSalesmanFactory)

logging.basicConfig(level=logging.INFO)

# Travelling salesman over random points on a plane.
points = np.random.default_rng(0).uniform(0.0, 100.0, size=(15, 2))
costs = CostMatrix(np.linalg.norm(points[:, None] - points[None, :], axis=-1))

config = GeneticSearchPresets.get("balanced").with_changes(progress_bar=True)
factory = TravellingSalesmanFactory(costs, config.mutation_rate,
                                    config.crossover_rate, rng=1,
                                    crossover="order", mutation="inversion")
monitor = EvolutionMonitor()
search = GeneticSearch.from_config(config, factory, rng=1, monitor=monitor)
search.run()
print(search.solution)
print(monitor.summary())

# Bit-string matching an alternating pattern.
factory = BitStringFactory(
    20,
    lambda bits: sum(1 for i, bit in enumerate(bits) if bit == i % 2),
    rng=2
)
search = GeneticSearch(100, 200, factory, rng=2,
                       fitness_threshold=20, stagnation_limit=25)
best = search.run()
print(best.genes, best.fitness())

# Minimise the sphere function.
factory = RealValuedFactory(3, -10.0, 10.0,
                            lambda genes: -sum(gene ** 2 for gene in genes),
                            mutation_strength=0.5, rng=3)
search = GeneticSearch(50, 100, factory, rng=3)
best = search.run()
print(f"\nBest position :: {[round(gene, 3) for gene in best.genes]}")
