
import unittest

from genesearch.evolutionary.configuration import (GeneticSearchConfig,
                                                   GeneticSearchPresets)


class TestGeneticSearchConfig(unittest.TestCase):
    def test_defaults(self):
        config = GeneticSearchConfig()
        self.assertEqual(config.population_size, 50)
        self.assertEqual(config.max_generation, 100)
        self.assertEqual(config.mutation_rate, 0.3)
        self.assertEqual(config.crossover_rate, 0.4)
        self.assertIsNone(config.fitness_threshold)
        self.assertFalse(config.progress_bar)

    def test_invalid_values(self):
        with self.assertRaises(TypeError):
            GeneticSearchConfig(population_size=1.5)
        with self.assertRaises(ValueError):
            GeneticSearchConfig(mutation_rate=2.0)
        with self.assertRaises(ValueError):
            GeneticSearchConfig(crossover_rate=-1.0)
        with self.assertRaises(ValueError):
            GeneticSearchConfig(stagnation_limit=0)
        with self.assertRaises(ValueError):
            GeneticSearchConfig(time_limit=-1.0)

    def test_non_positive_sizes_allowed(self):
        config = GeneticSearchConfig(population_size=0, max_generation=-1)
        self.assertEqual(config.population_size, 0)

    def test_from_mapping(self):
        config = GeneticSearchConfig.from_mapping(
            {"population_size": 10, "time_limit": 5.0})
        self.assertEqual(config.population_size, 10)
        self.assertEqual(config.time_limit, 5.0)
        with self.assertRaises(KeyError):
            GeneticSearchConfig.from_mapping({"populationsize": 10})

    def test_with_changes(self):
        config = GeneticSearchConfig()
        changed = config.with_changes(max_generation=7)
        self.assertEqual(changed.max_generation, 7)
        self.assertEqual(config.max_generation, 100)

    def test_as_dict(self):
        self.assertEqual(GeneticSearchConfig().as_dict()["population_size"], 50)

    def test_str(self):
        self.assertIn("Population size: 50", str(GeneticSearchConfig()))


class TestGeneticSearchPresets(unittest.TestCase):
    def test_preset_values(self):
        expected = {
            "default": (50, 100, 0.01, 0.8, 10),
            "exploration": (100, 200, 0.1, 0.7, 20),
            "exploitation": (30, 50, 0.005, 0.9, 5),
            "balanced": (75, 150, 0.02, 0.85, 15)
        }
        for name, values in expected.items():
            config = GeneticSearchPresets.get(name)
            self.assertEqual((config.population_size, config.max_generation,
                              config.mutation_rate, config.crossover_rate,
                              config.stagnation_limit), values)
            self.assertIsNone(config.fitness_threshold)
            self.assertIsNone(config.time_limit)

    def test_get(self):
        self.assertIs(GeneticSearchPresets.get("balanced"),
                      GeneticSearchPresets.balanced.value)

    def test_unknown_preset(self):
        with self.assertRaises(KeyError):
            GeneticSearchPresets.get("greedy")


if __name__ == "__main__":
    unittest.main()
