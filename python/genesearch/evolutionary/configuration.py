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

"""Module defining configurations and presets for genetic searches."""

import dataclasses
import enum
from typing import Any, Mapping

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "GeneticSearchConfig",
    "GeneticSearchPresets"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


@dataclasses.dataclass(frozen=True)
class GeneticSearchConfig:
    """
    Configuration of a genetic search.

    Fields
    ------
    `population_size: int = 50` - The number of individuals in the
    population. Non-positive sizes are allowed and give an empty population.

    `max_generation: int = 100` - The number of generations to run.
    Non-positive values run no generations.

    `mutation_rate: float = 0.3` - Scalar of the mutation probability. The
    chromosome factory owns the rate, so it must be created with this value.

    `crossover_rate: float = 0.4` - Probability used by the recombination
    operator. The chromosome factory owns the rate, so it must be created
    with this value.

    `fitness_threshold: float | None = None` - Stop once the best fitness
    reaches or exceeds this value.

    `stagnation_limit: int | None = None` - Stop once the best fitness has
    not increased for this many generations.

    `time_limit: float | None = None` - Stop once the search has run for
    this many seconds.

    `progress_bar: bool = False` - Whether to display a progress bar.
    """

    population_size: int = 50
    max_generation: int = 100
    mutation_rate: float = 0.3
    crossover_rate: float = 0.4
    fitness_threshold: float | None = None
    stagnation_limit: int | None = None
    time_limit: float | None = None
    progress_bar: bool = False

    def __post_init__(self) -> None:
        """Check that the configuration is valid."""
        if not isinstance(self.population_size, int):
            raise TypeError("Population size must be an integer. "
                            f"Got; {self.population_size!r} of type "
                            f"{type(self.population_size)}.")
        if not isinstance(self.max_generation, int):
            raise TypeError("Maximum generation must be an integer. "
                            f"Got; {self.max_generation!r} of type "
                            f"{type(self.max_generation)}.")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError("Mutation rate must be between 0.0 and 1.0. "
                             f"Got; {self.mutation_rate=}.")
        if not 0.0 <= self.crossover_rate <= 1.0:
            raise ValueError("Crossover rate must be between 0.0 and 1.0. "
                             f"Got; {self.crossover_rate=}.")
        if self.stagnation_limit is not None and self.stagnation_limit < 1:
            raise ValueError("Stagnation limit must be greater than zero. "
                             f"Got; {self.stagnation_limit=}.")
        if self.time_limit is not None and self.time_limit <= 0.0:
            raise ValueError("Time limit must be greater than zero. "
                             f"Got; {self.time_limit=}.")

    def __str__(self) -> str:
        """Return a readable multi-line description of the configuration."""
        return "\n".join(
            f"{field.name.replace('_', ' ').capitalize()}: "
            f"{getattr(self, field.name)}"
            for field in dataclasses.fields(self)
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "GeneticSearchConfig":
        """
        Create a configuration from a mapping of field names to values.

        Raises
        ------
        `KeyError` - If the mapping contains an unknown field name.
        """
        names = {field.name for field in dataclasses.fields(cls)}
        unknown = set(mapping) - names
        if unknown:
            raise KeyError("Unknown configuration parameters: "
                           f"{', '.join(sorted(unknown))}.")
        return cls(**mapping)

    def with_changes(self, **changes: Any) -> "GeneticSearchConfig":
        """Return a copy of the configuration with the given changes."""
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        """Return the configuration as a dictionary."""
        return dataclasses.asdict(self)


@enum.unique
class GeneticSearchPresets(enum.Enum):
    """
    Pre-defined configurations for genetic searches.

    Items
    -----
    `default` - A moderate population run for a moderate number of
    generations.

    `exploration` - A large population with a high mutation rate, for
    searching widely across the search space.

    `exploitation` - A small population with a low mutation rate, for
    converging quickly around the best solutions found.

    `balanced` - A trade-off between exploration and exploitation.
    """

    default = GeneticSearchConfig(
        population_size=50,
        max_generation=100,
        mutation_rate=0.01,
        crossover_rate=0.8,
        stagnation_limit=10
    )
    exploration = GeneticSearchConfig(
        population_size=100,
        max_generation=200,
        mutation_rate=0.1,
        crossover_rate=0.7,
        stagnation_limit=20
    )
    exploitation = GeneticSearchConfig(
        population_size=30,
        max_generation=50,
        mutation_rate=0.005,
        crossover_rate=0.9,
        stagnation_limit=5
    )
    balanced = GeneticSearchConfig(
        population_size=75,
        max_generation=150,
        mutation_rate=0.02,
        crossover_rate=0.85,
        stagnation_limit=15
    )

    @classmethod
    def get(cls, name: str) -> GeneticSearchConfig:
        """
        Return the configuration of the preset with the given name.

        Raises
        ------
        `KeyError` - If there is no preset with the given name.
        """
        return cls[name].value
