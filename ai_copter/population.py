"""
Genetic algorithm over flat network genomes.

One generation step is always selection -> crossover -> mutation:

- Selection keeps the best floor(size * retained_fraction) individuals.
  Individuals are ranked by fitness, highest first; equal fitness keeps the
  current order (the sort is stable), so earlier individuals win ties.
- Crossover refills the population. Every child comes from a distinct
  ordered pair of retained parents (parent A, parent B); the child takes A's
  genes before the cut and B's genes from the cut on, where
  cut = floor(crossover_fraction * genome_length). Children start at fitness 0.
- Mutation perturbs every gene of every individual with probability
  mutation_probability by a uniform amount in [-mutation_scale, mutation_scale].
"""

import math
from dataclasses import dataclass

import numpy as np

from .errors import ConstructionError, DimensionError
from .mathutil import k_unique_pairs
from .network import flatten, he_init


@dataclass
class Individual:
    genome: np.ndarray
    fitness: float = 0.0


class Population:

    def __init__(self, genomes, rng, retained_fraction=0.2, crossover_fraction=0.5,
                 mutation_probability=0.05, mutation_scale=0.1, fitnesses=None):
        genomes = [np.asarray(g, dtype=float) for g in genomes]
        if not genomes:
            raise ConstructionError("a population needs at least one genome")
        length = genomes[0].shape
        if any(g.ndim != 1 or g.shape != length for g in genomes):
            raise DimensionError("all genomes must be flat vectors of the same length")
        for name, value in (("retained_fraction", retained_fraction),
                            ("crossover_fraction", crossover_fraction),
                            ("mutation_probability", mutation_probability)):
            if not 0.0 <= value <= 1.0:
                raise ConstructionError(f"{name} must lie in [0, 1], got {value}")

        if fitnesses is None:
            fitnesses = [0.0] * len(genomes)
        if len(fitnesses) != len(genomes):
            raise DimensionError("one fitness value per genome is required")

        self.individuals = [Individual(g, float(f)) for g, f in zip(genomes, fitnesses)]
        self.rng = rng
        self.retained_fraction = retained_fraction
        self.crossover_fraction = crossover_fraction
        self.mutation_probability = mutation_probability
        self.mutation_scale = mutation_scale
        self.generation = 0

    @classmethod
    def random(cls, size, layer_sizes, rng, **kwargs):
        """Population of freshly initialized networks."""
        genomes = [flatten(he_init(layer_sizes, rng)) for _ in range(size)]
        return cls(genomes, rng, **kwargs)

    @classmethod
    def from_config(cls, config, rng):
        return cls.random(
            config.population_size,
            config.layer_sizes,
            rng,
            retained_fraction=config.retained_fraction,
            crossover_fraction=config.crossover_fraction,
            mutation_probability=config.mutation_probability,
            mutation_scale=config.mutation_scale,
        )

    def __len__(self):
        return len(self.individuals)

    def __iter__(self):
        return iter(self.individuals)

    @property
    def size(self):
        return len(self.individuals)

    @property
    def genome_length(self):
        return self.individuals[0].genome.shape[0]

    @property
    def genomes(self):
        return [ind.genome for ind in self.individuals]

    @property
    def fitnesses(self):
        return [ind.fitness for ind in self.individuals]

    def set_fitnesses(self, fitnesses):
        fitnesses = list(fitnesses)
        if len(fitnesses) != len(self.individuals):
            raise DimensionError(
                f"got {len(fitnesses)} fitness values for {len(self.individuals)} individuals"
            )
        for ind, fitness in zip(self.individuals, fitnesses):
            ind.fitness = float(fitness)

    def ranked(self):
        """Individuals by fitness, best first; ties keep population order."""
        return sorted(self.individuals, key=lambda ind: ind.fitness, reverse=True)

    def best(self):
        return self.ranked()[0]

    def retained_count(self):
        return math.floor(self.size * self.retained_fraction)

    def select(self):
        return self.ranked()[:self.retained_count()]

    def crossover_point(self):
        return math.floor(self.crossover_fraction * self.genome_length)

    def crossover(self, parents, count):
        """Produce `count` children from distinct ordered parent pairs."""
        cut = self.crossover_point()
        children = []
        for i, j in k_unique_pairs(len(parents), count, self.rng, ordered=True):
            a = parents[i].genome
            b = parents[j].genome
            children.append(Individual(np.concatenate([a[:cut], b[cut:]]), 0.0))
        return children

    def mutate(self, individuals):
        for ind in individuals:
            shape = ind.genome.shape
            mask = self.rng.random(shape) < self.mutation_probability
            noise = self.rng.uniform(-self.mutation_scale, self.mutation_scale, size=shape)
            ind.genome = ind.genome + np.where(mask, noise, 0.0)

    def generation_step(self):
        """Replace the population with the next generation (same size)."""
        size = self.size
        parents = self.select()
        offspring = self.crossover(parents, size - len(parents))
        # Survivors get their own objects so later mutation never touches shared state
        survivors = [Individual(p.genome.copy(), p.fitness) for p in parents]
        individuals = survivors + offspring
        self.mutate(individuals)

        self.individuals = individuals
        self.generation += 1
        return self
