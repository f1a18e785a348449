"""
Neuroevolution loop: every generation flies the whole population through a
fresh cave and scores each genome by the distance its copter covered.

Progress is published through NEAT's reporter protocol
(neat.reporting.ReporterSet), so any neat BaseReporter can listen in:

    start_generation(generation)
    post_evaluate(config, population, species, best_genome)   # species is None
    found_solution(config, generation, best)
    end_generation(config, population, species_set)           # species_set is None
"""

import contextlib
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np
from neat.reporting import BaseReporter, ReporterSet

from .game import Game
from .mathutil import mean, moving_average, pstdev
from .network import Network
from .population import Individual, Population
from .strategy import network_control


@dataclass(frozen=True)
class EvolutionStats:
    generation: int
    best: float
    average: float
    stdev: float
    moving_average: float


class FitnessHistory(BaseReporter):
    """Keeps per-generation fitness statistics (best, average, moving average of best)."""

    def __init__(self, window=10):
        self.window = window
        self.generation = None
        self.stats = []

    def start_generation(self, generation):
        self.generation = generation

    def post_evaluate(self, config, population, species, best_genome):
        fitnesses = population.fitnesses
        best_so_far = [s.best for s in self.stats] + [best_genome.fitness]
        self.stats.append(EvolutionStats(
            generation=self.generation,
            best=best_genome.fitness,
            average=mean(fitnesses),
            stdev=pstdev(fitnesses),
            moving_average=moving_average(best_so_far, self.window),
        ))

    @property
    def latest(self):
        return self.stats[-1] if self.stats else None


class SimpleReporter(BaseReporter):
    """Prints clean per-generation info to stdout."""

    def __init__(self, history=None):
        self.history = history
        self.generation = None
        self.start_time = None

    def start_generation(self, generation):
        self.generation = generation
        self.start_time = time.time()
        print(f"\n ****** Running generation {generation} ****** \n")

    def post_evaluate(self, config, population, species, best_genome):
        fitnesses = population.fitnesses
        print(f"Population's average fitness: {mean(fitnesses):.5f} stdev: {pstdev(fitnesses):.5f}")
        print(f"Best fitness: {best_genome.fitness:.5f} - genome length: {len(best_genome.genome)}")
        if self.history is not None and self.history.latest is not None:
            print(f"Moving average of best fitness: {self.history.latest.moving_average:.5f}")

    def found_solution(self, config, generation, best):
        print(f"\nBest fitness {best.fitness:.2f} reached the threshold in generation {generation}")

    def end_generation(self, config, population, species_set):
        if self.start_time is not None:
            dur = time.time() - self.start_time
            print(f"Generation time: {dur:.3f} sec")

    def info(self, msg):
        print(msg)


class Evolution:
    """Drives episodes, harvests fitness and advances the population."""

    def __init__(self, config, rng=None, population=None):
        if rng is None:
            rng = np.random.default_rng(config.training.seed)
        self.config = config
        self.rng = rng
        self.population = population if population is not None else Population.from_config(config.genetic, rng)
        self.generation = 0
        self.best = None  # best individual seen in any generation
        self.game = None

        self.reporters = ReporterSet()
        self.history = FitnessHistory(config.training.moving_average_window)
        self.reporters.add(self.history)

    def add_reporter(self, reporter):
        self.reporters.add(reporter)

    def decode(self, genome):
        network = Network.from_genome(genome, self.config.genetic.layer_sizes)
        return network_control(network, self.config.genetic.look_ahead)

    def evaluate(self, executor=None, on_tick=None):
        """Fly every genome once; returns the distances in population order."""
        controls = [self.decode(genome) for genome in self.population.genomes]
        self.game = Game(self.config, self.rng, controls=controls, executor=executor)
        finished = self.game.run(
            self.config.training.tick_ms,
            max_ticks=self.config.training.max_ticks,
            on_tick=on_tick,
        )
        if not finished:
            self.reporters.info(
                f"Generation {self.generation}: episode capped after {self.game.tick} ticks"
            )
        return self.game.distances

    def solved(self, best):
        threshold = self.config.training.fitness_threshold
        return threshold is not None and best.fitness >= threshold

    def run_generation(self, executor=None, on_tick=None):
        """Evaluate, report and breed one generation. Returns True once solved."""
        self.reporters.start_generation(self.generation)

        self.population.set_fitnesses(self.evaluate(executor=executor, on_tick=on_tick))
        best = self.population.best()
        if self.best is None or best.fitness > self.best.fitness:
            self.best = Individual(best.genome.copy(), best.fitness)

        self.reporters.post_evaluate(self.config, self.population, None, best)

        if self.solved(best):
            self.reporters.found_solution(self.config, self.generation, best)
            return True

        self.population.generation_step()
        self.reporters.end_generation(self.config, self.population, None)
        self.generation += 1
        return False

    def run(self, n=None, on_tick=None):
        """
        Run up to `n` generations (forever if None), stopping early when the
        best fitness reaches the configured threshold. Returns the best
        individual seen.
        """
        workers = self.config.training.workers
        if workers > 0:
            pool = ThreadPoolExecutor(max_workers=workers)
        else:
            pool = contextlib.nullcontext()

        with pool as executor:
            k = 0
            while n is None or k < n:
                k += 1
                if self.run_generation(executor=executor, on_tick=on_tick):
                    break
        return self.best

    @property
    def stats(self):
        return self.history.stats

    def champion_control(self):
        """Control source flying the best genome found so far."""
        if self.best is None:
            raise RuntimeError("no generation has been evaluated yet")
        return self.decode(self.best.genome)
