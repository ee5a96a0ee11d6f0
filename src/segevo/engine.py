from __future__ import annotations

import logging
import math
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

import numpy as np

from segevo.core.individual import Individual, Population
from segevo.core.termination import MaxGenerationsTermination, TerminationCondition

# ---------------------------------------------------------------------------
# Engine config & stats
# ---------------------------------------------------------------------------


@dataclass
class GAConfig:
    population_size: int = 50
    elitism: int = 2
    crossover_rate: float = 0.9
    mutation_rate: float = 0.05  # per pixel
    tournament_size: int = 3
    generation_limit: int | None = 100  # None => caller supplies a termination condition
    num_workers: int | None = 0  # 0/None/1 => synchronous; >1 => thread pool for fitness evaluation
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters early to fail fast.

        Rules
        -----
        - population_size > 0
        - 0 <= elitism <= population_size
        - crossover_rate, mutation_rate in [0,1]
        - tournament_size > 0
        - generation_limit is None or >= 0
        - num_workers is None or >= 0
        - seed is None or >= 0
        """
        if self.population_size <= 0:
            raise ValueError("population_size must be > 0")
        if self.elitism < 0:
            raise ValueError("elitism must be >= 0")
        if self.elitism > self.population_size:
            raise ValueError("elitism cannot exceed population_size")
        if not (0.0 <= self.crossover_rate <= 1.0):
            raise ValueError("crossover_rate must be in [0,1]")
        if not (0.0 <= self.mutation_rate <= 1.0):
            raise ValueError("mutation_rate must be in [0,1]")
        if self.tournament_size <= 0:
            raise ValueError("tournament_size must be > 0")
        if self.generation_limit is not None and self.generation_limit < 0:
            raise ValueError("generation_limit must be >= 0 if provided")
        if self.num_workers is not None and self.num_workers < 0:
            raise ValueError("num_workers must be >= 0 or None")
        if self.seed is not None and self.seed < 0:
            raise ValueError("seed must be >= 0 if provided")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> GAConfig:
        """Build a config from plain key/value options (e.g. a parsed config file)."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown GA option(s): {', '.join(unknown)}")
        return cls(**dict(options))


@dataclass
class GAStats:
    generation: int = 0
    evaluations: int = 0
    best_fitness: float = float("-inf")
    mean_fitness: float = float("-inf")
    history: list[dict[str, Any]] = field(default_factory=list)


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    EVOLVING = "evolving"
    TERMINATED = "terminated"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GAEngineError(RuntimeError):
    pass


# ---------------------------------------------------------------------------
# GeneticAlgorithm
# ---------------------------------------------------------------------------


def _evaluate_individual(ind: Individual) -> float:
    return float(ind.get_fitness())


class GeneticAlgorithm(ABC):
    """Generational loop shared by every problem family.

    Subclasses decide how the initial population is built, how offspring are
    derived from the current population and how they are inserted back. The
    base class owns the state machine, fitness evaluation, statistics and
    progress reporting.
    """

    def __init__(
        self,
        config: GAConfig | None = None,
        executor: Executor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config if config is not None else GAConfig()
        self.rng: np.random.Generator = np.random.default_rng(self.config.seed)
        self._external_executor = executor
        self._executor: Executor | None = executor

        self.population: Population = Population()
        self.generation: int = 0
        self.stats = GAStats()
        self.state = EngineState.UNINITIALIZED

        self._stop_requested = threading.Event()
        self.logger = logger or logging.getLogger("segevo.engine")

    # -----------------------------
    # Problem-specific policy
    # -----------------------------

    @abstractmethod
    def create_initial_population(self) -> Population:
        """Return ``config.population_size`` freshly randomized individuals."""

    @abstractmethod
    def create_offspring(self) -> Population:
        """Derive candidate offspring from ``self.population``."""

    @abstractmethod
    def insert_offspring(self, offspring: Population) -> None:
        """Form the next ``self.population`` from the evaluated offspring."""

    def print_state(self) -> None:
        self.logger.info("Fitness of fittest individual: %s", self.get_fittest_individual().get_fitness())

    # -----------------------------
    # Public API
    # -----------------------------

    def get_population(self) -> Population:
        return self.population

    def get_fittest_individual(self) -> Individual:
        return self.population.get_fittest_individual()

    def initialize(self) -> None:
        """Build and evaluate the initial population."""
        if self.state is not EngineState.UNINITIALIZED:
            raise GAEngineError(f"Cannot initialize an engine in state {self.state.value}.")
        population = self.create_initial_population()
        if len(population) == 0:
            raise GAEngineError("Initial population is empty.")
        self.population = population
        self._evaluate_individuals(population)
        self.stats.evaluations += len(population)
        self._update_stats()
        self.state = EngineState.INITIALIZED
        self.print_state()

    def step(self) -> None:
        """Run exactly one generation."""
        if self.state is EngineState.UNINITIALIZED:
            raise GAEngineError("Engine not initialized; call initialize() first.")
        if self.state is EngineState.TERMINATED:
            raise GAEngineError("Engine already terminated.")

        self.state = EngineState.EVOLVING
        self.logger.debug("Generation %d start", self.generation + 1)
        try:
            offspring = self.create_offspring()
            # all offspring are evaluated before the population is touched
            self._evaluate_individuals(offspring)
            self.stats.evaluations += len(offspring)
            self.insert_offspring(offspring)
            if len(self.population) == 0:
                raise GAEngineError("Replacement produced an empty population.")
        except Exception:
            self.state = EngineState.TERMINATED
            self.logger.error("Generation %d failed; run terminated", self.generation + 1)
            raise

        self.generation += 1
        self.stats.generation = self.generation
        self._update_stats()
        self.print_state()

    def run(self, termination: TerminationCondition | None = None) -> Population:
        """Evolve until the termination condition holds or :meth:`stop` is called.

        Parameters
        ----------
        termination : TerminationCondition | None
            Stopping policy; defaults to ``config.generation_limit`` generations.
        """
        if termination is None:
            if self.config.generation_limit is None:
                raise GAEngineError("No termination condition: pass one or set generation_limit.")
            termination = MaxGenerationsTermination(self.config.generation_limit)

        self._prepare_executor()
        try:
            if self.state is EngineState.UNINITIALIZED:
                self.initialize()
            while (
                not termination.should_terminate(self.generation, self.population, self.stats.best_fitness)
                and not self._stop_requested.is_set()
            ):
                self.step()
        finally:
            self._shutdown_executor()
            self._stop_requested.clear()

        self.state = EngineState.TERMINATED
        self.logger.info(
            "Run finished after %d generations (%d evaluations), best fitness %s",
            self.generation,
            self.stats.evaluations,
            self.stats.best_fitness,
        )
        return self.population

    def stop(self) -> None:
        """Request a graceful stop between generations.

        The request applies to the current run, or to the next one when no run
        is in progress, and is cleared once that run returns.
        """
        self._stop_requested.set()

    # -----------------------------
    # Internal helpers
    # -----------------------------

    def _prepare_executor(self) -> None:
        if self._external_executor is not None:
            self._executor = self._external_executor
            self.logger.debug("Using external executor provided by caller")
            return

        num_workers = self.config.num_workers
        if not num_workers or num_workers <= 1:
            self._executor = None
            self.logger.debug("Evaluating fitness synchronously")
            return

        self._executor = ThreadPoolExecutor(max_workers=num_workers)
        self.logger.debug("ThreadPoolExecutor prepared with %d workers", num_workers)

    def _shutdown_executor(self) -> None:
        # external executors belong to the caller
        if self._executor is not None and self._executor is not self._external_executor:
            self._executor.shutdown(wait=True)
        self._executor = self._external_executor

    def _evaluate_individuals(self, individuals: Population) -> None:
        if not individuals:
            return
        if self._executor is not None:
            results = list(self._executor.map(_evaluate_individual, individuals))
        elif self.config.num_workers and self.config.num_workers > 1:
            # initialize()/step() driven directly, outside run()
            with ThreadPoolExecutor(max_workers=self.config.num_workers) as pool:
                results = list(pool.map(_evaluate_individual, individuals))
        else:
            results = [_evaluate_individual(ind) for ind in individuals]
        for res in results:
            if not math.isfinite(res):
                raise GAEngineError(f"Fitness evaluation returned non-finite value {res}.")

    def _update_stats(self) -> None:
        scores = [ind.get_fitness() for ind in self.population]
        self.stats.best_fitness = max(scores)
        self.stats.mean_fitness = sum(scores) / len(scores)

        snapshot = {
            "generation": self.generation,
            "best": self.stats.best_fitness,
            "mean": self.stats.mean_fitness,
            "evaluations": self.stats.evaluations,
            "time": time.time(),
        }
        self.stats.history.append(snapshot)
        self.logger.debug(
            "Generation %d stats: best=%s mean=%s evals=%d",
            self.generation,
            self.stats.best_fitness,
            self.stats.mean_fitness,
            self.stats.evaluations,
        )
