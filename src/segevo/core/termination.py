import time
from abc import ABC, abstractmethod

from segevo.core.individual import Population


class TerminationCondition(ABC):
    """Stopping policy consulted by the engine before every generation."""

    @abstractmethod
    def should_terminate(self, generation: int, population: Population, best_fitness: float) -> bool:
        """Determine whether the evolutionary process should stop.

        Args:
            generation (int): Number of generations completed so far.
            population (Population): The current population.
            best_fitness (float): Fitness of the fittest current individual.

        Returns:
            bool: True if the run should stop, False otherwise.
        """
        pass


class MaxGenerationsTermination(TerminationCondition):
    """Stop once ``max_generations`` generations have been produced."""

    def __init__(self, max_generations: int):
        if max_generations < 0:
            raise ValueError("max_generations must be >= 0")
        self.max_generations = max_generations

    def should_terminate(self, generation: int, population: Population, best_fitness: float) -> bool:
        return generation >= self.max_generations


class FitnessThresholdTermination(TerminationCondition):
    """Stop when the best fitness reaches a threshold."""

    def __init__(self, fitness_threshold: float):
        self.fitness_threshold = fitness_threshold

    def should_terminate(self, generation: int, population: Population, best_fitness: float) -> bool:
        return best_fitness >= self.fitness_threshold


class StagnationTermination(TerminationCondition):
    """Stop when the best fitness has not improved for a number of generations."""

    def __init__(self, max_stagnant_generations: int):
        self.max_stagnant_generations = max_stagnant_generations
        self.best_fitness_history: list[float] = []

    def should_terminate(self, generation: int, population: Population, best_fitness: float) -> bool:
        self.best_fitness_history.append(best_fitness)
        if len(self.best_fitness_history) > self.max_stagnant_generations:
            self.best_fitness_history.pop(0)
            if all(f <= self.best_fitness_history[0] for f in self.best_fitness_history):
                return True
        return False


class TimeLimitTermination(TerminationCondition):
    """Stop once a wall-clock budget (in seconds) is spent.

    The clock starts on the first query, not at construction.
    """

    def __init__(self, time_limit_seconds: float):
        self.time_limit_seconds = time_limit_seconds
        self.start_time: float | None = None

    def should_terminate(self, generation: int, population: Population, best_fitness: float) -> bool:
        now = time.monotonic()
        if self.start_time is None:
            self.start_time = now
        return now - self.start_time >= self.time_limit_seconds


class HybridTermination(TerminationCondition):
    """Stop as soon as any of the wrapped conditions holds."""

    def __init__(self, conditions: list[TerminationCondition]):
        self.conditions = conditions

    def should_terminate(self, generation: int, population: Population, best_fitness: float) -> bool:
        # every condition sees every generation so stateful ones stay in sync
        results = [c.should_terminate(generation, population, best_fitness) for c in self.conditions]
        return any(results)
