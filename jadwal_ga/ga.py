import logging
import random
from typing import Callable, Dict, List, Optional

from .config import GAConfig
from .domains import ProblemInstance
from .evaluation import score_schedule
from .initial_population import build_initial_population
from .model import Schedule
from .operators import mutate, single_point_crossover, tournament_selection

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, Schedule], None]


class GeneticSolver:
    def __init__(self, problem: ProblemInstance, cfg: GAConfig, rng: Optional[random.Random] = None):
        self.problem = problem
        self.cfg = cfg
        self.rng = rng if rng is not None else random.Random(cfg.seed)
        self.elite_size = cfg.resolved_elite_size()
        self.history: List[Dict] = []

    def initial_population(self) -> List[Schedule]:
        return build_initial_population(self.problem, self.cfg, self.rng)

    def evaluate_population(self, population: List[Schedule]) -> List[Schedule]:
        return [score_schedule(s, self.problem, self.cfg) for s in population]

    def make_child(self, population: List[Schedule]) -> Schedule:
        p1 = tournament_selection(population, self.rng, self.cfg.tournament_size)
        p2 = tournament_selection(population, self.rng, self.cfg.tournament_size)
        if self.rng.random() < self.cfg.crossover_rate:
            child = single_point_crossover(p1, p2, self.rng)
        else:
            child = p1.reset()
        if self.rng.random() < self.cfg.mutation_rate:
            child = mutate(child, self.problem, self.cfg, self.rng)
        return child

    def next_generation(self, population: List[Schedule]) -> List[Schedule]:
        """``population`` debe venir evaluada y ordenada de mejor a peor."""
        # Elitismo
        new_pop: List[Schedule] = list(population[: self.elite_size])
        while len(new_pop) < self.cfg.population_size:
            new_pop.append(self.make_child(population))
        return new_pop

    def evolve(
        self,
        population: Optional[List[Schedule]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Schedule:
        if population is None:
            population = self.initial_population()
        generations = self.cfg.max_generations
        best_global: Optional[Schedule] = None

        for gen in range(generations):
            population = self.evaluate_population(population)
            population.sort(key=lambda s: s.fitness, reverse=True)

            if best_global is None or population[0].fitness > best_global.fitness:
                best_global = population[0]

            if on_progress is not None:
                on_progress(gen + 1, best_global)

            fits = [s.fitness for s in population]
            avg_fit = sum(fits) / len(fits)
            self.history.append({
                "generation": gen + 1,
                "best_fitness": best_global.fitness,
                "avg_fitness": avg_fit,
                "worst_fitness": fits[-1],
                "conflicts": len(best_global.conflicts),
            })
            if gen % self.cfg.log_every == 0 or gen == generations - 1:
                logger.info(
                    "Gen %d: mejor fitness=%.2f prom=%.2f conflictos=%d",
                    gen + 1, best_global.fitness, avg_fit, len(best_global.conflicts),
                )

            population = self.next_generation(population)

        return best_global
