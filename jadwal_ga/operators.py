# jadwal_ga/operators.py
import random
from dataclasses import replace
from typing import List, Sequence

from .config import GAConfig
from .domains import ProblemInstance
from .model import Assignment, Schedule

MUTABLE_FIELDS = ("day", "hour", "room")


def tournament_selection(
    population: Sequence[Schedule],
    rng: random.Random,
    size: int = 5,
) -> Schedule:
    """Torneo con reemplazo: el de mayor fitness entre ``size`` sorteados."""
    tournament = [population[rng.randrange(len(population))] for _ in range(size)]
    return max(tournament, key=lambda s: s.fitness)


def single_point_crossover(p1: Schedule, p2: Schedule, rng: random.Random) -> Schedule:
    """
    Cruce de un punto sobre la secuencia de genes. Ambos padres salen del
    mismo recorrido clase→materia, así que la posición i representa la
    misma sesión en los dos. El largo del hijo lo fija ``p1``.
    """
    n = len(p1.assignments)
    cut = rng.randrange(n) if n else 0
    tail = p2.assignments[cut:n]
    if len(tail) < n - cut:
        # p2 perdió sesiones al inicializarse; se completa con la cola de p1
        tail += p1.assignments[cut + len(tail):n]
    return Schedule(assignments=p1.assignments[:cut] + tail)


def mutate_gene(
    gene: Assignment,
    problem: ProblemInstance,
    cfg: GAConfig,
    rng: random.Random,
) -> Assignment:
    what = rng.choice(MUTABLE_FIELDS)
    if what == "day":
        pool: List[str] = list(cfg.days)
        if cfg.availability_aware_mutation:
            pool = problem.allowed_days_for(gene.teacher_id, cfg.days) or pool
        return replace(gene, day=rng.choice(pool))
    if what == "hour":
        return replace(gene, hour=rng.randint(1, cfg.periods_per_day))
    return replace(gene, room_id=rng.choice(problem.rooms).id)


def mutate(
    schedule: Schedule,
    problem: ProblemInstance,
    cfg: GAConfig,
    rng: random.Random,
) -> Schedule:
    genes = tuple(
        mutate_gene(g, problem, cfg, rng) if rng.random() < cfg.gene_mutation_rate else g
        for g in schedule.assignments
    )
    return Schedule(assignments=genes)
