# jadwal_ga/initial_population.py
import logging
import random
from typing import List, Optional, Set, Tuple

from .config import GAConfig
from .domains import ProblemInstance, SubjectDomain
from .model import Assignment, ClassGroup, Day, Hour, Schedule

logger = logging.getLogger(__name__)


def _pick_room_id(dom: SubjectDomain, problem: ProblemInstance, rng: random.Random) -> int:
    if dom.special_room is not None:
        return dom.special_room.id
    return rng.choice(problem.rooms).id


def _place_session(
    kelas: ClassGroup,
    dom: SubjectDomain,
    used_slots: Set[Tuple[Day, Hour]],
    problem: ProblemInstance,
    cfg: GAConfig,
    rng: random.Random,
) -> Optional[Assignment]:
    # La clase no se solapa consigo misma; docente y aula sí pueden (lo penaliza el fitness)
    for _ in range(cfg.max_placement_attempts):
        day = rng.choice(cfg.days)
        hour = rng.randint(1, cfg.periods_per_day)
        if (day, hour) in used_slots:
            continue
        if not dom.teacher.is_available(day):
            continue
        used_slots.add((day, hour))
        return Assignment(
            class_id=kelas.id,
            teacher_id=dom.teacher.id,
            subject_id=dom.subject.id,
            room_id=_pick_room_id(dom, problem, rng),
            day=day,
            hour=hour,
        )
    return None


def build_random_schedule(
    problem: ProblemInstance,
    cfg: GAConfig,
    rng: random.Random,
) -> Schedule:
    assignments: List[Assignment] = []
    for kelas in problem.classes:
        used_slots: Set[Tuple[Day, Hour]] = set()
        for subject in problem.subjects:
            dom = problem.domains.get(subject.id)
            if dom is None:
                continue
            for _ in range(subject.sessions_per_week):
                gene = _place_session(kelas, dom, used_slots, problem, cfg, rng)
                if gene is None:
                    logger.debug(
                        "Sin hueco para %s en %s tras %d intentos; sesión omitida",
                        subject.name, kelas.name, cfg.max_placement_attempts,
                    )
                    continue
                assignments.append(gene)
    return Schedule(assignments=tuple(assignments))


def build_initial_population(
    problem: ProblemInstance,
    cfg: GAConfig,
    rng: random.Random,
    size: Optional[int] = None,
) -> List[Schedule]:
    pop_size = cfg.population_size if size is None else size
    return [build_random_schedule(problem, cfg, rng) for _ in range(pop_size)]
