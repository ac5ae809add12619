# jadwal_ga/evaluation.py
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Tuple

import numpy as np

from .config import GAConfig
from .domains import ProblemInstance
from .model import Schedule

MAX_FITNESS = 100.0


@dataclass
class EvaluationResult:
    fitness: float
    teacher_clashes: int
    room_clashes: int
    class_clashes: int
    overload_hours: int
    day_deviation: float
    unavailable_hits: int
    penalties: Dict[str, float]
    conflict_teacher: np.ndarray
    conflict_room: np.ndarray
    conflict_class: np.ndarray
    teacher_hours: Dict[int, int]
    day_counts: Dict[str, int]
    conflicts: List[str]


def _occupancy(
    schedule: Schedule,
    problem: ProblemInstance,
    cfg: GAConfig,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, int]:
    # Matrices [entidad][día][hora]
    shape = (len(cfg.days), cfg.periods_per_day)
    occ_teacher = np.zeros((len(problem.teachers),) + shape, dtype=int)
    occ_room = np.zeros((len(problem.rooms),) + shape, dtype=int)
    occ_class = np.zeros((len(problem.classes),) + shape, dtype=int)
    unavailable_hits = 0

    for a in schedule.assignments:
        d = problem.day_index[a.day]
        h = a.hour - 1
        if not 0 <= h < cfg.periods_per_day:
            raise ValueError(f"Hora fuera de rango: {a.hour}")
        t = problem.teacher_index[a.teacher_id]
        occ_teacher[t, d, h] += 1
        occ_room[problem.room_index[a.room_id], d, h] += 1
        occ_class[problem.class_index[a.class_id], d, h] += 1
        if not problem.teachers[t].is_available(a.day):
            unavailable_hits += 1

    return occ_teacher, occ_room, occ_class, unavailable_hits


def _clashes(occ: np.ndarray) -> int:
    # Un grupo de k sesiones en la misma celda aporta k-1 choques
    return int(np.clip(occ - 1, 0, None).sum())


def _day_deviation(day_counts: np.ndarray, strict: bool) -> float:
    total = int(day_counts.sum())
    avg = total / len(day_counts)
    if strict:
        return float(np.abs(day_counts - avg).sum())
    lo, hi = math.floor(avg), math.ceil(avg)
    below = np.clip(lo - day_counts, 0, None)
    above = np.clip(day_counts - hi, 0, None)
    return float((below + above).sum())


def _describe_conflicts(
    occ_teacher: np.ndarray,
    occ_class: np.ndarray,
    problem: ProblemInstance,
    cfg: GAConfig,
) -> List[str]:
    conflicts: List[str] = []
    for t, d, h in np.argwhere(occ_teacher > 1):
        teacher = problem.teachers[t]
        conflicts.append(
            f"Docente {teacher.name} enseña {int(occ_teacher[t, d, h])} clases "
            f"el {cfg.days[d]} en la hora {h + 1}"
        )
    for c, d, h in np.argwhere(occ_class > 1):
        kelas = problem.classes[c]
        conflicts.append(
            f"Clase {kelas.name} tiene {int(occ_class[c, d, h])} sesiones "
            f"el {cfg.days[d]} en la hora {h + 1}"
        )
    return conflicts


def evaluate(schedule: Schedule, problem: ProblemInstance, cfg: GAConfig) -> EvaluationResult:
    """
    Puntúa un horario en [0, 100] restando penalizaciones a 100:
    choques de docente, aula y clase, exceso de horas por docente,
    desbalance entre días y sesiones en días no disponibles del docente.
    Es determinista: el mismo horario siempre da el mismo resultado.
    """
    occ_teacher, occ_room, occ_class, unavailable_hits = _occupancy(schedule, problem, cfg)

    teacher_clashes = _clashes(occ_teacher)
    room_clashes = _clashes(occ_room)
    class_clashes = _clashes(occ_class)

    hours = occ_teacher.sum(axis=(1, 2))
    max_hours = np.array([t.max_hours for t in problem.teachers], dtype=int)
    overload_hours = int(np.clip(hours - max_hours, 0, None).sum())

    per_day = occ_class.sum(axis=(0, 2))
    day_deviation = _day_deviation(per_day, cfg.strict_day_balance)

    penalties = {
        "teacher_clash": teacher_clashes * cfg.weight_teacher_clash,
        "room_clash": room_clashes * cfg.weight_room_clash,
        "class_clash": class_clashes * cfg.weight_class_clash,
        "overload": overload_hours * cfg.weight_overload,
        "day_balance": day_deviation * cfg.weight_day_balance,
        "unavailable_day": unavailable_hits * cfg.weight_unavailable_day,
    }
    score = MAX_FITNESS - sum(penalties.values())
    fitness = float(max(0.0, min(MAX_FITNESS, score)))

    return EvaluationResult(
        fitness=fitness,
        teacher_clashes=teacher_clashes,
        room_clashes=room_clashes,
        class_clashes=class_clashes,
        overload_hours=overload_hours,
        day_deviation=day_deviation,
        unavailable_hits=unavailable_hits,
        penalties=penalties,
        conflict_teacher=occ_teacher,
        conflict_room=occ_room,
        conflict_class=occ_class,
        teacher_hours={t.id: int(hours[i]) for i, t in enumerate(problem.teachers) if hours[i]},
        day_counts={d: int(per_day[i]) for i, d in enumerate(cfg.days)},
        conflicts=_describe_conflicts(occ_teacher, occ_class, problem, cfg),
    )


def detect_conflicts(schedule: Schedule, problem: ProblemInstance, cfg: GAConfig) -> List[str]:
    """Choques de docente y de clase; los de aula solo restan fitness."""
    occ_teacher, _, occ_class, _ = _occupancy(schedule, problem, cfg)
    return _describe_conflicts(occ_teacher, occ_class, problem, cfg)


def score_schedule(schedule: Schedule, problem: ProblemInstance, cfg: GAConfig) -> Schedule:
    res = evaluate(schedule, problem, cfg)
    return replace(schedule, fitness=res.fitness, conflicts=tuple(res.conflicts))
