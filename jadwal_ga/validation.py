# jadwal_ga/validation.py
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List

from .config import GAConfig
from .domains import ProblemInstance
from .evaluation import detect_conflicts
from .model import Schedule


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    # subject_id -> sesiones esperadas menos programadas
    discrepancies: Dict[int, int] = field(default_factory=dict)


def validate_schedule(schedule: Schedule, problem: ProblemInstance, cfg: GAConfig) -> ValidationResult:
    """
    Revisión posterior a la corrida: cada materia debe tener
    ``sessions_per_week × número de clases`` sesiones, incluidas las
    materias sin docente, y no debe haber choques de docente ni de clase.
    """
    errors: List[str] = []
    discrepancies: Dict[int, int] = {}

    scheduled = Counter(a.subject_id for a in schedule.assignments)
    for subject in problem.subjects:
        hours = scheduled.get(subject.id, 0)
        required = subject.sessions_per_week * len(problem.classes)
        if hours != required:
            discrepancies[subject.id] = required - hours
            errors.append(f"Materia {subject.name}: {hours} horas (se esperaban {required})")

    errors.extend(detect_conflicts(schedule, problem, cfg))
    return ValidationResult(valid=not errors, errors=errors, discrepancies=discrepancies)
