# jadwal_ga/domains.py
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .config import GAConfig
from .exceptions import PreconditionError
from .model import ClassGroup, Day, Room, Subject, Teacher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubjectDomain:
    subject: Subject
    teacher: Teacher
    allowed_days: Tuple[Day, ...]
    special_room: Optional[Room] = None


@dataclass(frozen=True)
class ProblemInstance:
    """
    Vista inmutable de una corrida: entidades, vínculo docente-materia y
    los índices que usa la evaluación para ubicar cada entidad en las
    matrices de ocupación.
    """
    teachers: Tuple[Teacher, ...]
    classes: Tuple[ClassGroup, ...]
    subjects: Tuple[Subject, ...]
    rooms: Tuple[Room, ...]
    domains: Dict[int, SubjectDomain]
    teacher_index: Dict[int, int]
    class_index: Dict[int, int]
    room_index: Dict[int, int]
    day_index: Dict[Day, int]

    def teacher(self, teacher_id: int) -> Teacher:
        return self.teachers[self.teacher_index[teacher_id]]

    def class_group(self, class_id: int) -> ClassGroup:
        return self.classes[self.class_index[class_id]]

    def room(self, room_id: int) -> Room:
        return self.rooms[self.room_index[room_id]]

    def allowed_days_for(self, teacher_id: int, days: Sequence[Day]) -> List[Day]:
        teacher = self.teacher(teacher_id)
        return [d for d in days if teacher.is_available(d)]

    @property
    def expected_assignments(self) -> int:
        per_class = sum(dom.subject.sessions_per_week for dom in self.domains.values())
        return per_class * len(self.classes)


def find_special_room(subject: Subject, rooms: Sequence[Room]) -> Optional[Room]:
    """Primera aula cuyo nombre contiene la categoría exigida por la materia."""
    if not subject.special_room:
        return None
    needle = subject.special_room.lower()
    for room in rooms:
        if needle in room.name.lower():
            return room
    return None


def bind_teacher(subject: Subject, teachers: Sequence[Teacher]) -> Optional[Teacher]:
    candidates = [t for t in teachers if t.subject_id == subject.id]
    if not candidates:
        return None
    if len(candidates) > 1:
        logger.debug(
            "Materia %s tiene %d docentes; se usa %s",
            subject.name, len(candidates), candidates[0].name,
        )
    return candidates[0]


def _index(items, what: str) -> Dict[int, int]:
    index: Dict[int, int] = {}
    for pos, item in enumerate(items):
        if item.id in index:
            raise PreconditionError(f"{what} con id repetido: {item.id}")
        index[item.id] = pos
    return index


def build_problem(
    teachers: Sequence[Teacher],
    classes: Sequence[ClassGroup],
    subjects: Sequence[Subject],
    rooms: Sequence[Room],
    cfg: GAConfig,
) -> ProblemInstance:
    missing = [
        name
        for name, items in (
            ("docentes", teachers),
            ("clases", classes),
            ("materias", subjects),
            ("aulas", rooms),
        )
        if len(items) == 0
    ]
    if missing:
        raise PreconditionError(
            "Datos incompletos, faltan: " + ", ".join(missing)
            + ". Se necesitan docentes, clases, materias y aulas."
        )

    teachers = tuple(teachers)
    rooms = tuple(rooms)

    domains: Dict[int, SubjectDomain] = {}
    for subject in subjects:
        teacher = bind_teacher(subject, teachers)
        if teacher is None:
            logger.debug("Materia %s sin docente; sus sesiones no se programan", subject.name)
            continue
        domains[subject.id] = SubjectDomain(
            subject=subject,
            teacher=teacher,
            allowed_days=tuple(d for d in cfg.days if teacher.is_available(d)),
            special_room=find_special_room(subject, rooms),
        )

    return ProblemInstance(
        teachers=teachers,
        classes=tuple(classes),
        subjects=tuple(subjects),
        rooms=rooms,
        domains=domains,
        teacher_index=_index(teachers, "Docente"),
        class_index=_index(classes, "Clase"),
        room_index=_index(rooms, "Aula"),
        day_index={d: i for i, d in enumerate(cfg.days)},
    )
