# jadwal_ga/model.py
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

Day = str
Hour = int


@dataclass(frozen=True)
class Teacher:
    id: int
    name: str
    subject_id: int
    max_hours: int
    unavailable_days: FrozenSet[Day] = frozenset()

    def is_available(self, day: Day) -> bool:
        return day not in self.unavailable_days


@dataclass(frozen=True)
class Subject:
    id: int
    name: str
    sessions_per_week: int
    special_room: Optional[str] = None  # categoría, se compara contra el nombre del aula


@dataclass(frozen=True)
class ClassGroup:
    id: int
    name: str
    grade: Optional[int] = None
    major: Optional[str] = None


@dataclass(frozen=True)
class Room:
    id: int
    name: str
    capacity: int = 0
    room_type: str = ""


@dataclass(frozen=True)
class Assignment:
    # Un “gen” = una sesión semanal de una clase
    class_id: int
    teacher_id: int
    subject_id: int
    room_id: int
    day: Day
    hour: Hour


@dataclass(frozen=True)
class Schedule:
    assignments: Tuple[Assignment, ...]
    fitness: float = 0.0
    conflicts: Tuple[str, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.assignments)

    def reset(self) -> "Schedule":
        """Copia estructural sin fitness ni conflictos (pendiente de evaluar)."""
        return Schedule(assignments=self.assignments)


class RunStatus(str, Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Progress:
    generation: int
    max_generations: int
    fitness: float
    status: RunStatus
