# jadwal_ga/data_loader.py
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, FrozenSet, List, Optional, Tuple

import pandas as pd

from .model import ClassGroup, Room, Subject, Teacher

REQUIRED_COLUMNS = {
    "teachers": ["id", "name", "subject_id", "max_hours"],
    "subjects": ["id", "name", "sessions_per_week"],
    "classes": ["id", "name"],
    "rooms": ["id", "name"],
}


@dataclass(frozen=True)
class EntityBundle:
    teachers: Tuple[Teacher, ...]
    classes: Tuple[ClassGroup, ...]
    subjects: Tuple[Subject, ...]
    rooms: Tuple[Room, ...]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, float) and pd.isna(value)) or str(value).strip() == ""


def _opt_str(value: Any) -> Optional[str]:
    return None if _blank(value) else str(value).strip()


def _opt_int(value: Any) -> Optional[int]:
    return None if _blank(value) else int(value)


def parse_days(value: Any) -> FrozenSet[str]:
    """'Senin, Rabu' o 'Senin;Rabu' -> {'Senin', 'Rabu'}; vacío -> set vacío."""
    if _blank(value):
        return frozenset()
    return frozenset(p.strip() for p in re.split(r"[,;]", str(value)) if p.strip())


def _read(data_dir: Path, name: str) -> pd.DataFrame:
    df = pd.read_csv(data_dir / f"{name}.csv")
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS[name] if c not in df.columns]
    if missing:
        raise ValueError(f"{name}.csv no tiene las columnas {missing}")
    return df


def load_entities(data_dir: str) -> EntityBundle:
    base = Path(data_dir)
    teachers_df = _read(base, "teachers")
    subjects_df = _read(base, "subjects")
    classes_df = _read(base, "classes")
    rooms_df = _read(base, "rooms")

    teachers: List[Teacher] = [
        Teacher(
            id=int(r["id"]),
            name=str(r["name"]).strip(),
            subject_id=int(r["subject_id"]),
            max_hours=int(r["max_hours"]),
            unavailable_days=parse_days(r.get("unavailable_days")),
        )
        for _, r in teachers_df.iterrows()
    ]
    subjects: List[Subject] = [
        Subject(
            id=int(r["id"]),
            name=str(r["name"]).strip(),
            sessions_per_week=int(r["sessions_per_week"]),
            special_room=_opt_str(r.get("special_room")),
        )
        for _, r in subjects_df.iterrows()
    ]
    classes: List[ClassGroup] = [
        ClassGroup(
            id=int(r["id"]),
            name=str(r["name"]).strip(),
            grade=_opt_int(r.get("grade")),
            major=_opt_str(r.get("major")),
        )
        for _, r in classes_df.iterrows()
    ]
    rooms: List[Room] = [
        Room(
            id=int(r["id"]),
            name=str(r["name"]).strip(),
            capacity=_opt_int(r.get("capacity")) or 0,
            room_type=_opt_str(r.get("room_type")) or "",
        )
        for _, r in rooms_df.iterrows()
    ]

    return EntityBundle(
        teachers=tuple(teachers),
        classes=tuple(classes),
        subjects=tuple(subjects),
        rooms=tuple(rooms),
    )
