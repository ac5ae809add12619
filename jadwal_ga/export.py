# jadwal_ga/export.py
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

from .config import GAConfig
from .data_loader import EntityBundle
from .model import Schedule
from .runner import RunResult

SCHEDULE_COLUMNS = ["Clase", "Dia", "Hora", "Materia", "Docente", "Aula"]


def schedule_to_rows(schedule: Schedule, run_id: Union[int, str]) -> List[Dict]:
    """Una fila por sesión, lista para guardarse con el id de la corrida."""
    return [
        {
            "run_id": run_id,
            "class_id": a.class_id,
            "teacher_id": a.teacher_id,
            "subject_id": a.subject_id,
            "room_id": a.room_id,
            "day": a.day,
            "hour": a.hour,
        }
        for a in schedule.assignments
    ]


def schedule_to_dataframe(schedule: Schedule, bundle: EntityBundle, cfg: GAConfig) -> pd.DataFrame:
    classes = {c.id: c.name for c in bundle.classes}
    subjects = {s.id: s.name for s in bundle.subjects}
    teachers = {t.id: t.name for t in bundle.teachers}
    rooms = {r.id: r.name for r in bundle.rooms}
    day_order = {d: i for i, d in enumerate(cfg.days)}

    data = []
    for a in schedule.assignments:
        data.append(
            {
                "Clase": classes.get(a.class_id, f"Clase {a.class_id}"),
                "Dia": a.day,
                "Hora": a.hour,
                "Materia": subjects.get(a.subject_id, f"Materia {a.subject_id}"),
                "Docente": teachers.get(a.teacher_id, f"Doc {a.teacher_id}"),
                "Aula": rooms.get(a.room_id, f"Aula {a.room_id}"),
                "_dia_idx": day_order.get(a.day, len(day_order)),
            }
        )
    if not data:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)
    df = pd.DataFrame(data).sort_values(["Clase", "_dia_idx", "Hora"], kind="stable")
    return df.drop(columns="_dia_idx").reset_index(drop=True)


def conflicts_to_dataframe(schedule: Schedule) -> pd.DataFrame:
    return pd.DataFrame({"conflicto": list(schedule.conflicts)}, columns=["conflicto"])


def history_to_dataframe(history: List[Dict]) -> pd.DataFrame:
    return pd.DataFrame(
        history,
        columns=["generation", "best_fitness", "avg_fitness", "worst_fitness", "conflicts"],
    )


def export_outputs(result: RunResult, bundle: EntityBundle, cfg: GAConfig, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    schedule_to_dataframe(result.schedule, bundle, cfg).to_csv(out_dir / "schedule.csv", index=False)
    conflicts_to_dataframe(result.schedule).to_csv(out_dir / "conflicts.csv", index=False)
    history_to_dataframe(result.history).to_csv(out_dir / "history.csv", index=False)

    metrics = result.metadata()
    metrics["conflicts"] = len(result.conflicts)
    if result.validation is not None:
        metrics["valid"] = result.validation.valid
        metrics["validation_errors"] = len(result.validation.errors)
    pd.DataFrame([metrics]).to_csv(out_dir / "metrics.csv", index=False)
