"""
Punto de entrada de una corrida completa.

Envuelve a ``GeneticSolver`` con lo que necesita quien lo invoca: chequeo
de precondiciones, la máquina de estados
``initializing → running → completed | failed``, el flujo de progreso por
generación y los metadatos que el llamador persiste junto al horario.
"""
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .config import GAConfig
from .domains import build_problem
from .exceptions import RunFailure
from .ga import GeneticSolver
from .model import ClassGroup, Progress, Room, RunStatus, Schedule, Subject, Teacher
from .validation import ValidationResult, validate_schedule

logger = logging.getLogger(__name__)

ProgressSink = Callable[[Progress], None]


@dataclass
class RunResult:
    schedule: Schedule
    status: RunStatus
    started_at: datetime
    finished_at: datetime
    max_generations: int
    population_size: int
    generation_count: int
    history: List[Dict] = field(default_factory=list)
    validation: Optional[ValidationResult] = None

    @property
    def fitness(self) -> float:
        return self.schedule.fitness

    @property
    def conflicts(self) -> Tuple[str, ...]:
        return self.schedule.conflicts

    def metadata(self) -> Dict[str, Any]:
        """Registro de la corrida tal como lo guarda el llamador."""
        return {
            "timestamp_start": self.started_at.isoformat(),
            "timestamp_end": self.finished_at.isoformat(),
            "max_generations": self.max_generations,
            "population_size": self.population_size,
            "final_fitness": self.fitness,
            "generation_count": self.generation_count,
            "status": self.status.value,
        }


def _now() -> datetime:
    return datetime.now(timezone.utc)


def run_timetable(
    teachers: Sequence[Teacher],
    classes: Sequence[ClassGroup],
    subjects: Sequence[Subject],
    rooms: Sequence[Room],
    cfg: Optional[GAConfig] = None,
    on_progress: Optional[ProgressSink] = None,
    rng: Optional[random.Random] = None,
) -> RunResult:
    cfg = (cfg or GAConfig()).validate()
    problem = build_problem(teachers, classes, subjects, rooms, cfg)

    last = Progress(0, cfg.max_generations, 0.0, RunStatus.INITIALIZING)

    def emit(generation: int, fitness: float, status: RunStatus) -> None:
        nonlocal last
        last = Progress(generation, cfg.max_generations, fitness, status)
        if on_progress is not None:
            on_progress(last)

    started_at = _now()
    status = RunStatus.INITIALIZING
    try:
        emit(0, 0.0, status)
        solver = GeneticSolver(problem, cfg, rng)
        population = solver.initial_population()
        logger.info(
            "Corrida iniciada: %d clases, %d materias, %d docentes, %d aulas | gen=%d pob=%d élite=%d",
            len(problem.classes), len(problem.subjects), len(problem.teachers),
            len(problem.rooms), cfg.max_generations, cfg.population_size, solver.elite_size,
        )

        status = RunStatus.RUNNING
        # Única pausa antes del bucle: el llamador puede refrescar su interfaz aquí
        emit(0, 0.0, status)
        best = solver.evolve(
            population,
            on_progress=lambda gen, sched: emit(gen, sched.fitness, RunStatus.RUNNING),
        )
        validation = validate_schedule(best, problem, cfg)
        finished_at = _now()
        emit(cfg.max_generations, best.fitness, RunStatus.COMPLETED)
    except Exception as exc:
        logger.exception("La corrida falló en estado %s", status.value)
        try:
            emit(last.generation, last.fitness, RunStatus.FAILED)
        except Exception:
            logger.debug("El aviso de falla al llamador también falló", exc_info=True)
        raise RunFailure(f"Error al generar el horario: {exc}") from exc

    logger.info(
        "Corrida completada: fitness=%.2f conflictos=%d", best.fitness, len(best.conflicts)
    )
    return RunResult(
        schedule=best,
        status=RunStatus.COMPLETED,
        started_at=started_at,
        finished_at=finished_at,
        max_generations=cfg.max_generations,
        population_size=cfg.population_size,
        generation_count=len(solver.history),
        history=solver.history,
        validation=validation,
    )
