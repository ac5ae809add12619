import argparse
import logging
import time
from pathlib import Path

from jadwal_ga.config import load_config
from jadwal_ga.data_loader import load_entities
from jadwal_ga.exceptions import TimetableError
from jadwal_ga.export import export_outputs, schedule_to_dataframe
from jadwal_ga.model import Progress
from jadwal_ga.runner import run_timetable


def print_progress(p: Progress):
    if p.generation == 0 or p.generation % 10 == 0 or p.generation == p.max_generations:
        print(f"[{p.status.value:<12}] Gen {p.generation}/{p.max_generations} Fitness={p.fitness:.2f}")


def main():
    parser = argparse.ArgumentParser(description="Generación de horarios semanales con AG")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--data_dir", default="data", help="Directorio con los CSV de entrada")
    parser.add_argument("--out_dir", default="outputs", help="Directorio de salida")
    parser.add_argument("--seed", type=int, default=None, help="Semilla para repetir una corrida")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log detallado")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(args.config)
    if args.seed is not None:
        cfg.seed = args.seed

    print("Cargando datos...")
    bundle = load_entities(args.data_dir)
    print(
        f"Docentes: {len(bundle.teachers)} | Clases: {len(bundle.classes)} | "
        f"Materias: {len(bundle.subjects)} | Aulas: {len(bundle.rooms)}"
    )
    print(f"Generaciones: {cfg.max_generations} | Población: {cfg.population_size}")

    start = time.perf_counter()
    try:
        result = run_timetable(
            bundle.teachers,
            bundle.classes,
            bundle.subjects,
            bundle.rooms,
            cfg,
            on_progress=print_progress,
        )
    except TimetableError as exc:
        print(f"La corrida falló: {exc}")
        raise SystemExit(1)
    elapsed = time.perf_counter() - start

    print("\n--- MEJOR SOLUCIÓN ---")
    print(f"Fitness: {result.fitness:.2f} | Conflictos: {len(result.conflicts)} | Tiempo: {elapsed:.2f}s")
    for c in result.conflicts[:20]:
        print(f"  - {c}")
    if result.validation is not None and not result.validation.valid:
        print("Validación:")
        for err in result.validation.errors[:20]:
            print(f"  * {err}")

    print(schedule_to_dataframe(result.schedule, bundle, cfg).head(20).to_string(index=False))

    out_dir = Path(args.out_dir)
    export_outputs(result, bundle, cfg, out_dir)
    print(f"Se guardaron resultados en {out_dir}/")


if __name__ == "__main__":
    main()
