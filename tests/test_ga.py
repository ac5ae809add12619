import random
import unittest

from jadwal_ga.config import GAConfig
from jadwal_ga.domains import build_problem
from jadwal_ga.exceptions import ConfigError, PreconditionError, RunFailure
from jadwal_ga.ga import GeneticSolver
from jadwal_ga.model import ClassGroup, Room, RunStatus, Subject, Teacher
from jadwal_ga.runner import run_timetable


def school():
    teachers = [
        Teacher(1, "Budi", subject_id=1, max_hours=24),
        Teacher(2, "Siti", subject_id=2, max_hours=20, unavailable_days=frozenset({"Senin"})),
        Teacher(3, "Agus", subject_id=3, max_hours=18),
    ]
    classes = [ClassGroup(1, "X-1", grade=10), ClassGroup(2, "X-2", grade=10), ClassGroup(3, "XI-1", grade=11)]
    subjects = [
        Subject(1, "Matematika", 4),
        Subject(2, "Bahasa Indonesia", 3),
        Subject(3, "Fisika", 2, special_room="Lab"),
    ]
    rooms = [Room(1, "Ruang 101", 32), Room(2, "Ruang 102", 32), Room(3, "Lab Fisika", 30)]
    return teachers, classes, subjects, rooms


class SolverTests(unittest.TestCase):
    def setUp(self):
        self.cfg = GAConfig(population_size=12, max_generations=8, seed=21)
        self.problem = build_problem(*school(), self.cfg)

    def test_default_elite_size(self):
        self.assertEqual(GAConfig(population_size=10).resolved_elite_size(), 2)
        self.assertEqual(GAConfig(population_size=50).resolved_elite_size(), 5)
        self.assertEqual(GAConfig(population_size=4, elite_size=9).resolved_elite_size(), 4)
        self.assertEqual(GAConfig(elite_size=0).resolved_elite_size(), 0)

    def test_next_generation_keeps_elite_and_size(self):
        solver = GeneticSolver(self.problem, self.cfg)
        population = solver.initial_population()
        self.assertEqual(len(population), self.cfg.population_size)
        for _ in range(5):
            population = solver.evaluate_population(population)
            population.sort(key=lambda s: s.fitness, reverse=True)
            elite = population[: solver.elite_size]
            population = solver.next_generation(population)
            self.assertEqual(len(population), self.cfg.population_size)
            self.assertEqual(population[: solver.elite_size], elite)

    def test_best_ever_is_monotonic_and_reported_in_order(self):
        seen = []
        solver = GeneticSolver(self.problem, self.cfg)
        best = solver.evolve(on_progress=lambda gen, s: seen.append((gen, s.fitness)))
        self.assertEqual([g for g, _ in seen], list(range(1, self.cfg.max_generations + 1)))
        fits = [f for _, f in seen]
        self.assertEqual(fits, sorted(fits))
        self.assertEqual(best.fitness, fits[-1])
        self.assertEqual(len(solver.history), self.cfg.max_generations)
        self.assertEqual(solver.history[-1]["best_fitness"], best.fitness)

    def test_crossover_keeps_assignment_count(self):
        solver = GeneticSolver(self.problem, GAConfig(population_size=12, crossover_rate=1.0, mutation_rate=1.0), random.Random(2))
        population = solver.evaluate_population(solver.initial_population())
        expected = {len(s) for s in population}
        for _ in range(20):
            self.assertIn(len(solver.make_child(population)), expected)

    def test_availability_holds_across_generations(self):
        cfg = GAConfig(population_size=10, mutation_rate=1.0, gene_mutation_rate=0.5)
        solver = GeneticSolver(self.problem, cfg, random.Random(8))
        population = solver.initial_population()
        for _ in range(10):
            population = solver.evaluate_population(population)
            for sched in population:
                for a in sched.assignments:
                    if a.teacher_id == 2:
                        self.assertNotEqual(a.day, "Senin")
            population.sort(key=lambda s: s.fitness, reverse=True)
            population = solver.next_generation(population)


class RunnerTests(unittest.TestCase):
    def test_single_session_reaches_full_fitness(self):
        teachers = [Teacher(1, "Budi", subject_id=1, max_hours=24)]
        cfg = GAConfig(population_size=10, max_generations=5)
        result = run_timetable(
            teachers, [ClassGroup(1, "X-1")], [Subject(1, "Matematika", 1)], [Room(1, "Ruang 101")], cfg,
        )
        self.assertEqual(result.fitness, 100.0)
        self.assertEqual(result.conflicts, ())
        self.assertEqual(len(result.schedule), 1)
        self.assertTrue(result.validation.valid)

    def test_shared_room_trend_is_non_decreasing(self):
        teachers = [Teacher(1, "Budi", subject_id=1, max_hours=24)]
        classes = [ClassGroup(1, "X-1"), ClassGroup(2, "X-2")]
        cfg = GAConfig(population_size=20, max_generations=30, seed=4)
        events = []
        result = run_timetable(
            teachers, classes, [Subject(1, "Matematika", 5)], [Room(1, "Ruang 101")], cfg,
            on_progress=events.append,
        )
        fits = [p.fitness for p in events if p.status == RunStatus.RUNNING and p.generation > 0]
        self.assertEqual(len(fits), 30)
        self.assertEqual(fits, sorted(fits))
        self.assertEqual(len(result.schedule), 10)

    def test_progress_state_machine(self):
        cfg = GAConfig(population_size=6, max_generations=4, seed=1)
        events = []
        result = run_timetable(*school(), cfg, on_progress=events.append)
        statuses = [p.status for p in events]
        self.assertEqual(statuses[0], RunStatus.INITIALIZING)
        self.assertEqual(statuses[1], RunStatus.RUNNING)
        self.assertEqual(events[1].generation, 0)
        self.assertEqual([p.generation for p in events[2:-1]], [1, 2, 3, 4])
        self.assertEqual(statuses[-1], RunStatus.COMPLETED)
        self.assertEqual(events[-1].fitness, result.fitness)
        self.assertTrue(all(p.max_generations == 4 for p in events))

    def test_unavailable_teacher_never_scheduled_on_that_day(self):
        cfg = GAConfig(population_size=10, max_generations=15, mutation_rate=1.0, seed=9)
        result = run_timetable(*school(), cfg)
        for a in result.schedule.assignments:
            if a.teacher_id == 2:
                self.assertNotEqual(a.day, "Senin")

    def test_metadata_for_persistence(self):
        cfg = GAConfig(population_size=6, max_generations=3, seed=2)
        result = run_timetable(*school(), cfg)
        meta = result.metadata()
        self.assertEqual(meta["status"], "completed")
        self.assertEqual(meta["generation_count"], 3)
        self.assertEqual(meta["population_size"], 6)
        self.assertEqual(meta["final_fitness"], result.fitness)
        self.assertLessEqual(result.started_at, result.finished_at)

    def test_seeded_runs_are_reproducible(self):
        cfg = GAConfig(population_size=8, max_generations=5, seed=77)
        first = run_timetable(*school(), cfg)
        second = run_timetable(*school(), cfg)
        self.assertEqual(first.schedule, second.schedule)

    def test_empty_input_is_refused_before_start(self):
        teachers, classes, subjects, _ = school()
        events = []
        with self.assertRaises(PreconditionError):
            run_timetable(teachers, classes, subjects, [], GAConfig(), on_progress=events.append)
        self.assertEqual(events, [])

    def test_invalid_config(self):
        with self.assertRaises(ConfigError):
            run_timetable(*school(), GAConfig(population_size=1))
        with self.assertRaises(ConfigError):
            run_timetable(*school(), GAConfig(mutation_rate=1.5))

    def test_unexpected_error_fails_the_run(self):
        events = []

        def sink(p):
            events.append(p)
            if p.status == RunStatus.RUNNING and p.generation == 2:
                raise KeyError("boom")

        with self.assertRaises(RunFailure) as ctx:
            run_timetable(*school(), GAConfig(population_size=6, max_generations=5), on_progress=sink)
        self.assertIsInstance(ctx.exception.__cause__, KeyError)
        self.assertEqual(events[-1].status, RunStatus.FAILED)
        self.assertEqual(events[-1].generation, 2)


if __name__ == "__main__":
    unittest.main()
