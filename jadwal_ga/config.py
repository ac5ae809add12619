"""
Configuración del algoritmo genético de jadwal.

Los parámetros se cargan desde YAML para que cada corrida sea configurable
y, si se fija ``seed``, reproducible.
"""
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ConfigError


DEFAULT_DAYS: List[str] = ["Senin", "Selasa", "Rabu", "Kamis", "Jumat"]
DEFAULT_PERIODS_PER_DAY = 8


@dataclass
class GAConfig:
    # Calendario
    days: List[str] = field(default_factory=lambda: list(DEFAULT_DAYS))
    periods_per_day: int = DEFAULT_PERIODS_PER_DAY

    # Algoritmo genético
    max_generations: int = 100
    population_size: int = 50
    elite_size: Optional[int] = None
    mutation_rate: float = 0.3
    crossover_rate: float = 0.8
    gene_mutation_rate: float = 0.1
    tournament_size: int = 5
    max_placement_attempts: int = 200
    availability_aware_mutation: bool = True
    seed: Optional[int] = None
    log_every: int = 5

    # Pesos del fitness
    weight_teacher_clash: float = 15.0
    weight_room_clash: float = 15.0
    weight_class_clash: float = 20.0
    weight_overload: float = 5.0
    weight_day_balance: float = 0.2
    weight_unavailable_day: float = 10.0
    strict_day_balance: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GAConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k in merged:
                merged[k] = v
        return cls(**merged)

    @property
    def hours(self) -> List[int]:
        return list(range(1, self.periods_per_day + 1))

    def resolved_elite_size(self) -> int:
        """Cantidad de élite que pasa intacta a cada generación."""
        if self.elite_size is None:
            elite = max(2, int(self.population_size * 0.1))
        else:
            elite = self.elite_size
        return min(elite, self.population_size)

    def validate(self) -> "GAConfig":
        if not self.days:
            raise ConfigError("days debe listar al menos un día")
        if len(set(self.days)) != len(self.days):
            raise ConfigError(f"days contiene días repetidos: {self.days}")
        if self.periods_per_day < 1:
            raise ConfigError("periods_per_day debe ser >= 1")
        if self.max_generations < 1:
            raise ConfigError("max_generations debe ser >= 1")
        if self.population_size < 2:
            raise ConfigError("population_size debe ser >= 2")
        if self.elite_size is not None and self.elite_size < 0:
            raise ConfigError("elite_size debe ser >= 0")
        for name in ("mutation_rate", "crossover_rate", "gene_mutation_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} debe estar en [0, 1], se recibió {value}")
        if self.tournament_size < 1:
            raise ConfigError("tournament_size debe ser >= 1")
        if self.max_placement_attempts < 1:
            raise ConfigError("max_placement_attempts debe ser >= 1")
        if self.log_every < 1:
            raise ConfigError("log_every debe ser >= 1")
        return self


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


def load_config(path: str = "config.yaml") -> GAConfig:
    cfg_path = Path(path)
    data = _load_yaml(cfg_path)
    if not isinstance(data, dict):
        raise ConfigError("config.yaml debe contener un objeto mapeo")
    return GAConfig.from_dict(data)
