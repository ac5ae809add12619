# jadwal_ga/exceptions.py


class TimetableError(Exception):
    """Base de los errores del generador de horarios."""


class PreconditionError(TimetableError, ValueError):
    """Los datos de entrada no permiten iniciar una corrida."""


class ConfigError(TimetableError, ValueError):
    """Parámetros del algoritmo fuera de rango."""


class RunFailure(TimetableError, RuntimeError):
    """Error inesperado que aborta la corrida completa."""
