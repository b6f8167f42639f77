class LogBenchError(Exception):
    """Base class for every error raised by logbench."""


class ConfigurationError(LogBenchError):
    """A generation or benchmark knob is missing or out of range."""


class PoolBuildError(LogBenchError):
    """Value pools or message templates could not be prepared."""


class IngestionError(LogBenchError):
    """A sink or warehouse statement did not complete."""
