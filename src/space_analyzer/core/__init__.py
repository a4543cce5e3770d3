"""Rdzeń skanera: akumulator, silnik przechodzenia drzewa i rejestr zadań."""

from . import models
from .aggregator import StatsAggregator
from .engine import InvalidRootError, ProgressCallback, ScanAborted, ScanEngine
from .formatter import ResultFormatter
from .registry import TaskRegistry
from .tasks import ScanTask

__all__ = [
	"models",
	"InvalidRootError",
	"ProgressCallback",
	"ResultFormatter",
	"ScanAborted",
	"ScanEngine",
	"ScanTask",
	"StatsAggregator",
	"TaskRegistry",
]
