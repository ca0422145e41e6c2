"""Metric records and the per-file metric store."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping

# Statistic labels, in the order the CSV prefers them
AVG = "Avg"
MIN = "Min"
MED = "Med"
MAX = "Max"
P90 = "P90"
P95 = "P95"
VALUE = "Value"
RATE = "Rate"
PERCENTAGE = "Percentage"
COUNT = "Count"
TOTAL = "Total"

DURATION_LABELS = (AVG, MIN, MED, MAX, P90, P95)
PREFERRED_LABELS = (*DURATION_LABELS, VALUE, RATE, PERCENTAGE, COUNT, TOTAL)


class Shape(Enum):
    """Line shapes, declared in classification priority order."""

    SUMMARY = "summary"
    PERCENTAGE = "percentage"
    GAUGE = "gauge"
    VALUE_RATE = "value_rate"
    SCALAR = "scalar"


StatisticSet = Mapping[str, str]


def statistic_set(values: Mapping[str, str]) -> StatisticSet:
    """Freeze a label -> raw value mapping."""
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class MetricRecord:
    name: str
    stats: StatisticSet
    shape: Shape

    def __hash__(self):
        return hash((self.name, tuple(self.stats.items()), self.shape))


class FileMetrics:
    """Metric name -> StatisticSet for a single input file.

    Scalar matches only fill names that are still free, so a metric already
    read from a more specific line is never downgraded.
    """

    def __init__(self):
        self._metrics: dict[str, StatisticSet] = {}
        self._shapes: dict[str, Shape] = {}

    def add(self, record: MetricRecord) -> bool:
        """Store a record. Returns False when the record was not kept."""
        if record.shape is Shape.SCALAR and record.name in self._metrics:
            return False
        self._metrics[record.name] = record.stats
        self._shapes[record.name] = record.shape
        return True

    def shape_of(self, name: str) -> Shape | None:
        return self._shapes.get(name)

    def get(self, name: str, default=None) -> StatisticSet | None:
        return self._metrics.get(name, default)

    def names(self) -> list[str]:
        return list(self._metrics)

    def items(self):
        return self._metrics.items()

    def as_dict(self) -> dict[str, dict[str, str]]:
        return {name: dict(stats) for name, stats in self._metrics.items()}

    def __getitem__(self, name: str) -> StatisticSet:
        return self._metrics[name]

    def __contains__(self, name: object) -> bool:
        return name in self._metrics

    def __iter__(self) -> Iterator[str]:
        return iter(self._metrics)

    def __len__(self) -> int:
        return len(self._metrics)

    def __repr__(self) -> str:
        return f"FileMetrics({self.as_dict()!r})"
