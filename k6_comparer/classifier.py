"""Line classifier for k6 end-of-test summaries.

Shapes are tried in priority order and the first match wins:
  1. Summary-stat  name...: avg=X min=X med=X max=X p(90)=X p(95)=X
  2. Percentage    name...: 2.50% 5 out of 200
  3. Gauge         vus...: 1 min=1 max=10
  4. Value+Rate    name...: 200 5.71704/s
  5. Scalar        name...: 1.2 MB
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable

from k6_comparer.models import (
    AVG,
    COUNT,
    MAX,
    MED,
    MIN,
    P90,
    P95,
    PERCENTAGE,
    RATE,
    TOTAL,
    VALUE,
    FileMetrics,
    MetricRecord,
    Shape,
    statistic_set,
)

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

_STAT_TOKEN = r"[\w.\sµμ%]+"

SUMMARY_RE = re.compile(
    r"^(?P<metric>\w+(?:\{.*\})?)\.*:\s+"
    rf"avg=(?P<avg>{_STAT_TOKEN})\s+"
    rf"min=(?P<min>{_STAT_TOKEN})\s+"
    rf"med=(?P<med>{_STAT_TOKEN})\s+"
    rf"max=(?P<max>{_STAT_TOKEN})\s+"
    rf"p\(90\)=(?P<p90>{_STAT_TOKEN})\s+"
    rf"p\(95\)=(?P<p95>{_STAT_TOKEN})"
)

PERCENTAGE_RE = re.compile(
    r"^(?P<metric>\w+)\.*:\s+"
    r"(?P<percentage>[\d.]+%)\s+"
    r"(?P<count>\d+)\s+out of\s+(?P<total>\d+)"
)

GAUGE_RE = re.compile(
    r"^(?P<metric>vus(?:_max)?)\.*:\s+"
    r"(?P<value>\d+)\s+"
    r"min=(?P<min>\d+)\s+"
    r"max=(?P<max>\d+)"
)

VALUE_RATE_RE = re.compile(
    r"^(?P<metric>\w+)\.*:\s+"
    r"(?P<value>[\d.]+)\s+"
    r"(?P<rate>[\d.]+)/s"
)

SCALAR_RE = re.compile(
    r"^(?P<metric>\w+)\.*:\s+"
    r"(?P<value>[\d.\s]+\w+(?:/s)?)"
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def clean_metric_name(raw: str) -> str:
    """Drop a trailing {tag} block and surrounding fill dots."""
    return raw.split("{", 1)[0].strip().strip(".").strip()


def _groups(m: re.Match, mapping: Iterable[tuple[str, str]]) -> dict[str, str]:
    return {label: m.group(group).strip() for label, group in mapping}


def _extract_summary(m: re.Match) -> dict[str, str]:
    return _groups(m, ((AVG, "avg"), (MIN, "min"), (MED, "med"),
                       (MAX, "max"), (P90, "p90"), (P95, "p95")))


def _extract_percentage(m: re.Match) -> dict[str, str]:
    return _groups(m, ((PERCENTAGE, "percentage"), (COUNT, "count"), (TOTAL, "total")))


def _extract_gauge(m: re.Match) -> dict[str, str]:
    return _groups(m, ((VALUE, "value"), (MIN, "min"), (MAX, "max")))


def _extract_value_rate(m: re.Match) -> dict[str, str]:
    return {
        VALUE: m.group("value").strip(),
        RATE: m.group("rate").strip() + "/s",
    }


def _extract_scalar(m: re.Match) -> dict[str, str]:
    return _groups(m, ((VALUE, "value"),))


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineShape:
    shape: Shape
    pattern: re.Pattern
    extract: Callable[[re.Match], dict[str, str]]

    def match(self, line: str) -> MetricRecord | None:
        m = self.pattern.match(line)
        if not m:
            return None
        return MetricRecord(
            name=clean_metric_name(m.group("metric")),
            stats=statistic_set(self.extract(m)),
            shape=self.shape,
        )


SHAPES: tuple[LineShape, ...] = (
    LineShape(Shape.SUMMARY, SUMMARY_RE, _extract_summary),
    LineShape(Shape.PERCENTAGE, PERCENTAGE_RE, _extract_percentage),
    LineShape(Shape.GAUGE, GAUGE_RE, _extract_gauge),
    LineShape(Shape.VALUE_RATE, VALUE_RATE_RE, _extract_value_rate),
    LineShape(Shape.SCALAR, SCALAR_RE, _extract_scalar),
)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def classify(line: str) -> MetricRecord | None:
    """Classify one line. Returns None for blank or unrecognised lines."""
    stripped = line.strip()
    if not stripped:
        return None
    for line_shape in SHAPES:
        record = line_shape.match(stripped)
        if record is not None:
            return record
    return None


def parse_lines(lines: Iterable[str]) -> FileMetrics:
    """Fold every recognised line into a fresh FileMetrics."""
    metrics = FileMetrics()
    for line in lines:
        record = classify(line)
        if record is not None:
            metrics.add(record)
    return metrics
