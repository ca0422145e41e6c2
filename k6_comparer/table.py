"""Flat result table — rows, header order, CSV write and read-back."""

import csv
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from k6_comparer.models import PERCENTAGE, PREFERRED_LABELS, RATE, FileMetrics
from k6_comparer.reporting import Reporter, default_reporter
from k6_comparer.units import (
    normalize,
    parse_count,
    parse_duration_ms,
    parse_percentage,
    parse_rate,
)

logger = logging.getLogger(__name__)

SOURCE = "Source"
FILE = "File"
METRIC = "Metric"
LEADING_COLUMNS = (SOURCE, FILE, METRIC)

DEFAULT_STRIP_PREFIXES = ("Azure-", "Cloud-")

Row = dict[str, str]


def file_identifier(filename: str, strip_prefixes: Iterable[str] = DEFAULT_STRIP_PREFIXES) -> str:
    """'Azure-Load.txt' -> 'Load'. The test type shared across sources."""
    stem = os.path.splitext(os.path.basename(filename))[0]
    for prefix in strip_prefixes:
        stem = stem.replace(prefix, "")
    return stem


def flatten(source: str, file_id: str, metrics: FileMetrics) -> list[Row]:
    """One row per metric, leading columns first."""
    rows = []
    for name, stats in metrics.items():
        row = {SOURCE: source, FILE: file_id, METRIC: name}
        row.update(stats)
        rows.append(row)
    return rows


def build_headers(rows: Iterable[Mapping[str, str]]) -> list[str]:
    """Leading columns, preferred labels present, then the rest sorted."""
    seen = set()
    for row in rows:
        seen.update(row.keys())
    ordered = list(LEADING_COLUMNS) + [h for h in PREFERRED_LABELS if h in seen]
    extras = sorted(seen.difference(ordered))
    return ordered + extras


def write_rows(f, rows: list[Mapping[str, str]], headers: list[str] | None = None):
    """Write rows to an open text stream. Missing cells are empty."""
    headers = headers or build_headers(rows)
    writer = csv.writer(f, quoting=csv.QUOTE_MINIMAL)
    writer.writerow(headers)
    for row in rows:
        writer.writerow([row.get(h, "") for h in headers])


def write_csv(path: str, rows: list[Mapping[str, str]], headers: list[str] | None = None) -> str:
    """Write (overwrite) the result CSV. Returns the path written."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        write_rows(f, rows, headers)
    logger.info("Wrote %d rows to %s", len(rows), path)
    return path


# ---------------------------------------------------------------------------
# Read-back
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResultRow:
    source: str
    file: str
    metric: str
    stats: dict[str, str] = field(default_factory=dict)

    def raw(self, label: str) -> str | None:
        return self.stats.get(label)

    def duration_ms(self, label: str, reporter: Reporter | None = None) -> float | None:
        return parse_duration_ms(self.stats.get(label), reporter)

    def rate(self, reporter: Reporter | None = None) -> float | None:
        return parse_rate(self.stats.get(RATE), reporter)

    def percentage(self, reporter: Reporter | None = None) -> float | None:
        return parse_percentage(self.stats.get(PERCENTAGE), reporter)

    def number(self, label: str, reporter: Reporter | None = None) -> float | None:
        return parse_count(self.stats.get(label), reporter)

    def value(self, label: str, reporter: Reporter | None = None) -> float | None:
        return normalize(self.stats, label, reporter)


def read_results(f, reporter: Reporter | None = None) -> list[ResultRow]:
    """Parse result rows from an open CSV stream."""
    reporter = reporter or default_reporter()
    reader = csv.DictReader(f)
    missing = [c for c in LEADING_COLUMNS if c not in (reader.fieldnames or [])]
    if missing:
        raise ValueError(f"CSV is missing required columns: {', '.join(missing)}")

    results = []
    for line_num, record in enumerate(reader, start=2):
        source = (record.get(SOURCE) or "").strip()
        file_id = (record.get(FILE) or "").strip()
        metric = (record.get(METRIC) or "").strip()
        if not (source and file_id and metric):
            reporter.warning("Skipping malformed row", line=line_num)
            continue
        stats = {
            k: v.strip()
            for k, v in record.items()
            if k not in LEADING_COLUMNS and k is not None and v and v.strip()
        }
        results.append(ResultRow(source=source, file=file_id, metric=metric, stats=stats))
    return results


def load_results(path: str, reporter: Reporter | None = None) -> list[ResultRow]:
    """Read a result CSV written by write_csv."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return read_results(f, reporter)
