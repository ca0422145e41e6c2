"""Comparison report — per-source summaries and best/worst across sources."""

import json
from dataclasses import dataclass, field

from k6_comparer.models import AVG, P95, PERCENTAGE, RATE, VALUE
from k6_comparer.reporting import Reporter
from k6_comparer.table import ResultRow

COUNT_UNIT = "count"


@dataclass(frozen=True)
class SummaryField:
    key: str
    title: str
    metric: str
    label: str
    unit: str
    higher_is_better: bool = False


SUMMARY_FIELDS = (
    SummaryField("avg", "Avg Req Duration", "http_req_duration", AVG, "ms"),
    SummaryField("p95", "P95 Req Duration", "http_req_duration", P95, "ms"),
    SummaryField("failRate", "Failure Rate", "http_req_failed", PERCENTAGE, "%"),
    SummaryField("reqRate", "Request Rate", "http_reqs", RATE, "/s", higher_is_better=True),
    SummaryField("waitAvg", "Waiting Avg", "http_req_waiting", AVG, "ms"),
    SummaryField("waitP95", "Waiting P95", "http_req_waiting", P95, "ms"),
    SummaryField("recvAvg", "Receiving Avg", "http_req_receiving", AVG, "ms"),
    SummaryField("recvP95", "Receiving P95", "http_req_receiving", P95, "ms"),
    SummaryField("sendAvg", "Sending Avg", "http_req_sending", AVG, "ms"),
    SummaryField("sendP95", "Sending P95", "http_req_sending", P95, "ms"),
    SummaryField("iterations", "Iterations", "iterations", VALUE, COUNT_UNIT, higher_is_better=True),
    SummaryField("vusMax", "VUs Max", "vus_max", VALUE, COUNT_UNIT),
)


@dataclass
class SourceSummary:
    source: str
    values: dict[str, float | None] = field(default_factory=dict)
    raw: dict[str, str | None] = field(default_factory=dict)


@dataclass(frozen=True)
class Comparison:
    key: str
    unit: str
    best_source: str
    best_value: float
    worst_source: str
    worst_value: float

    @property
    def difference(self) -> float:
        return abs(self.worst_value - self.best_value)


@dataclass
class ReportSection:
    test_type: str
    summaries: list[SourceSummary] = field(default_factory=list)
    comparisons: list[Comparison] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


def distinct(rows: list[ResultRow], attr: str) -> list[str]:
    return sorted({getattr(r, attr) for r in rows})


def find_row(rows: list[ResultRow], source: str, metric: str) -> ResultRow | None:
    return next((r for r in rows if r.source == source and r.metric == metric), None)


def summarize_source(rows: list[ResultRow], source: str, reporter: Reporter | None = None) -> SourceSummary:
    """Headline values for one source. Rows must already be one test type."""
    summary = SourceSummary(source=source)
    for f in SUMMARY_FIELDS:
        row = find_row(rows, source, f.metric)
        if row is None:
            summary.values[f.key] = None
            summary.raw[f.key] = None
            continue
        summary.values[f.key] = row.value(f.label, reporter)
        summary.raw[f.key] = row.raw(f.label)
    return summary


def compare_sources(summaries: list[SourceSummary], source_filter: str | None = None) -> list[Comparison]:
    """Best, worst and spread per field among the selected sources.

    Sources without a value for a field are left out of that field.
    """
    selected = [s for s in summaries if not source_filter or source_filter in s.source]
    comparisons = []
    for f in SUMMARY_FIELDS:
        present = [(s.source, s.values.get(f.key)) for s in selected if s.values.get(f.key) is not None]
        if not present:
            continue
        ranked = sorted(present, key=lambda item: item[1], reverse=f.higher_is_better)
        best, worst = ranked[0], ranked[-1]
        comparisons.append(Comparison(
            key=f.key,
            unit=f.unit,
            best_source=best[0],
            best_value=best[1],
            worst_source=worst[0],
            worst_value=worst[1],
        ))
    return comparisons


def build_report(
    rows: list[ResultRow],
    source_filter: str | None = None,
    reporter: Reporter | None = None,
) -> list[ReportSection]:
    """One report section per test type, sources in name order."""
    sources = distinct(rows, "source")
    reports = []
    for test_type in distinct(rows, "file"):
        subset = [r for r in rows if r.file == test_type]
        present = [s for s in sources if any(r.source == s for r in subset)]
        summaries = [summarize_source(subset, s, reporter) for s in present]
        reports.append(ReportSection(
            test_type=test_type,
            summaries=summaries,
            comparisons=compare_sources(summaries, source_filter),
        ))
    return reports


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _format_value(f: SummaryField, summary: SourceSummary) -> str:
    if f.unit == COUNT_UNIT:
        return summary.raw.get(f.key) or "N/A"
    value = summary.values.get(f.key)
    if value is None:
        return "N/A"
    return f"{value:.2f} {f.unit}"


def format_report_text(reports: list[ReportSection], source_filter: str | None = None) -> str:
    """Human-readable summary and comparison."""
    lines = []
    for report in reports:
        lines.append(f"--- Test Type: {report.test_type} ---")
        for summary in report.summaries:
            lines.append(f"  Source: {summary.source}")
            for f in SUMMARY_FIELDS:
                lines.append(f"    {f.title}: {_format_value(f, summary)}")
        lines.append("")

        heading = "Comparison across sources"
        if source_filter:
            heading += f" matching '{source_filter}'"
        lines.append(f"{heading}:")
        if not report.comparisons:
            lines.append("  No comparable values.")
        for c in report.comparisons:
            unit = "" if c.unit == COUNT_UNIT else f" {c.unit}"
            lines.append(f"  {c.key}:")
            lines.append(f"    Best: {c.best_source} ({c.best_value:.2f}{unit})")
            lines.append(f"    Worst: {c.worst_source} ({c.worst_value:.2f}{unit})")
            lines.append(f"    Difference: {c.difference:.2f}{unit}")
        lines.append("")

    return "\n".join(lines).rstrip("\n")


def format_report_json(reports: list[ReportSection]) -> str:
    """JSON report; absent values stay null."""
    return json.dumps([
        {
            "test_type": r.test_type,
            "sources": {s.source: s.values for s in r.summaries},
            "comparisons": [
                {
                    "key": c.key,
                    "unit": c.unit,
                    "best": {"source": c.best_source, "value": c.best_value},
                    "worst": {"source": c.worst_source, "value": c.worst_value},
                    "difference": c.difference,
                }
                for c in r.comparisons
            ],
        }
        for r in reports
    ], indent=2)
