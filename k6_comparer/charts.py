"""Bar charts comparing one headline metric across sources."""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Iterable

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from k6_comparer.compare import distinct, find_row  # noqa: E402
from k6_comparer.config import DEFAULT_COLOR_GROUPS, FALLBACK_COLOR, ColorGroup  # noqa: E402
from k6_comparer.models import AVG, P95  # noqa: E402
from k6_comparer.reporting import Reporter, default_reporter  # noqa: E402
from k6_comparer.table import ResultRow  # noqa: E402

logger = logging.getLogger(__name__)

FIGURE_SIZE = (8, 6)  # 800x600 at 100 dpi
DPI = 100

ValueSelector = Callable[[ResultRow, Reporter], float | None]


@dataclass(frozen=True)
class ChartSpec:
    name: str
    metric: str
    title: str
    y_label: str
    select: ValueSelector


CHART_SPECS = (
    ChartSpec("AvgReqDuration", "http_req_duration", "Avg HTTP Req Duration",
              "Avg Duration (ms)", lambda r, rep: r.duration_ms(AVG, rep)),
    ChartSpec("P95ReqDuration", "http_req_duration", "P95 HTTP Req Duration",
              "P95 Duration (ms)", lambda r, rep: r.duration_ms(P95, rep)),
    ChartSpec("FailureRate", "http_req_failed", "HTTP Req Failure Rate",
              "Failure Rate (%)", lambda r, rep: r.percentage(rep)),
    ChartSpec("ReqRate", "http_reqs", "HTTP Reqs Rate",
              "Requests per Second (/s)", lambda r, rep: r.rate(rep)),
)


def color_for(source: str, groups: Iterable[ColorGroup] = DEFAULT_COLOR_GROUPS) -> str:
    """Colour of the first group whose match occurs in the source name."""
    lowered = source.lower()
    for group in groups:
        if group.match.lower() in lowered:
            return group.color
    return FALLBACK_COLOR


def generate_bar_chart(
    rows: list[ResultRow],
    spec: ChartSpec,
    sources: list[str],
    title: str,
    path: str,
    color_groups: Iterable[ColorGroup] = DEFAULT_COLOR_GROUPS,
    reporter: Reporter | None = None,
) -> str | None:
    """Render one bar per source. Returns the saved path, or None if skipped."""
    reporter = reporter or default_reporter()
    color_groups = tuple(color_groups)

    labels, values, colors = [], [], []
    data_found = False
    for source in sources:
        row = find_row(rows, source, spec.metric)
        value = spec.select(row, reporter) if row is not None else None
        if value is None:
            reporter.warning("No data for chart", metric=spec.metric, source=source, chart=title)
            labels.append(f"{source} (N/A)")
            values.append(0.0)
        else:
            data_found = True
            labels.append(source)
            values.append(value)
        colors.append(color_for(source, color_groups))

    if not data_found:
        logger.info("Skipping chart '%s' - no data for metric '%s'", title, spec.metric)
        return None

    fig, ax = plt.subplots(figsize=FIGURE_SIZE, dpi=DPI)
    try:
        positions = list(range(len(sources)))
        bars = ax.bar(positions, values, color=colors)
        ax.bar_label(bars, fmt="%.2f", fontweight="bold")
        ax.set_xticks(positions)
        ax.set_xticklabels(labels)
        ax.set_xlabel("Source (PaaS Provider)")
        ax.set_ylabel(spec.y_label)
        ax.set_title(title)
        fig.tight_layout()
        fig.savefig(path)
    except OSError as exc:
        reporter.warning("Error saving chart", path=path, error=str(exc))
        return None
    finally:
        plt.close(fig)
    logger.info("Saved chart: %s", os.path.basename(path))
    return path


def generate_charts(
    rows: list[ResultRow],
    output_dir: str,
    color_groups: Iterable[ColorGroup] = DEFAULT_COLOR_GROUPS,
    reporter: Reporter | None = None,
) -> list[str]:
    """All charts for every test type. Returns the paths written.

    Raises OSError if the output directory cannot be created.
    """
    os.makedirs(output_dir, exist_ok=True)
    color_groups = tuple(color_groups)
    sources = distinct(rows, "source")
    written = []
    for test_type in distinct(rows, "file"):
        subset = [r for r in rows if r.file == test_type]
        for spec in CHART_SPECS:
            path = os.path.join(output_dir, f"{spec.name}_{test_type}.png")
            saved = generate_bar_chart(
                subset, spec, sources,
                title=f"{spec.title} ({test_type})",
                path=path,
                color_groups=color_groups,
                reporter=reporter,
            )
            if saved:
                written.append(saved)
    return written
