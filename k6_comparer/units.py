"""Unit normalisation for raw k6 values.

Durations become milliseconds, rates become per-second values and
percentages become percentage points. Every conversion returns None when
there is nothing to convert, so "no data" never turns into 0.0.

Unitless durations are returned unchanged, i.e. assumed to already be in
milliseconds. This matches what the comparison tables were built on but is
not a safe inference for every metric family.
"""

import re
from typing import Callable, Mapping

from k6_comparer.models import (
    COUNT,
    DURATION_LABELS,
    PERCENTAGE,
    RATE,
    TOTAL,
    VALUE,
)
from k6_comparer.reporting import Reporter, default_reporter

# Decimal point only; commas are accepted as thousands grouping.
_NUMBER_RE = re.compile(
    r"[+-]?(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d*)?(?:[eE][+-]?\d+)?"
    r"|[+-]?\.\d+(?:[eE][+-]?\d+)?"
)

# k6 prints long durations as e.g. "1m2.5s" or "1h3m0s"
_COMPOUND_DURATION_RE = re.compile(
    r"(?:(?P<hours>\d+(?:\.\d+)?)h)?"
    r"(?:(?P<minutes>\d+(?:\.\d+)?)m)?"
    r"(?:(?P<seconds>\d+(?:\.\d+)?)s)?"
)

_MICRO_SUFFIXES = ("µs", "μs", "us")

MS_PER_SECOND = 1000.0
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE


def parse_number(text: str) -> float | None:
    """Parse a plain, locale-invariant decimal number."""
    stripped = text.strip()
    if not _NUMBER_RE.fullmatch(stripped):
        return None
    return float(stripped.replace(",", ""))


def _is_blank(raw: str | None) -> bool:
    return raw is None or not raw.strip()


def _compound_to_ms(text: str) -> float | None:
    m = _COMPOUND_DURATION_RE.fullmatch(text)
    if not m or (m.group("hours") is None and m.group("minutes") is None):
        return None
    hours, minutes, seconds = (float(g) if g else 0.0 for g in m.groups())
    return hours * MS_PER_HOUR + minutes * MS_PER_MINUTE + seconds * MS_PER_SECOND


def parse_duration_ms(raw: str | None, reporter: Reporter | None = None) -> float | None:
    """Convert "25.53ms", "1.05s", "500µs", "1m2s" or "12" to milliseconds."""
    if _is_blank(raw):
        return None
    text = raw.strip()
    lowered = text.lower()

    value = None
    if lowered.endswith("ms"):
        value = parse_number(text[:-2])
    elif lowered.endswith(_MICRO_SUFFIXES):
        number = parse_number(text[:-2])
        value = number / 1000.0 if number is not None else None
    else:
        value = _compound_to_ms(lowered)
        if value is None and lowered.endswith("s"):
            number = parse_number(text[:-1])
            value = number * MS_PER_SECOND if number is not None else None
        elif value is None:
            # No unit: assumed to be milliseconds already
            value = parse_number(text)

    if value is None:
        (reporter or default_reporter()).warning("Could not parse duration", value=raw)
    return value


def parse_rate(raw: str | None, reporter: Reporter | None = None) -> float | None:
    """Convert "5.71704/s" to 5.71704. The /s suffix is required."""
    if _is_blank(raw):
        return None
    text = raw.strip()
    value = None
    if text.lower().endswith("/s"):
        value = parse_number(text[:-2])
    if value is None:
        (reporter or default_reporter()).warning("Could not parse rate", value=raw)
    return value


def parse_percentage(raw: str | None, reporter: Reporter | None = None) -> float | None:
    """Convert "37.5%" to 37.5. The % suffix is required."""
    if _is_blank(raw):
        return None
    text = raw.strip()
    value = None
    if text.endswith("%"):
        value = parse_number(text[:-1])
    if value is None:
        (reporter or default_reporter()).warning("Could not parse percentage", value=raw)
    return value


def parse_count(raw: str | None, reporter: Reporter | None = None) -> float | None:
    """Plain numbers such as iteration counts or VU values."""
    if _is_blank(raw):
        return None
    value = parse_number(raw)
    if value is None:
        (reporter or default_reporter()).warning("Could not parse number", value=raw)
    return value


Converter = Callable[[str | None, Reporter | None], float | None]

CONVERTERS: dict[str, Converter] = {
    **{label: parse_duration_ms for label in DURATION_LABELS},
    RATE: parse_rate,
    PERCENTAGE: parse_percentage,
    VALUE: parse_count,
    COUNT: parse_count,
    TOTAL: parse_count,
}


def normalize(stats: Mapping[str, str], label: str, reporter: Reporter | None = None) -> float | None:
    """Normalised value of one statistic, picking the conversion by label."""
    converter = CONVERTERS.get(label)
    if converter is None:
        (reporter or default_reporter()).warning("No unit conversion for statistic", label=label)
        return None
    return converter(stats.get(label), reporter)
