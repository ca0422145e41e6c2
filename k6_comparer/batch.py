"""Batch driver — source folders in, flat result rows out."""

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable

from k6_comparer.reader import find_result_files, parse_file, source_name
from k6_comparer.reporting import Reporter, default_reporter
from k6_comparer.table import DEFAULT_STRIP_PREFIXES, Row, file_identifier, flatten

logger = logging.getLogger(__name__)


class NoDataError(RuntimeError):
    """Raised when no input file produced any metric."""


@dataclass
class BatchResult:
    rows: list[Row] = field(default_factory=list)
    processed_files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    missing_folders: list[str] = field(default_factory=list)
    unreadable_folders: list[str] = field(default_factory=list)


def process_folder(
    folder: str,
    result: BatchResult,
    pattern: str = "*.txt",
    strip_prefixes: Iterable[str] = DEFAULT_STRIP_PREFIXES,
    reporter: Reporter | None = None,
) -> None:
    """Parse every matching file in one source folder into *result*."""
    reporter = reporter or default_reporter()
    if not os.path.isdir(folder):
        reporter.warning("Folder not found, skipping", folder=folder)
        result.missing_folders.append(folder)
        return

    try:
        paths = find_result_files(folder, pattern)
    except PermissionError:
        reporter.warning("Access denied to folder, skipping", folder=folder)
        result.unreadable_folders.append(folder)
        return
    except OSError as exc:
        reporter.warning("Error listing folder, skipping", folder=folder, error=str(exc))
        result.unreadable_folders.append(folder)
        return

    source = source_name(folder)
    logger.info("Processing folder: %s (Source: %s)", folder, source)
    for path in paths:
        filename = os.path.basename(path)
        logger.info("  Parsing file: %s", filename)
        metrics = parse_file(path, reporter)
        if metrics is None:
            reporter.warning("Skipping file due to read errors", file=filename)
            result.skipped_files.append(path)
            continue
        result.processed_files.append(path)
        result.rows.extend(flatten(source, file_identifier(filename, strip_prefixes), metrics))


def process_sources(
    folders: Iterable[str],
    pattern: str = "*.txt",
    strip_prefixes: Iterable[str] = DEFAULT_STRIP_PREFIXES,
    reporter: Reporter | None = None,
) -> BatchResult:
    """Parse all source folders in order.

    Raises NoDataError if not a single metric was extracted.
    """
    strip_prefixes = tuple(strip_prefixes)
    result = BatchResult()
    for folder in folders:
        process_folder(folder, result, pattern, strip_prefixes, reporter)

    if not result.rows:
        raise NoDataError("No data parsed from the given folders")
    logger.info("Processed %d files (%d skipped)", len(result.processed_files), len(result.skipped_files))
    return result
