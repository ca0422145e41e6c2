"""Generator-based file reading and per-file metric extraction."""

import fnmatch
import os
from typing import Generator

from k6_comparer.classifier import parse_lines
from k6_comparer.models import FileMetrics
from k6_comparer.reporting import Reporter, default_reporter


def read_lines(filepath: str) -> Generator[str, None, None]:
    """Yield each line of a UTF-8 file."""
    with open(filepath, "r", encoding="utf-8") as f:
        yield from f


def find_result_files(folder: str, pattern: str = "*.txt") -> list[str]:
    """Sorted files directly inside *folder* matching *pattern*.

    Raises OSError when the folder cannot be listed.
    """
    matches = []
    with os.scandir(folder) as entries:
        for entry in entries:
            # hidden files only match an explicit dot pattern, as with glob
            if entry.name.startswith(".") and not pattern.startswith("."):
                continue
            if fnmatch.fnmatch(entry.name, pattern) and entry.is_file():
                matches.append(entry.path)
    return sorted(matches)


def source_name(folder: str) -> str:
    """The folder's base name, ignoring a trailing separator."""
    return os.path.basename(os.path.normpath(folder))


def parse_file(filepath: str, reporter: Reporter | None = None) -> FileMetrics | None:
    """Extract metrics from one file.

    Returns None and reports a warning when the file cannot be read, so the
    caller can move on to the next file.
    """
    reporter = reporter or default_reporter()
    try:
        return parse_lines(read_lines(filepath))
    except FileNotFoundError:
        reporter.warning("File not found", path=filepath)
    except PermissionError:
        reporter.warning("Access denied", path=filepath)
    except UnicodeDecodeError as exc:
        reporter.warning("File is not valid UTF-8", path=filepath, error=str(exc))
    except OSError as exc:
        reporter.warning("Error reading file", path=filepath, error=str(exc))
    return None
