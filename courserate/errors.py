"""
Errors raised by the rating file adapter.

Validation problems and lookups that find nothing are not exceptions:
validation returns an AddResult, lookups return None or [].
"""

from __future__ import annotations

from pathlib import Path


class RatingFileError(Exception):
    """
    The ratings file could not be read or written.
    """

    def __init__(self, path: str | Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)


class RatingParseError(RatingFileError):
    """
    A line had a non-numeric score. Records before that line stay loaded.
    """

    def __init__(self, path: str | Path, line_no: int, value: str, loaded: int) -> None:
        super().__init__(path, f"line {line_no}: invalid rating {value!r}")
        self.line_no = line_no
        self.value = value
        self.loaded = loaded
