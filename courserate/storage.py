"""
Persistent storage for ratings.

This module manages the file (by default):

    courserate/data/ratings.csv

Format: one header line, then one line per rating:

    courseId,courseName,professorName,rating,comment

The comment is the last field and may itself contain commas; it is not
escaped. Lines are therefore split on the first four commas only.

Bytes that are not valid UTF-8 are read as U+FFFD rather than rejecting
the file.

Saving always rewrites the whole file, courses in name order, then by
professor assignment, then by rating.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Optional, Tuple

from courserate.errors import RatingFileError, RatingParseError
from courserate.store import RatingStore

logger = logging.getLogger(__name__)

HEADER = "courseId,courseName,professorName,rating,comment"
FIELD_COUNT = 5
ONE_DECIMAL = Decimal("0.1")

ParsedLine = Tuple[str, str, str, float, str]


@dataclass(frozen=True)
class LoadSummary:
    loaded: int = 0
    skipped: int = 0
    rejected: int = 0


def default_data_path() -> Path:
    """
    Return the default path of ratings.csv inside the package.

    Using a function instead of a constant makes testing easier,
    because tests and the CLI can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "ratings.csv"


def parse_rating_line(line: str) -> Optional[ParsedLine]:
    """
    Split one data line into (course_id, course_name, professor, score, comment).

    Returns None for lines with fewer than 5 fields.
    Raises ValueError if the score is not a number.
    """
    parts = line.rstrip("\r\n").split(",", FIELD_COUNT - 1)
    if len(parts) < FIELD_COUNT:
        return None

    course_id, course_name, professor, raw_score, comment = (p.strip() for p in parts)
    return course_id, course_name, professor, float(raw_score), comment


def format_score(score: float) -> str:
    """
    One fractional digit, halves rounded up (4.25 -> "4.3", 0.15 -> "0.2").
    """
    return str(Decimal(repr(float(score))).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def format_rating_line(course_id: str, course_name: str, professor: str, score: float, comment: str) -> str:
    return f"{course_id},{course_name},{professor},{format_score(score)},{comment}"


def load_ratings(store: RatingStore, path: str | Path) -> LoadSummary:
    """
    Add every rating in the file to store.

    - missing/unreadable file -> RatingFileError, store untouched
    - short line -> skipped
    - invalid values (blank fields, score outside 0-5) -> rejected, load continues
    - non-numeric score -> RatingParseError, earlier lines stay loaded
    """
    src = Path(path)
    try:
        # undecodable bytes become U+FFFD instead of failing the whole file
        lines = src.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as e:
        raise RatingFileError(src, f"cannot read file ({e})") from e

    loaded = skipped = rejected = 0

    # line 1 is the header
    for line_no, line in enumerate(lines[1:], start=2):
        try:
            parsed = parse_rating_line(line)
        except ValueError as e:
            raw = line.split(",", FIELD_COUNT - 1)[3].strip()
            logger.warning("Stopped loading %s at line %d: bad rating %r", src, line_no, raw)
            raise RatingParseError(src, line_no, raw, loaded) from e

        if parsed is None:
            skipped += 1
            continue

        if store.add_rating(*parsed):
            loaded += 1
        else:
            rejected += 1

    logger.info("Loaded %d ratings from %s (skipped=%d, rejected=%d)", loaded, src, skipped, rejected)
    return LoadSummary(loaded=loaded, skipped=skipped, rejected=rejected)


def load_store(path: str | Path) -> Tuple[RatingStore, LoadSummary]:
    """
    Build a fresh store from a file. This is what "reload" means:
    the old store is simply discarded by the caller.
    """
    store = RatingStore()
    summary = load_ratings(store, path)
    return store, summary


def save_ratings(store: RatingStore, path: str | Path) -> int:
    """
    Rewrite the whole file from store. Returns the number of ratings written.

    Creates parent directories if needed.
    """
    out = Path(path)
    lines = [HEADER]
    for record in store.records():
        lines.append(format_rating_line(*record))

    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as e:
        raise RatingFileError(out, f"cannot write file ({e})") from e

    n = len(lines) - 1
    logger.info("Saved %d ratings to %s", n, out)
    return n
