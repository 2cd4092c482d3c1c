"""
CLI (Command Line Interface).

Quick terminal commands, e.g.:

    courserate add CPS1231 "Java Programming" "Dr. Lee" 4.5 "Great"
    courserate course CPS1231
    courserate search java
    courserate letter j
    courserate professor "Dr. Lee"
    courserate rank [--course CPS1231] [--top 5]
    courserate list
    courserate interactive

Note:
- The interactive menu lives in courserate/interactive.py
- This CLI prints plain text (no rich formatting)
- Exit codes: 0 ok, 1 bad input / nothing to show, 2 file or parse error
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from courserate.errors import RatingFileError
from courserate.model import Course
from courserate.ranking import with_positions
from courserate.storage import default_data_path, load_ratings, save_ratings
from courserate.store import RatingStore

logger = logging.getLogger(__name__)


def _open_store(path: Path) -> RatingStore:
    """
    Load the data file into a new store.

    A missing file is a normal first run: start with an empty store.
    Other file errors propagate to main().
    """
    store = RatingStore()
    if not path.exists():
        logger.info("No data file at %s yet, starting empty", path)
        return store
    load_ratings(store, path)
    return store


def _print_course_details(store: RatingStore, course: Course) -> None:
    print(f"[{course.course_id}] {course.name}")
    print(f"Overall average: {course.overall_average_rating:.2f} ({course.rating_count} ratings)")

    ranking = store.rank_professors_in_course(course.course_id)
    if not ranking:
        print("No rating data available.")
        return

    for pos, a in with_positions(ranking):
        print(f"{pos}. {a.professor_name} - Average: {a.average_rating:.2f} ({a.rating_count} ratings)")
        for r in a.ratings:
            print(f"   - [{r.score:.1f}] {r.comment}")


def _print_course_list(courses: list[Course]) -> None:
    for c in courses:
        print(f"{c.course_id} | {c.name} | {c.overall_average_rating:.2f}")


def _cmd_add(args: argparse.Namespace, store: RatingStore, path: Path) -> int:
    result = store.add_rating(args.course_id, args.course_name, args.professor, args.score, args.comment)
    if not result:
        print(f"Error: {result.error}")
        return 1

    save_ratings(store, path)
    print("Rating added successfully.")
    return 0


def _cmd_course(args: argparse.Namespace, store: RatingStore) -> int:
    course = store.search_course_by_id(args.course_id)
    if course is None:
        print(f"Course with ID {args.course_id} not found.")
        return 1
    _print_course_details(store, course)
    return 0


def _cmd_search(args: argparse.Namespace, store: RatingStore) -> int:
    """
    Search courses by substring of the course name.
    """
    text = (args.text or "").strip()
    if not text:
        print("Please provide a search text.")
        return 1

    matches = store.search_courses_by_name(text)
    if not matches:
        print(f'No courses found containing "{text}".')
        return 0

    print(f"Found {len(matches)} course(s):")
    _print_course_list(matches)
    return 0


def _cmd_letter(args: argparse.Namespace, store: RatingStore) -> int:
    letter = (args.letter or "").strip()
    if len(letter) != 1:
        print("Please provide a single letter.")
        return 1

    matches = store.search_courses_by_first_letter(letter)
    if not matches:
        print(f'No courses starting with "{letter}".')
        return 0
    _print_course_list(matches)
    return 0


def _cmd_professor(args: argparse.Namespace, store: RatingStore) -> int:
    professor = store.search_professor_by_name(args.name)
    if professor is None:
        print(f"Professor named {args.name} not found.")
        return 1

    print(f"Professor: {professor.name}")
    print(f"Overall average: {store.professor_average(professor.name):.2f}")
    for a in store.professor_assignments(professor.name):
        course = store.search_course_by_id(a.course_id)
        title = course.name if course is not None else ""
        print(f"\n[{a.course_id}] {title} - Average: {a.average_rating:.2f}")
        for r in a.ratings:
            print(f"  - [{r.score:.1f}] {r.comment}")
    return 0


def _cmd_rank(args: argparse.Namespace, store: RatingStore) -> int:
    if args.course:
        course = store.search_course_by_id(args.course)
        if course is None:
            print(f"Course with ID {args.course} not found.")
            return 1
        ranking = store.rank_professors_in_course(course.course_id)
        if not ranking:
            print("No rating data available.")
            return 0
        print(f"Professor ranking for [{course.course_id}] {course.name}:")
        for pos, a in with_positions(ranking, top=args.top):
            print(f"{pos}. {a.professor_name} - Average: {a.average_rating:.2f} ({a.rating_count} ratings)")
        return 0

    professors = store.rank_professors_overall()
    if not professors:
        print("No professor data available.")
        return 0
    print("Overall professor ranking:")
    for pos, p in with_positions(professors, top=args.top):
        print(f"{pos}. {p.name} - Average: {store.professor_average(p.name):.2f}")
    return 0


def _cmd_list(args: argparse.Namespace, store: RatingStore) -> int:
    courses = store.courses()
    if not courses:
        print("No courses yet.")
        return 0
    _print_course_list(courses)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="courserate", description="Course & professor rating CLI")
    parser.add_argument("--data", type=str, default=None, help="Ratings CSV file (default: package data file)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_add = sub.add_parser("add", help="Add a rating")
    p_add.add_argument("course_id", type=str, help="Course ID (e.g. CPS1231)")
    p_add.add_argument("course_name", type=str, help="Course name")
    p_add.add_argument("professor", type=str, help="Professor name")
    p_add.add_argument("score", type=float, help="Rating 0-5")
    p_add.add_argument("comment", type=str, nargs="?", default="", help="Comment")

    p_course = sub.add_parser("course", help="Show course details by course ID")
    p_course.add_argument("course_id", type=str)

    p_search = sub.add_parser("search", help="Search courses by name")
    p_search.add_argument("text", type=str, help="Search text")

    p_letter = sub.add_parser("letter", help="List courses starting with a letter")
    p_letter.add_argument("letter", type=str)

    p_prof = sub.add_parser("professor", help="Show professor details")
    p_prof.add_argument("name", type=str)

    p_rank = sub.add_parser("rank", help="Professor ranking (overall or within a course)")
    p_rank.add_argument("--course", type=str, default=None, help="Rank within this course ID")
    p_rank.add_argument("--top", type=int, default=0, help="Show only the top N (0 = all)")

    sub.add_parser("list", help="List all courses sorted by name")
    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.data) if args.data else default_data_path()

    if args.command == "interactive":
        from courserate.interactive import run_interactive

        # the menu loads (and reloads) the file itself and reports errors inline
        run_interactive(path)
        raise SystemExit(0)

    try:
        store = _open_store(path)

        if args.command == "add":
            raise SystemExit(_cmd_add(args, store, path))
        if args.command == "course":
            raise SystemExit(_cmd_course(args, store))
        if args.command == "search":
            raise SystemExit(_cmd_search(args, store))
        if args.command == "letter":
            raise SystemExit(_cmd_letter(args, store))
        if args.command == "professor":
            raise SystemExit(_cmd_professor(args, store))
        if args.command == "rank":
            raise SystemExit(_cmd_rank(args, store))
        if args.command == "list":
            raise SystemExit(_cmd_list(args, store))
    except RatingFileError as e:
        print(f"Error: {e}")
        raise SystemExit(2)

    raise SystemExit(2)
