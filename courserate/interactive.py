from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from courserate.errors import RatingFileError, RatingParseError
from courserate.model import Course
from courserate.ranking import with_positions
from courserate.storage import load_ratings, save_ratings
from courserate.store import RatingStore

console = Console()


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg)


def _prompt_int(msg: str) -> Optional[int]:
    raw = _prompt(msg).strip()
    try:
        return int(raw)
    except ValueError:
        return None


def _load(path: Path) -> Tuple[RatingStore, bool]:
    """
    Build a fresh store from path and report whether the whole file made it in.

    Problems are reported, never raised: a missing file gives an empty
    (complete) store, a parse error keeps what loaded so far (incomplete).
    """
    store = RatingStore()
    if not path.exists():
        _println(f"No data file yet ({path}), starting empty.")
        return store, True
    try:
        summary = load_ratings(store, path)
        _println(f"Loaded {summary.loaded} ratings from {path}.")
        return store, True
    except RatingParseError as e:
        _println(f"[red]Rating format error:[/] {escape(str(e))} ({e.loaded} ratings loaded before it)")
    except RatingFileError as e:
        _println(f"[red]Error reading file:[/] {escape(str(e))}")
    return store, False


def _save(store: RatingStore, path: Path, complete: bool = True) -> bool:
    """
    Rewrite path from store. If the file was not fully loaded, saving would
    drop the lines that never made it in, so ask first.
    """
    if not complete:
        answer = _prompt(
            "The data file was only partly loaded. Saving drops the rest of it. Overwrite? (y/N): "
        ).strip().lower()
        if answer != "y":
            _println("Not saved; data file left unchanged.")
            return False
    try:
        n = save_ratings(store, path)
        _println(f"Saved {n} ratings to {path}.")
        return True
    except RatingFileError as e:
        _println(f"[red]Error saving file:[/] {escape(str(e))}")
        return False


def run_interactive(path: Path) -> None:
    """
    Interactive menu loop. [7] reload replaces the store with a fresh one.
    """
    store, complete = _load(path)

    while True:
        _println("\n=== Course & Professor Rating System ===")
        _println(f"Courses: {store.course_count()} | Professors: {store.professor_count()}")

        choice = _prompt(
            "\n[1] Add new rating\n"
            "[2] Search by course ID\n"
            "[3] Search by course name\n"
            "[4] Search by professor name\n"
            "[5] Professor ranking\n"
            "[6] Save data\n"
            "[7] Reload data\n"
            "[0] Save and exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _save(store, path, complete)
            _println("Bye.")
            return

        if choice == "1":
            _flow_add_rating(store)
        elif choice == "2":
            _flow_course_by_id(store)
        elif choice == "3":
            _flow_course_by_name(store)
        elif choice == "4":
            _flow_professor(store)
        elif choice == "5":
            _flow_ranking(store)
        elif choice == "6":
            if _save(store, path, complete):
                complete = True
        elif choice == "7":
            store, complete = _load(path)
        else:
            _println("Invalid choice.")


def _flow_add_rating(store: RatingStore) -> None:
    course_id = _prompt("Course ID: ").strip()
    course_name = _prompt("Course name: ").strip()
    professor = _prompt("Professor name: ").strip()
    raw_score = _prompt("Rating (0-5): ").strip()
    try:
        score = float(raw_score)
    except ValueError:
        _println("Not a number.")
        return
    comment = _prompt("Comment: ").strip()

    result = store.add_rating(course_id, course_name, professor, score, comment)
    if result:
        _println("[green]Rating added.[/]")
    else:
        _println(f"[red]Error:[/] {escape(result.error or '')}")


def _show_course(store: RatingStore, course: Course) -> None:
    _println(f"\n[bold cyan]{escape(course.course_id)}[/] {escape(course.name)}")
    _println(f"Overall average: {course.overall_average_rating:.2f}")

    ranking = store.rank_professors_in_course(course.course_id)
    if not ranking:
        _println("No rating data available.")
        return

    table = Table(title="Professors", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Professor")
    table.add_column("Average", justify="right")
    table.add_column("Ratings", justify="right")
    table.add_column("Comments")
    for pos, a in with_positions(ranking):
        comments = "\n".join(f"[{r.score:.1f}] {r.comment}" for r in a.ratings)
        table.add_row(str(pos), Text(a.professor_name), f"{a.average_rating:.2f}", str(a.rating_count), Text(comments))
    console.print(table)


def _flow_course_by_id(store: RatingStore) -> None:
    course_id = _prompt("Course ID: ").strip()
    course = store.search_course_by_id(course_id)
    if course is None:
        _println(f"Course with ID {escape(course_id)} not found.")
        return
    _show_course(store, course)


def _flow_course_by_name(store: RatingStore) -> None:
    keyword = _prompt("Course name keyword: ").strip()
    matches = store.search_courses_by_name(keyword)
    if not matches:
        _println(f'No courses found containing "{escape(keyword)}".')
        return

    if len(matches) == 1:
        _show_course(store, matches[0])
        return

    table = Table(title=f"Found {len(matches)} courses", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Average", justify="right")
    for i, c in enumerate(matches, start=1):
        table.add_row(str(i), Text(c.course_id), Text(c.name), f"{c.overall_average_rating:.2f}")
    console.print(table)

    pick = _prompt_int("Enter number for details [0 = skip]: ")
    if pick is not None and 1 <= pick <= len(matches):
        _show_course(store, matches[pick - 1])


def _flow_professor(store: RatingStore) -> None:
    name = _prompt("Professor name: ").strip()
    professor = store.search_professor_by_name(name)
    if professor is None:
        _println(f"Professor named {escape(name)} not found.")
        return

    _println(f"\n[bold magenta]{escape(professor.name)}[/]")
    _println(f"Overall average: {store.professor_average(professor.name):.2f}")

    table = Table(title="Courses teaching", box=box.SIMPLE)
    table.add_column("Course")
    table.add_column("Average", justify="right")
    table.add_column("Comments")
    for a in store.professor_assignments(professor.name):
        course = store.search_course_by_id(a.course_id)
        label = f"{a.course_id} {course.name}" if course is not None else a.course_id
        comments = "\n".join(f"[{r.score:.1f}] {r.comment}" for r in a.ratings)
        table.add_row(Text(label), f"{a.average_rating:.2f}", Text(comments))
    console.print(table)


def _flow_ranking(store: RatingStore) -> None:
    kind = _prompt("[1] Overall ranking\n[2] Ranking within a course\nSelect: ").strip()

    if kind == "1":
        professors = store.rank_professors_overall()
        if not professors:
            _println("No professor data available.")
            return
        top = _prompt_int("Show top how many? [0 = all]: ") or 0

        table = Table(title="Overall professor ranking", box=box.SIMPLE)
        table.add_column("#", justify="right")
        table.add_column("Professor")
        table.add_column("Average", justify="right")
        for pos, p in with_positions(professors, top=top):
            table.add_row(str(pos), Text(p.name), f"{store.professor_average(p.name):.2f}")
        console.print(table)
    elif kind == "2":
        course_id = _prompt("Course ID: ").strip()
        course = store.search_course_by_id(course_id)
        if course is None:
            _println(f"Course with ID {escape(course_id)} not found.")
            return
        _show_course(store, course)
    else:
        _println("Invalid choice.")
