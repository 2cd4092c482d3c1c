"""
The rating store.

RatingStore owns:
- the ordered course index (sorted by name)
- a course directory (course_id -> Course)
- a professor directory (professor name -> Professor)

and keeps the Course <-> TeachingAssignment <-> Professor links consistent.
All mutation goes through add_rating() / add_course().
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from courserate.index import OrderedCourseIndex
from courserate.model import Course, Professor, RatingRecord, TeachingAssignment, average
from courserate.ranking import rank_descending

logger = logging.getLogger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 5.0

RecordTuple = Tuple[str, str, str, float, str]


@dataclass(frozen=True)
class AddResult:
    """
    Outcome of a mutating call. error is a human-readable message when ok is False.
    """

    ok: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


def _clean(value: object) -> str:
    return "" if value is None else str(value).strip()


def _clean_comment(comment: object) -> str:
    # one record per file line
    return " ".join(_clean(comment).splitlines())


def _validate_field(label: str, value: str) -> Optional[str]:
    if not value:
        return f"{label} cannot be empty."
    # only the comment (last field of a file line) may hold commas
    if "," in value or len(value.splitlines()) > 1:
        return f"{label} cannot contain commas or line breaks."
    return None


def _validate_course(course_id: str, course_name: str) -> Optional[str]:
    return _validate_field("Course ID", course_id) or _validate_field("Course name", course_name)


def _validate_score(score: object) -> Optional[str]:
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return f"Rating must be a number, got {score!r}."
    if math.isnan(score) or not (MIN_SCORE <= score <= MAX_SCORE):
        return f"Rating must be between 0 and 5. Current rating: {score}"
    return None


class RatingStore:
    def __init__(self) -> None:
        self._index = OrderedCourseIndex()
        self._courses: Dict[str, Course] = {}
        self._professors: Dict[str, Professor] = {}

    # ---------- mutation ----------

    def add_course(self, course_id: str, course_name: str) -> AddResult:
        """
        Create a course without ratings. An existing id is left unchanged.
        """
        course_id = _clean(course_id)
        course_name = _clean(course_name)
        error = _validate_course(course_id, course_name)
        if error:
            return AddResult(ok=False, error=error)

        self._get_or_create_course(course_id, course_name)
        return AddResult(ok=True)

    def add_rating(
        self,
        course_id: str,
        course_name: str,
        professor_name: str,
        score: float,
        comment: str = "",
    ) -> AddResult:
        """
        Validate and store one rating.

        Course, Professor and TeachingAssignment are created on first use;
        every successful call appends exactly one RatingRecord. On a
        validation failure nothing is changed.
        """
        course_id = _clean(course_id)
        course_name = _clean(course_name)
        professor_name = _clean(professor_name)

        error = _validate_course(course_id, course_name)
        if error is None:
            error = _validate_field("Professor name", professor_name)
        if error is None:
            error = _validate_score(score)
        if error:
            logger.debug("Rejected rating for %r/%r: %s", course_id, professor_name, error)
            return AddResult(ok=False, error=error)

        course = self._get_or_create_course(course_id, course_name)
        professor = self._get_or_create_professor(professor_name)

        assignment, created = course.get_or_create_assignment(professor_name)
        if created:
            professor.link(assignment.key)

        assignment.add_rating(RatingRecord(score=float(score), comment=_clean_comment(comment)))
        return AddResult(ok=True)

    def _get_or_create_course(self, course_id: str, course_name: str) -> Course:
        course = self._courses.get(course_id)
        if course is not None:
            return course

        course = Course(course_id=course_id, name=course_name)
        if not self._index.insert(course):
            # Same name (ignoring case) under another id: reachable by id only.
            logger.debug("Course name %r already indexed, %s not added to name index", course_name, course_id)
        self._courses[course_id] = course
        logger.debug("New course %s (%s)", course_id, course_name)
        return course

    def _get_or_create_professor(self, name: str) -> Professor:
        professor = self._professors.get(name)
        if professor is None:
            professor = Professor(name=name)
            self._professors[name] = professor
        return professor

    # ---------- lookups ----------

    def search_course_by_id(self, course_id: str) -> Optional[Course]:
        return self._courses.get(_clean(course_id))

    def search_courses_by_name(self, keyword: str) -> List[Course]:
        return self._index.search_by_name(_clean(keyword))

    def search_course_by_exact_name(self, name: str) -> Optional[Course]:
        return self._index.search_by_exact_name(_clean(name))

    def search_courses_by_first_letter(self, letter: str) -> List[Course]:
        return self._index.search_by_first_letter(letter)

    def search_professor_by_name(self, name: str) -> Optional[Professor]:
        return self._professors.get(_clean(name))

    def courses(self) -> List[Course]:
        return self._index.sorted_traversal()

    def professors(self) -> List[Professor]:
        return list(self._professors.values())

    def course_count(self) -> int:
        return len(self._courses)

    def professor_count(self) -> int:
        return len(self._professors)

    def rating_count(self) -> int:
        return sum(c.rating_count for c in self._courses.values())

    def professor_assignments(self, name: str) -> List[TeachingAssignment]:
        professor = self.search_professor_by_name(name)
        if professor is None:
            return []

        out: List[TeachingAssignment] = []
        for course_id, professor_name in professor.assignment_keys:
            course = self._courses.get(course_id)
            if course is None:
                continue
            assignment = course.find_assignment(professor_name)
            if assignment is not None:
                out.append(assignment)
        return out

    def professor_average(self, name: str) -> float:
        return average(r.score for a in self.professor_assignments(name) for r in a.ratings)

    # ---------- rankings ----------

    def rank_professors_in_course(self, course_id: str) -> List[TeachingAssignment]:
        course = self.search_course_by_id(course_id)
        if course is None:
            return []
        return rank_descending(course.assignments, key=lambda a: a.average_rating)

    def rank_professors_overall(self, top: Optional[int] = None) -> List[Professor]:
        ranked = rank_descending(self._professors.values(), key=lambda p: self.professor_average(p.name))
        if top is not None and top > 0:
            return ranked[:top]
        return ranked

    # ---------- export ----------

    def records(self) -> Iterator[RecordTuple]:
        """
        Every stored rating as (course_id, course_name, professor, score, comment).

        Courses come in name order. A course whose name collided with an
        already indexed one is appended after the indexed courses.
        """
        ordered = self._index.sorted_traversal()
        seen = {c.course_id for c in ordered}
        ordered.extend(c for cid, c in self._courses.items() if cid not in seen)

        for course in ordered:
            for assignment in course.assignments:
                for rating in assignment.ratings:
                    yield (course.course_id, course.name, assignment.professor_name, rating.score, rating.comment)
