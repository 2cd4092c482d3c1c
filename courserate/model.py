"""
Central data model definitions used across the project.

Ownership is one-directional so the object graph has no cycles:
- a Course owns its TeachingAssignments
- an assignment owns its RatingRecords
- a Professor only keeps (course_id, professor_name) keys, resolved by the store
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple


AssignmentKey = Tuple[str, str]


def average(scores: Iterable[float]) -> float:
    """
    Mean of the given scores, 0.0 for an empty iterable (never divides by zero).
    """
    total = 0.0
    count = 0
    for s in scores:
        total += s
        count += 1
    return total / count if count else 0.0


@dataclass(frozen=True)
class RatingRecord:
    """
    One submitted score (0-5) plus free-text comment.
    """

    score: float
    comment: str = ""


@dataclass
class TeachingAssignment:
    """
    One professor teaching one course, with all ratings for that pair.
    """

    course_id: str
    professor_name: str
    ratings: List[RatingRecord] = field(default_factory=list)

    @property
    def key(self) -> AssignmentKey:
        return (self.course_id, self.professor_name)

    def add_rating(self, record: RatingRecord) -> None:
        self.ratings.append(record)

    @property
    def average_rating(self) -> float:
        return average(r.score for r in self.ratings)

    @property
    def rating_count(self) -> int:
        return len(self.ratings)


@dataclass
class Course:
    """
    Represents one catalogued course. The id is the directory key,
    the name is the key of the ordered index.
    """

    course_id: str
    name: str
    assignments: List[TeachingAssignment] = field(default_factory=list)

    def find_assignment(self, professor_name: str) -> Optional[TeachingAssignment]:
        for a in self.assignments:
            if a.professor_name == professor_name:
                return a
        return None

    def get_or_create_assignment(self, professor_name: str) -> Tuple[TeachingAssignment, bool]:
        """
        Return (assignment, created). At most one assignment exists per professor.
        """
        existing = self.find_assignment(professor_name)
        if existing is not None:
            return existing, False

        assignment = TeachingAssignment(course_id=self.course_id, professor_name=professor_name)
        self.assignments.append(assignment)
        return assignment, True

    @property
    def overall_average_rating(self) -> float:
        # weighted by number of ratings, not a mean of per-professor averages
        return average(r.score for a in self.assignments for r in a.ratings)

    @property
    def rating_count(self) -> int:
        return sum(a.rating_count for a in self.assignments)


@dataclass
class Professor:
    name: str
    assignment_keys: List[AssignmentKey] = field(default_factory=list)

    def link(self, key: AssignmentKey) -> None:
        if key not in self.assignment_keys:
            self.assignment_keys.append(key)
