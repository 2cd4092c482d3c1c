"""
Unit tests for the rating store.

Store contract:
- one TeachingAssignment per (course_id, professor)
- every valid add_rating() appends exactly one rating
- invalid input is rejected with an error message and changes nothing
- rankings are "highest average first", ties keep insertion order
"""

import unittest

from courserate.store import RatingStore


class TestAddRating(unittest.TestCase):
    def test_same_pair_reuses_assignment(self) -> None:
        store = RatingStore()
        self.assertTrue(store.add_rating("CPS1231", "Java Programming", "Dr. Lee", 4.5, "Great"))
        self.assertTrue(store.add_rating("CPS1231", "Java Programming", "Dr. Lee", 3.5, "OK"))

        ranking = store.rank_professors_in_course("CPS1231")
        self.assertEqual(len(ranking), 1)
        self.assertEqual(ranking[0].professor_name, "Dr. Lee")
        self.assertAlmostEqual(ranking[0].average_rating, 4.0)
        self.assertEqual(ranking[0].rating_count, 2)
        self.assertEqual([r.comment for r in ranking[0].ratings], ["Great", "OK"])

    def test_course_average_is_mean_of_all_scores(self) -> None:
        store = RatingStore()
        scores = [5.0, 4.0, 1.5, 3.0, 0.0]
        profs = ["A", "B", "A", "C", "B"]
        for s, p in zip(scores, profs):
            store.add_rating("X1", "Course X", p, s, "")

        course = store.search_course_by_id("X1")
        self.assertIsNotNone(course)
        assert course is not None
        self.assertAlmostEqual(course.overall_average_rating, sum(scores) / len(scores))
        self.assertEqual(course.rating_count, 5)
        self.assertEqual(len(course.assignments), 3)

    def test_bidirectional_links(self) -> None:
        store = RatingStore()
        store.add_rating("C1", "Calculus", "Dr. Kim", 4.0)
        store.add_rating("C2", "Biology", "Dr. Kim", 2.0)
        store.add_rating("C1", "Calculus", "Dr. Ng", 3.0)

        prof = store.search_professor_by_name("Dr. Kim")
        assert prof is not None
        self.assertEqual(prof.assignment_keys, [("C1", "Dr. Kim"), ("C2", "Dr. Kim")])

        for course in store.courses():
            for a in course.assignments:
                p = store.search_professor_by_name(a.professor_name)
                assert p is not None
                self.assertIn(a, store.professor_assignments(p.name))

    def test_rejects_out_of_range_scores(self) -> None:
        store = RatingStore()
        store.add_rating("C1", "Calculus", "Dr. Kim", 4.0)

        for bad in (-0.1, 5.1, float("nan")):
            result = store.add_rating("C2", "Biology", "Dr. Ng", bad, "")
            self.assertFalse(result.ok)
            self.assertIn("between 0 and 5", result.error or "")

        self.assertEqual(store.course_count(), 1)
        self.assertEqual(store.professor_count(), 1)
        self.assertEqual(store.rating_count(), 1)

    def test_boundary_scores_accepted(self) -> None:
        store = RatingStore()
        self.assertTrue(store.add_rating("C1", "Calculus", "Dr. Kim", 0))
        self.assertTrue(store.add_rating("C1", "Calculus", "Dr. Kim", 5.0))
        self.assertEqual(store.rating_count(), 2)

    def test_rejects_blank_fields(self) -> None:
        store = RatingStore()
        cases = [
            (("", "Calculus", "Dr. Kim"), "Course ID"),
            (("C1", "   ", "Dr. Kim"), "Course name"),
            (("C1", "Calculus", ""), "Professor name"),
        ]
        for (cid, name, prof), field in cases:
            result = store.add_rating(cid, name, prof, 3.0, "")
            self.assertFalse(result)
            self.assertIn(field, result.error or "")
        self.assertEqual(store.course_count(), 0)
        self.assertEqual(store.professor_count(), 0)

    def test_rejects_commas_and_line_breaks_in_identifiers(self) -> None:
        store = RatingStore()
        cases = [
            (("C,1", "Calculus", "Dr. Kim"), "Course ID"),
            (("C1", "Data, Structures", "Dr. Kim"), "Course name"),
            (("C1", "Data\nStructures", "Dr. Kim"), "Course name"),
            (("C1", "Calculus", "Kim,\r\nDr."), "Professor name"),
        ]
        for (cid, name, prof), field in cases:
            result = store.add_rating(cid, name, prof, 3.0, "")
            self.assertFalse(result)
            self.assertIn(field, result.error or "")
            self.assertIn("commas or line breaks", result.error or "")

        self.assertFalse(store.add_course("C2", "Art, History"))
        self.assertEqual(store.course_count(), 0)
        self.assertEqual(store.professor_count(), 0)

    def test_rejects_non_numeric_score(self) -> None:
        store = RatingStore()
        self.assertFalse(store.add_rating("C1", "Calculus", "Dr. Kim", "4.0"))  # type: ignore[arg-type]
        self.assertFalse(store.add_rating("C1", "Calculus", "Dr. Kim", True))
        self.assertEqual(store.course_count(), 0)

    def test_identifiers_and_comment_are_normalized(self) -> None:
        store = RatingStore()
        store.add_rating(" C1 ", " Calculus ", " Dr. Kim ", 4.0, "  line one\nline two ")
        course = store.search_course_by_id("C1")
        assert course is not None
        self.assertEqual(course.name, "Calculus")
        self.assertIsNotNone(store.search_professor_by_name("Dr. Kim"))
        self.assertEqual(course.assignments[0].ratings[0].comment, "line one line two")

    def test_add_course_without_ratings(self) -> None:
        store = RatingStore()
        self.assertTrue(store.add_course("C9", "Ethics"))
        self.assertTrue(store.add_course("C9", "Renamed"))
        self.assertFalse(store.add_course("", "Ethics"))

        course = store.search_course_by_id("C9")
        assert course is not None
        self.assertEqual(course.name, "Ethics")
        self.assertEqual(course.overall_average_rating, 0.0)
        self.assertEqual(store.rank_professors_in_course("C9"), [])


class TestLookups(unittest.TestCase):
    def setUp(self) -> None:
        self.store = RatingStore()
        self.store.add_rating("CPS1231", "Java Programming", "Dr. Lee", 4.5, "Great")
        self.store.add_rating("CPS2231", "Advanced Java", "Dr. Lee", 4.0, "Hard")
        self.store.add_rating("MATH101", "Calculus", "Dr. Kim", 3.0, "Fine")

    def test_lookup_by_id_and_name(self) -> None:
        self.assertEqual(self.store.search_course_by_id("MATH101").name, "Calculus")
        self.assertIsNone(self.store.search_course_by_id("NOPE"))
        self.assertEqual(
            [c.course_id for c in self.store.search_courses_by_name("java")], ["CPS2231", "CPS1231"]
        )
        self.assertEqual(self.store.search_course_by_exact_name("calculus").course_id, "MATH101")
        self.assertEqual([c.course_id for c in self.store.search_courses_by_first_letter("j")], ["CPS1231"])

    def test_professor_lookup(self) -> None:
        self.assertIsNone(self.store.search_professor_by_name("Nobody"))
        self.assertEqual(self.store.professor_assignments("Nobody"), [])
        self.assertEqual(self.store.professor_average("Nobody"), 0.0)
        self.assertAlmostEqual(self.store.professor_average("Dr. Lee"), 4.25)

    def test_courses_sorted_by_name(self) -> None:
        names = [c.name for c in self.store.courses()]
        self.assertEqual(names, sorted(names, key=str.lower))

    def test_same_name_different_id_is_kept_by_id(self) -> None:
        self.store.add_rating("CPS9999", "java programming", "Dr. Ng", 2.0)
        self.assertEqual(self.store.course_count(), 4)
        self.assertIsNotNone(self.store.search_course_by_id("CPS9999"))
        # name index keeps the first inserted course
        self.assertEqual(self.store.search_course_by_exact_name("JAVA PROGRAMMING").course_id, "CPS1231")
        self.assertEqual(len(list(self.store.records())), 4)


class TestRanking(unittest.TestCase):
    def test_in_course_highest_first(self) -> None:
        store = RatingStore()
        store.add_rating("C1", "Calculus", "Dr. Low", 3.0)
        store.add_rating("C1", "Calculus", "Dr. High", 5.0)

        ranking = store.rank_professors_in_course("C1")
        self.assertEqual([a.professor_name for a in ranking], ["Dr. High", "Dr. Low"])
        self.assertEqual(store.rank_professors_in_course("missing"), [])

    def test_overall_ties_keep_insertion_order(self) -> None:
        store = RatingStore()
        store.add_rating("C1", "Calculus", "P1", 4.0)
        store.add_rating("C2", "Biology", "P2", 4.0)
        store.add_rating("C3", "Physics", "P0", 2.0)
        store.add_rating("C3", "Physics", "P3", 4.5)

        names = [p.name for p in store.rank_professors_overall()]
        self.assertEqual(names, ["P3", "P1", "P2", "P0"])
        self.assertEqual([p.name for p in store.rank_professors_overall(top=2)], ["P3", "P1"])

    def test_overall_average_weighted_by_rating_count(self) -> None:
        store = RatingStore()
        store.add_rating("C1", "Calculus", "P1", 5.0)
        store.add_rating("C1", "Calculus", "P1", 5.0)
        store.add_rating("C2", "Biology", "P1", 2.0)
        self.assertAlmostEqual(store.professor_average("P1"), 4.0)

    def test_in_course_ties_keep_insertion_order(self) -> None:
        store = RatingStore()
        for name in ["A", "B", "C"]:
            store.add_rating("C1", "Calculus", name, 3.5)
        self.assertEqual([a.professor_name for a in store.rank_professors_in_course("C1")], ["A", "B", "C"])


if __name__ == "__main__":
    unittest.main()
