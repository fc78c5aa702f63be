import math
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tournanet.settings")

import django

django.setup()

from django.test import SimpleTestCase

from athletics import models
from athletics.services import ranking
from athletics.services.ranking import ResultEntry

FINISHED = models.Result.Status.FINISHED
TRACK = models.Event.Kind.TRACK
FIELD = models.Event.Kind.FIELD


def _entry(athlete_id, value, status=FINISHED, notes=None):
    return ResultEntry(
        athlete_id=athlete_id,
        bib_number=f"B{athlete_id:03d}",
        status=status,
        result_value=value,
        notes=notes,
    )


def _ranks(ranked):
    return {row.athlete_id: row.rank for row in ranked}


class MarkParsingTests(SimpleTestCase):
    def test_leading_number_reads_prefix_only(self):
        self.assertEqual(ranking.leading_number("12.5s"), 12.5)
        self.assertEqual(ranking.leading_number(" 6.05m"), 6.05)
        self.assertEqual(ranking.leading_number("1.2.3"), 1.2)
        self.assertIsNone(ranking.leading_number("PB 12.5"))
        self.assertIsNone(ranking.leading_number(""))
        self.assertIsNone(ranking.leading_number(None))

    def test_personal_best_without_number_is_worst(self):
        self.assertEqual(ranking.parse_personal_best("11.90s"), 11.9)
        self.assertTrue(math.isinf(ranking.parse_personal_best(None)))
        self.assertTrue(math.isinf(ranking.parse_personal_best("n/a")))

    def test_result_value_strips_units_and_defaults_to_zero(self):
        self.assertEqual(ranking.parse_result_value("10.50s"), 10.5)
        self.assertEqual(ranking.parse_result_value("6.00 m"), 6.0)
        self.assertEqual(ranking.parse_result_value("1:02.5"), 102.5)
        self.assertEqual(ranking.parse_result_value("DNF"), 0.0)
        self.assertEqual(ranking.parse_result_value(None), 0.0)


class RankEntriesTests(SimpleTestCase):
    def test_track_ties_leave_positional_gap(self):
        ranked = ranking.rank_entries(
            [_entry(1, "10.50s"), _entry(2, "10.50s"), _entry(3, "10.80s")],
            TRACK,
        )
        self.assertEqual([row.rank for row in ranked], [1, 1, 3])
        self.assertEqual(_ranks(ranked), {1: 1, 2: 1, 3: 3})

    def test_field_ranks_descending(self):
        ranked = ranking.rank_entries(
            [_entry(1, "6.00m"), _entry(2, "5.50m"), _entry(3, "6.00m")],
            FIELD,
        )
        self.assertEqual(_ranks(ranked), {1: 1, 2: 3, 3: 1})
        self.assertEqual([row.athlete_id for row in ranked], [1, 3, 2])

    def test_three_way_tie_then_positional_rank(self):
        ranked = ranking.rank_entries(
            [_entry(1, "12.0"), _entry(2, "12.0"), _entry(3, "12.0"), _entry(4, "12.4")],
            TRACK,
        )
        self.assertEqual([row.rank for row in ranked], [1, 1, 1, 4])

    def test_values_within_epsilon_tie(self):
        ranked = ranking.rank_entries([_entry(1, "10.50001"), _entry(2, "10.5")], TRACK)
        self.assertEqual(_ranks(ranked), {1: 1, 2: 1})

    def test_track_orders_fastest_first(self):
        ranked = ranking.rank_entries(
            [_entry(1, "13.1"), _entry(2, "12.2"), _entry(3, "12.9")],
            TRACK,
        )
        self.assertEqual([row.athlete_id for row in ranked], [2, 3, 1])
        self.assertEqual([row.rank for row in ranked], [1, 2, 3])

    def test_non_finishers_have_no_rank_or_value(self):
        ranked = ranking.rank_entries(
            [
                _entry(1, "9.9", status=models.Result.Status.DQ),
                _entry(2, "11.0"),
                _entry(3, "12.0", status=models.Result.Status.DNS),
                _entry(4, None, status=models.Result.Status.DNF, notes="cramp"),
            ],
            TRACK,
        )
        self.assertEqual([row.athlete_id for row in ranked], [2, 1, 3, 4])
        for row in ranked[1:]:
            self.assertIsNone(row.rank)
            self.assertIsNone(row.result_value)
        self.assertEqual(ranked[3].notes, "cramp")
        self.assertEqual(ranked[0].rank, 1)

    def test_qualified_is_always_false(self):
        ranked = ranking.rank_entries([_entry(1, "10.0"), _entry(2, "10.1")], TRACK)
        self.assertFalse(any(row.qualified for row in ranked))

    def test_empty_input(self):
        self.assertEqual(ranking.rank_entries([], TRACK), [])
