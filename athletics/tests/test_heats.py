import os
import random

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tournanet.settings")

import django

django.setup()

from django.test import SimpleTestCase, TestCase

from athletics import exceptions, models
from athletics.services import heats
from athletics.services.heats import HeatBuilder, SeedingStrategy


def make_school(code="ABC"):
    return models.School.objects.create(
        name=f"School {code}",
        district="Northfield",
        contact_name="Pat Coach",
        contact_email=f"{code.lower()}@example.com",
        short_code=code,
    )


def make_athlete(school, name, personal_best="", gender=models.Gender.MALE, category=models.Category.U17):
    return models.Athlete.objects.create(
        name=name,
        age=15 if category == models.Category.U17 else 12,
        gender=gender,
        category=category,
        school=school,
        personal_best=personal_best,
        bib_number=f"{school.short_code}-{name}",
    )


def make_event(name="100m", kind=models.Event.Kind.TRACK, rules=None, **extra):
    if rules is None:
        rules = {"maxAthletesPerHeat": 8, "qualificationRule": "TOP_2"}
    defaults = {
        "gender": models.Gender.MALE,
        "category": models.Category.U17,
        "date": "2025-03-01",
        "start_time": "09:00",
    }
    defaults.update(extra)
    return models.Event.objects.create(name=name, kind=kind, rules=rules, **defaults)


class LaneNumberTests(SimpleTestCase):
    def test_small_heat_uses_preference_prefix(self):
        self.assertEqual(heats.lane_numbers(5), [4, 5, 3, 6, 2])

    def test_full_heat(self):
        self.assertEqual(heats.lane_numbers(8), [4, 5, 3, 6, 2, 7, 1, 8])

    def test_oversized_heat_continues_sequentially(self):
        self.assertEqual(heats.lane_numbers(11), [4, 5, 3, 6, 2, 7, 1, 8, 9, 10, 11])

    def test_empty(self):
        self.assertEqual(heats.lane_numbers(0), [])


class HeatGenerationTests(TestCase):
    def setUp(self):
        self.school = make_school()
        self.builder = HeatBuilder(rng=random.Random(7))

    def test_five_athletes_seeded_by_personal_best(self):
        event = make_event(rules={"maxAthletesPerHeat": 8})
        marks = {"E": "12.40s", "A": "11.20s", "C": "11.90s", "B": "11.50s", "D": "12.05"}
        for name, mark in marks.items():
            make_athlete(self.school, name, mark)

        summary = self.builder.generate(event.pk)

        self.assertEqual(summary.total_heats, 1)
        self.assertEqual(summary.total_athletes, 5)
        lanes = [(lane.athlete_name, lane.lane_number) for lane in summary.heats[0].lanes]
        self.assertEqual(lanes, [("A", 4), ("B", 5), ("C", 3), ("D", 6), ("E", 2)])
        stored = dict(
            models.Lane.objects.filter(heat__event=event).values_list("athlete__name", "lane_number")
        )
        self.assertEqual(stored, {"A": 4, "B": 5, "C": 3, "D": 6, "E": 2})

    def test_partitions_into_ceil_heats_covering_everyone(self):
        event = make_event(rules={"maxAthletesPerHeat": 4})
        athletes = [make_athlete(self.school, f"R{i:02d}", f"{12 + i / 10:.2f}") for i in range(11)]

        summary = self.builder.generate(event.pk)

        self.assertEqual(summary.total_heats, 3)
        self.assertEqual([len(heat.lanes) for heat in summary.heats], [4, 4, 3])
        self.assertEqual([heat.heat_number for heat in summary.heats], [1, 2, 3])
        assigned = [lane.athlete_id for heat in summary.heats for lane in heat.lanes]
        self.assertCountEqual(assigned, [athlete.pk for athlete in athletes])
        self.assertEqual(models.Heat.objects.filter(event=event).count(), 3)
        self.assertEqual(models.Lane.objects.filter(heat__event=event).count(), 11)
        # Fastest four make up heat 1.
        self.assertEqual(
            [lane.athlete_name for lane in summary.heats[0].lanes],
            ["R00", "R01", "R02", "R03"],
        )

    def test_missing_personal_bests_sort_last_in_stable_order(self):
        event = make_event()
        make_athlete(self.school, "NoMark1", "")
        make_athlete(self.school, "Fast", "11.0")
        make_athlete(self.school, "NoMark2", "unknown")
        make_athlete(self.school, "Slow", "13.0")

        summary = self.builder.generate(event.pk)

        names = [lane.athlete_name for lane in summary.heats[0].lanes]
        self.assertEqual(names, ["Fast", "Slow", "NoMark1", "NoMark2"])

    def test_pools_all_athletes_of_matching_division(self):
        event = make_event()
        make_athlete(self.school, "Match", "11.0")
        make_athlete(self.school, "Girl", "11.0", gender=models.Gender.FEMALE)
        make_athlete(self.school, "Junior", "11.0", category=models.Category.U14)

        summary = self.builder.generate(event.pk)

        self.assertEqual(summary.total_athletes, 1)
        self.assertEqual(summary.heats[0].lanes[0].athlete_name, "Match")

    def test_random_seeding_uses_injected_generator(self):
        event = make_event(rules={"maxAthletesPerHeat": 8})
        athletes = [make_athlete(self.school, f"R{i}", f"{11 + i}") for i in range(6)]

        summary = HeatBuilder(rng=random.Random(42)).generate(event.pk, seeding=SeedingStrategy.RANDOM)

        expected = list(athletes)
        random.Random(42).shuffle(expected)
        self.assertEqual(
            [lane.athlete_id for lane in summary.heats[0].lanes],
            [athlete.pk for athlete in expected],
        )

    def test_large_heat_capacity_assigns_sequential_lanes(self):
        event = make_event(rules={"maxAthletesPerHeat": 10})
        for i in range(10):
            make_athlete(self.school, f"R{i}", f"{11 + i / 10:.1f}")

        summary = self.builder.generate(event.pk)

        self.assertEqual(
            [lane.lane_number for lane in summary.heats[0].lanes],
            [4, 5, 3, 6, 2, 7, 1, 8, 9, 10],
        )

    def test_second_generation_conflicts_without_changes(self):
        event = make_event()
        make_athlete(self.school, "A", "11.0")
        self.builder.generate(event.pk)

        with self.assertRaises(exceptions.ConflictError):
            self.builder.generate(event.pk)
        self.assertEqual(models.Heat.objects.filter(event=event).count(), 1)

    def test_unknown_event(self):
        with self.assertRaises(exceptions.NotFoundError):
            self.builder.generate(9999)

    def test_field_event_rejected(self):
        event = make_event(
            name="Long Jump",
            kind=models.Event.Kind.FIELD,
            rules={"maxAthletesPerFlight": 12, "attempts": 3, "finalists": 8},
        )
        make_athlete(self.school, "A", "5.1m")
        with self.assertRaises(exceptions.BusinessRuleViolation):
            self.builder.generate(event.pk)

    def test_invalid_heat_capacity(self):
        make_athlete(self.school, "A", "11.0")
        for index, rules in enumerate(
            [{}, {"maxAthletesPerHeat": 0}, {"maxAthletesPerHeat": "8"}, {"maxAthletesPerHeat": True}]
        ):
            event = make_event(name=f"Sprint {index}", rules=rules)
            with self.assertRaises(exceptions.ValidationError):
                self.builder.generate(event.pk)
            self.assertFalse(event.heats.exists())

    def test_no_eligible_athletes(self):
        event = make_event()
        with self.assertRaises(exceptions.BusinessRuleViolation):
            self.builder.generate(event.pk)

    def test_describe_heats_matches_generation(self):
        event = make_event(rules={"maxAthletesPerHeat": 3})
        for i in range(5):
            make_athlete(self.school, f"R{i}", f"{11 + i}")
        generated = self.builder.generate(event.pk)

        described = heats.describe_heats(event)

        self.assertEqual(described, generated)
