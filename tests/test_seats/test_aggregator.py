"""Tests for the licence aggregate and the users-in-use report."""

import types
import unittest
from datetime import datetime, timedelta

from seats.aggregator import LicenceAggregator
from seats.models import LicenceUser

NOW = datetime(2024, 10, 19, 12, 0)


class TestLicenceAggregator(unittest.TestCase):

    def setUp(self):
        self.licences = LicenceAggregator()

    def _add_user(self, licence, name, minutes_ago=None, seats=1):
        checkout = NOW - timedelta(minutes=minutes_ago) if minutes_ago is not None else None
        self.licences.get(licence).users[name] = LicenceUser(
            name=name, seats_in_use=seats, checkout_time=checkout,
        )

    def test_register_keeps_existing_seats(self):
        self.licences.register("Revit", 10)
        self.licences.register("Revit", 3)
        self.assertEqual(self.licences.get("Revit").seats_available, 10)

    def test_users_of_is_lazy(self):
        self.licences.register("Revit", 10)
        self.assertIsInstance(self.licences.users_of("Revit"), types.GeneratorType)

    def test_users_of_unknown_product(self):
        self.assertEqual(list(self.licences.users_of("Nope")), ["No licences in use."])

    def test_users_of_product_without_users(self):
        self.licences.register("Revit", 10)
        self.assertEqual(list(self.licences.users_of("Revit", now=NOW)), ["No licences in use."])

    def test_users_of_formats_elapsed_time(self):
        self.licences.register("Revit", 10)
        self._add_user("Revit", "jdoe", minutes_ago=150)
        self._add_user("Revit", "asmith", minutes_ago=5)
        self.assertEqual(
            list(self.licences.users_of("Revit", now=NOW)),
            ["jdoe [2h 30m]", "asmith [0h 5m]"],
        )

    def test_users_of_multi_day_session(self):
        self.licences.register("Revit", 10)
        self._add_user("Revit", "jdoe", minutes_ago=26 * 60 + 1)
        self.assertEqual(list(self.licences.users_of("Revit", now=NOW)), ["jdoe [26h 1m]"])

    def test_users_of_unknown_checkout_time(self):
        self.licences.register("SAP 2023", 5)
        self._add_user("SAP 2023", "ckent")
        self.assertEqual(list(self.licences.users_of("SAP 2023", now=NOW)), ["ckent [unknown]"])

    def test_future_checkout_clamped(self):
        self.licences.register("Revit", 10)
        self._add_user("Revit", "jdoe", minutes_ago=-30)
        self.assertEqual(list(self.licences.users_of("Revit", now=NOW)), ["jdoe [0h 0m]"])

    def test_usage_summary_and_free_seat(self):
        self.licences.register("Revit", 2)
        self._add_user("Revit", "jdoe", minutes_ago=1)
        self.assertEqual(self.licences.usage_summary("Revit"), "1 / 2 licences in use.")
        self.assertTrue(self.licences.has_free_seat("Revit"))
        self._add_user("Revit", "asmith", minutes_ago=1)
        self.assertFalse(self.licences.has_free_seat("Revit"))
        self.assertFalse(self.licences.has_free_seat("Unknown"))

    def test_seats_in_use_counts_repeat_checkouts(self):
        self.licences.register("SAP 2023", 5)
        self._add_user("SAP 2023", "jdoe", seats=2)
        lic = self.licences.get("SAP 2023")
        self.assertEqual(lic.seats_in_use, 2)
        self.assertEqual(lic.free_seats, 3)

    def test_replace_drops_stale_entries(self):
        other = LicenceAggregator()
        other.register("Revit", 10)
        self.licences.register("AutoCAD", 1)
        self.licences.replace(other)
        self.assertEqual(self.licences.names(), ["Revit"])
        self.assertEqual([lic.name for lic in self.licences.list_all()], ["Revit"])
        self.licences.replace(LicenceAggregator())
        self.assertEqual(len(self.licences), 0)
        self.assertIn("Revit", other)

    def test_to_dict(self):
        self.licences.register("Revit", 10)
        self._add_user("Revit", "jdoe", minutes_ago=10)
        data = self.licences.to_dict()
        self.assertEqual(data["Revit"]["seats_available"], 10)
        self.assertEqual(data["Revit"]["users"][0]["name"], "jdoe")
        self.assertEqual(data["Revit"]["users"][0]["checkout_time"], "2024-10-19T11:50:00")


if __name__ == "__main__":
    unittest.main()
