"""Tests for the Sentinel lsmon (verbose dialect) parser."""

import unittest
from datetime import datetime
from pathlib import Path

from seats.errors import ConnectivityError
from seats.parsers import VerboseDialectParser

SAMPLE = (Path(__file__).resolve().parent.parent / "data" / "lsmon_sample.txt").read_text()
NOW = datetime(2024, 10, 19, 12, 0)


def feature(name, version, *licence_blocks, users=()):
    """Build one ``Feature Information`` block."""
    lines = [
        " |- Feature Information",
        f'   |- Feature name                   : "{name}"',
        f'   |- Feature version                : "{version}"',
    ]
    for seats, expires in licence_blocks:
        lines.append("   |- License Information")
        lines.append(f"     |- Maximum concurrent user(s)   : {seats}")
        lines.append(f"     |- Expiration date              : {expires}")
    for user, since in users:
        lines.append("   |- Client Information")
        lines.append(f'     |- User name                    : "{user}"')
        lines.append(f'     |- Status                       : "Running since {since}"')
    return "\n".join(lines) + "\n"


class TestVerboseDialectParser(unittest.TestCase):

    def setUp(self):
        self.parser = VerboseDialectParser(clock=lambda: NOW)

    def test_feature_with_no_expiration(self):
        text = feature("SAP", "2023", (5, "License has no expiration"))
        licences = self.parser.parse(text)
        sap = licences.get("SAP 2023")
        self.assertIsNotNone(sap)
        self.assertEqual(sap.seats_available, 5)
        self.assertEqual(len(sap.users), 0)

    def test_sample_output(self):
        licences = self.parser.parse(SAMPLE)
        self.assertEqual(sorted(licences.names()), ["SAP 2023", "Safe 20.1"])
        self.assertEqual(licences.get("SAP 2023").seats_available, 5)
        self.assertEqual(licences.get("Safe 20.1").seats_available, 2)

    def test_repeated_user_holds_more_seats(self):
        licences = self.parser.parse(SAMPLE)
        jdoe = licences.user("SAP 2023", "jdoe")
        self.assertEqual(jdoe.seats_in_use, 2)
        self.assertEqual(jdoe.checkout_time, datetime(2024, 10, 19, 10, 0))

    def test_status_with_full_month_name(self):
        licences = self.parser.parse(SAMPLE)
        asmith = licences.user("Safe 20.1", "asmith")
        self.assertEqual(asmith.checkout_time, datetime(2024, 10, 18, 16, 45))

    def test_expired_feature_removed_at_next_feature(self):
        text = (
            feature("EtabPL", "21.0", (3, "Mon Jan 01 00:00:00 2024"))
            + feature("SAP", "2023", (5, "License has no expiration"))
        )
        licences = self.parser.parse(text)
        self.assertNotIn("EtabPL 21.0", licences)
        self.assertIn("SAP 2023", licences)

    def test_expired_last_feature_removed(self):
        text = (
            feature("SAP", "2023", (5, "License has no expiration"))
            + feature("EtabPL", "21.0", (3, "Mon Jan 01 00:00:00 2024"))
        )
        licences = self.parser.parse(text)
        self.assertEqual(licences.names(), ["SAP 2023"])

    def test_only_unexpired_blocks_count(self):
        text = feature(
            "Safe", "20.1",
            (2, "Tue Dec 31 23:59:59 2030"),
            (4, "Sun Jan 01 00:00:00 2023"),
            (1, "License has no expiration"),
        )
        self.assertEqual(self.parser.parse(text).get("Safe 20.1").seats_available, 3)

    def test_licence_expiring_later_today_is_counted(self):
        text = feature("SAP", "2023", (5, "Sat Oct 19 08:00:00 2024"))
        self.assertEqual(self.parser.parse(text).get("SAP 2023").seats_available, 5)

    def test_repeated_feature_accumulates(self):
        text = (
            feature("SAP", "2023", (5, "License has no expiration"))
            + feature("SAP", "2023", (2, "License has no expiration"))
        )
        licences = self.parser.parse(text)
        self.assertEqual(len(licences), 1)
        self.assertEqual(licences.get("SAP 2023").seats_available, 7)

    def test_unconfirmed_seats_discarded_at_feature_depth(self):
        text = (
            " |- Feature Information\n"
            '   |- Feature name                   : "SAP"\n'
            '   |- Feature version                : "2023"\n'
            "   |- License Information\n"
            "     |- Maximum concurrent user(s)   : 5\n"
            "   |- Client Information\n"
            "     |- Expiration date              : License has no expiration\n"
        )
        self.assertNotIn("SAP 2023", self.parser.parse(text))

    def test_product_catalogue_not_applied(self):
        text = feature("RVT", "2024", (1, "License has no expiration"))
        licences = self.parser.parse(text)
        self.assertIn("RVT 2024", licences)
        self.assertNotIn("Revit", licences)

    def test_user_without_status_has_no_checkout_time(self):
        text = feature("SAP", "2023", (5, "License has no expiration")) + (
            "   |- Client Information\n"
            '     |- User name                    : "ckent"\n'
        )
        user = self.parser.parse(text).user("SAP 2023", "ckent")
        self.assertIsNotNone(user)
        self.assertIsNone(user.checkout_time)

    def test_bad_seat_count_skipped(self):
        text = feature("SAP", "2023", ("lots", "License has no expiration"), (2, "License has no expiration"))
        self.assertEqual(self.parser.parse(text).get("SAP 2023").seats_available, 2)

    def test_resolve_failure_raises(self):
        text = SAMPLE + "\nFailed to resolve the server host \"lic02\"\n"
        with self.assertRaises(ConnectivityError) as ctx:
            self.parser.parse(text)
        self.assertIn("resolve", ctx.exception.message)

    def test_vendor_error_code_raises(self):
        with self.assertRaises(ConnectivityError) as ctx:
            self.parser.parse("lsmon: Error[5]: Timed out\n")
        self.assertIn("Timed out", ctx.exception.message)

    def test_empty_input(self):
        self.assertEqual(len(self.parser.parse("")), 0)


if __name__ == "__main__":
    unittest.main()
