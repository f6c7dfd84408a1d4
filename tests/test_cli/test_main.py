"""Tests for the command-line entry point."""

import argparse
import io
import json
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

import main

DATA = Path(__file__).resolve().parent.parent / "data"


class TestParseCommand(unittest.TestCase):

    def run_parse(self, path, dialect=None, as_json=False):
        args = argparse.Namespace(file=str(path), dialect=dialect, json=as_json)
        out = io.StringIO()
        with redirect_stdout(out):
            code = main.cmd_parse(args)
        return code, out.getvalue()

    def test_configured_dialect_used_by_default(self):
        with patch("main.LICENCE_DIALECT", "verbose"):
            code, out = self.run_parse(DATA / "lsmon_sample.txt", as_json=True)
        self.assertEqual(code, 0)
        self.assertEqual(sorted(json.loads(out)), ["SAP 2023", "Safe 20.1"])

    def test_explicit_dialect_wins(self):
        with patch("main.LICENCE_DIALECT", "verbose"):
            code, out = self.run_parse(DATA / "lmstat_sample.txt", dialect="lmutil", as_json=True)
        self.assertEqual(code, 0)
        self.assertIn("Revit", json.loads(out))

    def test_table_lists_holders(self):
        code, out = self.run_parse(DATA / "lmstat_sample.txt", dialect="simple")
        self.assertEqual(code, 0)
        self.assertIn("Total: 4 licence(s)", out)
        self.assertIn("ckent [", out)

    def test_missing_file(self):
        code, out = self.run_parse(DATA / "missing.txt")
        self.assertEqual(code, 1)
        self.assertIn("File not found", out)

    def test_parse_accepts_dialect_after_command(self):
        args = main.build_parser().parse_args(["parse", "dump.txt", "--dialect", "lsmon"])
        self.assertEqual(args.dialect, "lsmon")
        args = main.build_parser().parse_args(["--dialect", "lsmon", "parse", "dump.txt"])
        self.assertEqual(args.dialect, "lsmon")


if __name__ == "__main__":
    unittest.main()
