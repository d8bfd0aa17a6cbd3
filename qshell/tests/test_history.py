#!/usr/bin/env python3
"""
Test Suite for the history store

Tests:
- Save then load
- Expiry of old entries
- Corrupt lines
- File and directory creation

Run: python -m pytest qshell/tests/test_history.py -v
"""

import logging
import os
import shutil
import sys
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from qshell.history.store import (
    DEFAULT_DATE_FORMAT, HistoryStore, default_history_file, load_history, save_history,
)

NOW = datetime(2026, 10, 19, 12, 0, 0)


class FakeConsole:
    def __init__(self, history=None):
        self.history = history or []


class HistoryTestCase(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.test_dir, 'history.txt')
        self.logger = logging.getLogger('qshell.tests.history')

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def write_lines(self, *lines):
        with open(self.path, 'w', encoding='utf-8') as f:
            for line in lines:
                f.write(line + '\n')

    def stamp(self, when):
        return when.strftime(DEFAULT_DATE_FORMAT)


class TestSaveAndLoad(HistoryTestCase):

    def test_round_trip(self):
        statements = ["SELECT * FROM users;", "USE demo;", "DESCRIBE users;"]
        save_history(self.path, statements, NOW)
        self.assertEqual(load_history(self.path, NOW + timedelta(hours=1)), statements)

    def test_file_format(self):
        save_history(self.path, ["SELECT 1;"], NOW)
        with open(self.path, encoding='utf-8') as f:
            self.assertEqual(f.read(), "19/10/2026 12:00:00|SELECT 1;\n")

    def test_save_appends(self):
        save_history(self.path, ["first;"], NOW)
        save_history(self.path, ["second;", "first;"], NOW)
        self.assertEqual(load_history(self.path, NOW), ["first;", "second;", "first;"])

    def test_pipe_in_statement(self):
        save_history(self.path, ["SELECT a || b FROM t;"], NOW)
        self.assertEqual(load_history(self.path, NOW), ["SELECT a || b FROM t;"])

    def test_multiline_statement_saved_on_one_line(self):
        save_history(self.path, ["SELECT *\nFROM users;"], NOW)
        self.assertEqual(load_history(self.path, NOW), ["SELECT * FROM users;"])

    def test_custom_date_format(self):
        fmt = "%Y-%m-%dT%H:%M"
        save_history(self.path, ["SELECT 1;"], NOW, date_format=fmt)
        self.assertEqual(load_history(self.path, NOW, date_format=fmt), ["SELECT 1;"])
        # Default format can't read it
        with self.assertLogs(self.logger, level='WARNING'):
            self.assertEqual(load_history(self.path, NOW, logger=self.logger), [])

    def test_unicode(self):
        save_history(self.path, ["SELECT 'ñandú';"], NOW)
        self.assertEqual(load_history(self.path, NOW), ["SELECT 'ñandú';"])


class TestExpiry(HistoryTestCase):

    def test_old_entries_dropped(self):
        self.write_lines(
            self.stamp(NOW - timedelta(days=45)) + "|old;",
            self.stamp(NOW - timedelta(days=2)) + "|recent;",
        )
        self.assertEqual(load_history(self.path, NOW), ["recent;"])

    def test_boundary(self):
        self.write_lines(
            self.stamp(NOW - timedelta(days=30)) + "|thirty;",
            self.stamp(NOW - timedelta(days=29, hours=23)) + "|almost;",
        )
        self.assertEqual(load_history(self.path, NOW), ["almost;"])

    def test_custom_retention(self):
        self.write_lines(
            self.stamp(NOW - timedelta(days=3)) + "|three;",
            self.stamp(NOW - timedelta(days=1)) + "|one;",
        )
        self.assertEqual(load_history(self.path, NOW, retention_days=2), ["one;"])


class TestCorruptLines(HistoryTestCase):

    def test_bad_timestamp_skipped(self):
        self.write_lines(
            self.stamp(NOW) + "|before;",
            "yesterday|broken;",
            self.stamp(NOW) + "|after;",
        )
        with self.assertLogs(self.logger, level='WARNING') as logs:
            statements = load_history(self.path, NOW, logger=self.logger)
        self.assertEqual(statements, ["before;", "after;"])
        self.assertEqual(len([r for r in logs.records if r.levelno == logging.WARNING]), 1)

    def test_missing_separator_skipped(self):
        self.write_lines("no separator here", self.stamp(NOW) + "|ok;")
        with self.assertLogs(self.logger, level='WARNING'):
            self.assertEqual(load_history(self.path, NOW, logger=self.logger), ["ok;"])

    def test_blank_lines_ignored(self):
        self.write_lines("", self.stamp(NOW) + "|ok;", "")
        self.assertEqual(load_history(self.path, NOW), ["ok;"])

    def test_invalid_utf8_skipped(self):
        with open(self.path, 'wb') as f:
            f.write(self.stamp(NOW).encode() + b"|before;\n")
            f.write(self.stamp(NOW).encode() + b"|SELECT \xff\xfe;\n")
            f.write(self.stamp(NOW).encode() + b"|after;\n")
        with self.assertLogs(self.logger, level='WARNING'):
            statements = load_history(self.path, NOW, logger=self.logger)
        self.assertEqual(statements, ["before;", "after;"])


class TestFileCreation(HistoryTestCase):

    def test_creates_missing_file_and_directory(self):
        path = os.path.join(self.test_dir, 'nested', 'dir', 'history.txt')
        self.assertEqual(load_history(path, NOW), [])
        self.assertTrue(os.path.isfile(path))

    def test_save_creates_file(self):
        self.assertFalse(os.path.exists(self.path))
        save_history(self.path, ["SELECT 1;"], NOW)
        self.assertTrue(os.path.isfile(self.path))

    def test_save_to_missing_directory_raises(self):
        path = os.path.join(self.test_dir, 'missing', 'history.txt')
        with self.assertRaises(OSError):
            save_history(path, ["SELECT 1;"], NOW)

    def test_default_location(self):
        self.assertEqual(
            default_history_file(self.test_dir),
            os.path.join(self.test_dir, '.qshell', 'history.txt'),
        )

    def test_creation_failure_is_logged(self):
        blocker = os.path.join(self.test_dir, 'blocker')
        with open(blocker, 'w') as f:
            f.write("not a directory")
        path = os.path.join(blocker, 'history.txt')

        with self.assertLogs(self.logger, level='ERROR') as logs:
            with self.assertRaises(OSError):
                load_history(path, NOW, logger=self.logger)
        self.assertIn("Cannot create history", logs.output[0])


class TestTimezones(HistoryTestCase):

    FORMAT = "%Y-%m-%d %H:%M:%S%z"

    def test_aware_round_trip(self):
        saved_at = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        save_history(self.path, ["SELECT 1;"], saved_at, self.FORMAT)
        self.assertEqual(
            load_history(self.path, saved_at + timedelta(hours=1), self.FORMAT),
            ["SELECT 1;"],
        )
        # Naive reference time is read as local time
        self.assertEqual(load_history(self.path, NOW, self.FORMAT), ["SELECT 1;"])

    def test_naive_save_writes_offset(self):
        save_history(self.path, ["SELECT 1;"], NOW, self.FORMAT)
        with open(self.path, encoding='utf-8') as f:
            timestamp = f.read().split("|")[0]
        self.assertIsNotNone(datetime.strptime(timestamp, self.FORMAT).tzinfo)
        self.assertEqual(load_history(self.path, NOW, self.FORMAT), ["SELECT 1;"])

    def test_aware_expiry(self):
        utc_now = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
        save_history(self.path, ["old;"], utc_now - timedelta(days=40), self.FORMAT)
        save_history(self.path, ["new;"], utc_now - timedelta(days=1), self.FORMAT)
        self.assertEqual(load_history(self.path, utc_now, self.FORMAT), ["new;"])

    def test_aware_now_with_naive_entries(self):
        save_history(self.path, ["SELECT 1;"], NOW)
        utc_now = NOW.replace(tzinfo=timezone.utc)
        self.assertEqual(load_history(self.path, utc_now), ["SELECT 1;"])


class TestHistoryStore(HistoryTestCase):

    def test_console_history(self):
        store = HistoryStore(self.path, logger=self.logger)
        store.persist(FakeConsole(["SELECT 1;", "SELECT 2;"]), NOW)

        console = FakeConsole()
        self.assertEqual(store.retrieve(console, NOW), self.path)
        self.assertEqual(console.history, ["SELECT 1;", "SELECT 2;"])

    def test_retention_is_bound(self):
        store = HistoryStore(self.path, retention_days=1)
        store.save(["old;"], NOW - timedelta(days=2))
        store.save(["new;"], NOW)
        self.assertEqual(store.load(NOW), ["new;"])


def run_tests():
    """Run all tests"""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestSaveAndLoad))
    suite.addTests(loader.loadTestsFromTestCase(TestExpiry))
    suite.addTests(loader.loadTestsFromTestCase(TestCorruptLines))
    suite.addTests(loader.loadTestsFromTestCase(TestFileCreation))
    suite.addTests(loader.loadTestsFromTestCase(TestTimezones))
    suite.addTests(loader.loadTestsFromTestCase(TestHistoryStore))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())
