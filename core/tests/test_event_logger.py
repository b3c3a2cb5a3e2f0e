"""
core/tests/test_event_logger.py

Unit tests for the SQLite event log.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from core.logging.logic.logger import EventLogger


class TestEventLogger(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.logger = EventLogger(Path(self._tmp.name) / "nested" / "logs.db")

    def tearDown(self) -> None:
        self.logger.close()
        self._tmp.cleanup()

    def test_database_is_created(self) -> None:
        self.assertTrue(self.logger.db_path.exists())

    def test_log_and_fetch(self) -> None:
        self.logger.log("manuscripts", "project_created", reference_id="p1", message="created", username="alice")
        self.logger.log("manuscripts", "version_appended", reference_id="v1")

        entries = self.logger.fetch_logs()
        self.assertEqual([e.event for e in entries], ["version_appended", "project_created"])
        newest, oldest = entries
        self.assertEqual(oldest.username, "alice")
        self.assertEqual(oldest.reference_id, "p1")
        self.assertEqual(oldest.log_level, "INFO")
        self.assertTrue(newest.username)
        self.assertIsNotNone(newest.timestamp.tzinfo)

    def test_query_filters(self) -> None:
        self.logger.log("manuscripts", "version_deleted", reference_id="v1")
        self.logger.log("manuscripts", "cleanup_failed", reference_id="v1", level="WARNING")
        self.logger.log("core", "storage_relocated", reference_id="/data")

        self.assertEqual(len(self.logger.query_logs(feature="manuscripts")), 2)
        warnings = self.logger.query_logs(level="WARNING")
        self.assertEqual([e.event for e in warnings], ["cleanup_failed"])
        self.assertEqual(len(self.logger.query_logs(reference_id="v1", limit=1)), 1)

    def test_as_dict_formats_local_time(self) -> None:
        self.logger.log("manuscripts", "project_created")
        data = self.logger.fetch_logs(limit=1)[0].as_dict("Europe/Berlin")
        self.assertEqual(data["event"], "project_created")
        self.assertRegex(data["timestamp"], r"^\d{2}\.\d{2}\.\d{4} \d{2}:\d{2}:\d{2}$")
        self.assertTrue(data["timestamp_utc"].endswith("+00:00"))

    def test_clear_and_reopen(self) -> None:
        self.logger.log("manuscripts", "project_created")
        self.logger.close()
        self.assertEqual(len(self.logger.fetch_logs()), 1)
        self.logger.clear_logs()
        self.assertEqual(self.logger.fetch_logs(), [])


if __name__ == "__main__":
    unittest.main()
