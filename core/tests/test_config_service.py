"""
core/tests/test_config_service.py

Unit tests for layered configuration precedence.
Uses unittest to avoid external test dependencies.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from core.config.config_service import ConfigService


class TestConfigService(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.defaults_ini = self.root / "defaults.ini"
        self.user_ini = self.root / "user" / "config.ini"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _service(self, environ: dict[str, str] | None = None) -> ConfigService:
        return ConfigService(defaults_ini=self.defaults_ini, user_config=self.user_ini, environ=environ or {})

    def test_embedded_defaults(self) -> None:
        cfg = self._service()
        self.assertEqual(cfg.storage.metadata_file, "data.json")
        self.assertEqual(cfg.storage.files_dir, "files")
        self.assertEqual(cfg.versioning.major_threshold, 70.0)
        self.assertEqual(cfg.versioning.minor_threshold, 90.0)
        self.assertEqual(cfg.general.app_name, "ManuscriptGuard")
        self.assertEqual(cfg.general.timezone, "UTC")
        self.assertEqual(cfg.meta_source("Versioning", "major_threshold")["layer"], "code")
        self.assertEqual(cfg.storage.log_db_path, cfg.storage.data_dir / "logs.db")

    def test_layer_precedence(self) -> None:
        self.defaults_ini.write_text("[Versioning]\nmajor_threshold = 60\nminor_threshold = 85\n", encoding="utf-8")
        cfg = self._service({"MANUSCRIPTGUARD_VERSIONING__MINOR_THRESHOLD": "80"})
        self.assertEqual(cfg.versioning.major_threshold, 60.0)
        self.assertEqual(cfg.versioning.minor_threshold, 80.0)
        self.assertEqual(cfg.meta_source("Versioning", "major_threshold")["layer"], "defaults.ini")
        self.assertEqual(cfg.meta_source("Versioning", "minor_threshold")["layer"], "env")

        self.user_ini.parent.mkdir(parents=True)
        self.user_ini.write_text("[Versioning]\nminor_threshold = 95\n", encoding="utf-8")
        cfg.reload()
        self.assertEqual(cfg.versioning.minor_threshold, 95.0)
        self.assertEqual(cfg.meta_source("Versioning", "minor_threshold")["layer"], "user")

    def test_unrelated_environment_is_ignored(self) -> None:
        cfg = self._service({"OTHER_STORAGE__DATA_DIR": "/x", "MANUSCRIPTGUARD_NOSEPARATOR": "1"})
        self.assertEqual(cfg.meta_source("Storage", "data_dir")["layer"], "code")
        self.assertNotEqual(cfg.storage.data_dir, Path("/x"))

    def test_set_and_remove_user_value(self) -> None:
        cfg = self._service()
        target = self.root / "elsewhere"
        cfg.set_user_value("Storage", "data_dir", target.as_posix())

        self.assertTrue(self.user_ini.exists())
        self.assertEqual(cfg.storage.data_dir, target)
        self.assertEqual(cfg.storage.metadata_path, target / "data.json")
        self.assertEqual(self._service().storage.data_dir, target)

        cfg.remove_user_value("Storage", "data_dir")
        self.assertNotEqual(cfg.storage.data_dir, target)
        self.assertEqual(cfg.meta_source("Storage", "data_dir")["layer"], "code")

    def test_get_with_cast(self) -> None:
        cfg = self._service({"MANUSCRIPTGUARD_STORAGE__LOG_DB": "/var/log/mg.db"})
        self.assertEqual(cfg.get("Versioning", "major_threshold", cast=float), 70.0)
        self.assertEqual(cfg.get("Storage", "log_db", cast=Path), Path("/var/log/mg.db"))
        self.assertEqual(cfg.storage.log_db_path, Path("/var/log/mg.db"))
        self.assertIsNone(cfg.get("Storage", "missing"))


if __name__ == "__main__":
    unittest.main()
