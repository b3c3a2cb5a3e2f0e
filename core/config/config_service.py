"""Typed, layered configuration loader with precedence handling.

Layers (later wins):
    0. embedded defaults
    1. core/config/defaults.ini (optional, shipped with the app)
    2. environment variables MANUSCRIPTGUARD_<SECTION>__<KEY>
    3. user config (%APPDATA%/ManuscriptGuard/config.ini or
       $XDG_CONFIG_HOME/manuscriptguard/config.ini)
"""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Optional, Tuple

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
ENV_PREFIX = "MANUSCRIPTGUARD_"
APP_NAME = "ManuscriptGuard"


def default_data_dir() -> Path:
    """Per-user application data directory."""
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / APP_NAME
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")) / "manuscriptguard"


def default_user_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / APP_NAME / "config.ini"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "manuscriptguard" / "config.ini"


def _embedded_defaults() -> Dict[str, Dict[str, Any]]:
    return {
        "Storage": {
            "data_dir": default_data_dir().as_posix(),
            "metadata_file": "data.json",
            "files_dir": "files",
            "log_db": "logs.db",
        },
        "Versioning": {
            "major_threshold": "70",
            "minor_threshold": "90",
        },
        "General": {
            "app_name": APP_NAME,
            "version": "1.0.0",
            "timezone": "UTC",
        },
    }


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class StorageConfig:
    data_dir: Path
    metadata_file: str = "data.json"
    files_dir: str = "files"
    log_db: str = "logs.db"

    @property
    def log_db_path(self) -> Path:
        """Event log database; relative names resolve inside the data dir."""
        path = Path(self.log_db or "logs.db").expanduser()
        return path if path.is_absolute() else self.data_dir / path

    @property
    def metadata_path(self) -> Path:
        return self.data_dir / self.metadata_file

    @property
    def files_path(self) -> Path:
        return self.data_dir / self.files_dir


@dataclass
class VersioningConfig:
    major_threshold: float = 70.0
    minor_threshold: float = 90.0


@dataclass
class GeneralConfig:
    app_name: str = APP_NAME
    version: str = ""
    timezone: str = "UTC"


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _read_ini(path: Path) -> Dict[str, Dict[str, Any]]:
    cp = configparser.ConfigParser()
    cp.read(path, encoding="utf-8")
    return {section: dict(cp.items(section)) for section in cp.sections()}


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _cast(value: Any, typ: Any) -> Any:
    if typ in (Path, "Path"):
        return Path(str(value)).expanduser()
    if typ in (bool, "bool"):
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ in (int, "int"):
        return int(value)
    if typ in (float, "float"):
        return float(value)
    return str(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        if field.name not in data:
            continue
        kwargs[field.name] = _cast(data[field.name], field.type)
    return cls(**kwargs)


def _env_overlays(environ: Dict[str, str]) -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        parts = env_key[len(ENV_PREFIX):].split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        result.setdefault(section.title(), {})[key.lower()] = value
    return result


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety."""

    def __init__(
        self,
        *,
        defaults_ini: Optional[Path] = None,
        user_config: Optional[Path] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> None:
        self._lock = RLock()
        self._defaults_ini = defaults_ini if defaults_ini is not None else DEFAULTS_INI
        self._user_config = user_config if user_config is not None else default_user_config_path()
        self._environ = environ
        self.reload()

    @property
    def user_config_path(self) -> Path:
        return self._user_config

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _embedded_defaults(), "code", "embedded", sources)

            # Layer 1: defaults.ini
            if self._defaults_ini.exists():
                _apply(merged, _read_ini(self._defaults_ini), "defaults.ini", str(self._defaults_ini), sources)

            # Layer 2: environment variables
            env = _env_overlays(dict(os.environ if self._environ is None else self._environ))
            _apply(merged, env, "env", "os.environ", sources)

            # Layer 3: user overrides
            if self._user_config.exists():
                _apply(merged, _read_ini(self._user_config), "user", str(self._user_config), sources)

            self._merged = merged
            self._sources = sources

            self.storage = _build_dataclass(StorageConfig, merged.get("Storage", {}))
            self.versioning = _build_dataclass(VersioningConfig, merged.get("Versioning", {}))
            self.general = _build_dataclass(GeneralConfig, merged.get("General", {}))

    # ------------------------------------------------------------------ #
    def get(self, section: str, key: str, *, cast: Callable[[Any], Any] | type = str) -> Any:
        val = self._merged.get(section, {}).get(key)
        if val is None:
            return None
        if isinstance(cast, type):
            return _cast(val, cast)
        return cast(val)

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))

    def set_user_value(self, section: str, key: str, value: Any) -> None:
        """Write *section/key* into the user config and reload all layers."""
        with self._lock:
            cp = configparser.ConfigParser()
            if self._user_config.exists():
                cp.read(self._user_config, encoding="utf-8")
            if not cp.has_section(section):
                cp.add_section(section)
            cp.set(section, key, str(value))
            self._user_config.parent.mkdir(parents=True, exist_ok=True)
            with self._user_config.open("w", encoding="utf-8") as fh:
                cp.write(fh)
            self.reload()

    def remove_user_value(self, section: str, key: str) -> None:
        """Drop *section/key* from the user config so lower layers apply again."""
        with self._lock:
            if not self._user_config.exists():
                return
            cp = configparser.ConfigParser()
            cp.read(self._user_config, encoding="utf-8")
            if cp.has_section(section) and cp.remove_option(section, key):
                with self._user_config.open("w", encoding="utf-8") as fh:
                    cp.write(fh)
            self.reload()


# Global singleton
config_service = ConfigService()
