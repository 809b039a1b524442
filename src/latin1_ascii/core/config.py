"""ConfigLoader: load and deep-merge YAML converter settings.

Settings are layered, later layers winning:

- built-in defaults (:data:`DEFAULTS`)
- the per-user file ``<config dir>/latin1-ascii/config.yml``
- the file named by the ``LATIN1_ASCII_CONFIG`` environment variable
- an explicit path passed by the caller

The ``table`` section overrides entries of the main replacement table. Keys
are integer code points (``0xE9``) or single characters; a ``null`` value
removes the entry.
"""

from __future__ import annotations

import logging
import os
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from latin1_ascii.core.tables import CONTROL_TABLE, HIGH_BIT_RANGE, LATIN1_TABLE, ReplacementTable

_log = logging.getLogger(__name__)

ENV_VAR = "LATIN1_ASCII_CONFIG"

DEFAULTS: dict[str, Any] = {
    "strict": False,
    "control_chars": False,
    "table": {},
}


def deep_merge(base: dict, overlay: dict) -> dict:
    """Merge overlay into base. Overlay wins on scalar conflicts.

    Dicts are merged recursively. Lists are replaced (not concatenated).
    """
    result = deepcopy(base)
    for key, val in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = deep_merge(result[key], val)
        else:
            result[key] = deepcopy(val)
    return result


def get_user_config_dir() -> Path:
    """Return the per-user configuration directory (platform-specific)."""
    import platform

    system = platform.system()
    if system == "Darwin":
        base = Path.home() / "Library" / "Application Support"
    elif system == "Windows":
        base = Path(os.environ.get("APPDATA", str(Path.home())))
    else:
        # Linux / other
        base = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return base / "latin1-ascii"


# ---------------------------------------------------------------------------
# ConverterConfig
# ---------------------------------------------------------------------------


@dataclass
class ConverterConfig:
    """Compiled settings handed to a session."""

    strict: bool = False
    table: ReplacementTable = field(default_factory=lambda: LATIN1_TABLE)
    control_table: ReplacementTable | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ConverterConfig":
        merged = deep_merge(DEFAULTS, data)
        overrides = _parse_table_overrides(merged.get("table") or {})
        return cls(
            strict=bool(merged.get("strict")),
            table=LATIN1_TABLE.with_overrides(overrides) if overrides else LATIN1_TABLE,
            control_table=CONTROL_TABLE if merged.get("control_chars") else None,
        )


def _parse_codepoint(key: Any) -> int | None:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, str):
        if len(key) == 1:
            return ord(key)
        try:
            return int(key, 0)
        except ValueError:
            return None
    return None


def _parse_table_overrides(raw: dict) -> dict[int, str | None]:
    overrides: dict[int, str | None] = {}
    if not isinstance(raw, dict):
        _log.warning("Config 'table' must be a mapping, got %s; ignoring.", type(raw).__name__)
        return overrides
    for key, value in raw.items():
        codepoint = _parse_codepoint(key)
        if codepoint is None or codepoint not in HIGH_BIT_RANGE:
            _log.warning("Config table key %r is not an 8-bit code point; skipping.", key)
            continue
        if value is not None and (not isinstance(value, str) or not value or not value.isascii()):
            _log.warning("Config table value for %r must be non-empty ASCII; skipping.", key)
            continue
        overrides[codepoint] = value
    return overrides


# ---------------------------------------------------------------------------
# ConfigLoader
# ---------------------------------------------------------------------------


class ConfigLoader:
    """Discover and merge configuration files into a :class:`ConverterConfig`."""

    def __init__(self, user_dir: Path | None = None) -> None:
        self._user_dir = user_dir if user_dir is not None else get_user_config_dir()

    def candidate_paths(self, explicit: Path | None = None) -> list[Path]:
        paths = [self._user_dir / "config.yml"]
        env_path = os.environ.get(ENV_VAR)
        if env_path:
            paths.append(Path(env_path))
        if explicit is not None:
            paths.append(explicit)
        return paths

    def load_dict(self, explicit: Path | None = None) -> dict:
        """Return the merged raw settings dict."""
        config = deepcopy(DEFAULTS)
        for path in self.candidate_paths(explicit):
            if not path.exists():
                if path == explicit:
                    raise FileNotFoundError(f"config file not found: {path}")
                continue
            try:
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            except (OSError, yaml.YAMLError) as exc:
                _log.warning("Could not read config %s: %s", path, exc)
                continue
            if not isinstance(data, dict):
                _log.warning("Config %s is not a mapping; ignoring.", path)
                continue
            _log.debug("Loaded config %s", path)
            config = deep_merge(config, data)
        return config

    def load(self, explicit: Path | None = None) -> ConverterConfig:
        return ConverterConfig.from_dict(self.load_dict(explicit))
