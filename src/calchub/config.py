"""Persisted key/value slots: storage backends and slot codecs."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from platformdirs import user_config_dir

from calchub.models import CONFIG_APP_NAME, DEFAULT_THEME_NAME, THEME_NAMES

logger = logging.getLogger(__name__)

# ============================================================================
# Storage Backends
# ============================================================================
#
# Slot contract. Every parse_* helper returns a valid value for any input:
#
#   Slot       Shape                                  On bad input
#   ─────────  ─────────────────────────────────────  ─────────────────
#   favorites  JSON list of id strings                []  (warning)
#   recent     JSON list of id strings, ≤ limit       []  (warning)
#   theme      JSON string in THEME_NAMES             DEFAULT_THEME_NAME
#
# Storage writes never raise: set() returns False and the caller keeps its
# in-memory state for the rest of the session.
#
SLOT_SUFFIX = ".json"
_VALID_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def get_config_dir() -> Path:
    """Get the per-user directory holding persisted slots and debug logs.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/calchub/
    - macOS: ~/Library/Application Support/calchub/
    - Windows: %APPDATA%/calchub/
    """
    return Path(user_config_dir(CONFIG_APP_NAME))


def _validate_key(key: str) -> str:
    if not _VALID_KEY_RE.match(key):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class KeyValueStorage(Protocol):
    """Synchronous string key/value store used for persisted slots."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> bool: ...


class FileStorage:
    """One file per key under a directory, written atomically."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory if directory is not None else get_config_dir()

    def path_for(self, key: str) -> Path:
        return self.directory / f"{_validate_key(key)}{SLOT_SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read slot %s, using default: %s", key, e)
            return None

    def set(self, key: str, value: str) -> bool:
        """Write a slot via tempfile + os.replace() so a crash never leaves half a file."""
        path = self.path_for(key)
        try:
            payload = value.encode("utf-8")
        except UnicodeEncodeError as e:
            logger.error("Failed to save slot %s, value is not valid UTF-8: %s", key, e)
            return False
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix=f".{key}-")
            closed = False
            try:
                os.write(fd, payload)
                os.close(fd)
                closed = True
                os.replace(tmp_path, path)
            except BaseException:
                if not closed:
                    os.close(fd)
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise
            return True
        except OSError as e:
            logger.error("Failed to save slot %s: %s", key, e)
            return False


class MemoryStorage:
    """Dict-backed storage for --no-persist sessions and tests."""

    def __init__(self, initial: dict[str, str] | None = None, *, fail_writes: bool = False) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.fail_writes = fail_writes
        self.write_count = 0

    def get(self, key: str) -> str | None:
        return self.data.get(_validate_key(key))

    def set(self, key: str, value: str) -> bool:
        _validate_key(key)
        self.write_count += 1
        if self.fail_writes:
            logger.error("Failed to save slot %s: storage is read-only", key)
            return False
        self.data[key] = value
        return True


# ============================================================================
# Slot Codecs
# ============================================================================


def dump_id_list(ids: list[str] | tuple[str, ...]) -> str:
    """Serialize a list of calculator ids to the slot format."""
    return json.dumps(list(ids), ensure_ascii=False)


def parse_id_list(raw: str | None, *, limit: int | None = None, slot: str = "ids") -> list[str]:
    """Parse a persisted id list, falling back to ``[]`` on any malformed input.

    Non-string entries and duplicates are dropped; the first occurrence wins.
    """
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.warning("Slot %s has invalid JSON, using empty list: %s", slot, e)
        return []
    if not isinstance(data, list):
        logger.warning(
            "Slot %s has invalid structure (%s), using empty list", slot, type(data).__name__
        )
        return []
    ids = list(dict.fromkeys(item for item in data if isinstance(item, str)))
    if limit is not None:
        ids = ids[: max(0, limit)]
    return ids


def dump_theme(name: str) -> str:
    """Serialize a theme name to the slot format."""
    return json.dumps(name)


def parse_theme(raw: str | None) -> str:
    """Parse a persisted theme name, falling back to the default theme."""
    if raw is None:
        return DEFAULT_THEME_NAME
    try:
        value = json.loads(raw)
    except RecursionError:
        logger.warning("Slot theme is nested too deeply, using %s", DEFAULT_THEME_NAME)
        return DEFAULT_THEME_NAME
    except json.JSONDecodeError:
        # Bare names without JSON quoting are accepted too
        value = raw.strip()
    if isinstance(value, str) and value in THEME_NAMES:
        return value
    logger.warning("Slot theme has unknown value %r, using %s", value, DEFAULT_THEME_NAME)
    return DEFAULT_THEME_NAME


__all__ = [
    "SLOT_SUFFIX",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "dump_id_list",
    "dump_theme",
    "get_config_dir",
    "parse_id_list",
    "parse_theme",
]
