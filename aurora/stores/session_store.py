"""Local key-value persistence for session snapshots."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Optional

from ..logging import get_logger
from ..models import SessionSnapshot

DEFAULT_SESSION_KEY = "auroraReadmeState"


class SessionStore:
    """Stores the session snapshot under a fixed key in a JSON file.

    The file holds a mapping so several keys can share one file; only the
    configured key is read or written. Failures never propagate: a bad file
    loads as empty and a failed save is logged.
    """

    def __init__(self, path: Path, *, key: str = DEFAULT_SESSION_KEY) -> None:
        self.path = path
        self.key = key
        self.logger = get_logger("stores.session")

    def load(self) -> Optional[SessionSnapshot]:
        entries = self._read_entries()
        if self.key not in entries:
            return None
        snapshot = SessionSnapshot.from_dict(entries[self.key])
        if snapshot is None:
            self.logger.warning("Ignoring malformed session snapshot in %s", self.path)
        return snapshot

    def save(self, snapshot: SessionSnapshot) -> None:
        entries = self._read_entries()
        entries[self.key] = snapshot.to_dict()
        self._write_entries(entries, "save")

    def clear(self) -> None:
        entries = self._read_entries()
        if entries.pop(self.key, None) is None:
            return
        self._write_entries(entries, "clear")

    # ------------------------------------------------------------------
    # Internal helpers

    def _write_entries(self, entries: Dict[str, object], action: str) -> None:
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(entries, indent=2, sort_keys=True, ensure_ascii=False),
                encoding="utf-8",
            )
            os.replace(tmp_path, self.path)
        except OSError as exc:
            self.logger.warning("Failed to %s session state in %s: %s", action, self.path, exc)

    def _read_entries(self) -> Dict[str, object]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            self.logger.warning("Failed to load session state from %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            self.logger.warning("Session file %s does not contain a mapping", self.path)
            return {}
        return data


__all__ = ["DEFAULT_SESSION_KEY", "SessionStore"]
