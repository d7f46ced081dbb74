"""Global state persisted across runs.

Stored as JSON in ``{storage}/state.json``. Currently only remembers when the
user was last told about an update, so the notice is not repeated on every
start.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from pgls.core.structured import as_str_dict
from pgls.platform.files import atomic_write_text

__all__ = ["STATE_FILE", "load_state", "save_state", "last_notified_of_update", "mark_notified"]

STATE_FILE = "state.json"
_LAST_NOTIFIED = "last_notified_of_update"
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _state_file(storage_dir: Path) -> Path:
    return storage_dir / STATE_FILE


def load_state(storage_dir: Path) -> dict[str, object]:
    """Load state from disk; a missing or corrupted file yields ``{}``."""
    path = _state_file(storage_dir)
    if not path.exists():
        return {}

    try:
        data = as_str_dict(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        return {}
    return data or {}


def save_state(storage_dir: Path, state: dict[str, object]) -> None:
    atomic_write_text(_state_file(storage_dir), json.dumps(state, indent=2), encoding="utf-8")


def last_notified_of_update(storage_dir: Path) -> datetime:
    """When the update notice was last considered; epoch if never."""
    raw = load_state(storage_dir).get(_LAST_NOTIFIED)
    if not isinstance(raw, str):
        return _EPOCH
    try:
        when = datetime.fromisoformat(raw)
    except ValueError:
        return _EPOCH
    return when if when.tzinfo is not None else when.replace(tzinfo=UTC)


def mark_notified(storage_dir: Path, when: datetime) -> None:
    state = load_state(storage_dir)
    state[_LAST_NOTIFIED] = when.isoformat()
    save_state(storage_dir, state)
