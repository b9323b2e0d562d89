"""
Durable round trip of the application document through a single storage slot,
plus file-based export and import.
"""
from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import IO, Any, Callable, Collection, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from .defaults import default_document, fill_defaults
from .errors import ImportParseError
from .models import NOTE_COLORS, THEMES, AppDocument, Priority, TaskStatus
from .storage import KeyValueStorage
from .utils import now_ms

logger = logging.getLogger(__name__)

ImportSource = Union[bytes, str, os.PathLike, IO[bytes], IO[str]]

EXPORT_PREFIX = "night_shift_backup_"

_ENTITY_LIST = TypeAdapter(List[Dict[str, Any]])
_OBJECT = TypeAdapter(Dict[str, Any])
_STRING = TypeAdapter(str)

# Keys an import may carry, with the JSON shape each must have.
IMPORTABLE_KEYS: Dict[str, TypeAdapter] = {
    "tasks": _ENTITY_LIST,
    "notes": _ENTITY_LIST,
    "snippets": _ENTITY_LIST,
    "pomodoroSessions": _ENTITY_LIST,
    "caffeineLog": _ENTITY_LIST,
    "theme": _STRING,
    "backgroundConfig": _OBJECT,
    "toolsConfig": _OBJECT,
}

_STATUS_VALUES = {s.value for s in TaskStatus}
_PRIORITY_VALUES = {p.value for p in Priority}


def _recognized(value: Any, allowed: Collection[str]) -> bool:
    # Imported values may be lists or objects, which cannot be hashed.
    return isinstance(value, str) and value in allowed


@dataclass
class ImportResult:
    """
    Decoded import: the recognized keys that passed shape checks, and a
    warning for everything that was dropped or is unrecognized.
    """

    values: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


# PUBLIC_INTERFACE
def build_export(partial: Mapping[str, Any], today: date) -> Tuple[str, str]:
    """Return (filename, pretty JSON text) for a backup of partial."""
    return f"{EXPORT_PREFIX}{today.isoformat()}.json", json.dumps(partial, indent=2, ensure_ascii=False)


def _read_source(source: ImportSource) -> str:
    if isinstance(source, bytes):
        return source.decode("utf-8-sig")
    if isinstance(source, str):
        return source
    if isinstance(source, os.PathLike):
        return Path(source).read_text(encoding="utf-8-sig")
    content = source.read()
    return content.decode("utf-8-sig") if isinstance(content, bytes) else content


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON number")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range")
    return value


# PUBLIC_INTERFACE
def decode_import(partial: Mapping[str, Any]) -> ImportResult:
    """
    Decode a parsed import into recognized, correctly shaped keys.

    Missing keys are simply absent from the result. Entities with an
    unrecognized status, priority or color are kept unchanged and reported.
    """
    result = ImportResult()
    for key, value in partial.items():
        adapter = IMPORTABLE_KEYS.get(key)
        if adapter is None:
            result.warnings.append(f"Ignored unrecognized key '{key}'")
            continue
        try:
            adapter.validate_python(value, strict=True)
        except ValidationError:
            result.warnings.append(f"Ignored '{key}': unexpected shape")
            continue
        if key == "theme" and value not in THEMES:
            result.warnings.append(f"Ignored unrecognized theme '{value}'")
            continue
        result.values[key] = value

    for task in result.values.get("tasks", []):
        if "id" not in task:
            result.warnings.append(f"Task {task.get('title')!r} has no id")
        if not _recognized(task.get("status"), _STATUS_VALUES):
            result.warnings.append(f"Task {task.get('id')!r} has unrecognized status {task.get('status')!r}")
        if not _recognized(task.get("priority"), _PRIORITY_VALUES):
            result.warnings.append(f"Task {task.get('id')!r} has unrecognized priority {task.get('priority')!r}")
    for note in result.values.get("notes", []):
        if not _recognized(note.get("color"), NOTE_COLORS):
            result.warnings.append(f"Note {note.get('id')!r} has unrecognized color {note.get('color')!r}")

    for warning in result.warnings:
        logger.warning("Import: %s", warning)
    return result


# PUBLIC_INTERFACE
class StateStore:
    """
    Load/save/export/import of the application document.

    The storage medium is injected; clock returns epoch milliseconds and is
    used to stamp lastSavedAt.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = "night_shift_db",
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> AppDocument:
        """
        Read the stored document, completing missing fields with defaults.

        An absent, unparseable, or non-object stored value yields the
        all-defaults document; nothing is raised.
        """
        raw = self._storage.get(self._key)
        if raw is None:
            logger.info("No stored document under %r, starting from defaults", self._key)
            return default_document()
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Stored document under %r is not valid JSON, starting from defaults", self._key)
            return default_document()
        if not isinstance(parsed, dict):
            logger.warning("Stored document under %r is not a JSON object, starting from defaults", self._key)
            return default_document()
        return fill_defaults(parsed)

    def save(self, document: AppDocument) -> None:
        """
        Stamp lastSavedAt and overwrite the storage slot.

        Raises:
            StorageError if the storage medium rejects the write.
        """
        saved_at = self._clock()
        payload = json.dumps({**document, "lastSavedAt": saved_at}, ensure_ascii=False)
        self._storage.set(self._key, payload)
        document["lastSavedAt"] = saved_at
        logger.debug("Saved document under %r (%d bytes)", self._key, len(payload))

    def export_to_file(
        self,
        partial: Mapping[str, Any],
        directory: Union[str, os.PathLike],
        today: Optional[date] = None,
    ) -> Optional[Path]:
        """
        Write a backup of partial into directory and return its path.

        Never raises: an I/O failure is logged and None returned.
        """
        filename, text = build_export(partial, today or date.today())
        target = Path(directory) / filename
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        except OSError:
            logger.exception("Export to %s failed", target)
            return None
        logger.info("Exported %d keys to %s", len(partial), target)
        return target

    def import_from_file(self, source: ImportSource) -> Dict[str, Any]:
        """
        Parse an import file and return the top-level keys it carries.

        A bare JSON array is the earliest export format and is read as the
        task list.

        Raises:
            ImportParseError if the content is not a JSON object or array,
            or carries NaN, Infinity or an out-of-range number.
        """
        try:
            text = _read_source(source)
            parsed = json.loads(text, parse_float=_finite_float, parse_constant=_reject_constant)
        except (UnicodeDecodeError, ValueError) as e:
            raise ImportParseError(f"Import file is not valid JSON: {e}") from e
        if isinstance(parsed, list):
            return {"tasks": parsed}
        if not isinstance(parsed, dict):
            raise ImportParseError("Import file must contain a JSON object or array")
        return parsed
