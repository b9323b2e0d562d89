"""
The live dashboard state.

A Dashboard owns the loaded document and the StateStore it came from. Every
mutation replaces one top-level collection through the ordering helpers and
is persisted immediately; a StorageError from the save propagates to the
caller.
"""
from __future__ import annotations

import copy
import logging
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from . import metrics, ordering
from .defaults import fill_defaults
from .lifecycle import cycle_priority, transition_status
from .models import AppDocument, Priority, TaskStatus
from .settings import Settings, get_settings
from .state_store import IMPORTABLE_KEYS, ImportResult, ImportSource, StateStore, build_export, decode_import
from .timer import FocusTimer
from .utils import local_date, new_id, now_ms, resolve_timezone

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Dashboard:
    """Owner of the live document; persists through the injected StateStore."""

    def __init__(
        self,
        store: StateStore,
        settings: Optional[Settings] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock
        self._lock = RLock()
        self.tz = resolve_timezone(self._settings.timezone)
        self.document: AppDocument = store.load()
        self.timer = FocusTimer()

    @property
    def settings(self) -> Settings:
        return self._settings

    # -------------------- persistence --------------------
    def _commit(self, key: str, value: Any) -> None:
        self.document[key] = value
        self._store.save(self.document)

    def snapshot(self) -> AppDocument:
        """Deep copy of the live document."""
        with self._lock:
            return copy.deepcopy(self.document)

    def _update_entity(self, key: str, entity_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            current = ordering.find_by_id(self.document[key], entity_id)
            if current is None:
                return None
            updated = {**current, **changes}
            self._commit(key, ordering.upsert_by_id(self.document[key], updated))
            return updated

    def _delete_entity(self, key: str, entity_id: str) -> bool:
        with self._lock:
            items = self.document[key]
            remaining = ordering.remove_by_id(items, entity_id)
            if len(remaining) == len(items):
                return False
            self._commit(key, remaining)
            return True

    # -------------------- tasks --------------------
    def add_task(self, title: str = "Untitled", **fields: Any) -> Dict[str, Any]:
        task = {
            "id": new_id(),
            "title": title or "Untitled",
            "description": "",
            "status": TaskStatus.TODO.value,
            "priority": Priority.MEDIUM.value,
            "createdAt": self._clock(),
            "tags": [],
            **fields,
        }
        with self._lock:
            self._commit("tasks", ordering.append(self.document["tasks"], task))
        return task

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_entity("tasks", task_id, changes)

    def delete_task(self, task_id: str) -> bool:
        return self._delete_entity("tasks", task_id)

    def move_task(self, task_id: str, status: TaskStatus) -> Optional[Dict[str, Any]]:
        """Drop a task on a board column. Dropping on its own column saves nothing."""
        with self._lock:
            task = ordering.find_by_id(self.document["tasks"], task_id)
            if task is None:
                return None
            moved = transition_status(task, status)
            if moved != task:
                self._commit("tasks", ordering.upsert_by_id(self.document["tasks"], moved))
            return moved

    def cycle_priority(self, task_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            task = ordering.find_by_id(self.document["tasks"], task_id)
            if task is None:
                return None
            cycled = cycle_priority(task)
            self._commit("tasks", ordering.upsert_by_id(self.document["tasks"], cycled))
            return cycled

    # -------------------- notes --------------------
    def add_note(self, content: str = "", color: str = "neutral", tags: Optional[List[str]] = None) -> Dict[str, Any]:
        note = {"id": new_id(), "content": content, "tags": list(tags or []), "color": color, "createdAt": self._clock()}
        with self._lock:
            self._commit("notes", ordering.insert_front(self.document["notes"], note))
        return note

    def update_note(self, note_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_entity("notes", note_id, changes)

    def delete_note(self, note_id: str) -> bool:
        return self._delete_entity("notes", note_id)

    def reorder_notes(self, from_index: int, to_index: int) -> List[Dict[str, Any]]:
        """
        Move the note at from_index to to_index.

        Raises:
            IndexError if either index is outside the current list.
        """
        with self._lock:
            notes = self.document["notes"]
            size = len(notes)
            if not (0 <= from_index < size and 0 <= to_index < size):
                raise IndexError(f"Note positions {from_index} -> {to_index} out of range for {size} notes")
            if from_index != to_index:
                self._commit("notes", ordering.move(notes, from_index, to_index))
            return list(self.document["notes"])

    def add_note_tag(self, note_id: str, tag: str) -> Optional[Dict[str, Any]]:
        tag = tag.strip()
        with self._lock:
            note = ordering.find_by_id(self.document["notes"], note_id)
            if note is None:
                return None
            tags = list(note.get("tags") or [])
            if not tag or tag in tags:
                return note
            return self._update_entity("notes", note_id, {"tags": [*tags, tag]})

    def remove_note_tag(self, note_id: str, tag: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            note = ordering.find_by_id(self.document["notes"], note_id)
            if note is None:
                return None
            return self._update_entity("notes", note_id, {"tags": [t for t in note.get("tags") or [] if t != tag]})

    # -------------------- snippets --------------------
    def add_snippet(
        self,
        title: str = "Untitled Snippet",
        code: str = "",
        language: str = "typescript",
        tags: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        snippet = {
            "id": new_id(),
            "title": title or "Untitled Snippet",
            "code": code,
            "language": language or "typescript",
            "tags": list(tags or []),
            "createdAt": self._clock(),
        }
        with self._lock:
            self._commit("snippets", ordering.insert_front(self.document["snippets"], snippet))
        return snippet

    def update_snippet(self, snippet_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update_entity("snippets", snippet_id, changes)

    def delete_snippet(self, snippet_id: str) -> bool:
        return self._delete_entity("snippets", snippet_id)

    def search_snippets(self, term: Optional[str] = None) -> List[Dict[str, Any]]:
        """Case-insensitive substring match over title, language and tags."""
        snippets = list(self.document["snippets"])
        if not term:
            return snippets
        needle = term.lower()

        def matches(s: Dict[str, Any]) -> bool:
            fields: Iterable[Any] = [s.get("title"), s.get("language"), *(s.get("tags") or [])]
            return any(isinstance(f, str) and needle in f.lower() for f in fields)

        return [s for s in snippets if matches(s)]

    # -------------------- logs --------------------
    def log_session(self, duration_minutes: float) -> Dict[str, Any]:
        session = {"id": new_id(), "timestamp": self._clock(), "durationMinutes": duration_minutes}
        with self._lock:
            self._commit("pomodoroSessions", ordering.append(self.document["pomodoroSessions"], session))
        return session

    def log_caffeine(self, amount: float) -> Dict[str, Any]:
        entry = {"id": new_id(), "amount": amount, "timestamp": self._clock()}
        with self._lock:
            self._commit("caffeineLog", ordering.append(self.document["caffeineLog"], entry))
        return entry

    def clear_caffeine(self) -> int:
        with self._lock:
            cleared = len(self.document["caffeineLog"])
            self._commit("caffeineLog", [])
        logger.info("Cleared %d caffeine entries", cleared)
        return cleared

    # -------------------- appearance / tools --------------------
    def set_theme(self, theme: str) -> str:
        with self._lock:
            self._commit("theme", theme)
        return theme

    def update_background(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            config = {**self.document["backgroundConfig"], **changes}
            self._commit("backgroundConfig", config)
        return config

    def update_tools(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            config = {**self.document["toolsConfig"], **changes}
            self._commit("toolsConfig", config)
        return config

    # -------------------- focus timer --------------------
    def tick_timer(self, seconds: int = 1) -> Optional[Dict[str, Any]]:
        """Advance the timer; a completed focus countdown is logged as a session."""
        with self._lock:
            completed = self.timer.tick(seconds)
            if completed is None:
                return None
            return self.log_session(completed)

    # -------------------- backup --------------------
    def _export_partial(self, keys: Optional[Iterable[str]]) -> Dict[str, Any]:
        selected = [k for k in keys if k in IMPORTABLE_KEYS] if keys else list(IMPORTABLE_KEYS)
        with self._lock:
            return {k: copy.deepcopy(self.document[k]) for k in selected}

    def export(self, keys: Optional[Iterable[str]] = None) -> Tuple[str, str]:
        """Backup file name and JSON text for the chosen keys (all by default)."""
        return build_export(self._export_partial(keys), local_date(self._clock(), self.tz))

    def export_to_directory(self, directory: str, keys: Optional[Iterable[str]] = None) -> Optional[Path]:
        return self._store.export_to_file(
            self._export_partial(keys), directory, today=local_date(self._clock(), self.tz)
        )

    def import_file(self, source: ImportSource) -> ImportResult:
        """
        Merge an import file into the live document one key at a time.

        Raises:
            ImportParseError if the file is not JSON; the document is untouched.
        """
        result = decode_import(self._store.import_from_file(source))
        if not result.values:
            return result
        with self._lock:
            self.document = fill_defaults({**self.document, **copy.deepcopy(result.values)})
            self._store.save(self.document)
        logger.info("Imported keys: %s", ", ".join(sorted(result.values)))
        return result

    # -------------------- metrics --------------------
    def caffeine_status(self, now: Optional[int] = None) -> Dict[str, Any]:
        now = self._clock() if now is None else now
        log = self.document["caffeineLog"]
        peak = metrics.peak_effect(log, now, self._settings.caffeine_peak_offset_minutes)
        return {
            "activeMg": metrics.active_caffeine(log, now, self._settings.caffeine_half_life_minutes),
            "peakAt": peak.peak_at if peak else None,
            "pastPeak": peak.past_peak if peak else None,
            "peakDisplay": peak.display(self.tz) if peak else None,
        }

    def velocity(self, now: Optional[int] = None) -> List[Dict[str, Any]]:
        now = self._clock() if now is None else now
        return metrics.focus_velocity(self.document["pomodoroSessions"], now, self.tz)

    def heatmap(self, now: Optional[int] = None) -> List[Dict[str, Any]]:
        now = self._clock() if now is None else now
        return metrics.focus_heatmap(
            self.document["pomodoroSessions"],
            now,
            self.tz,
            days=self._settings.heatmap_days,
            band_limits=self._settings.heatmap_band_limits,
        )

    def distribution(self) -> List[Dict[str, Any]]:
        return metrics.status_distribution(self.document["tasks"])

    def summary(self) -> Dict[str, Any]:
        return metrics.board_summary(self.document["tasks"], self.document["pomodoroSessions"])
