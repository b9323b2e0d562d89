"""
Default values for every field of the persisted document.

A stored document written before a field existed is completed from these
defaults on load, so older documents always load under a newer schema.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

from .models import AppDocument, BackgroundConfig, ToolsConfig

logger = logging.getLogger(__name__)

DEFAULT_THEME = "night_shift"


def default_background_config() -> BackgroundConfig:
    return {
        "url": "",
        "type": "image",
        "opacity": 0.3,
        "blur": 0,
        "showRadialGradient": True,
    }


def default_tools_config() -> ToolsConfig:
    return {"showCaffeineCounter": False}


# Factories rather than values so no two documents share a mutable default.
FIELD_DEFAULTS: Dict[str, Callable[[], Any]] = {
    "tasks": list,
    "notes": list,
    "snippets": list,
    "pomodoroSessions": list,
    "caffeineLog": list,
    "theme": lambda: DEFAULT_THEME,
    "backgroundConfig": default_background_config,
    "toolsConfig": default_tools_config,
    "lastSavedAt": lambda: None,
}

# List fields holding entity objects.
COLLECTION_FIELDS = ("tasks", "notes", "snippets", "pomodoroSessions", "caffeineLog")

# Fields whose stored value is an object with its own defaulted sub-keys.
NESTED_DEFAULTS: Dict[str, Callable[[], Mapping[str, Any]]] = {
    "backgroundConfig": default_background_config,
    "toolsConfig": default_tools_config,
}

# Top-level keys renamed in later schema versions: old name -> new name.
LEGACY_KEYS: Dict[str, str] = {"lastSaved": "lastSavedAt"}


# PUBLIC_INTERFACE
def default_document() -> AppDocument:
    """Return a fresh all-defaults document (the cold-start document)."""
    return {name: factory() for name, factory in FIELD_DEFAULTS.items()}


# PUBLIC_INTERFACE
def fill_defaults(raw: Mapping[str, Any]) -> AppDocument:
    """
    Complete a stored document with defaults.

    - Legacy keys are renamed to their current names.
    - Missing or null top-level fields are filled from FIELD_DEFAULTS.
    - A collection or theme stored with the wrong JSON type is replaced by its
      default; non-object entries are dropped from collections.
    - Config objects get their missing sub-keys filled; a config stored with
      the wrong JSON type is replaced by its default.
    - Unknown keys are kept untouched.
    """
    document: AppDocument = dict(raw)

    for old, new in LEGACY_KEYS.items():
        if old in document:
            legacy_value = document.pop(old)
            if document.get(new) is None:
                document[new] = legacy_value

    for name, factory in FIELD_DEFAULTS.items():
        if document.get(name) is None:
            document[name] = factory()

    for name in COLLECTION_FIELDS:
        stored = document[name]
        if not isinstance(stored, list):
            logger.warning("Stored %r is not a list, resetting it", name)
            document[name] = []
            continue
        entities = [item for item in stored if isinstance(item, dict)]
        if len(entities) != len(stored):
            logger.warning("Dropped %d malformed entries from %r", len(stored) - len(entities), name)
            document[name] = entities

    if not isinstance(document["theme"], str):
        logger.warning("Stored theme %r is not a string, resetting it", document["theme"])
        document["theme"] = DEFAULT_THEME

    for name, factory in NESTED_DEFAULTS.items():
        stored = document[name]
        if not isinstance(stored, dict):
            logger.warning("Stored %r is not an object, resetting it", name)
            document[name] = factory()
            continue
        merged = dict(factory())
        merged.update({k: v for k, v in stored.items() if v is not None})
        document[name] = merged

    return document
