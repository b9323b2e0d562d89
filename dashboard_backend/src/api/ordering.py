"""
Positional list mutations for ordered entity lists.

Every function returns a new list and leaves its input untouched. Indices are
not validated here: callers derive them from the current list length.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Mapping[str, Any])


# PUBLIC_INTERFACE
def move(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """
    Remove the element at from_index and reinsert it at to_index of the
    shortened list (splice semantics).
    """
    result = list(items)
    if from_index == to_index:
        return result
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return result


# PUBLIC_INTERFACE
def insert_front(items: Sequence[T], item: T) -> List[T]:
    """Prepend item so the newest entry comes first."""
    return [item, *items]


# PUBLIC_INTERFACE
def append(items: Sequence[T], item: T) -> List[T]:
    """Add item at the end; logs and the task board grow this way."""
    return [*items, item]


# PUBLIC_INTERFACE
def remove_by_id(items: Sequence[E], entity_id: str) -> List[E]:
    """Drop the entities whose id matches. An absent id is not an error."""
    return [it for it in items if it.get("id") != entity_id]


# PUBLIC_INTERFACE
def upsert_by_id(items: Sequence[E], item: E) -> List[E]:
    """
    Replace the entity with item's id, keeping its position. Without a match
    the list is returned unchanged; inserting is the add operations' job.
    """
    return [item if it.get("id") == item.get("id") else it for it in items]


# PUBLIC_INTERFACE
def find_by_id(items: Sequence[E], entity_id: str) -> Optional[E]:
    """Return the first entity with entity_id, or None."""
    return next((it for it in items if it.get("id") == entity_id), None)
