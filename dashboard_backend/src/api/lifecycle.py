"""
Task lifecycle: free status transitions and the priority cycle.

Any status may move to any other (DONE -> TODO reopens a task). Priority
advances exactly one step per cycle action and wraps CRITICAL -> LOW.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from .models import PRIORITY_CYCLE, Priority, TaskStatus

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def next_priority(current: Any) -> Priority:
    """
    Return the priority after current in the cycle.

    An unrecognized current value restarts the cycle at LOW; this is logged
    as a warning since the stored value is replaced.
    """
    try:
        index = PRIORITY_CYCLE.index(Priority(current))
    except ValueError:
        logger.warning("Unrecognized priority %r, restarting cycle at %s", current, Priority.LOW.value)
        return Priority.LOW
    return PRIORITY_CYCLE[(index + 1) % len(PRIORITY_CYCLE)]


# PUBLIC_INTERFACE
def cycle_priority(task: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of task with its priority advanced one step."""
    return {**task, "priority": next_priority(task.get("priority")).value}


# PUBLIC_INTERFACE
def transition_status(task: Mapping[str, Any], status: TaskStatus) -> Dict[str, Any]:
    """
    Return a copy of task moved to status. Every transition is legal; moving
    to the current status returns an unchanged copy.
    """
    status = TaskStatus(status)
    if task.get("status") == status.value:
        return dict(task)
    return {**task, "status": status.value}
