from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ..dashboard import Dashboard
from ..deps import get_dashboard

router = APIRouter(
    prefix="/api/v1/metrics",
    tags=["metrics"],
)

_NOW = Query(
    None,
    ge=0,
    le=10**14,
    description="Reference instant in epoch milliseconds; defaults to the current time",
)


# PUBLIC_INTERFACE
@router.get(
    "/caffeine",
    summary="Active Caffeine",
    description=(
        "Active caffeine in mg with a half-life decay per intake, plus the peak-effect estimate of the "
        "latest intake. peakDisplay is 'Past Peak' once the peak has passed; peak fields are null for an "
        "empty log."
    ),
)
def caffeine(now: Optional[int] = _NOW, dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, Any]:
    return dashboard.caffeine_status(now)


# PUBLIC_INTERFACE
@router.get(
    "/velocity",
    summary="Focus Velocity",
    description="Focus minutes for each of the last 7 calendar days, oldest first.",
)
def velocity(now: Optional[int] = _NOW, dashboard: Dashboard = Depends(get_dashboard)) -> List[Dict[str, Any]]:
    return dashboard.velocity(now)


# PUBLIC_INTERFACE
@router.get(
    "/heatmap",
    summary="Focus Heatmap",
    description="Daily focus minutes and intensity level for the configured number of days (180 by default).",
)
def heatmap(now: Optional[int] = _NOW, dashboard: Dashboard = Depends(get_dashboard)) -> List[Dict[str, Any]]:
    return dashboard.heatmap(now)


# PUBLIC_INTERFACE
@router.get(
    "/distribution",
    summary="Status Distribution",
    description="Task count per board column, zero counts included.",
)
def distribution(dashboard: Dashboard = Depends(get_dashboard)) -> List[Dict[str, Any]]:
    return dashboard.distribution()


# PUBLIC_INTERFACE
@router.get("/summary", summary="Board Summary", description="Pending/completed task counts and total focus minutes.")
def summary(dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, Any]:
    return dashboard.summary()
