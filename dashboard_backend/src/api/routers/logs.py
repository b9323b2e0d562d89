from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from ..dashboard import Dashboard
from ..deps import get_dashboard
from ..schemas import CaffeineCreate, SessionCreate, TimerModeIn, TimerOut, TimerTick

router = APIRouter(prefix="/api/v1")


def _timer_out(dashboard: Dashboard, completed: Any = None) -> TimerOut:
    timer = dashboard.timer
    return TimerOut(
        mode=timer.mode.name,
        label=timer.mode.label,
        running=timer.running,
        remainingSeconds=timer.remaining_seconds,
        display=timer.remaining_display,
        completedSession=completed,
    )


# PUBLIC_INTERFACE
@router.get("/sessions", tags=["focus"], summary="List Focus Sessions")
def list_sessions(dashboard: Dashboard = Depends(get_dashboard)) -> List[Dict[str, Any]]:
    return list(dashboard.document["pomodoroSessions"])


# PUBLIC_INTERFACE
@router.post(
    "/sessions",
    tags=["focus"],
    status_code=status.HTTP_201_CREATED,
    summary="Log Focus Session",
    description="Append a completed focus session stamped with the current time.",
)
def create_session(payload: SessionCreate, dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, Any]:
    return dashboard.log_session(payload.duration_minutes)


# PUBLIC_INTERFACE
@router.get("/timer", response_model=TimerOut, tags=["focus"], summary="Timer State")
def get_timer(dashboard: Dashboard = Depends(get_dashboard)) -> TimerOut:
    return _timer_out(dashboard)


# PUBLIC_INTERFACE
@router.post("/timer/start", response_model=TimerOut, tags=["focus"], summary="Start Timer")
def start_timer(dashboard: Dashboard = Depends(get_dashboard)) -> TimerOut:
    dashboard.timer.start()
    return _timer_out(dashboard)


# PUBLIC_INTERFACE
@router.post("/timer/pause", response_model=TimerOut, tags=["focus"], summary="Pause Timer")
def pause_timer(dashboard: Dashboard = Depends(get_dashboard)) -> TimerOut:
    dashboard.timer.pause()
    return _timer_out(dashboard)


# PUBLIC_INTERFACE
@router.post("/timer/reset", response_model=TimerOut, tags=["focus"], summary="Reset Timer")
def reset_timer(dashboard: Dashboard = Depends(get_dashboard)) -> TimerOut:
    dashboard.timer.reset()
    return _timer_out(dashboard)


# PUBLIC_INTERFACE
@router.post("/timer/mode", response_model=TimerOut, tags=["focus"], summary="Switch Timer Mode")
def switch_timer_mode(payload: TimerModeIn, dashboard: Dashboard = Depends(get_dashboard)) -> TimerOut:
    dashboard.timer.switch_mode(payload.mode)
    return _timer_out(dashboard)


# PUBLIC_INTERFACE
@router.post(
    "/timer/tick",
    response_model=TimerOut,
    tags=["focus"],
    summary="Advance Timer",
    description="Advance a running timer. Finishing a focus countdown logs a session, returned as completedSession.",
)
def tick_timer(payload: TimerTick, dashboard: Dashboard = Depends(get_dashboard)) -> TimerOut:
    completed = dashboard.tick_timer(payload.seconds)
    return _timer_out(dashboard, completed)


# PUBLIC_INTERFACE
@router.get("/caffeine", tags=["caffeine"], summary="List Caffeine Log")
def list_caffeine(dashboard: Dashboard = Depends(get_dashboard)) -> List[Dict[str, Any]]:
    return list(dashboard.document["caffeineLog"])


# PUBLIC_INTERFACE
@router.post(
    "/caffeine",
    tags=["caffeine"],
    status_code=status.HTTP_201_CREATED,
    summary="Log Caffeine",
    description="Log an intake by amount in mg or by preset (espresso 80, energy_drink 150, black_tea 40, soda 35).",
)
def create_caffeine(payload: CaffeineCreate, dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, Any]:
    return dashboard.log_caffeine(payload.resolved_amount())


# PUBLIC_INTERFACE
@router.delete("/caffeine", tags=["caffeine"], summary="Clear Caffeine Log")
def clear_caffeine(dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, int]:
    return {"cleared": dashboard.clear_caffeine()}
