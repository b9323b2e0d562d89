from __future__ import annotations

from fastapi import Request

from .dashboard import Dashboard


# PUBLIC_INTERFACE
def get_dashboard(request: Request) -> Dashboard:
    """
    Dependency returning the Dashboard owned by the running app.
    """
    return request.app.state.dashboard
