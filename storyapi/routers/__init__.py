"""
FastAPI routers grouped by resource (users, stories, blogs, auth).

Each module exposes an APIRouter included by storyapi.app. Services are read
from ``request.app.state`` so tests can swap them.
"""

from fastapi import Request


def get_state_service(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if svc is None:
        raise RuntimeError(f"{name} is not configured")
    return svc
