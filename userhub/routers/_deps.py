"""Service lookups shared by the routers."""
from __future__ import annotations

from fastapi import Request


def get_state_service(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if not svc:
        raise RuntimeError(f"{name} is not configured")
    return svc
