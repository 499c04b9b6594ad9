from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Body, Request, Response

from userhub.core.utils import as_utc
from userhub.db.models import UserStatus
from userhub.routers._deps import get_state_service
from userhub.services.user_status_service import UserStatusService

router = APIRouter(prefix="/api/userStatuses", tags=["user-statuses"])


def _status_service(request: Request) -> UserStatusService:
    return get_state_service(request, "user_status_service")


def status_payload(svc: UserStatusService, status: UserStatus) -> dict:
    return {
        "id": status.id,
        "userId": status.user_id,
        "lastActiveAt": as_utc(status.last_active_at).isoformat(),
        "createdAt": as_utc(status.created_at).isoformat(),
        "updatedAt": as_utc(status.updated_at).isoformat(),
        "online": svc.is_online(status),
    }


@router.get("")
def list_statuses(request: Request):
    svc = _status_service(request)
    return [status_payload(svc, status) for status in svc.find_all()]


@router.get("/{status_id}")
def get_status(status_id: str, request: Request):
    svc = _status_service(request)
    return status_payload(svc, svc.find(status_id))


@router.patch("/{status_id}")
def update_status(
    status_id: str,
    request: Request,
    newLastActiveAt: datetime | None = Body(None, embed=True),
):
    svc = _status_service(request)
    return status_payload(svc, svc.update(status_id, newLastActiveAt))


@router.delete("/{status_id}", status_code=204)
def delete_status(status_id: str, request: Request):
    _status_service(request).delete(status_id)
    return Response(status_code=204)
