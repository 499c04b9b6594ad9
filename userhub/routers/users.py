from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Body, File, Form, Request, Response, UploadFile

from userhub.routers._deps import get_state_service
from userhub.routers.user_statuses import status_payload
from userhub.services.binary_content_service import BinaryContentCreateRequest
from userhub.services.user_service import UserService
from userhub.services.user_status_service import UserStatusService

router = APIRouter(prefix="/api/users", tags=["users"])


def _user_service(request: Request) -> UserService:
    return get_state_service(request, "user_service")


def _upload_request(upload: UploadFile | None) -> BinaryContentCreateRequest | None:
    if upload is None or not upload.filename:
        return None
    return BinaryContentCreateRequest(
        file_name=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        file=upload.file,
    )


@router.post("", status_code=201)
def create_user(
    request: Request,
    username: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    profile: UploadFile | None = File(None),
):
    view = _user_service(request).create(username, email, password, _upload_request(profile))
    return view.to_dict()


@router.get("")
def list_users(request: Request):
    return [view.to_dict() for view in _user_service(request).find_all()]


@router.get("/{user_id}")
def get_user(user_id: str, request: Request):
    return _user_service(request).find(user_id).to_dict()


@router.patch("/{user_id}")
def update_user(
    user_id: str,
    request: Request,
    newUsername: str | None = Form(None),
    newEmail: str | None = Form(None),
    newPassword: str | None = Form(None),
    profile: UploadFile | None = File(None),
):
    view = _user_service(request).update(
        user_id,
        new_username=newUsername,
        new_email=newEmail,
        new_password=newPassword,
        new_profile_image=_upload_request(profile),
    )
    return view.to_dict()


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: str, request: Request):
    _user_service(request).delete(user_id)
    return Response(status_code=204)


@router.patch("/{user_id}/userStatus")
def touch_user_status(
    user_id: str,
    request: Request,
    newLastActiveAt: datetime | None = Body(None, embed=True),
):
    svc: UserStatusService = get_state_service(request, "user_status_service")
    status = svc.update_by_user_id(user_id, newLastActiveAt)
    return status_payload(svc, status)
