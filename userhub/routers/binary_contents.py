from __future__ import annotations

import urllib.parse

from fastapi import APIRouter, Query, Request, Response

from userhub.core.utils import as_utc
from userhub.db.models import BinaryContent
from userhub.routers._deps import get_state_service
from userhub.services.binary_content_service import BinaryContentService

router = APIRouter(prefix="/api/binaryContents", tags=["binary-contents"])


def _content_service(request: Request) -> BinaryContentService:
    return get_state_service(request, "binary_content_service")


def _content_payload(content: BinaryContent) -> dict:
    return {
        "id": content.id,
        "fileName": content.file_name,
        "size": content.size,
        "contentType": content.content_type,
        "createdAt": as_utc(content.created_at).isoformat(),
    }


@router.get("")
def list_contents(request: Request, binaryContentIds: list[str] | None = Query(None)):
    return [_content_payload(c) for c in _content_service(request).find_all_by_ids(binaryContentIds or [])]


@router.get("/{content_id}")
def get_content(content_id: str, request: Request):
    return _content_payload(_content_service(request).find(content_id))


@router.get("/{content_id}/download")
def download_content(content_id: str, request: Request):
    content = _content_service(request).find(content_id)
    filename = urllib.parse.quote(content.file_name)
    return Response(
        content=content.data,
        media_type=content.content_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{filename}"},
    )


@router.delete("/{content_id}", status_code=204)
def delete_content(content_id: str, request: Request):
    _content_service(request).delete(content_id)
    return Response(status_code=204)
