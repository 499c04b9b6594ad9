"""
Binary content use cases (profile images and other uploaded files).

Stored content is immutable: replacing a file means deleting the old row and
creating a new one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Union

from userhub.core.utils import utcnow
from userhub.db.models import BinaryContent
from userhub.db.session import session_scope
from userhub.domain.errors import BinaryContentInUse, BinaryContentNotFound, InvalidPayload
from userhub.repositories.sql_repository import BinaryContentRepository, UserRepository

logger = logging.getLogger(__name__)


class Readable(Protocol):
    def read(self, size: int = -1) -> bytes: ...


@dataclass(frozen=True)
class BinaryContentCreateRequest:
    """An uploaded file: raw bytes or any object exposing read()."""

    file_name: str
    content_type: str
    file: Union[bytes, bytearray, Readable, None]

    def read_bytes(self) -> bytes:
        source = self.file
        if source is None:
            return b""
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        try:
            if hasattr(source, "seek"):
                source.seek(0)
            data = source.read()
        except (OSError, ValueError) as exc:
            raise InvalidPayload(f"Failed to read file {self.file_name!r}") from exc
        if isinstance(data, str):
            raise InvalidPayload(f"File {self.file_name!r} was opened in text mode")
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidPayload(f"File {self.file_name!r} did not produce bytes")
        return bytes(data)


def build_binary_content(request: BinaryContentCreateRequest, data: bytes) -> BinaryContent:
    return BinaryContent(
        file_name=(request.file_name or "").strip() or "file",
        size=len(data),
        content_type=(request.content_type or "").strip() or "application/octet-stream",
        data=data,
        created_at=utcnow(),
    )


def read_optional_payload(request: Optional[BinaryContentCreateRequest]) -> Optional[bytes]:
    """Read a payload up front; None when absent or empty."""
    if request is None:
        return None
    data = request.read_bytes()
    return data or None


class BinaryContentService:
    """Create, look up and delete stored files."""

    def create(self, request: BinaryContentCreateRequest) -> BinaryContent:
        data = request.read_bytes()
        with session_scope() as session:
            content = BinaryContentRepository(session).save(build_binary_content(request, data))
        logger.info("Stored binary content %s (%d bytes)", content.id, content.size)
        return content

    def find(self, binary_content_id: str) -> BinaryContent:
        with session_scope() as session:
            content = BinaryContentRepository(session).find_by_id(binary_content_id)
        if content is None:
            raise BinaryContentNotFound(binary_content_id)
        return content

    def find_all_by_ids(self, binary_content_ids: Iterable[str]) -> list[BinaryContent]:
        with session_scope() as session:
            return BinaryContentRepository(session).find_all_by_id_in(binary_content_ids)

    def delete(self, binary_content_id: str) -> None:
        """
        Remove stored content that no user references.

        Profile images are replaced or removed through UserService; deleting
        one here would leave the owner pointing at a missing row.
        """
        with session_scope() as session:
            repo = BinaryContentRepository(session)
            if not repo.exists_by_id(binary_content_id):
                raise BinaryContentNotFound(binary_content_id)
            if UserRepository(session).exists_by_profile_id(binary_content_id):
                raise BinaryContentInUse(binary_content_id)
            repo.delete_by_id(binary_content_id)
        logger.info("Deleted binary content %s", binary_content_id)
