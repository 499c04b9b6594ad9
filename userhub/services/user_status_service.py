"""Presence records: one status per user, online derived from last activity."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from userhub.core.config import get_settings
from userhub.core.utils import as_utc, utcnow
from userhub.db.models import UserStatus
from userhub.db.session import session_scope
from userhub.domain.errors import DuplicateUserStatus, UserNotFound, UserStatusNotFound
from userhub.repositories.sql_repository import UserRepository, UserStatusRepository

logger = logging.getLogger(__name__)


def create_status(session: Session, user_id: str, last_active_at: datetime) -> UserStatus:
    """Insert the status for ``user_id`` inside the caller's transaction."""
    repo = UserStatusRepository(session)
    if repo.find_by_user_id(user_id) is not None:
        raise DuplicateUserStatus(user_id)
    stamp = as_utc(last_active_at)
    return repo.save(
        UserStatus(user_id=user_id, last_active_at=stamp, created_at=stamp, updated_at=stamp)
    )


class UserStatusService:
    """Lookups and updates for user presence records."""

    def __init__(self) -> None:
        self.settings = get_settings()

    def is_online(self, status: UserStatus, now: Optional[datetime] = None) -> bool:
        return status.is_online(self.settings.user_online_window_seconds, now)

    def create(self, user_id: str, last_active_at: Optional[datetime] = None) -> UserStatus:
        with session_scope() as session:
            if UserRepository(session).find_by_id(user_id) is None:
                raise UserNotFound(user_id)
            return create_status(session, user_id, last_active_at or utcnow())

    def find(self, status_id: str) -> UserStatus:
        with session_scope() as session:
            status = UserStatusRepository(session).find_by_id(status_id)
        if status is None:
            raise UserStatusNotFound(f"UserStatus with id {status_id} not found")
        return status

    def find_all(self) -> list[UserStatus]:
        with session_scope() as session:
            return UserStatusRepository(session).find_all()

    def update(self, status_id: str, new_last_active_at: Optional[datetime] = None) -> UserStatus:
        with session_scope() as session:
            repo = UserStatusRepository(session)
            status = repo.find_by_id(status_id)
            if status is None:
                raise UserStatusNotFound(f"UserStatus with id {status_id} not found")
            status.touch(new_last_active_at or utcnow())
            return repo.save(status)

    def update_by_user_id(self, user_id: str, new_last_active_at: Optional[datetime] = None) -> UserStatus:
        with session_scope() as session:
            repo = UserStatusRepository(session)
            status = repo.find_by_user_id(user_id)
            if status is None:
                raise UserStatusNotFound(f"UserStatus for user {user_id} not found")
            status.touch(new_last_active_at or utcnow())
            return repo.save(status)

    def delete(self, status_id: str) -> None:
        with session_scope() as session:
            repo = UserStatusRepository(session)
            if repo.find_by_id(status_id) is None:
                raise UserStatusNotFound(f"UserStatus with id {status_id} not found")
            repo.delete_by_id(status_id)
        logger.info("Deleted user status %s", status_id)
