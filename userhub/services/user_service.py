"""
User aggregate use cases.

A user owns exactly one status record and at most one profile image. The
tables are not linked by foreign keys, so this service keeps them
consistent: every operation runs in one transaction and cascades to the
dependents explicitly.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from userhub.core.config import get_settings
from userhub.core.security import hash_password, verify_password
from userhub.core.utils import utcnow
from userhub.db.models import User
from userhub.db.session import session_scope
from userhub.domain.errors import (
    DuplicateEmail,
    DuplicateUsername,
    InvalidUserData,
    UserNotFound,
)
from userhub.repositories.sql_repository import (
    BinaryContentRepository,
    UserRepository,
    UserStatusRepository,
)
from userhub.services.binary_content_service import (
    BinaryContentCreateRequest,
    build_binary_content,
    read_optional_payload,
)
from userhub.services.user_status_service import create_status
from userhub.services.user_view import UserView, to_user_view

logger = logging.getLogger(__name__)


class UserService:
    """Creates, reads, updates and deletes users together with their dependents."""

    def __init__(self) -> None:
        self.settings = get_settings()

    # -------------------------------------- helpers --------------------------------------
    def _normalize(self, value: Optional[str], field: str, *, required: bool) -> Optional[str]:
        if value is None:
            if required:
                raise InvalidUserData(f"{field} is required")
            return None
        cleaned = value.strip()
        if not cleaned:
            raise InvalidUserData(f"{field} must not be empty")
        return cleaned

    def _ensure_unique(
        self,
        users: UserRepository,
        *,
        email: Optional[str],
        username: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> None:
        # Email first so the reported conflict does not depend on storage order.
        if email is not None and users.exists_by_email(email, exclude_id=exclude_id):
            logger.warning("Rejected duplicate email %s", email)
            raise DuplicateEmail(email)
        if username is not None and users.exists_by_username(username, exclude_id=exclude_id):
            logger.warning("Rejected duplicate username %s", username)
            raise DuplicateUsername(username)

    def _get_user(self, users: UserRepository, user_id: str) -> User:
        user = users.find_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    def _new_password_hash(self, user: User, new_password: Optional[str]) -> Optional[str]:
        # Argon2 salts every hash, so an unchanged password is detected by verifying it.
        if not new_password or verify_password(new_password, user.password):
            return None
        return hash_password(new_password)

    def _to_view(self, session: Session, user: User) -> UserView:
        status = UserStatusRepository(session).find_by_user_id(user.id)
        return to_user_view(user, status, utcnow(), self.settings.user_online_window_seconds)

    # -------------------------------------- commands --------------------------------------
    def create(
        self,
        username: str,
        email: str,
        password: str,
        profile_image: Optional[BinaryContentCreateRequest] = None,
    ) -> UserView:
        username = self._normalize(username, "username", required=True)
        email = self._normalize(email, "email", required=True)
        if not password:
            raise InvalidUserData("password is required")
        # Read the upload before touching storage so a bad file leaves nothing behind.
        image_bytes = read_optional_payload(profile_image)

        with session_scope() as session:
            users = UserRepository(session)
            self._ensure_unique(users, email=email, username=username)

            profile_id = None
            if image_bytes is not None:
                content = BinaryContentRepository(session).save(build_binary_content(profile_image, image_bytes))
                profile_id = content.id

            now = utcnow()
            user = users.save(
                User(
                    username=username,
                    email=email,
                    password=hash_password(password),
                    profile_id=profile_id,
                    created_at=now,
                    updated_at=now,
                )
            )
            create_status(session, user.id, now)
            view = self._to_view(session, user)
        logger.info("Created user %s (%s)", view.id, view.username)
        return view

    def find(self, user_id: str) -> UserView:
        with session_scope() as session:
            user = self._get_user(UserRepository(session), user_id)
            return self._to_view(session, user)

    def find_all(self) -> list[UserView]:
        with session_scope() as session:
            return [self._to_view(session, user) for user in UserRepository(session).find_all()]

    def update(
        self,
        user_id: str,
        new_username: Optional[str] = None,
        new_email: Optional[str] = None,
        new_password: Optional[str] = None,
        new_profile_image: Optional[BinaryContentCreateRequest] = None,
    ) -> UserView:
        new_username = self._normalize(new_username, "username", required=False)
        new_email = self._normalize(new_email, "email", required=False)
        image_bytes = read_optional_payload(new_profile_image)

        with session_scope() as session:
            users = UserRepository(session)
            user = self._get_user(users, user_id)
            self._ensure_unique(users, email=new_email, username=new_username, exclude_id=user.id)

            new_profile_id = None
            if image_bytes is not None:
                contents = BinaryContentRepository(session)
                if user.profile_id:
                    contents.delete_by_id(user.profile_id)
                new_profile_id = contents.save(build_binary_content(new_profile_image, image_bytes)).id

            user.update(
                username=new_username,
                email=new_email,
                password=self._new_password_hash(user, new_password),
                profile_id=new_profile_id,
            )
            user = users.save(user)
            view = self._to_view(session, user)
        logger.info("Updated user %s", user_id)
        return view

    def delete(self, user_id: str) -> None:
        with session_scope() as session:
            users = UserRepository(session)
            user = self._get_user(users, user_id)
            # Dependents go first so a live user never points at a missing row.
            if user.profile_id:
                BinaryContentRepository(session).delete_by_id(user.profile_id)
            UserStatusRepository(session).delete_by_user_id(user.id)
            users.delete_by_id(user.id)
        logger.info("Deleted user %s", user_id)
