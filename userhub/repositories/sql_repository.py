"""Data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from userhub.db.models import BinaryContent, User, UserStatus
from userhub.domain.errors import DuplicateEmail, DuplicateUsername, DuplicateUserStatus


def violates_unique(exc: IntegrityError, table: str, column: str, constraint: str) -> bool:
    """
    Tell whether ``exc`` comes from the unique index on ``table.column``.

    Only identifiers are matched, never the whole message: Postgres and MySQL
    echo the rejected value, which may itself contain a column name.
    """
    diag = getattr(exc.orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name in (constraint, f"{table}_{column}_key")
    detail = str(exc.orig).lower()
    tokens = (
        f'"{constraint}"',  # postgres, named constraint
        f"{table}.{constraint}",  # mysql, named constraint
        f"{table}_{column}_key",  # postgres, default name
        f"{table}.{column}",  # sqlite / mysql
        f"key ({column})=",  # postgres detail line
    )
    return any(token in detail for token in tokens)


class _SessionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _flush(self, entity):
        self.session.add(entity)
        self.session.flush()
        return entity


class UserRepository(_SessionRepository):
    """CRUD helpers for users."""

    def save(self, user: User) -> User:
        try:
            return self._flush(user)
        except IntegrityError as exc:
            # The unique indexes are the final word on duplicates.
            if violates_unique(exc, "users", "email", "uq_users_email"):
                raise DuplicateEmail(user.email) from exc
            if violates_unique(exc, "users", "username", "uq_users_username"):
                raise DuplicateUsername(user.username) from exc
            raise

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def find_all(self) -> list[User]:
        return list(self.session.execute(select(User)).scalars().all())

    def exists_by_email(self, email: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(User.id).where(User.email == email)
        if exclude_id:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def exists_by_username(self, username: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(User.id).where(User.username == username)
        if exclude_id:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def exists_by_profile_id(self, profile_id: str) -> bool:
        stmt = select(User.id).where(User.profile_id == profile_id).limit(1)
        return self.session.execute(stmt).first() is not None

    def delete_by_id(self, user_id: str) -> None:
        self.session.execute(delete(User).where(User.id == user_id))


class BinaryContentRepository(_SessionRepository):
    """Stores immutable binary payloads."""

    def save(self, content: BinaryContent) -> BinaryContent:
        return self._flush(content)

    def find_by_id(self, content_id: str) -> Optional[BinaryContent]:
        return self.session.get(BinaryContent, content_id)

    def find_all_by_id_in(self, content_ids: Iterable[str]) -> list[BinaryContent]:
        ids = [value for value in content_ids if value]
        if not ids:
            return []
        stmt = select(BinaryContent).where(BinaryContent.id.in_(ids))
        return list(self.session.execute(stmt).scalars().all())

    def exists_by_id(self, content_id: str) -> bool:
        stmt = select(BinaryContent.id).where(BinaryContent.id == content_id).limit(1)
        return self.session.execute(stmt).first() is not None

    def delete_by_id(self, content_id: str) -> None:
        self.session.execute(delete(BinaryContent).where(BinaryContent.id == content_id))


class UserStatusRepository(_SessionRepository):
    """Presence records keyed one-to-one by user id."""

    def save(self, status: UserStatus) -> UserStatus:
        try:
            return self._flush(status)
        except IntegrityError as exc:
            if violates_unique(exc, "user_statuses", "user_id", "uq_user_statuses_user_id"):
                raise DuplicateUserStatus(status.user_id) from exc
            raise

    def find_by_id(self, status_id: str) -> Optional[UserStatus]:
        return self.session.get(UserStatus, status_id)

    def find_by_user_id(self, user_id: str) -> Optional[UserStatus]:
        stmt = select(UserStatus).where(UserStatus.user_id == user_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def find_all(self) -> list[UserStatus]:
        return list(self.session.execute(select(UserStatus)).scalars().all())

    def delete_by_user_id(self, user_id: str) -> None:
        self.session.execute(delete(UserStatus).where(UserStatus.user_id == user_id))

    def delete_by_id(self, status_id: str) -> None:
        self.session.execute(delete(UserStatus).where(UserStatus.id == status_id))
