"""
SQLAlchemy models for users, their profile images and online status.

The three tables reference each other only by id. There are no foreign keys
or ORM relationships between them; cascades are carried out by the services.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    LargeBinary,
    String,
    Text,
    UniqueConstraint,
    func,
)

from userhub.core.utils import as_utc, utcnow
from userhub.domain.presence import is_online

from .session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    password = Column(Text, nullable=False)
    profile_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def update(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        password: str | None = None,
        profile_id: str | None = None,
        now: datetime | None = None,
    ) -> bool:
        """Apply the non-null values that differ; return True when something changed."""
        changed = False
        for field, value in (
            ("username", username),
            ("email", email),
            ("password", password),
            ("profile_id", profile_id),
        ):
            if value is not None and value != getattr(self, field):
                setattr(self, field, value)
                changed = True
        if changed:
            self.updated_at = now or utcnow()
        return changed


class BinaryContent(Base):
    __tablename__ = "binary_contents"

    id = Column(String(36), primary_key=True, default=_new_id)
    file_name = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False)
    content_type = Column(String(255), nullable=False)
    data = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class UserStatus(Base):
    __tablename__ = "user_statuses"
    __table_args__ = (UniqueConstraint("user_id", name="uq_user_statuses_user_id"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False)
    last_active_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def touch(self, last_active_at: datetime, *, now: datetime | None = None) -> None:
        stamp = as_utc(last_active_at)
        if self.last_active_at is None or stamp != as_utc(self.last_active_at):
            self.last_active_at = stamp
            self.updated_at = now or utcnow()

    def is_online(self, window_seconds: int, now: datetime | None = None) -> bool:
        return is_online(self.last_active_at, now or utcnow(), window_seconds)
