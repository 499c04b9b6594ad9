"""Read-model assembled from a user and its presence record."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from userhub.core.utils import as_utc
from userhub.db.models import User, UserStatus


@dataclass(frozen=True)
class UserView:
    id: str
    created_at: datetime
    updated_at: datetime
    username: str
    email: str
    profile_id: Optional[str]
    online: Optional[bool]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "username": self.username,
            "email": self.email,
            "profileId": self.profile_id,
            "online": self.online,
        }


def to_user_view(user: User, status: Optional[UserStatus], now: datetime, window_seconds: int) -> UserView:
    """
    Map a stored user plus its status into the public view.

    A missing status leaves ``online`` as None instead of failing the read.
    """
    online = status.is_online(window_seconds, now) if status is not None else None
    return UserView(
        id=user.id,
        created_at=as_utc(user.created_at),
        updated_at=as_utc(user.updated_at),
        username=user.username,
        email=user.email,
        profile_id=user.profile_id,
        online=online,
    )
