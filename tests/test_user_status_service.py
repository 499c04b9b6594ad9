from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from userhub.core import config as core_config
from userhub.domain.errors import DuplicateUserStatus, UserNotFound, UserStatusNotFound
from userhub.services.user_service import UserService
from userhub.services.user_status_service import UserStatusService


def test_status_is_created_with_the_user(temp_db):
    user = UserService().create("ada", "ada@x.io", "p")
    statuses = UserStatusService().find_all()

    assert len(statuses) == 1
    assert statuses[0].user_id == user.id
    assert UserStatusService().is_online(statuses[0])


def test_create_requires_existing_user_and_no_prior_status(temp_db):
    svc = UserStatusService()
    with pytest.raises(UserNotFound):
        svc.create("missing")

    user = UserService().create("ada", "ada@x.io", "p")
    with pytest.raises(DuplicateUserStatus):
        svc.create(user.id)


def test_update_moves_last_active(temp_db):
    svc = UserStatusService()
    user = UserService().create("ada", "ada@x.io", "p")
    status = svc.find_all()[0]
    earlier = datetime.now(timezone.utc) - timedelta(minutes=30)

    updated = svc.update(status.id, earlier)

    assert updated.id == status.id
    assert not svc.is_online(updated)
    assert not svc.is_online(svc.find(status.id))
    assert svc.is_online(svc.update_by_user_id(user.id))


def test_online_window_is_configurable(temp_db, monkeypatch):
    monkeypatch.setenv("USER_ONLINE_WINDOW_SECONDS", "7200")
    core_config.get_settings.cache_clear()
    svc = UserStatusService()
    user = UserService().create("ada", "ada@x.io", "p")

    status = svc.update_by_user_id(user.id, datetime.now(timezone.utc) - timedelta(hours=1))

    assert svc.is_online(status)
    assert UserService().find(user.id).online is True


def test_missing_status_lookups_raise(temp_db):
    svc = UserStatusService()
    with pytest.raises(UserStatusNotFound):
        svc.find("missing")
    with pytest.raises(UserStatusNotFound):
        svc.update("missing")
    with pytest.raises(UserStatusNotFound):
        svc.update_by_user_id("missing")
    with pytest.raises(UserStatusNotFound):
        svc.delete("missing")
