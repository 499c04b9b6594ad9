from __future__ import annotations

import io
from datetime import datetime, timedelta, timezone

import pytest

from userhub.core.security import verify_password
from userhub.db.models import BinaryContent, User, UserStatus
from userhub.db.session import get_session
from userhub.domain.errors import (
    BinaryContentNotFound,
    DuplicateEmail,
    DuplicateUsername,
    InvalidPayload,
    InvalidUserData,
    UserNotFound,
    UserStatusNotFound,
)
from userhub.services.binary_content_service import BinaryContentCreateRequest, BinaryContentService
from userhub.services.user_service import UserService
from userhub.services.user_status_service import UserStatusService


class _BrokenUpload:
    def read(self, size: int = -1) -> bytes:
        raise OSError("disk went away")


def _png(data: bytes = b"\x89PNG\x00", name: str = "a.png") -> BinaryContentCreateRequest:
    return BinaryContentCreateRequest(file_name=name, content_type="image/png", file=data)


def _count(model) -> int:
    with get_session() as session:
        return session.query(model).count()


def test_create_then_find_returns_online_user(temp_db):
    svc = UserService()
    created = svc.create("ada", "ada@x.io", "p")

    assert created.username == "ada"
    assert created.email == "ada@x.io"
    assert created.profile_id is None
    assert created.online is True

    found = svc.find(created.id)
    assert found.username == "ada"
    assert found.email == "ada@x.io"
    assert found.online is True


def test_duplicate_email_is_rejected_without_leftovers(temp_db):
    svc = UserService()
    svc.create("ada", "ada@x.io", "p")

    with pytest.raises(DuplicateEmail):
        svc.create("bob", "ada@x.io", "p", _png())

    assert _count(User) == 1
    assert _count(UserStatus) == 1
    assert _count(BinaryContent) == 0


def test_email_conflict_is_reported_before_username_conflict(temp_db):
    svc = UserService()
    svc.create("ada", "ada@x.io", "p")

    with pytest.raises(DuplicateEmail):
        svc.create("ada", "ada@x.io", "p")
    with pytest.raises(DuplicateUsername):
        svc.create("ada", "other@x.io", "p")


def test_create_with_image_stores_content(temp_db):
    svc = UserService()
    view = svc.create("ada", "ada@x.io", "p", _png(b"12345"))

    assert view.profile_id is not None
    content = BinaryContentService().find(view.profile_id)
    assert content.size == 5
    assert content.file_name == "a.png"
    assert content.content_type == "image/png"
    assert content.data == b"12345"


def test_create_reads_file_like_payloads_and_ignores_empty_ones(temp_db):
    svc = UserService()
    with_stream = svc.create("ada", "ada@x.io", "p", _png(io.BytesIO(b"abc")))
    empty = svc.create("bob", "bob@x.io", "p", _png(b""))

    assert BinaryContentService().find(with_stream.profile_id).size == 3
    assert empty.profile_id is None


def test_unreadable_payload_fails_before_any_write(temp_db):
    svc = UserService()
    with pytest.raises(InvalidPayload):
        svc.create("ada", "ada@x.io", "p", _png(_BrokenUpload()))
    assert _count(User) == 0
    assert _count(UserStatus) == 0


def test_blank_username_is_rejected(temp_db):
    with pytest.raises(InvalidUserData):
        UserService().create("   ", "ada@x.io", "p")


def test_password_is_stored_hashed(temp_db):
    view = UserService().create("ada", "ada@x.io", "s3cret")
    with get_session() as session:
        stored = session.get(User, view.id).password
    assert stored != "s3cret"
    assert verify_password("s3cret", stored)


def test_find_unknown_user_raises(temp_db):
    with pytest.raises(UserNotFound):
        UserService().find("missing")


def test_find_all_on_empty_store_returns_empty_list(temp_db):
    assert UserService().find_all() == []


def test_find_all_returns_every_user(temp_db):
    svc = UserService()
    svc.create("ada", "ada@x.io", "p")
    svc.create("bob", "bob@x.io", "p")
    assert sorted(v.username for v in svc.find_all()) == ["ada", "bob"]


def test_update_password_only_keeps_profile(temp_db):
    svc = UserService()
    view = svc.create("ada", "ada@x.io", "p", _png())

    updated = svc.update(view.id, new_password="new-secret")

    assert updated.profile_id == view.profile_id
    assert updated.username == "ada"
    with get_session() as session:
        assert verify_password("new-secret", session.get(User, view.id).password)


def test_update_with_new_image_replaces_old_content(temp_db):
    svc = UserService()
    contents = BinaryContentService()
    view = svc.create("ada", "ada@x.io", "p", _png(b"old"))

    updated = svc.update(view.id, new_profile_image=_png(b"newer", name="b.png"))

    assert updated.profile_id is not None
    assert updated.profile_id != view.profile_id
    with pytest.raises(BinaryContentNotFound):
        contents.find(view.profile_id)
    assert contents.find(updated.profile_id).size == 5
    assert _count(BinaryContent) == 1


def test_update_allows_resubmitting_own_email_and_username(temp_db):
    svc = UserService()
    view = svc.create("ada", "ada@x.io", "p")

    updated = svc.update(view.id, new_username="ada", new_email="ada@x.io")

    assert updated.username == "ada"
    assert updated.updated_at == view.updated_at


def test_update_rejects_values_owned_by_other_users(temp_db):
    svc = UserService()
    svc.create("ada", "ada@x.io", "p")
    bob = svc.create("bob", "bob@x.io", "p")

    with pytest.raises(DuplicateEmail):
        svc.update(bob.id, new_email="ada@x.io", new_profile_image=_png())
    with pytest.raises(DuplicateUsername):
        svc.update(bob.id, new_username="ada")

    assert svc.find(bob.id).email == "bob@x.io"
    assert _count(BinaryContent) == 0


def test_update_unknown_user_raises(temp_db):
    with pytest.raises(UserNotFound):
        UserService().update("missing", new_username="x")


def test_delete_cascades_to_status_and_image(temp_db):
    svc = UserService()
    view = svc.create("ada", "ada@x.io", "p", _png())
    status = UserStatusService().update_by_user_id(view.id)

    svc.delete(view.id)

    with pytest.raises(UserNotFound):
        svc.find(view.id)
    with pytest.raises(UserStatusNotFound):
        UserStatusService().find(status.id)
    with pytest.raises(BinaryContentNotFound):
        BinaryContentService().find(view.profile_id)


def test_delete_unknown_user_raises(temp_db):
    with pytest.raises(UserNotFound):
        UserService().delete("missing")


def test_view_reports_offline_after_recency_window(temp_db):
    svc = UserService()
    view = svc.create("ada", "ada@x.io", "p")
    UserStatusService().update_by_user_id(view.id, datetime.now(timezone.utc) - timedelta(hours=1))

    assert svc.find(view.id).online is False


def test_view_tolerates_missing_status(temp_db):
    svc = UserService()
    view = svc.create("ada", "ada@x.io", "p")
    statuses = UserStatusService()
    statuses.delete(statuses.update_by_user_id(view.id).id)

    assert svc.find(view.id).online is None


def test_update_with_current_password_changes_nothing(temp_db):
    svc = UserService()
    view = svc.create("ada", "ada@x.io", "p")
    with get_session() as session:
        stored = session.get(User, view.id).password

    unchanged = svc.update(view.id, new_password="p")

    assert unchanged.updated_at == view.updated_at
    with get_session() as session:
        assert session.get(User, view.id).password == stored

    changed = svc.update(view.id, new_password="q")

    assert changed.updated_at > view.updated_at
    with get_session() as session:
        assert verify_password("q", session.get(User, view.id).password)
