from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Makes the userhub package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userhub.core import config as core_config  # noqa: E402
from userhub.db import create_tables  # noqa: E402
from userhub.db import session as db_session  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point the app at a throwaway SQLite file and tear it down completely afterwards."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.delenv("USER_ONLINE_WINDOW_SECONDS", raising=False)
    _clear_caches()

    create_tables.drop_all()
    create_tables.create_all()

    yield db_file

    try:
        create_tables.drop_all()
    finally:
        db_session.get_engine().dispose()
        _clear_caches()
