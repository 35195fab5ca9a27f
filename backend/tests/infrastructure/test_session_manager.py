"""DatabaseSessionManager — SQLAlchemy failures escaping a session become DatabaseError."""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError

from person_api.core.errors import DatabaseError
from person_api.infrastructure.database import DatabaseSessionManager


@pytest.fixture
def manager(test_engine, test_session_factory):
    m = DatabaseSessionManager.__new__(DatabaseSessionManager)
    m.engine = test_engine
    m._session_factory = test_session_factory
    return m


@pytest.mark.parametrize("exc", [
    IntegrityError("INSERT", {}, Exception("unique")),
    OperationalError("SELECT", {}, Exception("gone")),
])
async def test_sqlalchemy_errors_map_to_database_error(manager, exc):
    with pytest.raises(DatabaseError) as exc_info:
        async with manager.session():
            raise exc
    assert exc_info.value.http_status == 500
    assert exc_info.value.message == "Database session failed"
    assert exc_info.value.__cause__ is exc


async def test_non_database_errors_pass_through(manager):
    with pytest.raises(KeyError):
        async with manager.session():
            raise KeyError("x")


async def test_health_check_reports_reachable_database(manager):
    assert await manager.health_check() is True
    async with manager.session() as db:
        assert (await db.execute(text("SELECT 1"))).scalar() == 1
