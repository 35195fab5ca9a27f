"""Service test fixtures — PersonService over a real SQLite-backed store.

Invariants:
    - store/service share the per-test test_db session
    - failing_store raises DatabaseError on every call (infrastructure failure path)
"""

import pytest

from person_api.core.errors import DatabaseError
from person_api.infrastructure.person_store import SqlPersonStore
from person_api.services.person_service import PersonService


@pytest.fixture
def store(test_db):
    return SqlPersonStore(test_db)


@pytest.fixture
def service(store):
    return PersonService(store)


@pytest.fixture
def failing_store():
    """Store whose every call fails like an unreachable database."""
    calls = []

    class _FailingStore:
        def __getattr__(self, name):
            async def _fail(*args, **kwargs):
                calls.append(name)
                raise DatabaseError(name)
            return _fail

    store = _FailingStore()
    store.calls = calls
    return store
