"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Store methods raise RecordNotFoundError / DuplicateKeyError (core/errors.py);
      the uniqueness check lives in the store, never in a read-then-write
"""

from typing import Protocol

from person_api.core.domain_types import PersonId, PersonRecord


class PersonStore(Protocol):
    """Contract for Person persistence — implemented by shell."""
    async def insert(self, record: PersonRecord) -> None: ...
    async def find_by_id(self, person_id: PersonId) -> PersonRecord: ...
    async def find_by_email(self, email: str) -> PersonRecord: ...
    async def replace_by_id(
        self, person_id: PersonId, record: PersonRecord,
    ) -> None: ...
    async def delete_by_id(self, person_id: PersonId) -> None: ...
