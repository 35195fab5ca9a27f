"""Person Service — business rules for the five Person operations.

Invariants:
    - Stateless: holds only a PersonStore reference, safe for concurrent requests
    - create() always assigns a fresh id; any client-supplied id is discarded
    - update() takes its id from the caller's context argument, never the record
    - Malformed ids are reported as PersonNotFoundError (same as absent ids)
    - Emails are normalized before any store call; blank emails are rejected
    - At most one store call per operation; no read-then-write uniqueness check

Design Decisions:
    - Store errors classified here, not in routes: RecordNotFoundError →
      PersonNotFoundError, DuplicateKeyError → EmailConflictError; everything
      else (DatabaseError included) propagates unchanged
"""

import logging
from dataclasses import replace

from person_api.core.domain_types import (
    PersonId, PersonRecord, new_person_id, normalize_email, parse_person_id,
)
from person_api.core.errors import (
    DuplicateKeyError, EmailConflictError, ErrorContext, InvalidPersonError,
    PersonNotFoundError, RecordNotFoundError,
)
from person_api.core.repository_protocols import PersonStore

logger = logging.getLogger(__name__)


class PersonService:
    """Create, read, replace and delete Person records."""

    def __init__(self, store: PersonStore):
        self._store = store

    async def create(self, person: PersonRecord) -> PersonId:
        person_id = new_person_id()
        record = self._require_email(person, "create").with_id(person_id)
        try:
            await self._store.insert(record)
        except DuplicateKeyError:
            raise EmailConflictError(
                record.email, ErrorContext(operation="create"),
            ) from None
        logger.info("Person created", extra={"person_id": person_id})
        return person_id

    async def find_by_id(self, raw_id: str) -> PersonRecord:
        person_id = self._require_id(raw_id, "find_by_id")
        try:
            return await self._store.find_by_id(person_id)
        except RecordNotFoundError:
            raise PersonNotFoundError(
                person_id, ErrorContext(person_id=person_id, operation="find_by_id"),
            ) from None

    async def find_by_email(self, email: str) -> PersonRecord:
        email = normalize_email(email)
        try:
            person = await self._store.find_by_email(email)
        except RecordNotFoundError:
            raise PersonNotFoundError(
                email, ErrorContext(operation="find_by_email"),
            ) from None
        logger.debug("FindByEmail matched", extra={"person_id": person.id})
        return person

    async def update(self, raw_id: str, person: PersonRecord) -> PersonId:
        person_id = self._require_id(raw_id, "update")
        record = self._require_email(person, "update").with_id(person_id)
        ctx = ErrorContext(person_id=person_id, operation="update")
        try:
            await self._store.replace_by_id(person_id, record)
        except RecordNotFoundError:
            raise PersonNotFoundError(person_id, ctx) from None
        except DuplicateKeyError:
            raise EmailConflictError(record.email, ctx) from None
        logger.info("Person updated", extra={"person_id": person_id})
        return person_id

    async def delete(self, raw_id: str) -> None:
        person_id = self._require_id(raw_id, "delete")
        try:
            await self._store.delete_by_id(person_id)
        except RecordNotFoundError:
            raise PersonNotFoundError(
                person_id, ErrorContext(person_id=person_id, operation="delete"),
            ) from None
        logger.info("Person deleted", extra={"person_id": person_id})

    @staticmethod
    def _require_id(raw_id: str, operation: str) -> PersonId:
        person_id = parse_person_id(raw_id)
        if person_id is None:
            raise PersonNotFoundError(
                str(raw_id), ErrorContext(operation=operation),
            )
        return person_id

    @staticmethod
    def _require_email(person: PersonRecord, operation: str) -> PersonRecord:
        email = normalize_email(person.email or "")
        if not email:
            raise InvalidPersonError(
                "email cannot be empty", "email", ErrorContext(operation=operation),
            )
        return replace(person, email=email)
