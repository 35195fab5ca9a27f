"""Person Store — SQLAlchemy implementation of the PersonStore protocol.

Invariants:
    - Each method is exactly one statement plus commit (no read-then-write)
    - IntegrityError on the email index surfaces as DuplicateKeyError
    - Zero affected rows on replace/delete surfaces as RecordNotFoundError
    - Any other SQLAlchemy failure is rolled back and raised as DatabaseError

Design Decisions:
    - Core UPDATE/DELETE statements with rowcount: atomic check-and-write, the
      database serializes concurrent writers on the unique index
    - populate_existing on reads: a shared session never returns a stale identity
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from person_api.core.domain_types import PersonId, PersonRecord
from person_api.core.errors import (
    DatabaseError, DuplicateKeyError, ErrorContext, RecordNotFoundError,
)
from person_api.models.person import Person as PersonModel

logger = logging.getLogger(__name__)


def _to_record(row: PersonModel) -> PersonRecord:
    return PersonRecord(
        id=PersonId(row.id), email=row.email, attributes=dict(row.attributes or {}),
    )


class SqlPersonStore:
    """PersonStore backed by the `people` table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def insert(self, record: PersonRecord) -> None:
        now = datetime.now(timezone.utc)
        self._db.add(PersonModel(
            id=record.id, email=record.email, attributes=dict(record.attributes),
            created_at=now, updated_at=now,
        ))
        await self._commit("insert", record.id, record.email)

    async def find_by_id(self, person_id: PersonId) -> PersonRecord:
        row = await self._scalar(
            "find_by_id", select(PersonModel).where(PersonModel.id == person_id),
        )
        if row is None:
            raise RecordNotFoundError(person_id)
        return _to_record(row)

    async def find_by_email(self, email: str) -> PersonRecord:
        row = await self._scalar(
            "find_by_email", select(PersonModel).where(PersonModel.email == email),
        )
        if row is None:
            raise RecordNotFoundError(email)
        return _to_record(row)

    async def replace_by_id(
        self, person_id: PersonId, record: PersonRecord,
    ) -> None:
        stmt = (
            update(PersonModel)
            .where(PersonModel.id == person_id)
            .values(
                email=record.email,
                attributes=dict(record.attributes),
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        await self._write("replace_by_id", stmt, person_id, record.email)

    async def delete_by_id(self, person_id: PersonId) -> None:
        stmt = (
            delete(PersonModel)
            .where(PersonModel.id == person_id)
            .execution_options(synchronize_session=False)
        )
        await self._write("delete_by_id", stmt, person_id)

    # ─── helpers ─────────────────────────────────────────────────

    async def _scalar(self, operation: str, stmt) -> PersonModel | None:
        try:
            result = await self._db.execute(
                stmt.execution_options(populate_existing=True),
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._fail(operation, e, None)

    async def _write(
        self, operation: str, stmt, person_id: PersonId, email: str | None = None,
    ) -> None:
        try:
            result = await self._db.execute(stmt)
        except IntegrityError:
            await self._db.rollback()
            raise DuplicateKeyError(email or "")
        except SQLAlchemyError as e:
            await self._fail(operation, e, person_id)
        if result.rowcount == 0:
            await self._db.rollback()
            raise RecordNotFoundError(person_id)
        await self._commit(operation, person_id, email)

    async def _commit(
        self, operation: str, person_id: PersonId | None, email: str | None,
    ) -> None:
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise DuplicateKeyError(email or "")
        except SQLAlchemyError as e:
            await self._fail(operation, e, person_id)

    async def _fail(
        self, operation: str, exc: SQLAlchemyError, person_id: str | None,
    ) -> None:
        await self._db.rollback()
        logger.error(
            f"Store {operation} failed: {exc}",
            extra={"operation": operation, "person_id": person_id},
        )
        raise DatabaseError(
            operation, ErrorContext(person_id=person_id, operation=operation),
        ) from exc
