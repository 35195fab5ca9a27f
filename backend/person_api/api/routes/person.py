"""Person Routes — HTTP decoding/encoding for the five Person operations.

Invariants:
    - {person_id} must match PERSON_ID_PATTERN, else 400 before the service runs
    - POST/PUT answer with the id as text/plain; DELETE answers the literal "OK"
    - PUT uses the path id; an id in the body is ignored
    - /email:{email:path} registered before /{person_id} so it is matched first

Design Decisions:
    - Service built per request from the request-scoped session: no shared state
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from person_api.core.domain_types import PERSON_ID_PATTERN
from person_api.infrastructure.database import get_db
from person_api.infrastructure.person_store import SqlPersonStore
from person_api.schemas.person import PersonBody, PersonResponse
from person_api.services.person_service import PersonService

router = APIRouter(prefix="/person", tags=["person"])

PersonIdPath = Annotated[
    str, Path(pattern=PERSON_ID_PATTERN, description="24-char hex identifier"),
]


def get_person_service(db: AsyncSession = Depends(get_db)) -> PersonService:
    return PersonService(SqlPersonStore(db))


@router.post("/", response_class=PlainTextResponse)
async def create_person(
    body: PersonBody, service: PersonService = Depends(get_person_service),
):
    """Create a Person. Returns the assigned id."""
    return await service.create(body.to_record())


@router.get("/email:{email:path}", response_model=PersonResponse)
async def get_person_by_email(
    email: str, service: PersonService = Depends(get_person_service),
):
    """Find a Person by exact email."""
    return PersonResponse.from_record(await service.find_by_email(email))


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(
    person_id: PersonIdPath,
    service: PersonService = Depends(get_person_service),
):
    """Find a Person by id."""
    return PersonResponse.from_record(await service.find_by_id(person_id))


@router.put("/{person_id}", response_class=PlainTextResponse)
async def update_person(
    body: PersonBody,
    person_id: PersonIdPath,
    service: PersonService = Depends(get_person_service),
):
    """Replace a Person. The path id wins over any id in the body."""
    return await service.update(person_id, body.to_record())


@router.delete("/{person_id}", response_class=PlainTextResponse)
async def delete_person(
    person_id: PersonIdPath,
    service: PersonService = Depends(get_person_service),
):
    """Delete a Person."""
    await service.delete(person_id)
    return "OK"
