"""Person Schemas — Pydantic models for the Person API boundary.

Invariants:
    - PersonBody.email: 1-320 chars after stripping surrounding whitespace
    - PersonBody.id is accepted but never trusted; to_record() drops it
    - Unknown fields are kept (extra="allow") and become record attributes

Design Decisions:
    - extra="allow" over a fixed schema: records are documents, the store does not
      constrain fields other than id/email
    - Response built from PersonRecord.to_document() so reads echo stored shape
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from person_api.core.domain_types import PersonRecord, normalize_email


class PersonBody(BaseModel):
    """Create/Update payload — id in the body is ignored."""
    model_config = ConfigDict(extra="allow")

    id: Any = None
    email: str = Field(max_length=320)

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        v = normalize_email(v)
        if not v:
            raise ValueError("email cannot be empty or whitespace")
        return v

    def to_record(self) -> PersonRecord:
        return PersonRecord(email=self.email, attributes=dict(self.model_extra or {}))


class PersonResponse(BaseModel):
    """Person as returned to clients: id, email, then stored attributes."""
    model_config = ConfigDict(extra="allow")

    id: str
    email: str

    @classmethod
    def from_record(cls, record: PersonRecord) -> "PersonResponse":
        return cls(**record.to_document())
