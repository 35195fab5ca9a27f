"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PersonId is always 24 lowercase hex chars once parsed or generated
    - PersonRecord.id is None only for records not yet persisted
    - attributes never contain the keys "id" or "email" (those are fields)

Design Decisions:
    - NewType over wrapper class for PersonId: zero runtime cost, plain str on the wire
    - Identifier layout mirrors a document-store object id: 4-byte timestamp,
      5 random process bytes, 3-byte counter — sortable by creation second
"""

import itertools
import os
import re
import time
from dataclasses import dataclass, field, replace
from typing import Any, NewType


# ─── Identity Types ──────────────────────────────────────────────

PersonId = NewType("PersonId", str)

PERSON_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
_PERSON_ID_RE = re.compile(PERSON_ID_PATTERN)

_PROCESS_BYTES = os.urandom(5)
_counter = itertools.count(int.from_bytes(os.urandom(3), "big"))


def new_person_id() -> PersonId:
    """Generate a fresh identifier. Unique per process via the counter."""
    timestamp = int(time.time()).to_bytes(4, "big")
    count = (next(_counter) % 0x1000000).to_bytes(3, "big")
    return PersonId((timestamp + _PROCESS_BYTES + count).hex())


def parse_person_id(raw: str | None) -> PersonId | None:
    """Return the normalized id, or None when raw is not a syntactically valid id."""
    if not raw or not _PERSON_ID_RE.fullmatch(raw):
        return None
    return PersonId(raw.lower())


def normalize_email(email: str) -> str:
    """Email policy: strip surrounding whitespace, keep case (exact match)."""
    return email.strip()


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class PersonRecord:
    """A Person as the service and store exchange it."""
    email: str
    attributes: dict[str, Any] = field(default_factory=dict)
    id: PersonId | None = None

    def with_id(self, person_id: PersonId) -> "PersonRecord":
        return replace(self, id=person_id)

    def to_document(self) -> dict[str, Any]:
        """Flatten into the wire shape: id, email, then free-form attributes."""
        return {"id": self.id, "email": self.email, **self.attributes}
