"""Person Service — id assignment, uniqueness classification, lifecycle.

Invariants:
    - create() assigns a fresh id even when the record carries one
    - Duplicate email → EmailConflictError; existing record untouched
    - Malformed and absent ids both → PersonNotFoundError
    - update() uses the id argument, never the record's id
    - Store infrastructure errors propagate unchanged
"""

import pytest

from person_api.core.domain_types import PersonRecord, new_person_id
from person_api.core.errors import (
    DatabaseError, EmailConflictError, InvalidPersonError, PersonNotFoundError,
)
from person_api.services.person_service import PersonService


def _person(email="a@x.com", **attributes):
    return PersonRecord(email=email, attributes=attributes)


# ─── create ──────────────────────────────────────────────────────

async def test_create_returns_fresh_id(service):
    first = await service.create(_person("a@x.com"))
    second = await service.create(_person("b@x.com"))
    assert first and second
    assert first != second


async def test_create_discards_client_id(service):
    client_id = new_person_id()
    pid = await service.create(_person().with_id(client_id))
    assert pid != client_id
    with pytest.raises(PersonNotFoundError):
        await service.find_by_id(client_id)


async def test_find_after_create_returns_input_plus_id(service):
    pid = await service.create(_person("a@x.com", name="Ann", tags=["x"]))
    found = await service.find_by_id(pid)
    assert found == PersonRecord(
        id=pid, email="a@x.com", attributes={"name": "Ann", "tags": ["x"]},
    )


async def test_create_duplicate_email_conflicts_and_keeps_original(service):
    pid = await service.create(_person("a@x.com", name="Ann"))
    with pytest.raises(EmailConflictError):
        await service.create(_person("a@x.com", name="Impostor"))
    found = await service.find_by_email("a@x.com")
    assert found.id == pid
    assert found.attributes == {"name": "Ann"}


async def test_email_uniqueness_is_case_sensitive(service):
    await service.create(_person("a@x.com"))
    pid = await service.create(_person("A@X.com"))
    assert (await service.find_by_email("A@X.com")).id == pid


async def test_create_blank_email_is_invalid(service, failing_store):
    with pytest.raises(InvalidPersonError):
        await service.create(_person("   "))
    with pytest.raises(InvalidPersonError):
        await PersonService(failing_store).create(_person(""))
    assert failing_store.calls == []


async def test_create_strips_email_before_insert(service):
    pid = await service.create(_person("  a@x.com "))
    assert (await service.find_by_id(pid)).email == "a@x.com"


# ─── find ────────────────────────────────────────────────────────

async def test_find_by_id_malformed_is_not_found(service):
    with pytest.raises(PersonNotFoundError):
        await service.find_by_id("not-an-id")


async def test_find_by_id_absent_is_not_found(service):
    with pytest.raises(PersonNotFoundError):
        await service.find_by_id(new_person_id())


async def test_find_by_id_accepts_uppercase(service):
    pid = await service.create(_person())
    assert (await service.find_by_id(pid.upper())).id == pid


async def test_find_by_email_strips_whitespace(service):
    pid = await service.create(_person("a@x.com"))
    assert (await service.find_by_email(" a@x.com ")).id == pid


async def test_find_by_email_absent_is_not_found(service):
    with pytest.raises(PersonNotFoundError):
        await service.find_by_email("nobody@x.com")


# ─── update ──────────────────────────────────────────────────────

async def test_update_replaces_all_fields(service):
    pid = await service.create(_person("a@x.com", name="Ann", age=30))
    result = await service.update(pid, _person("new@x.com", name="Anne"))
    assert result == pid
    found = await service.find_by_id(pid)
    assert found.email == "new@x.com"
    assert found.attributes == {"name": "Anne"}


async def test_update_id_argument_wins_over_record_id(service):
    target = await service.create(_person("a@x.com"))
    other = await service.create(_person("b@x.com"))
    await service.update(target, _person("c@x.com").with_id(other))
    assert (await service.find_by_id(target)).email == "c@x.com"
    assert (await service.find_by_id(other)).email == "b@x.com"


async def test_update_absent_id_is_not_found_and_store_unchanged(service):
    pid = await service.create(_person("a@x.com"))
    with pytest.raises(PersonNotFoundError):
        await service.update(new_person_id(), _person("z@x.com"))
    assert (await service.find_by_id(pid)).email == "a@x.com"
    with pytest.raises(PersonNotFoundError):
        await service.find_by_email("z@x.com")


async def test_update_malformed_id_is_not_found(service):
    with pytest.raises(PersonNotFoundError):
        await service.update("xyz", _person())


async def test_update_to_other_records_email_conflicts(service):
    a = await service.create(_person("a@x.com"))
    await service.create(_person("b@x.com"))
    with pytest.raises(EmailConflictError):
        await service.update(a, _person("b@x.com"))
    assert (await service.find_by_id(a)).email == "a@x.com"


async def test_update_keeping_own_email_is_not_a_conflict(service):
    a = await service.create(_person("a@x.com", name="Ann"))
    assert await service.update(a, _person("a@x.com", name="Anne")) == a
    assert (await service.find_by_id(a)).attributes == {"name": "Anne"}


async def test_update_blank_email_is_invalid(service):
    pid = await service.create(_person("a@x.com"))
    with pytest.raises(InvalidPersonError):
        await service.update(pid, _person(" "))
    assert (await service.find_by_id(pid)).email == "a@x.com"


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_then_find_is_not_found(service):
    pid = await service.create(_person())
    await service.delete(pid)
    with pytest.raises(PersonNotFoundError):
        await service.find_by_id(pid)


async def test_delete_absent_is_not_found(service):
    with pytest.raises(PersonNotFoundError):
        await service.delete(new_person_id())


async def test_delete_malformed_is_not_found(service):
    with pytest.raises(PersonNotFoundError):
        await service.delete("123")


async def test_deleted_email_can_be_reused(service):
    pid = await service.create(_person("a@x.com"))
    await service.delete(pid)
    assert await service.create(_person("a@x.com")) != pid


# ─── scenario & failure propagation ─────────────────────────────

async def test_full_lifecycle_scenario(service):
    i1 = await service.create(_person("a@x.com"))
    with pytest.raises(EmailConflictError):
        await service.create(_person("a@x.com"))
    assert (await service.find_by_email("a@x.com")).id == i1
    assert await service.delete(i1) is None
    with pytest.raises(PersonNotFoundError):
        await service.find_by_id(i1)


async def test_store_failure_propagates_unchanged(failing_store):
    service = PersonService(failing_store)
    with pytest.raises(DatabaseError):
        await service.create(_person())
    with pytest.raises(DatabaseError):
        await service.find_by_email("a@x.com")
    assert failing_store.calls == ["insert", "find_by_email"]


async def test_malformed_id_never_reaches_store(failing_store):
    service = PersonService(failing_store)
    with pytest.raises(PersonNotFoundError):
        await service.find_by_id("bad")
    with pytest.raises(PersonNotFoundError):
        await service.delete("bad")
    assert failing_store.calls == []
