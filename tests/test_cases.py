import pytest
from sqlalchemy import func, select

from episure.core.errors import Conflict, NotFound, Unauthorized
from episure.modules.cases.models import Case
from episure.modules.cases.repository import CaseRepository
from episure.modules.cases.schemas import CaseCreate
from episure.modules.cases.service import CaseService


async def _count_cases(session, code):
    res = await session.execute(select(func.count()).select_from(Case).where(Case.case_id == code))
    return res.scalar_one()


async def test_create_case_starts_at_created(session, alice_id):
    view = await CaseService(session).create_case(CaseCreate(case_id="CASE-1", case_name="Kid's pen"), alice_id)
    assert view.workflow_state == "CREATED"
    assert view.connection_status == "disconnected"
    assert view.patient_id is None


async def test_same_owner_resubmission_updates_in_place(session, alice_id, make_case):
    await make_case(alice_id, "CASE-1", with_patient=True)

    view = await CaseService(session).create_case(
        CaseCreate(case_id="CASE-1", case_name="Renamed", battery_level=80), alice_id
    )

    assert view.case_name == "Renamed"
    assert view.battery_level == 80
    # the workflow is not reset by an update
    assert view.workflow_state == "PATIENT_LINKED"
    assert await _count_cases(session, "CASE-1") == 1


async def test_other_owner_gets_conflict(session, alice_id, bob_id, make_case):
    await make_case(alice_id, "CASE-1")

    with pytest.raises(Conflict):
        await CaseService(session).create_case(CaseCreate(case_id="CASE-1", case_name="Hijack"), bob_id)

    case = await CaseRepository(session).get_by_code("CASE-1")
    assert case.user_id == alice_id
    assert case.case_name == "Case CASE-1"


async def test_unknown_user_cannot_create(session, users):
    with pytest.raises(NotFound):
        await CaseService(session).create_case(CaseCreate(case_id="CASE-9", case_name="Ghost"), 999)
    assert await _count_cases(session, "CASE-9") == 0


async def test_get_case_enforces_ownership(session, alice_id, bob_id, make_case):
    await make_case(alice_id, "CASE-1")
    service = CaseService(session)

    assert (await service.get_case("CASE-1", alice_id)).case_id == "CASE-1"
    with pytest.raises(Unauthorized):
        await service.get_case("CASE-1", bob_id)
    with pytest.raises(NotFound):
        await service.get_case("NOPE", alice_id)


async def test_soft_deleted_case_is_not_found(session, alice_id, make_case):
    await make_case(alice_id, "CASE-1")
    await CaseRepository(session).soft_delete("CASE-1")
    await session.commit()

    with pytest.raises(NotFound):
        await CaseService(session).get_case("CASE-1", alice_id)


async def test_list_user_cases_only_returns_own(session, alice_id, bob_id, make_case):
    await make_case(alice_id, "CASE-A1")
    await make_case(alice_id, "CASE-A2")
    await make_case(bob_id, "CASE-B1")

    codes = {c.case_id for c in await CaseService(session).list_user_cases(alice_id)}
    assert codes == {"CASE-A1", "CASE-A2"}


def test_case_name_must_have_two_characters():
    with pytest.raises(ValueError):
        CaseCreate(case_id="CASE-1", case_name=" a ")


async def test_soft_deleted_code_cannot_be_recreated(session, alice_id, bob_id, make_case):
    await make_case(bob_id, "CASE-1")
    await CaseRepository(session).soft_delete("CASE-1")
    await session.commit()

    with pytest.raises(Conflict):
        await CaseService(session).create_case(CaseCreate(case_id="CASE-1", case_name="Reuse"), alice_id)
    assert await _count_cases(session, "CASE-1") == 1


async def test_unique_violation_on_insert_becomes_conflict(session, alice_id, bob_id, make_case, monkeypatch):
    # the existence checks pass but another writer already holds the code
    await make_case(bob_id, "CASE-1")
    await CaseRepository(session).soft_delete("CASE-1")
    await session.commit()

    async def not_taken(self, case_code):
        return False

    monkeypatch.setattr(CaseRepository, "code_taken", not_taken)

    with pytest.raises(Conflict):
        await CaseService(session).create_case(CaseCreate(case_id="CASE-1", case_name="Race"), alice_id)
    assert await _count_cases(session, "CASE-1") == 1
