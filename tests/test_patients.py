from datetime import date

import pytest
from sqlalchemy import func, select

from conftest import patient_payload
from episure.core.errors import Unauthorized
from episure.modules.cases.repository import CaseRepository
from episure.modules.patients.models import Patient
from episure.modules.patients.repository import PatientRepository
from episure.modules.patients.service import PatientService


async def _patient_count(session, user_id):
    res = await session.execute(select(func.count()).select_from(Patient).where(Patient.user_id == user_id))
    return res.scalar_one()


async def test_link_creates_patient_and_advances(session, alice_id, make_case):
    await make_case(alice_id, "CASE-1")

    view = await PatientService(session).link_patient(patient_payload("CASE-1", is_self=True), alice_id)

    assert view.workflow_state == "PATIENT_LINKED"
    assert view.is_self is True
    case = await CaseRepository(session).get_by_code("CASE-1")
    assert case.patient_id == view.patient_id
    assert case.current_step == "PATIENT_LINKED"


async def test_relink_keeps_omitted_optionals(session, alice_id, make_case):
    await make_case(alice_id, "CASE-1")
    service = PatientService(session)

    first = await service.link_patient(
        patient_payload("CASE-1", invite_email="a@b.com", allergies_medical_history="peanuts"), alice_id
    )
    second = await service.link_patient(patient_payload("CASE-1", location="Cambridge"), alice_id)

    assert second.patient_id == first.patient_id
    assert second.invite_email == "a@b.com"
    assert second.allergies_medical_history == "peanuts"
    assert second.location == "Cambridge"
    assert await _patient_count(session, alice_id) == 1


async def test_same_identity_reused_across_cases(session, alice_id, make_case):
    await make_case(alice_id, "CASE-1")
    await make_case(alice_id, "CASE-2")
    service = PatientService(session)

    p1 = await service.link_patient(patient_payload("CASE-1"), alice_id)
    p2 = await service.link_patient(patient_payload("CASE-2"), alice_id)

    assert p1.patient_id == p2.patient_id
    assert await _patient_count(session, alice_id) == 1


async def test_different_identity_creates_new_patient(session, alice_id, make_case):
    await make_case(alice_id, "CASE-1")
    await make_case(alice_id, "CASE-2")
    service = PatientService(session)

    p1 = await service.link_patient(patient_payload("CASE-1"), alice_id)
    p2 = await service.link_patient(patient_payload("CASE-2", date_of_birth=date(2015, 1, 1)), alice_id)

    assert p1.patient_id != p2.patient_id


async def test_identity_match_is_scoped_to_owner(session, alice_id, bob_id, make_case):
    await make_case(alice_id, "CASE-A")
    await make_case(bob_id, "CASE-B")
    service = PatientService(session)

    pa = await service.link_patient(patient_payload("CASE-A"), alice_id)
    pb = await service.link_patient(patient_payload("CASE-B"), bob_id)

    assert pa.patient_id != pb.patient_id


async def test_foreign_case_is_rejected(session, alice_id, bob_id, make_case):
    await make_case(alice_id, "CASE-1")

    with pytest.raises(Unauthorized):
        await PatientService(session).link_patient(patient_payload("CASE-1"), bob_id)
    assert await _patient_count(session, bob_id) == 0


async def test_linked_patient_of_another_user_is_rejected(session, alice_id, bob_id, make_case):
    await make_case(alice_id, "CASE-1")
    bob_patient = await PatientRepository(session).create(
        user_id=bob_id, first_name="Other", last_name="Kid", date_of_birth=date(2010, 2, 2),
        location="Denver", postal_code="80202",
    )
    case = await CaseRepository(session).get_by_code("CASE-1")
    case.patient_id = bob_patient.id
    await session.commit()

    with pytest.raises(Unauthorized):
        await PatientService(session).link_patient(patient_payload("CASE-1"), alice_id)

    case = await CaseRepository(session).get_by_code("CASE-1")
    assert case.current_step == "CREATED"
