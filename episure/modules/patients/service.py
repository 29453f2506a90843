import logging
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import transaction
from episure.core.errors import ConsistencyError, NotFound, Unauthorized
from episure.modules.cases.ownership import OwnershipGuard
from episure.modules.cases.repository import CaseRepository
from episure.modules.cases.workflow import CaseStep, advance
from episure.modules.patients.models import Patient
from episure.modules.patients.repository import PatientRepository
from episure.modules.patients.schemas import PatientCreate, PatientOut

logger = logging.getLogger(__name__)

def _view(patient: Patient, step: CaseStep) -> PatientOut:
    return PatientOut.model_validate(patient).model_copy(update={"workflow_state": step.value})

class PatientService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = PatientRepository(session)
        self.cases = CaseRepository(session)
        self.guard = OwnershipGuard(session)

    async def link_patient(self, payload: PatientCreate, user_id: int) -> PatientOut:
        """Attach a patient to the case, reusing the user's patient with the same identity."""
        async with transaction(self.session):
            await self.guard.require_user(user_id)
            case = await self.guard.owned_case(payload.case_id, user_id)

            if case.patient_id:
                linked = await self.repo.get(case.patient_id)
                if not linked:
                    raise NotFound("Patient", "Linked patient not found")
                if linked.user_id != user_id:
                    raise Unauthorized("Unauthorized: You are not authorized to modify this patient.")
                # None values are skipped by the repository, so omitted optionals keep what is stored
                updated = await self.repo.update(
                    linked.id,
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                    date_of_birth=payload.date_of_birth,
                    allergies_medical_history=payload.allergies_medical_history,
                    is_self=payload.is_self,
                    invite_email=payload.invite_email,
                    location=payload.location,
                    postal_code=payload.postal_code,
                )
                if not updated:
                    raise ConsistencyError("Failed to update patient")
                step = await advance(self.session, case, CaseStep.PATIENT_LINKED)
                return _view(updated, step)

            patient = await self.repo.find_by_identity(
                user_id, payload.first_name, payload.last_name, payload.date_of_birth
            )
            if patient:
                logger.info("Reusing patient %s for case %s", patient.id, case.case_id)
            else:
                patient = await self.repo.create(
                    user_id=user_id,
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                    date_of_birth=payload.date_of_birth,
                    allergies_medical_history=payload.allergies_medical_history or None,
                    is_self=bool(payload.is_self),
                    invite_email=payload.invite_email or None,
                    location=payload.location,
                    postal_code=payload.postal_code,
                )

            await self.cases.set_patient(case, patient.id)
            step = await advance(self.session, case, CaseStep.PATIENT_LINKED)
            return _view(patient, step)
