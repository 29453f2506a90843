from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import transaction
from episure.core.errors import ConsistencyError
from episure.modules.cases.ownership import OwnershipGuard
from episure.modules.cases.workflow import CaseStep, MEDICATION_STEPS, advance, ensure_step
from episure.modules.medications.repository import MedicationRepository
from episure.modules.medications.schemas import MedicationUpsert, MedicationOut

class MedicationService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = MedicationRepository(session)
        self.guard = OwnershipGuard(session)

    async def upsert(self, payload: MedicationUpsert, user_id: int) -> MedicationOut:
        async with transaction(self.session):
            await self.guard.require_user(user_id)
            case = await self.guard.owned_case(payload.case_id, user_id)
            ensure_step(case, MEDICATION_STEPS, "record medication")

            existing = await self.repo.get_by_case_and_spray(case.id, payload.spray_number)
            if existing:
                # repository skips None, so lot numbers and dosage fall back to the stored values
                medication = await self.repo.update(
                    existing.id,
                    status=existing.status or "pending",
                    expiration_date_spray_1=payload.expiration_date_spray_1,
                    lot_number_spray_1=payload.lot_number_spray_1,
                    expiration_date_spray_2=payload.expiration_date_spray_2,
                    lot_number_spray_2=payload.lot_number_spray_2,
                    dosage_details=payload.dosage_details,
                )
                if not medication:
                    raise ConsistencyError("Failed to update medication")
            else:
                medication = await self.repo.create(
                    case_id=case.id,
                    spray_number=payload.spray_number,
                    status="pending",
                    expiration_date_spray_1=payload.expiration_date_spray_1,
                    lot_number_spray_1=payload.lot_number_spray_1 or None,
                    expiration_date_spray_2=payload.expiration_date_spray_2,
                    lot_number_spray_2=payload.lot_number_spray_2 or None,
                    dosage_details=payload.dosage_details or None,
                )

            step = await advance(self.session, case, CaseStep.MEDICAL_LINKED)
            return MedicationOut.model_validate(medication).model_copy(update={"workflow_state": step.value})
