from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import get_session
from episure.core.responses import ApiResponse, ok
from episure.core.security import get_principal, Principal
from episure.modules.audit.service import AuditService
from episure.modules.medications.schemas import MedicationUpsert, MedicationOut
from episure.modules.medications.service import MedicationService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> MedicationService:
    return MedicationService(session)

@router.post("", status_code=201, response_model=ApiResponse[MedicationOut])
async def upsert_medication(
    payload: MedicationUpsert,
    request: Request,
    principal: Principal = Depends(get_principal),
    service: MedicationService = Depends(svc),
):
    medication = await service.upsert(payload, principal.user_id)
    await AuditService(service.session).log(
        principal.user_id, "UPDATE", "MEDICATION", medication.spray_id,
        details={"case_id": payload.case_id, "spray_number": payload.spray_number}, request=request,
    )
    return ok(medication, f"Medication saved successfully. Case step updated to: {medication.workflow_state}")
