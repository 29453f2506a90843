from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import get_session
from episure.core.responses import ApiResponse, ok
from episure.core.security import get_principal, Principal
from episure.modules.audit.service import AuditService
from episure.modules.patients.schemas import PatientCreate, PatientOut
from episure.modules.patients.service import PatientService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> PatientService:
    return PatientService(session)

@router.post("", status_code=201, response_model=ApiResponse[PatientOut])
async def link_patient(
    payload: PatientCreate,
    request: Request,
    principal: Principal = Depends(get_principal),
    service: PatientService = Depends(svc),
):
    patient = await service.link_patient(payload, principal.user_id)
    await AuditService(service.session).log(
        principal.user_id, "CREATE", "PATIENT", patient.patient_id,
        details={"case_id": payload.case_id}, request=request,
    )
    return ok(patient, f"Patient linked successfully. Case step updated to: {patient.workflow_state}")
