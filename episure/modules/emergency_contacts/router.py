from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import get_session
from episure.core.responses import ApiResponse, ok
from episure.core.security import get_principal, Principal
from episure.modules.audit.service import AuditService
from episure.modules.emergency_contacts.schemas import (
    EmergencyContactsRequest, EmergencyContactsResult, EmergencyContactOut,
)
from episure.modules.emergency_contacts.service import EmergencyContactService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> EmergencyContactService:
    return EmergencyContactService(session)

@router.post("/add-emergency-contacts", status_code=201, response_model=ApiResponse[EmergencyContactsResult])
async def add_emergency_contacts(
    payload: EmergencyContactsRequest,
    request: Request,
    case_id: str = Query(..., min_length=1),
    principal: Principal = Depends(get_principal),
    service: EmergencyContactService = Depends(svc),
):
    result = await service.upsert_contacts(case_id, payload, principal.user_id)
    await AuditService(service.session).log(
        principal.user_id, "UPDATE", "EMERGENCY_CONTACTS", case_id,
        details={"saved": len(result.saved)}, request=request,
    )
    return ok(result, result.message)

@router.get("/emergency-contacts", response_model=ApiResponse[list[EmergencyContactOut]])
async def list_emergency_contacts(
    case_id: str = Query(..., min_length=1),
    principal: Principal = Depends(get_principal),
    service: EmergencyContactService = Depends(svc),
):
    contacts = await service.list_contacts(case_id, principal.user_id)
    return ok(contacts, "Emergency contacts retrieved")
