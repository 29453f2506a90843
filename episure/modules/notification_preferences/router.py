from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import get_session
from episure.core.responses import ApiResponse, ok
from episure.core.security import get_principal, Principal
from episure.modules.audit.service import AuditService
from episure.modules.notification_preferences.schemas import (
    NotificationPreferencesRequest, NotificationPreferencesResult, NotificationPreferenceOut,
)
from episure.modules.notification_preferences.service import NotificationPreferenceService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> NotificationPreferenceService:
    return NotificationPreferenceService(session)

@router.post("", status_code=201, response_model=ApiResponse[NotificationPreferencesResult])
async def configure_notification_preferences(
    payload: NotificationPreferencesRequest,
    request: Request,
    principal: Principal = Depends(get_principal),
    service: NotificationPreferenceService = Depends(svc),
):
    result = await service.configure(payload, principal.user_id)
    await AuditService(service.session).log(
        principal.user_id, "UPDATE", "NOTIFICATION_PREFERENCES", ",".join(result.case_ids),
        details={"created": result.created, "updated": result.updated}, request=request,
    )
    return ok(result, result.message)

@router.get("/{case_id}", response_model=ApiResponse[list[NotificationPreferenceOut]])
async def list_notification_preferences(
    case_id: str,
    principal: Principal = Depends(get_principal),
    service: NotificationPreferenceService = Depends(svc),
):
    prefs = await service.list_for_case(case_id, principal.user_id)
    return ok([NotificationPreferenceOut.model_validate(p) for p in prefs], "Notification preferences retrieved")
