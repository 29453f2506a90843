from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import get_session
from episure.core.responses import ApiResponse, ok
from episure.core.security import get_principal, Principal
from episure.modules.audit.service import AuditService
from episure.modules.invitations.schemas import InviteMemberRequest, InviteResult, InvitedUserOut
from episure.modules.invitations.service import InvitationService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> InvitationService:
    return InvitationService(session)

@router.post("/invite-member", status_code=201, response_model=ApiResponse[InviteResult])
async def invite_member(
    payload: InviteMemberRequest,
    request: Request,
    principal: Principal = Depends(get_principal),
    service: InvitationService = Depends(svc),
):
    result = await service.invite(payload, principal.user_id)
    await AuditService(service.session).log(
        principal.user_id, "CREATE", "INVITATION", payload.case_id,
        details={"created": [i.email for i in result.created], "skipped": len(result.skipped)}, request=request,
    )
    if payload.email is not None:
        return ok(result, "Invitation created successfully")
    return ok(result, f"{len(result.created)} invitation(s) created, {len(result.skipped)} skipped")

@router.get("/invitations", response_model=ApiResponse[list[InvitedUserOut]])
async def list_invitations(
    case_id: str = Query(..., min_length=1),
    principal: Principal = Depends(get_principal),
    service: InvitationService = Depends(svc),
):
    invites = await service.list_for_case(case_id, principal.user_id)
    return ok([InvitedUserOut.model_validate(i) for i in invites], "Invitations retrieved")
