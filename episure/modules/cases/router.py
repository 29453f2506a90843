from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import get_session
from episure.core.responses import ApiResponse, ok
from episure.core.security import get_principal, Principal
from episure.modules.audit.service import AuditService
from episure.modules.cases.schemas import CaseCreate, CaseOut
from episure.modules.cases.service import CaseService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> CaseService:
    return CaseService(session)

@router.post("", status_code=201, response_model=ApiResponse[CaseOut])
async def create_case(
    payload: CaseCreate,
    request: Request,
    principal: Principal = Depends(get_principal),
    service: CaseService = Depends(svc),
):
    case = await service.create_case(payload, principal.user_id)
    await AuditService(service.session).log(principal.user_id, "CREATE", "CASE", case.case_id, request=request)
    return ok(case, "Case created successfully")

@router.get("/user", response_model=ApiResponse[list[CaseOut]])
async def list_user_cases(
    principal: Principal = Depends(get_principal),
    service: CaseService = Depends(svc),
):
    cases = await service.list_user_cases(principal.user_id)
    return ok(cases, "User cases retrieved successfully")

@router.get("/{case_id}", response_model=ApiResponse[CaseOut])
async def get_case(
    case_id: str,
    principal: Principal = Depends(get_principal),
    service: CaseService = Depends(svc),
):
    return ok(await service.get_case(case_id, principal.user_id))
