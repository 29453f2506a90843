from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import get_session
from episure.core.responses import ApiResponse, ok
from episure.core.security import get_principal, Principal
from episure.modules.audit.service import AuditService
from episure.modules.users.schemas import UserCreate, UserStatusUpdate, UserOut, ProfileOut
from episure.modules.users.service import UserService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> UserService:
    return UserService(session)

# Registration runs before the caller has a user row, so it carries no principal.
@router.post("/auth/users", status_code=201, response_model=ApiResponse[UserOut])
async def register_user(payload: UserCreate, request: Request, service: UserService = Depends(svc)):
    user = await service.create_user(payload)
    await AuditService(service.session).log(user.id, "CREATE", "USER", user.id, request=request)
    return ok(UserOut.model_validate(user), "User created successfully")

@router.get("/auth/users/{oid}", response_model=ApiResponse[UserOut])
async def get_user(oid: str, principal: Principal = Depends(get_principal), service: UserService = Depends(svc)):
    return ok(UserOut.model_validate(await service.get_by_oid(oid)))

@router.patch("/auth/users/{oid}/status", response_model=ApiResponse[UserOut])
async def update_user_status(
    oid: str,
    payload: UserStatusUpdate,
    request: Request,
    principal: Principal = Depends(get_principal),
    service: UserService = Depends(svc),
):
    user = await service.update_status(oid, payload.account_status)
    await AuditService(service.session).log(
        principal.user_id, "UPDATE", "USER", user.id, details={"account_status": payload.account_status}, request=request,
    )
    return ok(UserOut.model_validate(user), "User status updated successfully")

@router.patch("/auth/users/{oid}/first-login-completed", response_model=ApiResponse[UserOut])
async def complete_first_login(
    oid: str,
    request: Request,
    principal: Principal = Depends(get_principal),
    service: UserService = Depends(svc),
):
    user = await service.mark_first_login_completed(oid, principal.user_id)
    await AuditService(service.session).log(principal.user_id, "UPDATE", "USER", user.id, request=request)
    return ok(UserOut.model_validate(user), "First login marked as completed")

@router.get("/me/profile", response_model=ApiResponse[ProfileOut])
async def my_profile(principal: Principal = Depends(get_principal), service: UserService = Depends(svc)):
    return ok(await service.get_profile(principal.user_id), "Profile retrieved successfully")
