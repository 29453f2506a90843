from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import get_session
from episure.core.responses import ok
from episure.core.security import get_principal, Principal
from episure.modules.audit.service import AuditService

router = APIRouter()

@router.get("/audit")
async def list_audit(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
    limit: int = Query(50, ge=1, le=200),
):
    rows = await AuditService(session).list_for_actor(principal.user_id, limit)
    return ok([
        {
            "id": row.id,
            "actor_user_id": row.actor_user_id,
            "action": row.action,
            "resource_type": row.resource_type,
            "resource_id": row.resource_id,
            "details": row.details,
            "success": row.success,
            "occurred_at": row.occurred_at,
        }
        for row in rows
    ], "Audit events retrieved")
