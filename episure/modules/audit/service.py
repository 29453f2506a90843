from typing import Sequence
from fastapi import Request
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
from episure.modules.audit.models import AuditEvent

class AuditService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def log(self,
                  actor_user_id: int | None,
                  action: str,
                  resource_type: str,
                  resource_id: str | int,
                  details: dict | None = None,
                  request: Request | None = None,
                  success: bool = True) -> None:
        ev = AuditEvent(
            actor_user_id=actor_user_id,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id),
            details=details,
            success=success,
            client_ip=(request.client.host if request and request.client else None),
            user_agent=(request.headers.get("user-agent") if request else None),
        )
        self.session.add(ev)
        await self.session.commit()

    async def list_for_actor(self, actor_user_id: int, limit: int = 50) -> Sequence[AuditEvent]:
        q = select(AuditEvent).where(
            AuditEvent.actor_user_id == actor_user_id,
            AuditEvent.deleted_at.is_(None),
        ).order_by(desc(AuditEvent.occurred_at), desc(AuditEvent.id)).limit(limit)
        res = await self.session.execute(q)
        return res.scalars().all()
