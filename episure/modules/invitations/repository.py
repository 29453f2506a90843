from datetime import datetime, timezone
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from episure.modules.invitations.models import InvitedUser

class InvitedUserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> InvitedUser:
        obj = InvitedUser(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get_by_case_and_email(self, case_pk: int, email: str) -> InvitedUser | None:
        q = select(InvitedUser).where(
            InvitedUser.case_id == case_pk,
            InvitedUser.email == email,
            InvitedUser.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalars().first()

    async def exists_for_case(self, case_pk: int, email: str) -> bool:
        return await self.get_by_case_and_email(case_pk, email) is not None

    async def list_for_case(self, case_pk: int) -> Sequence[InvitedUser]:
        q = select(InvitedUser).where(
            InvitedUser.case_id == case_pk,
            InvitedUser.deleted_at.is_(None),
        ).order_by(InvitedUser.id.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def attach_user(self, email: str, user_id: int) -> int:
        """Point every still-pending invite for ``email`` at the newly registered user."""
        q = select(InvitedUser).where(
            InvitedUser.email == email,
            InvitedUser.user_id.is_(None),
            InvitedUser.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        rows = res.scalars().all()
        for r in rows:
            r.user_id = user_id
        await self.session.flush()
        return len(rows)

    async def soft_delete(self, invite_id: int) -> bool:
        q = select(InvitedUser).where(InvitedUser.id == invite_id, InvitedUser.deleted_at.is_(None))
        obj = (await self.session.execute(q)).scalar_one_or_none()
        if not obj:
            return False
        obj.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
        return True
