from datetime import datetime, timezone
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from episure.modules.emergency_contacts.models import EmergencyContact

class EmergencyContactRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> EmergencyContact:
        obj = EmergencyContact(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, contact_id: int) -> EmergencyContact | None:
        q = select(EmergencyContact).where(EmergencyContact.id == contact_id, EmergencyContact.deleted_at.is_(None))
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def get_by_case_and_email(self, case_pk: int, email: str) -> EmergencyContact | None:
        q = select(EmergencyContact).where(
            EmergencyContact.case_id == case_pk,
            EmergencyContact.email == email,
            EmergencyContact.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalars().first()

    async def list_for_case(self, case_pk: int) -> Sequence[EmergencyContact]:
        q = select(EmergencyContact).where(
            EmergencyContact.case_id == case_pk,
            EmergencyContact.deleted_at.is_(None),
        ).order_by(EmergencyContact.id.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, contact_id: int, **data) -> EmergencyContact | None:
        obj = await self.get(contact_id)
        if not obj:
            return None
        for k, v in data.items():
            if v is not None:
                setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def soft_delete(self, contact_id: int) -> bool:
        obj = await self.get(contact_id)
        if not obj:
            return False
        obj.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
        return True
