from datetime import datetime, timezone
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from episure.modules.medications.models import Medication

class MedicationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> Medication:
        obj = Medication(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, spray_id: int) -> Medication | None:
        q = select(Medication).where(Medication.id == spray_id, Medication.deleted_at.is_(None))
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def get_by_case_and_spray(self, case_pk: int, spray_number: int) -> Medication | None:
        q = select(Medication).where(
            Medication.case_id == case_pk,
            Medication.spray_number == spray_number,
            Medication.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_for_case(self, case_pk: int) -> Sequence[Medication]:
        q = select(Medication).where(
            Medication.case_id == case_pk,
            Medication.deleted_at.is_(None),
        ).order_by(Medication.spray_number.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, spray_id: int, **data) -> Medication | None:
        obj = await self.get(spray_id)
        if not obj:
            return None
        for k, v in data.items():
            if v is not None:
                setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def soft_delete(self, spray_id: int) -> bool:
        obj = await self.get(spray_id)
        if not obj:
            return False
        obj.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
        return True
