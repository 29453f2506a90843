from datetime import date, datetime, timezone
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from episure.modules.patients.models import Patient

class PatientRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> Patient:
        obj = Patient(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, patient_id: int) -> Patient | None:
        q = select(Patient).where(
            Patient.id == patient_id,
            Patient.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def find_by_identity(self, user_id: int, first_name: str, last_name: str, date_of_birth: date) -> Patient | None:
        q = select(Patient).where(
            Patient.user_id == user_id,
            Patient.first_name == first_name,
            Patient.last_name == last_name,
            Patient.date_of_birth == date_of_birth,
            Patient.deleted_at.is_(None),
        ).order_by(Patient.id.asc())
        res = await self.session.execute(q)
        return res.scalars().first()

    async def list_for_user(self, user_id: int) -> Sequence[Patient]:
        q = select(Patient).where(
            Patient.user_id == user_id,
            Patient.deleted_at.is_(None),
        ).order_by(Patient.id.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, patient_id: int, **data) -> Patient | None:
        obj = await self.get(patient_id)
        if not obj:
            return None
        for k, v in data.items():
            if v is not None:
                setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def soft_delete(self, patient_id: int) -> bool:
        obj = await self.get(patient_id)
        if not obj:
            return False
        obj.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
        return True
