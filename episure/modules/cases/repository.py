from datetime import datetime, timezone
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from episure.modules.cases.models import Case

class CaseRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> Case:
        obj = Case(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, case_pk: int) -> Case | None:
        q = select(Case).where(Case.id == case_pk, Case.deleted_at.is_(None))
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def get_by_code(self, case_code: str) -> Case | None:
        q = select(Case).where(Case.case_id == case_code, Case.deleted_at.is_(None))
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def code_taken(self, case_code: str) -> bool:
        # soft-deleted rows still hold their code under the unique constraint
        q = select(Case.id).where(Case.case_id == case_code)
        res = await self.session.execute(q)
        return res.first() is not None

    async def list_for_user(self, user_id: int) -> Sequence[Case]:
        q = select(Case).where(
            Case.user_id == user_id,
            Case.deleted_at.is_(None),
        ).order_by(Case.created_at.desc(), Case.id.desc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, case_code: str, **data) -> Case | None:
        obj = await self.get_by_code(case_code)
        if not obj:
            return None
        for k, v in data.items():
            if v is not None:
                setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def set_patient(self, case: Case, patient_id: int) -> Case:
        case.patient_id = patient_id
        await self.session.flush()
        return case

    async def soft_delete(self, case_code: str) -> bool:
        obj = await self.get_by_code(case_code)
        if not obj:
            return False
        obj.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
        return True
