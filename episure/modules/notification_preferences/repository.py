from datetime import datetime, timezone
from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from episure.modules.notification_preferences.models import NotificationPreference

class NotificationPreferenceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> NotificationPreference:
        obj = NotificationPreference(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, pref_id: int) -> NotificationPreference | None:
        q = select(NotificationPreference).where(
            NotificationPreference.id == pref_id,
            NotificationPreference.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def get_by_user_case_type(self, user_id: int, case_pk: int, type_: str) -> NotificationPreference | None:
        q = select(NotificationPreference).where(
            NotificationPreference.user_id == user_id,
            NotificationPreference.case_id == case_pk,
            NotificationPreference.type == type_,
            NotificationPreference.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_for_user_and_case(self, user_id: int, case_pk: int) -> Sequence[NotificationPreference]:
        q = select(NotificationPreference).where(
            NotificationPreference.user_id == user_id,
            NotificationPreference.case_id == case_pk,
            NotificationPreference.deleted_at.is_(None),
        ).order_by(NotificationPreference.id.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, pref_id: int, **data) -> NotificationPreference | None:
        # unlike the other repositories, None is written through: disabling clears delivery_method
        obj = await self.get(pref_id)
        if not obj:
            return None
        for k, v in data.items():
            setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def soft_delete(self, pref_id: int) -> bool:
        obj = await self.get(pref_id)
        if not obj:
            return False
        obj.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
        return True
