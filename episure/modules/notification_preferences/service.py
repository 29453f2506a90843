import logging
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import transaction
from episure.core.errors import ConsistencyError, InvalidState
from episure.modules.cases.models import Case
from episure.modules.cases.ownership import OwnershipGuard
from episure.modules.cases.workflow import CaseStep, NOTIFICATION_STEPS, advance, ensure_step
from episure.modules.notification_preferences.models import NOTIFICATION_TYPES, NotificationPreference
from episure.modules.notification_preferences.repository import NotificationPreferenceRepository
from episure.modules.notification_preferences.schemas import (
    NotificationPreferencesRequest, NotificationPreferencesResult,
)

logger = logging.getLogger(__name__)

class NotificationPreferenceService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = NotificationPreferenceRepository(session)
        self.guard = OwnershipGuard(session)

    async def configure(self, payload: NotificationPreferencesRequest, user_id: int) -> NotificationPreferencesResult:
        """Write one row per notification type for every case in the request.

        All cases are committed together or not at all. A case only moves to
        NOTIFICATIONS_CONFIGURED once every case in the batch holds the full
        set of types.
        """
        async with transaction(self.session):
            await self.guard.require_user(user_id)
            created = updated = 0
            cases: dict[int, Case] = {}
            written: dict[int, int] = {}

            for pref in payload.notification_preferences:
                case = await self.guard.owned_case(pref.case_id, user_id)
                ensure_step(case, NOTIFICATION_STEPS, "configure notifications", missing_as=CaseStep.CREATED)
                cases[case.id] = case
                written[case.id] = 0
                delivery_method = ",".join(pref.channels) if pref.enabled else None

                for notification_type in NOTIFICATION_TYPES:
                    existing = await self.repo.get_by_user_case_type(user_id, case.id, notification_type)
                    if existing:
                        saved = await self.repo.update(existing.id, delivery_method=delivery_method, enabled=pref.enabled)
                        if not saved:
                            raise ConsistencyError(f"Failed to update {notification_type} preference")
                        updated += 1
                    else:
                        await self.repo.create(
                            user_id=user_id,
                            case_id=case.id,
                            type=notification_type,
                            delivery_method=delivery_method,
                            enabled=pref.enabled,
                        )
                        created += 1
                    written[case.id] += 1

            for case_pk, count in written.items():
                if count != len(NOTIFICATION_TYPES):
                    raise InvalidState(
                        f"Failed to set up all notification preferences for case {cases[case_pk].case_id}. "
                        f"Expected {len(NOTIFICATION_TYPES)}, got {count}"
                    )

            for case in cases.values():
                await advance(self.session, case, CaseStep.NOTIFICATIONS_CONFIGURED)

        total = created + updated
        logger.info("Notification preferences: %s created, %s updated across %s case(s)", created, updated, len(cases))
        return NotificationPreferencesResult(
            message=(
                f"Successfully processed {total} notification preferences ({created} created, {updated} updated) "
                f"for {len(cases)} case(s). All cases updated to {CaseStep.NOTIFICATIONS_CONFIGURED.value}."
            ),
            workflow_state=CaseStep.NOTIFICATIONS_CONFIGURED.value,
            created=created,
            updated=updated,
            case_ids=[c.case_id for c in cases.values()],
        )

    async def list_for_case(self, case_code: str, user_id: int) -> Sequence[NotificationPreference]:
        case = await self.guard.owned_case(case_code, user_id)
        return await self.repo.list_for_user_and_case(user_id, case.id)
