import logging
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import transaction
from episure.core.errors import ConsistencyError
from episure.modules.cases.ownership import OwnershipGuard
from episure.modules.cases.workflow import CaseStep, advance
from episure.modules.emergency_contacts.repository import EmergencyContactRepository
from episure.modules.emergency_contacts.schemas import (
    EmergencyContactsRequest, EmergencyContactsResult, EmergencyContactOut,
)
from episure.modules.invitations.repository import InvitedUserRepository

logger = logging.getLogger(__name__)

class EmergencyContactService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = EmergencyContactRepository(session)
        self.invites = InvitedUserRepository(session)
        self.guard = OwnershipGuard(session)

    async def upsert_contacts(self, case_code: str, payload: EmergencyContactsRequest, user_id: int) -> EmergencyContactsResult:
        async with transaction(self.session):
            await self.guard.require_user(user_id)
            case = await self.guard.owned_case(case_code, user_id)

            saved = []
            invited = 0
            for item in payload.contacts:
                existing = await self.repo.get_by_case_and_email(case.id, item.email)
                if existing:
                    contact = await self.repo.update(
                        existing.id,
                        first_name=item.first_name,
                        last_name=item.last_name,
                        phone_number=item.phone_number,
                        invite_sent=item.send_invite,
                    )
                    if not contact:
                        raise ConsistencyError("Failed to update emergency contact")
                else:
                    contact = await self.repo.create(
                        case_id=case.id,
                        first_name=item.first_name,
                        last_name=item.last_name,
                        email=item.email,
                        phone_number=item.phone_number,
                        invite_sent=item.send_invite,
                    )

                if item.send_invite and not await self.invites.exists_for_case(case.id, item.email):
                    await self.invites.create(case_id=case.id, email=item.email, user_id=None)
                    invited += 1
                saved.append(EmergencyContactOut.model_validate(contact))

            # no step precondition: contacts can be added at any point of the wizard
            step = await advance(self.session, case, CaseStep.EMERGENCY_CONTACTS_ADDED)

        if invited:
            logger.info("Case %s: %d invitation(s) created from emergency contacts", case_code, invited)
        return EmergencyContactsResult(
            case_id=case_code,
            saved=saved,
            skipped=[],
            workflow_state=step.value,
            message=(
                f"Successfully processed {len(saved)} emergency contacts for case {case_code}. "
                f"Case updated to {step.value}."
            ),
        )

    async def list_contacts(self, case_code: str, user_id: int) -> list[EmergencyContactOut]:
        case = await self.guard.owned_case(case_code, user_id)
        rows = await self.repo.list_for_case(case.id)
        return [EmergencyContactOut.model_validate(r) for r in rows]
