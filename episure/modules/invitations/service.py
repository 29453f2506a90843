import logging
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import transaction
from episure.core.errors import Conflict
from episure.modules.cases.ownership import OwnershipGuard
from episure.modules.invitations.models import InvitedUser
from episure.modules.invitations.repository import InvitedUserRepository
from episure.modules.invitations.schemas import InviteMemberRequest, InviteResult, InvitedUserOut, SkippedInvite

logger = logging.getLogger(__name__)

ALREADY_INVITED = "Invitation already exists for this case"

class InvitationService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = InvitedUserRepository(session)
        self.guard = OwnershipGuard(session)

    async def invite(self, payload: InviteMemberRequest, user_id: int) -> InviteResult:
        """Invite one or many emails to a case.

        Duplicates are skipped. A request that would create nothing fails with
        Conflict, so a repeated single-email invite surfaces as 409 while a
        batch with at least one new address succeeds and lists the rest as
        skipped. Invitations never move the case workflow.
        """
        async with transaction(self.session):
            await self.guard.require_user(user_id)
            case = await self.guard.owned_case(payload.case_id, user_id)

            created: list[InvitedUser] = []
            skipped: list[SkippedInvite] = []
            for email in payload.addresses:
                if await self.repo.exists_for_case(case.id, email):
                    skipped.append(SkippedInvite(email=email, reason=ALREADY_INVITED))
                    continue
                created.append(await self.repo.create(case_id=case.id, email=email, user_id=None))

            if not created:
                raise Conflict(f"Conflict: {ALREADY_INVITED}")

        logger.info("Case %s: %d invited, %d skipped", payload.case_id, len(created), len(skipped))
        return InviteResult(
            case_id=payload.case_id,
            created=[InvitedUserOut.model_validate(i) for i in created],
            skipped=skipped,
        )

    async def list_for_case(self, case_code: str, user_id: int) -> Sequence[InvitedUser]:
        case = await self.guard.owned_case(case_code, user_id)
        return await self.repo.list_for_case(case.id)
