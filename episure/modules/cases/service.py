import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import transaction
from episure.core.errors import Conflict, ConsistencyError
from episure.modules.cases.ownership import OwnershipGuard
from episure.modules.cases.repository import CaseRepository
from episure.modules.cases.schemas import CaseCreate, CaseOut
from episure.modules.cases.workflow import CaseStep

logger = logging.getLogger(__name__)

class CaseService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = CaseRepository(session)
        self.guard = OwnershipGuard(session)

    async def create_case(self, payload: CaseCreate, user_id: int) -> CaseOut:
        """Create the case, or update it in place when the same owner re-submits its code."""
        async with transaction(self.session):
            await self.guard.require_user(user_id)

            existing = await self.repo.get_by_code(payload.case_id)
            if existing:
                if existing.user_id != user_id:
                    raise Conflict("Conflict: case already exists")
                # re-submission never moves the workflow
                updated = await self.repo.update(
                    payload.case_id,
                    case_name=payload.case_name,
                    battery_level=payload.battery_level,
                    connection_status=payload.connection_status,
                )
                if not updated:
                    raise ConsistencyError("Internal error: failed to update case")
                return CaseOut.model_validate(updated)

            if await self.repo.code_taken(payload.case_id):
                raise Conflict("Conflict: case already exists")
            try:
                created = await self.repo.create(
                    case_id=payload.case_id,
                    patient_id=None,
                    user_id=user_id,
                    case_name=payload.case_name,
                    current_step=CaseStep.CREATED.value,
                    battery_level=payload.battery_level,
                    last_seen=None,
                    connection_status=payload.connection_status or "disconnected",
                )
            except IntegrityError:
                # a concurrent request created the same code first
                raise Conflict("Conflict: case already exists")
            logger.info("Case %s created for user %s", created.case_id, user_id)
            return CaseOut.model_validate(created)

    async def get_case(self, case_code: str, user_id: int) -> CaseOut:
        case = await self.guard.owned_case(case_code, user_id)
        return CaseOut.model_validate(case)

    async def list_user_cases(self, user_id: int) -> list[CaseOut]:
        return [CaseOut.model_validate(c) for c in await self.repo.list_for_user(user_id)]
