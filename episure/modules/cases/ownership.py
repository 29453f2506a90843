from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.errors import NotFound, Unauthorized
from episure.modules.cases.models import Case
from episure.modules.cases.repository import CaseRepository
from episure.modules.users.models import User
from episure.modules.users.repository import UserRepository

class OwnershipGuard:
    """Resolves the acting user and the case they are working on."""

    def __init__(self, session: AsyncSession):
        self.cases = CaseRepository(session)
        self.users = UserRepository(session)

    async def require_user(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if not user:
            raise NotFound("User")
        return user

    async def owned_case(self, case_code: str, user_id: int) -> Case:
        case = await self.cases.get_by_code(case_code)
        if not case:
            raise NotFound("Case", f"Case with ID {case_code} not found")
        if case.user_id != user_id:
            raise Unauthorized(f"Unauthorized: You are not authorized to access case {case_code}")
        return case
