import logging
from sqlalchemy.ext.asyncio import AsyncSession
from episure.core.db import transaction
from episure.core.errors import Conflict, NotFound, Unauthorized
from episure.modules.users.repository import UserRepository
from episure.modules.users.schemas import UserCreate, ProfileOut
from episure.modules.users.models import User
from episure.modules.invitations.repository import InvitedUserRepository

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = UserRepository(session)
        self.invites = InvitedUserRepository(session)

    async def create_user(self, payload: UserCreate) -> User:
        async with transaction(self.session):
            if await self.repo.get_by_email(payload.email):
                raise Conflict("User with this email already exists")
            if await self.repo.get_by_oid(payload.entra_oid):
                raise Conflict("User with this identity already exists")

            # external identity providers may send blank names
            first_name = (payload.first_name or "").strip() or "User"
            last_name = (payload.last_name or "").strip()
            user = await self.repo.create(
                entra_oid=payload.entra_oid,
                email=payload.email,
                first_name=first_name,
                last_name=last_name,
                phone_number=payload.phone_number,
                account_status=payload.account_status,
                first_login_completed=False,
            )
            resolved = await self.invites.attach_user(user.email.lower(), user.id)
            if resolved:
                logger.info("Resolved %d pending invitation(s) for user %s", resolved, user.id)
        return user

    async def get_by_oid(self, entra_oid: str) -> User:
        user = await self.repo.get_by_oid(entra_oid)
        if not user:
            raise NotFound("User")
        return user

    async def update_status(self, entra_oid: str, account_status: str) -> User:
        async with transaction(self.session):
            user = await self.get_by_oid(entra_oid)
            user.account_status = account_status
            await self.session.flush()
        return user

    async def mark_first_login_completed(self, entra_oid: str, acting_user_id: int) -> User:
        async with transaction(self.session):
            user = await self.get_by_oid(entra_oid)
            if user.id != acting_user_id:
                raise Unauthorized("Cannot update another user's first login status")
            user.first_login_completed = True
            await self.session.flush()
        return user

    async def get_profile(self, user_id: int) -> ProfileOut:
        user = await self.repo.get(user_id)
        if not user:
            raise Unauthorized("Unauthorized: user not found")
        return ProfileOut(userId=user.id, firstName=user.first_name, lastName=user.last_name, email=user.email)
