from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings
from .db import get_session

http_bearer = HTTPBearer(auto_error=False)

class Principal(BaseModel):
    user_id: int
    entra_oid: str | None = None
    email: str | None = None

def app_settings(request: Request) -> Settings:
    return request.app.state.settings

def _decode_token(token: str, settings: Settings) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG], audience=settings.REQUIRED_AUDIENCE)
        return payload
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}")

async def _principal_from_claims(data: dict, session: AsyncSession) -> Principal:
    if data.get("user_id") is not None:
        return Principal(user_id=int(data["user_id"]), entra_oid=data.get("oid"), email=data.get("email"))
    oid = data.get("oid") or data.get("sub")
    if not oid:
        raise HTTPException(status_code=401, detail="Token carries no subject")
    from episure.modules.users.repository import UserRepository
    user = await UserRepository(session).get_by_oid(str(oid))
    if not user:
        raise HTTPException(status_code=401, detail="Unknown subject")
    return Principal(user_id=user.id, entra_oid=user.entra_oid, email=user.email)

async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    x_user_id: str | None = Header(default=None),
    settings: Settings = Depends(app_settings),
    session: AsyncSession = Depends(get_session),
) -> Principal:
    if creds is not None:
        data = _decode_token(creds.credentials, settings)
        return await _principal_from_claims(data, session)

    # Legacy clients identify themselves with x-user-id
    if x_user_id and settings.legacy_user_header_enabled:
        try:
            return Principal(user_id=int(x_user_id))
        except ValueError:
            raise HTTPException(status_code=401, detail="Invalid x-user-id header")
    raise HTTPException(status_code=401, detail="Missing token")
