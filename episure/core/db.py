import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from .config import Settings
from .base import Base

log = logging.getLogger(__name__)

def load_models() -> None:
    # every mapped class has to be imported before metadata.create_all
    from episure.modules.users import models as _users  # noqa: F401
    from episure.modules.cases import models as _cases  # noqa: F401
    from episure.modules.patients import models as _patients  # noqa: F401
    from episure.modules.medications import models as _medications  # noqa: F401
    from episure.modules.notification_preferences import models as _prefs  # noqa: F401
    from episure.modules.emergency_contacts import models as _contacts  # noqa: F401
    from episure.modules.invitations import models as _invitations  # noqa: F401
    from episure.modules.audit import models as _audit  # noqa: F401

class Database:
    """Owns the engine and the session factory for one process."""

    def __init__(self, url: str, *, echo: bool = False, pool_size: int | None = None):
        kwargs: dict = {"echo": echo}
        if url.startswith("sqlite"):
            # one shared connection, otherwise every session sees its own :memory: db
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        else:
            kwargs["pool_pre_ping"] = True
            if pool_size:
                kwargs["pool_size"] = pool_size
        self.engine = create_async_engine(url, **kwargs)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False, class_=AsyncSession)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.DATABASE_URL, echo=settings.DB_ECHO, pool_size=settings.DB_POOL_SIZE)

    async def create_all(self) -> None:
        load_models()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

async def init_models(db: Database, settings: Settings) -> None:
    ## In dev-only "create_all" mode, build tables directly; otherwise migrations own the schema.
    if settings.DB_MANAGE.lower() == "create_all":
        log.info("Creating tables (DB_MANAGE=create_all)")
        await db.create_all()
    else:
        load_models()

async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    async with request.app.state.db.sessionmaker() as session:
        yield session

@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Unit of work: commit when the block returns, roll back on any exception."""
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
