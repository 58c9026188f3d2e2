# sessions.py
import logging
import secrets
from datetime import timedelta
from typing import Optional

from sqlmodel import select
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from .clock import Clock
from .models import AuthSession, PrincipalKind

logger = logging.getLogger(__name__)

DEFAULT_SESSION_DAYS = 7


class SessionService:
    """Issues, resolves and expires bearer-token sessions.

    A session is active while ``now < expires_at``. Expired rows may linger
    until :meth:`sweep` runs, but :meth:`resolve` never returns them.
    """

    def __init__(self, db: AsyncSession, clock: Clock, ttl_days: int = DEFAULT_SESSION_DAYS):
        self._db = db
        self._clock = clock
        self._ttl = timedelta(days=ttl_days)

    async def create(self, principal_id, kind: PrincipalKind) -> AuthSession:
        now = self._clock.now()
        auth_session = AuthSession(
            id=secrets.token_urlsafe(32),
            user_id=str(principal_id),
            user_type=kind,
            expires_at=now + self._ttl,
            created_at=now,
        )
        self._db.add(auth_session)
        await self._db.commit()
        await self._db.refresh(auth_session)
        return auth_session

    async def resolve(self, token: str) -> Optional[AuthSession]:
        statement = select(AuthSession).where(
            AuthSession.id == token,
            AuthSession.expires_at > self._clock.now()
        )
        result = await self._db.execute(statement)
        return result.scalars().first()

    async def delete(self, token: str) -> None:
        await self._db.execute(delete(AuthSession).where(AuthSession.id == token))
        await self._db.commit()

    async def sweep(self) -> int:
        """Delete every session whose expiry has passed. Returns the count."""
        result = await self._db.execute(
            delete(AuthSession).where(AuthSession.expires_at <= self._clock.now())
        )
        await self._db.commit()
        if result.rowcount:
            logger.info("Removed %d expired sessions", result.rowcount)
        return result.rowcount or 0
