# security.py
# Bearer-token dependencies for both principal kinds.
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud
from .clock import Clock
from .database import get_async_session
from .exceptions import AuthenticationError, NotFoundError
from .models import Admin, AuthSession, Employee, PrincipalKind
from .sessions import SessionService


# --- Request-scoped services ---

def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_session_service(
        request: Request,
        db: AsyncSession = Depends(get_async_session),
        clock: Clock = Depends(get_clock)
) -> SessionService:
    return SessionService(db, clock, ttl_days=request.app.state.settings.SESSION_TTL_DAYS)


# --- Bearer-token dependencies ---

# auto_error=False so a missing header gets the same 401 as a bad token.
bearer_scheme = HTTPBearer(auto_error=False)

UNAUTHENTICATED_MESSAGE = "Invalid or expired session"


def _require_session(kind: PrincipalKind):
    async def dependency(
            credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
            sessions: SessionService = Depends(get_session_service)
    ) -> AuthSession:
        if credentials is None or not credentials.credentials:
            raise AuthenticationError(UNAUTHENTICATED_MESSAGE)

        auth_session = await sessions.resolve(credentials.credentials)
        # A token for the other principal kind is treated as no token at all.
        if auth_session is None or auth_session.user_type != kind:
            raise AuthenticationError(UNAUTHENTICATED_MESSAGE)
        return auth_session

    return dependency


get_employee_session = _require_session(PrincipalKind.employee)
get_admin_session = _require_session(PrincipalKind.admin)


async def get_current_employee(
        auth_session: AuthSession = Depends(get_employee_session),
        db: AsyncSession = Depends(get_async_session)
) -> Employee:
    employee = await crud.get_employee(db, auth_session.user_id)
    if not employee:
        raise NotFoundError("Employee not found")
    return employee


async def get_current_admin(
        auth_session: AuthSession = Depends(get_admin_session),
        db: AsyncSession = Depends(get_async_session)
) -> Admin:
    admin = await crud.get_admin(db, auth_session.user_id)
    if not admin:
        raise NotFoundError("Admin not found")
    return admin
