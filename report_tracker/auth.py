# auth.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud, schemas
from .database import get_async_session
from .exceptions import AuthenticationError
from .models import Admin, AuthSession, Employee, PrincipalKind
from .security import (
    get_admin_session,
    get_current_admin,
    get_current_employee,
    get_employee_session,
    get_session_service,
)
from .sessions import SessionService

logger = logging.getLogger(__name__)

employee_router = APIRouter(
    prefix="/api/employee",
    tags=["Employee Authentication"]
)

admin_router = APIRouter(
    prefix="/api/admin",
    tags=["Admin Authentication"]
)


# --- Employee ---

@employee_router.post("/login", response_model=schemas.EmployeeLoginResponse)
async def employee_login(
        credentials: schemas.EmployeeLogin,
        db: AsyncSession = Depends(get_async_session),
        sessions: SessionService = Depends(get_session_service)
):
    employee = await crud.authenticate_employee(db, credentials.employee_id, credentials.password)
    if not employee:
        raise AuthenticationError("Invalid employee ID or password")

    auth_session = await sessions.create(employee.id, PrincipalKind.employee)
    logger.info("Employee %s logged in", employee.employee_id)
    return schemas.EmployeeLoginResponse(
        session_token=auth_session.id,
        employee=schemas.EmployeeRead.model_validate(employee)
    )


@employee_router.post("/logout", response_model=schemas.MessageResponse)
async def employee_logout(
        auth_session: AuthSession = Depends(get_employee_session),
        sessions: SessionService = Depends(get_session_service)
):
    await sessions.delete(auth_session.id)
    return {"message": "Logout successful"}


@employee_router.get("/me", response_model=schemas.EmployeeRead)
async def read_employee_me(current_employee: Employee = Depends(get_current_employee)):
    """Details of the employee who owns the presented token."""
    return schemas.EmployeeRead.model_validate(current_employee)


# --- Admin ---

@admin_router.post("/login", response_model=schemas.AdminLoginResponse)
async def admin_login(
        credentials: schemas.AdminLogin,
        db: AsyncSession = Depends(get_async_session),
        sessions: SessionService = Depends(get_session_service)
):
    admin = await crud.authenticate_admin(db, credentials.username, credentials.password)
    if not admin:
        raise AuthenticationError("Invalid username or password")

    auth_session = await sessions.create(admin.id, PrincipalKind.admin)
    logger.info("Admin %s logged in", admin.username)
    return schemas.AdminLoginResponse(
        session_token=auth_session.id,
        admin=schemas.AdminRead.model_validate(admin)
    )


@admin_router.post("/logout", response_model=schemas.MessageResponse)
async def admin_logout(
        auth_session: AuthSession = Depends(get_admin_session),
        sessions: SessionService = Depends(get_session_service)
):
    await sessions.delete(auth_session.id)
    return {"message": "Logout successful"}


@admin_router.get("/me", response_model=schemas.AdminRead)
async def read_admin_me(current_admin: Admin = Depends(get_current_admin)):
    return schemas.AdminRead.model_validate(current_admin)
