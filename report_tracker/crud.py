# crud.py
import uuid
from datetime import datetime
from typing import List, Optional, Union

from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from .credentials import get_password_hash, verify_password
from .exceptions import ConflictError
from .models import Admin, Employee
from .schemas import EmployeeCreate, EmployeeUpdate


def _as_uuid(value: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


# --- Employee CRUD ---

async def get_employee(db: AsyncSession, pk: Union[str, uuid.UUID]) -> Optional[Employee]:
    key = _as_uuid(pk)
    if key is None:
        return None
    return await db.get(Employee, key)


async def get_employee_by_employee_id(db: AsyncSession, employee_id: str) -> Optional[Employee]:
    statement = select(Employee).where(Employee.employee_id == employee_id)
    result = await db.execute(statement)
    return result.scalars().first()


async def list_employees(db: AsyncSession) -> List[Employee]:
    statement = select(Employee).order_by(Employee.employee_name.asc())
    result = await db.execute(statement)
    return list(result.scalars().all())


async def create_employee(db: AsyncSession, employee: EmployeeCreate, now: datetime) -> Employee:
    existing = await get_employee_by_employee_id(db, employee.employee_id)
    if existing:
        raise ConflictError(f"Employee ID '{employee.employee_id}' already exists")

    db_employee = Employee(
        employee_id=employee.employee_id,
        employee_name=employee.employee_name,
        password_hash=get_password_hash(employee.password),
        created_at=now,
        updated_at=now
    )

    try:
        db.add(db_employee)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Employee ID '{employee.employee_id}' already exists")

    await db.refresh(db_employee)
    return db_employee


async def update_employee(
        db: AsyncSession,
        pk: Union[str, uuid.UUID],
        employee_update: EmployeeUpdate,
        now: datetime
) -> Optional[Employee]:
    db_employee = await get_employee(db, pk)
    if not db_employee:
        return None

    update_data = employee_update.model_dump(exclude_unset=True, exclude_none=True)

    new_employee_id = update_data.get("employee_id")
    if new_employee_id and new_employee_id != db_employee.employee_id:
        if await get_employee_by_employee_id(db, new_employee_id):
            raise ConflictError(f"Employee ID '{new_employee_id}' already exists")

    # Without a new password the stored hash stays as it is.
    password = update_data.pop("password", None)
    if password:
        db_employee.password_hash = get_password_hash(password)

    for key, value in update_data.items():
        setattr(db_employee, key, value)
    db_employee.updated_at = now

    try:
        db.add(db_employee)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Employee ID '{new_employee_id}' already exists")

    await db.refresh(db_employee)
    return db_employee


async def delete_employee(db: AsyncSession, pk: Union[str, uuid.UUID]) -> bool:
    db_employee = await get_employee(db, pk)
    if not db_employee:
        return False

    await db.delete(db_employee)
    await db.commit()
    return True


async def authenticate_employee(db: AsyncSession, employee_id: str, password: str) -> Optional[Employee]:
    employee = await get_employee_by_employee_id(db, employee_id)
    if not employee or not verify_password(password, employee.password_hash):
        return None
    return employee


# --- Admin CRUD ---

async def get_admin(db: AsyncSession, pk: Union[str, uuid.UUID]) -> Optional[Admin]:
    key = _as_uuid(pk)
    if key is None:
        return None
    return await db.get(Admin, key)


async def get_admin_by_username(db: AsyncSession, username: str) -> Optional[Admin]:
    statement = select(Admin).where(Admin.username == username)
    result = await db.execute(statement)
    return result.scalars().first()


async def create_admin(db: AsyncSession, username: str, password: str, now: datetime) -> Admin:
    if await get_admin_by_username(db, username):
        raise ConflictError("Username already exists")

    db_admin = Admin(
        username=username,
        password_hash=get_password_hash(password),
        created_at=now
    )

    try:
        db.add(db_admin)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Username already exists")

    await db.refresh(db_admin)
    return db_admin


async def authenticate_admin(db: AsyncSession, username: str, password: str) -> Optional[Admin]:
    admin = await get_admin_by_username(db, username)
    if not admin or not verify_password(password, admin.password_hash):
        return None
    return admin
