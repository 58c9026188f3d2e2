# models.py
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field


class UTCDateTime(TypeDecorator):
    """Aware UTC datetimes in and out, including on SQLite which stores them naive."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("Datetime values must have timezone information")
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class PrincipalKind(str, Enum):
    employee = "employee"
    admin = "admin"


class Employee(SQLModel, table=True):
    __tablename__ = "employees"

    id: Optional[uuid.UUID] = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True
    )
    employee_id: str = Field(unique=True, index=True)
    employee_name: str
    password_hash: str
    created_at: datetime = Field(sa_type=UTCDateTime)
    updated_at: datetime = Field(sa_type=UTCDateTime)


class Admin(SQLModel, table=True):
    __tablename__ = "admins"

    id: Optional[uuid.UUID] = Field(default_factory=uuid.uuid4, primary_key=True)
    username: str = Field(unique=True, index=True)
    password_hash: str
    created_at: datetime = Field(sa_type=UTCDateTime)


class DailyReport(SQLModel, table=True):
    __tablename__ = "daily_reports"
    __table_args__ = (
        UniqueConstraint("employee_id", "submission_date", name="uq_daily_reports_employee_date"),
    )

    id: Optional[uuid.UUID] = Field(default_factory=uuid.uuid4, primary_key=True)
    # Copied from the employee at submission time, not a foreign key.
    employee_id: str = Field(index=True)
    employee_name: str

    number_of_dials: int
    connected_calls: int
    positive_prospect: int
    dead_calls: int
    demos: int
    admission: int
    client_visit: int
    client_closing: int
    backdoor_calls: int
    posters_done: int = 0

    submission_date: date = Field(index=True)
    created_at: datetime = Field(sa_type=UTCDateTime)


class AuthSession(SQLModel, table=True):
    __tablename__ = "sessions"

    id: str = Field(primary_key=True)
    user_id: str = Field(index=True)
    user_type: PrincipalKind
    expires_at: datetime = Field(sa_type=UTCDateTime, index=True)
    created_at: datetime = Field(sa_type=UTCDateTime)
