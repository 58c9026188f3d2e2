# schemas.py
import uuid
from datetime import date, datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Counters must arrive as real JSON integers; "10" and 10.5 are rejected.
Counter = Annotated[int, Field(ge=0, strict=True)]

MIN_PASSWORD_LENGTH = 6


class CamelModel(BaseModel):
    """JSON uses camelCase keys, Python code uses snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


# --- Auth ---

class EmployeeLogin(CamelModel):
    employee_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={"example": {"employeeId": "EMP001", "password": "employee123"}}
    )


class AdminLogin(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class EmployeeRead(CamelModel):
    id: uuid.UUID
    employee_id: str
    employee_name: str


class AdminRead(CamelModel):
    id: uuid.UUID
    username: str


class EmployeeLoginResponse(CamelModel):
    message: str = "Login successful"
    session_token: str
    employee: EmployeeRead


class AdminLoginResponse(CamelModel):
    message: str = "Login successful"
    session_token: str
    admin: AdminRead


# --- Employee management ---

class EmployeeDetail(EmployeeRead):
    created_at: datetime
    updated_at: datetime


class EmployeeCreate(CamelModel):
    employee_id: str = Field(..., min_length=1)
    employee_name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "employeeId": "EMP002",
                "employeeName": "Jane Doe",
                "password": "secret123"
            }
        }
    )


class EmployeeUpdate(CamelModel):
    """Only the supplied fields change. An empty password keeps the old one."""

    employee_id: Optional[str] = Field(default=None, min_length=1)
    employee_name: Optional[str] = Field(default=None, min_length=1)
    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class EmployeeList(CamelModel):
    employees: List[EmployeeDetail]


class EmployeeResponse(CamelModel):
    message: str
    employee: EmployeeDetail


# --- Daily reports ---

class ReportCounters(CamelModel):
    number_of_dials: Counter
    connected_calls: Counter
    positive_prospect: Counter
    dead_calls: Counter
    demos: Counter
    admission: Counter
    client_visit: Counter
    client_closing: Counter
    backdoor_calls: Counter
    posters_done: Counter = 0

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "numberOfDials": 10,
                "connectedCalls": 5,
                "positiveProspect": 2,
                "deadCalls": 3,
                "demos": 1,
                "admission": 0,
                "clientVisit": 1,
                "clientClosing": 0,
                "backdoorCalls": 4,
                "postersDone": 2
            }
        }
    )


class ReportRead(ReportCounters):
    id: uuid.UUID
    employee_id: str
    employee_name: str
    submission_date: date
    created_at: datetime


class ReportUpdate(CamelModel):
    employee_name: Optional[str] = Field(default=None, min_length=1)
    number_of_dials: Optional[Counter] = None
    connected_calls: Optional[Counter] = None
    positive_prospect: Optional[Counter] = None
    dead_calls: Optional[Counter] = None
    demos: Optional[Counter] = None
    admission: Optional[Counter] = None
    client_visit: Optional[Counter] = None
    client_closing: Optional[Counter] = None
    backdoor_calls: Optional[Counter] = None
    posters_done: Optional[Counter] = None
    submission_date: Optional[date] = None


class ReportResponse(CamelModel):
    message: str
    report: ReportRead


class ReportDetail(CamelModel):
    report: ReportRead


class Pagination(CamelModel):
    page: int
    limit: int


class ReportPage(CamelModel):
    reports: List[ReportRead]
    pagination: Pagination


class ReportList(CamelModel):
    reports: List[ReportRead]
