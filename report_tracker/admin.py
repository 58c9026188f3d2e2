# admin.py
import logging
import uuid
from datetime import date
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud, schemas
from .clock import Clock
from .database import get_async_session
from .exceptions import NotFoundError, ValidationError
from .export import export_filename, reports_to_csv
from .models import Admin
from .reports import ReportFilters, ReportStore
from .security import get_clock, get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"]
)

DEFAULT_PAGE_SIZE = 25


class ExportFormat(str, Enum):
    csv = "csv"
    json = "json"


def _check_date_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and start_date > end_date:
        raise ValidationError("startDate must not be after endDate")


def get_report_store(db: AsyncSession = Depends(get_async_session)) -> ReportStore:
    return ReportStore(db)


# --- Daily reports ---

@router.get("/reports", response_model=schemas.ReportPage)
async def list_reports(
        store: ReportStore = Depends(get_report_store),
        current_admin: Admin = Depends(get_current_admin),
        employee_id: Optional[str] = Query(default=None, alias="employeeId"),
        start_date: Optional[date] = Query(default=None, alias="startDate"),
        end_date: Optional[date] = Query(default=None, alias="endDate"),
        page: int = Query(default=1, ge=1),
        limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1)
):
    """
    Reports newest first, optionally filtered by employee and an inclusive
    submission date range. (Admin Only)
    """
    _check_date_range(start_date, end_date)
    reports = await store.query(ReportFilters(
        employee_id=employee_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=(page - 1) * limit
    ))
    return schemas.ReportPage(
        reports=[schemas.ReportRead.model_validate(r) for r in reports],
        pagination=schemas.Pagination(page=page, limit=limit)
    )


@router.get("/reports/export")
async def export_reports(
        store: ReportStore = Depends(get_report_store),
        clock: Clock = Depends(get_clock),
        current_admin: Admin = Depends(get_current_admin),
        employee_id: Optional[str] = Query(default=None, alias="employeeId"),
        start_date: Optional[date] = Query(default=None, alias="startDate"),
        end_date: Optional[date] = Query(default=None, alias="endDate"),
        export_format: ExportFormat = Query(default=ExportFormat.csv, alias="format")
):
    """Every matching report as a CSV attachment, or as JSON. (Admin Only)"""
    _check_date_range(start_date, end_date)
    reports = await store.query(ReportFilters(
        employee_id=employee_id,
        start_date=start_date,
        end_date=end_date
    ))

    if export_format == ExportFormat.json:
        return schemas.ReportList(reports=[schemas.ReportRead.model_validate(r) for r in reports])

    logger.info("Admin %s exported %d reports", current_admin.username, len(reports))
    return Response(
        content=reports_to_csv(reports),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(clock.today())}"'}
    )


@router.get("/reports/{report_id}", response_model=schemas.ReportDetail)
async def get_report(
        report_id: uuid.UUID,
        store: ReportStore = Depends(get_report_store),
        current_admin: Admin = Depends(get_current_admin)
):
    report = await store.get(report_id)
    if not report:
        raise NotFoundError("Report not found")
    return schemas.ReportDetail(report=schemas.ReportRead.model_validate(report))


@router.patch("/reports/{report_id}", response_model=schemas.ReportResponse)
async def update_report(
        report_id: uuid.UUID,
        updates: schemas.ReportUpdate,
        store: ReportStore = Depends(get_report_store),
        current_admin: Admin = Depends(get_current_admin)
):
    """
    Updates a report. (Admin Only)
    This uses PATCH logic (only updates provided fields).
    """
    report = await store.update(report_id, updates.model_dump(exclude_unset=True, exclude_none=True))
    if not report:
        raise NotFoundError("Report not found")
    logger.info("Admin %s updated report %s", current_admin.username, report_id)
    return schemas.ReportResponse(
        message="Report updated successfully",
        report=schemas.ReportRead.model_validate(report)
    )


@router.delete("/reports/{report_id}", response_model=schemas.MessageResponse)
async def delete_report(
        report_id: uuid.UUID,
        store: ReportStore = Depends(get_report_store),
        current_admin: Admin = Depends(get_current_admin)
):
    if not await store.delete(report_id):
        raise NotFoundError("Report not found")
    logger.info("Admin %s deleted report %s", current_admin.username, report_id)
    return {"message": "Report deleted successfully"}


# --- Employee management ---

@router.get("/employees", response_model=schemas.EmployeeList)
async def list_employees(
        db: AsyncSession = Depends(get_async_session),
        current_admin: Admin = Depends(get_current_admin)
):
    employees = await crud.list_employees(db)
    return schemas.EmployeeList(employees=[schemas.EmployeeDetail.model_validate(e) for e in employees])


@router.post(
    "/employees",
    response_model=schemas.EmployeeResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_employee(
        employee_input: schemas.EmployeeCreate,
        db: AsyncSession = Depends(get_async_session),
        clock: Clock = Depends(get_clock),
        current_admin: Admin = Depends(get_current_admin)
):
    """Create a new employee account. (Admin Only)"""
    employee = await crud.create_employee(db, employee_input, now=clock.now())
    logger.info("Admin %s created employee %s", current_admin.username, employee.employee_id)
    return schemas.EmployeeResponse(
        message="Employee created successfully",
        employee=schemas.EmployeeDetail.model_validate(employee)
    )


@router.put("/employees/{employee_pk}", response_model=schemas.EmployeeResponse)
async def update_employee(
        employee_pk: uuid.UUID,
        updated_details: schemas.EmployeeUpdate,
        db: AsyncSession = Depends(get_async_session),
        clock: Clock = Depends(get_clock),
        current_admin: Admin = Depends(get_current_admin)
):
    """
    Updates an employee account. (Admin Only)
    Omitted fields keep their values; an omitted or empty password keeps the old one.
    """
    employee = await crud.update_employee(db, employee_pk, updated_details, now=clock.now())
    if not employee:
        raise NotFoundError("Employee not found")
    return schemas.EmployeeResponse(
        message="Employee updated successfully",
        employee=schemas.EmployeeDetail.model_validate(employee)
    )


@router.delete("/employees/{employee_pk}", response_model=schemas.MessageResponse)
async def delete_employee(
        employee_pk: uuid.UUID,
        db: AsyncSession = Depends(get_async_session),
        current_admin: Admin = Depends(get_current_admin)
):
    """Delete an employee account. Their submitted reports are kept. (Admin Only)"""
    if not await crud.delete_employee(db, employee_pk):
        raise NotFoundError("Employee not found")
    logger.info("Admin %s deleted employee %s", current_admin.username, employee_pk)
    return {"message": "Employee deleted successfully"}
