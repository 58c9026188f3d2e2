# submissions.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from . import schemas
from .clock import Clock
from .database import get_async_session
from .models import Employee
from .reports import ReportStore
from .security import get_clock, get_current_employee

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/reports",
    tags=["Daily Reports"]
)


@router.post("/submit", response_model=schemas.ReportResponse)
async def submit_daily_report(
        counters: schemas.ReportCounters,
        db: AsyncSession = Depends(get_async_session),
        clock: Clock = Depends(get_clock),
        current_employee: Employee = Depends(get_current_employee)
):
    """
    Submit today's report for the logged-in employee.
    Only one report per employee per (UTC) day is accepted; a second one is a 409.
    """
    report = await ReportStore(db).submit(
        employee_id=current_employee.employee_id,
        employee_name=current_employee.employee_name,
        counters=counters.model_dump(),
        submission_date=clock.today(),
        created_at=clock.now()
    )
    logger.info("Report %s submitted by %s for %s", report.id, report.employee_id, report.submission_date)
    return schemas.ReportResponse(
        message="Report submitted successfully",
        report=schemas.ReportRead.model_validate(report)
    )
