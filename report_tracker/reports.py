# reports.py
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlmodel import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import ConflictError
from .models import DailyReport

DUPLICATE_REPORT_MESSAGE = "Report for today already submitted"


@dataclass(frozen=True)
class ReportFilters:
    """Optional, conjunctive filters for :meth:`ReportStore.query`."""

    employee_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: Optional[int] = None
    offset: int = 0


class ReportStore:
    """Daily report persistence with the one-report-per-employee-per-day rule.

    Counter values are expected to be validated already.
    """

    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_for_day(self, employee_id: str, submission_date: date) -> Optional[DailyReport]:
        statement = select(DailyReport).where(
            DailyReport.employee_id == employee_id,
            DailyReport.submission_date == submission_date
        )
        result = await self._db.execute(statement)
        return result.scalars().first()

    async def submit(
            self,
            employee_id: str,
            employee_name: str,
            counters: Dict[str, int],
            submission_date: date,
            created_at: datetime
    ) -> DailyReport:
        if await self.find_for_day(employee_id, submission_date):
            raise ConflictError(DUPLICATE_REPORT_MESSAGE)

        report = DailyReport(
            employee_id=employee_id,
            employee_name=employee_name,
            submission_date=submission_date,
            created_at=created_at,
            **counters
        )

        try:
            self._db.add(report)
            await self._db.commit()
        except IntegrityError:
            # Lost a race with a concurrent submission for the same day.
            await self._db.rollback()
            raise ConflictError(DUPLICATE_REPORT_MESSAGE)

        await self._db.refresh(report)
        return report

    async def get(self, report_id: uuid.UUID) -> Optional[DailyReport]:
        return await self._db.get(DailyReport, report_id)

    async def query(self, filters: Optional[ReportFilters] = None) -> List[DailyReport]:
        filters = filters or ReportFilters()
        statement = select(DailyReport)

        if filters.employee_id:
            statement = statement.where(DailyReport.employee_id == filters.employee_id)
        if filters.start_date:
            statement = statement.where(DailyReport.submission_date >= filters.start_date)
        if filters.end_date:
            statement = statement.where(DailyReport.submission_date <= filters.end_date)

        statement = statement.order_by(
            DailyReport.submission_date.desc(),
            DailyReport.created_at.desc()
        )

        if filters.offset:
            statement = statement.offset(filters.offset)
        if filters.limit is not None:
            statement = statement.limit(filters.limit)

        result = await self._db.execute(statement)
        return list(result.scalars().all())

    async def update(self, report_id: uuid.UUID, fields: Dict[str, Any]) -> Optional[DailyReport]:
        report = await self.get(report_id)
        if not report:
            return None

        for key, value in fields.items():
            setattr(report, key, value)

        try:
            self._db.add(report)
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise ConflictError("A report for that employee and date already exists")

        await self._db.refresh(report)
        return report

    async def delete(self, report_id: uuid.UUID) -> bool:
        report = await self.get(report_id)
        if not report:
            return False

        await self._db.delete(report)
        await self._db.commit()
        return True
