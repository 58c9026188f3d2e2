# seed.py
"""Create the tables, the default admin and a sample employee.

    python -m report_tracker.seed
"""
import asyncio
import logging

from . import crud
from .clock import SystemClock
from .config import get_settings
from .database import build_engine, build_session_factory, create_db_and_tables
from .exceptions import ConflictError
from .schemas import EmployeeCreate

logger = logging.getLogger(__name__)

SAMPLE_EMPLOYEE = EmployeeCreate(
    employee_id="EMP001",
    employee_name="John Doe",
    password="employee123",
)


async def seed() -> None:
    settings = get_settings()
    clock = SystemClock()
    engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    try:
        await create_db_and_tables(engine)
        session_factory = build_session_factory(engine)

        async with session_factory() as session:
            try:
                await crud.create_admin(
                    session,
                    settings.DEFAULT_ADMIN_USERNAME,
                    settings.DEFAULT_ADMIN_PASSWORD,
                    now=clock.now()
                )
                logger.info("Admin created: %s", settings.DEFAULT_ADMIN_USERNAME)
            except ConflictError:
                logger.info("Admin user already exists, skipping...")

            try:
                await crud.create_employee(session, SAMPLE_EMPLOYEE, now=clock.now())
                logger.info("Employee created: %s (ID: %s)",
                            SAMPLE_EMPLOYEE.employee_name, SAMPLE_EMPLOYEE.employee_id)
            except ConflictError:
                logger.info("Employee %s already exists, skipping...", SAMPLE_EMPLOYEE.employee_id)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=get_settings().LOG_LEVEL.upper())
    asyncio.run(seed())
