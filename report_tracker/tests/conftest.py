# tests/conftest.py
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from report_tracker import crud
from report_tracker.clock import Clock
from report_tracker.config import Settings
from report_tracker.database import create_db_and_tables
from report_tracker.main import create_app
from report_tracker.schemas import EmployeeCreate

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"
EMPLOYEE_ID = "EMP001"
EMPLOYEE_NAME = "John Doe"
EMPLOYEE_PASSWORD = "employee123"

REPORT_PAYLOAD = {
    "numberOfDials": 10,
    "connectedCalls": 5,
    "positiveProspect": 2,
    "deadCalls": 3,
    "demos": 1,
    "admission": 0,
    "clientVisit": 1,
    "clientClosing": 0,
    "backdoorCalls": 4,
    "postersDone": 2,
}


class FrozenClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


@pytest.fixture
def report_payload() -> dict:
    return dict(REPORT_PAYLOAD)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc))


@pytest_asyncio.fixture
async def app(clock):
    settings = Settings(
        DATABASE_URL="sqlite+aiosqlite://",
        SEED_DEFAULT_ADMIN=False,
        LOG_LEVEL="WARNING",
    )
    application = create_app(settings=settings, clock=clock)
    await create_db_and_tables(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def session_factory(app):
    return app.state.session_factory


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_account(app, clock):
    async with app.state.session_factory() as session:
        return await crud.create_admin(session, ADMIN_USERNAME, ADMIN_PASSWORD, now=clock.now())


@pytest_asyncio.fixture
async def employee_account(app, clock):
    async with app.state.session_factory() as session:
        return await crud.create_employee(
            session,
            EmployeeCreate(
                employee_id=EMPLOYEE_ID,
                employee_name=EMPLOYEE_NAME,
                password=EMPLOYEE_PASSWORD,
            ),
            now=clock.now(),
        )


@pytest_asyncio.fixture
async def admin_client(app, admin_account):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post(
            "/api/admin/login",
            json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
        )
        assert response.status_code == 200
        ac.headers["Authorization"] = f"Bearer {response.json()['sessionToken']}"
        yield ac


@pytest_asyncio.fixture
async def employee_client(app, employee_account):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post(
            "/api/employee/login",
            json={"employeeId": EMPLOYEE_ID, "password": EMPLOYEE_PASSWORD},
        )
        assert response.status_code == 200
        ac.headers["Authorization"] = f"Bearer {response.json()['sessionToken']}"
        yield ac
