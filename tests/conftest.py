import os

os.environ.setdefault('DATABASE_URL', 'sqlite+aiosqlite:///./test.db')
os.environ.setdefault('ENV', 'test')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from booking_api.api.deps import get_mailer, get_session  # noqa: E402
from booking_api.main import app  # noqa: E402
from booking_api.models import Appointment, Contact  # noqa: E402, F401


class FakeMailer:
    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def send_contact_email(self, to_email: str, full_name: str) -> bool:
        self.calls.append((to_email, full_name))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def sync_engine(tmp_path):
    engine = create_engine(f'sqlite:///{tmp_path / "booking.db"}')
    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db(sync_engine):
    with Session(sync_engine) as session:
        yield session


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def client(sync_engine, mailer):
    # NullPool: TestClient runs each request on its own event loop
    engine = create_async_engine(f'sqlite+aiosqlite:///{sync_engine.url.database}', poolclass=NullPool)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_mailer] = lambda: mailer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
