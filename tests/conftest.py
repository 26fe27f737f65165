import os
from datetime import timedelta

# Point settings at throwaway resources before talentpool is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("SENTRY_DSN", "")

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from talentpool.core.security import create_access_token, get_password_hash
from talentpool.db.base import Base
from talentpool.db.session import get_db
from talentpool.main import app
from talentpool.models import JobApplication, JobOffer, User
from talentpool.services.notifications import get_status_notifier
from talentpool.services.notifications.base import StatusChangeNotifier
from talentpool.services.resume_storage import ResumeStorage, get_resume_storage
from talentpool.utils.helpers import today

PASSWORD = "secret-password"

# Hashing is slow on purpose; every fixture user shares one hash
_PASSWORD_HASH = get_password_hash(PASSWORD)


class RecordingNotifier(StatusChangeNotifier):
    """Keeps every notification so tests can assert on them."""

    def __init__(self):
        self.calls = []

    async def status_changed(self, application, previous_status):
        self.calls.append((application.id, previous_status, application.status))

    @property
    def name(self):
        return "recording"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite only honours ON DELETE CASCADE with foreign keys switched on
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def storage(tmp_path):
    return ResumeStorage(tmp_path / "storage")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def client(session_factory, storage, notifier):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_resume_storage] = lambda: storage
    app.dependency_overrides[get_status_notifier] = lambda: notifier

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _add(session_factory, obj):
    async with session_factory() as session:
        session.add(obj)
        await session.commit()
        await session.refresh(obj)
        return obj


@pytest.fixture
def make_user(session_factory):
    counter = {"n": 0}

    async def _make_user(role="candidate", is_active=True, email=None):
        counter["n"] += 1
        user = User(
            name=f"{role.title()} {counter['n']}",
            email=email or f"{role}{counter['n']}@talentpool.io",
            password_hash=_PASSWORD_HASH,
            role=role,
            is_active=is_active,
        )
        return await _add(session_factory, user)

    return _make_user


@pytest.fixture
def make_offer(session_factory):
    async def _make_offer(recruiter, **overrides):
        fields = {
            "title": "Backend Developer",
            "description": "Build and run our APIs.",
            "location": "Lyon",
            "company_name": "Acme",
            "contract_type": "CDI",
            "salary_min": 40000,
            "salary_max": 50000,
            "is_active": True,
            "expires_at": today() + timedelta(days=30),
            "user_id": recruiter.id,
        }
        fields.update(overrides)
        return await _add(session_factory, JobOffer(**fields))

    return _make_offer


@pytest.fixture
def make_application(session_factory):
    async def _make_application(candidate, offer, **overrides):
        fields = {
            "user_id": candidate.id,
            "job_offer_id": offer.id,
            "status": "pending",
        }
        fields.update(overrides)
        return await _add(session_factory, JobApplication(**fields))

    return _make_application


@pytest.fixture
async def admin(make_user):
    return await make_user("admin")


@pytest.fixture
async def recruiter(make_user):
    return await make_user("recruiter")


@pytest.fixture
async def other_recruiter(make_user):
    return await make_user("recruiter")


@pytest.fixture
async def candidate(make_user):
    return await make_user("candidate")


@pytest.fixture
async def other_candidate(make_user):
    return await make_user("candidate")


def auth_headers(user):
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth():
    return auth_headers
