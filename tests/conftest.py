"""
Pytest fixtures for portfolio manager tests.

Every test gets its own in-memory SQLite database with foreign keys on,
so ON DELETE CASCADE behaves as in production.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from prometheus_client import CollectorRegistry
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from portfolio_manager.container import Container
from portfolio_manager.database import build_engine, build_session_maker, close_db, init_db, session_scope
from portfolio_manager.kernel.events import AuditRecorder
from portfolio_manager.kernel.metrics import MetricsCollector
from portfolio_manager.kernel.repositories import UserRepository
from portfolio_manager.schemas import PortfolioCreate


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingAudit:
    """AuditRecorder that keeps events in memory."""
    
    def __init__(self):
        self.events: List[Tuple[str, str, Any, Optional[str], Dict[str, Any]]] = []
    
    async def log_create(self, entity, entity_id, data, user_id=None):
        self.events.append(("create", entity, entity_id, user_id, data))
    
    async def log_update(self, entity, entity_id, data, user_id=None):
        self.events.append(("update", entity, entity_id, user_id, data))
    
    async def log_delete(self, entity, entity_id, data, user_id=None):
        self.events.append(("delete", entity, entity_id, user_id, data))
    
    async def log_access(self, entity, entity_id, user_id, allowed):
        self.events.append(("access", entity, entity_id, user_id, {"allowed": allowed}))
    
    def of_kind(self, kind: str) -> list:
        return [event for event in self.events if event[0] == kind]
    
    def denials(self) -> list:
        return [event for event in self.of_kind("access") if event[4]["allowed"] is False]


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh in-memory database."""
    engine = build_engine(TEST_DATABASE_URL)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return build_session_maker(db_engine)


@pytest.fixture
def metrics() -> MetricsCollector:
    return MetricsCollector(CollectorRegistry(), namespace="test")


@pytest.fixture
def uow(session_maker, metrics) -> Callable:
    """
    Run calls in one committed unit of work:

        async with uow() as container:
            await container.categories.create(...)
    """
    @asynccontextmanager
    async def _uow(audit: Optional[AuditRecorder] = None) -> AsyncIterator[Container]:
        async with session_scope(session_maker) as session:
            yield Container(session, audit=audit, metrics=metrics)
    
    return _uow


@pytest_asyncio.fixture
async def users(session_maker) -> Tuple[str, str]:
    """Two users: (u1, u2)."""
    async with session_scope(session_maker) as session:
        repository = UserRepository(session)
        u1 = await repository.create(email="u1@example.com", name="User One", external_id="ext|u1")
        u2 = await repository.create(email="u2@example.com", name="User Two", external_id="ext|u2")
        return u1.id, u2.id


@pytest_asyncio.fixture
async def u1(users) -> str:
    return users[0]


@pytest_asyncio.fixture
async def u2(users) -> str:
    return users[1]


@pytest_asyncio.fixture
async def portfolio_p1(uow, u1) -> int:
    """Portfolio P1 owned by u1."""
    async with uow() as container:
        portfolio = await container.portfolios.create(PortfolioCreate(owner_id=u1, title="P1"))
    return portfolio.id


@pytest_asyncio.fixture
async def portfolio_p2(uow, u2) -> int:
    """Portfolio P2 owned by u2."""
    async with uow() as container:
        portfolio = await container.portfolios.create(PortfolioCreate(owner_id=u2, title="P2"))
    return portfolio.id


@pytest.fixture
def recording_audit() -> RecordingAudit:
    return RecordingAudit()


@pytest.fixture
def restore_logging():
    """Put the root logger and the test audit logger back as they were."""
    root = logging.getLogger()
    audit = logging.getLogger("pm.test.audit")
    handlers, level, audit_level = root.handlers[:], root.level, audit.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
    audit.setLevel(audit_level)
