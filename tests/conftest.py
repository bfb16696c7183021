"""Shared test fixtures for the lifecycle tests."""
import pytest
import pytest_asyncio
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from lifecycle.core.notifications import CollectingNotifier
from lifecycle.db.database import Base
from lifecycle.models import Process, Setting, StepInstance, TriggerInstance, Workflow  # noqa: F401
from lifecycle.services.workflow_manager import WorkflowManager, create_workflow_manager


# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Factory for independent sessions on the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    AsyncSessionLocal = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@pytest.fixture
def notifier() -> CollectingNotifier:
    """Notifier that keeps every message for assertions."""
    return CollectingNotifier()


@pytest.fixture
def manager(db_session, notifier) -> WorkflowManager:
    """Workflow manager wired to the test session."""
    return create_workflow_manager(db_session, notifier=notifier)


# Factory functions for test data
async def create_workflow_factory(
    manager: WorkflowManager,
    title: str = "Test Workflow",
    trigger: str | None = "startdatedelay",
    trigger_settings: dict | None = None,
    steps: tuple[str, ...] = (),
) -> Workflow:
    """Create a workflow with an optional trigger and some steps."""
    workflow = await manager.create_workflow(title)
    if trigger is not None:
        await manager.add_trigger(
            workflow.id,
            trigger,
            f"{title} {trigger}",
            trigger_settings if trigger_settings is not None else {"delay": 86400},
        )
    for index, step in enumerate(steps, start=1):
        await manager.add_step(workflow.id, step, f"{title} step {index}")
    return workflow


async def create_active_workflows(manager: WorkflowManager, *titles: str) -> list[Workflow]:
    """Create and activate automatic workflows in the given order."""
    workflows = []
    for title in titles:
        workflow = await create_workflow_factory(manager, title=title)
        workflows.append(await manager.activate_workflow(workflow.id))
    return workflows


async def assert_dense_ranking(manager: WorkflowManager) -> None:
    """Active automatic workflows hold the sortindex values 1..K exactly once."""
    ranked = await manager.get_active_automatic_workflows()
    assert sorted(w.sortindex for w in ranked) == list(range(1, len(ranked) + 1))
