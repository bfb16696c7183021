"""Tests for the workflow repository and notifiers."""
import logging

import pytest

from lifecycle.core.notifications import CollectingNotifier, LoggingNotifier, NotificationLevel
from lifecycle.models import TriggerInstance, Workflow
from lifecycle.repositories import WorkflowRepository


def create_workflow_factory(
    title: str = "Test Workflow",
    active: bool = False,
    manual: bool | None = None,
    sortindex: int | None = None,
) -> Workflow:
    """Factory function to create workflow model."""
    return Workflow(title=title, active=active, manual=manual, sortindex=sortindex)


class TestWorkflowRepository:
    """Tests for WorkflowRepository."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session):
        repo = WorkflowRepository(db_session)

        created = await repo.create(create_workflow_factory(title="Repo"))

        assert created.id is not None
        fetched = await repo.get_by_id(created.id)
        assert fetched.title == "Repo"
        assert await repo.get_by_id(created.id + 100) is None

    @pytest.mark.asyncio
    async def test_list_active_filters_by_manual(self, db_session):
        repo = WorkflowRepository(db_session)
        second = await repo.create(create_workflow_factory("Second", True, False, 2))
        first = await repo.create(create_workflow_factory("First", True, False, 1))
        manual = await repo.create(create_workflow_factory("Manual", True, True))
        await repo.create(create_workflow_factory("Draft"))

        automatic = await repo.list_active(manual=False)

        assert [w.id for w in automatic] == [first.id, second.id]
        assert [w.id for w in await repo.list_active(manual=True)] == [manual.id]
        assert len(await repo.list_active()) == 3

    @pytest.mark.asyncio
    async def test_list_all_orders_ranked_first(self, db_session):
        repo = WorkflowRepository(db_session)
        draft = await repo.create(create_workflow_factory("Draft"))
        manual = await repo.create(create_workflow_factory("Manual", True, True))
        ranked = await repo.create(create_workflow_factory("Ranked", True, False, 1))

        workflows = await repo.list_all()

        assert [w.id for w in workflows] == [ranked.id, manual.id, draft.id]

    @pytest.mark.asyncio
    async def test_list_active_manual_triggers(self, db_session):
        repo = WorkflowRepository(db_session)
        manual = await repo.create(create_workflow_factory("Manual", True, True))
        inactive = await repo.create(create_workflow_factory("Inactive"))
        for workflow in (manual, inactive):
            db_session.add(TriggerInstance(
                workflow_id=workflow.id, subpluginname="manual", instancename="tool", sortindex=1,
            ))
        await db_session.flush()

        triggers = await repo.list_active_manual_triggers()

        assert [t.workflow_id for t in triggers] == [manual.id]

    @pytest.mark.asyncio
    async def test_update_and_delete(self, db_session):
        repo = WorkflowRepository(db_session)
        workflow = await repo.create(create_workflow_factory("Before"))

        workflow.title = "After"
        updated = await repo.update(workflow)

        assert updated.title == "After"
        assert await repo.delete(workflow.id) is True
        assert await repo.delete(workflow.id) is False
        assert await repo.get_by_id(workflow.id) is None


class TestNotifiers:
    """Tests for notifiers."""

    def test_logging_notifier_maps_levels(self, caplog):
        notifier = LoggingNotifier()

        with caplog.at_level(logging.INFO, logger="lifecycle.notifications"):
            notifier.notify("Activated", NotificationLevel.SUCCESS)
            notifier.notify("Careful", NotificationLevel.WARNING)

        assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
            (logging.INFO, "Activated"),
            (logging.WARNING, "Careful"),
        ]

    def test_collecting_notifier(self):
        notifier = CollectingNotifier()

        notifier.notify("One")
        notifier.notify("Two", "error")

        assert notifier.messages == ["One", "Two"]
        assert notifier.notifications[1].level is NotificationLevel.ERROR
        notifier.clear()
        assert notifier.notifications == []
