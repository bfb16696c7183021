"""Tests for administrative workflow actions."""
import pytest

from lifecycle.core.notifications import NotificationLevel
from lifecycle.services.workflow_actions import WorkflowAction, handle_action
from lifecycle.strings import get_string
from tests.conftest import create_active_workflows, create_workflow_factory


class TestConfirmation:
    """Destructive actions ask for confirmation first."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["disable", "abortdisable", "abort", "delete"])
    async def test_unconfirmed_action_does_nothing(self, manager, action):
        (workflow,) = await create_active_workflows(manager, "A")

        result = await handle_action(manager, action, workflow.id)

        assert result.confirmation_required is True
        assert result.performed is False
        assert result.message == get_string(f"{action}_workflow_confirm")
        reloaded = await manager.get_workflow(workflow.id)
        assert reloaded.active is True

    @pytest.mark.asyncio
    async def test_unknown_action_raises(self, manager):
        with pytest.raises(ValueError):
            await handle_action(manager, "explode", 1)


class TestActions:
    """Tests for each action."""

    @pytest.mark.asyncio
    async def test_activate(self, manager):
        workflow = await create_workflow_factory(manager, title="A")

        result = await handle_action(manager, WorkflowAction.ACTIVATE, workflow.id)

        assert result.performed is True
        assert result.workflow.sortindex == 1
        assert result.message == "Workflow 'A' was activated."

    @pytest.mark.asyncio
    async def test_activate_invalid_workflow_warns(self, manager, notifier):
        workflow = await create_workflow_factory(manager, title="Empty", trigger=None)

        result = await handle_action(manager, "activate", workflow.id)

        assert result.performed is False
        assert notifier.messages == [get_string("invalid_workflow_cannot_be_activated")]

    @pytest.mark.asyncio
    async def test_up_and_down(self, manager):
        a, b = await create_active_workflows(manager, "A", "B")

        up = await handle_action(manager, "up", b.id)
        down = await handle_action(manager, "down", b.id)

        assert up.performed is True
        assert down.performed is True
        assert (a.sortindex, b.sortindex) == (1, 2)

    @pytest.mark.asyncio
    async def test_duplicate(self, manager):
        workflow = await create_workflow_factory(manager, title="A")

        result = await handle_action(manager, "duplicate", workflow.id)

        assert result.performed is True
        assert result.workflow.id != workflow.id
        assert result.workflow.title == "A (copy)"

    @pytest.mark.asyncio
    async def test_disable(self, manager):
        a, b = await create_active_workflows(manager, "A", "B")

        result = await handle_action(manager, "disable", a.id, confirm=True)

        assert result.performed is True
        assert result.workflow.timedeactive is not None
        assert b.sortindex == 1

    @pytest.mark.asyncio
    async def test_disable_not_disableable_warns(self, manager, notifier):
        workflow = await create_workflow_factory(manager, title="Site", trigger="sitecourse", trigger_settings={})
        await manager.activate_workflow(workflow.id)

        result = await handle_action(manager, "disable", workflow.id, confirm=True)

        assert result.performed is False
        assert notifier.notifications[-1].message == get_string("workflow_not_disableable")
        assert notifier.notifications[-1].level is NotificationLevel.WARNING

    @pytest.mark.asyncio
    async def test_disable_twice_warns(self, manager, notifier):
        (workflow,) = await create_active_workflows(manager, "A")
        await handle_action(manager, "disable", workflow.id, confirm=True)

        result = await handle_action(manager, "disable", workflow.id, confirm=True)

        assert result.performed is False
        assert result.message == get_string("workflow_already_disabled")
        assert notifier.notifications[-1].message == get_string("workflow_already_disabled")
        assert notifier.notifications[-1].level is NotificationLevel.WARNING

    @pytest.mark.asyncio
    async def test_abortdisable(self, manager, notifier):
        (workflow,) = await create_active_workflows(manager, "A")
        for course_id in (1, 2):
            await manager.processes.create_process(course_id=course_id, workflow_id=workflow.id)

        result = await handle_action(manager, "abortdisable", workflow.id, confirm=True)

        assert result.performed is True
        assert len(result.abort.aborted) == 2
        assert await manager.is_deactivated(workflow.id) is True
        assert await manager.is_abortable(workflow.id) is False
        assert get_string("processes_aborted", count=2) in notifier.messages

    @pytest.mark.asyncio
    async def test_abort(self, manager):
        (workflow,) = await create_active_workflows(manager, "A")
        await manager.processes.create_process(course_id=1, workflow_id=workflow.id)

        result = await handle_action(manager, "abort", workflow.id, confirm=True)

        assert result.performed is True
        assert result.abort.ok is True
        assert result.workflow.active is True

    @pytest.mark.asyncio
    async def test_delete(self, manager):
        workflow = await create_workflow_factory(manager, title="A")

        result = await handle_action(manager, "delete", workflow.id, confirm=True)

        assert result.performed is True
        assert result.message == "Workflow 'A' was deleted."
        assert await manager.get_workflow(workflow.id) is None

    @pytest.mark.asyncio
    async def test_delete_with_processes_warns(self, manager, notifier):
        (workflow,) = await create_active_workflows(manager, "A")
        await manager.processes.create_process(course_id=1, workflow_id=workflow.id)

        result = await handle_action(manager, "delete", workflow.id, confirm=True)

        assert result.performed is False
        assert notifier.messages == [get_string("workflow_not_removeable")]
        assert await manager.get_workflow(workflow.id) is not None

    @pytest.mark.asyncio
    async def test_delete_missing_workflow_warns(self, manager, notifier):
        result = await handle_action(manager, "delete", 999, confirm=True)

        assert result.performed is False
        assert notifier.messages == [get_string("workflow_not_removeable")]
