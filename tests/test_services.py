"""Tests for the settings, trigger, step and process services."""
from types import SimpleNamespace

import pytest
import pytest_asyncio

from lifecycle.errors import UnknownSubpluginError
from lifecycle.models import StepInstance, TriggerInstance, Workflow
from lifecycle.services import (
    ProcessService,
    SettingsService,
    StepService,
    TriggerService,
)
from lifecycle.subplugins import registry
from lifecycle.subplugins.base import StepLib


@pytest_asyncio.fixture
async def workflow(db_session) -> Workflow:
    workflow = Workflow(title="Service Workflow", active=False)
    db_session.add(workflow)
    await db_session.flush()
    return workflow


class RecordingStep(StepLib):
    """Step that records the rollbacks it receives."""

    name = "email"

    def __init__(self):
        self.rollbacks = []

    def instance_settings(self):
        return ["subject"]

    async def rollback_course(self, step_id, process_id, course_id):
        self.rollbacks.append((step_id, process_id, course_id))


class TestSettingsService:
    """Tests for SettingsService."""

    @pytest.mark.asyncio
    async def test_save_and_get_step_settings(self, db_session):
        service = SettingsService(db_session)

        await service.save_settings(1, "step", "email", {
            "subject": "Your course is going to be deleted",
            "content": "Hello",
            "responsetimeout": 3600,
        })

        settings = await service.get_settings(1, "step")
        assert settings["subject"] == "Your course is going to be deleted"
        assert settings["content"] == "Hello"
        assert settings["responsetimeout"] == "3600"

    @pytest.mark.asyncio
    async def test_ignores_undeclared_settings(self, db_session):
        service = SettingsService(db_session)

        await service.save_settings(1, "trigger", "startdatedelay", {"delay": 100, "foo": "bar"})

        assert await service.get_settings(1, "trigger") == {"delay": "100"}

    @pytest.mark.asyncio
    async def test_accepts_object_with_attributes(self, db_session):
        service = SettingsService(db_session)

        await service.save_settings(2, "trigger", "category", SimpleNamespace(category_select=7))

        assert await service.get_settings(2, "trigger") == {"category_select": "7"}

    @pytest.mark.asyncio
    async def test_overwrites_existing_values(self, db_session):
        service = SettingsService(db_session)
        await service.save_settings(1, "trigger", "startdatedelay", {"delay": 100})

        await service.save_settings(1, "trigger", "startdatedelay", {"delay": 200})

        assert await service.get_settings(1, "trigger") == {"delay": "200"}

    @pytest.mark.asyncio
    async def test_settings_are_scoped_by_type(self, db_session):
        """Trigger and step instances with the same ID don't share settings."""
        service = SettingsService(db_session)
        await service.save_settings(1, "trigger", "startdatedelay", {"delay": 100})
        await service.save_settings(1, "step", "email", {"subject": "Hi"})

        await service.remove_settings(1, "trigger")

        assert await service.get_settings(1, "trigger") == {}
        assert await service.get_settings(1, "step") == {"subject": "Hi"}

    @pytest.mark.asyncio
    async def test_invalid_type_raises(self, db_session):
        service = SettingsService(db_session)

        with pytest.raises(ValueError):
            await service.get_settings(1, "course")


class TestTriggerService:
    """Tests for TriggerService."""

    @pytest.mark.asyncio
    async def test_new_triggers_are_appended(self, db_session, workflow):
        service = TriggerService(db_session)

        first = await service.insert_or_update(TriggerInstance(
            workflow_id=workflow.id, subpluginname="startdatedelay", instancename="first",
        ))
        second = await service.insert_or_update(TriggerInstance(
            workflow_id=workflow.id, subpluginname="category", instancename="second",
        ))

        assert (first.sortindex, second.sortindex) == (1, 2)
        assert (await service.get_trigger(first.id)).instancename == "first"
        triggers = await service.get_triggers_for_workflow(workflow.id)
        assert [t.id for t in triggers] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_unknown_trigger_is_rejected(self, db_session, workflow):
        service = TriggerService(db_session)

        with pytest.raises(UnknownSubpluginError):
            await service.insert_or_update(TriggerInstance(
                workflow_id=workflow.id, subpluginname="email", instancename="wrong",
            ))

    @pytest.mark.asyncio
    async def test_count_instances_across_workflows(self, db_session, workflow):
        service = TriggerService(db_session)
        other = Workflow(title="Other", active=False)
        db_session.add(other)
        await db_session.flush()

        for workflow_id in (workflow.id, other.id):
            await service.insert_or_update(TriggerInstance(
                workflow_id=workflow_id, subpluginname="category", instancename="c",
            ))

        assert await service.count_instances("category") == 2
        assert await service.count_instances("sitecourse") == 0

    @pytest.mark.asyncio
    async def test_duplicate_copies_settings(self, db_session, workflow):
        settings = SettingsService(db_session)
        service = TriggerService(db_session, settings)
        trigger = await service.insert_or_update(TriggerInstance(
            workflow_id=workflow.id, subpluginname="startdatedelay", instancename="delay",
        ))
        await settings.save_settings(trigger.id, "trigger", "startdatedelay", {"delay": 100})
        target = Workflow(title="Copy", active=False)
        db_session.add(target)
        await db_session.flush()

        copies = await service.duplicate_triggers(workflow.id, target.id)

        assert len(copies) == 1
        assert copies[0].id != trigger.id
        assert copies[0].workflow_id == target.id
        assert copies[0].instancename == "delay"
        assert await settings.get_settings(copies[0].id, "trigger") == {"delay": "100"}

    @pytest.mark.asyncio
    async def test_remove_instances_removes_settings(self, db_session, workflow):
        settings = SettingsService(db_session)
        service = TriggerService(db_session, settings)
        trigger = await service.insert_or_update(TriggerInstance(
            workflow_id=workflow.id, subpluginname="startdatedelay", instancename="delay",
        ))
        await settings.save_settings(trigger.id, "trigger", "startdatedelay", {"delay": 100})

        assert await service.remove_instances_of_workflow(workflow.id) == 1

        assert await service.get_triggers_for_workflow(workflow.id) == []
        assert await settings.get_settings(trigger.id, "trigger") == {}


class TestStepService:
    """Tests for StepService."""

    @pytest.mark.asyncio
    async def test_steps_by_index(self, db_session, workflow):
        service = StepService(db_session)
        for name in ("email", "createbackup", "deletecourse"):
            await service.insert_or_update(StepInstance(
                workflow_id=workflow.id, subpluginname=name, instancename=name,
            ))

        assert await service.count_steps_of_workflow(workflow.id) == 3
        step = await service.get_step_instance_by_workflow_index(workflow.id, 2)
        assert step.subpluginname == "createbackup"
        assert (await service.get_step_instance(step.id)).instancename == "createbackup"
        assert await service.get_step_instance_by_workflow_index(workflow.id, 4) is None

    @pytest.mark.asyncio
    async def test_unknown_step_is_rejected(self, db_session, workflow):
        service = StepService(db_session)

        with pytest.raises(UnknownSubpluginError):
            await service.insert_or_update(StepInstance(
                workflow_id=workflow.id, subpluginname="manual", instancename="wrong",
            ))

    @pytest.mark.asyncio
    async def test_duplicate_keeps_order(self, db_session, workflow):
        service = StepService(db_session)
        for name in ("email", "deletecourse"):
            await service.insert_or_update(StepInstance(
                workflow_id=workflow.id, subpluginname=name, instancename=name,
            ))
        target = Workflow(title="Copy", active=False)
        db_session.add(target)
        await db_session.flush()

        await service.duplicate_steps(workflow.id, target.id)

        copies = await service.get_steps_for_workflow(target.id)
        assert [(s.subpluginname, s.sortindex) for s in copies] == [
            ("email", 1),
            ("deletecourse", 2),
        ]


class TestProcessService:
    """Tests for ProcessService."""

    @pytest.mark.asyncio
    async def test_create_and_count(self, db_session, workflow):
        service = ProcessService(db_session)

        process = await service.create_process(course_id=42, workflow_id=workflow.id)

        assert process.id is not None
        assert process.stepindex == 0
        assert await service.count_processes_by_workflow(workflow.id) == 1
        assert (await service.get_process(process.id)).course_id == 42

    @pytest.mark.asyncio
    async def test_rollback_undoes_steps_in_reverse(self, db_session, workflow, monkeypatch):
        """Steps are rolled back from the current one down to the first."""
        recorder = RecordingStep()
        monkeypatch.setitem(registry.STEPS, "email", recorder)
        steps = StepService(db_session)
        created = []
        for index in range(3):
            created.append(await steps.insert_or_update(StepInstance(
                workflow_id=workflow.id, subpluginname="email", instancename=f"mail {index}",
            )))
        service = ProcessService(db_session, steps)
        process = await service.create_process(course_id=7, workflow_id=workflow.id)
        process.stepindex = 2
        await db_session.flush()
        process_id = process.id

        await service.rollback_process(process)

        assert recorder.rollbacks == [
            (created[1].id, process_id, 7),
            (created[0].id, process_id, 7),
        ]
        assert await service.get_process(process_id) is None

    @pytest.mark.asyncio
    async def test_remove_processes_of_workflow(self, db_session, workflow):
        service = ProcessService(db_session)
        for course_id in (1, 2):
            await service.create_process(course_id=course_id, workflow_id=workflow.id)

        assert await service.remove_processes_of_workflow(workflow.id) == 2
        assert await service.count_processes_by_workflow(workflow.id) == 0
