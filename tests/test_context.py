"""Tests for the application context."""

import pytest
from datetime import date, timedelta

from daylist.classify import PriorityFilter
from daylist.config import Settings
from daylist.data import DataCore, DaylistContext
from daylist.data.gateway import JsonFileGateway, MemoryGateway
from daylist.models import Priority
from daylist.recovery import NotFoundError, ValidationError


@pytest.fixture
def context(gateway, clock):
    with DaylistContext(gateway, Settings(), clock=clock) as ctx:
        yield ctx


class TestLifecycle:

    def test_enter_loads_and_exit_saves(self, clock):
        gateway = MemoryGateway()
        with DaylistContext(gateway, clock=clock) as ctx:
            ctx.create("persisted")
        with DaylistContext(gateway, clock=clock) as ctx:
            assert [t.title for t in ctx.store.list()] == ["persisted"]

    def test_exit_closes_open_session(self, clock):
        gateway = MemoryGateway()
        with DaylistContext(gateway, clock=clock) as ctx:
            task = ctx.create("draft")
            ctx.open_task(task.id)
            ctx.stage_field_edit("title", "final")
        assert gateway.load_all()[0].title == "final"

    def test_rejected_action_does_not_save(self, clock):
        """Test leaving on a validation error does not write the file again."""
        gateway = MemoryGateway()
        with pytest.raises(ValidationError):
            with DaylistContext(gateway, clock=clock) as ctx:
                ctx.create("   ")
        assert gateway.save_count == 0

    def test_rejected_action_discards_open_edit(self, clock):
        gateway = MemoryGateway()
        with pytest.raises(ValidationError):
            with DaylistContext(gateway, clock=clock) as ctx:
                task = ctx.create("kept")
                ctx.open_task(task.id)
                ctx.stage_field_edit("description", "half done")
                ctx.stage_field_edit("dueTime", "noonish")
        assert gateway.save_count == 1
        assert gateway.load_all()[0].description == ""

    def test_teardown_without_init(self):
        gateway = MemoryGateway()
        DaylistContext(gateway).teardown()
        assert gateway.save_count == 0

    def test_data_core_uses_data_dir(self, tmp_path):
        ctx = DataCore.open_context(Settings(data_dir=tmp_path))
        assert isinstance(ctx.gateway, JsonFileGateway)
        assert ctx.gateway.path == tmp_path / "tasks.json"


class TestIntents:

    def test_default_priority_from_settings(self, gateway, clock):
        settings = Settings(default_priority=Priority.HIGH)
        with DaylistContext(gateway, settings, clock=clock) as ctx:
            assert ctx.create("t").priority == Priority.HIGH
            assert ctx.create("u", priority="low").priority == Priority.LOW

    def test_open_missing_task(self, context):
        with pytest.raises(NotFoundError):
            context.open_task(42)
        assert not context.session.is_open

    def test_delete_open_task_closes_session(self, context):
        task = context.create("t")
        context.open_task(task.id)
        assert context.delete(task.id) is True
        assert not context.session.is_open

    def test_subtasks_through_context(self, context):
        task = context.create("t")
        context.open_task(task.id)
        context.add_subtask("a")
        context.toggle_subtask(0)
        context.close_task()
        assert task.subtasks[0].completed is True

    def test_filter(self, context):
        assert context.filter is PriorityFilter.ALL
        assert context.set_filter("medium") is PriorityFilter.MEDIUM
        with pytest.raises(ValidationError):
            context.set_filter("urgent")
        assert context.filter is PriorityFilter.MEDIUM
        assert context.clear_filter() is PriorityFilter.ALL

    def test_toggle_completed_section(self, context):
        assert context.view.show_completed is True
        assert context.toggle_completed_section_visibility() is False
        assert context.toggle_completed_section_visibility() is True

    def test_snapshot(self, context, today):
        overdue = context.create("late", due_date=today - timedelta(days=1), priority="high")
        tomorrow = context.create("next", due_date=today + timedelta(days=1), priority="low")
        done = context.create("done", priority="low")
        context.toggle_completed(done.id)
        context.set_filter("high")

        board = context.snapshot(today)
        assert board.day == today
        assert board.classification.overdue == [overdue]
        assert board.classification.tomorrow == []
        assert board.classification.completed == [done]
        assert board.summary.overdue_count == 1
        assert tomorrow in context.store.list()
