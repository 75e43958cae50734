"""Tests for TaskStore."""

import json
import pytest
from datetime import date, time

from daylist.data.gateway import MemoryGateway
from daylist.models import Priority, TaskPatch
from daylist.recovery import ValidationError
from daylist.store import TaskStore


class TestCreate:

    def test_create_defaults(self, store, gateway):
        """Test a new task is pending, has no subtasks and is saved."""
        task = store.create("  Buy milk  ", "  2 litres ", priority="medium")
        assert task.title == "Buy milk"
        assert task.description == "2 litres"
        assert task.priority == Priority.MEDIUM
        assert task.completed is False
        assert task.subtasks == []
        assert store.list() == (task,)
        assert gateway.save_count == 1

    def test_create_with_due(self, store):
        task = store.create("Dentist", due_date="2026-10-20", due_time="09:30")
        assert task.due_date == date(2026, 10, 20)
        assert task.due_time == time(9, 30)

    def test_empty_title_rejected(self, store, gateway):
        """Test a blank title fails without touching the collection or saving."""
        with pytest.raises(ValidationError):
            store.create("")
        with pytest.raises(ValidationError):
            store.create("   ")
        assert len(store) == 0
        assert gateway.save_count == 0

    def test_bad_date_rejected(self, store, gateway):
        with pytest.raises(ValidationError):
            store.create("t", due_date="tomorrow-ish")
        assert len(store) == 0
        assert gateway.save_count == 0

    @pytest.mark.parametrize("due_time", ["09:00Z", "09:00+02:00"])
    def test_time_with_offset_rejected(self, store, gateway, due_time):
        """Test a due time with a UTC offset is refused before it reaches the collection."""
        plain = store.create("plain", due_date="2026-10-17")
        with pytest.raises(ValidationError, match="UTC offset"):
            store.create("aware", due_date="2026-10-17", due_time=due_time)
        assert store.list() == (plain,)
        assert gateway.save_count == 1

        store.create("third")
        assert len(store) == 2
        assert gateway.save_count == 2

    def test_seconds_dropped_from_due_time(self, store, gateway):
        """Test a time with seconds is kept as hour:minute, matching what is saved."""
        task = store.create("t", due_date="2026-10-17", due_time="09:30:45")
        assert task.due_time == time(9, 30)
        assert TaskStore.load(gateway).list() == store.list()

    def test_ids_unique_with_stopped_clock(self, store):
        """Test ids stay distinct when the clock does not move."""
        ids = [store.create(f"task {n}").id for n in range(50)]
        assert len(set(ids)) == 50

    def test_ids_follow_clock(self, store, clock):
        first = store.create("a")
        assert first.id == int(clock.now * 1000)
        clock.now += 5
        assert store.create("b").id == first.id + 5000

    def test_ids_after_loaded_tasks(self, clock, make_task):
        """Test new ids never reuse an id loaded from storage."""
        gateway = MemoryGateway()
        big = int(clock.now * 1000) + 10_000
        gateway.save_all([make_task(id=big)])
        store = TaskStore.load(gateway, clock=clock)
        assert store.create("new").id == big + 1


class TestMutations:

    def test_toggle_completed(self, store, gateway):
        task = store.create("t")
        assert store.toggle_completed(task.id).completed is True
        assert store.toggle_completed(task.id).completed is False
        assert gateway.save_count == 3

    def test_toggle_missing_is_noop(self, store):
        store.create("t")
        assert store.toggle_completed(12345) is None
        assert all(not t.completed for t in store.list())

    def test_delete(self, store):
        keep = store.create("keep")
        drop = store.create("drop")
        assert store.delete(drop.id) is True
        assert store.list() == (keep,)
        assert store.get(drop.id) is None

    def test_delete_missing_is_noop(self, store):
        store.create("t")
        assert store.delete(999) is False
        assert len(store) == 1

    def test_update(self, store):
        task = store.create("old", "desc", due_date="2026-10-17")
        patch = TaskPatch.from_edits({"title": "new", "dueDate": None})
        updated = store.update(task.id, patch)
        assert updated is task
        assert task.title == "new"
        assert task.description == "desc"
        assert task.due_date is None

    def test_update_missing_is_noop(self, store):
        task = store.create("t")
        assert store.update(task.id + 1, TaskPatch.from_edits({"title": "x"})) is None
        assert task.title == "t"


class TestPersist:

    def test_saved_in_default_order(self, store, gateway):
        """Test the stored collection is always sorted."""
        undated = store.create("undated", priority="high")
        later = store.create("later", due_date="2026-10-20")
        sooner = store.create("sooner", due_date="2026-10-18", due_time="08:00")

        saved = json.loads(gateway.text)
        assert [t["id"] for t in saved] == [sooner.id, later.id, undated.id]
        assert [t.id for t in store.list()] == [sooner.id, later.id, undated.id]

    def test_reload(self, store, gateway):
        task = store.create("t", due_date="2026-10-18", priority="low")
        again = TaskStore.load(gateway)
        assert again.list() == (task,)
