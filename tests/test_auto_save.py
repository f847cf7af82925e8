"""
Tests for the event bus and the auto-save listener.
"""
import json

import pytest

from imihigo.exceptions import StorageError
from imihigo.managers import mutator
from imihigo.managers.autosave import AutoSaveListener
from imihigo.managers.events import (
    EventBus,
    EventListener,
    EventType,
    RepositoryEvent,
)
from imihigo.managers.repository import TemplateRepository
from imihigo.managers.storage_manager import StorageManager


class FailingListener(EventListener):
    @property
    def subscribed_events(self):
        return [EventType.SELECTION_CHANGED]

    def handle(self, event):
        raise RuntimeError("boom")


class CountingListener(EventListener):
    def __init__(self):
        self.count = 0

    @property
    def subscribed_events(self):
        return [EventType.SELECTION_CHANGED]

    def handle(self, event):
        self.count += 1


@pytest.fixture
def storage(data_dir):
    return StorageManager(data_dir=data_dir)


@pytest.fixture
def repository(storage, sample_contract):
    repo = TemplateRepository([sample_contract], 0)
    repo.event_bus.subscribe(AutoSaveListener(storage, repo))
    return repo


class TestEventBus:
    """Test publish/subscribe."""

    def test_subscribe_is_idempotent(self):
        bus = EventBus()
        listener = CountingListener()
        bus.subscribe(listener)
        bus.subscribe(listener)
        bus.publish(RepositoryEvent(type=EventType.SELECTION_CHANGED))
        assert listener.count == 1

    def test_unsubscribe(self):
        bus = EventBus()
        listener = CountingListener()
        bus.subscribe(listener)
        bus.unsubscribe(listener)
        bus.publish(RepositoryEvent(type=EventType.SELECTION_CHANGED))
        assert listener.count == 0

    def test_failing_listener_does_not_stop_others(self, capsys):
        bus = EventBus()
        counting = CountingListener()
        bus.subscribe(FailingListener())
        bus.subscribe(counting)
        bus.publish(RepositoryEvent(type=EventType.SELECTION_CHANGED))
        assert counting.count == 1
        assert "FailingListener failed: boom" in capsys.readouterr().err

    def test_other_event_types_are_not_delivered(self):
        bus = EventBus()
        listener = CountingListener()
        bus.subscribe(listener)
        bus.publish(RepositoryEvent(type=EventType.TEMPLATES_CHANGED))
        assert listener.count == 0


class TestAutoSaveListener:
    """Test that repository changes reach the data directory."""

    def test_append_writes_templates_and_selection(self, repository, storage, second_contract):
        repository.append(second_contract)
        assert storage.load_templates()[1] == second_contract
        assert storage.load_selected_index() == 1

    def test_point_update_is_saved(self, repository, storage):
        repository.apply(mutator.set_achievement, "ind-1", 4, 250)
        saved = storage.load_templates()[0]
        assert saved.get_indicator("ind-1").quarter(4).achievement == 250

    def test_deselect_removes_selection_file(self, repository, storage):
        repository.select(0)
        assert storage.selected_index_path.exists()
        repository.select(None)
        assert not storage.selected_index_path.exists()

    def test_disabled_listener_writes_nothing(self, storage, sample_contract, second_contract):
        repo = TemplateRepository([sample_contract], 0)
        repo.event_bus.subscribe(AutoSaveListener(storage, repo, enabled=False))
        repo.select(0)
        repo.append(second_contract)
        assert not storage.templates_path.exists()
        assert not storage.selected_index_path.exists()

    def test_write_failure_is_reported(self, repository, storage, monkeypatch, capsys):
        def fail(templates):
            raise StorageError("read-only")

        monkeypatch.setattr(storage, "save_templates", fail)
        repository.apply(mutator.rename_node, "p-1", "Economy")

        assert repository.get(0).get_node("p-1").name == "Economy"
        assert "Failed to save templates: read-only" in capsys.readouterr().err

    def test_saved_file_is_plain_json(self, repository, storage):
        repository.select(0)
        assert json.loads(storage.selected_index_path.read_text()) == {"selected_index": 0}
