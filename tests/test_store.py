# =============================================================================
# tests/test_store.py - Model Descriptor Store Tests
# =============================================================================
# Run with: pytest tests/test_store.py -v
# =============================================================================

import threading

import pytest
from pydantic import BaseModel

from app.exceptions import ModelNotFoundError
from core.models.model_info import ModelInfo
from lib.rwlock import ReadWriteLock
from registry.store import ModelStore


class Widget(BaseModel):
    name: str
    size: int = 1


def make_info(type_name: str = "widget", display_name: str = "Widget") -> ModelInfo:
    return ModelInfo(
        type_name=type_name,
        display_name=display_name,
        description=f"{display_name} records",
        data_shape=Widget,
        validator=object(),
    )


# =============================================================================
# Store Tests
# =============================================================================

class TestModelStore:
    """Tests for register / get / list / unregister."""

    def test_register_then_get(self, store):
        """A registered descriptor is returned by get()."""
        info = make_info()
        store.register(info)

        assert store.get("widget") is info
        assert store.is_registered("widget")
        assert "widget" in store
        assert len(store) == 1

    def test_get_unknown_raises(self, store):
        """Unknown types raise ModelNotFoundError (404)."""
        with pytest.raises(ModelNotFoundError) as exc_info:
            store.get("missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.code == "MODEL_NOT_FOUND"

    def test_register_empty_name_rejected(self, store):
        """An empty type name is a programming error."""
        with pytest.raises(ValueError):
            store.register(make_info(type_name=""))
        assert len(store) == 0

    def test_register_replaces_existing(self, store):
        """Re-registering a type replaces the whole entry."""
        store.register(make_info(display_name="Old"))
        store.register(make_info(display_name="New"))

        assert len(store) == 1
        assert store.get("widget").display_name == "New"

    def test_unregister(self, store):
        """Unregister removes the entry."""
        store.register(make_info())
        store.unregister("widget")

        assert not store.is_registered("widget")
        assert len(store) == 0

    def test_unregister_absent_changes_nothing(self, store):
        """Unregistering an unknown type raises and leaves the store intact."""
        store.register(make_info())

        with pytest.raises(ModelNotFoundError):
            store.unregister("missing")
        assert store.type_names() == ["widget"]

    def test_list_is_a_sorted_snapshot(self, store):
        """list() is sorted and unaffected by later changes."""
        store.register(make_info("zeta", "Zeta"))
        store.register(make_info("alpha", "Alpha"))

        snapshot = store.list()
        store.register(make_info("mid", "Mid"))

        assert [info.type_name for info in snapshot] == ["alpha", "zeta"]
        assert len(store) == 3

    def test_stats(self, store):
        store.register(make_info("a", "A"))
        store.register(make_info("b", "B"))

        assert store.stats() == {"total_models": 2, "model_types": ["a", "b"]}

    def test_concurrent_registration(self, store):
        """Parallel writers and readers leave every entry registered."""
        def register_many(prefix):
            for i in range(50):
                store.register(make_info(f"{prefix}_{i}", f"{prefix} {i}"))
                store.list()

        threads = [threading.Thread(target=register_many, args=(p,)) for p in "abcd"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 200


# =============================================================================
# ModelInfo Tests
# =============================================================================

class TestModelInfo:
    """Tests for the frozen descriptor."""

    def test_endpoint(self):
        assert make_info().endpoint == "/validate/widget"

    def test_new_instance_drops_unknown_keys(self):
        """Unknown keys are dropped; known keys are kept unvalidated."""
        instance = make_info().new_instance({"name": "gear", "size": "huge", "color": "red"})

        assert isinstance(instance, Widget)
        assert instance.name == "gear"
        assert instance.size == "huge"
        assert not hasattr(instance, "color")

    def test_new_instance_is_fresh(self):
        info = make_info()
        assert info.new_instance({"name": "a"}) is not info.new_instance({"name": "a"})

    def test_is_frozen(self):
        info = make_info()
        with pytest.raises(AttributeError):
            info.type_name = "other"

    def test_to_listing(self):
        listing = make_info().to_listing()

        assert listing["type"] == "widget"
        assert listing["name"] == "Widget"
        assert listing["endpoint"] == "/validate/widget"
        assert listing["version"] == "1.0.0"
        assert listing["author"] == "auto-registry"


# =============================================================================
# ReadWriteLock Tests
# =============================================================================

class TestReadWriteLock:
    """Tests for the reader-writer lock."""

    def test_readers_share(self):
        """Several readers can hold the lock at once."""
        lock = ReadWriteLock()
        lock.acquire_read()
        lock.acquire_read()

        assert lock.readers == 2

        lock.release_read()
        lock.release_read()
        assert lock.readers == 0

    def test_writer_waits_for_readers(self):
        """A writer blocks until the last reader releases."""
        lock = ReadWriteLock()
        acquired = threading.Event()

        def writer():
            with lock.write_locked():
                acquired.set()

        lock.acquire_read()
        thread = threading.Thread(target=writer)
        thread.start()

        assert not acquired.wait(0.1)

        lock.release_read()
        assert acquired.wait(2)
        thread.join()
