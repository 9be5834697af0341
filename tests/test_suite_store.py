"""
Unit tests for the in-memory suite store and the store factory in `storage.suite_store`.
"""
import threading
from types import SimpleNamespace

import pytest

from models.test_case import SuiteSummary, TestCase
from storage.suite_store import InMemorySuiteStore, get_suite_store, new_suite_id
from utils.exceptions import StorageError, SuiteNotFoundError

CASE = TestCase(id="TC-001", title="Open the app", steps=["Launch"], expected_result="Home screen")


def test_create_returns_summary_and_lists_suite():
    store = InMemorySuiteStore()
    summary = store.create("Regression")
    assert summary.name == "Regression"
    assert store.list() == [summary]


def test_rapid_creation_yields_distinct_ids():
    store = InMemorySuiteStore()
    first = store.create("A")
    second = store.create("B")
    assert first.id != second.id


def test_concurrent_creation_yields_distinct_ids():
    store = InMemorySuiteStore()
    ids = []
    lock = threading.Lock()

    def create_many():
        for i in range(50):
            summary = store.create(f"suite {i}")
            with lock:
                ids.append(summary.id)

    threads = [threading.Thread(target=create_many) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(ids) == 400
    assert len(set(ids)) == 400
    assert len(store.list()) == 400


def test_new_suite_id_has_timestamp_prefix():
    prefix, _, suffix = new_suite_id().partition("-")
    assert prefix.isdigit()
    assert len(suffix) == 8


def test_create_with_supplied_id():
    store = InMemorySuiteStore()
    assert store.create("Smoke", suite_id="smoke") == SuiteSummary(id="smoke", name="Smoke")
    with pytest.raises(ValueError):
        store.create("Other", suite_id="smoke")


def test_new_suite_is_empty():
    store = InMemorySuiteStore()
    summary = store.create("Empty")
    suite = store.get(summary.id)
    assert suite is not None
    assert suite.test_cases == []


def test_delete_is_idempotent_observable():
    store = InMemorySuiteStore()
    summary = store.create("Temp")
    assert store.delete(summary.id) is True
    assert store.delete(summary.id) is False
    assert store.delete("never-existed") is False
    assert store.get(summary.id) is None


def test_get_unknown_suite_returns_none():
    assert InMemorySuiteStore().get("missing") is None


def test_add_test_cases_appends_in_order():
    store = InMemorySuiteStore()
    summary = store.create("Suite")
    second = TestCase(id="TC-002", title="Close the app", steps=["Quit"], expected_result="App closed")
    store.add_test_cases(summary.id, [CASE])
    suite = store.add_test_cases(summary.id, [second])
    assert [tc.id for tc in suite.test_cases] == ["TC-001", "TC-002"]


def test_add_test_cases_to_missing_suite_raises():
    with pytest.raises(SuiteNotFoundError):
        InMemorySuiteStore().add_test_cases("missing", [CASE])


def test_get_returns_snapshot_unaffected_by_later_changes():
    store = InMemorySuiteStore()
    summary = store.create("Suite")
    store.add_test_cases(summary.id, [CASE])
    snapshot = store.get(summary.id)

    store.add_test_cases(summary.id, [CASE.model_copy(update={"id": "TC-002"})])
    store.delete(summary.id)

    assert [tc.id for tc in snapshot.test_cases] == ["TC-001"]


def test_get_suite_store_factory():
    assert isinstance(get_suite_store(SimpleNamespace(suite_store="memory")), InMemorySuiteStore)
    with pytest.raises(StorageError):
        get_suite_store(SimpleNamespace(suite_store="redis"))
