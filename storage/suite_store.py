"""
This module defines the suite store interface and its in-memory implementation.

A suite store holds named suites of test cases keyed by suite identifier. Stores
serialize mutations with a lock and hand out snapshots, so a generation call that
resolved a suite is not affected by later changes or deletion of that suite.
"""
import threading
import time
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from models.test_case import Suite, SuiteSummary, TestCase
from utils.exceptions import StorageError, SuiteNotFoundError


def new_suite_id() -> str:
    """
    Generates a suite identifier: a millisecond timestamp for readability, followed by
    random bits so that suites created in the same instant still get distinct ids.
    """
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


class SuiteStore(ABC):
    """
    Abstract base class for suite stores.
    """

    @abstractmethod
    def list(self) -> List[SuiteSummary]:
        """Returns the id and name of every suite."""

    @abstractmethod
    def create(self, name: str, suite_id: Optional[str] = None) -> SuiteSummary:
        """
        Registers a new, empty suite.

        Args:
            name (str): Display name of the suite.
            suite_id (Optional[str]): Identifier to use. Generated when omitted.

        Raises:
            ValueError: If `suite_id` is already taken.
        """

    @abstractmethod
    def delete(self, suite_id: str) -> bool:
        """Removes a suite. Returns True iff it existed."""

    @abstractmethod
    def get(self, suite_id: str) -> Optional[Suite]:
        """Returns a snapshot of the suite, or None if it does not exist."""

    @abstractmethod
    def add_test_cases(self, suite_id: str, test_cases: Iterable[TestCase]) -> Suite:
        """
        Appends test cases to an existing suite and returns a snapshot of the result.

        Raises:
            SuiteNotFoundError: If the suite does not exist.
        """


class InMemorySuiteStore(SuiteStore):
    """
    Suite store backed by a dictionary. Suitable for a single process.
    """

    def __init__(self):
        self._suites: Dict[str, Suite] = {}
        self._lock = threading.RLock()

    def list(self) -> List[SuiteSummary]:
        with self._lock:
            return [suite.summary for suite in self._suites.values()]

    def create(self, name: str, suite_id: Optional[str] = None) -> SuiteSummary:
        with self._lock:
            if suite_id is None:
                suite_id = new_suite_id()
                while suite_id in self._suites:
                    suite_id = new_suite_id()
            elif suite_id in self._suites:
                raise ValueError(f"Suite id '{suite_id}' already exists")
            suite = Suite(id=suite_id, name=name)
            self._suites[suite_id] = suite
            return suite.summary

    def delete(self, suite_id: str) -> bool:
        with self._lock:
            return self._suites.pop(suite_id, None) is not None

    def get(self, suite_id: str) -> Optional[Suite]:
        with self._lock:
            suite = self._suites.get(suite_id)
            return suite.snapshot() if suite is not None else None

    def add_test_cases(self, suite_id: str, test_cases: Iterable[TestCase]) -> Suite:
        with self._lock:
            suite = self._suites.get(suite_id)
            if suite is None:
                raise SuiteNotFoundError(suite_id)
            suite.test_cases.extend(test_cases)
            return suite.snapshot()


def get_suite_store(config) -> SuiteStore:
    """
    Factory function returning the suite store selected by `config.suite_store`.

    Raises:
        StorageError: If the configured store is unsupported or MinIO settings are missing.
    """
    if config.suite_store == "memory":
        return InMemorySuiteStore()
    elif config.suite_store == "minio":
        # Imported here so the in-memory store works without a MinIO server configured.
        from storage.minio_suite_store import MinioSuiteStore
        return MinioSuiteStore.from_config(config)
    else:
        raise StorageError(f"Unsupported SUITE_STORE: {config.suite_store}. Must be 'memory' or 'minio'.")
