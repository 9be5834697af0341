"""
This module provides a suite store backed by Minio object storage.
Each suite is stored as a JSON object at 'suites/{suite_id}.json' in the configured bucket.
"""
import json
import logging
import threading
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional

from minio import Minio
from minio.error import S3Error

from models.test_case import Suite, SuiteSummary, TestCase
from storage.suite_store import SuiteStore, new_suite_id
from utils.exceptions import StorageError, SuiteNotFoundError

logger = logging.getLogger(__name__)

SUITE_PREFIX = "suites/"
# S3 error codes that mean "no such object" (or no bucket yet) rather than a storage failure.
_MISSING_CODES = {"NoSuchKey", "NoSuchObject", "NoSuchBucket"}


def _suite_path(suite_id: str) -> str:
    return f"{SUITE_PREFIX}{suite_id}.json"


class MinioSuiteStore(SuiteStore):
    """
    Suite store persisting suites in a Minio bucket.

    Mutations are serialized with a lock; reads return freshly deserialized suites,
    which are independent snapshots by construction.
    """

    def __init__(self, client: Minio, bucket: str):
        """
        Args:
            client (Minio): A configured Minio client.
            bucket (str): The bucket that holds suite objects. Created on first write if missing.
        """
        self.client = client
        self.bucket = bucket
        self._lock = threading.Lock()
        self._bucket_checked = False

    @classmethod
    def from_config(cls, config) -> "MinioSuiteStore":
        if not (config.minio_endpoint and config.minio_access_key and config.minio_secret_key):
            raise StorageError("MINIO_ENDPOINT, MINIO_ACCESS_KEY and MINIO_SECRET_KEY must be set for the 'minio' suite store.")
        client = Minio(
            config.minio_endpoint,
            access_key=config.minio_access_key,
            secret_key=config.minio_secret_key,
            secure=config.minio_secure,
        )
        return cls(client, config.minio_bucket)

    def _ensure_bucket(self) -> None:
        if self._bucket_checked:
            return
        if not self.client.bucket_exists(self.bucket):
            logger.info(f"Bucket '{self.bucket}' not found. Creating it...")
            self.client.make_bucket(self.bucket)
        self._bucket_checked = True

    def _upload_json(self, path: str, data_dict: Dict[str, Any]) -> None:
        content = json.dumps(data_dict, ensure_ascii=False, indent=2).encode("utf-8")
        try:
            self._ensure_bucket()
            self.client.put_object(self.bucket, path, data=BytesIO(content), length=len(content),
                                   content_type="application/json")
        except S3Error as e:
            raise StorageError(f"Failed to upload to Minio bucket '{self.bucket}', path '{path}': {e}") from e

    def _download_json(self, path: str) -> Optional[Dict[str, Any]]:
        """Returns the decoded JSON object at `path`, or None if it does not exist."""
        response = None
        try:
            response = self.client.get_object(self.bucket, path)
            return json.loads(response.read().decode("utf-8"))
        except S3Error as e:
            if e.code in _MISSING_CODES:
                return None
            raise StorageError(f"Failed to download from Minio bucket '{self.bucket}', path '{path}': {e}") from e
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    def _exists(self, path: str) -> bool:
        try:
            self.client.stat_object(self.bucket, path)
            return True
        except S3Error as e:
            if e.code in _MISSING_CODES:
                return False
            raise StorageError(f"Failed to stat Minio object '{path}' in bucket '{self.bucket}': {e}") from e

    def list(self) -> List[SuiteSummary]:
        try:
            if not self.client.bucket_exists(self.bucket):
                return []
            objects = list(self.client.list_objects(self.bucket, prefix=SUITE_PREFIX))
        except S3Error as e:
            raise StorageError(f"Failed to list suites in Minio bucket '{self.bucket}': {e}") from e

        summaries = []
        for obj in objects:
            data = self._download_json(obj.object_name)
            if data is not None:
                summaries.append(SuiteSummary(id=data["id"], name=data["name"]))
        return summaries

    def create(self, name: str, suite_id: Optional[str] = None) -> SuiteSummary:
        with self._lock:
            if suite_id is None:
                suite_id = new_suite_id()
                while self._exists(_suite_path(suite_id)):
                    suite_id = new_suite_id()
            elif self._exists(_suite_path(suite_id)):
                raise ValueError(f"Suite id '{suite_id}' already exists")
            suite = Suite(id=suite_id, name=name)
            self._upload_json(_suite_path(suite_id), suite.to_dict())
            logger.info(f"Created suite {suite_id} '{name}'")
            return suite.summary

    def delete(self, suite_id: str) -> bool:
        with self._lock:
            path = _suite_path(suite_id)
            if not self._exists(path):
                return False
            try:
                self.client.remove_object(self.bucket, path)
            except S3Error as e:
                raise StorageError(f"Failed to delete Minio object '{path}' in bucket '{self.bucket}': {e}") from e
            logger.info(f"Deleted suite {suite_id}")
            return True

    def get(self, suite_id: str) -> Optional[Suite]:
        data = self._download_json(_suite_path(suite_id))
        return Suite.from_dict(data) if data is not None else None

    def add_test_cases(self, suite_id: str, test_cases: Iterable[TestCase]) -> Suite:
        with self._lock:
            suite = self.get(suite_id)
            if suite is None:
                raise SuiteNotFoundError(suite_id)
            suite.test_cases.extend(test_cases)
            self._upload_json(_suite_path(suite_id), suite.to_dict())
            return suite
