"""
Local record store used when no remote endpoint is configured.

The roster lives as a JSON-serialized array under a single named key of a
key-value storage. Every operation rewrites the whole array before returning.
"""

import asyncio
import copy
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Dict, Any, List, Optional

from pydantic import ValidationError

from student_roster.core.roster_config import BaseRosterBackend, BackendType, LocalStoreConfig
from student_roster.integrations.roster.error_handler import RosterStorageError
from student_roster.integrations.roster.seed_data import SEED_STUDENTS
from student_roster.schemas.student import StudentRecord


logger = logging.getLogger(__name__)


class MemoryStorage:
    """Key-value storage that lives for the process only."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Key-value storage persisted as one JSON object in a file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise RosterStorageError(
                f"Could not read local store {self.path}: {e}",
                original_exception=e
            )
        if not isinstance(data, dict):
            raise RosterStorageError(f"Local store {self.path} is not a JSON object")
        return data

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file and rename so the slot is never half-written
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix='.roster-', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)


class LocalRecordStore(BaseRosterBackend):
    """Roster backend persisted in a local key-value slot."""

    backend_type = BackendType.LOCAL

    def __init__(self, config: Optional[LocalStoreConfig] = None, storage=None):
        self.config = config or LocalStoreConfig(path=None)
        if storage is None:
            storage = JsonFileStorage(self.config.path) if self.config.path else MemoryStorage()
        self.storage = storage
        self._last_stamp = 0

    async def read(self) -> List[StudentRecord]:
        await self._simulate_latency()
        data = self._load_students()
        self._save_students(data)
        return self._to_records(data)

    async def write(self, record: StudentRecord) -> List[StudentRecord]:
        await self._simulate_latency()
        students = self._load_students()
        payload = record.to_payload()

        index = self._index_of(students, record.id) if record.id else None
        if index is not None:
            students[index] = payload
            logger.info(f"Updated student record {record.id} in local store")
        else:
            payload['id'] = self._generate_id(len(students))
            students.append(payload)
            logger.info(f"Added student record {payload['id']} to local store")

        self._save_students(students)
        return self._to_records(students)

    async def remove(self, record_id: str) -> List[StudentRecord]:
        await self._simulate_latency()
        students = self._load_students()
        remaining = [s for s in students if str(s.get('id')) != str(record_id)]

        if len(remaining) == len(students):
            logger.debug(f"Student record {record_id} not present in local store")
        else:
            logger.info(f"Removed student record {record_id} from local store")

        self._save_students(remaining)
        return self._to_records(remaining)

    async def _simulate_latency(self) -> None:
        if self.config.latency > 0:
            await asyncio.sleep(self.config.latency)

    def _load_students(self) -> List[Dict[str, Any]]:
        raw = self.storage.get_item(self.config.key)
        if raw is None:
            logger.info(f"Local store slot '{self.config.key}' is empty, seeding roster")
            return copy.deepcopy(SEED_STUDENTS)
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise RosterStorageError(
                f"Local store slot '{self.config.key}' holds invalid JSON",
                original_exception=e
            )
        if not isinstance(data, list):
            raise RosterStorageError(f"Local store slot '{self.config.key}' does not hold a list")
        return data

    def _save_students(self, students: List[Dict[str, Any]]) -> None:
        self.storage.set_item(self.config.key, json.dumps(students))

    def _to_records(self, students: List[Dict[str, Any]]) -> List[StudentRecord]:
        try:
            return [StudentRecord.model_validate(s) for s in students]
        except ValidationError as e:
            raise RosterStorageError(
                f"Local store slot '{self.config.key}' holds an invalid record: {e}",
                original_exception=e
            )

    @staticmethod
    def _index_of(students: List[Dict[str, Any]], record_id: str) -> Optional[int]:
        for i, student in enumerate(students):
            if str(student.get('id')) == str(record_id):
                return i
        return None

    def _generate_id(self, count: int) -> str:
        # Sequence number plus a strictly increasing millisecond suffix so an
        # id freed by a delete is never handed out again
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        self._last_stamp = stamp
        return f"S{count + 1:03d}-{stamp}"
