"""
Shared fixtures for roster tests.
"""

import pytest

from student_roster.core.roster_config import LocalStoreConfig
from student_roster.integrations.roster.local_store import LocalRecordStore, MemoryStorage
from student_roster.integrations.roster.seed_data import SEED_STUDENTS
from student_roster.schemas.student import StudentRecord
from student_roster.services.backend_selector import BackendSelector
from student_roster.services.sync.sync_orchestrator import SyncOrchestrator


@pytest.fixture
def memory_storage():
    """Key-value storage that never touches the filesystem."""
    return MemoryStorage()


@pytest.fixture
def local_store(memory_storage):
    """Local store without simulated latency."""
    return LocalRecordStore(LocalStoreConfig(path=None, latency=0), storage=memory_storage)


@pytest.fixture
def local_selector(local_store):
    return BackendSelector(local_store)


@pytest.fixture
def orchestrator(local_selector):
    return SyncOrchestrator(local_selector, poll_interval=3600)


@pytest.fixture
def seed_records():
    return [StudentRecord.model_validate(s) for s in SEED_STUDENTS]


@pytest.fixture
def new_student():
    return StudentRecord(
        student_id="S010",
        student_name="Meera Iyer",
        father_name="Suresh Iyer",
        class_name="V",
        section="RISHI",
        roll_no="12",
        phone_number="9000011111",
        email_id="meera@example.com",
    )
