"""
Backend selector: picks the roster data source once and exposes it uniformly.
"""

import logging
from typing import List

from student_roster.core.config import Settings
from student_roster.core.roster_config import (
    BackendType, BaseRosterBackend, RosterBackendProtocol,
    resolve_backend_type, remote_config_from_settings, local_config_from_settings
)
from student_roster.integrations.roster.local_store import LocalRecordStore
from student_roster.integrations.roster.remote_gateway import RemoteRosterGateway
from student_roster.schemas.student import StudentRecord


logger = logging.getLogger(__name__)


class BackendSelector:
    """
    Uniform ``read`` / ``write`` / ``remove`` over the single active backend.

    Every operation returns the full resulting roster. Errors from the backend
    propagate unchanged.
    """

    def __init__(self, backend: BaseRosterBackend):
        if not isinstance(backend, RosterBackendProtocol):
            raise TypeError(f"{type(backend).__name__} does not implement the roster backend protocol")
        self._backend = backend
        self._started = False

    @classmethod
    def from_settings(cls, settings: Settings, storage=None) -> "BackendSelector":
        backend_type = resolve_backend_type(settings.ROSTER_API_URL)
        if backend_type == BackendType.LOCAL:
            backend = LocalRecordStore(local_config_from_settings(settings), storage=storage)
            logger.warning(
                "MOCK DATA MODE: no roster API URL configured, records are kept in the local store only"
            )
        else:
            backend = RemoteRosterGateway(remote_config_from_settings(settings))
            logger.info(f"Using remote roster endpoint {settings.ROSTER_API_URL}")
        return cls(backend)

    @property
    def backend(self) -> BaseRosterBackend:
        return self._backend

    @property
    def backend_type(self) -> BackendType:
        return self._backend.backend_type

    @property
    def is_local(self) -> bool:
        return self.backend_type == BackendType.LOCAL

    async def start(self) -> None:
        if not self._started:
            await self._backend.__aenter__()
            self._started = True

    async def close(self) -> None:
        if self._started:
            await self._backend.__aexit__(None, None, None)
            self._started = False

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def read(self) -> List[StudentRecord]:
        return await self._backend.read()

    async def write(self, record: StudentRecord) -> List[StudentRecord]:
        return await self._backend.write(record)

    async def remove(self, record_id: str) -> List[StudentRecord]:
        return await self._backend.remove(record_id)
