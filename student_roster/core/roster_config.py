"""
Roster backend configuration and the capability interface shared by backends.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Protocol, runtime_checkable
from pydantic import BaseModel, validator
from enum import Enum

from student_roster.core.config import Settings, PLACEHOLDER_API_URL
from student_roster.schemas.student import StudentRecord


class BackendType(str, Enum):
    """Supported roster data sources."""
    LOCAL = "local"
    REMOTE = "remote"


class RemoteEndpointConfig(BaseModel):
    """Configuration for the remote tabular endpoint."""
    url: str
    timeout: int = 30
    max_retries: int = 3
    retry_base_delay: float = 1.0

    @validator('url')
    def validate_url(cls, v):
        if not v.startswith(('http://', 'https://')):
            raise ValueError('Roster API URL must start with http:// or https://')
        return v

    @validator('max_retries')
    def validate_max_retries(cls, v):
        if v < 0:
            raise ValueError('max_retries must not be negative')
        return v


class LocalStoreConfig(BaseModel):
    """Configuration for the local record store."""
    path: Optional[str] = "./roster_store.json"
    key: str = "mockStudents"
    latency: float = 0.5

    @validator('latency')
    def validate_latency(cls, v):
        if v < 0:
            raise ValueError('latency must not be negative')
        return v


@runtime_checkable
class RosterBackendProtocol(Protocol):
    """Protocol that every roster backend must follow."""

    async def read(self) -> List[StudentRecord]:
        """Return the full roster."""
        ...

    async def write(self, record: StudentRecord) -> List[StudentRecord]:
        """Create or update a record and return the full resulting roster."""
        ...

    async def remove(self, record_id: str) -> List[StudentRecord]:
        """Delete a record and return the full resulting roster."""
        ...


class BaseRosterBackend(ABC):
    """Base class for roster backends."""

    backend_type: BackendType

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    @abstractmethod
    async def read(self) -> List[StudentRecord]:
        pass

    @abstractmethod
    async def write(self, record: StudentRecord) -> List[StudentRecord]:
        pass

    @abstractmethod
    async def remove(self, record_id: str) -> List[StudentRecord]:
        pass


def resolve_backend_type(api_url: Optional[str]) -> BackendType:
    """The placeholder URL (or no URL at all) selects the local store."""
    if not api_url or api_url.strip() in ("", PLACEHOLDER_API_URL):
        return BackendType.LOCAL
    return BackendType.REMOTE


def remote_config_from_settings(settings: Settings) -> RemoteEndpointConfig:
    return RemoteEndpointConfig(
        url=settings.ROSTER_API_URL,
        timeout=settings.ROSTER_REQUEST_TIMEOUT,
        max_retries=settings.ROSTER_MAX_RETRIES,
        retry_base_delay=settings.ROSTER_RETRY_BASE_DELAY,
    )


def local_config_from_settings(settings: Settings) -> LocalStoreConfig:
    return LocalStoreConfig(
        path=settings.LOCAL_STORE_PATH or None,
        key=settings.LOCAL_STORE_KEY,
        latency=settings.LOCAL_STORE_LATENCY_SECONDS,
    )
