"""
Sync Orchestrator

Owns the in-memory roster and drives every data operation against the active
backend:
- Fetch on session readiness and on a fixed polling interval
- Write-then-reconcile for create, update and delete
- Visible error state that never destroys the previous roster
- Subscription contract so views recompute when the roster changes
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from student_roster.integrations.roster.error_handler import (
    RosterBusyError, RosterError, RosterErrorHandler
)
from student_roster.integrations.roster.session import SessionBootstrap
from student_roster.schemas.student import StudentRecord
from student_roster.services.backend_selector import BackendSelector
from student_roster.services.sync.record_validator import ensure_valid

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 20.0


class SyncState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class RosterSnapshot:
    """Immutable view of the orchestrator state handed to listeners."""
    students: Tuple[StudentRecord, ...]
    state: SyncState
    error: Optional[str]
    is_loading: bool
    is_saving: bool
    is_deleting: bool
    last_loaded_at: Optional[datetime]


@dataclass
class OperationResult:
    """Outcome of a save or delete. ``success`` tells the caller to close its form."""
    success: bool
    error: Optional[str] = None
    cancelled: bool = False
    students: List[StudentRecord] = field(default_factory=list)


Listener = Callable[[RosterSnapshot], None]
ConfirmCallback = Callable[[str], Union[bool, Awaitable[bool]]]


def normalize_roster(records: Iterable[StudentRecord]) -> List[StudentRecord]:
    """Backfill missing ids and make sure display fields are strings."""
    normalized = []
    for index, record in enumerate(records):
        normalized.append(record.model_copy(update={
            'id': record.id or record.student_id or f"temp-{index}",
            'roll_no': str(record.roll_no or ''),
            'phone_number': str(record.phone_number or ''),
        }))
    return normalized


def _error_text(error: Exception) -> str:
    if isinstance(error, RosterError):
        return error.message
    return str(error) or type(error).__name__


class SyncOrchestrator:
    """Single owner of the raw roster and its loading/saving/error flags."""

    def __init__(
        self,
        selector: BackendSelector,
        session: Optional[SessionBootstrap] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        confirm: Optional[ConfirmCallback] = None,
        error_handler: Optional[RosterErrorHandler] = None
    ):
        self.selector = selector
        self.session = session
        self.poll_interval = poll_interval
        self.error_handler = error_handler or RosterErrorHandler()
        self._confirm = confirm

        self._students: Tuple[StudentRecord, ...] = ()
        self._state = SyncState.UNLOADED
        self._error: Optional[str] = None
        self._loads_in_flight = 0
        self._is_saving = False
        self._is_deleting = False
        self._last_loaded_at: Optional[datetime] = None

        self._listeners: List[Listener] = []
        self._poll_task: Optional[asyncio.Task] = None

    # State

    @property
    def students(self) -> Tuple[StudentRecord, ...]:
        return self._students

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._loads_in_flight > 0

    @property
    def is_saving(self) -> bool:
        return self._is_saving

    @property
    def is_deleting(self) -> bool:
        return self._is_deleting

    @property
    def last_loaded_at(self) -> Optional[datetime]:
        return self._last_loaded_at

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def snapshot(self) -> RosterSnapshot:
        return RosterSnapshot(
            students=self._students,
            state=self._state,
            error=self._error,
            is_loading=self.is_loading,
            is_saving=self._is_saving,
            is_deleting=self._is_deleting,
            last_loaded_at=self._last_loaded_at,
        )

    def status(self) -> Dict[str, Any]:
        return {
            'state': self._state.value,
            'error': self._error,
            'is_loading': self.is_loading,
            'is_saving': self._is_saving,
            'is_deleting': self._is_deleting,
            'is_polling': self.is_polling,
            'backend': self.selector.backend_type.value,
            'mock_data_mode': self.selector.is_local,
            'total_students': len(self._students),
            'last_loaded_at': self._last_loaded_at.isoformat() if self._last_loaded_at else None,
            'identity': self.session.identity if self.session else None,
        }

    def get_student(self, record_id: str) -> Optional[StudentRecord]:
        for student in self._students:
            if student.id == record_id:
                return student
        return None

    def clear_error(self) -> None:
        if self._error is not None:
            self._error = None
            self._notify()

    # Subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Roster listener {listener!r} failed: {e}")

    def _replace_roster(self, records: Iterable[StudentRecord]) -> None:
        self._students = tuple(normalize_roster(records))

    # Load

    async def load(self) -> bool:
        """
        Read the roster from the active backend and replace the in-memory copy.

        Returns:
            True if the roster was replaced. On failure the error is recorded
            and the previous roster is kept.
        """
        self._loads_in_flight += 1
        if self._state == SyncState.UNLOADED:
            self._state = SyncState.LOADING
        self._error = None
        self._notify()

        try:
            records = await self.selector.read()
        except Exception as e:
            self.error_handler.log_error(e, {'operation_type': 'load'})
            self._error = _error_text(e)
            if self._state == SyncState.LOADING and not self._last_loaded_at:
                self._state = SyncState.UNLOADED
            return False
        else:
            self._replace_roster(records)
            self._state = SyncState.READY
            self._last_loaded_at = datetime.utcnow()
            logger.debug(f"Roster loaded with {len(self._students)} students")
            return True
        finally:
            self._loads_in_flight -= 1
            self._notify()

    refresh = load

    # Mutations

    async def save(self, record: StudentRecord) -> OperationResult:
        """
        Create or update ``record`` and reconcile the roster from the backend.

        Raises:
            RosterBusyError: another save is in flight
            RosterValidationError: the record may not be saved; no backend call is made
        """
        if self._is_saving:
            raise RosterBusyError("A save is already in progress.", operation_type='save')
        ensure_valid(record, self._students)

        self._is_saving = True
        self._error = None
        self._notify()

        try:
            records = await self.selector.write(record)
        except Exception as e:
            self.error_handler.log_error(e, {'operation_type': 'save'})
            self._error = f"Failed to save record: {_error_text(e)}"
            return OperationResult(success=False, error=self._error, students=list(self._students))
        else:
            self._replace_roster(records)
            self._state = SyncState.READY
            logger.info(f"Saved student {record.student_id}")
            return OperationResult(success=True, students=list(self._students))
        finally:
            self._is_saving = False
            self._notify()

    async def delete(self, record_id: str, confirm: Optional[ConfirmCallback] = None) -> OperationResult:
        """
        Delete a record after the confirmation collaborator agrees.

        Args:
            record_id: ``id`` of the record to delete
            confirm: Overrides the orchestrator-level confirmation callback

        Raises:
            RosterBusyError: another delete is in flight
        """
        if self._is_deleting:
            raise RosterBusyError("A delete is already in progress.", operation_type='delete')

        confirmer = confirm or self._confirm
        if confirmer is not None:
            answer = confirmer(record_id)
            if inspect.isawaitable(answer):
                answer = await answer
            if not answer:
                logger.info(f"Deletion of {record_id} was not confirmed")
                return OperationResult(success=False, cancelled=True, students=list(self._students))

        self._is_deleting = True
        self._error = None
        self._notify()

        try:
            records = await self.selector.remove(record_id)
        except Exception as e:
            self.error_handler.log_error(e, {'operation_type': 'delete'})
            self._error = f"Failed to delete record: {_error_text(e)}"
            return OperationResult(success=False, error=self._error, students=list(self._students))
        else:
            self._replace_roster(records)
            self._state = SyncState.READY
            logger.info(f"Deleted student record {record_id}")
            return OperationResult(success=True, students=list(self._students))
        finally:
            self._is_deleting = False
            self._notify()

    # Polling

    def start_polling(self, load_immediately: bool = True) -> asyncio.Task:
        """
        (Re)arm the single polling task. Any previous task is cancelled first.

        Args:
            load_immediately: load as soon as the session is ready instead of
                waiting one interval
        """
        self._cancel_poll_task()
        self._poll_task = asyncio.create_task(self._poll_loop(load_immediately))
        return self._poll_task

    async def stop_polling(self) -> None:
        task = self._cancel_poll_task()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _cancel_poll_task(self) -> Optional[asyncio.Task]:
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done():
            task.cancel()
            return task
        return None

    async def _poll_loop(self, load_immediately: bool) -> None:
        logger.info(f"Started roster polling every {self.poll_interval}s")
        if self.session is not None:
            await self.session.wait_ready()

        if load_immediately:
            await self.load()

        while True:
            await asyncio.sleep(self.poll_interval)
            await self.load()
