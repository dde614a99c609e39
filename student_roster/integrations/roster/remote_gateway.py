"""
Client for the remote tabular endpoint (a Google Apps Script web app over a sheet).

GET returns the roster as a JSON array. POST carries ``{"action", "data"}`` and
answers with a status only, so every successful mutation is followed by a full
read.
"""

import asyncio
import logging
from typing import Dict, Any, List, Optional

import aiohttp
from pydantic import ValidationError

from student_roster.core.roster_config import BaseRosterBackend, BackendType, RemoteEndpointConfig
from student_roster.integrations.roster.error_handler import (
    RosterNetworkError, RetryConfig, retry_on_error
)
from student_roster.schemas.student import StudentRecord


logger = logging.getLogger(__name__)


class RemoteRosterGateway(BaseRosterBackend):
    """Roster backend talking to the remote sheet endpoint."""

    backend_type = BackendType.REMOTE

    def __init__(self, config: RemoteEndpointConfig):
        self.config = config
        self.retry_config = RetryConfig(
            max_attempts=config.max_retries + 1,
            base_delay=config.retry_base_delay,
            jitter=False
        )
        self._http_session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        self._http_session = aiohttp.ClientSession(
            timeout=timeout,
            headers={
                'User-Agent': 'Student-Roster-Sync/1.0',
                'Accept': 'application/json',
            }
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._http_session:
            await self._http_session.close()
            self._http_session = None

    async def read(self) -> List[StudentRecord]:
        """
        Fetch the full roster, retrying failed attempts with exponential backoff.

        Raises:
            RosterNetworkError: all attempts failed
        """
        try:
            rows = await retry_on_error(self._fetch_once, self.retry_config)
        except RosterNetworkError as e:
            logger.error(f"Roster read failed after {self.retry_config.max_attempts} attempts: {e}")
            raise RosterNetworkError(
                "Failed to load student data from API.",
                retryable=False,
                operation_type='read',
                original_exception=e
            )

        logger.info(f"Retrieved {len(rows)} student rows from remote roster")
        return rows

    async def write(self, record: StudentRecord) -> List[StudentRecord]:
        action = 'update' if record.id else 'add'
        await self.send_action(action, record.to_payload())
        return await self.read()

    async def remove(self, record_id: str) -> List[StudentRecord]:
        await self.send_action('delete', {'id': record_id})
        return await self.read()

    async def send_action(self, action: str, data: Dict[str, Any]) -> None:
        """
        Issue a single mutating request. Never retried.

        Args:
            action: ``add``, ``update`` or ``delete``
            data: Record payload, or ``{"id": ...}`` for deletes

        Raises:
            RosterNetworkError: the request failed or returned a non-success status
        """
        session = self._require_session()
        try:
            async with session.post(self.config.url, json={'action': action, 'data': data}) as response:
                if response.status >= 400:
                    error_text = await response.text()
                    raise RosterNetworkError(
                        f"Failed to perform {action}: API action failed with status {response.status}",
                        retryable=False,
                        operation_type=action,
                        details={'status': response.status, 'body': error_text[:500]}
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RosterNetworkError(
                f"Failed to perform {action}: {e or type(e).__name__}",
                retryable=False,
                operation_type=action,
                original_exception=e
            )

        logger.info(f"Remote roster accepted '{action}' request")

    async def _fetch_once(self) -> List[StudentRecord]:
        session = self._require_session()
        try:
            async with session.get(self.config.url) as response:
                if response.status >= 400:
                    raise RosterNetworkError(
                        f"HTTP error! status: {response.status}",
                        operation_type='read',
                        details={'status': response.status}
                    )
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RosterNetworkError(
                f"HTTP client error: {e or type(e).__name__}",
                operation_type='read',
                original_exception=e
            )
        except ValueError as e:
            raise RosterNetworkError(
                f"Roster response is not valid JSON: {e}",
                operation_type='read',
                original_exception=e
            )

        if not isinstance(payload, list):
            raise RosterNetworkError(
                f"Roster response is not a JSON array (got {type(payload).__name__})",
                operation_type='read'
            )
        return self._transform_rows(payload)

    def _transform_rows(self, rows: List[Any]) -> List[StudentRecord]:
        """Turn sheet rows into records, skipping rows that cannot be parsed."""
        records = []
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                logger.warning(f"Skipping remote roster row {index}: not an object")
                continue
            try:
                records.append(StudentRecord.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping remote roster row {index}: {e.error_count()} invalid field(s)")
        return records

    def _require_session(self) -> aiohttp.ClientSession:
        if not self._http_session:
            raise RuntimeError("HTTP session not initialized")
        return self._http_session
