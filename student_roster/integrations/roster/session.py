"""
Session bootstrap collaborator: readiness signal plus an opaque identity.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from student_roster.integrations.roster.error_handler import AuthInitError


logger = logging.getLogger(__name__)

ANONYMOUS_IDENTITY = "anonymous"

Authenticator = Callable[[], Awaitable[Optional[str]]]


async def anonymous_sign_in() -> Optional[str]:
    return None


class SessionBootstrap:
    """
    Runs the authenticator once and signals readiness.

    A failing authenticator is recorded as ``AuthInitError`` but readiness is
    still signalled, so roster loading is never blocked by it.
    """

    def __init__(self, authenticator: Optional[Authenticator] = None):
        self._authenticator = authenticator or anonymous_sign_in
        self._ready = asyncio.Event()
        self.identity: Optional[str] = None
        self.error: Optional[AuthInitError] = None

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    async def start(self) -> None:
        if self._ready.is_set():
            return
        try:
            identity = await self._authenticator()
            self.identity = identity or ANONYMOUS_IDENTITY
            logger.info(f"Session ready for identity {self.identity}")
        except Exception as e:
            self.error = AuthInitError(
                "Failed to initialize system authentication.",
                operation_type='session_bootstrap',
                original_exception=e
            )
            logger.error(f"Session bootstrap failed: {e}")
        finally:
            self._ready.set()

    async def wait_ready(self) -> None:
        await self._ready.wait()


def static_identity(identity: Optional[str]) -> Authenticator:
    """Authenticator that hands back a fixed identity (``None`` means anonymous)."""
    async def _sign_in() -> Optional[str]:
        return identity
    return _sign_in
