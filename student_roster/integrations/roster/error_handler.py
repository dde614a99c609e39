"""
Error taxonomy, error logging and retry utilities for roster backends.
"""

import asyncio
import logging
import random
import traceback
from datetime import datetime
from typing import Dict, Any, List, Optional, Callable, Union


# Dedicated logger for roster error records
roster_logger = logging.getLogger('roster_sync')


class RosterErrorSeverity:
    """Error severity levels for roster operations."""
    LOW = "low"           # Minor issues, view keeps working
    MEDIUM = "medium"     # Operation failed, previous data retained
    HIGH = "high"         # Backend or session unusable until fixed


class RosterErrorCategory:
    """Error categories for better classification."""
    AUTHENTICATION = "authentication"
    NETWORK = "network"
    DATA_VALIDATION = "data_validation"
    STORAGE = "storage"
    CONCURRENCY = "concurrency"
    UNKNOWN = "unknown"


class RosterError(Exception):
    """Base exception for roster errors with metadata."""

    def __init__(
        self,
        message: str,
        category: str = RosterErrorCategory.UNKNOWN,
        severity: str = RosterErrorSeverity.MEDIUM,
        operation_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        retryable: bool = False,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.operation_type = operation_type
        self.details = details or {}
        self.retryable = retryable
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            'message': self.message,
            'category': self.category,
            'severity': self.severity,
            'operation_type': self.operation_type,
            'details': self.details,
            'retryable': self.retryable,
            'timestamp': self.timestamp.isoformat(),
            'original_error': repr(self.original_exception) if self.original_exception else None
        }


class AuthInitError(RosterError):
    """Session bootstrap failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=RosterErrorCategory.AUTHENTICATION,
            severity=RosterErrorSeverity.HIGH,
            retryable=False,
            **kwargs
        )


class RosterNetworkError(RosterError):
    """A read exhausted its retries or a mutation call failed."""

    def __init__(self, message: str, retryable: bool = True, **kwargs):
        super().__init__(
            message,
            category=RosterErrorCategory.NETWORK,
            severity=RosterErrorSeverity.MEDIUM,
            retryable=retryable,
            **kwargs
        )


class RosterValidationError(RosterError):
    """A record failed validation before reaching any backend."""

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None, **kwargs):
        details = kwargs.pop('details', {})
        details['field_errors'] = field_errors or {}
        super().__init__(
            message,
            category=RosterErrorCategory.DATA_VALIDATION,
            severity=RosterErrorSeverity.LOW,
            retryable=False,
            details=details,
            **kwargs
        )

    @property
    def field_errors(self) -> Dict[str, str]:
        return self.details['field_errors']


class RosterStorageError(RosterError):
    """The local slot holds content that cannot be decoded."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=RosterErrorCategory.STORAGE,
            severity=RosterErrorSeverity.HIGH,
            retryable=False,
            **kwargs
        )


class RosterBusyError(RosterError):
    """A save or delete is already in flight."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=RosterErrorCategory.CONCURRENCY,
            severity=RosterErrorSeverity.LOW,
            retryable=False,
            **kwargs
        )


class RosterErrorHandler:
    """Central error log for roster operations."""

    def __init__(self, max_log_entries: int = 1000):
        self._error_log: List[Dict[str, Any]] = []
        self._max_log_entries = max_log_entries

    def log_error(
        self,
        error: Union[RosterError, Exception],
        context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Log an error with full context.

        Args:
            error: The error to log
            context: Additional context information

        Returns:
            The stored error record
        """
        if isinstance(error, RosterError):
            error_dict = error.to_dict()
        else:
            error_dict = {
                'message': str(error),
                'category': RosterErrorCategory.UNKNOWN,
                'severity': RosterErrorSeverity.MEDIUM,
                'timestamp': datetime.utcnow().isoformat(),
                'traceback': traceback.format_exc()
            }

        if context:
            error_dict.update(context)

        severity = error_dict.get('severity', RosterErrorSeverity.MEDIUM)
        log_message = f"Roster Error [{severity.upper()}]: {error_dict['message']}"

        if severity == RosterErrorSeverity.HIGH:
            roster_logger.error(log_message)
        elif severity == RosterErrorSeverity.MEDIUM:
            roster_logger.warning(log_message)
        else:
            roster_logger.info(log_message)

        self._error_log.append(error_dict)
        if len(self._error_log) > self._max_log_entries:
            self._error_log.pop(0)

        return error_dict

    def get_recent_errors(
        self,
        limit: int = 50,
        severity_filter: Optional[str] = None,
        category_filter: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Get recent errors with optional filtering."""
        filtered_errors = self._error_log.copy()

        if severity_filter:
            filtered_errors = [e for e in filtered_errors if e.get('severity') == severity_filter]

        if category_filter:
            filtered_errors = [e for e in filtered_errors if e.get('category') == category_filter]

        return filtered_errors[-limit:]

    def clear(self) -> None:
        self._error_log.clear()


class RetryConfig:
    """Configuration for retry attempts."""

    def __init__(
        self,
        max_attempts: int = 4,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        jitter: bool = False
    ):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter

    def delay_for(self, attempt: int) -> float:
        """Delay before the retry that follows the zero-based ``attempt``."""
        delay = min(
            self.base_delay * (self.exponential_base ** attempt),
            self.max_delay
        )
        if self.jitter:
            delay *= (0.5 + random.random())
        return delay


async def retry_on_error(
    func: Callable,
    retry_config: RetryConfig,
    retryable_errors: tuple = (RosterNetworkError,),
    *args,
    **kwargs
) -> Any:
    """
    Retry function execution on specific errors.

    Args:
        func: Coroutine function to retry
        retry_config: Retry configuration
        retryable_errors: Tuple of error types that should trigger retry
        *args: Arguments for function
        **kwargs: Keyword arguments for function

    Returns:
        Function result
    """
    last_exception = None

    for attempt in range(retry_config.max_attempts):
        try:
            return await func(*args, **kwargs)

        except retryable_errors as e:
            last_exception = e

            if attempt == retry_config.max_attempts - 1:
                break

            delay = retry_config.delay_for(attempt)
            roster_logger.info(
                f"Retrying operation after error (attempt {attempt + 1}/{retry_config.max_attempts}): {e}"
            )

            await asyncio.sleep(delay)

    if last_exception:
        raise last_exception
