"""
Roster Synchronization

Keeps the in-memory student roster consistent with the active backend.

Components:
- Sync orchestrator: fetch on load, polling, write-then-reconcile
- Query pipeline: class/section filters, free-text search, roll-number sort
- Roster view: recomputes the pipeline on roster or filter changes
- Record validation before any backend call
"""

from .sync_orchestrator import (
    SyncOrchestrator,
    SyncState,
    RosterSnapshot,
    OperationResult,
    normalize_roster
)
from .query_pipeline import (
    apply_filters,
    compare_roll_numbers,
    parse_roll_number
)
from .roster_view import RosterView
from .record_validator import (
    FieldError,
    ValidationResult,
    validate_record,
    ensure_valid
)

__all__ = [
    'SyncOrchestrator',
    'SyncState',
    'RosterSnapshot',
    'OperationResult',
    'normalize_roster',
    'apply_filters',
    'compare_roll_numbers',
    'parse_roll_number',
    'RosterView',
    'FieldError',
    'ValidationResult',
    'validate_record',
    'ensure_valid'
]
