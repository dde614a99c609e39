"""
Roster view kept in step with the orchestrator through its subscription.
"""

from typing import List, Optional, Tuple

from student_roster.schemas.student import FilterCriteria, StudentRecord
from student_roster.services.sync.query_pipeline import apply_filters
from student_roster.services.sync.sync_orchestrator import RosterSnapshot, SyncOrchestrator


class RosterView:
    """Re-runs the query pipeline whenever the roster or the filters change."""

    def __init__(self, orchestrator: SyncOrchestrator, criteria: Optional[FilterCriteria] = None):
        self._criteria = criteria or FilterCriteria()
        self._roster: Tuple[StudentRecord, ...] = orchestrator.students
        self._visible = apply_filters(self._roster, self._criteria)
        self._unsubscribe = orchestrator.subscribe(self._on_change)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def visible(self) -> List[StudentRecord]:
        return list(self._visible)

    @property
    def total(self) -> int:
        return len(self._roster)

    def set_filters(
        self,
        search_term: Optional[str] = None,
        class_name: Optional[str] = None,
        section: Optional[str] = None
    ) -> List[StudentRecord]:
        """Update any of the filters; ``None`` leaves a filter unchanged."""
        updates = {}
        if search_term is not None:
            updates['search_term'] = search_term
        if class_name is not None:
            updates['class_name'] = class_name
        if section is not None:
            updates['section'] = section
        self._criteria = FilterCriteria(**{**self._criteria.model_dump(), **updates})
        self._visible = apply_filters(self._roster, self._criteria)
        return self.visible

    def close(self) -> None:
        self._unsubscribe()

    def _on_change(self, snapshot: RosterSnapshot) -> None:
        # Flag-only notifications keep the same roster tuple
        if snapshot.students is self._roster:
            return
        self._roster = snapshot.students
        self._visible = apply_filters(self._roster, self._criteria)
