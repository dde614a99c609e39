"""
Record validation performed before any backend call.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from student_roster.integrations.roster.error_handler import RosterValidationError
from student_roster.schemas.student import ClassName, Section, StudentRecord


logger = logging.getLogger(__name__)


@dataclass
class FieldError:
    """Represents a validation error on one field."""
    field_name: str
    error_type: str
    error_message: str
    field_value: Any = None


@dataclass
class ValidationResult:
    """Result of record validation."""
    is_valid: bool
    errors: List[FieldError] = field(default_factory=list)

    def field_errors(self) -> Dict[str, str]:
        return {e.field_name: e.error_message for e in self.errors}


def validate_record(record: StudentRecord, roster: Iterable[StudentRecord]) -> ValidationResult:
    """
    Validate a record about to be saved against the current roster.

    Checks required fields, class and section membership, ``studentId``
    uniqueness and that ``studentId`` is not changed on edit. Free-text fields
    such as ``emailId`` and ``dateOfBirth`` are stored as given.
    """
    errors: List[FieldError] = []

    if not record.student_id.strip():
        errors.append(FieldError('studentId', 'required', 'Student ID is mandatory.', record.student_id))
    if not record.student_name.strip():
        errors.append(FieldError('studentName', 'required', 'Student name is mandatory.', record.student_name))

    errors.extend(_validate_choice('className', record.class_name, ClassName, 'Class'))
    errors.extend(_validate_choice('section', record.section, Section, 'Section'))

    errors.extend(_validate_identity(record, roster))

    return ValidationResult(is_valid=not errors, errors=errors)


def _validate_choice(field_name: str, value: str, choices, label: str) -> List[FieldError]:
    if not value:
        return [FieldError(field_name, 'required', f"{label} is mandatory.", value)]
    if value not in {c.value for c in choices}:
        return [FieldError(field_name, 'choice', f"{label} {value} is not a known option.", value)]
    return []


def _validate_identity(record: StudentRecord, roster: Iterable[StudentRecord]) -> List[FieldError]:
    errors = []
    existing: Optional[StudentRecord] = None
    student_id = record.student_id.strip()

    for other in roster:
        if record.id is not None and other.id == record.id:
            existing = other
        elif student_id and other.student_id.strip() == student_id:
            errors.append(FieldError(
                'studentId', 'duplicate', f"Student ID {student_id} is already in use.", record.student_id
            ))

    if existing is not None and existing.student_id.strip() != student_id:
        errors.append(FieldError(
            'studentId', 'immutable', 'Student ID cannot be changed once created.', record.student_id
        ))

    return errors


def ensure_valid(record: StudentRecord, roster: Iterable[StudentRecord]) -> None:
    """
    Raise ``RosterValidationError`` if ``record`` may not be saved.
    """
    result = validate_record(record, roster)
    if not result.is_valid:
        logger.debug(f"Rejected record {record.student_id or '<new>'}: {result.field_errors()}")
        raise RosterValidationError(
            "Validation Error: " + " ".join(e.error_message for e in result.errors),
            field_errors=result.field_errors(),
            operation_type='save'
        )
