"""
Pydantic schemas for the roster API endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List

from student_roster.schemas.student import ChoiceOption, FilterCriteria, StudentRecord
from student_roster.utils.media_urls import direct_image_url


class RosterStatusResponse(BaseModel):
    """Orchestrator state shown next to the table."""
    state: str
    error: Optional[str] = None
    is_loading: bool
    is_saving: bool
    is_deleting: bool
    is_polling: bool
    backend: str
    mock_data_mode: bool
    total_students: int
    last_loaded_at: Optional[str] = None
    identity: Optional[str] = None
    session_error: Optional[str] = None


class RosterViewResponse(BaseModel):
    """Filtered, searched and sorted roster."""
    students: List[Dict[str, Any]]
    total: int
    visible: int
    filters: FilterCriteria
    status: RosterStatusResponse


class RosterOptionsResponse(BaseModel):
    """Choices and defaults for the add/edit form."""
    classes: List[ChoiceOption]
    sections: List[ChoiceOption]
    template: Dict[str, Any]


class OperationResponse(BaseModel):
    success: bool
    message: str
    total: int


class RefreshResponse(BaseModel):
    success: bool
    status: RosterStatusResponse


class ValidationErrorDetail(BaseModel):
    message: str
    field_errors: Dict[str, str] = Field(default_factory=dict)


def serialize_student(record: StudentRecord) -> Dict[str, Any]:
    """Wire form of a record plus direct links for its images."""
    data = record.to_payload()
    data['photoDisplayUrl'] = direct_image_url(record.photo_url)
    data['signatureDisplayUrl'] = direct_image_url(record.signature_url)
    return data
