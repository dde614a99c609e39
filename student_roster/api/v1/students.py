"""
FastAPI router for the student roster.

Thin adapter over the sync orchestrator: every read goes through the query
pipeline and every mutation through the orchestrator's write-then-reconcile.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from student_roster.integrations.roster.error_handler import RosterBusyError, RosterValidationError
from student_roster.schemas.roster import (
    OperationResponse, RefreshResponse, RosterOptionsResponse, RosterStatusResponse,
    RosterViewResponse, ValidationErrorDetail, serialize_student
)
from student_roster.schemas.student import (
    ALL_OPTION, FilterCriteria, StudentRecord, class_options, new_student_template, section_options
)
from student_roster.services.sync.query_pipeline import apply_filters
from student_roster.services.sync.sync_orchestrator import OperationResult, SyncOrchestrator

router = APIRouter()


def get_orchestrator(request: Request) -> SyncOrchestrator:
    return request.app.state.orchestrator


def _status(orchestrator: SyncOrchestrator) -> RosterStatusResponse:
    session = orchestrator.session
    return RosterStatusResponse(
        **orchestrator.status(),
        session_error=session.error.message if session and session.error else None
    )


def _check_result(result: OperationResult, success_message: str, orchestrator: SyncOrchestrator) -> OperationResponse:
    if result.cancelled:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Deletion requires confirmation"
        )
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=result.error
        )
    return OperationResponse(success=True, message=success_message, total=len(orchestrator.students))


async def _save(orchestrator: SyncOrchestrator, record: StudentRecord) -> OperationResult:
    try:
        return await orchestrator.save(record)
    except RosterValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=ValidationErrorDetail(message=e.message, field_errors=e.field_errors).model_dump()
        )
    except RosterBusyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)


@router.get("/", response_model=RosterViewResponse)
async def list_students(
    search: str = "",
    class_name: str = ALL_OPTION,
    section: str = ALL_OPTION,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator)
):
    """Filtered, searched and roll-number sorted view of the roster."""
    criteria = FilterCriteria(search_term=search, class_name=class_name, section=section)
    visible = apply_filters(orchestrator.students, criteria)

    return RosterViewResponse(
        students=[serialize_student(s) for s in visible],
        total=len(orchestrator.students),
        visible=len(visible),
        filters=criteria,
        status=_status(orchestrator)
    )


@router.get("/status", response_model=RosterStatusResponse)
async def roster_status(orchestrator: SyncOrchestrator = Depends(get_orchestrator)):
    return _status(orchestrator)


@router.get("/options", response_model=RosterOptionsResponse)
async def form_options():
    return RosterOptionsResponse(
        classes=class_options(),
        sections=section_options(),
        template=new_student_template().to_payload()
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_students(orchestrator: SyncOrchestrator = Depends(get_orchestrator)):
    """Load the roster now instead of waiting for the next poll."""
    success = await orchestrator.refresh()
    return RefreshResponse(success=success, status=_status(orchestrator))


@router.post("/", response_model=OperationResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    record: StudentRecord,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator)
):
    """Add a new student. Any ``id`` in the body is ignored."""
    record = record.model_copy(update={'id': None})
    result = await _save(orchestrator, record)
    return _check_result(result, f"Added student {record.student_id}", orchestrator)


@router.put("/{record_id}", response_model=OperationResponse)
async def update_student(
    record_id: str,
    record: StudentRecord,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator)
):
    """Replace an existing student. The path id wins over any id in the body."""
    if orchestrator.get_student(record_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Student record {record_id} not found"
        )
    record = record.model_copy(update={'id': record_id})
    result = await _save(orchestrator, record)
    return _check_result(result, f"Updated student {record.student_id}", orchestrator)


@router.delete("/{record_id}", response_model=OperationResponse)
async def delete_student(
    record_id: str,
    confirm: bool = False,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator)
):
    """Delete a student. ``confirm=true`` is the caller's yes to the confirmation prompt."""
    try:
        result = await orchestrator.delete(record_id, confirm=lambda _record_id: confirm)
    except RosterBusyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    return _check_result(result, f"Deleted student record {record_id}", orchestrator)
