"""API routes for summaries, reminders and the operation log."""
from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from tracker.api.schemas import (
    AuditLogEntryResponse,
    ErrorResponse,
    ReminderUpdate,
    SummaryCreate,
    SummaryResponse,
)
from tracker.services.core import AutomationCore
from tracker.services.errors import StoreUnavailable

router = APIRouter()


def get_core(request: Request) -> AutomationCore:
    """Dependency for FastAPI endpoints to get the running automation core."""
    return request.app.state.core


def _store_unavailable(e: StoreUnavailable) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


# Summary endpoints
@router.post("/summaries", response_model=SummaryResponse, status_code=status.HTTP_201_CREATED, responses={
    400: {"model": ErrorResponse, "description": "Invalid period"},
})
def generate_summary(summary_data: SummaryCreate, core: AutomationCore = Depends(get_core)):
    """
    Generate a summary now for an arbitrary period.

    Not subject to the weekday/day-of-month rules; may duplicate an existing
    period since the result is marked as manually generated.
    """
    try:
        return core.summary_scheduler.generate_now(
            summary_data.summary_type.value,
            summary_data.start_date,
            summary_data.end_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreUnavailable as e:
        raise _store_unavailable(e)


@router.get("/summaries", response_model=List[SummaryResponse])
def list_summaries(core: AutomationCore = Depends(get_core)):
    """List all summaries, newest first."""
    try:
        return core.summary_store.list()
    except StoreUnavailable as e:
        raise _store_unavailable(e)


@router.get("/summaries/{summary_id}", response_model=SummaryResponse)
def get_summary(summary_id: int, core: AutomationCore = Depends(get_core)):
    try:
        summary = core.summary_store.get_by_id(summary_id)
    except StoreUnavailable as e:
        raise _store_unavailable(e)
    if not summary:
        raise HTTPException(status_code=404, detail="Summary not found")
    return summary


@router.delete("/summaries/{summary_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_summary(summary_id: int, core: AutomationCore = Depends(get_core)):
    """Delete a summary. Its period becomes eligible for automatic generation again."""
    try:
        deleted = core.summary_store.delete(summary_id)
    except StoreUnavailable as e:
        raise _store_unavailable(e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Summary not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Reminder endpoints
@router.get("/events/reminders/today", response_model=List[int])
def list_today_reminders(core: AutomationCore = Depends(get_core)):
    """Ids of events with a reminder today, for highlighting in the UI."""
    try:
        return core.event_store.today_reminder_event_ids(date.today())
    except StoreUnavailable as e:
        raise _store_unavailable(e)


@router.put("/events/{event_id}/reminder", status_code=status.HTTP_204_NO_CONTENT)
def update_event_reminder(event_id: int, reminder_data: ReminderUpdate, core: AutomationCore = Depends(get_core)):
    """
    Set or clear an event's reminder.
    Side effect: the reminder becomes pending again, even if it had fired.
    """
    try:
        updated = core.event_store.set_reminder(event_id, reminder_data.reminder_time)
    except StoreUnavailable as e:
        raise _store_unavailable(e)
    if not updated:
        raise HTTPException(status_code=404, detail="Event not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Operation log endpoints
@router.get("/audit-log", response_model=List[AuditLogEntryResponse])
def query_audit_log(start: date, end: Optional[date] = None, core: AutomationCore = Depends(get_core)):
    """Operation log entries from the start of ``start`` to the end of ``end``, oldest first."""
    end = end or start
    try:
        return core.audit_log.query_range(
            datetime.combine(start, time.min),
            datetime.combine(end, time.max),
        )
    except StoreUnavailable as e:
        raise _store_unavailable(e)
