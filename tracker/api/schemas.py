"""Pydantic schemas for request/response validation."""
from datetime import date, datetime
from typing import Optional, Dict
from pydantic import BaseModel, ConfigDict
from tracker.models.enums import SummaryType


# Summary schemas
class SummaryCreate(BaseModel):
    summary_type: SummaryType = SummaryType.CUSTOM
    start_date: date
    end_date: date


class SummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    summary_type: SummaryType
    start_date: date
    end_date: date
    content: str
    statistics: Optional[Dict[str, int]]
    auto_generated: bool
    created_at: datetime


# Reminder schemas
class ReminderUpdate(BaseModel):
    reminder_time: Optional[datetime] = None


# Audit log schemas
class AuditLogEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    operation_type: str
    entity_type: str
    entity_id: int
    entity_name: str
    description: str
    project_id: Optional[int]
    project_name: Optional[str]
    related_entities: Optional[str]
    created_at: datetime


# Error response
class ErrorResponse(BaseModel):
    detail: str
