"""
Task Service Data Models

Task and attachment request/response models
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from enum import Enum


class TaskStatus(str, Enum):
    """Well-known task status labels (the set stays open)"""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


# Request models
class TaskCreateRequest(BaseModel):
    """Create task request"""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: str = Field(default=TaskStatus.TODO.value, min_length=1, max_length=50)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


class TaskUpdateRequest(BaseModel):
    """Update task request

    Only fields present in the request are changed; an explicit null
    description clears it.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[str] = Field(None, min_length=1, max_length=50)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("title must not be blank")
        return v


# Response models
class TaskResponse(BaseModel):
    """Task response"""
    id: int
    title: str
    description: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


class AttachmentResponse(BaseModel):
    """Task attachment metadata"""
    id: int
    task_id: int
    storage_key: str
    original_filename: str
    content_type: Optional[str] = None
    size: int
    uploaded_at: datetime


class AttachmentUrlResponse(BaseModel):
    """Presigned download URL"""
    attachment_id: int
    url: str
    expires_in: int
