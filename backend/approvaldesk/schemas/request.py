from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class CreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    requester_id: int
    approver_id: int
    request_type_id: int

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value


class RequestAction(BaseModel):
    comments: str | None = None
    approver_id: int


class RequestSummary(BaseModel):
    """List-view projection; ``related_user_name`` is the other party."""

    id: UUID
    title: str
    status: str
    type_name: str
    created_at: datetime
    related_user_name: str


class RequestDetails(BaseModel):
    id: UUID
    title: str
    description: str | None
    status: str
    type_name: str
    created_at: datetime
    related_user_name: str
    comments: str | None


class RequestLogRead(BaseModel):
    id: int
    request_id: UUID
    user_id: int
    action_taken: str
    comments: str | None
    action_date: datetime

    model_config = {"from_attributes": True}
