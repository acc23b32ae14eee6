from dataclasses import dataclass
from datetime import datetime

NO_COMMENTS = "No comments provided"


@dataclass(frozen=True)
class RequestCreatedEvent:
    """Sent to the approver when a request lands in their inbox."""

    request_id: str
    title: str
    description: str | None
    type_name: str
    requester_name: str
    created_at: datetime
    approver_name: str
    approver_email: str | None

    @property
    def recipient(self) -> str | None:
        return self.approver_email


@dataclass(frozen=True)
class StatusChangedEvent:
    """Sent to the requester once their request is approved or rejected."""

    request_id: str
    title: str
    status: str
    acting_user_name: str
    comments: str
    requester_name: str
    requester_email: str | None

    @property
    def recipient(self) -> str | None:
        return self.requester_email

    @property
    def is_approved(self) -> bool:
        return self.status == "APPROVED"
