from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from approvaldesk.models.base import Base, UTCDateTime, utcnow


class RequestLog(Base):
    """Append-only audit entry for an action taken on a request."""

    __tablename__ = "approval_history"
    __table_args__ = (Index("ix_approval_history_request_action_date", "request_id", "action_date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    action_taken: Mapped[str] = mapped_column(String(100), nullable=False)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    action_date: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, server_default=func.now(), nullable=False
    )
    request_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("approval_requests.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
