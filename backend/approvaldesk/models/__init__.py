from approvaldesk.models.base import Base, TimestampMixin
from approvaldesk.models.user import User
from approvaldesk.models.request_type import RequestType
from approvaldesk.models.approval_request import ApprovalRequest, RequestStatus
from approvaldesk.models.request_log import RequestLog

__all__ = [
    "Base", "TimestampMixin", "User", "RequestType",
    "ApprovalRequest", "RequestStatus", "RequestLog",
]
