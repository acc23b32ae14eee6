"""Approval workflow engine: owns the request lifecycle.

States:
  - PENDING:  initial, the only state that accepts a decision
  - APPROVED: terminal
  - REJECTED: terminal

Every command runs in its own transaction. Approve/reject are serialised per
request id twice over: an in-process lock keyed by request id, and a
conditional UPDATE on ``status`` that only matches PENDING rows, so a second
decision from another process still loses cleanly. Notifications go out only
after the transaction has committed.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from approvaldesk.core.errors import InvalidStateError, NotFoundError, UnauthorizedActionError
from approvaldesk.models.approval_request import ApprovalRequest, RequestStatus
from approvaldesk.models.request_log import RequestLog
from approvaldesk.models.user import User
from approvaldesk.notifications.dispatcher import NotificationDispatcher
from approvaldesk.schemas.request import RequestDetails, RequestSummary
from approvaldesk.services import audit_service, directory_service, request_service
from approvaldesk.utils.logging import get_logger

logger = get_logger(__name__)

UNASSIGNED = "Unassigned"


class _KeyedLocks:
    """One asyncio.Lock per key, dropped once nobody holds or waits on it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


def _request_key(request_id: UUID | str) -> str:
    try:
        return str(UUID(str(request_id)))
    except ValueError:
        raise NotFoundError(f"Request not found with ID: {request_id}") from None


def _display_name(users: dict[int, User], user_id: int | None) -> str:
    user = users.get(user_id) if user_id is not None else None
    return user.full_name if user is not None else UNASSIGNED


def _summary(request: ApprovalRequest, type_name: str, related_user_name: str) -> RequestSummary:
    return RequestSummary(
        id=request.id,
        title=request.title,
        status=request.status,
        type_name=type_name,
        created_at=request.created_at,
        related_user_name=related_user_name,
    )


class WorkflowEngine:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dispatcher: NotificationDispatcher,
    ) -> None:
        self.session_factory = session_factory
        self.dispatcher = dispatcher
        self._request_locks = _KeyedLocks()

    # ── Commands ───────────────────────────────────────────────────────

    async def create_request(
        self,
        title: str,
        description: str | None,
        requester_id: int,
        approver_id: int,
        request_type_id: int,
    ) -> RequestSummary:
        async with self.session_factory() as db:
            async with db.begin():
                requester = await directory_service.get_user(db, requester_id)
                if requester is None:
                    raise NotFoundError(f"Requester not found with ID: {requester_id}")
                approver = await directory_service.get_user(db, approver_id)
                if approver is None:
                    raise NotFoundError(f"Approver not found with ID: {approver_id}")
                request_type = await directory_service.get_request_type(db, request_type_id)
                if request_type is None:
                    raise NotFoundError(f"Request type not found with ID: {request_type_id}")

                request = await request_service.add_request(
                    db,
                    title=title,
                    description=description,
                    requester_id=requester.id,
                    approver_id=approver.id,
                    request_type_id=request_type.id,
                )

        logger.info(
            "Request %s created by user %s for approver %s",
            request.id,
            requester.id,
            approver.id,
            extra={"request_id": request.id, "user_id": requester.id},
        )
        self.dispatcher.notify_created(request, approver, requester, request_type.name)
        return _summary(request, request_type.name, approver.full_name)

    async def approve_request(self, request_id: UUID | str, comments: str | None, approver_id: int) -> RequestSummary:
        return await self._decide(_request_key(request_id), comments, approver_id, RequestStatus.APPROVED)

    async def reject_request(self, request_id: UUID | str, comments: str | None, approver_id: int) -> RequestSummary:
        return await self._decide(_request_key(request_id), comments, approver_id, RequestStatus.REJECTED)

    async def _decide(
        self,
        request_id: str,
        comments: str | None,
        approver_id: int,
        new_status: RequestStatus,
    ) -> RequestSummary:
        verb = "approve" if new_status == RequestStatus.APPROVED else "reject"

        async with self._request_locks.hold(request_id):
            async with self.session_factory() as db:
                async with db.begin():
                    request = await request_service.get_request(db, request_id, for_update=True)
                    if request is None:
                        raise NotFoundError(f"Request not found with ID: {request_id}")
                    if request.status != RequestStatus.PENDING:
                        logger.warning(
                            "Refusing to %s request %s in status %s", verb, request_id, request.status,
                            extra={"request_id": request_id, "user_id": approver_id},
                        )
                        raise InvalidStateError(request.status)
                    if request.approver_id != approver_id:
                        logger.warning(
                            "User %s is not permitted to %s request %s", approver_id, verb, request_id,
                            extra={"request_id": request_id, "user_id": approver_id},
                        )
                        raise UnauthorizedActionError(approver_id, verb)

                    acting_user = await directory_service.get_user(db, approver_id)
                    if acting_user is None:
                        raise NotFoundError(f"Approver not found with ID: {approver_id}")

                    if not await request_service.transition_status(db, request_id, new_status):
                        await db.refresh(request)
                        raise InvalidStateError(request.status)
                    await db.refresh(request)

                    await audit_service.append_log(db, request_id, acting_user.id, new_status.value, comments)
                    requester = await directory_service.get_user(db, request.requester_id)
                    request_type = await directory_service.get_request_type(db, request.request_type_id)

        logger.info(
            "Request %s %s by user %s",
            request_id,
            new_status.value,
            acting_user.id,
            extra={"request_id": request_id, "user_id": acting_user.id, "status": new_status.value},
        )
        if requester is not None:
            self.dispatcher.notify_status_changed(request, acting_user, requester, comments)
        return _summary(request, request_type.name, acting_user.full_name)

    # ── Queries ────────────────────────────────────────────────────────

    async def get_requests_created_by_user(self, user_id: int) -> list[RequestSummary]:
        """Requests the user submitted ("My Requests"); related user is the approver."""
        async with self.session_factory() as db:
            requests = await request_service.list_requests_by_requester(db, user_id)
            return await self._summaries(db, requests, related="approver")

    async def get_requests_assigned_to_user(self, user_id: int) -> list[RequestSummary]:
        """Requests waiting on the user ("My Inbox"); related user is the requester."""
        async with self.session_factory() as db:
            requests = await request_service.list_requests_by_approver(db, user_id)
            return await self._summaries(db, requests, related="requester")

    async def _summaries(
        self, db: AsyncSession, requests: list[ApprovalRequest], related: str
    ) -> list[RequestSummary]:
        if not requests:
            return []
        types = await directory_service.get_request_types(db, (r.request_type_id for r in requests))
        if related == "approver":
            users = await directory_service.get_users(db, (r.approver_id for r in requests))
        else:
            users = await directory_service.get_users(db, (r.requester_id for r in requests))

        summaries = []
        for request in requests:
            related_id = request.approver_id if related == "approver" else request.requester_id
            summaries.append(
                _summary(request, types[request.request_type_id].name, _display_name(users, related_id))
            )
        return summaries

    async def get_request_details(self, request_id: UUID | str) -> RequestDetails:
        async with self.session_factory() as db:
            request = await request_service.get_request(db, _request_key(request_id))
            if request is None:
                raise NotFoundError(f"Request not found with ID: {request_id}")
            latest = await audit_service.latest_log(db, request.id)
            request_type = await directory_service.get_request_type(db, request.request_type_id)
            users = await directory_service.get_users(db, [request.approver_id])

        return RequestDetails(
            id=request.id,
            title=request.title,
            description=request.description,
            status=request.status,
            type_name=request_type.name,
            created_at=request.created_at,
            related_user_name=_display_name(users, request.approver_id),
            comments=latest.comments if latest is not None else None,
        )

    async def get_request_history(self, request_id: UUID | str) -> list[RequestLog]:
        async with self.session_factory() as db:
            request = await request_service.get_request(db, _request_key(request_id))
            if request is None:
                raise NotFoundError(f"Request not found with ID: {request_id}")
            return await audit_service.list_logs_for_request(db, request.id)
