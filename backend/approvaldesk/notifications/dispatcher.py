"""Fire-and-forget delivery of workflow notifications.

The workflow engine calls ``notify_*`` after its transaction commits. Those
calls only snapshot the event onto a bounded queue and return; a background
task renders and sends each email. Nothing here ever raises into the caller:
a full queue drops the event with a warning, and delivery failures are logged
with the request id and recipient. There is no retry.
"""

import asyncio
from abc import ABC, abstractmethod

from approvaldesk.models.approval_request import ApprovalRequest
from approvaldesk.models.user import User
from approvaldesk.notifications.events import NO_COMMENTS, RequestCreatedEvent, StatusChangedEvent
from approvaldesk.notifications.senders import EmailSender
from approvaldesk.notifications.templates import render_request_created, render_status_update
from approvaldesk.utils.logging import get_logger

logger = get_logger(__name__)

NotificationEvent = RequestCreatedEvent | StatusChangedEvent


def build_created_event(
    request: ApprovalRequest, approver: User, requester: User, type_name: str
) -> RequestCreatedEvent:
    return RequestCreatedEvent(
        request_id=str(request.id),
        title=request.title,
        description=request.description,
        type_name=type_name,
        requester_name=requester.full_name,
        created_at=request.created_at,
        approver_name=approver.full_name,
        approver_email=approver.email,
    )


def build_status_event(
    request: ApprovalRequest, acting_user: User, requester: User, comments: str | None
) -> StatusChangedEvent:
    return StatusChangedEvent(
        request_id=str(request.id),
        title=request.title,
        status=request.status,
        acting_user_name=acting_user.full_name,
        comments=comments if comments is not None else NO_COMMENTS,
        requester_name=requester.full_name,
        requester_email=requester.email,
    )


class NotificationDispatcher(ABC):
    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        return None

    def notify_created(
        self, request: ApprovalRequest, approver: User, requester: User, type_name: str
    ) -> None:
        try:
            self.dispatch(build_created_event(request, approver, requester, type_name))
        except Exception:
            logger.exception(
                "Failed to dispatch request created notification for request %s", request.id
            )

    def notify_status_changed(
        self, request: ApprovalRequest, acting_user: User, requester: User, comments: str | None
    ) -> None:
        try:
            self.dispatch(build_status_event(request, acting_user, requester, comments))
        except Exception:
            logger.exception(
                "Failed to dispatch status update notification for request %s", request.id
            )

    @abstractmethod
    def dispatch(self, event: NotificationEvent) -> None:
        """Accept ``event`` for delivery without waiting on it."""


class NullNotificationDispatcher(NotificationDispatcher):
    def dispatch(self, event: NotificationEvent) -> None:
        logger.debug("Notifications disabled, dropping %s for request %s", type(event).__name__, event.request_id)


class QueueNotificationDispatcher(NotificationDispatcher):
    def __init__(self, sender: EmailSender, maxsize: int = 100) -> None:
        self.sender = sender
        self.queue: asyncio.Queue[NotificationEvent] = asyncio.Queue(maxsize=maxsize)
        self._worker: asyncio.Task | None = None

    async def start(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name="notification-dispatcher")

    async def stop(self, timeout: float = 5.0) -> None:
        """Give queued events up to ``timeout`` seconds to go out, then stop the worker."""
        if self._worker is None:
            return
        try:
            await asyncio.wait_for(self.queue.join(), timeout=timeout)
        except TimeoutError:
            logger.warning("Stopping notification worker with %d undelivered events", self.queue.qsize())
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def drain(self) -> None:
        await self.queue.join()

    def dispatch(self, event: NotificationEvent) -> None:
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                "Notification queue full, dropping %s for request %s",
                type(event).__name__,
                event.request_id,
            )

    async def _run(self) -> None:
        while True:
            event = await self.queue.get()
            try:
                await self.deliver(event)
            except Exception:
                logger.exception(
                    "Failed to send %s notification for request %s to %s",
                    type(event).__name__,
                    event.request_id,
                    event.recipient,
                )
            finally:
                self.queue.task_done()

    async def deliver(self, event: NotificationEvent) -> None:
        recipient = event.recipient
        if not recipient:
            logger.warning("No email address for %s on request %s, skipping", type(event).__name__, event.request_id)
            return
        if isinstance(event, RequestCreatedEvent):
            message = render_request_created(event, recipient)
        else:
            message = render_status_update(event, recipient)
        logger.info("Sending %s notification for request %s to %s", type(event).__name__, event.request_id, recipient)
        await self.sender.send(message)
        logger.info("Notification for request %s sent to %s", event.request_id, recipient)
