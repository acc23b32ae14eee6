from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from approvaldesk.core.database import is_sqlite
from approvaldesk.models.approval_request import ApprovalRequest, RequestStatus


async def add_request(
    db: AsyncSession,
    *,
    title: str,
    description: str | None,
    requester_id: int,
    approver_id: int,
    request_type_id: int,
) -> ApprovalRequest:
    request = ApprovalRequest(
        title=title,
        description=description,
        status=RequestStatus.PENDING.value,
        requester_id=requester_id,
        approver_id=approver_id,
        request_type_id=request_type_id,
    )
    db.add(request)
    await db.flush()
    return request


async def get_request(db: AsyncSession, request_id: str, *, for_update: bool = False) -> ApprovalRequest | None:
    stmt = select(ApprovalRequest).where(ApprovalRequest.id == request_id)
    # SQLite has no row locks; the conditional update in transition_status still guards it.
    if for_update and not is_sqlite(db):
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_requests_by_requester(db: AsyncSession, requester_id: int) -> list[ApprovalRequest]:
    stmt = (
        select(ApprovalRequest)
        .where(ApprovalRequest.requester_id == requester_id)
        .order_by(ApprovalRequest.created_at.desc(), ApprovalRequest.seq.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_requests_by_approver(db: AsyncSession, approver_id: int) -> list[ApprovalRequest]:
    stmt = (
        select(ApprovalRequest)
        .where(ApprovalRequest.approver_id == approver_id)
        .order_by(ApprovalRequest.created_at.desc(), ApprovalRequest.seq.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def transition_status(db: AsyncSession, request_id: str, new_status: RequestStatus) -> bool:
    """Move a PENDING request to ``new_status``.

    Compare-and-swap on ``status``: returns False when the row is no longer
    PENDING, which means another transaction decided it first.
    """
    result = await db.execute(
        update(ApprovalRequest)
        .where(
            ApprovalRequest.id == request_id,
            ApprovalRequest.status == RequestStatus.PENDING.value,
        )
        .values(status=new_status.value, updated_at=datetime.now(UTC))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
