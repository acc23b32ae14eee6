from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from approvaldesk.models.request_log import RequestLog


async def append_log(
    db: AsyncSession,
    request_id: str,
    user_id: int,
    action_taken: str,
    comments: str | None = None,
) -> RequestLog:
    log = RequestLog(
        request_id=request_id,
        user_id=user_id,
        action_taken=action_taken,
        comments=comments,
    )
    db.add(log)
    await db.flush()
    return log


async def list_logs_for_request(db: AsyncSession, request_id: str) -> list[RequestLog]:
    result = await db.execute(
        select(RequestLog)
        .where(RequestLog.request_id == request_id)
        .order_by(RequestLog.action_date.desc(), RequestLog.id.desc())
    )
    return list(result.scalars().all())


async def latest_log(db: AsyncSession, request_id: str) -> RequestLog | None:
    result = await db.execute(
        select(RequestLog)
        .where(RequestLog.request_id == request_id)
        .order_by(RequestLog.action_date.desc(), RequestLog.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()
