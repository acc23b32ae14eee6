"""User directory and request-type catalog lookups.

Both are reference data created out-of-band (see ``approvaldesk.seed``); the
workflow only reads them.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from approvaldesk.models.request_type import RequestType
from approvaldesk.models.user import User
from approvaldesk.schemas.directory import RequestTypeCreate, UserCreate


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def get_users(db: AsyncSession, user_ids: Iterable[int | None]) -> dict[int, User]:
    ids = {uid for uid in user_ids if uid is not None}
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {user.id: user for user in result.scalars().all()}


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    user = User(username=data.username, full_name=data.full_name, email=data.email)
    db.add(user)
    await db.flush()
    return user


async def get_request_type(db: AsyncSession, type_id: int) -> RequestType | None:
    return await db.get(RequestType, type_id)


async def get_request_types(db: AsyncSession, type_ids: Iterable[int]) -> dict[int, RequestType]:
    ids = set(type_ids)
    if not ids:
        return {}
    result = await db.execute(select(RequestType).where(RequestType.id.in_(ids)))
    return {rt.id: rt for rt in result.scalars().all()}


async def list_request_types(db: AsyncSession) -> list[RequestType]:
    result = await db.execute(select(RequestType).order_by(RequestType.id))
    return list(result.scalars().all())


async def get_request_type_by_name(db: AsyncSession, name: str) -> RequestType | None:
    result = await db.execute(select(RequestType).where(RequestType.name == name))
    return result.scalar_one_or_none()


async def create_request_type(db: AsyncSession, data: RequestTypeCreate) -> RequestType:
    request_type = RequestType(name=data.name, description=data.description)
    db.add(request_type)
    await db.flush()
    return request_type
