from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from approvaldesk.core.database import get_db
from approvaldesk.schemas.directory import RequestTypeRead, UserRead
from approvaldesk.services import directory_service

router = APIRouter(tags=["directory"])


@router.get("/users", response_model=list[UserRead])
async def list_users(db: AsyncSession = Depends(get_db)):
    """All users, for the requester/approver pickers."""
    return await directory_service.list_users(db)


@router.get("/request-types", response_model=list[RequestTypeRead])
async def list_request_types(db: AsyncSession = Depends(get_db)):
    return await directory_service.list_request_types(db)
