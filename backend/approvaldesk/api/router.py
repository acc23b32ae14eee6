from fastapi import APIRouter

from approvaldesk.api.directory import router as directory_router
from approvaldesk.api.requests import router as requests_router

router = APIRouter(prefix="/v1")


@router.get("/status", tags=["system"])
async def status() -> dict[str, str]:
    return {"api": "up"}


router.include_router(requests_router)
router.include_router(directory_router)

api_router = APIRouter()
api_router.include_router(router)
