from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from approvaldesk.api.router import api_router
from approvaldesk.core.config import settings
from approvaldesk.core.database import AsyncSessionLocal, engine
from approvaldesk.core.errors import WorkflowError
from approvaldesk.notifications.dispatcher import (
    NotificationDispatcher,
    NullNotificationDispatcher,
    QueueNotificationDispatcher,
)
from approvaldesk.notifications.senders import build_sender
from approvaldesk.utils.logging import configure_logging, get_logger
from approvaldesk.workflow.engine import WorkflowEngine

logger = get_logger(__name__)


def build_dispatcher() -> NotificationDispatcher:
    if not settings.notifications_enabled:
        return NullNotificationDispatcher()
    return QueueNotificationDispatcher(build_sender(settings), maxsize=settings.notification_queue_size)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging(settings.log_level, settings.log_format)
    async with engine.begin() as conn:
        from approvaldesk.models import Base  # noqa: F811
        await conn.run_sync(Base.metadata.create_all)

    dispatcher = build_dispatcher()
    await dispatcher.start()
    app.state.workflow_engine = WorkflowEngine(AsyncSessionLocal, dispatcher)
    yield
    # Shutdown
    await dispatcher.stop()
    await engine.dispose()


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}
