import asyncio

from celery import Celery
from celery.signals import worker_process_init

from approvaldesk.core.config import settings
from approvaldesk.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

celery_app = Celery("approvaldesk", broker=settings.redis_url, backend=settings.redis_url)
celery_app.conf.task_ignore_result = True


@worker_process_init.connect
def _init_worker_logging(**_kwargs) -> None:
    configure_logging(settings.log_level, settings.log_format)


def _run_async(coro):
    """Helper to run async code inside sync Celery tasks."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@celery_app.task(name="approvaldesk.tasks.health")
def health_task() -> str:
    """Liveness check for deployment probes."""
    return "worker-ok"


@celery_app.task(name="approvaldesk.tasks.send_email")
def task_send_email(to: str, subject: str, html: str) -> None:
    """Deliver one rendered notification email over SMTP.

    Failures are logged and not retried; notification delivery is best-effort.
    """
    from approvaldesk.notifications.senders import SmtpEmailSender
    from approvaldesk.notifications.templates import EmailMessage

    try:
        _run_async(SmtpEmailSender(settings).send(EmailMessage(to=to, subject=subject, html=html)))
        logger.info("Email %r sent to %s", subject, to)
    except Exception:
        logger.exception("Failed to send email %r to %s", subject, to, extra={"recipient": to})
