from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from app.config import settings

celery_app = Celery(
    "adscripts",
    broker=settings.redis_url,
    backend=settings.redis_url,
)
celery_app.conf.update(worker_prefetch_multiplier=1)

@celery_setup_logging.connect
def _configure_logging(**kwargs):
    from app.logging_setup import setup_logging
    setup_logging()

@celery_app.task(name="trigger_workflow")
def trigger_workflow(task_id: str) -> str | None:
    from app.dependencies import build_dispatch_client
    rec = build_dispatch_client().dispatch(task_id)
    return rec.status.value if rec else None
