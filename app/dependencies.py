"""Construction of the service's collaborators.

Everything is built explicitly from settings; the API resolves these through
FastAPI ``Depends`` (and tests override them), the worker calls them directly.
"""

from functools import lru_cache

import redis
from fastapi import Depends

from .config import settings
from .services.callbacks import CallbackHandler
from .services.dispatch import DispatchClient
from .services.signature import SignatureCodec
from .services.tasks import TaskService
from .services.workflow import WorkflowClient
from .storage.repo import TaskStore


@lru_cache(maxsize=1)
def get_redis() -> redis.Redis:
    return redis.from_url(settings.redis_url, decode_responses=True)


def get_store() -> TaskStore:
    return TaskStore(get_redis())


def get_codec() -> SignatureCodec:
    return SignatureCodec(settings.n8n_secret)


def schedule_dispatch(task_id: str) -> None:
    from worker.celery_app import trigger_workflow
    trigger_workflow.delay(task_id)


def get_scheduler():
    return schedule_dispatch


def get_task_service(store: TaskStore = Depends(get_store), schedule=Depends(get_scheduler)) -> TaskService:
    return TaskService(store, schedule)


def get_callback_handler(
    store: TaskStore = Depends(get_store),
    codec: SignatureCodec = Depends(get_codec),
) -> CallbackHandler:
    return CallbackHandler(store, codec)


def build_dispatch_client() -> DispatchClient:
    return DispatchClient(get_store(), WorkflowClient(get_codec()))
