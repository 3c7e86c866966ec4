import logging
import time
from typing import Callable, Optional

from ..config import settings
from ..errors import DispatchRejected, InvalidTransition, TransientNetworkError
from ..models import WorkflowResult
from ..storage.repo import TaskStore
from ..storage.schema import TaskRecord
from .results import apply_result
from .workflow import WorkflowClient

logger = logging.getLogger(__name__)


class DispatchClient:
    """Hands a pending task to the workflow engine.

    Runs on a worker. Transient failures are retried with a fixed backoff;
    once attempts run out, or the engine refuses the request, the task is
    marked failed so it never stays in processing.
    """

    def __init__(
        self,
        store: TaskStore,
        workflow: WorkflowClient,
        tries: int = settings.dispatch_tries,
        backoff_seconds: float = settings.dispatch_backoff_seconds,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.workflow = workflow
        self.tries = max(1, tries)
        self.backoff_seconds = backoff_seconds
        self.sleep = sleep

    def dispatch(self, task_id: str) -> Optional[TaskRecord]:
        try:
            task = self.store.mark_processing(task_id)
        except InvalidTransition as exc:
            logger.warning("Skipping dispatch of task %s: %s", task_id, exc.message)
            return None

        last_error: Optional[TransientNetworkError] = None
        for attempt in range(1, self.tries + 1):
            logger.info("Dispatching task %s (attempt %d/%d)", task_id, attempt, self.tries)
            try:
                result = self.workflow.trigger(task)
            except TransientNetworkError as exc:
                last_error = exc
                logger.warning("Dispatch of task %s failed on attempt %d: %s", task_id, attempt, exc.message)
                if attempt < self.tries:
                    self.sleep(self.backoff_seconds)
                continue
            except DispatchRejected as exc:
                logger.error("Workflow engine rejected task %s: %s", task_id, exc.message)
                return self._fail(task_id, exc.message)

            if result is None:
                logger.info("Task %s accepted by workflow engine, awaiting callback", task_id)
                return task
            return self._apply(task_id, result)

        return self._fail(
            task_id,
            f"Workflow dispatch failed after {self.tries} attempts: {last_error.message}",
        )

    def _apply(self, task_id: str, result: WorkflowResult) -> Optional[TaskRecord]:
        try:
            return apply_result(self.store, task_id, result)
        except InvalidTransition as exc:
            logger.warning("Synchronous result for task %s not applied: %s", task_id, exc.message)
            return None

    def _fail(self, task_id: str, error_message: str) -> Optional[TaskRecord]:
        try:
            return self.store.mark_failed(task_id, error_message)
        except InvalidTransition as exc:
            # a callback got there first
            logger.warning("Could not mark task %s failed: %s", task_id, exc.message)
            return None
