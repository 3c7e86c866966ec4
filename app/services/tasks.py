import logging
from typing import Callable

from ..storage.repo import TaskStore
from ..storage.schema import TaskRecord

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, store: TaskStore, schedule: Callable[[str], None]):
        self.store = store
        self.schedule = schedule

    def submit(self, reference_script: str, outcome_description: str) -> TaskRecord:
        rec = self.store.create(reference_script, outcome_description)
        try:
            self.schedule(rec.id)
        except Exception as exc:
            # broker down: the task would otherwise sit in pending forever
            logger.exception("Could not schedule dispatch for task %s", rec.id)
            return self.store.mark_failed(rec.id, f"Could not schedule dispatch: {exc}")
        return rec

    def get(self, task_id: str) -> TaskRecord:
        return self.store.get(task_id)
