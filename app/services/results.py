import logging
from ..models import WorkflowResult
from ..storage.repo import TaskStore
from ..storage.schema import TaskRecord

logger = logging.getLogger(__name__)


def apply_result(store: TaskStore, task_id: str, result: WorkflowResult) -> TaskRecord:
    """Commit a workflow outcome to the task, whichever path delivered it."""
    if result.failed:
        logger.info("Workflow reported failure for task %s", task_id)
        return store.mark_failed(task_id, result.error)
    return store.mark_completed(task_id, result.new_script, result.analysis)
