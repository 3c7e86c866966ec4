import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

import redis

from ..config import settings
from ..errors import InvalidTransition, TaskNotFound, TaskValidationError
from .schema import TaskRecord, TaskStatus

logger = logging.getLogger(__name__)

# Returns the hash fields to write, or None when the transition is a replay.
Mutation = Callable[[TaskRecord], Optional[Dict[str, str]]]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TaskStore:
    """Redis-backed task records; the only writer of task state.

    Each task lives in one hash. Transitions run inside an optimistic
    transaction on that key, so a concurrent writer forces a re-read and the
    loser of a race sees the winner's state.
    """

    def __init__(
        self,
        client: redis.Redis,
        reference_min_length: int = settings.reference_script_min_length,
        outcome_min_length: int = settings.outcome_description_min_length,
    ):
        self.r = client
        self.reference_min_length = reference_min_length
        self.outcome_min_length = outcome_min_length

    def _key(self, task_id: str) -> str:
        return f"ad_script:{task_id}"

    def create(self, reference_script: str, outcome_description: str) -> TaskRecord:
        errors: Dict[str, List[str]] = {}
        self._check_length(errors, "reference_script", reference_script, self.reference_min_length)
        self._check_length(errors, "outcome_description", outcome_description, self.outcome_min_length)
        if errors:
            raise TaskValidationError(errors)

        now = _now()
        rec = TaskRecord(
            id=uuid.uuid4().hex,
            reference_script=reference_script,
            outcome_description=outcome_description,
            status=TaskStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.r.hset(self._key(rec.id), mapping=self._encode(rec))
        logger.info("Created task %s", rec.id)
        return rec

    def get(self, task_id: str) -> TaskRecord:
        data = self.r.hgetall(self._key(task_id))
        if not data:
            raise TaskNotFound(task_id)
        return self._decode(data)

    def mark_processing(self, task_id: str) -> TaskRecord:
        def mutate(rec: TaskRecord) -> Optional[Dict[str, str]]:
            if not rec.is_pending():
                raise InvalidTransition(task_id, rec.status.value, TaskStatus.PROCESSING.value)
            return {"status": TaskStatus.PROCESSING.value}

        return self._transition(task_id, mutate)

    def mark_completed(self, task_id: str, new_script: str, analysis: str) -> TaskRecord:
        def mutate(rec: TaskRecord) -> Optional[Dict[str, str]]:
            if rec.is_completed() and rec.new_script == new_script and rec.analysis == analysis:
                return None
            if not rec.is_processing():
                raise InvalidTransition(task_id, rec.status.value, TaskStatus.COMPLETED.value)
            return {
                "status": TaskStatus.COMPLETED.value,
                "new_script": new_script,
                "analysis": analysis,
            }

        return self._transition(task_id, mutate)

    def mark_failed(self, task_id: str, error_message: str) -> TaskRecord:
        # A pending task passes through processing inside the same update.
        def mutate(rec: TaskRecord) -> Optional[Dict[str, str]]:
            if rec.is_failed() and rec.error_message == error_message:
                return None
            if rec.is_terminal():
                raise InvalidTransition(task_id, rec.status.value, TaskStatus.FAILED.value)
            return {"status": TaskStatus.FAILED.value, "error_message": error_message}

        return self._transition(task_id, mutate)

    def _transition(self, task_id: str, mutate: Mutation) -> TaskRecord:
        key = self._key(task_id)

        def txn(pipe) -> Tuple[TaskRecord, bool]:
            data = pipe.hgetall(key)
            if not data:
                raise TaskNotFound(task_id)
            current = self._decode(data)
            changes = mutate(current)
            if changes is None:
                pipe.unwatch()
                return current, False
            changes["updated_at"] = _now().isoformat()
            pipe.multi()
            pipe.hset(key, mapping=changes)
            return current.model_copy(update=self._decode_changes(changes)), True

        rec, written = self.r.transaction(txn, key, value_from_callable=True)
        if written:
            logger.info("Task %s is now %s", task_id, rec.status.value)
        else:
            logger.info("Task %s already %s, replay ignored", task_id, rec.status.value)
        return rec

    @staticmethod
    def _check_length(errors: Dict[str, List[str]], field: str, value: str, minimum: int):
        if not isinstance(value, str) or not value.strip():
            errors.setdefault(field, []).append(f"The {field} field is required.")
        elif len(value.strip()) < minimum:
            errors.setdefault(field, []).append(
                f"The {field} field must be at least {minimum} characters."
            )

    @staticmethod
    def _encode(rec: TaskRecord) -> Dict[str, str]:
        return {
            "id": rec.id,
            "reference_script": rec.reference_script,
            "outcome_description": rec.outcome_description,
            "status": rec.status.value,
            "new_script": rec.new_script or "",
            "analysis": rec.analysis or "",
            "error_message": rec.error_message or "",
            "created_at": rec.created_at.isoformat(),
            "updated_at": rec.updated_at.isoformat(),
        }

    @staticmethod
    def _decode(data: Dict[str, str]) -> TaskRecord:
        return TaskRecord(
            id=data["id"],
            reference_script=data["reference_script"],
            outcome_description=data["outcome_description"],
            status=TaskStatus(data["status"]),
            new_script=data.get("new_script") or None,
            analysis=data.get("analysis") or None,
            error_message=data.get("error_message") or None,
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    @staticmethod
    def _decode_changes(changes: Dict[str, str]) -> dict:
        update: dict = dict(changes)
        update["status"] = TaskStatus(changes["status"])
        update["updated_at"] = datetime.fromisoformat(changes["updated_at"])
        return update
