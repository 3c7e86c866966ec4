import logging
from typing import Optional

import orjson
from pydantic import ValidationError

from ..errors import BadRequest, Unauthorized
from ..models import CallbackPayload
from ..storage.repo import TaskStore
from ..storage.schema import TaskRecord
from .results import apply_result
from .signature import SignatureCodec

logger = logging.getLogger(__name__)


class CallbackHandler:
    def __init__(self, store: TaskStore, codec: SignatureCodec):
        self.store = store
        self.codec = codec

    def handle_result(self, task_id: str, raw_body: bytes, signature: Optional[str]) -> TaskRecord:
        """Authenticate a callback from the workflow engine and commit its result.

        The signature is checked against the raw body before anything is
        parsed; a mismatch leaves the task untouched.
        """
        if not self.codec.verify(signature, raw_body):
            logger.warning("Rejected callback for task %s: bad signature", task_id)
            raise Unauthorized()

        payload = self._parse(raw_body)
        if payload.task_id != task_id:
            logger.warning("Rejected callback for task %s: body names task %s", task_id, payload.task_id)
            raise BadRequest("Task id in body does not match the URL")

        self.store.get(task_id)
        return apply_result(self.store, task_id, payload)

    @staticmethod
    def _parse(raw_body: bytes) -> CallbackPayload:
        try:
            return CallbackPayload.model_validate(orjson.loads(raw_body))
        except orjson.JSONDecodeError as exc:
            raise BadRequest("Callback body is not valid JSON") from exc
        except ValidationError as exc:
            raise BadRequest(f"Invalid callback body: {exc.errors()[0]['msg']}") from exc
