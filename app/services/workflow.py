import logging
from typing import Optional

import httpx
import orjson
from pydantic import ValidationError

from ..config import settings
from ..errors import DispatchRejected, TransientNetworkError
from ..models import WorkflowResult
from ..storage.schema import TaskRecord
from .signature import SignatureCodec

logger = logging.getLogger(__name__)

RESULT_KEYS = {"new_script", "analysis", "error"}


class WorkflowClient:
    """Fires a task at the n8n webhook.

    The call only waits for the engine to accept the request. The engine
    normally answers later through the callback URL, but may return the result
    in the response body right away.
    """

    def __init__(
        self,
        codec: SignatureCodec,
        webhook_url: str = settings.n8n_webhook_url,
        app_url: str = settings.app_url,
        timeout: float = settings.dispatch_timeout_seconds,
        signature_header: str = settings.n8n_signature_header,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.codec = codec
        self.webhook_url = webhook_url
        self.app_url = app_url
        self.timeout = timeout
        self.signature_header = signature_header
        self.transport = transport

    def callback_url(self, task_id: str) -> str:
        return f"{self.app_url.rstrip('/')}/ad-scripts/{task_id}/result"

    def build_payload(self, task: TaskRecord) -> dict:
        return {
            "task_id": task.id,
            "reference_script": task.reference_script,
            "outcome_description": task.outcome_description,
            "callback_url": self.callback_url(task.id),
        }

    def trigger(self, task: TaskRecord) -> Optional[WorkflowResult]:
        body = self.codec.canonical(self.build_payload(task))
        headers = {
            "Content-Type": "application/json",
            self.signature_header: self.codec.sign(body),
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                r = client.post(self.webhook_url, content=body, headers=headers)
        except httpx.TimeoutException as exc:
            raise TransientNetworkError(f"Timed out after {self.timeout:g}s") from exc
        except httpx.TransportError as exc:
            raise TransientNetworkError(f"Connection error: {exc}") from exc

        if r.status_code >= 500:
            raise TransientNetworkError(f"Workflow engine returned HTTP {r.status_code}")
        if not r.is_success:
            raise DispatchRejected(f"Workflow engine rejected the request with HTTP {r.status_code}")
        return self._parse_reply(r)

    @staticmethod
    def _parse_reply(r: httpx.Response) -> Optional[WorkflowResult]:
        if not r.content:
            return None
        try:
            data = orjson.loads(r.content)
        except orjson.JSONDecodeError:
            logger.debug("Non-JSON acknowledgement from workflow engine")
            return None
        if not isinstance(data, dict) or not RESULT_KEYS & data.keys():
            return None
        try:
            return WorkflowResult.model_validate(data)
        except ValidationError as exc:
            raise DispatchRejected(f"Workflow engine returned an invalid result: {exc.errors()[0]['msg']}") from exc
