import hashlib
import hmac
from typing import Optional, Union

import orjson

Payload = Union[dict, bytes]


class SignatureCodec:
    """HMAC-SHA256 signatures shared with the workflow engine.

    Dict payloads are canonicalized (sorted keys, compact UTF-8 JSON) before
    signing. Byte payloads are signed exactly as received; a callback body is
    never re-encoded before verification.
    """

    def __init__(self, secret: str):
        self._secret = secret.encode("utf-8")

    @staticmethod
    def canonical(payload: dict) -> bytes:
        return orjson.dumps(payload, option=orjson.OPT_SORT_KEYS)

    def sign(self, payload: Payload) -> str:
        body = payload if isinstance(payload, bytes) else self.canonical(payload)
        return hmac.new(self._secret, body, hashlib.sha256).hexdigest()

    def verify(self, signature: Optional[str], payload: Payload) -> bool:
        if not signature or not self._secret:
            return False
        supplied = signature.strip()
        if supplied.startswith("sha256="):
            supplied = supplied[len("sha256="):]
        expected = self.sign(payload)
        return hmac.compare_digest(supplied.lower().encode(), expected.encode())
