from fastapi import Request
from .config import settings
from .errors import Unauthorized

async def require_signature(request: Request) -> str:
    signature = request.headers.get(settings.n8n_signature_header)
    if not signature:
        raise Unauthorized()
    return signature
