from pydantic import BaseModel
import os

class Settings(BaseModel):
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    app_url: str = os.getenv("APP_URL", "http://localhost:8000")
    n8n_webhook_url: str = os.getenv("N8N_WEBHOOK_URL", "http://localhost:5678/webhook/ad-script")
    n8n_secret: str = os.getenv("N8N_SECRET", "")
    n8n_signature_header: str = os.getenv("N8N_SIGNATURE_HEADER", "X-N8N-Signature")
    dispatch_tries: int = int(os.getenv("DISPATCH_TRIES", 3))
    dispatch_backoff_seconds: float = float(os.getenv("DISPATCH_BACKOFF_SECONDS", 30))
    dispatch_timeout_seconds: float = float(os.getenv("DISPATCH_TIMEOUT_SECONDS", 120))
    reference_script_min_length: int = int(os.getenv("REFERENCE_SCRIPT_MIN_LENGTH", 10))
    outcome_description_min_length: int = int(os.getenv("OUTCOME_DESCRIPTION_MIN_LENGTH", 5))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
