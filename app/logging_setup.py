import logging
import sys

from .config import settings


def setup_logging() -> None:
    """Configure root logging to stdout at ``settings.log_level``."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # request lines from the outbound client are noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
