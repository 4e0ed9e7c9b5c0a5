import logging
import sys

from app.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Third-party loggers that are too chatty at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3", "google")

_configured = False


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure root logging once and return the application logger."""
    global _configured
    level_name = (level or settings.log_level or "INFO").upper()

    if not _configured:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root = logging.getLogger()
        root.handlers = [handler]
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
        _configured = True

    logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))
    return logging.getLogger("app")
