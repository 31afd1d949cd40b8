import logging
import logging.config

from bill_extractor.core.config import settings

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once; later calls only adjust the level."""
    global _configured

    resolved = (level or settings.LOG_LEVEL or "INFO").upper()
    if _configured:
        logging.getLogger().setLevel(resolved)
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": _LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"handlers": ["console"], "level": resolved},
            "loggers": {
                # SDK clients log every request at INFO
                "httpx": {"level": "WARNING"},
                "openai": {"level": "WARNING"},
                "anthropic": {"level": "WARNING"},
            },
        }
    )
    _configured = True
