import logging
import os

# Client libraries that log every outbound request at INFO.
_NOISY_LOGGERS = ("httpx", "openai")


def configure_logging() -> None:
    """Configure root logging from ``LOG_LEVEL`` and quiet HTTP client chatter."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
