"""Root logger setup for entry points. Library code only creates loggers."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # third-party HTTP clients are chatty at INFO
    for name in ("httpx", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)
