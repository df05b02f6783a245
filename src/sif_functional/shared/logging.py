import json
import logging
import os
from typing import Any

ROOT_LOGGER = "sif_functional"
SENSITIVE_FIELDS = {"token", "authorisation_token", "session_token", "shared_secret"}


def get_logger(name: str) -> logging.Logger:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def log_event(logger: logging.Logger, message: str, level: int = logging.INFO, **fields: Any) -> None:
    if not logger.isEnabledFor(level):
        return
    masked = {key: "***" if key in SENSITIVE_FIELDS and value else value for key, value in fields.items()}
    payload = {"event": message, **masked}
    logger.log(level, json.dumps(payload, sort_keys=True, default=str))
