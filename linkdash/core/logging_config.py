from __future__ import annotations

import logging

_NOISY_LOGGERS: tuple[str, ...] = (
    "botocore",
    "boto3",
    "urllib3",
    "urllib3.connectionpool",
    "httpx",
    "httpcore",
)


def _ensure_stream_handler(logger: logging.Logger) -> None:
    if any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)


def configure_logging(level_name: str | None = None) -> None:
    """Configure the root logger once and keep SDK/transport chatter at WARNING."""

    lvl = getattr(logging, (level_name or "INFO").upper(), None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(lvl)
    _ensure_stream_handler(root_logger)

    for noisy_name in _NOISY_LOGGERS:
        logging.getLogger(noisy_name).setLevel(max(lvl, logging.WARNING))
