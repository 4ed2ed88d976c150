"""Structured logging for storage operations (upload, delete, signed URL)."""

import json
import logging
import sys
from typing import Any

logger = logging.getLogger("upload_provider.storage")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a stdout handler to the package logger (once) and set its level. Returns the package logger."""
    pkg_logger = logging.getLogger("upload_provider")
    pkg_logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not pkg_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        pkg_logger.addHandler(handler)
    # Host apps often configure root logging too; avoid printing each line twice.
    pkg_logger.propagate = False
    return pkg_logger


def _extra(
    event: str,
    provider: str,
    bucket: str,
    key: str,
    *,
    size_bytes: int | None = None,
    duration_ms: int | None = None,
    public: bool | None = None,
    error: str | None = None,
) -> dict[str, Any]:
    out: dict[str, Any] = {
        "event": event,
        "provider": provider,
        "bucket": bucket,
        "key": key,
    }
    if size_bytes is not None:
        out["size_bytes"] = size_bytes
    if duration_ms is not None:
        out["duration_ms"] = duration_ms
    if public is not None:
        out["public"] = public
    if error is not None:
        out["error"] = error
    return out


def log_storage_event(
    event: str,
    provider: str,
    bucket: str,
    key: str,
    *,
    size_bytes: int | None = None,
    duration_ms: int | None = None,
    public: bool | None = None,
    error: str | None = None,
) -> None:
    """Emit one JSON log line for a storage operation.
    event: uploaded | upload_failed | deleted | delete_missing | delete_failed | signed_url_issued.
    """
    extra_dict = _extra(
        event,
        provider,
        bucket,
        key,
        size_bytes=size_bytes,
        duration_ms=duration_ms,
        public=public,
        error=error,
    )
    msg = json.dumps(extra_dict)
    if event.endswith("_failed"):
        logger.error(msg, extra=extra_dict)
    elif event == "delete_missing":
        logger.warning(msg, extra=extra_dict)
    else:
        logger.info(msg, extra=extra_dict)
