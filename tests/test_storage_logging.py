from __future__ import annotations

import json
import logging

from upload_provider.storage_logging import configure_logging, log_storage_event


def test_log_storage_event_levels_and_payload(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="upload_provider.storage"):
        log_storage_event("uploaded", "gcs", "media", "a.png", size_bytes=3, duration_ms=5, public=False)
        log_storage_event("delete_missing", "gcs", "media", "a.png")
        log_storage_event("upload_failed", "gcs", "media", "a.png", error="boom")

    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.INFO, logging.WARNING, logging.ERROR]
    first = json.loads(caplog.records[0].getMessage())
    assert first == {
        "event": "uploaded",
        "provider": "gcs",
        "bucket": "media",
        "key": "a.png",
        "size_bytes": 3,
        "duration_ms": 5,
        "public": False,
    }
    assert caplog.records[2].error == "boom"


def test_configure_logging_adds_single_handler() -> None:
    pkg_logger = logging.getLogger("upload_provider")
    saved = (pkg_logger.handlers[:], pkg_logger.level, pkg_logger.propagate)
    pkg_logger.handlers = []
    try:
        configure_logging("debug")
        configure_logging("debug")
        assert len(pkg_logger.handlers) == 1
        assert pkg_logger.level == logging.DEBUG
        assert pkg_logger.propagate is False
    finally:
        pkg_logger.handlers = saved[0]
        pkg_logger.setLevel(saved[1])
        pkg_logger.propagate = saved[2]
