# tests/unit/infrastructure/test_logger.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Unit tests for the JSON log formatter and root configuration."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import pytest

from prima_fpa.infrastructure.logging.logger import (
    _JsonFormatter,
    configure_root_logging,
    get_json_logger,
    get_request_id,
    set_request_context,
)


def _render(msg: str, level: int = logging.INFO, **extra: Any) -> dict[str, Any]:
    """Format a hand-built record and return the parsed JSON payload."""
    logger = logging.getLogger("test.prima_fpa.logger")
    record = logger.makeRecord(
        name=logger.name,
        level=level,
        fn="test_logger",
        lno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(_JsonFormatter().format(record))


def test_json_formatter_emits_stable_keys() -> None:
    payload = _render("facts.import.success")
    assert payload["message"] == "facts.import.success"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.prima_fpa.logger"
    assert "ts" in payload


def test_json_formatter_merges_extra_fields() -> None:
    payload = _render("rollup", layout="ledger", rows=12, tags={"a"})
    assert payload["layout"] == "ledger"
    assert payload["rows"] == 12
    assert payload["tags"] == ["a"]


def test_json_formatter_request_id_from_record_then_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REQUEST_ID", raising=False)
    assert _render("x", request_id="rid-1")["request_id"] == "rid-1"

    monkeypatch.setenv("REQUEST_ID", "env-rid")
    payload = _render("y")
    # Context var may be set by earlier HTTP tests; either source is acceptable.
    assert payload["request_id"] in {"env-rid", get_request_id()}


def test_set_request_context_is_visible_to_formatter() -> None:
    set_request_context(request_id="ctx-42")
    assert get_request_id() == "ctx-42"
    assert _render("z")["request_id"] == "ctx-42"


def test_json_formatter_includes_exception_info() -> None:
    logger = logging.getLogger("test.prima_fpa.logger.exc")
    try:
        raise ValueError("boom")
    except ValueError:
        record = logger.makeRecord(
            logger.name, logging.ERROR, "f", 1, "failure", (), sys.exc_info()
        )
    payload = json.loads(_JsonFormatter().format(record))
    assert payload["level"] == "ERROR"
    assert payload["exc_type"] == "ValueError"
    assert payload["exc_message"] == "boom"


def test_configure_root_logging_installs_single_json_handler(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    root.handlers.clear()
    try:
        configure_root_logging()
        configure_root_logging()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, _JsonFormatter)

        configure_root_logging("warning")
        assert root.level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_get_json_logger_propagates() -> None:
    logger = get_json_logger("prima_fpa.test")
    assert logger.name == "prima_fpa.test"
    assert logger.propagate is True
