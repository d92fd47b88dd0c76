# tests/unit/infrastructure/middleware/test_request_id.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Unit tests for RequestIdMiddleware and request id coercion."""

from __future__ import annotations

import uuid

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from prima_fpa.infrastructure.middleware.request_id import (
    _SAFE_RE,
    REQUEST_ID_HEADER,
    RequestIdMiddleware,
    coerce_request_id,
)


def _echo_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)

    @app.get("/echo")
    def echo(request: Request) -> dict[str, str | None]:
        return {"rid": getattr(request.state, "request_id", None)}

    return app


def test_coerce_request_id_keeps_safe_tokens() -> None:
    assert coerce_request_id("abc-123_456:@Z.x") == "abc-123_456:@Z.x"


def test_coerce_request_id_replaces_missing_or_unsafe() -> None:
    for raw in (None, "", "has space", "x" * 129, "semi;colon"):
        generated = coerce_request_id(raw)
        assert generated != raw
        assert uuid.UUID(generated).version == 4


def test_middleware_generates_id_and_sets_state_and_header() -> None:
    client = TestClient(_echo_app())
    r = client.get("/echo")

    assert r.status_code == 200
    rid = r.json()["rid"]
    assert r.headers[REQUEST_ID_HEADER] == rid
    assert _SAFE_RE.match(rid)


def test_middleware_preserves_valid_incoming_id() -> None:
    client = TestClient(_echo_app())
    r = client.get("/echo", headers={REQUEST_ID_HEADER: "dash-7f3a"})

    assert r.json()["rid"] == "dash-7f3a"
    assert r.headers[REQUEST_ID_HEADER] == "dash-7f3a"


def test_middleware_rejects_unsafe_incoming_id() -> None:
    client = TestClient(_echo_app())
    r = client.get("/echo", headers={REQUEST_ID_HEADER: "bad id"})

    generated = r.headers[REQUEST_ID_HEADER]
    assert generated != "bad id"
    assert r.json()["rid"] == generated
