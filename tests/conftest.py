from __future__ import annotations

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

import kiss_proposal.serve.fastapi_app as app_mod


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._json = json_data
        self._text = text

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self._text is not None:
            raise ValueError("not json")
        return self._json


class FakeClient:
    """Stands in for httpx.Client; records calls and replays a canned response."""

    calls: list[dict[str, Any]] = []
    responder: Callable[[str, dict[str, Any]], FakeResponse] | None = None

    def __init__(self, timeout: float | int | None = None) -> None:  # signature-compatible
        self.timeout = timeout

    def __enter__(self) -> "FakeClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        return None

    def post(self, url: str, headers: dict[str, str] | None = None, json: dict[str, Any] | None = None) -> FakeResponse:  # noqa: A002
        FakeClient.calls.append({"url": url, "headers": headers, "json": json})
        assert FakeClient.responder is not None
        return FakeClient.responder(url, json or {})


def anthropic_reply(text: str) -> FakeResponse:
    return FakeResponse(
        200,
        {
            "id": "msg_test",
            "type": "message",
            "role": "assistant",
            "content": [{"type": "text", "text": text}],
            "stop_reason": "end_turn",
        },
    )


@pytest.fixture
def fake_provider(monkeypatch: pytest.MonkeyPatch) -> type[FakeClient]:
    FakeClient.calls = []
    FakeClient.responder = None
    monkeypatch.setattr(app_mod.httpx, "Client", FakeClient)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    return FakeClient


@pytest.fixture
def client() -> TestClient:
    return TestClient(app_mod.app)
