from __future__ import annotations

import json

import httpx
import pytest

from kiss_proposal.client.form_controller import (
    EMPTY_INPUT_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    ProposalFormController,
)
from kiss_proposal.client.usage import UsageStore

ENDPOINT = "http://proposals.test/generate"


class Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _ok(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(
        200,
        json={"proposal": f"On it: {body['description']}", "special_instructions_found": ["say hi"]},
    )


def _make(tmp_path, handler, limit: int = 3, clock=None, copied_to=None) -> ProposalFormController:
    usage = UsageStore(tmp_path / "usage.json", daily_limit=limit, today=lambda: "2025-03-01")
    calls = []

    def counting(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    form = ProposalFormController(
        usage,
        endpoint_url=ENDPOINT,
        http_client=httpx.Client(transport=httpx.MockTransport(counting)),
        clipboard=(copied_to.append if copied_to is not None else lambda text: None),
        clock=clock or Clock(),
    )
    form.calls = calls  # type: ignore[attr-defined]
    return form


def test_successful_submit(tmp_path) -> None:
    form = _make(tmp_path, _ok)
    form.description = "Build a landing page"
    assert form.can_submit

    assert form.submit() is True
    assert form.proposal == "On it: Build a landing page"
    assert form.special_instructions == ["say hi"]
    assert form.error is None
    assert form.loading is False
    assert form.usage.counter.count == 1
    assert form.calls[0].method == "POST"
    assert json.loads(form.calls[0].content) == {"description": "Build a landing page"}


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_input_never_calls_endpoint(tmp_path, text: str) -> None:
    form = _make(tmp_path, _ok)
    form.description = text
    assert not form.can_submit
    for _ in range(2):
        assert form.submit() is False
        assert form.error == EMPTY_INPUT_MESSAGE
    assert form.calls == []
    assert form.usage.counter.count == 0


def test_quota_blocks_submission(tmp_path) -> None:
    (tmp_path / "usage.json").write_text(json.dumps({"count": 2, "dateStamp": "2025-03-01"}))
    form = _make(tmp_path, _ok, limit=2)
    form.description = "Need a logo"

    assert form.quota_exhausted
    assert not form.can_submit
    assert form.submit() is False
    assert "Come back tomorrow" in form.error
    assert form.calls == []


def test_stale_quota_resets_on_load(tmp_path) -> None:
    (tmp_path / "usage.json").write_text(json.dumps({"count": 9, "dateStamp": "2025-02-28"}))
    form = _make(tmp_path, _ok, limit=2)
    form.description = "Need a logo"
    assert form.submit() is True
    assert form.usage.counter.count == 1


def test_network_error_message(tmp_path) -> None:
    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    form = _make(tmp_path, unreachable)
    form.description = "Need a logo"
    assert form.submit() is False
    assert form.error == NETWORK_ERROR_MESSAGE
    assert form.loading is False
    assert form.usage.counter.count == 0


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "Provider request failed"}),
        httpx.Response(429, json={"error": "Rate limit exceeded"}),
        httpx.Response(200, text="<html>oops</html>"),
        httpx.Response(200, json={"unexpected": True}),
    ],
)
def test_generic_error_message(tmp_path, response: httpx.Response) -> None:
    form = _make(tmp_path, lambda request: response)
    form.description = "Need a logo"
    assert form.submit() is False
    assert form.error == GENERIC_ERROR_MESSAGE
    assert form.loading is False
    assert form.proposal == ""
    assert form.usage.counter.count == 0


def test_submit_clears_previous_result(tmp_path) -> None:
    responses = iter([_ok, lambda request: httpx.Response(500, json={"error": "x"})])
    form = _make(tmp_path, lambda request: next(responses)(request))
    form.description = "First job"
    assert form.submit()
    assert form.proposal

    assert not form.submit()
    assert form.proposal == ""
    assert form.special_instructions == []


def test_loading_blocks_resubmission(tmp_path) -> None:
    form = _make(tmp_path, _ok)
    form.description = "Need a logo"
    form.loading = True
    assert not form.can_submit
    assert form.submit() is False
    assert form.calls == []


def test_copy_to_clipboard_resets_after_two_seconds(tmp_path) -> None:
    clock = Clock()
    copied: list[str] = []
    form = _make(tmp_path, _ok, clock=clock, copied_to=copied)
    form.description = "Need a logo"
    form.submit()

    assert form.copied is False
    form.copy_to_clipboard()
    assert copied == ["On it: Need a logo"]
    assert form.copied is True
    clock.now += 1.9
    assert form.copied is True
    clock.now += 0.2
    assert form.copied is False


def test_copy_without_proposal_is_noop(tmp_path) -> None:
    copied: list[str] = []
    form = _make(tmp_path, _ok, copied_to=copied)
    form.copy_to_clipboard()
    assert copied == []
    assert form.copied is False


def test_null_instructions_treated_as_empty(tmp_path) -> None:
    form = _make(
        tmp_path,
        lambda request: httpx.Response(200, json={"proposal": "Sure thing!", "special_instructions_found": None}),
    )
    form.description = "Need a logo"
    assert form.submit() is True
    assert form.proposal == "Sure thing!"
    assert form.special_instructions == []


def test_close_only_owned_client(tmp_path) -> None:
    injected = httpx.Client(transport=httpx.MockTransport(_ok))
    usage = UsageStore(tmp_path / "usage.json", daily_limit=3, today=lambda: "2025-03-01")
    with ProposalFormController(usage, http_client=injected) as form:
        assert form.http_client is injected
    assert not injected.is_closed

    with ProposalFormController(usage) as owned:
        client = owned.http_client
    assert client.is_closed
    injected.close()
