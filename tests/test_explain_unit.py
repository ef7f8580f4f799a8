from unittest.mock import Mock

import requests

from market import compute_market
from market import explain
from market.config import DEFAULT_SETTINGS

SETTINGS = dict(DEFAULT_SETTINGS, api_key="test-key", explain_timeout=5.0)


def _session(body=None, post_error=None, status_error=None, json_error=None) -> Mock:
    response = Mock()
    response.raise_for_status = Mock(side_effect=status_error)
    if json_error is not None:
        response.json = Mock(side_effect=json_error)
    else:
        response.json = Mock(return_value=body)
    session = Mock()
    session.post = Mock(return_value=response, side_effect=post_error)
    return session


def _reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_can_explain() -> None:
    assert explain.can_explain(compute_market("-P + 16", "P + 4"))
    assert explain.can_explain(compute_market("", "P + 4"))
    assert not explain.can_explain(compute_market("-P + 2", "P + 10"))


def test_build_prompt_mentions_market_and_shifts() -> None:
    prompt = explain.build_prompt(compute_market("-P + 16", "P + 4"))
    assert "Demand equation (Qd): -P + 16" in prompt
    assert "Equilibrium price (initial P_E): 6.00" in prompt
    assert "The following shifts were applied:" not in prompt

    prompt = explain.build_prompt(compute_market("-P + 16", "P + 4", demand_shift=4))
    assert "The following shifts were applied:" in prompt
    assert "Demand shift: 4" in prompt
    assert "New equilibrium quantity (new Q_E): 12.00" in prompt


def test_build_prompt_includes_error() -> None:
    result = compute_market("P + 5", "P + 2")
    prompt = explain.build_prompt(result)
    assert result.error in prompt


def test_build_payload_shape() -> None:
    assert explain.build_payload("hi") == {
        "contents": [{"role": "user", "parts": [{"text": "hi"}]}]
    }


def test_request_explanation_success() -> None:
    session = _session(body=_reply("Markets clear at P = 6."))
    result = compute_market("-P + 16", "P + 4")

    text = explain.request_explanation(result, SETTINGS, session=session)

    assert text == "Markets clear at P = 6."
    args, kwargs = session.post.call_args
    assert args[0].endswith("/models/gemini-2.0-flash:generateContent")
    assert kwargs["params"] == {"key": "test-key"}
    assert kwargs["timeout"] == 5.0
    assert "-P + 16" in kwargs["json"]["contents"][0]["parts"][0]["text"]


def test_request_explanation_unexpected_shape() -> None:
    result = compute_market("-P + 16", "P + 4")
    for body in ({}, {"candidates": []}, {"candidates": [{"content": {}}]}, []):
        session = _session(body=body)
        assert explain.request_explanation(result, SETTINGS, session) == explain.NO_EXPLANATION


def test_request_explanation_connection_failures() -> None:
    result = compute_market("-P + 16", "P + 4")

    session = _session(post_error=requests.exceptions.ConnectionError("down"))
    assert explain.request_explanation(result, SETTINGS, session) == explain.CONNECTION_ERROR

    session = _session(status_error=requests.exceptions.HTTPError("500"))
    assert explain.request_explanation(result, SETTINGS, session) == explain.CONNECTION_ERROR

    session = _session(json_error=ValueError("not json"))
    assert explain.request_explanation(result, SETTINGS, session) == explain.CONNECTION_ERROR


def test_request_explanation_defaults_to_requests(monkeypatch) -> None:
    post = Mock(return_value=Mock(raise_for_status=Mock(),
                                  json=Mock(return_value=_reply("ok"))))
    monkeypatch.setattr(explain.requests, "post", post)
    monkeypatch.setattr(explain, "get_settings", lambda: dict(SETTINGS))

    assert explain.request_explanation(compute_market("-P + 16", "P + 4")) == "ok"
    post.assert_called_once()
