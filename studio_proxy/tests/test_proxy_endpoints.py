"""Tests for `/api/generate-image` and `/api/chat` upstream forwarding."""
from __future__ import annotations

import json

import httpx
from fastapi.testclient import TestClient

from studio_proxy.service.app import create_app
from studio_proxy.service.proxy import (
    TIMEOUT_MESSAGE,
    build_chat_payload,
    build_image_payload,
    extract_error_message,
)
from studio_proxy.tests.utils import assert_true, json_transport


def _app(settings, handler):
    # catalog disabled so the only upstream traffic is the proxied request
    settings = settings.with_overrides(models_endpoint=None)
    transport = json_transport(handler)
    return create_app(settings, transport=transport), transport


def test_build_image_payload_openai_shape():
    body = build_image_payload("https://api.openai.com/v1/images/generations", "a cat", None, 512, None)
    assert body == {  # nosec B101
        "prompt": "a cat",
        "model": "dall-e-3",
        "n": 1,
        "size": "512x1024",
        "response_format": "b64_json",
    }


def test_build_image_payload_together_shape():
    body = build_image_payload("https://api.together.xyz/v1/images/generations", "a cat")
    assert body == {  # nosec B101
        "model": "black-forest-labs/FLUX.1-schnell",
        "prompt": "a cat",
        "width": 1024,
        "height": 1024,
        "steps": 4,
        "n": 1,
        "response_format": "b64_json",
    }


def test_build_chat_payload_orders_messages():
    history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
    body = build_chat_payload("how are you?", None, history)
    assert body["model"] == "gpt-3.5-turbo"  # nosec B101
    assert [m["role"] for m in body["messages"]] == ["system", "user", "assistant", "user"]  # nosec B101
    assert body["messages"][-1]["content"] == "how are you?"  # nosec B101
    assert body["temperature"] == 0.7 and body["max_tokens"] == 2048  # nosec B101


def test_extract_error_message_shapes():
    assert extract_error_message({"error": "bad"}, "fb") == "bad"  # nosec B101
    assert extract_error_message({"error": {"message": "worse"}}, "fb") == "worse"  # nosec B101
    assert extract_error_message({"error": {}}, "fb") == "fb"  # nosec B101
    assert extract_error_message("plain text", "fb") == "fb"  # nosec B101


def test_generate_image_success_unwraps_data(settings):
    def _handler(request):
        return httpx.Response(200, json={"created": 1, "data": [{"b64_json": "AAA"}]})

    app, transport = _app(settings, _handler)
    with TestClient(app) as client:
        resp = client.post("/api/generate-image", json={"prompt": "a red fox", "width": 768, "height": 768})
    assert resp.status_code == 200  # nosec B101
    assert resp.json() == {"success": True, "data": [{"b64_json": "AAA"}]}  # nosec B101
    sent = transport.requests[0]
    assert str(sent.url) == settings.image_endpoint  # nosec B101
    assert sent.headers["Authorization"] == "Bearer img-key"  # nosec B101
    assert json.loads(sent.content)["size"] == "768x768"  # nosec B101


def test_generate_image_without_data_key_returns_body(settings):
    app, _ = _app(settings, lambda r: httpx.Response(200, json={"output": {"url": "u"}}))
    with TestClient(app) as client:
        resp = client.post("/api/generate-image", json={"prompt": "p"})
    assert resp.json() == {"success": True, "data": {"output": {"url": "u"}}}  # nosec B101


def test_generate_image_missing_key(settings):
    app, transport = _app(settings.with_overrides(image_api_key=None), lambda r: httpx.Response(200))
    with TestClient(app) as client:
        resp = client.post("/api/generate-image", json={"prompt": "p"})
    assert resp.status_code == 500  # nosec B101
    body = resp.json()
    assert body["success"] is False  # nosec B101
    assert "IMAGE_API_KEY" in body["error"]  # nosec B101
    assert transport.requests == []  # nosec B101


def test_generate_image_relays_4xx_with_details(settings):
    upstream = {"error": {"message": "content policy violation", "type": "invalid_request_error"}}
    app, _ = _app(settings, lambda r: httpx.Response(400, json=upstream))
    with TestClient(app) as client:
        resp = client.post("/api/generate-image", json={"prompt": "p"})
    assert resp.status_code == 400  # nosec B101
    assert resp.json() == {  # nosec B101
        "success": False,
        "error": "content policy violation",
        "details": upstream,
    }


def test_generate_image_5xx_keeps_status_without_details(settings):
    app, _ = _app(settings, lambda r: httpx.Response(502, json={"error": "bad gateway"}))
    with TestClient(app) as client:
        resp = client.post("/api/generate-image", json={"prompt": "p"})
    assert resp.status_code == 502  # nosec B101
    assert resp.json() == {"success": False, "error": "bad gateway"}  # nosec B101


def test_generate_image_timeout_message(settings):
    def _slow(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    app, _ = _app(settings, _slow)
    with TestClient(app) as client:
        resp = client.post("/api/generate-image", json={"prompt": "p"})
    assert resp.status_code == 500  # nosec B101
    assert resp.json() == {"success": False, "error": TIMEOUT_MESSAGE}  # nosec B101


def test_generate_image_requires_prompt(settings):
    app, _ = _app(settings, lambda r: httpx.Response(200, json={}))
    with TestClient(app) as client:
        resp = client.post("/api/generate-image", json={"model": "dall-e-3"})
    assert resp.status_code == 422  # nosec B101


def test_chat_success(settings):
    completion = {"choices": [{"message": {"role": "assistant", "content": "hey"}}]}
    app, transport = _app(settings, lambda r: httpx.Response(200, json=completion))
    with TestClient(app) as client:
        resp = client.post(
            "/api/chat",
            json={"message": "hello", "model": "gpt-4o", "history": [{"role": "user", "content": "hi"}]},
        )
    assert resp.status_code == 200  # nosec B101
    assert resp.json() == {"success": True, "data": completion}  # nosec B101
    sent = json.loads(transport.requests[0].content)
    assert_true(sent["model"] == "gpt-4o", "explicit model must be forwarded")
    assert len(sent["messages"]) == 3  # nosec B101
    assert transport.requests[0].headers["Authorization"] == "Bearer chat-key"  # nosec B101


def test_chat_missing_key(settings):
    app, _ = _app(settings.with_overrides(chat_api_key=None), lambda r: httpx.Response(200))
    with TestClient(app) as client:
        resp = client.post("/api/chat", json={"message": "hello"})
    assert resp.status_code == 500  # nosec B101
    assert "CHAT_API_KEY" in resp.json()["error"]  # nosec B101


def test_chat_relays_rate_limit(settings):
    upstream = {"error": "slow down"}
    app, _ = _app(settings, lambda r: httpx.Response(429, json=upstream))
    with TestClient(app) as client:
        resp = client.post("/api/chat", json={"message": "hello"})
    assert resp.status_code == 429  # nosec B101
    assert resp.json() == {"success": False, "error": "slow down", "details": upstream}  # nosec B101


def test_chat_connection_error(settings):
    def _refused(request):
        raise httpx.ConnectError("connection refused", request=request)

    app, _ = _app(settings, _refused)
    with TestClient(app) as client:
        resp = client.post("/api/chat", json={"message": "hello"})
    assert resp.status_code == 500  # nosec B101
    assert resp.json() == {"success": False, "error": "connection refused"}  # nosec B101


def test_unset_endpoints_forward_to_openai_defaults(settings):
    settings = settings.with_overrides(image_endpoint=None, chat_endpoint=None)

    def _handler(request):
        if request.url.path.endswith("/images/generations"):
            return httpx.Response(200, json={"data": [{"b64_json": "AAA"}]})
        return httpx.Response(200, json={"choices": []})

    app, transport = _app(settings, _handler)
    with TestClient(app) as client:
        client.post("/api/generate-image", json={"prompt": "a cat"})
        client.post("/api/chat", json={"message": "hi"})
    assert [str(r.url) for r in transport.requests] == [  # nosec B101
        "https://api.openai.com/v1/images/generations",
        "https://api.openai.com/v1/chat/completions",
    ]
