"""POST /api/upload-from-url end to end (origin and relays mocked at the HTTP layer)."""

import httpx
import pytest

from app.api.v1.dependencies import get_app_settings
from app.core.config import Settings
from app.main import app

PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 16


def _origin(content: bytes = PNG, content_type: str = "image/png", status: int = 200):
    return lambda request: httpx.Response(status, content=content, headers={"Content-Type": content_type})


def _telegram_ok(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/sendPhoto"):
        result = {"message_id": 11, "photo": [{"file_id": "AgACthumb", "file_size": 10}, {"file_id": "AgACfile", "file_size": 24}]}
    else:
        result = {"message_id": 12, "document": {"file_id": "BQACdoc"}}
    return httpx.Response(200, json={"ok": True, "result": result})


async def test_upload_then_file_info(client, outbound_handler, outbound_calls) -> None:
    outbound_handler["example.com/pic.png"] = _origin()
    outbound_handler["api.telegram.org/bot"] = _telegram_ok

    response = await client.post("/api/upload-from-url", json={"url": "https://example.com/pic.png"})

    assert response.status_code == 200
    assert response.json() == [{"src": "/file/AgACfile.png"}]
    assert [r.url.host for r in outbound_calls] == ["example.com", "api.telegram.org"]
    assert outbound_calls[1].url.path == "/bot123:test-token/sendPhoto"

    info = await client.get("/api/file-info/AgACfile.png")
    assert info.status_code == 200
    body = info.json()
    assert body["success"] is True
    assert body["fileId"] == "AgACfile.png"
    assert body["key"] == "AgACfile.png"
    assert body["fileName"] == "pic.png"
    assert body["fileSize"] == len(PNG)
    assert body["storageType"] == "telegram"
    assert body["listType"] == "None"
    assert info.headers["cache-control"] == "public, max-age=3600"
    assert info.headers["access-control-allow-origin"] == "*"


async def test_non_image_goes_out_as_document(client, outbound_handler, outbound_calls) -> None:
    outbound_handler["files.example.com/report"] = _origin(b"%PDF-1.4", "application/pdf")
    outbound_handler["api.telegram.org/bot"] = _telegram_ok

    response = await client.post(
        "/api/upload-from-url",
        json={"url": "https://files.example.com/report", "storageMode": "telegram"},
    )

    assert response.json() == [{"src": "/file/BQACdoc.pdf"}]
    assert outbound_calls[-1].url.path.endswith("/sendDocument")


async def test_rejected_photo_is_retried_as_document(client, outbound_handler, outbound_calls) -> None:
    def relay(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/sendPhoto"):
            return httpx.Response(400, json={"ok": False, "description": "Bad Request: IMAGE_PROCESS_FAILED"})
        return _telegram_ok(request)

    outbound_handler["example.com/pic.png"] = _origin()
    outbound_handler["api.telegram.org/bot"] = relay

    response = await client.post("/api/upload-from-url", json={"url": "https://example.com/pic.png"})

    assert response.status_code == 200
    assert response.json() == [{"src": "/file/BQACdoc.png"}]
    assert [r.url.path.rsplit("/", 1)[-1] for r in outbound_calls[1:]] == ["sendPhoto", "sendDocument"]


async def test_relay_payload_rejection_is_413(client, outbound_handler) -> None:
    outbound_handler["example.com/pic.png"] = _origin()
    outbound_handler["api.telegram.org/bot"] = lambda r: httpx.Response(413, json={"ok": False})

    response = await client.post("/api/upload-from-url", json={"url": "https://example.com/pic.png"})

    assert response.status_code == 413
    assert response.json() == {"error": "Telegram upload failed: file size must not exceed 20MB"}


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({}, "Please provide a valid URL"),
        ({"url": ""}, "Please provide a valid URL"),
        ({"url": 12}, "Please provide a valid URL"),
        ({"url": "ftp://example.com/a.png"}, "Only HTTP/HTTPS URLs are supported"),
        ({"url": "not a url"}, "Invalid URL format"),
    ],
)
async def test_invalid_url(client, outbound_calls, payload, message) -> None:
    response = await client.post("/api/upload-from-url", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == message
    assert outbound_calls == []


async def test_body_must_be_json(client) -> None:
    response = await client.post(
        "/api/upload-from-url", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Request body must be valid JSON"


async def test_body_must_be_an_object(client, outbound_calls) -> None:
    response = await client.post("/api/upload-from-url", json=["https://example.com/pic.png"])
    assert response.status_code == 400
    assert response.json()["error"] == "Request validation failed"
    assert response.json()["details"][0]["loc"] == ["body"]
    assert outbound_calls == []


async def test_non_string_storage_mode_is_rejected(client, outbound_calls) -> None:
    response = await client.post(
        "/api/upload-from-url", json={"url": "https://example.com/pic.png", "storageMode": 3}
    )
    assert response.status_code == 400
    assert response.json()["details"][0]["loc"] == ["body", "storageMode"]
    assert outbound_calls == []


async def test_request_body_documented_from_model(client) -> None:
    schema = (await client.get("/openapi.json")).json()
    body = schema["paths"]["/api/upload-from-url"]["post"]["requestBody"]
    ref = body["content"]["application/json"]["schema"]["$ref"]
    assert ref.endswith("/UploadFromUrlRequest")
    assert set(schema["components"]["schemas"]["UploadFromUrlRequest"]["properties"]) == {"url", "storageMode"}


async def test_unknown_storage_mode(client, outbound_calls) -> None:
    response = await client.post(
        "/api/upload-from-url", json={"url": "https://example.com/pic.png", "storageMode": "dropbox"}
    )
    assert response.status_code == 400
    assert response.json()["error"].startswith("Unsupported storage mode: dropbox")
    assert outbound_calls == []


async def test_unconfigured_backend(client, outbound_handler) -> None:
    outbound_handler["example.com/pic.png"] = _origin()
    response = await client.post(
        "/api/upload-from-url", json={"url": "https://example.com/pic.png", "storageMode": "r2"}
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Storage backend 'r2' is not configured; upload is not possible"}


async def test_origin_error_is_502(client, outbound_handler, outbound_calls) -> None:
    outbound_handler["example.com/gone.png"] = lambda r: httpx.Response(404)
    response = await client.post("/api/upload-from-url", json={"url": "https://example.com/gone.png"})

    assert response.status_code == 502
    assert response.json() == {"error": "Target URL returned an error: 404 Not Found"}
    assert len(outbound_calls) == 1


async def test_empty_origin_body(client, outbound_handler) -> None:
    outbound_handler["example.com/empty"] = _origin(b"")
    response = await client.post("/api/upload-from-url", json={"url": "https://example.com/empty"})
    assert response.status_code == 400
    assert response.json() == {"error": "The target URL returned empty content"}


class TestGuestCallers:
    """Auth code configured: callers without it go through the guest quota."""

    @pytest.fixture
    def guarded(self, client):
        guarded_settings = Settings(
            _env_file=None,
            redis_enabled=True,
            tg_bot_token="123:test-token",
            tg_chat_id="-1001",
            auth_code="s3cret",
            guest_max_file_size=8,
            guest_daily_limit=1,
        )
        app.dependency_overrides[get_app_settings] = lambda: guarded_settings
        return client

    async def test_guest_size_limit(self, guarded, outbound_handler, outbound_calls) -> None:
        outbound_handler["example.com/pic.png"] = _origin()
        response = await guarded.post("/api/upload-from-url", json={"url": "https://example.com/pic.png"})

        assert response.status_code == 413
        assert response.json() == {"error": "Guest uploads are limited to 8 B"}
        assert [r.url.host for r in outbound_calls] == ["example.com"]

    @pytest.mark.parametrize(
        "credentials",
        [
            {"headers": {"Authorization": "Bearer s3cret"}},
            {"headers": {"X-Auth-Code": "s3cret"}},
            {"cookies": {"authCode": "s3cret"}},
        ],
    )
    async def test_auth_code_bypasses_quota(self, guarded, outbound_handler, credentials) -> None:
        outbound_handler["example.com/pic.png"] = _origin()
        outbound_handler["api.telegram.org/bot"] = _telegram_ok
        if "cookies" in credentials:
            guarded.cookies.update(credentials["cookies"])
        response = await guarded.post(
            "/api/upload-from-url",
            json={"url": "https://example.com/pic.png"},
            headers=credentials.get("headers"),
        )
        assert response.status_code == 200

    async def test_daily_limit(self, guarded, outbound_handler, fake_redis) -> None:
        outbound_handler["example.com/tiny.png"] = _origin(b"tiny")
        outbound_handler["api.telegram.org/bot"] = _telegram_ok

        first = await guarded.post("/api/upload-from-url", json={"url": "https://example.com/tiny.png"})
        second = await guarded.post("/api/upload-from-url", json={"url": "https://example.com/tiny.png"})

        assert first.status_code == 200
        assert second.status_code == 429
        assert second.json() == {"error": "Daily guest upload limit reached (1)"}
        assert any(key.startswith("guest:") for key in fake_redis.store)
