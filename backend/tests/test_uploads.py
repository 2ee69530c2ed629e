import logging
import re
from urllib.parse import urlparse

import pytest

KEY_PATTERN = re.compile(r"^\d{13}-[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}(\.\w+)?$")


def _key_from(url: str, prefix: str) -> str:
    path = urlparse(url).path
    assert path.startswith(prefix)
    return path.removeprefix(prefix)


async def _request_url(client, headers, name="photo.png", **extra):
    body = {"name": name, "size": 5, "contentType": "image/png", **extra}
    return await client.post("/api/uploads/request-url", json=body, headers=headers)


@pytest.mark.asyncio
async def test_request_url_returns_matching_upload_and_file_urls(client, admin_headers):
    resp = await _request_url(client, admin_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert set(data) == {"uploadURL", "fileURL", "contentType"}
    assert data["contentType"] == "image/png"

    upload_key = _key_from(data["uploadURL"], "/api/uploads/put/")
    file_key = _key_from(data["fileURL"], "/uploads/")
    assert upload_key == file_key
    assert KEY_PATTERN.match(upload_key)
    assert upload_key.endswith(".png")
    assert data["uploadURL"].startswith("http://testserver/")
    assert data["fileURL"].startswith("http://testserver/")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, suffix",
    [
        ("virus.exe", ""),
        ("archive.tar.gz", ""),
        ("Banner.JPEG", ".jpeg"),
        ("logo.svg", ".svg"),
        ("no-extension", ""),
    ],
)
async def test_request_url_keeps_only_allowed_extensions(client, admin_headers, name, suffix):
    resp = await _request_url(client, admin_headers, name=name)
    assert resp.status_code == 200
    key = _key_from(resp.json()["fileURL"], "/uploads/")
    assert KEY_PATTERN.match(key)
    if suffix:
        assert key.endswith(suffix)
    else:
        assert "." not in key


@pytest.mark.asyncio
async def test_identical_requests_yield_distinct_keys(client, admin_headers):
    first = await _request_url(client, admin_headers)
    second = await _request_url(client, admin_headers)
    assert first.status_code == second.status_code == 200
    assert first.json()["fileURL"] != second.json()["fileURL"]


@pytest.mark.asyncio
async def test_request_url_requires_name(client, admin_headers):
    resp = await client.post(
        "/api/uploads/request-url",
        json={"size": 10, "contentType": "image/png"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing file name"}

    resp = await _request_url(client, admin_headers, name="")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_request_url_honours_forwarded_headers(client, admin_headers):
    headers = {
        **admin_headers,
        "X-Forwarded-Proto": "https",
        "X-Forwarded-Host": "portal.example.org",
    }
    resp = await _request_url(client, headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["uploadURL"].startswith("https://portal.example.org/api/uploads/put/")
    assert data["fileURL"].startswith("https://portal.example.org/uploads/")


@pytest.mark.asyncio
async def test_put_then_get_returns_identical_bytes(client, admin_headers, upload_dir):
    issued = (await _request_url(client, admin_headers, name="gallery.jpg")).json()
    payload = bytes(range(256)) * 64

    put_resp = await client.put(
        issued["uploadURL"],
        content=payload,
        headers={**admin_headers, "Content-Type": "image/jpeg"},
    )
    assert put_resp.status_code == 200
    body = put_resp.json()
    assert body == {"ok": True, "fileURL": issued["fileURL"]}

    key = _key_from(issued["fileURL"], "/uploads/")
    assert put_resp.headers["etag"] == f'"{key}"'
    assert "ETag" in put_resp.headers["access-control-expose-headers"]
    assert (upload_dir / key).read_bytes() == payload
    assert not list(upload_dir.glob(".upload-*"))

    get_resp = await client.get(body["fileURL"])
    assert get_resp.status_code == 200
    assert get_resp.content == payload
    assert get_resp.headers["cache-control"] == "public, max-age=604800"

    legacy_resp = await client.get(f"/objects/{key}")
    assert legacy_resp.status_code == 200
    assert legacy_resp.content == payload


@pytest.mark.asyncio
async def test_put_replaces_existing_file(client, admin_headers, upload_dir):
    url = "/api/uploads/put/replace-me.png"
    assert (await client.put(url, content=b"first", headers=admin_headers)).status_code == 200
    assert (await client.put(url, content=b"second", headers=admin_headers)).status_code == 200
    assert (upload_dir / "replace-me.png").read_bytes() == b"second"


@pytest.mark.asyncio
async def test_unauthenticated_calls_are_rejected_without_writing(client, upload_dir):
    resp = await _request_url(client, {})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Not authenticated"}
    assert resp.headers["www-authenticate"] == "Bearer"

    resp = await client.put("/api/uploads/put/sneaky.png", content=b"data")
    assert resp.status_code == 401
    assert not (upload_dir / "sneaky.png").exists()

    bad_token = {"Authorization": "Bearer not-a-token"}
    resp = await client.put("/api/uploads/put/sneaky.png", content=b"data", headers=bad_token)
    assert resp.status_code == 401
    assert not (upload_dir / "sneaky.png").exists()


@pytest.mark.asyncio
async def test_non_admin_calls_are_forbidden(client, student, upload_dir):
    resp = await _request_url(client, student["headers"])
    assert resp.status_code == 403
    assert resp.json() == {"error": "Admin access required"}

    resp = await client.put(
        "/api/uploads/put/student.png", content=b"data", headers=student["headers"]
    )
    assert resp.status_code == 403
    assert not (upload_dir / "student.png").exists()


@pytest.mark.asyncio
async def test_traversal_segments_are_reduced_to_base_name(client, admin_headers, upload_dir):
    resp = await client.put(
        "/api/uploads/put/..%2F..%2Fescape-test.png",
        content=b"contained",
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["fileURL"] == "http://testserver/uploads/escape-test.png"
    assert (upload_dir / "escape-test.png").read_bytes() == b"contained"
    assert not (upload_dir.parent / "escape-test.png").exists()
    assert not (upload_dir.parent.parent / "escape-test.png").exists()


@pytest.mark.asyncio
async def test_oversized_upload_is_rejected_and_discarded(
    client, admin_headers, upload_dir, app_instance
):
    limit = app_instance.state.upload_store.max_bytes
    assert limit > 0
    resp = await client.put(
        "/api/uploads/put/too-big.png",
        content=b"x" * (limit + 1),
        headers=admin_headers,
    )
    assert resp.status_code == 413
    assert "error" in resp.json()
    assert not (upload_dir / "too-big.png").exists()
    assert not list(upload_dir.glob(".upload-*"))


@pytest.mark.asyncio
async def test_static_reads_are_public_and_404_when_missing(client, upload_dir):
    (upload_dir / "public-read.gif").write_bytes(b"GIF89a")
    resp = await client.get("/uploads/public-read.gif")
    assert resp.status_code == 200
    assert resp.content == b"GIF89a"

    missing = await client.get("/uploads/does-not-exist.png")
    assert missing.status_code == 404
    assert "error" in missing.json()


@pytest.mark.asyncio
async def test_in_flight_temporaries_are_not_served(client, upload_dir):
    partial = upload_dir / ".upload-abc.part"
    partial.write_bytes(b"partial")
    try:
        resp = await client.get("/uploads/.upload-abc.part")
        assert resp.status_code == 404
    finally:
        partial.unlink()


@pytest.mark.asyncio
async def test_aborted_put_is_logged_as_a_disconnect(
    client, admin_headers, upload_dir, app_instance, caplog
):
    messages = iter(
        [
            {"type": "http.request", "body": b"partial bytes", "more_body": True},
            {"type": "http.disconnect"},
        ]
    )
    sent = []

    async def receive():
        return next(messages)

    async def send(message):
        sent.append(message)

    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "PUT",
        "scheme": "http",
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 12345),
        "root_path": "",
        "path": "/api/uploads/put/aborted.png",
        "raw_path": b"/api/uploads/put/aborted.png",
        "query_string": b"",
        "headers": [
            (b"host", b"testserver"),
            (b"authorization", admin_headers["Authorization"].encode()),
        ],
    }

    with caplog.at_level(logging.INFO):
        await app_instance(scope, receive, send)

    start = next(m for m in sent if m["type"] == "http.response.start")
    assert start["status"] == 400
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert any("disconnected" in r.getMessage() for r in caplog.records)
    assert not (upload_dir / "aborted.png").exists()
    assert not list(upload_dir.glob(".upload-*"))
