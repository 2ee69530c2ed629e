import importlib.util
import warnings

import pytest
from starlette.requests import ClientDisconnect

from portal.core import errors
from portal.core.errors import PayloadTooLargeError, StorageWriteError, ValidationError
from portal.services.storage import (
    UploadStore,
    generate_upload_key,
    safe_extension,
    sanitize_file_name,
)

BASE_URL = "https://portal.example.org"


async def _chunks(*parts: bytes):
    for part in parts:
        yield part


async def _failing_chunks():
    yield b"first chunk"
    raise ClientDisconnect()


@pytest.mark.parametrize(
    "name, expected",
    [
        ("photo.PNG", ".png"),
        ("photo.webp", ".webp"),
        ("dir\\nested\\photo.gif", ".gif"),
        ("script.php", ""),
        ("photo.png.exe", ""),
        ("README", ""),
        (".png", ""),
    ],
)
def test_safe_extension(name, expected):
    assert safe_extension(name) == expected


def test_generated_keys_are_unique():
    keys = {generate_upload_key("a.png") for _ in range(200)}
    assert len(keys) == 200
    assert all(key.endswith(".png") for key in keys)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("photo.png", "photo.png"),
        ("../../etc/passwd", "passwd"),
        ("..\\..\\boot.ini", "boot.ini"),
        ("a/b/c.jpg", "c.jpg"),
        ("..", ""),
        (".", ""),
        ("", ""),
        ("dir/", "dir"),
        ("evil\x00.png", ""),
    ],
)
def test_sanitize_file_name(raw, expected):
    assert sanitize_file_name(raw) == expected


def test_issue_requires_a_name(tmp_path):
    store = UploadStore(tmp_path)
    with pytest.raises(ValidationError):
        store.issue(None, BASE_URL)
    with pytest.raises(ValidationError):
        store.issue("", BASE_URL)


def test_issue_quotes_keys_into_both_urls(tmp_path):
    issued = UploadStore(tmp_path).issue("picture.jpg", BASE_URL)
    assert issued.upload_url == f"{BASE_URL}/api/uploads/put/{issued.key}"
    assert issued.file_url == f"{BASE_URL}/uploads/{issued.key}"


@pytest.mark.asyncio
async def test_save_stream_writes_file(tmp_path):
    store = UploadStore(tmp_path)
    stored = await store.save_stream("ok.png", _chunks(b"ab", b"", b"cd"), BASE_URL)

    assert stored.name == "ok.png"
    assert stored.size == 4
    assert stored.etag == '"ok.png"'
    assert stored.file_url == f"{BASE_URL}/uploads/ok.png"
    assert (tmp_path / "ok.png").read_bytes() == b"abcd"


@pytest.mark.asyncio
async def test_save_stream_rejects_unusable_names(tmp_path):
    store = UploadStore(tmp_path)
    for name in ("..", "", "bad\x00name"):
        with pytest.raises(ValidationError):
            await store.save_stream(name, _chunks(b"x"), BASE_URL)
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_interrupted_stream_leaves_nothing_behind(tmp_path):
    store = UploadStore(tmp_path)
    (tmp_path / "keep.png").write_bytes(b"original")

    with pytest.raises(ClientDisconnect):
        await store.save_stream("keep.png", _failing_chunks(), BASE_URL)
    with pytest.raises(ClientDisconnect):
        await store.save_stream("new.png", _failing_chunks(), BASE_URL)

    assert (tmp_path / "keep.png").read_bytes() == b"original"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["keep.png"]


@pytest.mark.asyncio
async def test_size_limit_is_enforced_while_streaming(tmp_path):
    store = UploadStore(tmp_path, max_bytes=8)
    stored = await store.save_stream("exact.png", _chunks(b"1234", b"5678"), BASE_URL)
    assert stored.size == 8

    with pytest.raises(PayloadTooLargeError):
        await store.save_stream("over.png", _chunks(b"1234", b"56789"), BASE_URL)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["exact.png"]


@pytest.mark.asyncio
async def test_missing_root_is_a_storage_error(tmp_path):
    store = UploadStore(tmp_path / "gone")
    with pytest.raises(StorageWriteError):
        await store.save_stream("a.png", _chunks(b"data"), BASE_URL)


def test_error_module_imports_without_deprecation_warnings():
    module_spec = importlib.util.spec_from_file_location("errors_fresh_copy", errors.__file__)
    module = importlib.util.module_from_spec(module_spec)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        module_spec.loader.exec_module(module)
    assert not [w for w in caught if issubclass(w.category, DeprecationWarning)]
    assert module.PayloadTooLargeError.status_code == 413
