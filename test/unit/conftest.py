"""Test fixtures for upload-binder unit tests."""

from dataclasses import dataclass, field

import pytest

from upload_binder.core.router import FILE_UPLOAD_ENDPOINTS
from upload_binder.models.core import Upload

BOUNDARY = "----upload-binder-boundary"

# (field name, filename or None for a plain form field, content)
Part = tuple[str, str | None, bytes]


def encode_multipart(parts: list[Part], boundary: str = BOUNDARY) -> bytes:
    """Encode parts as a multipart/form-data body, the way a browser posts a form."""
    chunks = []
    for name, filename, data in parts:
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        chunks.append(f"--{boundary}\r\nContent-Disposition: {disposition}\r\n".encode())
        if filename is not None:
            chunks.append(b"Content-Type: application/octet-stream\r\n")
        chunks.append(b"\r\n" + data + b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks)


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: bytes | str = b""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    path: str = "/"


@dataclass
class BareRequest:
    """Request carrying no body or headers at all."""

    method: str = "GET"
    path: str = "/"


# -----------------------------------------------------------------------------
# Upload fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def photo_doc_photo() -> tuple[Upload, ...]:
    """Two 'photo' uploads around one 'doc' upload."""
    return (
        Upload(field_name="photo", data=b"first", filename="a.png"),
        Upload(field_name="doc", data=b"report", filename="b.pdf"),
        Upload(field_name="photo", data=b"second", filename="c.png"),
    )


@pytest.fixture
def make_mock_request():
    """Factory fixture to create multipart/form-data mock requests."""

    def _make(parts: list[Part] | None = None) -> MockRequest:
        headers = MockHeaders({"content-type": f"multipart/form-data; boundary={BOUNDARY}"})
        return MockRequest(body=encode_multipart(parts or []), headers=headers)

    return _make


@pytest.fixture
def make_raw_request():
    """Factory fixture to create mock requests with an arbitrary body and content type."""

    def _make(body: bytes | str = b"", content_type: str | None = None) -> MockRequest:
        headers = MockHeaders({"content-type": content_type} if content_type else {})
        return MockRequest(body=body, headers=headers)

    return _make


@pytest.fixture
def gallery_parts() -> list[Part]:
    """Two files under 'files' with a plain field and another file field between them."""
    return [
        ("files", "a.txt", b"alpha"),
        ("title", None, b"holiday"),
        ("cover", "cover.png", b"png"),
        ("files", "b.txt", b"bravo!"),
    ]


@pytest.fixture
def bare_request() -> BareRequest:
    """Request without headers or body, as seen outside a multipart request."""
    return BareRequest()


@pytest.fixture
def upload_endpoints():
    """Isolate the module-level upload endpoint table."""
    saved = dict(FILE_UPLOAD_ENDPOINTS)
    FILE_UPLOAD_ENDPOINTS.clear()
    yield FILE_UPLOAD_ENDPOINTS
    FILE_UPLOAD_ENDPOINTS.clear()
    FILE_UPLOAD_ENDPOINTS.update(saved)


@pytest.fixture
def multipart_body():
    """Factory fixture returning an encoded body and its content-type header."""

    def _make(parts: list[Part]) -> tuple[bytes, str]:
        return encode_multipart(parts), f"multipart/form-data; boundary={BOUNDARY}"

    return _make
