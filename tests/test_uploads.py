"""Tests for upload validation, report media and metadata-only uploads."""

import asyncio
import base64

import pytest
from fastapi import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.errors import FileTooLarge, InvalidFile
from app.core.middleware import BodySizeLimitMiddleware
from app.core.settings import settings
from app.main import app
from app.services.upload_handler import UploadHandler, get_upload_handler

MIB = 1024 * 1024
PNG_HEADER = b"\x89PNG\r\n\x1a\n"


def png_bytes(size: int) -> bytes:
    return PNG_HEADER + b"\x00" * (size - len(PNG_HEADER))


class RecordingUploadHandler(UploadHandler):
    """Notes whether each part reached the handler spooled to disk."""

    def __init__(self):
        super().__init__(max_bytes=settings.MAX_UPLOAD_BYTES)
        self.rolled_to_disk = []

    async def accept_upload(self, upload):
        self.rolled_to_disk.append(upload.file._rolled)
        return await super().accept_upload(upload)


class TestUploadHandler:
    @pytest.mark.parametrize("mime_type", ["image/png", "image/jpeg", "IMAGE/WEBP", "application/pdf"])
    def test_accepts_images_and_pdf(self, mime_type):
        uploaded = UploadHandler().accept(b"data", mime_type, "evidence")

        assert uploaded.size_bytes == 4
        assert uploaded.mime_type == mime_type.lower()

    @pytest.mark.parametrize("mime_type", ["text/plain", "application/zip", "video/mp4", "", None])
    def test_rejects_other_types(self, mime_type):
        with pytest.raises(InvalidFile):
            UploadHandler().accept(b"data", mime_type, "notes.txt")

    def test_rejects_files_over_ceiling(self):
        with pytest.raises(FileTooLarge):
            UploadHandler(max_bytes=5 * MIB).accept(png_bytes(6 * MIB), "image/png", "big.png")

    def test_accepts_file_at_ceiling(self):
        uploaded = UploadHandler(max_bytes=5 * MIB).accept(png_bytes(5 * MIB), "image/png", "edge.png")

        assert uploaded.size_bytes == 5 * MIB

    def test_data_uri_combines_type_and_content(self):
        uploaded = UploadHandler().accept(b"%PDF-1.4", "application/pdf", "doc.pdf")

        assert uploaded.as_data_uri() == "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4").decode()

    def test_metadata_has_no_content(self):
        uploaded = UploadHandler().accept(b"abc", "image/gif", "map.gif")

        assert uploaded.metadata() == {"original_name": "map.gif", "size": 3, "mimetype": "image/gif"}


class TestUploadRoute:
    def test_text_file_rejected_before_persistence(self, client, db):
        resp = client.post("/upload", files={"file": ("notes.txt", b"hello", "text/plain")})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid file type"}
        assert list(db.collection("files").stream()) == []

    def test_six_mib_image_rejected(self, client, db):
        resp = client.post("/upload", files={"file": ("big.png", png_bytes(6 * MIB), "image/png")})

        assert resp.status_code == 413
        assert resp.json() == {"error": "File too large"}
        assert list(db.collection("files").stream()) == []

    def test_one_mib_png_metadata_saved(self, client, db):
        resp = client.post("/upload", files={"file": ("photo.png", png_bytes(MIB), "image/png")})

        assert resp.status_code == 200
        assert resp.json()["message"] == "File metadata saved!"
        stored = db.collection("files").document(resp.json()["id"]).get().to_dict()
        assert stored["original_name"] == "photo.png"
        assert stored["size"] == MIB
        assert stored["mimetype"] == "image/png"
        assert "content" not in stored

    def test_two_mib_png_stays_in_memory(self, client):
        handler = RecordingUploadHandler()
        app.dependency_overrides[get_upload_handler] = lambda: handler

        resp = client.post("/upload", files={"file": ("photo.png", png_bytes(2 * MIB), "image/png")})

        assert resp.status_code == 200
        assert handler.rolled_to_disk == [False]

    def test_twenty_mib_body_refused_before_parsing(self, client, db):
        handler = RecordingUploadHandler()
        app.dependency_overrides[get_upload_handler] = lambda: handler

        resp = client.post("/upload", files={"file": ("huge.png", png_bytes(20 * MIB), "image/png")})

        assert resp.status_code == 413
        assert resp.json() == {"error": "File too large"}
        assert handler.rolled_to_disk == []
        assert list(db.collection("files").stream()) == []

    def test_missing_file(self, client):
        resp = client.post("/upload", data={"other": "field"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "No file uploaded"}


class TestReportRoute:
    def test_report_with_media_stores_data_uri(self, client, auth_headers, db):
        resp = client.post(
            "/api/reports",
            data={"description": "Tree fallen across the road", "location": "MG Road, Pune"},
            files={"media": ("tree.png", png_bytes(64), "image/png")},
            headers=auth_headers,
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["description"] == "Tree fallen across the road"
        assert body["location"] == "MG Road, Pune"
        assert body["media"].startswith("data:image/png;base64,")
        assert base64.b64decode(body["media"].split(",", 1)[1]) == png_bytes(64)
        assert db.collection("reports").document(body["id"]).get().exists

    def test_report_without_media(self, client, auth_headers):
        resp = client.post("/api/reports", data={"description": "Streetlight out"}, headers=auth_headers)

        assert resp.status_code == 201
        assert resp.json()["media"] is None
        assert resp.json()["location"] is None

    def test_report_with_invalid_media_is_not_stored(self, client, auth_headers, db):
        resp = client.post(
            "/api/reports",
            data={"description": "Zip attached"},
            files={"media": ("archive.zip", b"PK\x03\x04", "application/zip")},
            headers=auth_headers,
        )

        assert resp.status_code == 400
        assert list(db.collection("reports").stream()) == []

    def test_report_requires_token(self, client, db):
        resp = client.post("/api/reports", data={"description": "No token"})

        assert resp.status_code == 401
        assert list(db.collection("reports").stream()) == []


class BodyStream:
    """ASGI receive callable serving fixed chunks and counting reads."""

    def __init__(self, chunks):
        self.chunks = chunks
        self.reads = 0

    async def __call__(self):
        chunk = self.chunks[self.reads]
        self.reads += 1
        return {"type": "http.request", "body": chunk, "more_body": self.reads < len(self.chunks)}


async def echo_length(scope, receive, send):
    body = await Request(scope, receive).body()
    await JSONResponse({"length": len(body)})(scope, receive, send)


def call_guarded(max_bytes, headers, stream):
    sent = []

    async def send(message):
        sent.append(message)

    scope = {"type": "http", "method": "POST", "path": "/upload", "headers": headers, "query_string": b""}
    asyncio.run(BodySizeLimitMiddleware(echo_length, max_bytes=max_bytes)(scope, stream, send))
    return sent


class TestBodySizeLimitMiddleware:
    def test_declared_length_over_limit_is_refused_unread(self):
        stream = BodyStream([b"x" * 4])

        sent = call_guarded(10, [(b"content-length", str(20 * MIB).encode())], stream)

        assert sent[0]["status"] == 413
        assert stream.reads == 0

    def test_streamed_body_stops_once_over_limit(self):
        stream = BodyStream([b"x" * 4] * 10)

        with pytest.raises(HTTPException) as exc_info:
            call_guarded(10, [], stream)

        assert exc_info.value.status_code == 413
        assert stream.reads == 3

    def test_body_within_limit_passes_through(self):
        stream = BodyStream([b"x" * 4, b"y" * 4])

        sent = call_guarded(10, [(b"content-length", b"8")], stream)

        assert sent[0]["status"] == 200
        assert stream.reads == 2
