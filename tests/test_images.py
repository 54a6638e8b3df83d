"""Tests for blogdesk.generate.images."""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from blogdesk.config import Settings
from blogdesk.errors import GenerationError
from blogdesk.generate.images import (
    DEFAULT_STYLE,
    ImagenClient,
    build_blog_image_prompt,
    create_imagen_client,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def _client(handler, token_provider=lambda: "token-123"):
    return ImagenClient(
        "my-project",
        token_provider=token_provider,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def _ok(request):
    return httpx.Response(200, json={
        "predictions": [{"bytesBase64Encoded": base64.b64encode(PNG_BYTES).decode()}],
    })


class TestBuildPrompt:
    def test_title_and_excerpt(self):
        prompt = build_blog_image_prompt(
            "qr codes", tone="casual", title="QR Codes 101", excerpt="Scan and connect",
        )
        assert 'Create a friendly and approachable blog header image for an article titled: "QR Codes 101"' in prompt
        assert "Context: Scan and connect" in prompt
        assert "no text or words in the image" in prompt

    def test_topic_and_default_style(self):
        prompt = build_blog_image_prompt("qr codes")
        assert f'Create a {DEFAULT_STYLE} blog header image for an article titled: "qr codes"' in prompt
        assert "Context:" not in prompt


class TestImagenClient:
    def test_endpoint(self):
        client = _client(_ok)
        assert client.endpoint == (
            "https://us-central1-aiplatform.googleapis.com/v1/projects/my-project"
            "/locations/us-central1/publishers/google/models/imagen-4.0-generate-001:predict"
        )

    def test_generate_image(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return _ok(request)

        image = _client(handler).generate_image("a prompt", aspect_ratio="1:1")

        assert image.image_data == PNG_BYTES
        assert image.mime_type == "image/png"
        assert seen["auth"] == "Bearer token-123"
        assert seen["body"]["instances"] == [{"prompt": "a prompt"}]
        assert seen["body"]["parameters"]["aspectRatio"] == "1:1"
        assert seen["body"]["parameters"]["sampleCount"] == 1

    def test_mime_type_from_response(self):
        def handler(request):
            return httpx.Response(200, json={"predictions": [{
                "bytesBase64Encoded": base64.b64encode(b"jpeg").decode(),
                "mimeType": "image/jpeg",
            }]})

        assert _client(handler).generate_image("p").mime_type == "image/jpeg"

    @pytest.mark.parametrize("status, message, retryable", [
        (401, "Authentication failed - check credentials", False),
        (403, "Permission denied - check service account permissions", False),
        (429, "Rate limited - please try again later", True),
        (500, "API error (status 500)", True),
        (404, "API error (status 404)", False),
    ])
    def test_error_statuses(self, status, message, retryable):
        client = _client(lambda request: httpx.Response(status, text="nope"))
        with pytest.raises(GenerationError) as exc:
            client.generate_image("p")
        assert str(exc.value) == message
        assert exc.value.retryable is retryable

    def test_bad_request_message(self):
        def handler(request):
            return httpx.Response(400, json={"error": {"message": "prompt blocked"}})

        with pytest.raises(GenerationError, match="Invalid request: prompt blocked"):
            _client(handler).generate_image("p")

    def test_unexpected_body(self):
        client = _client(lambda request: httpx.Response(200, json={"predictions": []}))
        with pytest.raises(GenerationError, match="Unexpected response format"):
            client.generate_image("p")

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(GenerationError, match="Request timed out") as exc:
            _client(handler).generate_image("p")
        assert exc.value.retryable is True

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GenerationError, match="Failed to connect to Imagen API"):
            _client(handler).generate_image("p")

    def test_token_failure(self):
        def broken():
            raise RuntimeError("no credentials")

        with pytest.raises(GenerationError, match="Authentication failed"):
            _client(_ok, token_provider=broken).generate_image("p")

    def test_generate_blog_image_uses_title(self):
        seen = {}

        def handler(request):
            seen["prompt"] = json.loads(request.content)["instances"][0]["prompt"]
            return _ok(request)

        _client(handler).generate_blog_image("topic", title="The Title")
        assert '"The Title"' in seen["prompt"]


class TestCreateImagenClient:
    def test_requires_project(self):
        with pytest.raises(GenerationError, match="Google Cloud credentials not configured"):
            create_imagen_client(Settings())

    def test_from_settings(self):
        client = create_imagen_client(
            Settings(google_cloud_project="proj", google_cloud_location="europe-west4"),
            token_provider=lambda: "t",
        )
        assert client.project == "proj"
        assert client.endpoint.startswith("https://europe-west4-aiplatform.googleapis.com/")
