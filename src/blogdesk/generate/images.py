"""Featured image generation with Google Vertex AI Imagen.

Requires a Google Cloud project with the Vertex AI API enabled. Credentials
come from Application Default Credentials (``GOOGLE_APPLICATION_CREDENTIALS``
pointing at a service account key, or ``gcloud auth application-default
login``). The service account needs the "Vertex AI User" role.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from blogdesk.config import (
    IMAGEN_LOCATION_DEFAULT,
    IMAGEN_MODEL_DEFAULT,
    IMAGEN_TIMEOUT_SECONDS,
    Settings,
)
from blogdesk.errors import GenerationError

log = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

TONE_STYLES = {
    "casual": "friendly and approachable",
    "friendly": "warm and inviting",
    "authoritative": "bold and professional",
    "conversational": "natural and relatable",
}
DEFAULT_STYLE = "clean and professional"

IMAGE_PROMPT_TEMPLATE = """\
Create a {style} blog header image for an article titled: "{subject}"

{context}

Style requirements:
- Modern, clean design suitable for a business blog
- Abstract or conceptual representation (no text or words in the image)
- Professional color palette
- High quality, suitable for web use
- Subtle and sophisticated, not cartoonish
- Should visually complement the article topic
"""

TokenProvider = Callable[[], str]


@dataclass
class GeneratedImage:
    image_data: bytes
    mime_type: str


def build_blog_image_prompt(
    topic: str,
    tone: str = "professional",
    title: Optional[str] = None,
    excerpt: Optional[str] = None,
) -> str:
    """Image prompt for a blog header, preferring the title over the topic."""
    return IMAGE_PROMPT_TEMPLATE.format(
        style=TONE_STYLES.get(tone, DEFAULT_STYLE),
        subject=title or topic,
        context=f"Context: {excerpt}" if excerpt else "",
    )


class ApplicationDefaultCredentials:
    """Token provider backed by google-auth Application Default Credentials."""

    def __init__(self, scopes: tuple[str, ...] = (CLOUD_PLATFORM_SCOPE,)):
        self.scopes = list(scopes)
        self._credentials = None

    def __call__(self) -> str:
        import google.auth
        from google.auth.transport.requests import Request

        if self._credentials is None:
            self._credentials, _project = google.auth.default(scopes=self.scopes)
        if not self._credentials.valid:
            self._credentials.refresh(Request())
        return self._credentials.token


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return response.text


class ImagenClient:
    """Calls the Imagen ``:predict`` endpoint for one image at a time."""

    def __init__(
        self,
        project: str,
        location: str = IMAGEN_LOCATION_DEFAULT,
        model: str = IMAGEN_MODEL_DEFAULT,
        token_provider: TokenProvider | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = IMAGEN_TIMEOUT_SECONDS,
    ):
        self.project = project
        self.location = location
        self.model = model
        self.token_provider = token_provider or ApplicationDefaultCredentials()
        self.http_client = http_client or httpx.Client(timeout=timeout)

    @property
    def endpoint(self) -> str:
        return (
            f"https://{self.location}-aiplatform.googleapis.com/v1/projects/{self.project}"
            f"/locations/{self.location}/publishers/google/models/{self.model}:predict"
        )

    def _access_token(self) -> str:
        try:
            return self.token_provider()
        except Exception as e:
            log.error("Imagen: failed to get access token - %s", e)
            raise GenerationError("Authentication failed") from e

    def generate_image(self, prompt: str, aspect_ratio: str = "16:9") -> GeneratedImage:
        """Generate one image. Raises GenerationError on any failure."""
        body = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": aspect_ratio,
                "addWatermark": False,
                "safetySetting": "block_medium_and_above",
            },
        }
        headers = {"Authorization": f"Bearer {self._access_token()}"}

        try:
            response = self.http_client.post(self.endpoint, json=body, headers=headers)
        except httpx.TimeoutException as e:
            log.error("Imagen: request timeout")
            raise GenerationError("Request timed out", retryable=True) from e
        except httpx.HTTPError as e:
            log.error("Imagen: request failed - %s", e)
            raise GenerationError("Failed to connect to Imagen API", retryable=True) from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> GeneratedImage:
        status = response.status_code
        if status == 200:
            try:
                prediction = response.json()["predictions"][0]
                image_data = base64.b64decode(prediction["bytesBase64Encoded"], validate=True)
            except (ValueError, KeyError, IndexError, TypeError, binascii.Error) as e:
                log.error("Imagen: unexpected response structure: %s", response.text[:500])
                raise GenerationError("Unexpected response format") from e
            return GeneratedImage(
                image_data=image_data,
                mime_type=prediction.get("mimeType") or "image/png",
            )

        if status == 400:
            message = _error_message(response)
            log.error("Imagen: bad request - %s", message)
            raise GenerationError(f"Invalid request: {message}")
        if status == 401:
            log.error("Imagen: authentication failed")
            raise GenerationError("Authentication failed - check credentials")
        if status == 403:
            log.error("Imagen: permission denied")
            raise GenerationError("Permission denied - check service account permissions")
        if status == 429:
            log.warning("Imagen: rate limited")
            raise GenerationError("Rate limited - please try again later", retryable=True)

        log.error("Imagen: unexpected status %s: %s", status, response.text[:500])
        raise GenerationError(f"API error (status {status})", retryable=status >= 500)

    def generate_blog_image(
        self,
        topic: str,
        tone: str = "professional",
        title: Optional[str] = None,
        excerpt: Optional[str] = None,
        aspect_ratio: str = "16:9",
    ) -> GeneratedImage:
        """Featured image for a post, styled by its tone."""
        prompt = build_blog_image_prompt(topic, tone, title, excerpt)
        log.info("Generating featured image for %r", title or topic)
        return self.generate_image(prompt, aspect_ratio=aspect_ratio)


def create_imagen_client(settings: Settings, **kwargs) -> ImagenClient:
    """Build an ImagenClient from settings.

    Raises GenerationError when no Google Cloud project is configured.
    """
    if not settings.imagen_configured:
        raise GenerationError("Google Cloud credentials not configured")
    return ImagenClient(
        settings.google_cloud_project,
        location=settings.google_cloud_location,
        model=settings.imagen_model,
        **kwargs,
    )
