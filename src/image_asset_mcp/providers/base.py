"""Base provider interface for image generation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any
import asyncio
import base64
import binascii

import aiohttp


class ImageFormat(Enum):
    """Image formats recognised from magic bytes."""
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    GIF = "gif"
    UNKNOWN = "unknown"

    @property
    def extension(self) -> str:
        """Get file extension for this format."""
        return {
            ImageFormat.JPEG: ".jpg",
            ImageFormat.PNG: ".png",
            ImageFormat.WEBP: ".webp",
            ImageFormat.GIF: ".gif",
            ImageFormat.UNKNOWN: ".bin",
        }[self]


def detect_image_format(data: bytes) -> ImageFormat:
    """Detect image format from magic bytes."""
    if len(data) < 4:
        return ImageFormat.UNKNOWN

    # JPEG: FFD8FF
    if data[:3] == b'\xff\xd8\xff':
        return ImageFormat.JPEG
    # PNG: 89504E47 0D0A1A0A
    if data[:8] == b'\x89PNG\r\n\x1a\n':
        return ImageFormat.PNG
    # WebP: RIFF....WEBP
    if data[:4] == b'RIFF' and len(data) >= 12 and data[8:12] == b'WEBP':
        return ImageFormat.WEBP
    # GIF: GIF87a or GIF89a
    if data[:6] in (b'GIF87a', b'GIF89a'):
        return ImageFormat.GIF

    return ImageFormat.UNKNOWN


class ProviderError(Exception):
    """Base class for failures raised while talking to a provider."""


class EmptyResponse(ProviderError):
    """The provider replied without an image payload."""


class NoCandidates(ProviderError):
    """Gemini replied without any candidate."""


class NoParts(ProviderError):
    """The first Gemini candidate has no content parts."""


class NoImageData(ProviderError):
    """No Gemini content part carries inline image data."""


class InvalidImageData(ProviderError):
    """The image payload is not valid base64."""


class ProviderHTTPError(ProviderError):
    """The provider answered with a non-success HTTP status."""

    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(f"HTTP {status}: {message}")


class ProviderTransportError(ProviderError):
    """The request never produced a usable reply (connection, JSON)."""


@dataclass
class GenerationResult:
    """Outcome of a single provider call: image bytes or an error message."""
    success: bool
    provider: str
    model: str
    prompt: str

    image_bytes: Optional[bytes] = None
    generation_time_ms: int = 0

    error: Optional[str] = None
    error_type: Optional[str] = None

    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def failure(cls, provider: str, model: str, prompt: str, exc: BaseException) -> "GenerationResult":
        return cls(
            success=False,
            provider=provider,
            model=model,
            prompt=prompt,
            error=str(exc) or type(exc).__name__,
            error_type=type(exc).__name__,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "provider": self.provider,
            "model": self.model,
            "prompt": self.prompt,
            "size_bytes": len(self.image_bytes) if self.image_bytes else 0,
            "generation_time_ms": self.generation_time_ms,
            "error": self.error,
            "error_type": self.error_type,
            "created_at": self.created_at.isoformat(),
        }


class ImageProvider(ABC):
    """Abstract base class for image generation providers.

    Subclasses implement :meth:`_request_image`, which performs exactly one
    outbound call and either returns raw image bytes or raises a
    :class:`ProviderError`. :meth:`generate` wraps it so that callers always
    get a :class:`GenerationResult` back.
    """

    name: str = "base"
    display_name: str = "Base Provider"
    default_model: str = ""

    def __init__(self, api_key: str, model: Optional[str] = None):
        self.api_key = api_key
        self.model = model or self.default_model
        self._last_error: Optional[str] = None
        self._request_count = 0
        self._failure_count = 0

    @abstractmethod
    async def _request_image(self, description: str) -> bytes:
        """Issue one provider call and return the decoded image bytes."""
        pass

    async def generate(self, description: str) -> GenerationResult:
        """Generate one image for ``description``.

        Never raises for provider-side problems; they come back as a failed
        result carrying a human-readable message.
        """
        start = datetime.now()
        self._request_count += 1
        try:
            image_bytes = await self._request_image(description)
        except Exception as e:
            self._failure_count += 1
            self._last_error = str(e) or type(e).__name__
            return GenerationResult.failure(self.name, self.model, description, e)

        return GenerationResult(
            success=True,
            provider=self.name,
            model=self.model,
            prompt=description,
            image_bytes=image_bytes,
            generation_time_ms=int((datetime.now() - start).total_seconds() * 1000),
        )

    async def check_health(self) -> Dict[str, Any]:
        """Report provider configuration and request bookkeeping."""
        return {
            "provider": self.name,
            "display_name": self.display_name,
            "model": self.model,
            "configured": bool(self.api_key),
            "request_count": self._request_count,
            "failure_count": self._failure_count,
            "last_error": self._last_error,
        }

    def _decode_image(self, image_base64: str) -> bytes:
        """Decode a base64 payload, rejecting anything that isn't valid base64."""
        try:
            return base64.b64decode(image_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidImageData(f"Invalid base64 image data from {self.display_name}: {e}") from e

    async def _post_json(self, url: str, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST ``payload`` and return the decoded JSON reply.

        Uses the transport's default timeout. Non-200 replies become
        :class:`ProviderHTTPError`, connection and decoding problems become
        :class:`ProviderTransportError`.
        """
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(url, headers=headers, json=payload) as response:
                    if response.status != 200:
                        try:
                            error_data = await response.json(content_type=None)
                            error_msg = error_data.get("error", {}).get("message", "Unknown error")
                        except (aiohttp.ContentTypeError, ValueError, AttributeError):
                            error_msg = await response.text()
                        raise ProviderHTTPError(response.status, error_msg)

                    try:
                        return await response.json(content_type=None)
                    except ValueError as e:
                        raise ProviderTransportError(
                            f"Malformed JSON from {self.display_name}: {e}"
                        ) from e
        except asyncio.TimeoutError as e:
            raise ProviderTransportError(f"Request to {self.display_name} timed out") from e
        except aiohttp.ClientError as e:
            raise ProviderTransportError(f"Request to {self.display_name} failed: {e}") from e
