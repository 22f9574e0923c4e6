"""Image generation providers."""

from .base import (
    ImageProvider,
    GenerationResult,
    ImageFormat,
    ProviderError,
    EmptyResponse,
    NoCandidates,
    NoParts,
    NoImageData,
    InvalidImageData,
    ProviderHTTPError,
    ProviderTransportError,
    detect_image_format,
)
from .openai import OpenAIProvider
from .gemini import GeminiProvider

__all__ = [
    "ImageProvider",
    "GenerationResult",
    "ImageFormat",
    "ProviderError",
    "EmptyResponse",
    "NoCandidates",
    "NoParts",
    "NoImageData",
    "InvalidImageData",
    "ProviderHTTPError",
    "ProviderTransportError",
    "detect_image_format",
    "OpenAIProvider",
    "GeminiProvider",
]
