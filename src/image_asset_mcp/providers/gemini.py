"""
Google Gemini Provider
======================

Image output from Gemini's multimodal generateContent endpoint.
The reply mixes text and image parts; the first inline-data part wins.

API: https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent
"""

from typing import Any, Dict

from .base import (
    ImageProvider,
    NoCandidates,
    NoParts,
    NoImageData,
)


PROMPT_TEMPLATE = (
    "Generate an image based on the following description: {description}. "
    "Output format should be suitable for saving as a PNG file."
)


class GeminiProvider(ImageProvider):
    """Google Gemini image generation."""

    name = "gemini"
    display_name = "Google Gemini"
    default_model = "gemini-2.0-flash-exp-image-generation"

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
    TEMPERATURE = 1.0

    @property
    def url(self) -> str:
        return f"{self.BASE_URL}/{self.model}:generateContent"

    def build_payload(self, description: str) -> Dict[str, Any]:
        return {
            "contents": [
                {"parts": [{"text": PROMPT_TEMPLATE.format(description=description)}]}
            ],
            "generationConfig": {
                "responseModalities": ["TEXT", "IMAGE"],
                "temperature": self.TEMPERATURE,
            },
        }

    def extract_image(self, data: Dict[str, Any]) -> bytes:
        candidates = data.get("candidates") or []
        if not candidates:
            raise NoCandidates("No candidates in Gemini response")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        if not parts:
            raise NoParts("No content parts in Gemini response")

        # Response may contain text and image parts; find the image part
        for part in parts:
            inline_data = part.get("inlineData") or {}
            if inline_data.get("data"):
                return self._decode_image(inline_data["data"])

        raise NoImageData("No image data found in Gemini response")

    async def _request_image(self, description: str) -> bytes:
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        data = await self._post_json(self.url, headers, self.build_payload(description))
        return self.extract_image(data)
