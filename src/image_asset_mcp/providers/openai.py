"""
OpenAI Images Provider
======================

DALL-E text-to-image generation over the OpenAI REST API.

API: https://api.openai.com/v1/images/generations
"""

from typing import Any, Dict

from .base import (
    ImageProvider,
    EmptyResponse,
)


class OpenAIProvider(ImageProvider):
    """OpenAI DALL-E image generation."""

    name = "openai"
    display_name = "OpenAI"
    default_model = "dall-e-3"

    BASE_URL = "https://api.openai.com/v1/images/generations"
    IMAGE_SIZE = "1024x1024"

    def build_payload(self, description: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "prompt": description,
            "n": 1,
            "size": self.IMAGE_SIZE,
            "response_format": "b64_json",
        }

    def extract_image(self, data: Dict[str, Any]) -> bytes:
        """Pull the first ``b64_json`` payload out of an images reply."""
        images = data.get("data") or [{}]
        image_b64 = images[0].get("b64_json") if isinstance(images[0], dict) else None
        if not image_b64:
            raise EmptyResponse("No image data received from OpenAI")
        return self._decode_image(image_b64)

    async def _request_image(self, description: str) -> bytes:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        data = await self._post_json(self.BASE_URL, headers, self.build_payload(description))
        return self.extract_image(data)
