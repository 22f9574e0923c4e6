"""Pytest configuration and fixtures for image-asset-mcp tests."""

import base64
import pytest
from unittest.mock import AsyncMock, MagicMock

# Sample base64-encoded 1x1 PNG image (valid PNG)
SAMPLE_PNG_BASE64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="


@pytest.fixture
def sample_png_bytes():
    """Return valid PNG image bytes."""
    return base64.b64decode(SAMPLE_PNG_BASE64)


@pytest.fixture
def sample_png_base64():
    """Return base64-encoded PNG."""
    return SAMPLE_PNG_BASE64


@pytest.fixture
def output_dir(tmp_path):
    """Output folder path that does not exist yet."""
    return tmp_path / "assets" / "images"


@pytest.fixture
def mock_provider():
    """Create a mock provider; descriptions listed in ``failing`` fail."""
    from image_asset_mcp.providers.base import (
        ImageProvider,
        EmptyResponse,
    )

    class MockProvider(ImageProvider):
        name = "mock"
        display_name = "Mock Provider"
        default_model = "mock-model"

        def __init__(self):
            super().__init__(api_key="test-key")
            self.failing = set()
            self.calls = []

        async def _request_image(self, description: str) -> bytes:
            self.calls.append(description)
            if description in self.failing:
                raise EmptyResponse("No image data received from Mock Provider")
            return base64.b64decode(SAMPLE_PNG_BASE64)

    return MockProvider()


@pytest.fixture
def mock_aiohttp_session():
    """Build a fake aiohttp.ClientSession whose post() yields one response."""
    def _create_session(status=200, json_data=None, text=""):
        response = MagicMock()
        response.status = status
        if isinstance(json_data, Exception):
            response.json = AsyncMock(side_effect=json_data)
        else:
            response.json = AsyncMock(return_value=json_data)
        response.text = AsyncMock(return_value=text)

        class ResponseContextManager:
            async def __aenter__(self):
                return response

            async def __aexit__(self, exc_type, exc_val, exc_tb):
                return None

        session = MagicMock()
        session.post = MagicMock(return_value=ResponseContextManager())

        class SessionContextManager:
            async def __aenter__(self):
                return session

            async def __aexit__(self, exc_type, exc_val, exc_tb):
                return None

        return MagicMock(return_value=SessionContextManager()), session

    return _create_session
