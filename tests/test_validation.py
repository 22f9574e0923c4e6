"""Tests for tool argument validation and edge cases."""

import json
import pytest
from unittest.mock import AsyncMock, patch

from image_asset_mcp import server
from image_asset_mcp.models import ImageRequest
from image_asset_mcp.server import (
    ValidationError,
    generate_image,
    generate_images,
    parse_batch_args,
    parse_single_args,
)


VALID_IMAGE = {"description": "a castle", "filename": "castle"}


class TestParseBatchArgs:
    """Test generate_images argument validation."""

    def test_valid(self):
        batch = parse_batch_args({
            "outputFolder": "/tmp/out",
            "images": [VALID_IMAGE, {"description": "a moat", "filename": "moat"}],
        })

        assert batch.output_folder == "/tmp/out"
        assert batch.images == (
            ImageRequest("a castle", "castle"),
            ImageRequest("a moat", "moat"),
        )

    @pytest.mark.parametrize("args", [
        {},
        {"images": [VALID_IMAGE]},
        {"outputFolder": "", "images": [VALID_IMAGE]},
        {"outputFolder": "   ", "images": [VALID_IMAGE]},
        {"outputFolder": 42, "images": [VALID_IMAGE]},
        {"outputFolder": "/tmp/out"},
        {"outputFolder": "/tmp/out", "images": []},
        {"outputFolder": "/tmp/out", "images": "castle"},
        {"outputFolder": "/tmp/out", "images": ["castle"]},
        {"outputFolder": "/tmp/out", "images": [{"filename": "castle"}]},
        {"outputFolder": "/tmp/out", "images": [{"description": "a castle"}]},
        {"outputFolder": "/tmp/out", "images": [{"description": "", "filename": "castle"}]},
        {"outputFolder": "/tmp/out", "images": [{"description": "a castle", "filename": None}]},
        {"outputFolder": "/tmp/out", "images": [VALID_IMAGE, {"description": "a moat"}]},
    ])
    def test_invalid(self, args):
        with pytest.raises(ValidationError):
            parse_batch_args(args)

    def test_error_names_offending_item(self):
        with pytest.raises(ValidationError, match=r"images\[1\]\.description"):
            parse_batch_args({
                "outputFolder": "/tmp/out",
                "images": [VALID_IMAGE, {"filename": "moat"}],
            })


class TestParseSingleArgs:
    """Test generate_image argument validation."""

    def test_valid(self):
        request, folder = parse_single_args({
            "description": "a castle",
            "outputFolder": "/tmp/out",
            "filename": "castle",
        })

        assert request == ImageRequest("a castle", "castle")
        assert folder == "/tmp/out"

    @pytest.mark.parametrize("missing", ["description", "outputFolder", "filename"])
    def test_missing_field(self, missing):
        args = {"description": "a castle", "outputFolder": "/tmp/out", "filename": "castle"}
        del args[missing]

        with pytest.raises(ValidationError, match=missing):
            parse_single_args(args)


class TestRejectedCalls:
    """Invalid calls are rejected before any generation work."""

    @pytest.mark.asyncio
    async def test_empty_images_never_reaches_orchestrator(self, mock_provider):
        with patch.object(server, "PROVIDER", mock_provider), \
                patch("image_asset_mcp.server.run_batch", AsyncMock()) as run_batch:
            result = await generate_images({"outputFolder": "/tmp/out", "images": []})

        assert result.isError is True
        data = json.loads(result.content[0].text)
        assert data["overallSuccess"] is False
        assert "images" in data["error"]
        assert "results" not in data
        run_batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_description_never_reaches_orchestrator(self, mock_provider, output_dir):
        with patch.object(server, "PROVIDER", mock_provider), \
                patch("image_asset_mcp.server.run_batch", AsyncMock()) as run_batch:
            result = await generate_images({
                "outputFolder": str(output_dir),
                "images": [{"filename": "castle"}],
            })

        assert result.isError is True
        run_batch.assert_not_called()
        assert mock_provider.calls == []
        assert not output_dir.exists()

    @pytest.mark.asyncio
    async def test_single_image_missing_filename(self, mock_provider):
        with patch.object(server, "PROVIDER", mock_provider), \
                patch("image_asset_mcp.server.run_single", AsyncMock()) as run_single:
            result = await generate_image({"description": "a castle", "outputFolder": "/tmp/out"})

        assert result.isError is True
        data = json.loads(result.content[0].text)
        assert data["success"] is False
        assert "filename" in data["error"]
        run_single.assert_not_called()


class TestEdgeCases:
    """Test unusual but valid inputs."""

    @pytest.mark.asyncio
    async def test_special_characters_in_description(self, mock_provider, output_dir):
        special = [
            "test with 'single quotes'",
            'test with "double quotes"',
            "test with\nnewlines",
            "test with émojis 🎨🖼️",
            "test with unicode: 中文",
        ]

        with patch.object(server, "PROVIDER", mock_provider):
            result = await generate_images({
                "outputFolder": str(output_dir),
                "images": [
                    {"description": text, "filename": f"special_{i}"}
                    for i, text in enumerate(special)
                ],
            })

        data = json.loads(result.content[0].text)
        assert data["overallSuccess"] is True
        assert [r["description"] for r in data["results"]] == special

    @pytest.mark.asyncio
    async def test_duplicate_filenames_both_reported(self, mock_provider, output_dir):
        with patch.object(server, "PROVIDER", mock_provider):
            result = await generate_images({
                "outputFolder": str(output_dir),
                "images": [
                    {"description": "first", "filename": "same"},
                    {"description": "second", "filename": "same"},
                ],
            })

        data = json.loads(result.content[0].text)
        assert len(data["results"]) == 2
        assert [r["filename"] for r in data["results"]] == ["same", "same"]
        assert list(output_dir.iterdir()) == [output_dir / "same.png"]

    @pytest.mark.asyncio
    async def test_large_batch_preserves_length_and_order(self, mock_provider, output_dir):
        images = [{"description": f"tile {i}", "filename": f"tile_{i:03d}"} for i in range(40)]

        with patch.object(server, "PROVIDER", mock_provider):
            result = await generate_images({"outputFolder": str(output_dir), "images": images})

        data = json.loads(result.content[0].text)
        assert len(data["results"]) == len(images)
        assert [r["filename"] for r in data["results"]] == [i["filename"] for i in images]
