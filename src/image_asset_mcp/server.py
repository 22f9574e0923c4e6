#!/usr/bin/env python3
"""
Image Asset MCP Server
======================

Text-to-image generation exposed as MCP tools, saving results as PNG files.

Exactly one provider is active per process, picked at startup:
1. Google Gemini - when GEMINI_API_KEY is set
2. OpenAI DALL-E - when OPENAI_API_KEY is set

Without either key the server refuses to start.

MCP Tools:
- generate_image: Generate one image and save it to a folder
- generate_images: Generate several images concurrently into one folder
- get_provider_status: Report the active provider and its counters
"""

import asyncio
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

from mcp.server.models import InitializationOptions
from mcp.server import NotificationOptions, Server
import mcp.server.stdio
import mcp.types as types

from . import __version__
from .config import ConfigurationError, load_provider_config
from .models import BatchRequest, ImageRequest
from .orchestrator import run_batch, run_single
from .providers import ImageProvider


# Configure logging (stderr; stdout carries the protocol)
logging.basicConfig(
    level=os.getenv("IMAGE_ASSET_LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("image-asset-mcp")

# Create MCP server
server = Server("image-asset-mcp")

# Active provider, set once by init_provider()
PROVIDER: Optional[ImageProvider] = None


class ValidationError(ValueError):
    """Tool arguments do not match the declared input schema."""


def init_provider(env: Optional[Dict[str, str]] = None) -> ImageProvider:
    """Select the process-wide provider from the environment."""
    global PROVIDER
    config = load_provider_config(env)
    PROVIDER = config.create_provider()
    logger.info(f"Using {PROVIDER.display_name} ({PROVIDER.model})")
    return PROVIDER


def _active_provider() -> ImageProvider:
    if PROVIDER is None:
        raise ConfigurationError("Image provider has not been initialized")
    return PROVIDER


def _require_string(args: Dict[str, Any], key: str, where: str = "") -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{where}{key} must be a non-empty string")
    return value


def parse_batch_args(args: Dict[str, Any]) -> BatchRequest:
    """Validate generate_images arguments."""
    output_folder = _require_string(args, "outputFolder")

    images = args.get("images")
    if not isinstance(images, list) or not images:
        raise ValidationError("images must be a non-empty array")

    requests = []
    for index, item in enumerate(images):
        where = f"images[{index}]."
        if not isinstance(item, dict):
            raise ValidationError(f"images[{index}] must be an object with description and filename")
        requests.append(ImageRequest(
            description=_require_string(item, "description", where),
            filename=_require_string(item, "filename", where),
        ))

    return BatchRequest(output_folder=output_folder, images=tuple(requests))


def parse_single_args(args: Dict[str, Any]) -> Tuple[ImageRequest, str]:
    """Validate generate_image arguments."""
    request = ImageRequest(
        description=_require_string(args, "description"),
        filename=_require_string(args, "filename"),
    )
    return request, _require_string(args, "outputFolder")


def _json_result(payload: Dict[str, Any], is_error: bool) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=json.dumps(payload, indent=2))],
        isError=is_error,
    )


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """List available image generation tools."""
    return [
        types.Tool(
            name="generate_image",
            description="Generates an image from a text description and saves it to a file",
            inputSchema={
                "type": "object",
                "properties": {
                    "description": {
                        "type": "string",
                        "description": "Text description of the image to generate",
                        "minLength": 1
                    },
                    "outputFolder": {
                        "type": "string",
                        "description": "The folder path where the image should be saved",
                        "minLength": 1
                    },
                    "filename": {
                        "type": "string",
                        "description": "The desired filename for the image (without extension)",
                        "minLength": 1
                    }
                },
                "required": ["description", "outputFolder", "filename"]
            }
        ),
        types.Tool(
            name="generate_images",
            description="""Generates several images concurrently and saves them to one folder.

Each image is reported separately; some may succeed while others fail.
Files are written as {outputFolder}/{filename}.png.""",
            inputSchema={
                "type": "object",
                "properties": {
                    "outputFolder": {
                        "type": "string",
                        "description": "The folder path where the images should be saved",
                        "minLength": 1
                    },
                    "images": {
                        "type": "array",
                        "description": "Images to generate",
                        "minItems": 1,
                        "items": {
                            "type": "object",
                            "properties": {
                                "description": {
                                    "type": "string",
                                    "description": "Text description of the image to generate",
                                    "minLength": 1
                                },
                                "filename": {
                                    "type": "string",
                                    "description": "The desired filename for the image (without extension)",
                                    "minLength": 1
                                }
                            },
                            "required": ["description", "filename"]
                        }
                    }
                },
                "required": ["outputFolder", "images"]
            }
        ),
        types.Tool(
            name="get_provider_status",
            description="Get the active image provider with its request counters and last error.",
            inputSchema={
                "type": "object",
                "properties": {},
            }
        ),
    ]


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict | None
) -> list[types.TextContent] | types.CallToolResult:
    """Handle tool execution requests."""

    if name == "generate_image":
        return await generate_image(arguments or {})
    elif name == "generate_images":
        return await generate_images(arguments or {})
    elif name == "get_provider_status":
        return await get_provider_status(arguments or {})
    else:
        raise ValueError(f"Unknown tool: {name}")


async def generate_image(args: Dict) -> types.CallToolResult:
    """Generate a single image and save it as {outputFolder}/{filename}.png."""
    try:
        request, output_folder = parse_single_args(args)
    except ValidationError as e:
        logger.warning(f"Rejected generate_image call: {e}")
        return _json_result({"success": False, "error": str(e)}, is_error=True)

    logger.info(f"Generating image: '{request.description[:50]}...' -> {request.filename}")
    result = await run_single(request, output_folder, _active_provider())

    if not result.success:
        return _json_result({"success": False, "error": result.error}, is_error=True)

    return _json_result({
        "success": True,
        "filePath": str(result.file_path),
        "description": request.description,
    }, is_error=False)


async def generate_images(args: Dict) -> types.CallToolResult:
    """Generate a batch of images concurrently into one folder."""
    try:
        batch = parse_batch_args(args)
    except ValidationError as e:
        logger.warning(f"Rejected generate_images call: {e}")
        return _json_result({"overallSuccess": False, "error": str(e)}, is_error=True)

    result = await run_batch(batch, _active_provider())
    return _json_result(result.to_dict(), is_error=not result.overall_success)


async def get_provider_status(args: Dict) -> List[types.TextContent]:
    """Get the active provider's health report."""
    health = await _active_provider().check_health()

    return [types.TextContent(
        type="text",
        text=json.dumps(health, indent=2)
    )]


async def main():
    """Run the MCP server."""
    try:
        init_provider()
    except ConfigurationError as e:
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)

    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        logger.info("Image Asset MCP server running")

        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="image-asset-mcp",
                server_version=__version__,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
