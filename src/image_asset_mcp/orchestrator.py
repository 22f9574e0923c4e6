"""
Batch orchestration
===================

Fans a batch of image requests out to the active provider concurrently and
collects one result per request.

- The output directory is created once, before any provider call. If that
  fails, every item fails with the same message and nothing is generated.
- Every request is started at once (no concurrency limit) and all of them
  are awaited; one item failing never cancels or skips its siblings.
- Results come back in request order, whatever order the calls finish in.
- Files written for successful items are kept even if others fail.

Two requests with the same filename race on the same path; the last write
wins.
"""

import asyncio
import logging
from typing import List

from .models import BatchRequest, BatchResult, ImageRequest, ImageResult
from .providers import ImageProvider
from .storage import ensure_output_dir, image_path, save_image

logger = logging.getLogger(__name__)


async def _generate_and_save(
    request: ImageRequest, output_folder: str, provider: ImageProvider
) -> ImageResult:
    """Generate one image and write it; the output folder must exist."""
    result = await provider.generate(request.description)
    if not result.success:
        logger.warning(f"Generation failed for '{request.filename}': {result.error}")
        return ImageResult.failed(request, result.error or "Unknown error")

    file_path = image_path(output_folder, request.filename)
    try:
        await save_image(result.image_bytes, file_path)
    except OSError as e:
        logger.warning(f"Failed to save '{request.filename}' to {file_path}: {e}")
        return ImageResult.failed(request, f"Failed to save image: {e}")

    return ImageResult.saved(request, file_path)


async def run_batch(batch: BatchRequest, provider: ImageProvider) -> BatchResult:
    """Generate every image in ``batch`` concurrently and report per item."""
    try:
        ensure_output_dir(batch.output_folder)
    except OSError as e:
        error = f"Failed to create output directory '{batch.output_folder}': {e}"
        logger.error(error)
        return BatchResult(
            results=[ImageResult.failed(request, error) for request in batch.images],
            error=error,
        )

    logger.info(
        f"Generating {len(batch.images)} image(s) into {batch.output_folder} "
        f"with {provider.name}"
    )

    outcomes = await asyncio.gather(
        *(_generate_and_save(request, batch.output_folder, provider) for request in batch.images),
        return_exceptions=True,
    )

    results: List[ImageResult] = []
    for request, outcome in zip(batch.images, outcomes):
        if isinstance(outcome, BaseException):
            logger.error(f"Unexpected error for '{request.filename}': {outcome!r}")
            outcome = ImageResult.failed(request, str(outcome) or type(outcome).__name__)
        results.append(outcome)

    batch_result = BatchResult(results=results)
    succeeded = sum(1 for r in results if r.success)
    logger.info(f"Batch finished: {succeeded}/{len(results)} image(s) generated")
    return batch_result


async def run_single(
    request: ImageRequest, output_folder: str, provider: ImageProvider
) -> ImageResult:
    """Generate one image, then create the folder and write the file."""
    result = await provider.generate(request.description)
    if not result.success:
        logger.warning(f"Generation failed for '{request.filename}': {result.error}")
        return ImageResult.failed(request, result.error or "Unknown error")

    try:
        ensure_output_dir(output_folder)
        file_path = await save_image(result.image_bytes, image_path(output_folder, request.filename))
    except OSError as e:
        logger.warning(f"Failed to save '{request.filename}': {e}")
        return ImageResult.failed(request, f"Failed to save image: {e}")

    return ImageResult.saved(request, file_path)
