"""Campaign image generation through the ``predict`` endpoint."""

from __future__ import annotations

import logging
from typing import Any

from naya_daur.constants import IMAGE_DATA_URI_PREFIX, MAX_IMAGE_SAMPLE_COUNT
from naya_daur.exceptions import ImageGenerationError

from .base import BaseGeminiClient

log = logging.getLogger(__name__)

T_IMAGES_GENERATE = "images.generate"


def build_image_payload(prompt: str, sample_count: int) -> dict[str, Any]:
    return {
        "instances": [{"prompt": prompt}],
        "parameters": {"sampleCount": sample_count},
    }


def extract_image_uris(body: Any) -> list[str]:
    """Turn ``predictions[].bytesBase64Encoded`` into PNG data URIs."""
    predictions = body.get("predictions") if isinstance(body, dict) else None
    if not isinstance(predictions, list):
        return []
    return [
        f"{IMAGE_DATA_URI_PREFIX}{pred['bytesBase64Encoded']}"
        for pred in predictions
        if isinstance(pred, dict) and pred.get("bytesBase64Encoded")
    ]


class ImageGenerator(BaseGeminiClient):
    """Generates images for a text prompt with the configured image model."""

    async def generate(self, prompt: str, sample_count: int | None = None) -> list[str]:
        """Return one ``data:image/png;base64,...`` URI per generated image.

        Raises:
            ValueError: ``sample_count`` is outside 1..MAX_IMAGE_SAMPLE_COUNT.
            ImageGenerationError: The response contained no images.
        """
        count = (
            self.config.image_sample_count if sample_count is None else sample_count
        )
        if not 1 <= count <= MAX_IMAGE_SAMPLE_COUNT:
            raise ValueError(
                f"sample_count must be between 1 and {MAX_IMAGE_SAMPLE_COUNT}, "
                f"got {count}"
            )
        url = self.endpoint(self.config.image_model, "predict")

        async with self._http_client() as client:
            with self._tele(
                T_IMAGES_GENERATE, model=self.config.image_model, sample_count=count
            ):
                body = await self._post(client, url, build_image_payload(prompt, count))

        images = extract_image_uris(body)
        if not images:
            raise ImageGenerationError("No images returned from API.")
        log.debug("Received %d images", len(images))
        return images


async def generate_images(
    api_key: str | None,
    prompt: str,
    sample_count: int | None = None,
    **client_options: Any,
) -> list[str]:
    """Convenience wrapper around ``ImageGenerator.generate``."""
    generator = ImageGenerator(api_key, **client_options)
    return await generator.generate(prompt, sample_count)
