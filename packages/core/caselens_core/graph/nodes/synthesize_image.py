"""Image synthesis for a single slide."""

from caselens_core.errors import ImageSynthesisError
from caselens_core.graph.config import PipelineConfig
from caselens_core.model_adapters.base import BaseModelAdapter
from caselens_core.prompts import IMAGE_PROMPT
from caselens_core.schemas.deck import Slide
from caselens_core.utils.images import to_data_url
from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)


async def synthesize_slide_image(
    adapter: BaseModelAdapter,
    slide: Slide,
    config: PipelineConfig | None = None,
) -> str:
    """Generate a text-free illustration for a slide.

    Args:
        adapter: Model adapter for gateway calls
        slide: Slide whose title and points describe the illustration
        config: Optional pipeline configuration

    Returns:
        Image reference as a base64 ``data:`` URL

    Raises:
        ImageSynthesisError: If the model fails or returns no image
    """
    resolved_config = config or PipelineConfig()
    prompt = IMAGE_PROMPT.format(title=slide.title, points=slide.content_text())
    try:
        data, mime_type = await adapter.generate_image(
            prompt, aspect_ratio=resolved_config.image_aspect_ratio
        )
    except ImageSynthesisError:
        raise
    except Exception as e:
        raise ImageSynthesisError(f"Image synthesis failed: {e}") from e

    if not data:
        raise ImageSynthesisError("Image synthesis returned no data")
    if not mime_type.startswith("image/") or "svg" in mime_type:
        raise ImageSynthesisError(f"Image synthesis returned unsupported type {mime_type}")

    logger.info(f"Synthesized illustration for slide {slide.id} ({len(data)} bytes)")
    return to_data_url(data, mime_type)
