"""Ingest node: turn submitted sources into prompt text and inline parts."""

from typing import Any, Callable

from caselens_core.graph.config import PipelineConfig
from caselens_core.model_adapters.base import ContentPart
from caselens_core.schemas.sources import Source, SourceKind
from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)


def describe_sources(
    sources: list[Source],
    char_limit: int,
) -> tuple[str, list[ContentPart]]:
    """Render sources for a prompt.

    URLs and text files are inlined in the returned text, binary files
    (PDFs) become inline parts and are only referenced by name in the text.

    Args:
        sources: Submitted sources
        char_limit: Maximum length of the combined text

    Returns:
        Tuple of (combined source text, inline parts)
    """
    blocks: list[str] = []
    parts: list[ContentPart] = []

    for source in sources:
        if source.kind == SourceKind.URL:
            blocks.append(f"URL: {source.payload}")
        elif source.is_binary:
            blocks.append(
                f"Document: {source.display_name} (attached as {source.mime_type})"
            )
            parts.append(
                {
                    "mime_type": source.mime_type or "application/octet-stream",
                    "data": source.payload,
                }
            )
        else:
            blocks.append(f"Document: {source.display_name}\n{source.payload}")

    combined = "\n\n".join(blocks)
    if len(combined) > char_limit:
        logger.warning(
            f"Source text truncated from {len(combined)} to {char_limit} characters"
        )
        combined = combined[:char_limit]
    return combined, parts


def create_ingest_node(
    config: PipelineConfig,
) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Create the ingest node.

    Args:
        config: Pipeline configuration

    Returns:
        Node function
    """

    def ingest_node(state: dict[str, Any]) -> dict[str, Any]:
        """Prepare source text and parts for the gateway calls."""
        sources: list[Source] = state.get("sources", [])
        if not sources:
            raise ValueError("No sources to analyze")

        source_text, source_parts = describe_sources(sources, config.source_char_limit)
        logger.info(
            f"Ingested {len(sources)} sources "
            f"({len(source_text)} chars, {len(source_parts)} attachments)"
        )
        return {
            "source_text": source_text,
            "source_parts": source_parts,
            "current_step": "ingest",
        }

    return ingest_node
