"""Base model adapter interface."""

from abc import ABC, abstractmethod
from typing import Any

# A content part: plain text, or an inline blob {"mime_type": ..., "data": base64}
ContentPart = str | dict[str, str]


class BaseModelAdapter(ABC):
    """Abstract base class for model adapters."""

    @abstractmethod
    async def generate_structured(
        self,
        prompt: str,
        parts: list[ContentPart] | None = None,
        system_instruction: str | None = None,
    ) -> dict[str, Any] | list[Any]:
        """Generate structured JSON from a model call.

        Args:
            prompt: Prompt that specifies the JSON output format
            parts: Optional extra content (source text or inline files)
            system_instruction: Optional system instruction

        Returns:
            Parsed JSON data (dict or list)
        """
        pass

    @abstractmethod
    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
    ) -> tuple[bytes, str]:
        """Generate one illustration.

        Args:
            prompt: Image description
            aspect_ratio: Requested aspect ratio, e.g. "16:9"

        Returns:
            Tuple of (image bytes, mime type)
        """
        pass
