"""Google Gemini model adapter."""

import asyncio
import base64
import json
from typing import Any

from caselens_core.errors import GatewayError, ImageSynthesisError
from caselens_core.model_adapters.base import BaseModelAdapter, ContentPart
from caselens_core.utils.logging import get_logger
from caselens_core.utils.retry import RateLimitError, with_retry

logger = get_logger(__name__)

# Default timeout for API calls (seconds)
DEFAULT_TIMEOUT = 120.0


def _wrap_google_error(e: Exception) -> Exception:
    """Convert Google API errors to standard exceptions for retry handling.

    Args:
        e: Original exception from Google API

    Returns:
        Wrapped exception (RateLimitError for rate limits, original otherwise)
    """
    error_str = str(e).lower()
    error_type = type(e).__name__

    if any(
        indicator in error_str
        for indicator in [
            "resource exhausted",
            "quota",
            "rate limit",
            "429",
            "too many requests",
        ]
    ) or error_type in ("ResourceExhausted", "TooManyRequests"):
        return RateLimitError(f"Google API rate limit: {e}")

    if any(
        indicator in error_str
        for indicator in ["503", "500", "internal", "unavailable", "deadline"]
    ) or error_type in (
        "ServiceUnavailable",
        "InternalServerError",
        "DeadlineExceeded",
    ):
        return ConnectionError(f"Google API server error: {e}")

    return e


def _parse_json_response(content: str) -> dict[str, Any] | list[Any]:
    """Parse JSON content returned by the model.

    Args:
        content: Raw response content string

    Returns:
        Parsed JSON payload (dict or list), empty list on failure
    """
    if not content:
        logger.warning("Empty response content received")
        return []

    # Strip markdown code fences if present
    text = content.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        if len(lines) >= 2:
            if lines[-1].strip() == "```":
                lines = lines[1:-1]
            else:
                lines = lines[1:]
            text = "\n".join(lines)

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {e}. Content: {content[:200]}...")
        return []


def _to_content(part: ContentPart) -> Any:
    """Convert an inline blob part to the bytes form the client expects."""
    if isinstance(part, dict):
        return {"mime_type": part["mime_type"], "data": base64.b64decode(part["data"])}
    return part


class GoogleAdapter(BaseModelAdapter):
    """Adapter for Google Gemini models."""

    def __init__(
        self,
        api_key: str,
        text_model: str = "gemini-2.5-flash",
        image_model: str = "gemini-2.5-flash-image",
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 1,
    ):
        """Initialize the Google Gemini adapter.

        Args:
            api_key: Google AI API key
            text_model: Model for extraction, analysis and deck generation
            image_model: Model for illustration synthesis
            timeout: Request timeout in seconds
            max_retries: Maximum attempts per call (1 disables retrying)
        """
        self.api_key = api_key
        self.text_model = text_model
        self.image_model = image_model
        self.timeout = timeout
        self.max_retries = max_retries

        self._client: Any = None
        logger.info(
            f"Initialized Google adapter (text={text_model}, image={image_model})"
        )

    @property
    def client(self) -> Any:
        """Lazy-load the Google Generative AI client."""
        if self._client is None:
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._client = genai
        return self._client

    async def _generate(
        self,
        model: str,
        contents: list[Any],
        operation_name: str,
        system_instruction: str | None = None,
        generation_config: dict[str, Any] | None = None,
    ) -> Any:
        """Call generate_content with timeout, error wrapping and optional retry."""

        async def _make_request() -> Any:
            try:
                model_instance = self.client.GenerativeModel(
                    model_name=model,
                    system_instruction=system_instruction,
                    generation_config=generation_config,
                )
                return await asyncio.wait_for(
                    asyncio.to_thread(model_instance.generate_content, contents),
                    timeout=self.timeout,
                )
            except Exception as e:
                raise _wrap_google_error(e) from e

        logger.debug(f"Starting {operation_name} with model {model}")
        response = await with_retry(
            _make_request,
            max_attempts=self.max_retries,
            operation_name=operation_name,
        )
        logger.debug(f"Completed {operation_name}")
        return response

    @staticmethod
    def _candidate_parts(response: Any, operation_name: str) -> list[Any]:
        """Return the content parts of the first candidate, or an empty list."""
        if not response.candidates:
            logger.warning(f"{operation_name}: No candidates in response")
            return []
        candidate = response.candidates[0]
        # finish_reason: 1=STOP (normal), 2=MAX_TOKENS, 3=SAFETY, 4=RECITATION, 5=OTHER
        finish_reason = getattr(candidate, "finish_reason", None)
        if finish_reason and finish_reason != 1:
            logger.warning(
                f"{operation_name}: Response finished with reason {finish_reason}"
            )
        if not candidate.content or not candidate.content.parts:
            logger.warning(
                f"{operation_name}: No content parts in response (finish_reason={finish_reason})"
            )
            return []
        return list(candidate.content.parts)

    async def generate_structured(
        self,
        prompt: str,
        parts: list[ContentPart] | None = None,
        system_instruction: str | None = None,
    ) -> dict[str, Any] | list[Any]:
        """Generate structured JSON with the text model."""
        contents: list[Any] = [prompt, *(_to_content(p) for p in parts or [])]
        try:
            response = await self._generate(
                model=self.text_model,
                contents=contents,
                operation_name="generate_structured",
                system_instruction=system_instruction,
                generation_config={"response_mime_type": "application/json"},
            )
        except Exception as e:
            raise GatewayError(f"Gemini request failed: {e}") from e

        text = "".join(
            part.text
            for part in self._candidate_parts(response, "generate_structured")
            if hasattr(part, "text")
        )
        return _parse_json_response(text)

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
    ) -> tuple[bytes, str]:
        """Generate an illustration with the image model."""
        logger.info(f"Generating image ({aspect_ratio})")
        try:
            response = await self._generate(
                model=self.image_model,
                contents=[f"{prompt}\nAspect ratio: {aspect_ratio}."],
                operation_name="generate_image",
            )
        except Exception as e:
            raise ImageSynthesisError(f"Gemini image request failed: {e}") from e

        for part in self._candidate_parts(response, "generate_image"):
            inline = getattr(part, "inline_data", None)
            if inline is not None and getattr(inline, "data", None):
                return bytes(inline.data), inline.mime_type or "image/png"
        raise ImageSynthesisError("Visual generation failed: no image in response")
