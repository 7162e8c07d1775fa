"""Response schemas for gateway calls.

Model output is validated here before anything reaches pipeline state;
any mismatch becomes a GatewayError instead of a partial object.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from caselens_core.errors import GatewayError
from caselens_core.schemas.deck import SlideKind, StyledPoint
from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class ValidationVerdict(BaseModel):
    """Answer to the source validation prompt."""

    is_case_decision: bool
    reason: str | None = None


class ExtractionPayload(BaseModel):
    """Answer to the text extraction prompt."""

    text: str

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("extracted text is empty")
        return value


class SectionPayload(BaseModel):
    """One dossier section as returned by the model."""

    title: str
    body: str


class DocumentPayload(BaseModel):
    """Answer to the dossier prompt."""

    sections: list[SectionPayload] = Field(..., min_length=1)


class SlidePayload(BaseModel):
    """One slide as returned by the model, before ids and styles exist."""

    title: str
    kind: SlideKind
    points: list[StyledPoint]
    company_name: str | None = None
    authority_name: str | None = None
    company_logo_url: str | None = None
    authority_logo_url: str | None = None
    authority_opinions: list[str] = Field(default_factory=list)

    @field_validator("points", mode="before")
    @classmethod
    def _drop_blank_points(cls, value: Any) -> Any:
        """Filter points whose text is whitespace only."""
        if not isinstance(value, list):
            return value
        kept = [
            item
            for item in value
            if not (
                isinstance(item, dict)
                and isinstance(item.get("text"), str)
                and not item["text"].strip()
            )
        ]
        if len(kept) != len(value):
            logger.debug(f"Dropped {len(value) - len(kept)} blank points")
        return kept

    @field_validator("authority_opinions", mode="before")
    @classmethod
    def _clean_opinions(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [o.strip() for o in value if isinstance(o, str) and o.strip()]
        return value


class DeckPayload(BaseModel):
    """Answer to the deck prompt."""

    presentation_title: str
    subtitle: str = ""
    slides: list[SlidePayload] = Field(..., min_length=1)


def parse_response(model: type[M], data: Any, operation: str) -> M:
    """Validate a model response against a schema.

    Args:
        model: Pydantic model describing the expected payload
        data: Parsed JSON returned by the adapter
        operation: Gateway operation name for error messages

    Returns:
        Validated payload

    Raises:
        GatewayError: If the payload is not a JSON object or does not match
    """
    if not isinstance(data, dict):
        raise GatewayError(
            f"{operation}: expected a JSON object, got {type(data).__name__}",
            operation=operation,
        )
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"{operation}: response does not match schema: {e}")
        raise GatewayError(
            f"{operation}: the model response did not match the expected format "
            f"({e.error_count()} problem(s))",
            operation=operation,
        ) from e
