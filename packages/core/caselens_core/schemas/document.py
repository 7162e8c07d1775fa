"""Dossier section schemas."""

from pydantic import BaseModel, Field, field_validator


class DocumentSection(BaseModel):
    """One titled section of the generated dossier."""

    title: str = Field(..., description="Section heading")
    body: str = Field(..., description="Markdown-flavoured section text")

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("section title must not be empty")
        return value
