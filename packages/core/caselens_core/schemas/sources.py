"""Source schemas: the URLs and files a user submits as case evidence."""

import base64
import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from caselens_core.utils.pdf import is_pdf


class SourceKind(str, Enum):
    """Kind of submitted source."""

    URL = "url"
    FILE = "file"


def _new_source_id() -> str:
    return uuid.uuid4().hex


class Source(BaseModel):
    """A user-submitted source. Immutable once created."""

    id: str = Field(default_factory=_new_source_id, description="Unique identifier")
    kind: SourceKind = Field(..., description="URL or uploaded file")
    payload: str = Field(
        ..., description="Raw URL, raw text, or base64 encoded binary content"
    )
    display_name: str = Field(..., description="Name shown to the user")
    mime_type: str | None = Field(
        None, description="Content type for uploaded files"
    )
    is_binary: bool = Field(
        False, description="True when payload is base64 encoded binary data"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("payload")
    @classmethod
    def _payload_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("source payload must not be empty")
        return value

    @classmethod
    def from_url(cls, url: str, display_name: str | None = None) -> "Source":
        """Create a URL source."""
        url = url.strip()
        return cls(kind=SourceKind.URL, payload=url, display_name=display_name or url)

    @classmethod
    def from_file(
        cls,
        filename: str,
        data: bytes,
        mime_type: str | None = None,
    ) -> "Source":
        """Create a file source from uploaded bytes.

        PDFs and anything that is not valid UTF-8 text are stored base64
        encoded; text files keep their decoded content.
        """
        if is_pdf(data):
            return cls(
                kind=SourceKind.FILE,
                payload=base64.b64encode(data).decode("ascii"),
                display_name=filename,
                mime_type="application/pdf",
                is_binary=True,
            )
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            return cls(
                kind=SourceKind.FILE,
                payload=base64.b64encode(data).decode("ascii"),
                display_name=filename,
                mime_type=mime_type or "application/octet-stream",
                is_binary=True,
            )
        return cls(
            kind=SourceKind.FILE,
            payload=text,
            display_name=filename,
            mime_type=mime_type or "text/plain",
        )
