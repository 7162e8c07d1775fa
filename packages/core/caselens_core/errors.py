"""Exception hierarchy for the case analysis pipeline."""


class CaseLensError(Exception):
    """Base class for all caselens errors."""


class InvalidTransitionError(CaseLensError):
    """An operation was invoked in a stage where it is not allowed."""

    def __init__(self, operation: str, stage: str, allowed: tuple[str, ...] = ()):
        self.operation = operation
        self.stage = stage
        self.allowed = allowed
        detail = f"'{operation}' is not allowed in stage {stage}"
        if allowed:
            detail += f" (allowed: {', '.join(allowed)})"
        super().__init__(detail)


class ArtifactNotFoundError(CaseLensError, IndexError):
    """A slide, section or source referenced by index or id does not exist."""


class GatewayError(CaseLensError):
    """The model gateway failed or returned data that does not match the schema."""

    def __init__(self, message: str, operation: str | None = None):
        self.operation = operation
        super().__init__(message)


class ImageSynthesisError(GatewayError):
    """Image generation failed for a single slide."""


class ExportError(CaseLensError):
    """Serializing the dossier or the deck to a file failed."""


class NoSourcesError(CaseLensError):
    """Analysis was requested without any submitted source."""
