"""Configuration for the analysis pipeline graphs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration values shared by the stage graphs."""

    # Combined source text sent to the model is cut at this many characters
    source_char_limit: int = 30000

    # Expected dossier shape; other counts are accepted with a warning
    expected_sections: int = 5

    # Expected deck size; other counts are accepted with a warning
    min_slides: int = 8
    max_slides: int = 12

    # Illustration format
    image_aspect_ratio: str = "16:9"
