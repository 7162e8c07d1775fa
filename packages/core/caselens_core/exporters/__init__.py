"""Export formats for the dossier and the slide deck."""

from caselens_core.exporters.filenames import (
    PPTX_MIME_TYPE,
    WORD_MIME_TYPE,
    normalize_title,
    pptx_filename,
    word_filename,
)
from caselens_core.exporters.pptx import export_pptx
from caselens_core.exporters.word import export_word, render_word_html

__all__ = [
    "export_word",
    "export_pptx",
    "render_word_html",
    "normalize_title",
    "word_filename",
    "pptx_filename",
    "WORD_MIME_TYPE",
    "PPTX_MIME_TYPE",
]
