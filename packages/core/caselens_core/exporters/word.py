"""Word export for the dossier.

The file is HTML with Office namespaces, which word processors open as a
legacy ``.doc`` document.
"""

import html
import re
from dataclasses import dataclass
from pathlib import Path

from caselens_core.errors import ExportError
from caselens_core.schemas.document import DocumentSection
from caselens_core.utils.logging import get_logger, log_exceptions

logger = get_logger(__name__)

_LIST_MARKER_RE = re.compile(r"^(?:[-*]|\d+\.)\s*")

WORD_STYLESHEET = """
      body { font-family: 'Arial', sans-serif; line-height: 1.5; padding: 1in; }
      h1 { font-size: 16pt; font-weight: bold; margin-top: 20pt; color: #1E293B; border-bottom: 1px solid #E2E8F0; padding-bottom: 5pt; }
      p { font-size: 11pt; margin-bottom: 12pt; text-align: justify; line-height: 1.5; }
      ul { margin-bottom: 12pt; }
      li { margin-bottom: 6pt; list-style-type: disc; margin-left: 20pt; }
"""

_HTML_HEADER = """<html xmlns:o='urn:schemas-microsoft-com:office:office' xmlns:w='urn:schemas-microsoft-com:office:word' xmlns='http://www.w3.org/TR/REC-html40'>
<head><meta charset='utf-8'><title>{title}</title>
<style>{stylesheet}</style>
</head><body>
"""
_HTML_FOOTER = "</body></html>"


@dataclass(frozen=True)
class TextBlock:
    """One rendered line of a section body."""

    kind: str  # "paragraph" or "list_item"
    text: str


def parse_section_blocks(body: str) -> list[TextBlock]:
    """Split a section body into paragraphs and list items.

    Lines starting with ``-``, ``*`` or ``N.`` become list items with the
    marker removed; other non-blank lines become paragraphs.
    """
    blocks: list[TextBlock] = []
    for line in body.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue
        if _LIST_MARKER_RE.match(trimmed):
            blocks.append(TextBlock("list_item", _LIST_MARKER_RE.sub("", trimmed, count=1)))
        else:
            blocks.append(TextBlock("paragraph", trimmed))
    return blocks


def render_word_html(sections: list[DocumentSection], title: str = "Export") -> str:
    """Render dossier sections as Word-compatible HTML.

    Args:
        sections: Dossier sections in document order
        title: Document title for the HTML head

    Returns:
        Complete HTML document
    """
    parts = [
        _HTML_HEADER.format(title=html.escape(title), stylesheet=WORD_STYLESHEET)
    ]
    for section in sections:
        parts.append(f"<h1>{html.escape(section.title)}</h1>")
        in_list = False
        for block in parse_section_blocks(section.body):
            if block.kind == "list_item":
                if not in_list:
                    parts.append("<ul>")
                    in_list = True
                parts.append(f"<li>{html.escape(block.text)}</li>")
                continue
            if in_list:
                parts.append("</ul>")
                in_list = False
            parts.append(f"<p>{html.escape(block.text)}</p>")
        if in_list:
            parts.append("</ul>")
    parts.append(_HTML_FOOTER)
    return "\n".join(parts)


@log_exceptions(logger)
def export_word(
    sections: list[DocumentSection],
    title: str = "Case Analysis",
    output: str | Path | None = None,
) -> bytes:
    """Export the dossier as a Word-compatible document.

    Args:
        sections: Dossier sections in document order
        title: User-facing title
        output: Optional output path

    Returns:
        Document bytes (UTF-8 with byte order mark)

    Raises:
        ExportError: If rendering or writing fails
    """
    logger.info(f"Exporting dossier '{title}' ({len(sections)} sections)")
    try:
        content = ("\ufeff" + render_word_html(sections, title)).encode("utf-8")
        if output:
            Path(output).write_bytes(content)
    except (OSError, ValueError) as e:
        raise ExportError(f"Word export failed: {e}") from e
    return content
