"""Prompt templates for the analysis gateway.

Each template opens with a marker line naming its task; adapters that
serve canned answers (the demo adapter, test fakes) route on it.
"""

VALIDATE_MARKER = "TASK: VALIDATE CASE SOURCES"
EXTRACT_MARKER = "TASK: EXTRACT SOURCE TEXT"
DOCUMENT_MARKER = "TASK: WRITE EXPERT DOSSIER"
DECK_MARKER = "TASK: DESIGN STRATEGIC DECK"

SYSTEM_INSTRUCTION = """You are a European privacy and regulatory expert and a world-class strategic presentation designer.
You synthesize case material about regulatory and legal decisions for product managers, DPOs and executives.
Always answer with valid JSON that follows the requested format exactly."""

VALIDATE_PROMPT = VALIDATE_MARKER + """

Decide whether the sources below plausibly relate to a legal or regulatory
case decision (a court ruling, a regulator's decision, a fine, an inquiry
report, or reporting about one).

Output format (JSON object):
{{"is_case_decision": true, "reason": "one short sentence"}}

Sources:
{sources}
"""

EXTRACT_PROMPT = EXTRACT_MARKER + """

Retrieve the text of the sources below as faithfully as possible. Keep the
original wording, headings and paragraph order. Combine all sources, separated
by a line containing only "---". Do not summarize.

Output format (JSON object):
{{"text": "full text"}}

Sources:
{sources}
"""

DOCUMENT_PROMPT = DOCUMENT_MARKER + """

Write an expert dossier about the case described in the text below. Produce
exactly five sections, in this order:
1. Executive summary (what happened, core violations, strategic mitigation)
2. Legal timeline and procedural milestones
3. The legal process: the defense versus the authority's findings
4. Product management takeaways and design constraints
5. Technical / DPO deep dive (legal bases, articles breached)

Section bodies use markdown: paragraphs, "-" bullets, numbered lists, and
**bold** for key dates, figures and articles.

Output format (JSON object):
{{"sections": [{{"title": "1. Executive Summary", "body": "markdown text"}}]}}

Case text:
{text}
"""

DECK_PROMPT = DECK_MARKER + """

Turn the dossier below into a narrative slide deck of 8 to 12 slides in this
sequence: title, table of contents, executive strategic summary, violations,
timeline, defense versus ruling, fine rationale, technical deep dive,
product strategy, remediation.

Rules:
- No blank or whitespace-only points, no line breaks inside points.
- Keep each slide concise (at most 40-50 words).
- Use "bold" and "color" (hex, e.g. "#E11D48") only for critical keywords, dates or figures.
- The title slide names the organization and the authority and may give
  PNG or JPG logo URLs.
- The strategic summary answers "What happened?", "Why did it happen?" and
  "How do we avoid this?" (start each point with the question) and lists
  authority_opinions.

Allowed kinds: title, toc, strategic_summary, content, dpo_technical, pm_takeaway.

Output format (JSON object):
{{
  "presentation_title": "string",
  "subtitle": "string",
  "slides": [
    {{
      "title": "string",
      "kind": "content",
      "points": [{{"text": "string", "bold": false, "color": "#RRGGBB", "font_size": 18, "is_heading": false}}],
      "company_name": "string (title slide)",
      "authority_name": "string (title slide)",
      "company_logo_url": "https://... (optional)",
      "authority_logo_url": "https://... (optional)",
      "authority_opinions": ["string (strategic summary)"]
    }}
  ]
}}

Dossier:
{dossier}
"""

IMAGE_PROMPT = """A professional strategic diagram or technical flowchart for the topic: {title}.
Content points context: {points}.
Style: minimalist high-end corporate illustration, professional palette, clear logic flow, NO TEXT."""
