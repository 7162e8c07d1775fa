"""Model adapters for the analysis gateway.

Supported backends:
- Google: Gemini text and image models via google-generativeai
- Demo: offline adapter serving the bundled example case
"""

from caselens_core.model_adapters.base import BaseModelAdapter, ContentPart
from caselens_core.model_adapters.demo import DemoAdapter
from caselens_core.model_adapters.google import GoogleAdapter

__all__ = ["BaseModelAdapter", "ContentPart", "DemoAdapter", "GoogleAdapter"]
