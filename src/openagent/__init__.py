"""
OpenAgent - OpenRouter content generation

Adapts a unified content-generation model (multi-part contents, function
calls, streaming) onto OpenRouter's OpenAI-compatible chat-completions API.
"""

__version__ = "1.0.0"
__author__ = "OpenAgent Development Team"

from .core.api import OpenRouterContentGenerator
from .core.config import Config, ContentGeneratorConfig
from .core.types import Content, Part, UnifiedRequest, UnifiedResponse

__all__ = [
    "OpenRouterContentGenerator",
    "Config",
    "ContentGeneratorConfig",
    "Content",
    "Part",
    "UnifiedRequest",
    "UnifiedResponse",
]
