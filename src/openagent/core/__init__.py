"""
Core module for OpenAgent

Contains the content generator, the request/response translation layers and
configuration.
"""

from .api import OpenRouterContentGenerator
from .config import Config, ContentGeneratorConfig
from .errors import (
    NoChoicesError,
    OpenRouterError,
    UnsupportedOperationError,
    UpstreamAPIError,
)

__all__ = [
    "OpenRouterContentGenerator",
    "Config",
    "ContentGeneratorConfig",
    "OpenRouterError",
    "UpstreamAPIError",
    "NoChoicesError",
    "UnsupportedOperationError",
]
