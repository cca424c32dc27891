"""
Utils module for OpenAgent
"""

from .logging import setup_logging

__all__ = [
    "setup_logging",
]
