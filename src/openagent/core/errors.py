"""
Error Taxonomy for OpenAgent

Every failure that leaves the content generator is one of the exceptions
below. ``normalize_error`` turns transport and provider failures into them.
"""

import asyncio
import json
from typing import Any, Optional

import httpx


class OpenRouterError(Exception):
    """Base exception for OpenRouter content generation errors"""
    pass


class UpstreamAPIError(OpenRouterError):
    """The provider rejected the request"""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"OpenRouter API error ({status}): {message}")


class AuthenticationError(UpstreamAPIError):
    """Authentication failed"""
    pass


class RateLimitError(UpstreamAPIError):
    """Rate limit exceeded"""
    pass


class NoChoicesError(OpenRouterError):
    """The provider returned a completion without choices"""

    def __init__(self, message: str = "No choices in OpenRouter response"):
        super().__init__(message)


class UnsupportedOperationError(OpenRouterError):
    """The operation is not available through OpenRouter"""
    pass


class MalformedToolArgumentsError(OpenRouterError):
    """A completed tool call carried arguments that are not a JSON object"""
    pass


class MalformedToolArgumentFragment(OpenRouterError):
    """A streamed tool call fragment whose arguments do not parse yet"""
    pass


def upstream_error(status: int, message: str) -> UpstreamAPIError:
    """Build the most specific UpstreamAPIError for a status code"""
    if status in (401, 403):
        return AuthenticationError(status, message)
    if status == 429:
        return RateLimitError(status, message)
    return UpstreamAPIError(status, message)


def error_message_from_body(body: Any, fallback: str) -> str:
    """Pull ``error.message`` out of an OpenAI-style error body"""
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        if not body.strip():
            return fallback
        try:
            body = json.loads(body)
        except ValueError:
            return body.strip()
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if body.get("message"):
            return str(body["message"])
    return fallback


def _status_of(error: Any) -> Optional[int]:
    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def normalize_error(error: Any) -> OpenRouterError:
    """Map any failure onto the OpenRouterError taxonomy"""
    if isinstance(error, asyncio.CancelledError):
        raise error

    if isinstance(error, OpenRouterError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        try:
            body = response.text
        except httpx.ResponseNotRead:
            body = ""
        normalized = upstream_error(
            response.status_code, error_message_from_body(body, str(error))
        )
        normalized.__cause__ = error
        return normalized

    status = _status_of(error)
    if status is not None:
        message = getattr(error, "message", None) or str(error)
        normalized = upstream_error(status, str(message))
        if isinstance(error, BaseException):
            normalized.__cause__ = error
        return normalized

    if isinstance(error, Exception):
        wrapped = OpenRouterError(str(error))
        wrapped.__cause__ = error
        return wrapped

    return OpenRouterError(str(error))
