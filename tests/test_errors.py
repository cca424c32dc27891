"""Tests for the error taxonomy and normalization."""

import asyncio

import httpx
import pytest

from openagent.core.errors import (
    AuthenticationError,
    NoChoicesError,
    OpenRouterError,
    RateLimitError,
    UpstreamAPIError,
    error_message_from_body,
    normalize_error,
)

_REQUEST = httpx.Request("POST", "https://openrouter.test/api/v1/chat/completions")


def _status_error(status, **kwargs):
    response = httpx.Response(status, request=_REQUEST, **kwargs)
    return httpx.HTTPStatusError("failed", request=_REQUEST, response=response)


class ProviderError(Exception):
    def __init__(self, status, message):
        super().__init__(message)
        self.status = status
        self.message = message


def test_status_and_message_are_both_reported():
    error = normalize_error(ProviderError(429, "rate limited"))

    assert isinstance(error, RateLimitError)
    assert isinstance(error, UpstreamAPIError)
    assert "429" in str(error)
    assert "rate limited" in str(error)
    assert (error.status, error.message) == (429, "rate limited")


def test_http_status_error_uses_provider_message():
    error = normalize_error(_status_error(400, json={"error": {"message": "bad model", "code": 400}}))

    assert type(error) is UpstreamAPIError
    assert str(error) == "OpenRouter API error (400): bad model"
    assert isinstance(error.__cause__, httpx.HTTPStatusError)


def test_http_status_error_with_plain_body():
    error = normalize_error(_status_error(502, text="Bad Gateway"))
    assert error.status == 502
    assert error.message == "Bad Gateway"


@pytest.mark.parametrize("status", [401, 403])
def test_auth_failures(status):
    assert isinstance(normalize_error(_status_error(status, json={})), AuthenticationError)


def test_taxonomy_errors_pass_through():
    original = NoChoicesError()
    assert normalize_error(original) is original


def test_other_exceptions_are_wrapped():
    cause = httpx.ConnectError("connection refused")

    error = normalize_error(cause)

    assert type(error) is OpenRouterError
    assert str(error) == "connection refused"
    assert error.__cause__ is cause


def test_non_exception_values_are_wrapped():
    error = normalize_error("weird failure")
    assert type(error) is OpenRouterError
    assert str(error) == "weird failure"


def test_cancellation_is_not_swallowed():
    with pytest.raises(asyncio.CancelledError):
        normalize_error(asyncio.CancelledError())


@pytest.mark.parametrize(
    "body, expected",
    [
        ('{"error": {"message": "nope"}}', "nope"),
        ({"error": "flat"}, "flat"),
        ({"message": "top level"}, "top level"),
        (b"raw bytes", "raw bytes"),
        ("", "fallback"),
        ({}, "fallback"),
    ],
)
def test_error_message_from_body(body, expected):
    assert error_message_from_body(body, "fallback") == expected
