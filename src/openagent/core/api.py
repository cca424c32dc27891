"""
OpenRouter Content Generator for OpenAgent

Exposes the unified content-generation operations (generate, stream, count
tokens, embed) on top of OpenRouter's OpenAI-compatible chat-completions API.
"""

import math
from contextlib import aclosing
from typing import AsyncIterator, Optional

import httpx
import structlog

from .assembler import assemble_stream, from_wire_response, iter_sse_chunks
from .config import ContentGeneratorConfig
from .errors import UnsupportedOperationError, normalize_error
from .formatter import normalize_contents, to_wire_request
from .types import (
    ContentsInput,
    CountTokensResponse,
    PartKind,
    UnifiedRequest,
    UnifiedResponse,
)

logger = structlog.get_logger(__name__)

CHAT_COMPLETIONS = "/chat/completions"

CHARS_PER_TOKEN = 4


class OpenRouterContentGenerator:
    """
    Content generator backed by OpenRouter.

    The HTTP client is created once and shared by every call; all request
    and response state lives inside the individual call.
    """

    REFERER = "https://github.com/joshuavial/openagent"
    TITLE = "OpenAgent CLI"

    def __init__(
        self,
        config: ContentGeneratorConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config

        self.client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                **config.headers,
                "Authorization": f"Bearer {config.api_key}",
                "HTTP-Referer": self.REFERER,
                "X-Title": self.TITLE,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout),
            transport=transport,
        )

        logger.info("OpenRouter content generator initialized", base_url=config.base_url)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP client"""
        await self.client.aclose()

    async def generate_content(self, request: UnifiedRequest) -> UnifiedResponse:
        """Run one chat completion and return the unified response"""
        model = request.model
        try:
            wire_request = to_wire_request(request)
            model = wire_request.model
            logger.debug(
                "Sending chat completion",
                model=model,
                messages=len(wire_request.messages),
            )

            response = await self.client.post(CHAT_COMPLETIONS, json=wire_request.to_payload())
            response.raise_for_status()
            return from_wire_response(response.json())

        except Exception as e:
            logger.error("Chat completion failed", error=str(e), model=model)
            raise normalize_error(e)

    async def generate_content_stream(
        self, request: UnifiedRequest
    ) -> AsyncIterator[UnifiedResponse]:
        """
        Stream a chat completion as unified responses.

        The connection is held only while the iterator is being consumed and
        is released when it finishes, fails or is closed early.
        """
        model = request.model
        try:
            wire_request = to_wire_request(request, stream=True)
            model = wire_request.model
            logger.debug(
                "Sending streaming chat completion",
                model=model,
                messages=len(wire_request.messages),
            )

            async with self.client.stream(
                "POST", CHAT_COMPLETIONS, json=wire_request.to_payload()
            ) as response:
                if response.status_code != 200:
                    await response.aread()
                    response.raise_for_status()

                chunks = iter_sse_chunks(response.aiter_lines())
                async with aclosing(assemble_stream(chunks)) as responses:
                    async for unified in responses:
                        yield unified

        except Exception as e:
            logger.error("Streaming chat completion failed", error=str(e), model=model)
            raise normalize_error(e)

    async def count_tokens(self, contents: ContentsInput) -> CountTokensResponse:
        """
        Estimate the token count of some contents.

        OpenRouter has no token counting endpoint, so this is a rough
        estimate of one token per four characters of text.
        """
        texts = []
        for content in normalize_contents(contents):
            part_texts = []
            for part in content.parts:
                if part.kind is PartKind.TEXT:
                    part_texts.append(part.text)
                elif part.kind in (PartKind.FUNCTION_CALL, PartKind.FUNCTION_RESPONSE):
                    part_texts.append("")
            texts.append(" ".join(part_texts))

        total_text = " ".join(texts)
        return CountTokensResponse(total_tokens=math.ceil(len(total_text) / CHARS_PER_TOKEN))

    async def embed_content(self, request=None):
        """Embeddings are not available through OpenRouter"""
        raise UnsupportedOperationError(
            "Embeddings are not supported through OpenRouter for Gemini models"
        )
