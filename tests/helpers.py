"""Helpers for faking OpenRouter responses."""

import json
from typing import Any, Dict, List

import httpx


def sse_lines(chunks: List[Dict[str, Any]], done: bool = True) -> List[bytes]:
    """Render chunk payloads the way OpenRouter streams them."""
    lines = [f"data: {json.dumps(chunk)}\n\n".encode() for chunk in chunks]
    if done:
        lines.append(b"data: [DONE]\n\n")
    return lines


def delta_chunk(content=None, finish_reason=None, tool_calls=None, usage=None) -> Dict[str, Any]:
    delta: Dict[str, Any] = {}
    if content is not None:
        delta["content"] = content
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    chunk: Dict[str, Any] = {
        "id": "gen-1",
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }
    if usage is not None:
        chunk["usage"] = usage
    return chunk


class TrackingStream(httpx.AsyncByteStream):
    """Response body that records whether the transport released it."""

    def __init__(self, parts: List[bytes]):
        self.parts = parts
        self.closed = False
        self.sent = 0

    async def __aiter__(self):
        for part in self.parts:
            self.sent += 1
            yield part

    async def aclose(self):
        self.closed = True


