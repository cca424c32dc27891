"""
Response Assembly for OpenAgent

Rebuilds unified responses from chat-completion payloads, both single-shot
completions and streamed delta chunks.
"""

import json
from typing import Any, AsyncIterator, Dict, List, Optional

import structlog

from .errors import (
    MalformedToolArgumentFragment,
    MalformedToolArgumentsError,
    NoChoicesError,
    error_message_from_body,
    upstream_error,
)
from .types import (
    Candidate,
    Content,
    FinishReason,
    Part,
    Role,
    UnifiedResponse,
    Usage,
)

logger = structlog.get_logger(__name__)

SSE_DATA_PREFIX = "data:"
SSE_DONE = "[DONE]"

FINISH_REASONS: Dict[str, FinishReason] = {
    "stop": FinishReason.STOP,
    "length": FinishReason.MAX_TOKENS,
    "content_filter": FinishReason.SAFETY,
    "function_call": FinishReason.STOP,
    "tool_calls": FinishReason.STOP,
}

EMPTY_RESPONSE = UnifiedResponse()


def map_finish_reason(reason: Optional[str]) -> Optional[FinishReason]:
    """Map a wire finish reason; None means the choice has not finished"""
    if reason is None:
        return None
    return FINISH_REASONS.get(reason, FinishReason.OTHER)


def _usage(payload: Dict[str, Any]) -> Optional[Usage]:
    usage = payload.get("usage")
    if not usage:
        return None
    return Usage.from_wire(usage)


def _model_content(parts: List[Part]) -> Content:
    return Content(role=Role.MODEL, parts=tuple(parts))


def from_wire_response(payload: Dict[str, Any]) -> UnifiedResponse:
    """Convert a non-streamed chat completion"""
    choices = payload.get("choices") or []
    if not choices:
        raise NoChoicesError()

    choice = choices[0]
    message = choice.get("message") or {}
    parts: List[Part] = []

    if message.get("content"):
        parts.append(Part.from_text(message["content"]))

    for tool_call in message.get("tool_calls") or []:
        function = tool_call.get("function") or {}
        name = function.get("name") or ""
        try:
            args = json.loads(function.get("arguments") or "{}")
        except ValueError as e:
            raise MalformedToolArgumentsError(
                f"Tool call '{name}' returned invalid arguments: {e}"
            ) from e
        if not isinstance(args, dict):
            raise MalformedToolArgumentsError(
                f"Tool call '{name}' arguments are not a JSON object"
            )
        parts.append(Part.from_function_call(name, args, id=tool_call.get("id")))

    candidate = Candidate(
        content=_model_content(parts),
        index=0,
        finish_reason=map_finish_reason(choice.get("finish_reason")),
    )
    return UnifiedResponse(candidates=(candidate,), usage=_usage(payload))


def parse_fragment_arguments(arguments: Optional[str]) -> Dict[str, Any]:
    """Parse streamed tool arguments, raising if they are not complete yet"""
    if not arguments:
        return {}
    try:
        args = json.loads(arguments)
    except ValueError as e:
        raise MalformedToolArgumentFragment(str(e)) from e
    if not isinstance(args, dict):
        raise MalformedToolArgumentFragment("arguments are not a JSON object")
    return args


def from_wire_chunk(chunk: Dict[str, Any]) -> UnifiedResponse:
    """
    Convert one streamed delta chunk.

    Chunks without a choice, or whose choice carries neither content nor a
    finish reason, produce a response without candidates. Tool call
    fragments whose arguments do not parse on this chunk are dropped.
    """
    choices = chunk.get("choices") or []
    if not choices:
        return EMPTY_RESPONSE

    choice = choices[0]
    delta = choice.get("delta") or {}
    parts: List[Part] = []

    if delta.get("content"):
        parts.append(Part.from_text(delta["content"]))

    for tool_call in delta.get("tool_calls") or []:
        function = tool_call.get("function") or {}
        name = function.get("name")
        if not name:
            continue
        try:
            args = parse_fragment_arguments(function.get("arguments"))
        except MalformedToolArgumentFragment as e:
            logger.debug("Dropping incomplete tool call fragment", tool=name, error=str(e))
            continue
        parts.append(Part.from_function_call(name, args, id=tool_call.get("id")))

    finish_reason = map_finish_reason(choice.get("finish_reason"))
    if not parts and finish_reason is None:
        return EMPTY_RESPONSE

    candidate = Candidate(
        content=_model_content(parts),
        index=choice.get("index") or 0,
        finish_reason=finish_reason,
    )
    return UnifiedResponse(candidates=(candidate,), usage=_usage(chunk))


def terminal_response() -> UnifiedResponse:
    """End-of-turn marker for streams that produced nothing"""
    candidate = Candidate(
        content=_model_content([Part.from_text("")]),
        index=0,
        finish_reason=FinishReason.STOP,
    )
    return UnifiedResponse(candidates=(candidate,))


def decode_stream_line(line: str) -> Optional[Dict[str, Any]]:
    """
    Decode one line of a streamed completion.

    Accepts both SSE ``data:`` lines and bare JSON lines. Returns None for
    blank lines, SSE comments and undecodable lines. The ``[DONE]``
    sentinel is handled by ``iter_sse_chunks``.
    """
    line = line.strip()
    if not line or line.startswith(":"):
        return None
    if line.startswith(SSE_DATA_PREFIX):
        line = line[len(SSE_DATA_PREFIX):].strip()
    try:
        chunk = json.loads(line)
    except ValueError:
        logger.debug("Skipping undecodable stream line", line=line[:200])
        return None
    if not isinstance(chunk, dict):
        return None
    return chunk


def _raise_stream_error(chunk: Dict[str, Any]) -> None:
    error = chunk.get("error")
    if not error:
        return
    status = error.get("code") if isinstance(error, dict) else None
    if not isinstance(status, int):
        status = 500
    raise upstream_error(status, error_message_from_body(chunk, "stream error"))


async def iter_sse_chunks(lines: AsyncIterator[str]) -> AsyncIterator[Dict[str, Any]]:
    """Turn raw stream lines into decoded chunk payloads"""
    async for line in lines:
        stripped = line.strip()
        if stripped.startswith(SSE_DATA_PREFIX):
            stripped = stripped[len(SSE_DATA_PREFIX):].strip()
        if stripped == SSE_DONE:
            break
        chunk = decode_stream_line(line)
        if chunk is None:
            continue
        _raise_stream_error(chunk)
        yield chunk


async def assemble_stream(
    chunks: AsyncIterator[Dict[str, Any]],
) -> AsyncIterator[UnifiedResponse]:
    """
    Convert a chunk stream into unified responses.

    Responses without candidates are filtered out. If the whole stream
    carried nothing, a single empty STOP response is yielded so callers
    always observe the end of the turn.
    """
    has_content = False
    async for chunk in chunks:
        response = from_wire_chunk(chunk)
        if response.candidates:
            has_content = True
            yield response

    if not has_content:
        yield terminal_response()
