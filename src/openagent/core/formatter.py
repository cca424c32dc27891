"""
Request Formatting for OpenAgent

Converts unified generation requests into OpenAI-compatible chat-completion
requests.
"""

import json
from typing import List, Optional, Tuple, Union

from .models import DEFAULT_MODEL, default_max_tokens, resolve_model_name
from .types import (
    Content,
    ContentsInput,
    Part,
    PartKind,
    Role,
    ToolCall,
    ToolDeclaration,
    ToolGroup,
    UnifiedRequest,
    WireChatMessage,
    WireChatRequest,
    WireRole,
)

JSON_RESPONSE_FORMAT = {"type": "json_object"}

COMPACT_SEPARATORS = (",", ":")


def normalize_contents(contents: ContentsInput) -> List[Content]:
    """Turn the accepted content shapes into a list of Content"""
    if isinstance(contents, str):
        return [Content.user_text(contents)]
    if isinstance(contents, Content):
        return [contents]

    normalized = []
    for item in contents:
        if isinstance(item, str):
            normalized.append(Content.user_text(item))
        elif isinstance(item, Content):
            normalized.append(item)
        else:
            raise TypeError(f"Unsupported content type: {type(item).__name__}")
    return normalized


def extract_system_instruction(
    instruction: Optional[Union[str, Content]],
) -> Optional[str]:
    """Flatten a system instruction to plain text"""
    if not instruction:
        return None
    if isinstance(instruction, str):
        return instruction
    return "\n".join(instruction.text_parts())


def _wire_role(role: Role) -> WireRole:
    if role is Role.MODEL:
        return WireRole.ASSISTANT
    return WireRole.USER


def _tool_call(part: Part, index: int) -> ToolCall:
    call = part.function_call
    return ToolCall(
        id=call.id or f"call_{index}",
        name=call.name,
        arguments_json=json.dumps(call.args, separators=COMPACT_SEPARATORS),
    )


def content_to_messages(content: Content) -> List[WireChatMessage]:
    """
    Convert one Content into wire messages.

    A single text part maps to one message. Function calls from the model
    collapse into one assistant message carrying tool calls. Function
    responses expand into one tool message each. Anything else is joined
    text.
    """
    role = _wire_role(content.role)
    parts = content.parts

    if len(parts) == 1 and parts[0].kind is PartKind.TEXT:
        return [WireChatMessage(role=role, content=parts[0].text)]

    calls = [part for part in parts if part.kind is PartKind.FUNCTION_CALL]
    if calls and role is WireRole.ASSISTANT:
        return [
            WireChatMessage(
                role=WireRole.ASSISTANT,
                content=None,
                tool_calls=tuple(_tool_call(part, i) for i, part in enumerate(calls)),
            )
        ]

    responses = [part for part in parts if part.kind is PartKind.FUNCTION_RESPONSE]
    if responses:
        return [
            WireChatMessage(
                role=WireRole.TOOL,
                content=json.dumps(
                    part.function_response.response, separators=COMPACT_SEPARATORS
                ),
                tool_call_id=part.function_response.name,
            )
            for part in responses
        ]

    return [WireChatMessage(role=role, content="\n".join(content.text_parts()))]


def convert_tools(
    tools: Optional[List[ToolGroup]],
) -> Optional[Tuple[ToolDeclaration, ...]]:
    """Only the first group is sent; the provider takes one flat list"""
    if not tools:
        return None
    declarations = tools[0].function_declarations
    if not declarations:
        return None
    return tuple(declarations)


def to_wire_messages(request: UnifiedRequest) -> List[WireChatMessage]:
    messages: List[WireChatMessage] = []
    system_instruction = extract_system_instruction(request.system_instruction)
    if system_instruction:
        messages.append(WireChatMessage(role=WireRole.SYSTEM, content=system_instruction))
    for content in normalize_contents(request.contents):
        messages.extend(content_to_messages(content))
    return messages


def to_wire_request(request: UnifiedRequest, stream: bool = False) -> WireChatRequest:
    """Build the chat-completion request for a unified request"""
    model = resolve_model_name(request.model or DEFAULT_MODEL)
    max_tokens = request.max_output_tokens or default_max_tokens(model)

    response_format = None
    if request.response_is_json and not stream:
        response_format = JSON_RESPONSE_FORMAT

    return WireChatRequest(
        model=model,
        messages=tuple(to_wire_messages(request)),
        max_tokens=max_tokens,
        temperature=request.temperature,
        top_p=request.top_p,
        tools=convert_tools(request.tools),
        response_format=response_format,
        stream=stream,
    )
