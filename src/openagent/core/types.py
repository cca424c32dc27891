"""
Content Types for OpenAgent

Value objects for the unified content model (contents, parts, candidates)
and for the OpenAI-compatible chat-completion wire schema.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class Role(Enum):
    """Roles of a unified content turn"""
    USER = "user"
    MODEL = "model"


class WireRole(Enum):
    """Roles of a wire chat message"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class FinishReason(Enum):
    """Why generation stopped"""
    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    OTHER = "OTHER"


class PartKind(Enum):
    """Tag of a Part"""
    TEXT = "text"
    FUNCTION_CALL = "function_call"
    FUNCTION_RESPONSE = "function_response"


@dataclass(frozen=True)
class FunctionCall:
    """A function invocation requested by the model"""
    name: str
    args: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None


@dataclass(frozen=True)
class FunctionResponse:
    """The result of a function invocation"""
    name: str
    response: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Part:
    """
    Smallest unit of content.

    Exactly one payload is set and it must agree with ``kind``. Use the
    ``from_text``, ``from_function_call`` and ``from_function_response``
    constructors rather than building instances by hand.
    """
    kind: PartKind
    text: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    function_response: Optional[FunctionResponse] = None

    def __post_init__(self):
        payloads = {
            PartKind.TEXT: self.text,
            PartKind.FUNCTION_CALL: self.function_call,
            PartKind.FUNCTION_RESPONSE: self.function_response,
        }
        present = [kind for kind, value in payloads.items() if value is not None]
        if len(present) != 1:
            raise ValueError(
                f"Part must carry exactly one payload, got {len(present)}"
            )
        if present[0] is not self.kind:
            raise ValueError(
                f"Part tagged {self.kind.value} carries a {present[0].value} payload"
            )

    @classmethod
    def from_text(cls, text: str) -> "Part":
        return cls(kind=PartKind.TEXT, text=text)

    @classmethod
    def from_function_call(
        cls, name: str, args: Optional[Dict[str, Any]] = None, id: Optional[str] = None
    ) -> "Part":
        return cls(
            kind=PartKind.FUNCTION_CALL,
            function_call=FunctionCall(name=name, args=args or {}, id=id),
        )

    @classmethod
    def from_function_response(
        cls, name: str, response: Optional[Dict[str, Any]] = None
    ) -> "Part":
        return cls(
            kind=PartKind.FUNCTION_RESPONSE,
            function_response=FunctionResponse(name=name, response=response or {}),
        )


@dataclass(frozen=True)
class Content:
    """One conversational turn: a role and its ordered parts"""
    role: Role
    parts: Tuple[Part, ...] = ()

    def __post_init__(self):
        # Raises ValueError for roles other than user and model
        object.__setattr__(self, "role", Role(self.role))
        # Accept lists from callers but keep the stored value immutable
        object.__setattr__(self, "parts", tuple(self.parts))

    @classmethod
    def user_text(cls, text: str) -> "Content":
        return cls(role=Role.USER, parts=(Part.from_text(text),))

    @classmethod
    def model_text(cls, text: str) -> "Content":
        return cls(role=Role.MODEL, parts=(Part.from_text(text),))

    def text_parts(self) -> List[str]:
        return [part.text for part in self.parts if part.kind is PartKind.TEXT]


@dataclass(frozen=True)
class ToolDeclaration:
    """A callable function offered to the model"""
    name: str
    description: str = ""
    parameters_schema: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ToolGroup:
    """A group of function declarations"""
    function_declarations: Tuple[ToolDeclaration, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "function_declarations", tuple(self.function_declarations))


ContentsInput = Union[str, Content, List[Union[str, Content]]]


@dataclass(frozen=True)
class UnifiedRequest:
    """A generation request in the unified content model"""
    contents: ContentsInput
    model: Optional[str] = None
    system_instruction: Optional[Union[str, Content]] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_output_tokens: Optional[int] = None
    tools: Optional[List[ToolGroup]] = None
    response_is_json: bool = False


@dataclass(frozen=True)
class Usage:
    """Token accounting reported by the provider"""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_wire(cls, usage: Dict[str, Any]) -> "Usage":
        return cls(
            prompt_tokens=usage.get("prompt_tokens") or 0,
            completion_tokens=usage.get("completion_tokens") or 0,
            total_tokens=usage.get("total_tokens") or 0,
        )


@dataclass(frozen=True)
class Candidate:
    """One generated alternative"""
    content: Content
    index: int = 0
    finish_reason: Optional[FinishReason] = None


@dataclass(frozen=True)
class UnifiedResponse:
    """A generation response in the unified content model"""
    candidates: Tuple[Candidate, ...] = ()
    usage: Optional[Usage] = None

    def __post_init__(self):
        object.__setattr__(self, "candidates", tuple(self.candidates))

    @property
    def text(self) -> str:
        """Concatenated text of the first candidate"""
        if not self.candidates:
            return ""
        return "".join(self.candidates[0].content.text_parts())

    @property
    def function_calls(self) -> List[FunctionCall]:
        if not self.candidates:
            return []
        return [
            part.function_call
            for part in self.candidates[0].content.parts
            if part.kind is PartKind.FUNCTION_CALL
        ]


@dataclass(frozen=True)
class CountTokensResponse:
    """Approximate token count"""
    total_tokens: int
    cached_content_token_count: int = 0


@dataclass(frozen=True)
class ToolCall:
    """Wire tool call; arguments_json always encodes a JSON object"""
    id: str
    name: str
    arguments_json: str = "{}"

    def __post_init__(self):
        try:
            decoded = json.loads(self.arguments_json)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Tool call arguments are not valid JSON: {e}") from e
        if not isinstance(decoded, dict):
            raise ValueError("Tool call arguments must encode a JSON object")

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments_json},
        }


@dataclass(frozen=True)
class WireChatMessage:
    """Chat message structure"""
    role: WireRole
    content: Optional[str]
    tool_calls: Optional[Tuple[ToolCall, ...]] = None
    tool_call_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            payload["tool_calls"] = [call.to_payload() for call in self.tool_calls]
        if self.tool_call_id is not None:
            payload["tool_call_id"] = self.tool_call_id
        return payload


def _tool_payload(tool: ToolDeclaration) -> Dict[str, Any]:
    function: Dict[str, Any] = {"name": tool.name, "description": tool.description}
    if tool.parameters_schema is not None:
        function["parameters"] = tool.parameters_schema
    return {"type": "function", "function": function}


@dataclass(frozen=True)
class WireChatRequest:
    """A chat-completion request ready to be sent"""
    model: str
    messages: Tuple[WireChatMessage, ...]
    max_tokens: int
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    tools: Optional[Tuple[ToolDeclaration, ...]] = None
    response_format: Optional[Dict[str, str]] = None
    stream: bool = False

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [message.to_payload() for message in self.messages],
            "max_tokens": self.max_tokens,
            "stream": self.stream,
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if self.top_p is not None:
            payload["top_p"] = self.top_p
        if self.tools:
            payload["tools"] = [_tool_payload(tool) for tool in self.tools]
        if self.response_format is not None:
            payload["response_format"] = self.response_format
        if self.stream:
            payload["stream_options"] = {"include_usage": True}
        return payload
