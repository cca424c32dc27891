#!/usr/bin/env python3
"""
Basic usage example for OpenAgent

Demonstrates streaming generation and a function-calling round trip.
"""

import asyncio
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from openagent.core.api import OpenRouterContentGenerator
from openagent.core.config import Config
from openagent.core.errors import OpenRouterError
from openagent.core.types import (
    Content,
    Part,
    Role,
    ToolDeclaration,
    ToolGroup,
    UnifiedRequest,
)

WEATHER_TOOL = ToolDeclaration(
    name="get_weather",
    description="Get the current weather for a city",
    parameters_schema={
        "type": "object",
        "properties": {"city": {"type": "string"}},
        "required": ["city"],
    },
)


async def main():
    """Basic usage example"""
    print("OpenAgent - Basic Usage Example")
    print("=" * 40)

    config = Config()
    print("✓ Configuration loaded")
    print(f"  Model: {config.default_model}")

    error = config.validate_auth()
    if error:
        print(f"✗ {error}")
        return

    async with OpenRouterContentGenerator(config.generator_config()) as generator:
        # Streaming text generation
        print("\nStreaming a reply:")
        request = UnifiedRequest(
            contents="Explain OpenRouter in one sentence.",
            model=config.default_model,
        )
        async for response in generator.generate_content_stream(request):
            print(response.text, end="", flush=True)
        print()

        tokens = await generator.count_tokens(request.contents)
        print(f"  Prompt estimate: {tokens.total_tokens} tokens")

        # Function calling
        print("\nAsking for a tool call:")
        question = Content.user_text("What's the weather in Wellington?")
        request = UnifiedRequest(
            contents=[question],
            model=config.default_model,
            tools=[ToolGroup(function_declarations=[WEATHER_TOOL])],
        )
        try:
            response = await generator.generate_content(request)
        except OpenRouterError as e:
            print(f"✗ Generation failed: {e}")
            return

        calls = response.function_calls
        if not calls:
            print(f"  Model answered directly: {response.text}")
            return

        call = calls[0]
        print(f"  ✓ Model called {call.name} with {call.args}")

        # Send the tool result back
        follow_up = UnifiedRequest(
            contents=[
                question,
                Content(role=Role.MODEL, parts=[Part.from_function_call(call.name, call.args, id=call.id)]),
                Content(
                    role=Role.USER,
                    parts=[Part.from_function_response(call.name, {"forecast": "windy, 14°C"})],
                ),
            ],
            model=config.default_model,
            tools=request.tools,
        )
        response = await generator.generate_content(follow_up)
        print(f"  ✓ Final answer: {response.text}")


if __name__ == "__main__":
    asyncio.run(main())
