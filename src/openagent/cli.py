"""
Main CLI interface for OpenAgent

Provides the command-line interface using Click framework with rich terminal UI.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
from rich.console import Console
from rich.table import Table

from .core.api import OpenRouterContentGenerator
from .core.config import AUTH_OPENROUTER, SUPPORTED_AUTH_TYPES, Config
from .core.errors import OpenRouterError
from .core.models import POPULAR_MODELS
from .core.types import UnifiedRequest
from .utils.logging import setup_logging

console = Console()
logger = structlog.get_logger(__name__)


@click.group()
@click.option('--config', '-c', type=click.Path(), help='Configuration file path')
@click.option('--model', '-m', help='Model to use for this invocation')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def main(ctx, config: Optional[str], model: Optional[str], verbose: bool, debug: bool):
    """OpenAgent

    Talk to any OpenRouter model through the unified content generator.
    """
    try:
        app_config = Config(Path(config) if config else None)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    log_level = "DEBUG" if debug else ("INFO" if verbose else app_config.logging.level)
    setup_logging(log_level, app_config.logging.format)

    # Only for this invocation; `model` persists a choice
    if model:
        app_config.models.default = model

    ctx.ensure_object(dict)
    ctx.obj['config'] = app_config


@main.command()
@click.argument('model_name', required=False)
@click.pass_context
def model(ctx, model_name: Optional[str]):
    """Show or switch the active model"""
    config = ctx.obj['config']

    if config.security.auth_type != AUTH_OPENROUTER:
        console.print("[yellow]The model command is only available when using OpenRouter authentication.[/yellow]")
        console.print(f"Current model: [green]{config.default_model}[/green]")
        console.print("Run [cyan]openagent auth openrouter[/cyan] to select it.")
        return

    if not model_name or not model_name.strip():
        console.print(f"Current model: [green]{config.default_model}[/green]\n")
        console.print("Available models (use [cyan]openagent model <name>[/cyan] to switch):")
        for name in POPULAR_MODELS:
            console.print(f"  • {name}")
        console.print("\nYou can also use any model from https://openrouter.ai/models")
        return

    try:
        config.set_model(model_name)
    except (ValueError, OSError) as e:
        console.print(f"[red]❌ Error switching model: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓ Model switched to: {model_name.strip()}[/green]")
    console.print("Your next message will use the new model.")


@main.command()
@click.argument('auth_type', required=False, default=AUTH_OPENROUTER,
                type=click.Choice(SUPPORTED_AUTH_TYPES))
@click.pass_context
def auth(ctx, auth_type: str):
    """Select the authentication method"""
    config = ctx.obj['config']

    try:
        config.set_auth_type(auth_type)
    except (ValueError, OSError) as e:
        console.print(f"[red]❌ {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓ Authentication set to: {auth_type}[/green]")


@main.command()
@click.argument('prompt')
@click.option('--system', 'system_instruction', help='System instruction')
@click.option('--stream/--no-stream', default=True, help='Stream the response')
@click.pass_context
def ask(ctx, prompt: str, system_instruction: Optional[str], stream: bool):
    """Ask the active model a single question"""
    config = ctx.obj['config']

    error = config.validate_auth()
    if error:
        console.print(f"[red]❌ {error}[/red]")
        sys.exit(1)

    request = UnifiedRequest(
        contents=prompt,
        model=config.default_model,
        system_instruction=system_instruction,
    )

    try:
        asyncio.run(ask_command(config, request, stream))
    except OpenRouterError as e:
        console.print(f"\n[red]❌ {e}[/red]")
        sys.exit(1)


async def ask_command(config: Config, request: UnifiedRequest, stream: bool):
    """Run one generation and print the reply"""
    async with OpenRouterContentGenerator(config.generator_config()) as generator:
        if not stream:
            response = await generator.generate_content(request)
            console.print(response.text)
            return

        usage = None
        async for response in generator.generate_content_stream(request):
            console.print(response.text, end="", markup=False, highlight=False)
            if response.usage:
                usage = response.usage
        console.print()

        if usage:
            logger.info(
                "Token usage",
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )


@main.command('count-tokens')
@click.argument('text')
@click.pass_context
def count_tokens(ctx, text: str):
    """Estimate the token count of some text"""
    config = ctx.obj['config']
    result = asyncio.run(count_tokens_command(config, text))
    console.print(f"Estimated tokens: {result.total_tokens}")


async def count_tokens_command(config: Config, text: str):
    async with OpenRouterContentGenerator(config.generator_config()) as generator:
        return await generator.count_tokens(text)


@main.command('config-info')
@click.pass_context
def config_info(ctx):
    """Show configuration information"""
    config = ctx.obj['config']

    key = config.openrouter_api_key
    masked_key = f"{key[:8]}...{key[-4:]}" if len(key) > 12 else ("set" if key else "not set")

    table = Table(title="OpenAgent Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Config file", str(config.config_path))
    table.add_row("API key", masked_key)
    table.add_row("Base URL", config.api.base_url)
    table.add_row("Timeout", f"{config.api.timeout}s")
    table.add_row("Model", config.default_model)
    table.add_row("Auth type", config.security.auth_type or "not selected")
    table.add_row("Log level", config.logging.level)

    console.print(table)


if __name__ == '__main__':
    main()
