"""Tests for the click command-line interface."""

import httpx
import pytest
import yaml
from click.testing import CliRunner

from openagent import cli
from openagent.core.api import OpenRouterContentGenerator
from openagent.core.models import POPULAR_MODELS

from tests.helpers import delta_chunk, sse_lines


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("OPENROUTER_API_KEY", "OPENROUTER_BASE_URL", "OPENAGENT_MODEL", "OPENAGENT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    return str(tmp_path / "config.yaml")


@pytest.fixture
def openrouter_config_file(config_file):
    with open(config_file, "w", encoding="utf-8") as f:
        yaml.safe_dump({"security": {"auth_type": "openrouter"}}, f)
    return config_file


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_openrouter(monkeypatch):
    """Route every generator the CLI builds to a canned transport."""
    requests = []

    def handler(request):
        requests.append(request)
        if b'"stream":true' in request.content.replace(b" ", b""):
            body = sse_lines([delta_chunk(content="Hel"), delta_chunk(content="lo", finish_reason="stop")])
            return httpx.Response(200, content=b"".join(body))
        return httpx.Response(
            200, json={"choices": [{"message": {"content": "Hello"}, "finish_reason": "stop"}]}
        )

    original_init = OpenRouterContentGenerator.__init__

    def init(self, config, transport=None):
        original_init(self, config, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(OpenRouterContentGenerator, "__init__", init)
    return requests


def test_model_lists_popular_models(runner, openrouter_config_file):
    result = runner.invoke(cli.main, ["--config", openrouter_config_file, "model"])

    assert result.exit_code == 0
    assert "Current model: gemini-2.5-pro" in result.output
    for name in POPULAR_MODELS:
        assert name in result.output


def test_model_switch_persists(runner, openrouter_config_file):
    result = runner.invoke(cli.main, ["--config", openrouter_config_file, "model", "qwen/qwen3-coder"])

    assert result.exit_code == 0
    assert "Model switched to: qwen/qwen3-coder" in result.output
    with open(openrouter_config_file, encoding="utf-8") as f:
        assert yaml.safe_load(f)["models"]["default"] == "qwen/qwen3-coder"

    result = runner.invoke(cli.main, ["--config", openrouter_config_file, "model"])
    assert "Current model: qwen/qwen3-coder" in result.output


def test_model_requires_openrouter_auth(runner, config_file):
    result = runner.invoke(cli.main, ["--config", config_file, "model", "qwen/qwen3-coder"])

    assert result.exit_code == 0
    assert "only available when using OpenRouter authentication" in result.output
    assert "Current model: gemini-2.5-pro" in result.output
    assert "Model switched" not in result.output

    result = runner.invoke(cli.main, ["--config", config_file, "model"])
    assert "Current model: gemini-2.5-pro" in result.output
    assert POPULAR_MODELS[0] not in result.output


def test_auth_without_key_fails(runner, config_file):
    result = runner.invoke(cli.main, ["--config", config_file, "auth"])

    assert result.exit_code == 1
    assert "OPENROUTER_API_KEY" in result.output


def test_auth_with_key(runner, config_file, monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-v1-env")

    result = runner.invoke(cli.main, ["--config", config_file, "auth", "openrouter"])

    assert result.exit_code == 0
    with open(config_file, encoding="utf-8") as f:
        assert yaml.safe_load(f)["security"]["auth_type"] == "openrouter"


def test_ask_requires_credentials(runner, config_file):
    result = runner.invoke(cli.main, ["--config", config_file, "ask", "hi"])

    assert result.exit_code == 1
    assert "OPENROUTER_API_KEY" in result.output


def test_ask_streams_reply(runner, config_file, monkeypatch, fake_openrouter):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-v1-env")

    result = runner.invoke(cli.main, ["--config", config_file, "--model", "openai/gpt-4o", "ask", "hi"])

    assert result.exit_code == 0, result.output
    assert "Hello" in result.output
    assert len(fake_openrouter) == 1


def test_ask_without_streaming(runner, config_file, monkeypatch, fake_openrouter):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-v1-env")

    result = runner.invoke(
        cli.main, ["--config", config_file, "ask", "hi", "--no-stream", "--system", "Be brief."]
    )

    assert result.exit_code == 0, result.output
    assert "Hello" in result.output
    assert b"Be brief." in fake_openrouter[0].content


def test_count_tokens(runner, config_file):
    result = runner.invoke(cli.main, ["--config", config_file, "count-tokens", "abcdefgh"])

    assert result.exit_code == 0
    assert "Estimated tokens: 2" in result.output


def test_config_info_masks_key(runner, config_file, monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-v1-abcdefghijklmnop")

    result = runner.invoke(cli.main, ["--config", config_file, "config-info"])

    assert result.exit_code == 0
    assert "abcdefghijklmnop" not in result.output
    assert "sk-or-v1" in result.output
