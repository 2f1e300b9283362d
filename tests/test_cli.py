"""Tests for the oauth1-gate command-line interface."""

from unittest.mock import AsyncMock, patch

import pytest
import typer
from typer.testing import CliRunner

from oauth1_gate import (
    AccessToken,
    OAuth1Service,
    ProviderUnreachable,
    RequestToken,
    SequenceError,
)
from oauth1_gate.cli import app
from oauth1_gate.cli.async_runner import async_command
from oauth1_gate.cli.formatters import mask

runner = CliRunner()

PROVIDER_ENV = {
    "OAUTH1_CONSUMER_KEY": "cli_key",
    "OAUTH1_CONSUMER_SECRET": "cli_secret_value",
    "OAUTH1_REQUEST_TOKEN_URL": "https://p.example/request_token",
    "OAUTH1_ACCESS_TOKEN_URL": "https://p.example/access_token",
    "OAUTH1_AUTHORIZE_URL": "https://p.example/authorize",
}


@pytest.fixture(autouse=True)
def provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var, value in PROVIDER_ENV.items():
        monkeypatch.setenv(var, value)
    monkeypatch.delenv("OAUTH1_GATE_LOGIN_URL", raising=False)


class TestMask:
    """Tests for secret masking."""

    def test_keeps_last_characters(self) -> None:
        assert mask("abcdefgh") == "****efgh"

    def test_short_values_fully_hidden(self) -> None:
        assert mask("abc") == "***"


class TestAsyncCommand:
    """Tests for the async command decorator."""

    def test_gate_error_exits_with_code_1(self) -> None:
        @async_command
        async def failing() -> None:
            raise SequenceError("No request token available")

        with pytest.raises(typer.Exit) as exc_info:
            failing()

        assert exc_info.value.exit_code == 1

    def test_returns_result(self) -> None:
        @async_command
        async def answer() -> int:
            return 42

        assert answer() == 42


class TestConfigShow:
    """Tests for `config show`."""

    def test_masks_consumer_secret(self) -> None:
        result = runner.invoke(app, ["config", "show", "--output", "json"])

        assert result.exit_code == 0
        assert "cli_key" in result.output
        assert "cli_secret_value" not in result.output
        assert "alue" in result.output

    def test_missing_provider_config(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        monkeypatch.delenv("OAUTH1_CONSUMER_SECRET")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1


class TestLoginUrl:
    """Tests for `auth login-url`."""

    def test_prints_authorization_url(self) -> None:
        with patch.object(
            OAuth1Service,
            "get_request_token",
            AsyncMock(return_value=RequestToken(token="RT1", token_secret="s")),
        ):
            result = runner.invoke(app, ["auth", "login-url"])

        assert result.exit_code == 0
        assert "oauth_token=RT1" in result.output

    def test_falls_back_when_provider_down(self) -> None:
        with patch.object(
            OAuth1Service,
            "get_request_token",
            AsyncMock(side_effect=ProviderUnreachable("down", stage="request_token")),
        ):
            result = runner.invoke(app, ["auth", "login-url"])

        assert result.exit_code == 0
        assert "fallback" in result.output
        assert "/login" in result.output


class TestHandshake:
    """Tests for `auth handshake`."""

    def test_exchanges_verifier(self) -> None:
        request_token = RequestToken(token="RT1", token_secret="s")
        get_access_token = AsyncMock(
            return_value=AccessToken(token="AT1", token_secret="secret-token-value")
        )

        with (
            patch.object(OAuth1Service, "get_request_token", AsyncMock(return_value=request_token)),
            patch.object(OAuth1Service, "get_access_token", get_access_token),
        ):
            result = runner.invoke(
                app,
                ["auth", "handshake", "--no-browser", "--output", "json"],
                input="v-123\n",
            )

        assert result.exit_code == 0
        get_access_token.assert_awaited_once_with(request_token, "v-123")
        assert "AT1" in result.output
        assert "secret-token-value" not in result.output

    def test_provider_failure_exits_cleanly(self) -> None:
        with patch.object(
            OAuth1Service,
            "get_request_token",
            AsyncMock(side_effect=ProviderUnreachable("Provider unreachable: refused")),
        ):
            result = runner.invoke(app, ["auth", "handshake", "--no-browser"])

        assert result.exit_code == 1
