"""Configuration management for the OAuth1 gate."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}


def _get_config_dir() -> Path:
    """Get XDG-compliant config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "oauth1-gate"
    return Path.home() / ".config" / "oauth1-gate"


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """OAuth 1.0a provider endpoints and consumer credentials."""

    consumer_key: str
    consumer_secret: str
    request_token_url: str
    access_token_url: str
    authorize_url: str
    callback_url: str = "oob"
    timeout: float = 30.0
    signature_method: str = "HMAC-SHA1"

    def __repr__(self) -> str:
        return (
            f"ProviderConfig(consumer_key={self.consumer_key!r}, "
            f"request_token_url={self.request_token_url!r}, "
            f"access_token_url={self.access_token_url!r}, "
            f"authorize_url={self.authorize_url!r}, "
            f"callback_url={self.callback_url!r})"
        )

    @classmethod
    def from_env(cls) -> ProviderConfig:
        """Create config from environment variables.

        Expected env vars:
        - OAUTH1_CONSUMER_KEY
        - OAUTH1_CONSUMER_SECRET
        - OAUTH1_REQUEST_TOKEN_URL
        - OAUTH1_ACCESS_TOKEN_URL
        - OAUTH1_AUTHORIZE_URL
        - OAUTH1_CALLBACK_URL (optional, defaults to "oob")
        """
        names = {
            "consumer_key": "OAUTH1_CONSUMER_KEY",
            "consumer_secret": "OAUTH1_CONSUMER_SECRET",
            "request_token_url": "OAUTH1_REQUEST_TOKEN_URL",
            "access_token_url": "OAUTH1_ACCESS_TOKEN_URL",
            "authorize_url": "OAUTH1_AUTHORIZE_URL",
        }
        values = {field: os.environ.get(var) for field, var in names.items()}
        missing = [names[field] for field, value in values.items() if not value]
        if missing:
            msg = f"Missing required environment variables: {', '.join(missing)}"
            raise ValueError(msg)

        return cls(
            consumer_key=values["consumer_key"] or "",
            consumer_secret=values["consumer_secret"] or "",
            request_token_url=values["request_token_url"] or "",
            access_token_url=values["access_token_url"] or "",
            authorize_url=values["authorize_url"] or "",
            callback_url=os.environ.get("OAUTH1_CALLBACK_URL") or "oob",
        )

    @classmethod
    def from_file(cls, path: Path | None = None) -> ProviderConfig:
        """Load config from JSON file.

        Default path: ~/.config/oauth1-gate/provider.json

        Expected format:
        {
            "consumer_key": "...",
            "consumer_secret": "...",
            "request_token_url": "https://provider/oauth/request_token",
            "access_token_url": "https://provider/oauth/access_token",
            "authorize_url": "https://provider/oauth/authorize",
            "callback_url": "https://app/callback"
        }
        """
        if path is None:
            path = _get_config_dir() / "provider.json"

        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = json.load(f)

        try:
            return cls(
                consumer_key=data["consumer_key"],
                consumer_secret=data["consumer_secret"],
                request_token_url=data["request_token_url"],
                access_token_url=data["access_token_url"],
                authorize_url=data["authorize_url"],
                callback_url=data.get("callback_url", "oob"),
                timeout=float(data.get("timeout", 30.0)),
                signature_method=data.get("signature_method", "HMAC-SHA1"),
            )
        except KeyError as e:
            msg = f"Missing key {e.args[0]!r} in {path}"
            raise ValueError(msg) from None

    @classmethod
    def load(cls) -> ProviderConfig:
        """Load config from environment or file (env takes precedence)."""
        try:
            return cls.from_env()
        except ValueError:
            return cls.from_file()


@dataclass(frozen=True, slots=True)
class GateConfig:
    """Behaviour of the authentication gate.

    Built once at startup and shared read-only by every request.
    """

    failure_url: str = "/login/failure"
    authorization_parameter_name: str = "code"
    login_url: str = "/login"
    success_url: str = "/"
    persist_request_token: bool = False

    @classmethod
    def from_env(cls) -> GateConfig:
        """Create config from OAUTH1_GATE_* environment variables, keeping defaults."""
        defaults = cls()
        persist = os.environ.get("OAUTH1_GATE_PERSIST_REQUEST_TOKEN")
        return cls(
            failure_url=os.environ.get("OAUTH1_GATE_FAILURE_URL", defaults.failure_url),
            authorization_parameter_name=os.environ.get(
                "OAUTH1_GATE_AUTHORIZATION_PARAMETER",
                defaults.authorization_parameter_name,
            ),
            login_url=os.environ.get("OAUTH1_GATE_LOGIN_URL", defaults.login_url),
            success_url=os.environ.get("OAUTH1_GATE_SUCCESS_URL", defaults.success_url),
            persist_request_token=(
                persist.strip().lower() in _TRUTHY
                if persist is not None
                else defaults.persist_request_token
            ),
        )
