"""OAuth token and authentication attempt models."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, Field


class Phase(StrEnum):
    """Handshake phase inferred from the incoming request."""

    CALLBACK = "callback"
    INITIATE = "initiate"


class RequestToken(BaseModel):
    """OAuth request token (first step of OAuth flow)."""

    token: str = Field(description="Request token value")
    token_secret: str = Field(description="Request token secret", repr=False)
    callback_confirmed: bool = Field(
        default=True,
        description="Whether the provider echoed oauth_callback_confirmed=true",
    )


class AccessToken(BaseModel):
    """OAuth access token (final step of OAuth flow)."""

    token: str = Field(description="Access token value")
    token_secret: str = Field(description="Access token secret", repr=False)
    extra: dict[str, str] = Field(
        default_factory=dict,
        description="Additional provider parameters (e.g. user_id, screen_name)",
    )


class OAuthCredential(BaseModel):
    """Authentication token handed to the session layer after a handshake."""

    host: str | None = Field(default=None, description="Requesting host")
    access_token: AccessToken

    @property
    def principal(self) -> str:
        """Provider user id when the provider sent one, else the token value."""
        extra = self.access_token.extra
        return extra.get("user_id") or extra.get("screen_name") or self.access_token.token

    def __str__(self) -> str:
        return f"OAuthCredential(host={self.host!r}, principal={self.principal!r})"


@dataclass(frozen=True, slots=True)
class AuthenticationAttempt:
    """What one request contributes to the handshake.

    Built at request entry and discarded when the request is done.
    """

    credential: str | None
    host: str | None
    phase: Phase
