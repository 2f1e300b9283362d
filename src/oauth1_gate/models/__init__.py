"""Data models for the OAuth1 gate."""

from oauth1_gate.models.auth import (
    AccessToken,
    AuthenticationAttempt,
    OAuthCredential,
    Phase,
    RequestToken,
)

__all__ = [
    "AccessToken",
    "AuthenticationAttempt",
    "OAuthCredential",
    "Phase",
    "RequestToken",
]
