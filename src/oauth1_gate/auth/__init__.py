"""OAuth 1.0a provider client."""

from oauth1_gate.auth.oauth import OAuth1Service

__all__ = ["OAuth1Service"]
