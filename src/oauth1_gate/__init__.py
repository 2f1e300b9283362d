"""OAuth 1.0a authentication gate for Starlette applications.

Redirects unauthenticated callers to the OAuth provider, completes the
three-legged handshake when the provider calls back, and logs the caller into
a cookie session.

Example:
    from starlette.routing import Route

    from oauth1_gate import GateConfig, ProviderConfig
    from oauth1_gate.web import build_gate, create_app

    gate = build_gate(GateConfig(failure_url="/denied"), ProviderConfig.load())
    app = create_app(gate, [Route("/", home)], secret_key="change-me")
"""

from oauth1_gate.auth import OAuth1Service
from oauth1_gate.config import GateConfig, ProviderConfig
from oauth1_gate.exceptions import (
    AuthenticationException,
    GateError,
    InterruptedWait,
    OAuthAuthenticationException,
    ProviderError,
    ProviderProtocolError,
    ProviderUnreachable,
    SequenceError,
)
from oauth1_gate.gate import AuthenticationGateFilter, GateResult, Outcome
from oauth1_gate.models import (
    AccessToken,
    AuthenticationAttempt,
    OAuthCredential,
    Phase,
    RequestToken,
)

__version__ = "0.1.0"

__all__ = [
    # Gate
    "AuthenticationGateFilter",
    "GateResult",
    "Outcome",
    # Configuration
    "GateConfig",
    "ProviderConfig",
    # Provider client
    "OAuth1Service",
    # Models
    "AccessToken",
    "AuthenticationAttempt",
    "OAuthCredential",
    "Phase",
    "RequestToken",
    # Exceptions
    "AuthenticationException",
    "GateError",
    "InterruptedWait",
    "OAuthAuthenticationException",
    "ProviderError",
    "ProviderProtocolError",
    "ProviderUnreachable",
    "SequenceError",
]
