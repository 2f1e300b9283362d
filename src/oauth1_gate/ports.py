"""Collaborator interfaces the authentication gate depends on.

The gate only talks to these protocols. Starlette-backed implementations live
in :mod:`oauth1_gate.web`; tests substitute fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from oauth1_gate.models.auth import AccessToken, OAuthCredential, RequestToken


class Session(Protocol):
    """Who is making the request and whether that identity is verified."""

    @property
    def authenticated(self) -> bool: ...

    @property
    def remembered(self) -> bool: ...


class SessionStore(Protocol):
    """Session layer: looks up the current session and logs callers in."""

    def current_session(self, request: Request) -> Session | None: ...

    async def login(self, request: Request, credential: OAuthCredential) -> None:
        """Log the caller in, raising AuthenticationException on rejection."""
        ...


class OAuth1Client(Protocol):
    """Provider client performing the signed token requests.

    Failures are raised as ProviderError subclasses: ProviderUnreachable,
    ProviderProtocolError or InterruptedWait.
    """

    async def get_request_token(self) -> RequestToken: ...

    async def get_access_token(
        self,
        request_token: RequestToken | None,
        verifier: str,
    ) -> AccessToken: ...

    def get_authorization_url(self, request_token: RequestToken) -> str: ...


class RedirectCoordinator(Protocol):
    """Produces the redirect responses the gate decides on."""

    def issue_redirect(self, request: Request, url: str) -> Response: ...

    def issue_success_redirect(self, request: Request) -> Response:
        """Redirect to the URL saved before the caller was gated."""
        ...

    def save_request_and_redirect_to_login(self, request: Request, login_url: str) -> Response:
        """Remember the requested URL for replay, then redirect to login_url."""
        ...


class RequestTokenStore(Protocol):
    """Keeps the INITIATE request token until the provider calls back."""

    def save(self, request: Request, token: RequestToken) -> None: ...

    def pop(self, request: Request) -> RequestToken | None: ...
