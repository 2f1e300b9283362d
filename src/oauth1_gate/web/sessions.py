"""Session layer backed by Starlette's signed cookie session.

Requires ``starlette.middleware.sessions.SessionMiddleware`` to run before the
gate so that ``request.session`` is available.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from oauth1_gate.exceptions import AuthenticationException
from oauth1_gate.models.auth import RequestToken

if TYPE_CHECKING:
    from starlette.requests import Request

    from oauth1_gate.models.auth import OAuthCredential

logger = logging.getLogger(__name__)

PRINCIPAL_KEY = "oauth1_gate.principal"
REMEMBERED_KEY = "oauth1_gate.remembered"
REQUEST_TOKEN_KEY = "oauth1_gate.request_token"

# Resolves a credential to a local principal, raising AuthenticationException to reject it
Realm = Callable[["OAuthCredential"], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class SessionState:
    """Snapshot of the identity stored in the cookie session."""

    principal: str | None
    remembered_principal: str | None

    @property
    def authenticated(self) -> bool:
        return self.principal is not None

    @property
    def remembered(self) -> bool:
        return self.remembered_principal is not None


class CookieSessionStore:
    """Keeps the logged-in principal in ``request.session``.

    Only the principal is stored; access token secrets never reach the cookie.

    Args:
        realm: Optional async callable verifying the credential and returning
            the local principal (e.g. by fetching the provider's user profile).
            Defaults to trusting the provider's user id.
        remember: Also record the principal under a remember-me key that
            survives ``logout(forget=False)``.
    """

    def __init__(self, realm: Realm | None = None, *, remember: bool = False) -> None:
        self.realm = realm
        self.remember = remember

    def current_session(self, request: Request) -> SessionState | None:
        if "session" not in request.scope:
            return None
        session = request.session
        principal = session.get(PRINCIPAL_KEY)
        remembered = session.get(REMEMBERED_KEY)
        if principal is None and remembered is None:
            return None
        return SessionState(principal=principal, remembered_principal=remembered)

    async def login(self, request: Request, credential: OAuthCredential) -> None:
        """Record the credential's principal in the session.

        Raises:
            AuthenticationException: The realm rejected the credential or
                resolved it to an empty principal.
        """
        principal = await self.realm(credential) if self.realm else credential.principal
        if not principal:
            raise AuthenticationException("Credential did not resolve to a principal")

        request.session[PRINCIPAL_KEY] = principal
        if self.remember:
            request.session[REMEMBERED_KEY] = principal
        logger.debug("Session established for %s", principal)

    def logout(self, request: Request, *, forget: bool = True) -> None:
        request.session.pop(PRINCIPAL_KEY, None)
        request.session.pop(REQUEST_TOKEN_KEY, None)
        if forget:
            request.session.pop(REMEMBERED_KEY, None)


class SessionRequestTokenStore:
    """Carries the INITIATE request token across the provider round trip."""

    def save(self, request: Request, token: RequestToken) -> None:
        request.session[REQUEST_TOKEN_KEY] = {
            "token": token.token,
            "token_secret": token.token_secret,
        }

    def pop(self, request: Request) -> RequestToken | None:
        data = request.session.pop(REQUEST_TOKEN_KEY, None)
        if not data:
            return None
        try:
            return RequestToken(token=data["token"], token_secret=data["token_secret"])
        except (KeyError, TypeError):
            logger.warning("Discarding malformed request token in session")
            return None
