"""Authentication gate driving the OAuth 1.0a handshake for protected requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from oauth1_gate.exceptions import (
    AuthenticationException,
    OAuthAuthenticationException,
    ProviderError,
)
from oauth1_gate.models.auth import AuthenticationAttempt, OAuthCredential, Phase

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from oauth1_gate.config import GateConfig
    from oauth1_gate.models.auth import RequestToken
    from oauth1_gate.ports import (
        OAuth1Client,
        RedirectCoordinator,
        RequestTokenStore,
        SessionStore,
    )

logger = logging.getLogger(__name__)

_MAX_LOGGED_MESSAGE = 200


def _truncate(message: str) -> str:
    if len(message) <= _MAX_LOGGED_MESSAGE:
        return message
    return message[:_MAX_LOGGED_MESSAGE] + "..."


class Outcome(StrEnum):
    """Terminal state of one pass through the gate."""

    ALLOWED = "allowed"
    SUCCESS_REDIRECT = "success_redirect"
    FAILURE_REDIRECT = "failure_redirect"
    REDIRECT_TO_PROVIDER = "redirect_to_provider"
    REDIRECT_TO_DEFAULT = "redirect_to_default"


@dataclass(frozen=True, slots=True)
class GateResult:
    """What the gate decided for a request.

    Attributes:
        handled: True when the request was fully resolved by the gate
            (login succeeded, or the session was already valid).
        outcome: Which terminal state was reached.
        response: The redirect to send back, None when the request may
            proceed to the protected resource.
    """

    handled: bool
    outcome: Outcome
    response: Response | None = None


class AuthenticationGateFilter:
    """Gate for protected resources that completes the OAuth 1.0a dance.

    Per request, exactly one of:
    - already authenticated: let through, no provider calls
    - callback (request carries the authorization parameter): exchange
      request token + verifier for an access token, log in, redirect
    - initiate: save the requested URL and redirect to the provider's
      authorization page (or the configured login URL if it can't be reached)

    The gate itself never grants access and keeps no state between requests.
    """

    def __init__(
        self,
        config: GateConfig,
        client: OAuth1Client,
        sessions: SessionStore,
        redirects: RedirectCoordinator,
        *,
        request_tokens: RequestTokenStore | None = None,
    ) -> None:
        if config.persist_request_token and request_tokens is None:
            msg = "persist_request_token requires a request token store"
            raise ValueError(msg)

        self.config = config
        self.client = client
        self.sessions = sessions
        self.redirects = redirects
        self.request_tokens = request_tokens

    def is_access_allowed(self, request: Request) -> bool:
        """Always False: access is only ever granted through a session."""
        return False

    async def decide(self, request: Request) -> GateResult:
        """Run the gate for one request.

        Raises:
            OAuthAuthenticationException: The provider failed during the
                callback exchange. No redirect is produced.
        """
        subject = self.sessions.current_session(request)
        if subject is not None and subject.authenticated:
            return GateResult(handled=True, outcome=Outcome.ALLOWED)

        if self.is_oauth_submission(request):
            attempt = self.create_attempt(request)
            stored_token = self._pop_request_token(request)
            credential = await self.complete_handshake(attempt, request_token=stored_token)

            try:
                await self.sessions.login(request, credential)
            except AuthenticationException as e:
                logger.error(
                    "Host %s OAuth authentication failed: %s",
                    attempt.host,
                    _truncate(e.message),
                )
                return self.on_login_failure(request, credential, e)

            return self.on_login_success(request, credential)

        login_url, outcome = await self._resolve_login_url(request)
        response = self.redirects.save_request_and_redirect_to_login(request, login_url)
        return GateResult(handled=False, outcome=outcome, response=response)

    async def complete_handshake(
        self,
        attempt: AuthenticationAttempt,
        *,
        request_token: RequestToken | None = None,
    ) -> OAuthCredential:
        """Exchange the callback verifier for an access token.

        A fresh request token is fetched unless one saved at INITIATE is given.

        Raises:
            OAuthAuthenticationException: Wrapping the provider failure.
        """
        try:
            if request_token is None:
                request_token = await self.client.get_request_token()
            access_token = await self.client.get_access_token(
                request_token, attempt.credential or ""
            )
        except ProviderError as e:
            logger.warning(
                "Handshake with provider failed at %s for host %s: %s",
                e.stage,
                attempt.host,
                _truncate(e.message),
            )
            raise OAuthAuthenticationException(e) from e

        logger.debug("Access token obtained for host %s", attempt.host)
        return OAuthCredential(host=attempt.host, access_token=access_token)

    async def get_login_url(self) -> str:
        """Provider authorization URL, or the configured login URL on failure."""
        login_url, _ = await self._resolve_login_url(None)
        return login_url

    def on_login_success(self, request: Request, credential: OAuthCredential) -> GateResult:
        """Send the user back to the protected URL they originally asked for."""
        logger.info("Host %s logged in as %s", credential.host, credential.principal)
        response = self.redirects.issue_success_redirect(request)
        return GateResult(handled=True, outcome=Outcome.SUCCESS_REDIRECT, response=response)

    def on_login_failure(
        self,
        request: Request,
        credential: OAuthCredential,
        error: AuthenticationException,
    ) -> GateResult:
        """Redirect to the failure page unless the session is already identified.

        The session is re-read because it may have become authenticated (a
        concurrent request won the race) or remembered independently of this
        login attempt.
        """
        subject = self.sessions.current_session(request)
        if subject is not None and (subject.authenticated or subject.remembered):
            logger.debug("Login failed but session for host %s is identified", credential.host)
            response = self.redirects.issue_success_redirect(request)
            return GateResult(handled=False, outcome=Outcome.SUCCESS_REDIRECT, response=response)

        response = self.redirects.issue_redirect(request, self.config.failure_url)
        return GateResult(handled=False, outcome=Outcome.FAILURE_REDIRECT, response=response)

    def is_oauth_submission(self, request: Request) -> bool:
        return self.get_authz_parameter(request) is not None

    def get_authz_parameter(self, request: Request) -> str | None:
        return request.query_params.get(self.config.authorization_parameter_name)

    def get_host(self, request: Request) -> str | None:
        """Client address, honouring proxy headers."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip
        return request.client.host if request.client else None

    def create_attempt(self, request: Request) -> AuthenticationAttempt:
        credential = self.get_authz_parameter(request)
        return AuthenticationAttempt(
            credential=credential,
            host=self.get_host(request),
            phase=Phase.CALLBACK if credential is not None else Phase.INITIATE,
        )

    async def _resolve_login_url(self, request: Request | None) -> tuple[str, Outcome]:
        try:
            request_token = await self.client.get_request_token()
            authorization_url = self.client.get_authorization_url(request_token)
        except ProviderError as e:
            logger.warning(
                "Cannot reach provider for authorization URL (%s), using %s: %s",
                e.stage,
                self.config.login_url,
                _truncate(e.message),
            )
            return self.config.login_url, Outcome.REDIRECT_TO_DEFAULT

        if request is not None and self.config.persist_request_token and self.request_tokens:
            self.request_tokens.save(request, request_token)
        return authorization_url, Outcome.REDIRECT_TO_PROVIDER

    def _pop_request_token(self, request: Request) -> RequestToken | None:
        if not self.config.persist_request_token or self.request_tokens is None:
            return None
        token = self.request_tokens.pop(request)
        if token is None:
            logger.debug("No saved request token in session, fetching a fresh one")
        return token
