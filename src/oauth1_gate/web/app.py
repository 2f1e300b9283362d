"""Wiring helpers building a gated Starlette application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import httpx
from starlette import status
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import PlainTextResponse, RedirectResponse
from starlette.routing import BaseRoute, Route

from oauth1_gate.auth import OAuth1Service
from oauth1_gate.gate import AuthenticationGateFilter
from oauth1_gate.web.middleware import AuthenticationGateMiddleware
from oauth1_gate.web.redirects import SessionRedirects
from oauth1_gate.web.sessions import CookieSessionStore, Realm, SessionRequestTokenStore

if TYPE_CHECKING:
    from starlette.requests import Request

    from oauth1_gate.config import GateConfig, ProviderConfig

logger = logging.getLogger(__name__)


def build_gate(
    gate_config: GateConfig,
    provider_config: ProviderConfig,
    *,
    realm: Realm | None = None,
    remember: bool = False,
    http_client: httpx.AsyncClient | None = None,
) -> AuthenticationGateFilter:
    """Create a gate wired to the bundled cookie-session collaborators."""
    return AuthenticationGateFilter(
        gate_config,
        OAuth1Service(provider_config, http_client=http_client),
        CookieSessionStore(realm, remember=remember),
        SessionRedirects(gate_config.success_url),
        request_tokens=SessionRequestTokenStore() if gate_config.persist_request_token else None,
    )


def create_app(
    gate: AuthenticationGateFilter,
    routes: Sequence[BaseRoute],
    *,
    secret_key: str,
    exempt_paths: Sequence[str] = (),
    session_cookie: str = "oauth1_gate_session",
    https_only: bool = False,
    debug: bool = False,
) -> Starlette:
    """Starlette application whose routes all sit behind the gate.

    Adds a ``/logout`` route and, when the failure URL is a local path, a
    plain failure page. A bundled :class:`OAuth1Service` has its connection
    pool opened and closed with the application lifespan.
    """

    async def failure(request: Request) -> PlainTextResponse:
        return PlainTextResponse("Authentication failed", status_code=status.HTTP_401_UNAUTHORIZED)

    async def logout(request: Request) -> RedirectResponse:
        if isinstance(gate.sessions, CookieSessionStore):
            gate.sessions.logout(request)
        else:
            request.session.clear()
        return RedirectResponse(gate.config.success_url, status_code=status.HTTP_303_SEE_OTHER)

    all_routes = list(routes)
    all_routes.append(Route("/logout", logout, methods=["GET", "POST"]))
    if gate.config.failure_url.startswith("/"):
        all_routes.append(Route(gate.config.failure_url, failure))

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        if isinstance(gate.client, OAuth1Service):
            async with gate.client:
                yield
        else:
            yield

    return Starlette(
        debug=debug,
        routes=all_routes,
        middleware=[
            Middleware(
                SessionMiddleware,
                secret_key=secret_key,
                session_cookie=session_cookie,
                https_only=https_only,
            ),
            Middleware(
                AuthenticationGateMiddleware,
                gate=gate,
                exempt_paths=[*exempt_paths, "/logout"],
            ),
        ],
        lifespan=lifespan,
    )
