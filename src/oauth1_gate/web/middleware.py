"""Starlette middleware putting the authentication gate in front of routes."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import PlainTextResponse, Response

from oauth1_gate.exceptions import OAuthAuthenticationException

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.types import ASGIApp

    from oauth1_gate.gate import AuthenticationGateFilter

logger = logging.getLogger(__name__)


class AuthenticationGateMiddleware(BaseHTTPMiddleware):
    """Runs :class:`AuthenticationGateFilter` for every non-exempt request.

    ``exempt_paths`` are fnmatch globs. The gate's failure and login URLs are
    always exempt so redirects to them cannot loop. A provider failure during
    the callback exchange is rendered as 502 Bad Gateway.
    """

    def __init__(
        self,
        app: ASGIApp,
        gate: AuthenticationGateFilter,
        exempt_paths: Sequence[str] = (),
    ) -> None:
        super().__init__(app)
        self.gate = gate
        self.exempt_paths = list(exempt_paths)
        for url in (gate.config.failure_url, gate.config.login_url):
            if url.startswith("/") and url not in self.exempt_paths:
                self.exempt_paths.append(url)

    def is_exempt(self, path: str) -> bool:
        return any(fnmatch.fnmatchcase(path, pattern) for pattern in self.exempt_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self.is_exempt(request.url.path):
            return await call_next(request)

        try:
            result = await self.gate.decide(request)
        except OAuthAuthenticationException as e:
            logger.error("OAuth handshake failed for %s: %s", request.url.path, e.message)
            return PlainTextResponse(
                "Authentication provider unavailable",
                status_code=status.HTTP_502_BAD_GATEWAY,
            )

        if result.response is None:
            return await call_next(request)
        return result.response
