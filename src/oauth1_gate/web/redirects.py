"""Redirect responses for the gate, remembering the originally requested URL."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette import status
from starlette.responses import RedirectResponse

if TYPE_CHECKING:
    from starlette.requests import Request

logger = logging.getLogger(__name__)

SAVED_REQUEST_KEY = "oauth1_gate.saved_request"


def _local_target(request: Request) -> str:
    # "//host" and "/\host" are read by browsers as another host
    target = "/" + request.url.path.lstrip("/\\")
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return target


class SessionRedirects:
    """Redirect coordinator storing the pre-login URL in ``request.session``.

    Only the path and query are saved, so replaying them can never send the
    user to another host.
    """

    def __init__(
        self,
        success_url: str = "/",
        *,
        status_code: int = status.HTTP_303_SEE_OTHER,
    ) -> None:
        self.success_url = success_url
        self.status_code = status_code

    def issue_redirect(self, request: Request, url: str) -> RedirectResponse:
        logger.debug("Redirecting %s to %s", request.url.path, url)
        return RedirectResponse(url, status_code=self.status_code)

    def issue_success_redirect(self, request: Request) -> RedirectResponse:
        saved = request.session.pop(SAVED_REQUEST_KEY, None) if "session" in request.scope else None
        return self.issue_redirect(request, saved or self.success_url)

    def save_request_and_redirect_to_login(
        self,
        request: Request,
        login_url: str,
    ) -> RedirectResponse:
        if "session" in request.scope:
            request.session[SAVED_REQUEST_KEY] = _local_target(request)
        else:
            logger.warning("No session on request; %s will not be replayed after login", request.url.path)
        return self.issue_redirect(request, login_url)
