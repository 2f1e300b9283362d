"""Shared fixtures and collaborator fakes for gate tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from starlette.requests import Request
from starlette.responses import RedirectResponse

from oauth1_gate import (
    AccessToken,
    AuthenticationGateFilter,
    GateConfig,
    OAuthCredential,
    ProviderConfig,
    RequestToken,
)

PROVIDER_AUTHORIZE = "https://provider.example/oauth/authorize"


def make_request(
    query: str = "",
    *,
    path: str = "/protected",
    session: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    client: tuple[str, int] | None = ("10.0.0.1", 50000),
) -> Request:
    """Build a Starlette request with a session scope, as SessionMiddleware would."""
    scope = {
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
        "path": path,
        "query_string": query.encode(),
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
        "session": {} if session is None else session,
    }
    return Request(scope)


@dataclass
class FakeSession:
    authenticated: bool = False
    remembered: bool = False


class FakeSessionStore:
    """Session layer fake recording login calls."""

    def __init__(
        self,
        session: FakeSession | None = None,
        *,
        login_error: Exception | None = None,
        session_after_failure: FakeSession | None = None,
    ) -> None:
        self.session = session
        self.login_error = login_error
        self.session_after_failure = session_after_failure
        self.logins: list[OAuthCredential] = []

    def current_session(self, request: Request) -> FakeSession | None:
        return self.session

    async def login(self, request: Request, credential: OAuthCredential) -> None:
        self.logins.append(credential)
        if self.login_error is not None:
            if self.session_after_failure is not None:
                self.session = self.session_after_failure
            raise self.login_error
        self.session = FakeSession(authenticated=True)


class FakeOAuth1Client:
    """Provider client fake recording the order of calls."""

    def __init__(
        self,
        *,
        request_tokens: list[RequestToken] | None = None,
        access_token: AccessToken | None = None,
        request_error: Exception | None = None,
        access_error: Exception | None = None,
    ) -> None:
        self.request_tokens = request_tokens or [RequestToken(token="RT1", token_secret="rts1")]
        self.access_token = access_token or AccessToken(token="AT1", token_secret="ats1")
        self.request_error = request_error
        self.access_error = access_error
        self.calls: list[tuple[str, ...]] = []

    async def get_request_token(self) -> RequestToken:
        self.calls.append(("get_request_token",))
        if self.request_error is not None:
            raise self.request_error
        count = len(self.calls_named("get_request_token"))
        return self.request_tokens[min(count, len(self.request_tokens)) - 1]

    async def get_access_token(self, request_token: RequestToken | None, verifier: str) -> AccessToken:
        self.calls.append(("get_access_token", request_token.token if request_token else "", verifier))
        if self.access_error is not None:
            raise self.access_error
        return self.access_token

    def get_authorization_url(self, request_token: RequestToken) -> str:
        self.calls.append(("get_authorization_url", request_token.token))
        return f"{PROVIDER_AUTHORIZE}?oauth_token={request_token.token}"

    def calls_named(self, name: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == name]


@dataclass
class FakeRedirects:
    """Redirect coordinator fake recording every redirect issued."""

    saved_url: str = "/original?page=2"
    issued: list[tuple[str, str]] = field(default_factory=list)
    saved: list[str] = field(default_factory=list)

    def issue_redirect(self, request: Request, url: str) -> RedirectResponse:
        self.issued.append(("redirect", url))
        return RedirectResponse(url, status_code=303)

    def issue_success_redirect(self, request: Request) -> RedirectResponse:
        self.issued.append(("success", self.saved_url))
        return RedirectResponse(self.saved_url, status_code=303)

    def save_request_and_redirect_to_login(self, request: Request, login_url: str) -> RedirectResponse:
        self.saved.append(request.url.path)
        self.issued.append(("login", login_url))
        return RedirectResponse(login_url, status_code=303)


@pytest.fixture
def gate_config() -> GateConfig:
    """Gate configuration with distinct, recognisable URLs."""
    return GateConfig(
        failure_url="/login/failure",
        authorization_parameter_name="code",
        login_url="/login",
        success_url="/home",
    )


@pytest.fixture
def provider_config() -> ProviderConfig:
    """Create a test provider configuration."""
    return ProviderConfig(
        consumer_key="test_key",
        consumer_secret="test_secret",
        request_token_url="https://provider.example/oauth/request_token",
        access_token_url="https://provider.example/oauth/access_token",
        authorize_url=PROVIDER_AUTHORIZE,
        callback_url="https://app.example/callback",
    )


@pytest.fixture
def client() -> FakeOAuth1Client:
    return FakeOAuth1Client()


@pytest.fixture
def sessions() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def redirects() -> FakeRedirects:
    return FakeRedirects()


@pytest.fixture
def gate(
    gate_config: GateConfig,
    client: FakeOAuth1Client,
    sessions: FakeSessionStore,
    redirects: FakeRedirects,
) -> AuthenticationGateFilter:
    return AuthenticationGateFilter(gate_config, client, sessions, redirects)
