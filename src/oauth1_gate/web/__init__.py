"""Starlette integration for the OAuth1 gate."""

from oauth1_gate.web.app import build_gate, create_app
from oauth1_gate.web.middleware import AuthenticationGateMiddleware
from oauth1_gate.web.redirects import SessionRedirects
from oauth1_gate.web.sessions import CookieSessionStore, SessionRequestTokenStore, SessionState

__all__ = [
    "AuthenticationGateMiddleware",
    "CookieSessionStore",
    "SessionRedirects",
    "SessionRequestTokenStore",
    "SessionState",
    "build_gate",
    "create_app",
]
