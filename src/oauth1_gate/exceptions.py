"""Typed exceptions for the OAuth1 authentication gate."""


class GateError(Exception):
    """Base exception for all gate errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ProviderError(GateError):
    """Failure talking to the OAuth provider during one of the round trips."""

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        self.stage = stage  # e.g., "request_token", "access_token"
        super().__init__(message)


class ProviderUnreachable(ProviderError):
    """Network or IO failure reaching the provider."""


class ProviderProtocolError(ProviderError):
    """Provider answered, but not with a usable token response."""

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, stage=stage)


class InterruptedWait(ProviderError):
    """The wait for the provider was cut short before it answered."""


class SequenceError(GateError):
    """Access token exchange attempted without a request token."""


class AuthenticationException(GateError):
    """Credential rejected by the session layer."""


class OAuthAuthenticationException(AuthenticationException):
    """Provider failure while completing the handshake on callback.

    Carries the original provider error as ``cause`` (and ``__cause__`` when
    raised with ``from``).
    """

    def __init__(self, cause: BaseException, message: str | None = None) -> None:
        self.cause = cause
        super().__init__(message or f"OAuth handshake failed: {cause}")
