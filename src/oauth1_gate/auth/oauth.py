"""OAuth 1.0a provider client used by the gate."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
import time
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, quote, urlencode, urlsplit, urlunsplit

import httpx

from oauth1_gate.exceptions import (
    InterruptedWait,
    ProviderProtocolError,
    ProviderUnreachable,
    SequenceError,
)
from oauth1_gate.models.auth import AccessToken, RequestToken

if TYPE_CHECKING:
    from types import TracebackType

    from oauth1_gate.config import ProviderConfig

logger = logging.getLogger(__name__)

SUPPORTED_SIGNATURE_METHODS = ("HMAC-SHA1", "PLAINTEXT")


def _percent_encode(value: str) -> str:
    """RFC 5849 percent encoding (unreserved characters only)."""
    return quote(value, safe="~")


def _normalize_url(url: str) -> str:
    """Base string URI: lowercase scheme/host, default port dropped, no query."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    netloc = parts.netloc.lower()
    if (scheme, parts.port) in {("http", 80), ("https", 443)}:
        netloc = netloc.rsplit(":", 1)[0]
    return urlunsplit((scheme, netloc, parts.path or "/", "", ""))


class OAuth1Service:
    """OAuth 1.0a client for the provider's token endpoints.

    Implements the two network legs of the three-legged flow:
    1. Get request token
    2. User authorization (browser redirect to ``get_authorization_url``)
    3. Exchange request token + verifier for access token

    The service keeps no token state between calls, so one instance can be
    shared by every in-flight request.

    Usage (context manager - shares one connection pool):
        async with OAuth1Service(config) as service:
            request_token = await service.get_request_token()

    Usage (no pooling - creates connection per request):
        service = OAuth1Service(config)
        request_token = await service.get_request_token()
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if config.signature_method not in SUPPORTED_SIGNATURE_METHODS:
            msg = f"Unsupported signature method: {config.signature_method}"
            raise ValueError(msg)

        self.config = config
        self._http_client = http_client
        self._owns_http_client = http_client is None

    async def open(self) -> None:
        """Open a shared connection pool for provider requests."""
        if self._http_client is None and self._owns_http_client:
            self._http_client = httpx.AsyncClient(timeout=self.config.timeout)

    async def close(self) -> None:
        """Close the connection pool if this service owns it."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> OAuth1Service:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def get_request_token(self) -> RequestToken:
        """Step 1: Get a request token to start the OAuth flow."""
        url = self.config.request_token_url

        oauth_params = self._build_oauth_params()
        oauth_params["oauth_callback"] = self.config.callback_url
        oauth_params["oauth_signature"] = self._generate_signature(
            method="POST",
            url=url,
            oauth_params=oauth_params,
            token_secret="",
        )

        data = await self._post_for_token(url, oauth_params, stage="request_token")

        return RequestToken(
            token=data["oauth_token"],
            token_secret=data["oauth_token_secret"],
            callback_confirmed=data.get("oauth_callback_confirmed", "true").lower() == "true",
        )

    async def get_access_token(
        self,
        request_token: RequestToken | None,
        verifier: str,
    ) -> AccessToken:
        """Step 3: Exchange the authorized request token and verifier for an access token.

        Args:
            request_token: Token obtained from get_request_token
            verifier: The oauth_verifier the provider sent back with the user

        Returns:
            AccessToken for API access
        """
        if request_token is None or not request_token.token or not request_token.token_secret:
            raise SequenceError("No request token available. Call get_request_token first.")

        url = self.config.access_token_url

        oauth_params = self._build_oauth_params()
        oauth_params["oauth_token"] = request_token.token
        oauth_params["oauth_verifier"] = verifier
        oauth_params["oauth_signature"] = self._generate_signature(
            method="POST",
            url=url,
            oauth_params=oauth_params,
            token_secret=request_token.token_secret,
        )

        data = await self._post_for_token(url, oauth_params, stage="access_token")

        token = data.pop("oauth_token")
        token_secret = data.pop("oauth_token_secret")
        return AccessToken(token=token, token_secret=token_secret, extra=data)

    def get_authorization_url(self, request_token: RequestToken) -> str:
        """Step 2: URL of the provider page where the user authorizes the request token."""
        separator = "&" if urlsplit(self.config.authorize_url).query else "?"
        query = urlencode({"oauth_token": request_token.token})
        return f"{self.config.authorize_url}{separator}{query}"

    async def _post_for_token(
        self,
        url: str,
        oauth_params: dict[str, str],
        *,
        stage: str,
    ) -> dict[str, str]:
        """POST a signed token request and parse the form-encoded answer."""
        headers = {"Authorization": self._build_auth_header(oauth_params)}

        logger.debug("Token request (%s): POST %s", stage, url)

        try:
            if self._http_client is not None:
                response = await self._http_client.post(url, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.post(url, headers=headers)
            body = response.text
        except httpx.TimeoutException as e:
            raise InterruptedWait(
                f"Timed out waiting for provider: {e}",
                stage=stage,
            ) from e
        except httpx.TransportError as e:
            raise ProviderUnreachable(
                f"Provider unreachable: {e}",
                stage=stage,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderProtocolError(
                f"Unreadable token response: {e}",
                stage=stage,
            ) from e

        if response.status_code != 200:
            raise ProviderProtocolError(
                f"Token request failed: {response.status_code} {body[:200]}",
                stage=stage,
                status_code=response.status_code,
            )

        data = {key: values[0] for key, values in parse_qs(body).items()}
        if not data.get("oauth_token") or not data.get("oauth_token_secret"):
            raise ProviderProtocolError(
                "Invalid token response",
                stage=stage,
                status_code=response.status_code,
            )
        return data

    def _build_oauth_params(self) -> dict[str, str]:
        """Build base OAuth parameters."""
        return {
            "oauth_consumer_key": self.config.consumer_key,
            "oauth_nonce": secrets.token_hex(16),
            "oauth_signature_method": self.config.signature_method,
            "oauth_timestamp": str(int(time.time())),
            "oauth_version": "1.0",
        }

    def _generate_signature(
        self,
        method: str,
        url: str,
        oauth_params: dict[str, str],
        token_secret: str,
    ) -> str:
        """Generate the OAuth 1.0a signature for the configured method."""
        signing_key = (
            f"{_percent_encode(self.config.consumer_secret)}&{_percent_encode(token_secret)}"
        )
        if self.config.signature_method == "PLAINTEXT":
            return signing_key

        # Query parameters of the endpoint take part in the signature too
        query = parse_qs(urlsplit(url).query, keep_blank_values=True)
        all_params = [(k, v) for k, values in query.items() for v in values]
        all_params.extend(oauth_params.items())

        encoded = sorted((_percent_encode(k), _percent_encode(v)) for k, v in all_params)
        param_string = "&".join(f"{k}={v}" for k, v in encoded)

        base_string = "&".join(
            [
                method.upper(),
                _percent_encode(_normalize_url(url)),
                _percent_encode(param_string),
            ]
        )

        signature = hmac.new(
            signing_key.encode(),
            base_string.encode(),
            hashlib.sha1,
        ).digest()

        return base64.b64encode(signature).decode()

    def _build_auth_header(self, oauth_params: dict[str, str]) -> str:
        """Build OAuth Authorization header."""
        auth_parts = [
            f'{_percent_encode(k)}="{_percent_encode(v)}"' for k, v in sorted(oauth_params.items())
        ]
        return "OAuth " + ", ".join(auth_parts)
