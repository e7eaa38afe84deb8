"""
Sign in with Apple client: login URI construction and token endpoint calls.
"""

import logging
import secrets
from datetime import timedelta
from typing import Any
from urllib.parse import urlencode

import httpx

from apple_auth.config import AppleAuthSetting
from apple_auth.models import AppleAccessToken
from apple_auth.tokens import TokenGenerator

logger = logging.getLogger(__name__)

RESPONSE_TYPE = "code id_token"
# Apple requires form_post whenever scopes are requested with id_token
RESPONSE_MODE = "form_post"
CLIENT_ASSERTION_TYPE = "urn:ietf:params:oauth:client-assertion-type:jwt-bearer"
DEFAULT_ASSERTION_VALIDITY = timedelta(minutes=5)


class AppleAuthError(Exception):
    """
    Apple rejected a token endpoint request.

    Attributes:
        message: Raw response body (or a description for malformed responses)
        status_code: HTTP status of the response
        error: "error" field of Apple's JSON error body, if present
        error_description: "error_description" field, if present
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error: str | None = None
        self.error_description: str | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "AppleAuthError":
        """Build an error from a non-2xx response, keeping the body verbatim."""
        exc = cls(response.text, status_code=response.status_code)
        try:
            body = response.json()
        except ValueError:
            return exc
        if isinstance(body, dict):
            exc.error = body.get("error")
            exc.error_description = body.get("error_description")
        return exc


class AppleAuthClient:
    """
    Client for the Sign in with Apple authorization and token endpoints.

    Stateless across calls; safe to share between concurrent tasks. A fresh
    client assertion is generated for every token request.

    Example:
        async with httpx.AsyncClient(timeout=10.0) as http:
            client = AppleAuthClient(setting, generator, http)
            redirect_to = client.login_uri()
            ...
            tokens = await client.access_token(code)
    """

    def __init__(
        self,
        setting: AppleAuthSetting,
        token_generator: TokenGenerator,
        http_client: httpx.AsyncClient,
        assertion_validity: timedelta = DEFAULT_ASSERTION_VALIDITY,
    ) -> None:
        if setting is None:
            raise ValueError("setting is required")
        if token_generator is None:
            raise ValueError("token_generator is required")
        if http_client is None:
            raise ValueError("http_client is required")
        if assertion_validity.total_seconds() <= 0:
            raise ValueError("assertion_validity must be positive")

        self._setting = setting
        self._token_generator = token_generator
        self._http = http_client
        self._assertion_validity = assertion_validity

    @property
    def setting(self) -> AppleAuthSetting:
        return self._setting

    def login_uri(self) -> str:
        """
        Build the authorization URI to redirect the user agent to.

        A new random state is generated on every call. Callers should keep
        it (e.g. in a signed cookie) and compare it with the state Apple
        posts back to the redirect URI.

        Returns:
            Absolute authorization URI
        """
        params = {
            "response_type": RESPONSE_TYPE,
            "client_id": self._setting.client_id,
            "redirect_uri": self._setting.redirect_uri,
            "state": secrets.token_urlsafe(32),
        }
        if self._setting.scope:
            params["scope"] = self._setting.scope
        params["response_mode"] = RESPONSE_MODE

        return f"{self._setting.authorize_url}?{urlencode(params)}"

    async def access_token(
        self,
        authorization_code: str,
        *,
        timeout: float | None = None,
    ) -> AppleAccessToken:
        """
        Exchange an authorization code for tokens.

        Args:
            authorization_code: Code posted back by Apple to the redirect URI
            timeout: Request timeout in seconds, overrides the HTTP client's default

        Returns:
            AppleAccessToken

        Raises:
            ValueError: If authorization_code is empty
            AppleAuthError: If Apple returns a non-2xx response
            httpx.HTTPError: On transport failures
        """
        if not authorization_code:
            raise ValueError("authorization_code is required")

        return await self._request_token(
            {
                "grant_type": "authorization_code",
                "code": authorization_code,
                "redirect_uri": self._setting.redirect_uri,
            },
            timeout,
        )

    async def refresh_token(
        self,
        refresh_token: str,
        *,
        timeout: float | None = None,
    ) -> AppleAccessToken:
        """
        Obtain new tokens using a refresh token.

        Args:
            refresh_token: Refresh token from a previous code exchange
            timeout: Request timeout in seconds, overrides the HTTP client's default

        Returns:
            AppleAccessToken

        Raises:
            ValueError: If refresh_token is empty
            AppleAuthError: If Apple returns a non-2xx response
            httpx.HTTPError: On transport failures
        """
        if not refresh_token:
            raise ValueError("refresh_token is required")

        return await self._request_token(
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
                "redirect_uri": self._setting.redirect_uri,
            },
            timeout,
        )

    async def _request_token(
        self,
        grant: dict[str, str],
        timeout: float | None,
    ) -> AppleAccessToken:
        """POST a grant to the token endpoint and parse the response."""
        data = {
            **grant,
            "client_id": self._setting.client_id,
            "client_assertion": self._token_generator.generate(self._assertion_validity),
            "client_assertion_type": CLIENT_ASSERTION_TYPE,
        }

        request_kwargs: dict[str, Any] = {
            "data": data,
            "headers": {"Accept": "application/json"},
        }
        if timeout is not None:
            request_kwargs["timeout"] = timeout

        url = self._setting.token_url
        logger.debug(f"Requesting {grant['grant_type']} grant from {url}")
        response = await self._http.post(url, **request_kwargs)
        logger.debug(f"Token endpoint responded with HTTP {response.status_code}")

        if not response.is_success:
            raise AppleAuthError.from_response(response)

        try:
            return AppleAccessToken.from_payload(response.json())
        except (ValueError, TypeError) as e:
            raise AppleAuthError(
                f"Invalid token response: {e}", status_code=response.status_code
            ) from e
