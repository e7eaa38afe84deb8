"""
Client assertion generation for the Apple token endpoint.
"""

import logging
import time
from datetime import timedelta
from typing import Protocol

from jose import jwt
from jose.exceptions import JOSEError

from apple_auth.config import APPLE_BASE_URI, AppleKeySetting

logger = logging.getLogger(__name__)

ASSERTION_ALGORITHM = "ES256"


class SigningError(Exception):
    """The key material could not produce a signed assertion."""

    pass


class TokenGenerator(Protocol):
    """
    Protocol for client assertion generators.

    Implementations return a compact signed token valid for the given
    duration. AppleAuthClient calls this once per token-endpoint request.
    """

    def generate(self, validity: timedelta) -> str:
        """
        Produce a signed client assertion.

        Args:
            validity: How long the assertion stays valid

        Returns:
            Compact JWS string

        Raises:
            SigningError: If the assertion cannot be signed
        """
        ...


class AppleTokenGenerator:
    """
    ES256 client assertion signer for Sign in with Apple.

    Claims: iss=team_id, sub=client_id, aud=audience, iat, exp.
    The key ID is sent in the JWS header.

    Example:
        generator = AppleTokenGenerator(
            team_id="ABCDE12345",
            client_id="com.example.web",
            key_setting=AppleKeySetting.from_file("XYZ987", "AuthKey_XYZ987.p8"),
        )
        assertion = generator.generate(timedelta(minutes=5))
    """

    def __init__(
        self,
        team_id: str,
        client_id: str,
        key_setting: AppleKeySetting,
        audience: str = APPLE_BASE_URI,
    ) -> None:
        if not team_id:
            raise ValueError("team_id is required")
        if not client_id:
            raise ValueError("client_id is required")
        if key_setting is None:
            raise ValueError("key_setting is required")
        if not audience:
            raise ValueError("audience is required")

        self._team_id = team_id
        self._client_id = client_id
        self._key_setting = key_setting
        self._audience = audience

    def generate(self, validity: timedelta) -> str:
        """
        Sign a fresh client assertion.

        Args:
            validity: Lifetime of the assertion, must be positive

        Returns:
            Compact JWS string

        Raises:
            ValueError: If validity is not positive
            SigningError: If the private key is malformed or unusable
        """
        seconds = int(validity.total_seconds())
        if seconds <= 0:
            raise ValueError("validity must be positive")

        issued_at = int(time.time())
        claims = {
            "iss": self._team_id,
            "sub": self._client_id,
            "aud": self._audience,
            "iat": issued_at,
            "exp": issued_at + seconds,
        }

        try:
            assertion = jwt.encode(
                claims,
                self._key_setting.private_key,
                algorithm=ASSERTION_ALGORITHM,
                headers={"kid": self._key_setting.key_id},
            )
        except JOSEError as e:
            raise SigningError(f"Failed to sign client assertion: {e}") from e

        logger.debug(
            f"Issued client assertion with kid {self._key_setting.key_id}, valid for {seconds}s"
        )
        return assertion
