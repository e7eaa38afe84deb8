"""
Token endpoint response model.
"""

from dataclasses import dataclass
from typing import Any

# Normalized key (lowercase, no underscores) -> field name
_FIELDS = {
    "accesstoken": "access_token",
    "tokentype": "token_type",
    "expiresin": "expires_in",
    "refreshtoken": "refresh_token",
    "idtoken": "id_token",
}


def _normalize(key: str) -> str:
    return key.replace("_", "").lower()


@dataclass(frozen=True)
class AppleAccessToken:
    """
    Tokens returned by the Apple token endpoint.

    Attributes:
        access_token: Access token (currently unused by Apple APIs, kept for completeness)
        token_type: Token type, normally "bearer"
        expires_in: Access token lifetime in seconds
        refresh_token: Refresh token, only returned for authorization code grants
        id_token: Identity token (JWT) describing the user
    """

    access_token: str
    token_type: str
    expires_in: int
    refresh_token: str | None = None
    id_token: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AppleAccessToken":
        """
        Create an AppleAccessToken from a decoded JSON response.

        Keys match case-insensitively and ignore underscores, so both
        "access_token" and "accessToken" are accepted. Unknown keys are ignored.

        Args:
            payload: Decoded response body

        Returns:
            AppleAccessToken instance

        Raises:
            ValueError: If required fields are missing
        """
        if not isinstance(payload, dict):
            raise ValueError("Token response must be a JSON object")

        values: dict[str, Any] = {}
        for key, value in payload.items():
            name = _FIELDS.get(_normalize(str(key)))
            if name is not None:
                values[name] = value

        for required in ("access_token", "token_type", "expires_in"):
            if values.get(required) is None:
                raise ValueError(f"Token response missing required '{required}' field")

        return cls(
            access_token=str(values["access_token"]),
            token_type=str(values["token_type"]),
            expires_in=int(values["expires_in"]),
            refresh_token=values.get("refresh_token"),
            id_token=values.get("id_token"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camel-case JSON form."""
        return {
            "accessToken": self.access_token,
            "tokenType": self.token_type,
            "expiresIn": self.expires_in,
            "refreshToken": self.refresh_token,
            "idToken": self.id_token,
        }
