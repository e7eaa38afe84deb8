"""
Sign in with Apple configuration.
"""

from dataclasses import dataclass, field
from pathlib import Path

APPLE_BASE_URI = "https://appleid.apple.com"


@dataclass(frozen=True)
class AppleAuthSetting:
    """
    Relying-party configuration for Sign in with Apple.

    Attributes:
        team_id: Apple developer team ID, used as the client assertion issuer
        client_id: Services ID (or bundle ID) registered with Apple
        redirect_uri: Where Apple posts the authorization response
        scope: Space-separated scopes to request (e.g. "name email"), optional
        provider_base_uri: Apple ID base URI (default: https://appleid.apple.com)

    Example:
        setting = AppleAuthSetting(
            team_id="ABCDE12345",
            client_id="com.example.web",
            redirect_uri="https://example.com/auth/apple/callback",
            scope="name email",
        )
    """

    team_id: str
    client_id: str
    redirect_uri: str
    scope: str | None = None
    provider_base_uri: str = APPLE_BASE_URI

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.team_id:
            raise ValueError("team_id is required")
        if not self.client_id:
            raise ValueError("client_id is required")
        if not self.redirect_uri:
            raise ValueError("redirect_uri is required")
        if not self.provider_base_uri:
            raise ValueError("provider_base_uri is required")

    @property
    def authorize_url(self) -> str:
        """Authorization endpoint the user agent is redirected to."""
        return f"{self.provider_base_uri.rstrip('/')}/auth/authorize"

    @property
    def token_url(self) -> str:
        """Token endpoint for code exchange and refresh."""
        return f"{self.provider_base_uri.rstrip('/')}/auth/token"


@dataclass(frozen=True)
class AppleKeySetting:
    """
    Signing key used to build client assertions.

    Attributes:
        key_id: Key ID shown in the Apple developer console
        private_key: PEM-encoded EC private key (contents of the .p8 file)
    """

    key_id: str
    private_key: str | bytes = field(repr=False)

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.key_id:
            raise ValueError("key_id is required")
        if not self.private_key:
            raise ValueError("private_key is required")

    @classmethod
    def from_file(cls, key_id: str, path: str | Path) -> "AppleKeySetting":
        """
        Load the private key from a .p8 file downloaded from Apple.

        Args:
            key_id: Key ID for the downloaded key
            path: Path to the .p8 file

        Returns:
            AppleKeySetting instance
        """
        return cls(key_id=key_id, private_key=Path(path).read_text())
