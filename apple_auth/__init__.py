"""
apple-auth: Sign in with Apple client for Python services.

This library provides:
- Authorization URI construction with a fresh state per call
- Authorization code exchange and token refresh against Apple's token endpoint
- ES256 client assertions signed with your Apple private key

Quick start:
    from apple_auth import AppleAuthClient, AppleAuthSetting, AppleKeySetting, AppleTokenGenerator

    setting = AppleAuthSetting("TEAMID1234", "com.example.web", "https://example.com/callback", "name email")
    generator = AppleTokenGenerator(
        setting.team_id, setting.client_id, AppleKeySetting.from_file("KEYID12345", "AuthKey.p8")
    )

    async with httpx.AsyncClient(timeout=10.0) as http:
        client = AppleAuthClient(setting, generator, http)
        tokens = await client.access_token(code)
"""

from apple_auth.client import AppleAuthClient, AppleAuthError
from apple_auth.config import AppleAuthSetting, AppleKeySetting
from apple_auth.models import AppleAccessToken
from apple_auth.tokens import AppleTokenGenerator, SigningError, TokenGenerator

__version__ = "0.1.0"

__all__ = [
    # Config
    "AppleAuthSetting",
    "AppleKeySetting",
    # Tokens
    "TokenGenerator",
    "AppleTokenGenerator",
    "SigningError",
    # Client
    "AppleAuthClient",
    "AppleAuthError",
    "AppleAccessToken",
]
