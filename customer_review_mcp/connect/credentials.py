"""
App Store Connect API token issuance.

Every outbound request carries its own freshly signed JWT. Nothing is
cached: the .p8 key file is re-read on each issuance so a rotated or
removed key is noticed on the very next call, and a token can never be
presented outside its validity window.

Token layout (see Apple's "Generating Tokens for API Requests"):

    header  {"alg": "ES256", "kid": <key id>, "typ": "JWT"}
    claims  {"iss": <issuer id>, "aud": "appstoreconnect-v1",
             "iat": <now>, "exp": <now + 20 min>}
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import aiofiles
from jose import jwt
from jose.exceptions import JOSEError

from customer_review_mcp.config.logging import get_logger
from customer_review_mcp.config.settings import ConnectSettings
from customer_review_mcp.errors import CredentialError

logger = get_logger(__name__)

TOKEN_ALGORITHM = "ES256"
TOKEN_AUDIENCE = "appstoreconnect-v1"
# App Store Connect rejects tokens that live longer than 20 minutes
TOKEN_LIFETIME = timedelta(minutes=20)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenIssuer:
    """
    Mints short-lived ES256 bearer tokens from the configured API key.

    Stateless apart from the immutable settings it was built with, so a
    single instance is safe to share between concurrent tool calls.

    Args:
        settings: App Store Connect credentials (key id, issuer id, key path)
        now: Clock returning an aware UTC datetime; injectable for tests
    """

    def __init__(
        self,
        settings: ConnectSettings,
        now: Callable[[], datetime] = _utcnow,
    ):
        self._settings = settings
        self._now = now

    async def _read_private_key(self) -> str:
        path = self._settings.p8_path
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                key = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read private key file {path}: {e}")
            raise CredentialError(f"Could not read private key file '{path}': {e}") from e

        if not key.strip():
            raise CredentialError(f"Private key file is empty: {path}")
        return key

    async def issue_token(self) -> str:
        """
        Read the private key and sign a new token.

        Returns:
            The compact-serialized JWT

        Raises:
            CredentialError: If the key file is missing, unreadable, empty,
                             or does not hold a usable P-256 private key
        """
        private_key = await self._read_private_key()

        issued_at = self._now()
        claims = {
            "iss": self._settings.issuer_id,
            "aud": TOKEN_AUDIENCE,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + TOKEN_LIFETIME).timestamp()),
        }

        try:
            token = jwt.encode(
                claims,
                private_key,
                algorithm=TOKEN_ALGORITHM,
                headers={"kid": self._settings.key_id},
            )
        except JOSEError as e:
            raise CredentialError(
                f"Could not sign token with key '{self._settings.p8_path}': {e}",
                code="KEY_INVALID",
            ) from e

        logger.debug(f"Issued token for key {self._settings.key_id}, expires {claims['exp']}")
        return token
