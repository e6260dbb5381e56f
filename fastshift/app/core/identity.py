"""
Identity verification.

Turns an ``Authorization: Bearer <token>`` header into a verified Principal.
Two providers are supported: HS256 tokens signed with the application secret
(development and tests) and Firebase ID tokens signed by Google (RS256).
"""

import re
import time
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import httpx
from jose import JWTError, jwt

from fastshift.app.core.config import DEFAULT_SECRET_KEY, Settings
from fastshift.app.core.exceptions import AuthenticationError, ForbiddenError

logger = logging.getLogger("fastshift.identity")

_MAX_AGE_RE = re.compile(r"max-age=(\d+)")


class InvalidTokenError(Exception):
    """The identity provider rejected the token or could not validate it."""


@dataclass
class Principal:
    """Verified identity derived from a request credential."""
    email: str
    uid: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)


class IdentityProvider:
    """Validates a raw token and returns its claims."""

    async def verify_id_token(self, token: str) -> Dict[str, Any]:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class SharedSecretIdentityProvider(IdentityProvider):
    """HS256 tokens signed with the application secret key."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def create_access_token(
        self,
        email: str,
        extra_claims: Optional[Dict[str, Any]] = None,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create a signed token for ``email``.

        Args:
            email: Email claim of the principal (also used as ``sub``)
            extra_claims: Additional claims to embed
            expires_delta: Optional custom expiration time

        Returns:
            Encoded JWT token string
        """
        to_encode = {"sub": email, "email": email}
        if extra_claims:
            to_encode.update(extra_claims)

        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=self.expire_minutes)

        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    async def verify_id_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc


class FirebaseIdentityProvider(IdentityProvider):
    """
    Verifies Firebase ID tokens.

    Google publishes the signing certificates keyed by ``kid`` and rotates
    them; they are re-fetched once the ``Cache-Control`` max-age elapses.
    """

    def __init__(self, project_id: str, certs_url: str, http_client: Optional[httpx.AsyncClient] = None):
        if not project_id:
            raise ValueError("FIREBASE_PROJECT_ID is required for the firebase identity provider")
        self.project_id = project_id
        self.certs_url = certs_url
        self.issuer = f"https://securetoken.google.com/{project_id}"
        self._http = http_client or httpx.AsyncClient(timeout=10.0)
        self._certs: Dict[str, str] = {}
        self._certs_expire_at = 0.0

    async def _public_certs(self) -> Dict[str, str]:
        if self._certs and time.time() < self._certs_expire_at:
            return self._certs

        try:
            response = await self._http.get(self.certs_url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise InvalidTokenError(f"Could not fetch signing certificates: {exc}") from exc

        match = _MAX_AGE_RE.search(response.headers.get("cache-control", ""))
        max_age = int(match.group(1)) if match else 0
        self._certs = response.json()
        self._certs_expire_at = time.time() + max_age
        logger.info("Loaded %d identity provider certificates (max-age=%ss)", len(self._certs), max_age)
        return self._certs

    async def verify_id_token(self, token: str) -> Dict[str, Any]:
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        if header.get("alg") != "RS256":
            raise InvalidTokenError("Unexpected signing algorithm")

        certs = await self._public_certs()
        certificate = certs.get(header.get("kid"))
        if certificate is None:
            raise InvalidTokenError("Unknown key id")

        try:
            claims = jwt.decode(
                token,
                certificate,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=self.issuer,
            )
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        if not claims.get("sub"):
            raise InvalidTokenError("Token has no subject")
        claims.setdefault("uid", claims["sub"])
        return claims

    async def aclose(self) -> None:
        await self._http.aclose()


def build_identity_provider(settings: Settings) -> IdentityProvider:
    """
    Build the configured identity provider.

    Raises:
        ValueError: shared-secret tokens are requested with the published
            default key outside debug mode, or Firebase has no project id
    """
    if settings.identity_provider == "firebase":
        return FirebaseIdentityProvider(settings.firebase_project_id, settings.firebase_certs_url)

    if settings.secret_key == DEFAULT_SECRET_KEY and not settings.debug:
        raise ValueError(
            "SECRET_KEY must be set when IDENTITY_PROVIDER=shared_secret; "
            "the default key is only accepted with DEBUG=true"
        )
    if settings.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("Shared-secret identity provider is using the default SECRET_KEY")
    return SharedSecretIdentityProvider(
        settings.secret_key,
        settings.algorithm,
        settings.access_token_expire_minutes,
    )


async def verify(authorization: Optional[str], provider: IdentityProvider) -> Principal:
    """
    Verify an Authorization header value.

    Raises:
        AuthenticationError: header missing, not a Bearer scheme, or empty token
        ForbiddenError: the provider rejected the token or it carries no email
    """
    if not authorization:
        raise AuthenticationError()

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError()

    try:
        claims = await provider.verify_id_token(token)
    except InvalidTokenError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise ForbiddenError()

    email = claims.get("email")
    if not email:
        raise ForbiddenError()

    return Principal(email=email, uid=claims.get("uid") or claims.get("sub"), claims=claims)
