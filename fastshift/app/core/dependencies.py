"""
Request dependencies for FastAPI.

Exposes the storage context, the identity provider, the payment gateway and
the verified principal to route handlers.
"""

from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession
from fastshift.app.db.session import get_db
from fastshift.app.db.store import DocumentStore
from fastshift.app.core.identity import IdentityProvider, Principal, verify
from fastshift.app.services.payment_gateway import PaymentGatewayClient


async def get_store(db: AsyncSession = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_payment_gateway(request: Request) -> PaymentGatewayClient:
    return request.app.state.payment_gateway


async def get_principal(
    authorization: Optional[str] = Header(default=None),
    provider: IdentityProvider = Depends(get_identity_provider)
) -> Principal:
    """
    FastAPI dependency for bearer-token authentication.

    Returns:
        Verified principal carrying the email claim

    Raises:
        AuthenticationError: 401 if the header is missing or malformed
        ForbiddenError: 403 if the identity provider rejects the token
    """
    return await verify(authorization, provider)
