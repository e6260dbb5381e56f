"""
Payment gateway client.

Creates card charge intents through the Stripe REST API. The returned client
secret is handed to the web client, which completes the charge out-of-band.
"""

import logging
from typing import Optional

import httpx

from fastshift.app.core.config import Settings
from fastshift.app.core.exceptions import PaymentGatewayError

logger = logging.getLogger("fastshift.payments.gateway")


class PaymentGatewayClient:
    """Creates a charge intent and returns its client secret."""

    async def create_charge_intent(self, amount_in_cents: int) -> str:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class StripePaymentGateway(PaymentGatewayClient):

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.stripe.com/v1",
        currency: str = "usd",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.currency = currency
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def create_charge_intent(self, amount_in_cents: int) -> str:
        if not self.api_key:
            raise PaymentGatewayError("Payment gateway is not configured")

        try:
            response = await self._http.post(
                f"{self.base_url}/payment_intents",
                data={
                    "amount": str(amount_in_cents),
                    "currency": self.currency,
                    "payment_method_types[]": "card",
                },
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.HTTPError as exc:
            logger.error("Payment gateway request failed: %s", exc)
            raise PaymentGatewayError(f"Payment gateway unreachable: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code >= 400:
            message = (payload.get("error") or {}).get("message") or (
                f"Payment gateway returned {response.status_code}"
            )
            logger.warning("Charge intent rejected: %s", message)
            raise PaymentGatewayError(message)

        client_secret = payload.get("client_secret")
        if not client_secret:
            raise PaymentGatewayError("Payment gateway response has no client secret")
        logger.info("Created charge intent %s for %s %s", payload.get("id"), amount_in_cents, self.currency)
        return client_secret

    async def aclose(self) -> None:
        await self._http.aclose()


def build_payment_gateway(settings: Settings) -> PaymentGatewayClient:
    return StripePaymentGateway(
        api_key=settings.payment_gateway_key,
        base_url=settings.payment_gateway_url,
        currency=settings.payment_currency,
        timeout=settings.payment_gateway_timeout,
    )
