# storefront/services/payment_verifier.py
import hashlib
import hmac

import requests
from requests import RequestException

from storefront.domain.errors import InvalidArgumentError, UpstreamError
from storefront.utils import settings
from storefront.utils.logging import get_logger
from storefront.utils.retry import http_retry

logger = get_logger(__name__)


class PaymentVerifier:
    """
    Sprawdza po stronie serwera, ze platnosc zgloszona przez klienta naprawde przeszla.

    - razorpay: HMAC-SHA256("{order_id}|{payment_id}") kluczem sekretnym
    - paypal: pobranie zamowienia z REST API, status musi byc COMPLETED
    Bez skonfigurowanych kluczy dany provider nie jest weryfikowany.
    """

    def __init__(
        self,
        razorpay_secret: str | None = None,
        paypal_client_id: str | None = None,
        paypal_client_secret: str | None = None,
        paypal_api_url: str | None = None,
        timeout: int | None = None,
    ):
        self.razorpay_secret = razorpay_secret if razorpay_secret is not None else settings.RAZORPAY_KEY_SECRET
        self.paypal_client_id = paypal_client_id if paypal_client_id is not None else settings.PAYPAL_CLIENT_ID
        self.paypal_client_secret = (
            paypal_client_secret if paypal_client_secret is not None else settings.PAYPAL_CLIENT_SECRET
        )
        self.paypal_api_url = (paypal_api_url or settings.PAYPAL_API_URL).rstrip("/")
        self.timeout = timeout or settings.PAYMENT_HTTP_TIMEOUT

    def verify(
        self,
        payment_method: str,
        payment_id: str,
        order_id: str | None = None,
        signature: str | None = None,
    ) -> None:
        method = payment_method.lower()
        if method == "razorpay":
            self.verify_razorpay(payment_id, order_id, signature)
        elif method == "paypal":
            self.verify_paypal(payment_id)

    def verify_razorpay(self, payment_id: str, order_id: str | None, signature: str | None) -> None:
        if not self.razorpay_secret:
            logger.debug(f"Razorpay secret not configured, accepting payment {payment_id}")
            return
        if not order_id or not signature:
            raise InvalidArgumentError("Missing Razorpay order id or signature")

        expected = hmac.new(
            self.razorpay_secret.encode(),
            f"{order_id}|{payment_id}".encode(),
            hashlib.sha256,
        ).hexdigest()

        if not hmac.compare_digest(expected, signature):
            logger.warning(f"Razorpay signature mismatch for payment {payment_id}")
            raise InvalidArgumentError("Invalid payment signature")

    def verify_paypal(self, order_id: str) -> None:
        if not (self.paypal_client_id and self.paypal_client_secret):
            logger.debug(f"PayPal credentials not configured, accepting order {order_id}")
            return

        try:
            order = self.fetch_paypal_order(order_id)
        except RequestException as e:
            logger.error(f"PayPal order lookup failed for {order_id}: {e}")
            raise UpstreamError("Could not verify PayPal payment")

        if order.get("status") != "COMPLETED":
            raise InvalidArgumentError(f"PayPal order {order_id} is not completed")

    @http_retry()
    def _paypal_token(self) -> str:
        url = f"{self.paypal_api_url}/v1/oauth2/token"
        logger.info(f"PaymentVerifier POST {url}")

        resp = requests.post(
            url,
            auth=(self.paypal_client_id, self.paypal_client_secret),
            data={"grant_type": "client_credentials"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()["access_token"]

    @http_retry()
    def fetch_paypal_order(self, order_id: str) -> dict:
        token = self._paypal_token()
        url = f"{self.paypal_api_url}/v2/checkout/orders/{order_id}"
        logger.info(f"PaymentVerifier GET {url}")

        resp = requests.get(
            url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )
        if resp.status_code in (404, 422):
            logger.warning(f"PayPal order {order_id} rejected with {resp.status_code}")
            raise InvalidArgumentError(f"Unknown PayPal order {order_id}")
        resp.raise_for_status()
        return resp.json()
