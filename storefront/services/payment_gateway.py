# storefront/services/payment_gateway.py
import requests

from storefront.domain.exceptions import ExternalServiceError
from storefront.utils.retry import http_retry
from storefront.utils.settings import PAYMENT_GATEWAY_URL, RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentGatewayClient:
    """
    Klient REST bramki platnosci (API zgodne z Razorpay).
    5xx i bledy sieci -> retry (tenacity), potem ExternalServiceError.
    4xx -> od razu ExternalServiceError z upstream_status.
    """

    def __init__(
        self,
        base_url: str | None = None,
        key_id: str | None = None,
        key_secret: str | None = None,
        timeout: int = 5,
    ):
        self.base_url = (base_url or PAYMENT_GATEWAY_URL).rstrip("/")
        self.key_id = key_id if key_id is not None else RAZORPAY_KEY_ID
        self.key_secret = key_secret if key_secret is not None else RAZORPAY_KEY_SECRET
        self.timeout = timeout

    def _check(self, resp: requests.Response) -> dict:
        if 400 <= resp.status_code < 500:
            try:
                detail = resp.json().get("error", {}).get("description")
            except ValueError:
                detail = None
            raise ExternalServiceError(
                detail or f"Payment gateway rejected the request ({resp.status_code})",
                upstream_status=resp.status_code,
            )
        resp.raise_for_status()
        return resp.json()

    @http_retry()
    def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        logger.info(f"PaymentGateway POST {url}")
        resp = requests.post(url, json=payload, auth=(self.key_id, self.key_secret), timeout=self.timeout)
        return self._check(resp)

    @http_retry()
    def _get(self, path: str) -> dict:
        url = f"{self.base_url}{path}"
        logger.info(f"PaymentGateway GET {url}")
        resp = requests.get(url, auth=(self.key_id, self.key_secret), timeout=self.timeout)
        return self._check(resp)

    def _unavailable(self, exc: requests.RequestException) -> ExternalServiceError:
        status = exc.response.status_code if exc.response is not None else None
        logger.error(f"Payment gateway unavailable: {exc}")
        return ExternalServiceError("Payment gateway is unavailable", upstream_status=status)

    def create_order(self, amount_paise: int, currency: str, receipt: str | None) -> dict:
        try:
            return self._post("/orders", {"amount": amount_paise, "currency": currency, "receipt": receipt})
        except requests.RequestException as exc:
            raise self._unavailable(exc) from exc

    def fetch_payment(self, payment_id: str) -> dict:
        try:
            return self._get(f"/payments/{payment_id}")
        except requests.RequestException as exc:
            raise self._unavailable(exc) from exc
