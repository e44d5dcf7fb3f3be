# storefront/services/sms_client.py
import requests

from storefront.domain.exceptions import ExternalServiceError
from storefront.utils.retry import http_retry
from storefront.utils.settings import SMS_GATEWAY_URL, SMS_ACCOUNT_SID, SMS_AUTH_TOKEN, SMS_FROM_NUMBER
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SmsClient:
    """Twilio Messages API. Bez skonfigurowanego konta tylko loguje."""

    def __init__(self, base_url: str | None = None, timeout: int = 5):
        self.base_url = (base_url or SMS_GATEWAY_URL).rstrip("/")
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(SMS_ACCOUNT_SID and SMS_AUTH_TOKEN and SMS_FROM_NUMBER)

    @http_retry()
    def _post_message(self, to: str, body: str) -> dict:
        url = f"{self.base_url}/Accounts/{SMS_ACCOUNT_SID}/Messages.json"
        logger.info(f"SmsClient POST {url} to={to}")
        resp = requests.post(
            url,
            data={"From": SMS_FROM_NUMBER, "To": to, "Body": body},
            auth=(SMS_ACCOUNT_SID, SMS_AUTH_TOKEN),
            timeout=self.timeout,
        )
        if 400 <= resp.status_code < 500:
            raise ExternalServiceError(
                f"SMS gateway rejected the message ({resp.status_code})",
                upstream_status=resp.status_code,
            )
        resp.raise_for_status()
        return resp.json()

    def send(self, to: str, body: str) -> dict:
        if not self.configured:
            logger.info(f"[SMS skipped, no gateway configured] to={to}")
            return {"status": "skipped"}

        try:
            return self._post_message(to, body)
        except requests.RequestException as exc:
            logger.error(f"SMS gateway unavailable: {exc}")
            status = exc.response.status_code if exc.response is not None else None
            raise ExternalServiceError("SMS gateway is unavailable", upstream_status=status) from exc
