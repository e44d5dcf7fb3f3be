# storefront/services/email_client.py
import resend

from storefront.utils.settings import RESEND_API_KEY, EMAIL_FROM
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class EmailClient:
    def __init__(self, api_key: str | None = None, sender: str | None = None):
        self.api_key = api_key if api_key is not None else RESEND_API_KEY
        self.sender = sender or EMAIL_FROM

    def send(self, to: str, subject: str, html: str) -> dict:
        if not self.api_key:
            logger.info(f"[EMAIL skipped, no api key] to={to} subject={subject!r}")
            return {"status": "skipped"}

        resend.api_key = self.api_key
        result = resend.Emails.send({
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        })
        logger.info(f"Email sent to {to}: {subject!r}")
        return dict(result)
