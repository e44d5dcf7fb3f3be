# storefront/services/image_host.py
import requests

from storefront.domain.exceptions import ExternalServiceError
from storefront.utils.retry import http_retry
from storefront.utils.settings import IMAGE_HOST_URL, IMAGE_HOST_API_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ImageHostClient:
    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: int = 15):
        self.base_url = (base_url if base_url is not None else IMAGE_HOST_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else IMAGE_HOST_API_KEY
        self.timeout = timeout

    @http_retry()
    def _post_file(self, filename: str, content: bytes, content_type: str) -> dict:
        resp = requests.post(
            f"{self.base_url}/upload",
            files={"file": (filename, content, content_type)},
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )
        if 400 <= resp.status_code < 500:
            # zly klucz albo plik, ponawianie nic nie da
            raise ExternalServiceError(
                f"Image host rejected the upload ({resp.status_code})",
                upstream_status=resp.status_code,
            )
        resp.raise_for_status()
        return resp.json()

    def upload(self, filename: str, content: bytes, content_type: str | None = None) -> dict:
        """Zwraca {"url": ..., "public_id": ...}."""
        if not self.base_url:
            raise ExternalServiceError("Image host is not configured")

        logger.info(f"ImageHost upload {filename} ({len(content)} bytes)")
        try:
            data = self._post_file(filename, content, content_type or "application/octet-stream")
        except requests.RequestException as exc:
            logger.error(f"Image host unavailable: {exc}")
            status = exc.response.status_code if exc.response is not None else None
            raise ExternalServiceError("Image host is unavailable", upstream_status=status) from exc

        url = data.get("secure_url") or data.get("url")
        if not url:
            raise ExternalServiceError("Image host returned no url")
        return {"url": url, "public_id": data.get("public_id")}
