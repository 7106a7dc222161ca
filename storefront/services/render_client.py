# storefront/services/render_client.py
import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import PDF_SERVICE_URL, COLLABORATOR_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class RenderClient:
    """Klient zewnetrznego serwisu PDF: payload faktury -> bajty PDF."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or PDF_SERVICE_URL).rstrip("/")
        self.timeout = timeout or COLLABORATOR_TIMEOUT_SECONDS

    # renderowanie nie ma efektow ubocznych, mozna ponawiac
    @http_retry()
    def render_invoice(self, payload: dict) -> bytes:
        url = f"{self.base_url}/generate-pdf"
        logger.info(f"RenderClient POST {url} invoice={payload.get('invoice_number')}")

        resp = requests.post(url, json=payload, timeout=self.timeout)
        resp.raise_for_status()
        return resp.content
