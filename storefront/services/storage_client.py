# storefront/services/storage_client.py
import requests

from storefront.utils.settings import STORAGE_SERVICE_URL, STORAGE_API_KEY, COLLABORATOR_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StorageClient:
    """
    Klient magazynu plikow: bajty + nazwa pliku -> publiczny URL.
    Upload jest zapisem, wiec bez automatycznych ponowien.
    """

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or STORAGE_SERVICE_URL).rstrip("/")
        self.api_key = STORAGE_API_KEY if api_key is None else api_key
        self.timeout = timeout or COLLABORATOR_TIMEOUT_SECONDS

    def upload(self, content: bytes, filename: str, content_type: str = "application/pdf") -> str:
        url = f"{self.base_url}/files"
        logger.info(f"StorageClient POST {url} file={filename} size={len(content)}")

        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        resp = requests.post(
            url,
            files={"file": (filename, content, content_type)},
            headers=headers,
            timeout=self.timeout,
        )
        resp.raise_for_status()

        public_url = resp.json().get("url")
        if not public_url:
            raise ValueError(f"storage response for {filename} has no url")
        return public_url
