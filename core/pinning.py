import httpx
import logging
from typing import Optional

from config.settings import Settings
from core.errors import PinningError

logger = logging.getLogger(__name__)

class PinningClient:
    """Thin client for Pinata's pinFileToIPFS endpoint"""

    def __init__(
        self,
        api_key: str,
        secret_api_key: str,
        api_url: str = "https://api.pinata.cloud",
        gateway_url: str = "https://gateway.pinata.cloud/ipfs",
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.secret_api_key = secret_api_key
        self.api_url = api_url.rstrip("/")
        self.gateway_base = gateway_url.rstrip("/")
        self._client = client or httpx.Client()

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.Client] = None) -> Optional["PinningClient"]:
        """Return a client if Pinata credentials are configured, else None"""
        if not settings.PINATA_CONFIGURED:
            logger.warning("Pinata credentials not set; image pinning is not configured")
            return None
        return cls(
            settings.PINATA_API_KEY,
            settings.PINATA_SECRET_API_KEY,
            api_url=settings.PINATA_API_URL,
            gateway_url=settings.PINATA_GATEWAY_URL,
            client=client,
        )

    def upload(self, data: bytes, filename: str, content_type: str = "application/octet-stream") -> str:
        """Pin raw bytes and return the IPFS content hash"""
        url = f"{self.api_url}/pinning/pinFileToIPFS"
        headers = {
            "pinata_api_key": self.api_key,
            "pinata_secret_api_key": self.secret_api_key,
        }
        try:
            r = self._client.post(url, headers=headers, files={"file": (filename, data, content_type)})
        except httpx.HTTPError as e:
            logger.error("Pinata upload request failed: %s", e)
            raise PinningError(f"Failed to upload image to IPFS: {e}") from e

        if not r.is_success:
            logger.error("Pinata upload failed: %s %s", r.status_code, r.text[:500])
            raise PinningError(f"Failed to upload image to IPFS: status {r.status_code}")

        try:
            body = r.json()
            ipfs_hash = body.get("IpfsHash") if isinstance(body, dict) else None
        except ValueError:
            ipfs_hash = None
        if not ipfs_hash:
            logger.error("Pinata response missing IpfsHash: %s", r.text[:500])
            raise PinningError("Failed to upload image to IPFS: no hash in response")

        logger.info("Pinned %s to IPFS as %s", filename, ipfs_hash)
        return ipfs_hash

    def gateway_url(self, ipfs_hash: str) -> str:
        return f"{self.gateway_base}/{ipfs_hash}"

    def close(self):
        self._client.close()
