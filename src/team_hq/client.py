"""HTTP client for the HQ chat-log endpoint."""

from typing import Any

import httpx

from .config import HQ_URL, HTTP_TIMEOUT
from .errors import DeliveryError


class ChatlogClient:
    """Posts chat messages to ``<base_url>/api/chatlog``."""

    def __init__(
        self,
        base_url: str = HQ_URL,
        timeout: float = HTTP_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def post(self, sender: str, recipient: str, text: str) -> Any:
        """Send one message. Raises DeliveryError on any non-2xx response."""
        try:
            response = self._client.post(
                "/api/chatlog", json={"from": sender, "to": recipient, "text": text}
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise DeliveryError(f"HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError:
            return None

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ChatlogClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
