"""HTTP client for the train detail provider (GET /trains/{trainNumber}?date=)."""
import logging
from typing import Optional

import httpx

from app.core.config import settings
from app.schemas.booking import TrainDetail
from app.services.errors import TrainNotFound

logger = logging.getLogger(__name__)


class TrainServiceClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.train_service_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("TRAIN_SERVICE_URL is not configured")
        self.timeout = settings.train_service_timeout_seconds if timeout is None else timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)
        return self._client

    async def get_train_detail(self, train_number: str, date: str) -> TrainDetail:
        client = await self._get_client()
        resp = await client.get(f"/trains/{train_number}", params={"date": date})
        if resp.status_code == 404:
            raise TrainNotFound(train_number)
        resp.raise_for_status()
        try:
            return TrainDetail.model_validate(resp.json()["data"]["train"])
        except (KeyError, TypeError, ValueError):
            # ValueError covers non-JSON bodies and pydantic validation errors
            logger.error("Malformed train detail response for %s: %s", train_number, resp.text[:200])
            raise TrainNotFound(train_number) from None

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "TrainServiceClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
