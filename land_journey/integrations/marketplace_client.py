"""Marketplace API client: transactions, service requests and professionals.

The marketplace wraps payloads as ``{"success": bool, "data": ..., "meta": ...}``;
this client unwraps ``data`` and maps 404 to None. Transport errors are retried
a bounded number of times; everything else surfaces as MarketplaceError.
"""

from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from land_journey.core.config import Settings, get_settings
from land_journey.core.exceptions import MarketplaceError
from land_journey.domain.stages import ProfessionalRole
from land_journey.integrations.marketplace import (
    COMPLETED_TRANSACTION_STATUSES,
    EngagementInfo,
    ProfessionalInfo,
    TransactionInfo,
)

logger = structlog.get_logger(__name__)


class MarketplaceClient:
    """HTTP implementation of the Marketplace protocol."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            settings: Application settings (defaults to get_settings())
            transport: Optional httpx transport, used by tests to stub the API
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.marketplace_api_url.rstrip("/")
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.marketplace_api_token:
            headers["Authorization"] = f"Bearer {self.settings.marketplace_api_token}"
        return headers

    async def _send(self, endpoint: str, params: dict | None) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.settings.marketplace_timeout_seconds,
            transport=self._transport,
        ) as client:
            return await client.get(endpoint, params=params)

    async def _get(self, endpoint: str, params: dict | None = None) -> Any | None:
        """GET an endpoint and return the unwrapped ``data`` payload.

        Returns None on 404.
        """
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.TransportError),
                stop=stop_after_attempt(self.settings.marketplace_max_attempts),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
                before_sleep=lambda rs: logger.warning(
                    "marketplace_request_retrying",
                    endpoint=endpoint,
                    attempt=rs.attempt_number,
                ),
            ):
                with attempt:
                    response = await self._send(endpoint, params)
        except RetryError as exc:
            raise MarketplaceError(f"Marketplace unreachable: {endpoint}") from exc

        if response.status_code == 404:
            return None

        if response.status_code >= 400:
            logger.error(
                "marketplace_request_failed",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise MarketplaceError(
                f"Marketplace API error ({response.status_code}) for {endpoint}"
            )

        body = response.json()
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    async def get_transaction(self, transaction_id: str) -> TransactionInfo | None:
        data = await self._get(f"/transactions/{transaction_id}")
        if data is None:
            return None
        return TransactionInfo.from_api(data)

    async def list_buyer_transactions(
        self, buyer_id: str, statuses: frozenset[str] = COMPLETED_TRANSACTION_STATUSES
    ) -> list[TransactionInfo]:
        data = await self._get(
            "/transactions",
            params={"buyerId": buyer_id, "status": ",".join(sorted(statuses))},
        )
        return [TransactionInfo.from_api(item) for item in data or []]

    async def get_engagement(self, engagement_id: str) -> EngagementInfo | None:
        data = await self._get(f"/service-requests/{engagement_id}")
        if data is None:
            return None
        return EngagementInfo.from_api(data)

    async def list_professionals(self, role: ProfessionalRole) -> list[ProfessionalInfo]:
        data = await self._get(
            "/professionals",
            params={
                "type": role.value,
                "isAvailable": "true",
                "licenseVerified": "true",
                "sort": "rating:desc",
            },
        )
        return [ProfessionalInfo.from_api(item) for item in data or []]
