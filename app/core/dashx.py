"""
DashX GraphQL client.

DashX handles account identification, event tracking, email delivery and the
product catalog. Identification, tracking and delivery are best-effort side
calls: their failures are logged and never block the primary response.
Catalog lookups surface failures as UpstreamError.
"""

import logging
from typing import Any, Optional

import httpx
from fastapi.encoders import jsonable_encoder
from jose import jwt

from app.config import get_settings
from app.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)


IDENTIFY_ACCOUNT = """
mutation IdentifyAccount($input: IdentifyAccountInput!) {
  identifyAccount(input: $input) {
    id
  }
}
"""

TRACK_EVENT = """
mutation TrackEvent($input: TrackEventInput!) {
  trackEvent(input: $input) {
    success
  }
}
"""

CREATE_DELIVERY = """
mutation CreateDelivery($input: CreateDeliveryInput!) {
  createDelivery(input: $input) {
    id
  }
}
"""

FETCH_ITEM = """
query FetchItem($input: FetchItemInput) {
  fetchItem(input: $input) {
    id
    installationId
    name
    identifier
    description
    createdAt
    updatedAt
    pricings {
      id
      kind
      amount
      originalAmount
      isRecurring
      recurringInterval
      recurringIntervalUnit
      appleProductIdentifier
      googleProductIdentifier
      currencyCode
      createdAt
      updatedAt
    }
  }
}
"""


class DashXClient:
    """
    Async DashX API client.

    Usage:
        async with DashXClient(base_uri, public_key, private_key, env) as dashx:
            await dashx.track("User Registered", uid, {"email": email})
            item = await dashx.fetch_item("pen")
    """

    def __init__(
        self,
        base_uri: str,
        public_key: str,
        private_key: str,
        target_environment: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_uri: GraphQL endpoint
            public_key: Project public key
            private_key: Project private key, also used to sign identity tokens
            target_environment: DashX environment identifier
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_uri = base_uri
        self.private_key = private_key
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "X-Public-Key": public_key,
                "X-Private-Key": private_key,
                "X-Target-Environment": target_environment,
            },
        )

    async def __aenter__(self) -> "DashXClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """
        Execute a GraphQL operation and return its data.

        Raises:
            UpstreamError: Transport failure, non-2xx status, malformed body or GraphQL errors
        """
        try:
            response = await self._client.post(
                self.base_uri,
                json={"query": query, "variables": jsonable_encoder(variables)},
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"DashX request failed: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"DashX returned invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise UpstreamError(f"DashX returned an unexpected body: {type(body).__name__}")

        if body.get("errors"):
            message = body["errors"][0].get("message", "Unknown DashX error")
            raise UpstreamError(message)

        return body.get("data") or {}

    async def _best_effort(self, operation: str, query: str, variables: dict[str, Any]) -> bool:
        try:
            await self._request(query, variables)
            return True
        except UpstreamError as e:
            logger.warning(f"DashX {operation} failed: {e}")
            return False

    async def identify(self, uid: str, attrs: dict[str, Any]) -> bool:
        """Create or update the DashX account for a user."""
        return await self._best_effort(
            "identify", IDENTIFY_ACCOUNT, {"input": {"uid": uid, **attrs}}
        )

    async def track(self, event: str, uid: str, data: Optional[dict[str, Any]] = None) -> bool:
        """Record an analytics event for a user."""
        return await self._best_effort(
            "track",
            TRACK_EVENT,
            {"input": {"event": event, "accountUid": uid, "data": data or {}}},
        )

    async def deliver(self, urn: str, payload: dict[str, Any]) -> bool:
        """
        Deliver a message.

        Args:
            urn: Template identifier (e.g. "email/forgot-password") or a bare
                channel (e.g. "email") when the payload carries inline content
            payload: Recipients, template data or inline content
        """
        channel, _, identifier = urn.partition("/")
        delivery = {"contentType": channel, **payload}
        if identifier:
            delivery["identifier"] = identifier
        return await self._best_effort("deliver", CREATE_DELIVERY, {"input": delivery})

    async def fetch_item(self, identifier: str) -> dict[str, Any]:
        """
        Fetch a catalog item by its identifier.

        Raises:
            UpstreamError: If DashX fails or the item is missing
        """
        data = await self._request(FETCH_ITEM, {"input": {"identifier": identifier}})
        item = data.get("fetchItem")
        if item is None:
            raise UpstreamError(f"Item not found: {identifier}")
        return item

    def generate_identity_token(self, uid: str) -> str:
        """Sign an identity token the client SDKs present to DashX."""
        if not self.private_key:
            logger.warning("DashX private key not configured; issuing empty identity token")
            return ""
        return jwt.encode(
            {"uid": uid, "kind": "dashx/identity"},
            self.private_key,
            algorithm="HS256",
        )


_dashx_client: Optional[DashXClient] = None


def get_dashx_client() -> DashXClient:
    """Get or create the process-wide DashX client."""
    global _dashx_client
    if _dashx_client is None:
        settings = get_settings()
        _dashx_client = DashXClient(
            base_uri=settings.dashx_base_uri,
            public_key=settings.dashx_public_key,
            private_key=settings.dashx_private_key,
            target_environment=settings.dashx_target_environment,
            timeout=settings.dashx_timeout_seconds,
        )
    return _dashx_client


async def close_dashx_client() -> None:
    """Close the process-wide DashX client, if one was created."""
    global _dashx_client
    if _dashx_client is not None:
        await _dashx_client.aclose()
        _dashx_client = None
