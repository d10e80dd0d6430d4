import json
import logging
from typing import Any, Dict, Iterable, Optional

import httpx

from cityat.core.cache import Tag, TagCache
from cityat.core.config import settings
from cityat.schemas.common import ApiResponse

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A backend call failed. Carries the HTTP status when there was a response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BackendClient:
    """
    HTTP client for the City At REST backend.

    Queries are cached per access token and tagged with what they provide;
    mutations invalidate the tags they affect.
    """

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        cache_ttl: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT_SECONDS
        self.cache = TagCache(cache_ttl if cache_ttl is not None else settings.API_CACHE_TTL_SECONDS)
        self.transport = transport
        self.client = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self.client

    @staticmethod
    def _unwrap(payload: Any) -> Any:
        """Return `data` of an ApiResponse envelope, raising when it reports failure."""
        if not isinstance(payload, dict) or "success" not in payload:
            return payload
        envelope = ApiResponse.model_validate(payload)
        if not envelope.success:
            raise BackendError(envelope.error or envelope.message or "Request failed")
        return envelope.data

    async def _request(
        self,
        method: str,
        path: str,
        access_token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = {}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            client = await self._get_client()
            logger.info(f"{method} {path}")
            response = await client.request(method, path, params=params, json=body, headers=headers)
            response.raise_for_status()
            return self._unwrap(response.json() if response.content else None)
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {path} failed with status {e.response.status_code}: {e.response.text}")
            raise BackendError(self._error_message(e.response), e.response.status_code)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {str(e)}")
            raise BackendError(f"Backend unavailable: {str(e)}")

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(payload, dict):
            return payload.get("error") or payload.get("message") or f"HTTP {response.status_code}"
        return f"HTTP {response.status_code}"

    async def _query(
        self,
        path: str,
        provides: Iterable[Tag] = (),
        access_token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        key = (path, json.dumps(params or {}, sort_keys=True, default=str), access_token)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {path}")
            return cached

        result = await self._request("GET", path, access_token=access_token, params=params)
        self.cache.set(key, result, provides)
        return result

    async def _mutation(
        self,
        method: str,
        path: str,
        invalidates: Iterable[Tag] = (),
        access_token: Optional[str] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        result = await self._request(method, path, access_token=access_token, body=body)
        self.cache.invalidate(invalidates)
        return result

    # Authentication

    async def login(self, credentials: Dict[str, Any]) -> dict:
        return await self._mutation("POST", "/auth/login", ["User"], body=credentials)

    async def register(self, user_data: Dict[str, Any]) -> dict:
        return await self._mutation("POST", "/auth/register", ["User"], body=user_data)

    async def verify_otp(self, phone: str, otp: str) -> dict:
        return await self._mutation("POST", "/auth/verify-otp", body={"phone": phone, "otp": otp})

    async def refresh_token(self, refresh_token: str) -> dict:
        return await self._mutation("POST", "/auth/refresh", body={"refreshToken": refresh_token})

    async def google_login(self, access_token: str, id_token: str) -> dict:
        return await self._mutation(
            "POST", "/auth/google", ["User"],
            body={"accessToken": access_token, "idToken": id_token},
        )

    async def facebook_login(self, access_token: str) -> dict:
        return await self._mutation("POST", "/auth/facebook", ["User"], body={"accessToken": access_token})

    # User

    async def get_profile(self, access_token: str) -> dict:
        return await self._query("/users/profile", ["User"], access_token)

    async def update_profile(self, access_token: str, user_data: Dict[str, Any]) -> dict:
        return await self._mutation("PUT", "/users/profile", ["User"], access_token, body=user_data)

    # Location

    async def get_cities(self, search: Optional[str] = None) -> list:
        return await self._query("/locations/cities", ["City"], params={"search": search})

    # Service providers

    async def get_service_providers(
        self,
        category: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        page: int = 1,
        limit: int = 20,
        access_token: Optional[str] = None,
    ) -> dict:
        params = {
            "category": category,
            "latitude": latitude,
            "longitude": longitude,
            "page": page,
            "limit": limit,
        }
        return await self._query("/services/providers", ["ServiceProvider"], access_token, params)

    async def get_service_provider(self, provider_id: str, access_token: Optional[str] = None) -> dict:
        return await self._query(
            f"/services/providers/{provider_id}", [("ServiceProvider", provider_id)], access_token
        )

    async def create_service_booking(self, access_token: str, booking: Dict[str, Any]) -> dict:
        return await self._mutation("POST", "/services/bookings", ["ServiceBooking"], access_token, booking)

    async def get_service_bookings(
        self, access_token: str, page: int = 1, limit: int = 20, status: Optional[str] = None
    ) -> dict:
        params = {"page": page, "limit": limit, "status": status}
        return await self._query("/services/bookings", ["ServiceBooking"], access_token, params)

    # Stores

    async def get_stores(
        self,
        category: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        params = {
            "category": category,
            "latitude": latitude,
            "longitude": longitude,
            "page": page,
            "limit": limit,
        }
        return await self._query("/stores", ["Store"], params=params)

    async def get_store(self, store_id: str) -> dict:
        return await self._query(f"/stores/{store_id}", [("Store", store_id)])

    async def get_store_products(
        self, store_id: str, category: Optional[str] = None, page: int = 1, limit: int = 20
    ) -> dict:
        params = {"category": category, "page": page, "limit": limit}
        return await self._query(f"/stores/{store_id}/products", ["Product"], params=params)

    async def get_product(self, product_id: str) -> dict:
        return await self._query(f"/products/{product_id}", [("Product", product_id)])

    # Orders

    async def create_order(self, access_token: str, order: Dict[str, Any]) -> dict:
        return await self._mutation("POST", "/orders", ["Order"], access_token, order)

    async def get_orders(
        self, access_token: str, page: int = 1, limit: int = 20, status: Optional[str] = None
    ) -> dict:
        params = {"page": page, "limit": limit, "status": status}
        return await self._query("/orders", ["Order"], access_token, params)

    async def get_order(self, access_token: str, order_id: str) -> dict:
        return await self._query(f"/orders/{order_id}", [("Order", order_id)], access_token)

    async def update_order_status(self, access_token: str, order_id: str, status: str) -> dict:
        return await self._mutation(
            "PUT", f"/orders/{order_id}/status", [("Order", order_id)], access_token, {"status": status}
        )

    # Notifications

    async def get_notifications(self, access_token: str, page: int = 1, limit: int = 50) -> dict:
        return await self._query("/notifications", ["Notification"], access_token, {"page": page, "limit": limit})

    async def mark_notification_as_read(self, access_token: str, notification_id: str) -> None:
        return await self._mutation("PUT", f"/notifications/{notification_id}/read", ["Notification"], access_token)

    # Reviews

    async def create_review(self, access_token: str, review: Dict[str, Any]) -> dict:
        return await self._mutation("POST", "/reviews", ["Review"], access_token, review)

    async def get_reviews(self, target_id: str, target_type: str, page: int = 1, limit: int = 20) -> dict:
        params = {"targetId": target_id, "targetType": target_type, "page": page, "limit": limit}
        return await self._query("/reviews", ["Review"], params=params)

    # Search is never cached

    async def search(
        self,
        query: str,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict:
        params = {"query": query, "page": page, "limit": limit}
        params.update(filters or {})
        return await self._request("GET", "/search", params=params)

    # Payments

    async def initiate_payment(self, access_token: str, order_id: str, amount: Any, method: str) -> dict:
        return await self._mutation(
            "POST", "/payments/initiate", access_token=access_token,
            body={"orderId": order_id, "amount": str(amount), "method": method},
        )

    async def verify_payment(self, access_token: str, payment_id: str, signature: str) -> dict:
        return await self._mutation(
            "POST", "/payments/verify", ["Order"], access_token,
            {"paymentId": payment_id, "signature": signature},
        )

    async def close(self):
        """Close HTTP client."""
        if self.client:
            await self.client.aclose()
            self.client = None
        self.cache.clear()
