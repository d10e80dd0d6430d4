import logging
from typing import Any, Dict, Optional

from cityat.state.auth import AuthState
from cityat.state.cart import CartState
from cityat.state.location import LocationState
from cityat.state.notifications import NotificationState

logger = logging.getLogger(__name__)


class AppStore:
    """
    Client state of one user session.

    Built explicitly for each request from the session snapshot and written
    back afterwards. The containers are independent of each other.
    """

    def __init__(
        self,
        cart: Optional[CartState] = None,
        location: Optional[LocationState] = None,
        notifications: Optional[NotificationState] = None,
        auth: Optional[AuthState] = None,
    ):
        self.cart = cart or CartState()
        self.location = location or LocationState()
        self.notifications = notifications or NotificationState()
        self.auth = auth or AuthState()

    @classmethod
    def from_snapshot(cls, data: Optional[Dict[str, Any]]) -> "AppStore":
        if not data:
            return cls()
        return cls(
            cart=CartState.model_validate(data.get("cart") or {}),
            location=LocationState.model_validate(data.get("location") or {}),
            notifications=NotificationState.model_validate(data.get("notifications") or {}),
            auth=AuthState.model_validate(data.get("auth") or {}),
        )

    def snapshot(self) -> Dict[str, Any]:
        return {
            "cart": self.cart.model_dump(mode="json", exclude={"total_amount", "item_count"}),
            "location": self.location.model_dump(mode="json"),
            "notifications": self.notifications.model_dump(mode="json", exclude={"unread_count"}),
            "auth": self.auth.model_dump(mode="json"),
        }

    def reset(self) -> None:
        logger.info("Resetting session state")
        self.cart = CartState()
        self.location = LocationState()
        self.notifications = NotificationState()
        self.auth = AuthState()
