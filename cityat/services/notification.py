import logging
import uuid
from typing import Any, Dict, Optional

from cityat.core.backend_client import BackendClient
from cityat.schemas.notification import Notification, NotificationType, RemoteMessage
from cityat.state.store import AppStore

logger = logging.getLogger(__name__)


def get_notification_type(value: Optional[str]) -> NotificationType:
    try:
        return NotificationType(value)
    except ValueError:
        return NotificationType.SYSTEM


def map_remote_message(message: RemoteMessage, user_id: str = "") -> Notification:
    """Turn a push payload into a notification record."""
    body = message.notification
    image_url = None
    if body and body.android and body.android.image_url:
        image_url = body.android.image_url
    elif body and body.ios and body.ios.attachments:
        image_url = body.ios.attachments[0].url

    return Notification(
        id=message.message_id or f"notif_{uuid.uuid4().hex}",
        user_id=user_id,
        type=get_notification_type(message.data.get("type")),
        title=(body.title if body else None) or "New Notification",
        message=(body.body if body else None) or "",
        data=message.data or None,
        deep_link=message.data.get("deepLink"),
        image_url=image_url,
    )


def _current_user_id(store: AppStore) -> str:
    return store.auth.user.id if store.auth.user else ""


def receive_remote_message(store: AppStore, message: RemoteMessage) -> Notification:
    notification = map_remote_message(message, _current_user_id(store))
    store.notifications.add_notification(notification)
    logger.info(f"Received {notification.type.value} notification {notification.id}")
    return notification


def create_local_notification(
    store: AppStore,
    notification_type: NotificationType,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
) -> Notification:
    notification = Notification(
        id=f"local_{uuid.uuid4().hex}",
        user_id=_current_user_id(store),
        type=notification_type,
        title=title,
        message=message,
        data=data,
    )
    store.notifications.add_notification(notification)
    return notification


async def sync_notifications(store: AppStore, client: BackendClient) -> int:
    if not store.auth.token:
        raise ValueError("Not authenticated")

    page = await client.get_notifications(store.auth.token)
    items = page.get("items", []) if isinstance(page, dict) else page or []
    added = store.notifications.merge(Notification.model_validate(item) for item in items)
    logger.info(f"Synced notifications, {added} new")
    return added


async def mark_as_read(store: AppStore, client: BackendClient, notification_id: str) -> None:
    if not store.notifications.mark_as_read(notification_id):
        raise ValueError("Notification not found")

    # local notifications never reached the backend
    if store.auth.token and not notification_id.startswith("local_"):
        await client.mark_notification_as_read(store.auth.token, notification_id)
