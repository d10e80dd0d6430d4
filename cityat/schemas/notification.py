import enum
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import Field

from cityat.schemas.common import CamelModel


class NotificationType(str, enum.Enum):
    ORDER_UPDATE = "order_update"
    SERVICE_UPDATE = "service_update"
    PROMOTIONAL = "promotional"
    SYSTEM = "system"
    PAYMENT = "payment"
    REMINDER = "reminder"


class Notification(CamelModel):
    id: str
    user_id: str = ""
    type: NotificationType = NotificationType.SYSTEM
    title: str
    message: str = ""
    data: Optional[Dict[str, Any]] = None
    is_read: bool = False
    deep_link: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RemoteAttachment(CamelModel):
    url: Optional[str] = None


class RemoteAndroidOptions(CamelModel):
    image_url: Optional[str] = None


class RemoteIosOptions(CamelModel):
    attachments: List[RemoteAttachment] = []


class RemoteNotificationBody(CamelModel):
    title: Optional[str] = None
    body: Optional[str] = None
    android: Optional[RemoteAndroidOptions] = None
    ios: Optional[RemoteIosOptions] = None


class RemoteMessage(CamelModel):
    """Push payload as delivered by the messaging channel."""

    message_id: Optional[str] = None
    notification: Optional[RemoteNotificationBody] = None
    data: Dict[str, str] = {}


class LocalNotificationCreate(CamelModel):
    type: NotificationType = NotificationType.SYSTEM
    title: str = Field(..., min_length=1)
    message: str = ""
    data: Optional[Dict[str, Any]] = None


class NotificationListResponse(CamelModel):
    items: List[Notification]
    unread_count: int
