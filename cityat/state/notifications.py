from typing import Iterable, List

from pydantic import computed_field

from cityat.schemas.common import CamelModel
from cityat.schemas.notification import Notification


class NotificationState(CamelModel):
    """Append-only notification list. Only the read flag of an entry ever changes."""

    items: List[Notification] = []

    @computed_field
    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.items if not n.is_read)

    def add_notification(self, notification: Notification) -> None:
        self.items.append(notification)

    def merge(self, notifications: Iterable[Notification]) -> int:
        """Append notifications not seen before. Returns how many were added."""
        known = {n.id for n in self.items}
        added = 0
        for notification in notifications:
            if notification.id in known:
                continue
            self.items.append(notification)
            known.add(notification.id)
            added += 1
        return added

    def mark_as_read(self, notification_id: str) -> bool:
        for notification in self.items:
            if notification.id == notification_id:
                notification.is_read = True
                return True
        return False

    def mark_all_as_read(self) -> None:
        for notification in self.items:
            notification.is_read = True
