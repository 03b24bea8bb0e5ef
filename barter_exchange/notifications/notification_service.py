"""
Per-user notification records.

Notifications are polled: emit() appends to the user's list and readers
fetch the list on their next refresh.
"""

import logging
from typing import List, Optional

from barter_exchange.common import generate_id, utcnow
from barter_exchange.models import Notification, NotificationType
from barter_exchange.store import KeyValueStore, load_model_list, save_model_list
from barter_exchange.store.records import notifications_key

logger = logging.getLogger(__name__)


class NotificationService:
    """Append and read notification records"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def emit(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[str] = None
    ) -> Notification:
        """
        Append a notification for a user.

        Args:
            user_id: Recipient
            notification_type: Kind of event
            title: Short title
            message: Body text
            related_id: Id of the record the notification refers to

        Returns:
            The stored Notification
        """
        notification = Notification(
            id=generate_id(),
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
            related_id=related_id,
            is_read=False,
            created_at=utcnow(),
        )

        key = notifications_key(user_id)
        notifications = load_model_list(self.store, key, Notification)
        notifications.append(notification)
        save_model_list(self.store, key, notifications)

        logger.debug(f"Notified {user_id}: {notification_type.value} ({related_id})")
        return notification

    def get_notifications(self, user_id: str, unread_only: bool = False) -> List[Notification]:
        notifications = load_model_list(self.store, notifications_key(user_id), Notification)
        if unread_only:
            return [n for n in notifications if not n.is_read]
        return notifications

    def mark_as_read(self, user_id: str, notification_id: str) -> bool:
        """
        Mark one notification read.

        Returns:
            True if the notification exists, False otherwise
        """
        key = notifications_key(user_id)
        notifications = load_model_list(self.store, key, Notification)
        for notification in notifications:
            if notification.id == notification_id:
                notification.is_read = True
                save_model_list(self.store, key, notifications)
                return True
        return False

    def mark_all_as_read(self, user_id: str) -> int:
        """Mark every notification read and return how many changed."""
        key = notifications_key(user_id)
        notifications = load_model_list(self.store, key, Notification)
        changed = 0
        for notification in notifications:
            if not notification.is_read:
                notification.is_read = True
                changed += 1
        if changed:
            save_model_list(self.store, key, notifications)
        return changed

    def unread_count(self, user_id: str) -> int:
        return len(self.get_notifications(user_id, unread_only=True))
