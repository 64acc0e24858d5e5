"""
Client-side feed of new-order notifications.

The feed is a plain object owned by whoever renders it (a UI session, a test);
read state lives only here and is never sent to the server.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set


@dataclass
class OrderNotification:
    id: int
    customer_name: str
    total: float
    order_type: Optional[str]
    created_at: Any
    order: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_order(cls, order: Dict[str, Any]) -> "OrderNotification":
        return cls(
            id=order["id"],
            customer_name=order.get("customer_name", ""),
            total=order.get("total", 0.0),
            order_type=order.get("order_type"),
            created_at=order.get("created_at"),
            order=order,
        )


class OrderNotificationFeed:
    def __init__(self) -> None:
        self._notifications: List[OrderNotification] = []
        self._read_ids: Set[int] = set()
        self._baseline_ids: Set[int] = set()
        self.subscribed = False
        self.last_seen: Any = None

    @property
    def notifications(self) -> List[OrderNotification]:
        return list(self._notifications)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._notifications if n.id not in self._read_ids)

    def is_read(self, notification_id: int) -> bool:
        return notification_id in self._read_ids

    def push(self, notification: OrderNotification) -> bool:
        """Add a notification at the top of the feed. Returns False for an id already in the feed."""
        if any(n.id == notification.id for n in self._notifications):
            return False
        self._notifications.insert(0, notification)
        if notification.created_at is not None and (self.last_seen is None or notification.created_at > self.last_seen):
            self.last_seen = notification.created_at
        return True

    def subscribe(self, pending_orders: Iterable[Dict[str, Any]]) -> None:
        """Start watching from the current pending orders without notifying about them."""
        for order in pending_orders:
            self._baseline_ids.add(order["id"])
            created_at = order.get("created_at")
            if created_at is not None and (self.last_seen is None or created_at > self.last_seen):
                self.last_seen = created_at
        self.subscribed = True

    def sync(self, pending_orders: Iterable[Dict[str, Any]]) -> int:
        """Push every order from a poll result (newest first); returns how many were new."""
        added = 0
        for order in reversed(list(pending_orders)):
            if order["id"] in self._baseline_ids:
                continue
            if self.push(OrderNotification.from_order(order)):
                added += 1
        return added

    def mark_as_read(self, notification_id: int) -> None:
        if any(n.id == notification_id for n in self._notifications):
            self._read_ids.add(notification_id)

    def mark_all_as_read(self) -> None:
        self._read_ids.update(n.id for n in self._notifications)

    def clear(self) -> None:
        self._notifications.clear()
        self._read_ids.clear()
