"""Tests for the client-side order notification feed."""
from modules.orders.notifications import OrderNotification, OrderNotificationFeed


def order(id, created_at, customer="Guest", total=100.0):
    return {"id": id, "customer_name": customer, "total": total, "order_type": "pickup", "created_at": created_at}


def test_push_prepends_and_ignores_duplicates():
    feed = OrderNotificationFeed()
    assert feed.push(OrderNotification.from_order(order(1, "2025-03-10T09:00:00")))
    assert feed.push(OrderNotification.from_order(order(2, "2025-03-10T09:05:00")))
    assert not feed.push(OrderNotification.from_order(order(1, "2025-03-10T09:00:00")))
    assert [n.id for n in feed.notifications] == [2, 1]
    assert feed.last_seen == "2025-03-10T09:05:00"


def test_sync_keeps_newest_first():
    feed = OrderNotificationFeed()
    # Poll results arrive newest first
    added = feed.sync([order(3, "2025-03-10T09:10:00"), order(2, "2025-03-10T09:05:00")])
    assert added == 2
    assert [n.id for n in feed.notifications] == [3, 2]
    assert feed.sync([order(3, "2025-03-10T09:10:00")]) == 0


def test_unread_count_tracks_read_ids():
    feed = OrderNotificationFeed()
    feed.sync([order(3, "c"), order(2, "b"), order(1, "a")])
    assert feed.unread_count == 3
    feed.mark_as_read(2)
    assert feed.unread_count == 2
    assert feed.is_read(2)
    feed.mark_as_read(99)
    assert feed.unread_count == 2


def test_mark_all_and_clear():
    feed = OrderNotificationFeed()
    feed.sync([order(2, "b"), order(1, "a")])
    feed.mark_all_as_read()
    assert feed.unread_count == 0
    feed.push(OrderNotification.from_order(order(4, "d")))
    assert feed.unread_count == 1
    feed.clear()
    assert feed.notifications == []
    assert feed.unread_count == 0


def test_subscribe_skips_orders_already_waiting():
    feed = OrderNotificationFeed()
    feed.subscribe([order(2, "2025-03-10T09:05:00"), order(1, "2025-03-10T09:00:00")])
    assert feed.subscribed
    assert feed.notifications == []
    assert feed.last_seen == "2025-03-10T09:05:00"

    added = feed.sync([order(3, "2025-03-10T09:10:00"), order(2, "2025-03-10T09:05:00")])
    assert added == 1
    assert [n.id for n in feed.notifications] == [3]
    assert feed.unread_count == 1


def test_subscribe_with_empty_queue_notifies_on_first_order():
    feed = OrderNotificationFeed()
    feed.subscribe([])
    assert feed.subscribed
    assert feed.last_seen is None
    assert feed.sync([order(1, "2025-03-10T09:00:00")]) == 1
