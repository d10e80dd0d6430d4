from decimal import Decimal

from cityat.schemas.notification import Notification
from cityat.state.store import AppStore
from conftest import make_city, make_product


def test_snapshot_restores_every_container(signed_in_store):
    store = signed_in_store
    store.cart.add_item(make_product("p1", price="19.99"), 3)
    store.cart.add_special_instructions(store.cart.items[0].id, "Ring the bell")
    store.location.set_selected_city(make_city("pune"))
    store.notifications.add_notification(Notification(id="n1", title="Hello"))

    restored = AppStore.from_snapshot(store.snapshot())

    assert restored.cart.items[0].special_instructions == "Ring the bell"
    assert restored.cart.total_amount == Decimal("59.97")
    assert restored.cart.store_id == "store-x"
    assert restored.location.selected_city.name == "Pune"
    assert [c.id for c in restored.location.recent_cities] == ["pune"]
    assert restored.notifications.unread_count == 1
    assert restored.auth.is_authenticated is True
    assert restored.auth.user.email == "asha@example.com"


def test_snapshot_holds_only_source_fields(store):
    store.cart.add_item(make_product("p1"), 1)

    snapshot = store.snapshot()

    assert "total_amount" not in snapshot["cart"]
    assert "unread_count" not in snapshot["notifications"]


def test_empty_snapshot_gives_fresh_store():
    store = AppStore.from_snapshot(None)

    assert store.cart.items == []
    assert store.auth.is_authenticated is False


def test_reset(signed_in_store):
    signed_in_store.cart.add_item(make_product("p1"), 1)

    signed_in_store.reset()

    assert signed_in_store.cart.items == []
    assert signed_in_store.auth.token is None
