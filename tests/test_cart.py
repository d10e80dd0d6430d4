from decimal import Decimal

from cityat.state.cart import CartState
from conftest import make_product


def test_add_items_from_one_store_keeps_totals():
    cart = CartState()

    cart.add_item(make_product("p1", price="50"), 2)
    cart.add_item(make_product("p2", price="12.50"), 3)
    cart.add_item(make_product("p1", price="50"), 1)

    assert [item.product_id for item in cart.items] == ["p1", "p2"]
    assert cart.items[0].quantity == 3
    assert cart.item_count == 6
    assert cart.total_amount == Decimal("187.50")
    assert cart.store_id == "store-x"


def test_discount_price_used_when_present():
    cart = CartState()

    cart.add_item(make_product("p1", price="80", discount_price="60"), 2)

    assert cart.items[0].price == Decimal("60")
    assert cart.total_amount == Decimal("120")


def test_switching_store_replaces_cart():
    cart = CartState()

    switched = cart.add_item(make_product("a", store_id="store-x", price="50"), 2)
    assert switched is False
    assert cart.total_amount == Decimal("100")
    assert cart.item_count == 2

    switched = cart.add_item(make_product("b", store_id="store-y", price="30"), 1)

    assert switched is True
    assert [item.product_id for item in cart.items] == ["b"]
    assert cart.store_id == "store-y"
    assert cart.total_amount == Decimal("30")
    assert cart.item_count == 1


def test_update_quantity_to_zero_removes_last_item_and_store():
    cart = CartState()
    cart.add_item(make_product("p1"), 2)
    item_id = cart.items[0].id

    cart.update_quantity(item_id, 0)

    assert cart.items == []
    assert cart.store_id is None
    assert cart.total_amount == Decimal("0")
    assert cart.item_count == 0


def test_update_quantity_sets_value():
    cart = CartState()
    cart.add_item(make_product("p1", price="10"), 1)
    cart.add_item(make_product("p2", price="5"), 1)

    cart.update_quantity(cart.items[1].id, 4)

    assert cart.items[1].quantity == 4
    assert cart.total_amount == Decimal("30")
    assert cart.store_id == "store-x"


def test_update_quantity_unknown_item_is_noop():
    cart = CartState()
    cart.add_item(make_product("p1"), 1)

    cart.update_quantity("cart_missing", 0)

    assert len(cart.items) == 1


def test_remove_item_keeps_store_while_items_remain():
    cart = CartState()
    cart.add_item(make_product("p1", price="10"), 1)
    cart.add_item(make_product("p2", price="20"), 1)

    cart.remove_item(cart.items[0].id)
    assert cart.store_id == "store-x"
    assert cart.total_amount == Decimal("20")

    cart.remove_item(cart.items[0].id)
    assert cart.store_id is None


def test_clear_and_special_instructions():
    cart = CartState()
    cart.add_item(make_product("p1"), 1)

    cart.add_special_instructions(cart.items[0].id, "Less spicy")
    assert cart.items[0].special_instructions == "Less spicy"

    cart.clear()
    assert cart.items == []
    assert cart.store_id is None
    assert cart.item_count == 0


def test_line_ids_are_unique():
    cart = CartState()
    cart.add_item(make_product("p1"), 1)
    cart.add_item(make_product("p2"), 1)

    assert cart.items[0].id != cart.items[1].id
    assert cart.items[0].id.startswith("cart_")
