"""Application tests for order placement via domain.process()."""

import json

import pytest
import structlog
from ordering.order import placement
from ordering.order.order import Order, OrderItem, OrderStatus
from ordering.order.placement import PlaceOrder
from ordering.order.reading import get_order
from protean import current_domain
from protean.exceptions import ValidationError


def _place_order(user_id="user-005", lines=None):
    command = PlaceOrder(user_id=user_id, items=json.dumps(lines if lines is not None else []))
    return current_domain.process(command, asynchronous=False)


def _item_count():
    return current_domain.repository_for(OrderItem)._dao.query.all().total


def _order_count():
    return current_domain.repository_for(Order)._dao.query.all().total


@pytest.fixture()
def lines(products):
    return [
        {"product_id": products["mug"], "quantity": 2, "price": 10.0},
        {"product_id": products["spoon"], "quantity": 1, "price": 5.0},
    ]


class TestPlaceOrderFlow:
    def test_returns_order_id(self, lines):
        order_id = _place_order(lines=lines)
        assert order_id is not None

    def test_order_is_persisted_as_new(self, lines):
        order_id = _place_order(lines=lines)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.user_id == "user-005"
        assert order.status == OrderStatus.NEW.value
        assert order.payment_intent_id is None

    def test_one_item_row_per_input_line(self, lines):
        order_id = _place_order(lines=lines)
        merged = get_order(order_id)
        assert len(merged["items"]) == len(lines)
        assert all(item["order_id"] == order_id for item in merged["items"])

    def test_items_keep_requested_quantities_and_prices(self, lines, products):
        order_id = _place_order(lines=lines)
        items = {item["product_id"]: item for item in get_order(order_id)["items"]}
        assert items[products["mug"]]["quantity"] == 2
        assert items[products["mug"]]["price"] == 10.0
        assert items[products["spoon"]]["quantity"] == 1

    def test_repeated_product_is_not_a_mismatch(self, products):
        repeated = [
            {"product_id": products["mug"], "quantity": 1, "price": 10.0},
            {"product_id": products["mug"], "quantity": 3, "price": 10.0},
        ]
        order_id = _place_order(lines=repeated)
        assert len(get_order(order_id)["items"]) == 2

    def test_identical_requests_create_distinct_orders(self, lines):
        first = _place_order(lines=lines)
        second = _place_order(lines=lines)
        assert first != second
        assert _order_count() == 2


class TestPlaceOrderRejections:
    def test_missing_buyer(self, lines):
        with pytest.raises(ValidationError) as exc:
            _place_order(user_id=None, lines=lines)
        assert exc.value.messages == {"user_id": ["Missing buyer"]}
        assert _order_count() == 0

    def test_empty_items(self):
        with pytest.raises(ValidationError) as exc:
            _place_order(lines=[])
        assert "items" in exc.value.messages
        assert _order_count() == 0

    def test_items_must_be_json(self):
        with pytest.raises(ValidationError):
            current_domain.process(PlaceOrder(user_id="user-005", items="not json"), asynchronous=False)
        assert _order_count() == 0

    def test_line_without_product(self):
        with pytest.raises(ValidationError) as exc:
            _place_order(lines=[{"quantity": 1, "price": 1.0}])
        assert "items[0]" in exc.value.messages

    def test_unknown_product_writes_nothing(self, lines):
        with pytest.raises(ValidationError) as exc:
            _place_order(lines=lines + [{"product_id": "999", "quantity": 1, "price": 1.0}])
        assert exc.value.messages == {"items": ["One or more products not found"]}
        assert _order_count() == 0

    def test_unknown_product_is_reported_before_bad_quantity(self):
        with pytest.raises(ValidationError) as exc:
            _place_order(lines=[{"product_id": "999", "quantity": 0, "price": 1.0}])
        assert "items" in exc.value.messages

    def test_invalid_quantity_writes_nothing(self, products):
        with pytest.raises(ValidationError) as exc:
            _place_order(lines=[{"product_id": products["mug"], "quantity": 0, "price": 10.0}])
        assert "items[0].quantity" in exc.value.messages
        assert _order_count() == 0

    def test_negative_price_writes_nothing(self, products):
        with pytest.raises(ValidationError) as exc:
            _place_order(lines=[{"product_id": products["mug"], "quantity": 1, "price": -1}])
        assert "items[0].price" in exc.value.messages
        assert _order_count() == 0


class _FailingLogger:
    """Raises once the handler reports success, after the order was added."""

    def info(self, event, **kw):
        if event == "Order placed":
            raise RuntimeError("connection lost")


class TestPlaceOrderAtomicity:
    def test_failure_after_add_leaves_no_order(self, lines, monkeypatch):
        monkeypatch.setattr(placement, "logger", _FailingLogger())

        with pytest.raises(RuntimeError):
            _place_order(lines=lines)

        assert _order_count() == 0
        assert _item_count() == 0

    def test_item_insert_failure_leaves_no_order(self, lines, monkeypatch):
        dao_cls = type(current_domain.repository_for(OrderItem)._dao)
        original_create = dao_cls._create

        def _create(self, *args, **kwargs):
            if self.entity_cls is OrderItem:
                raise RuntimeError("item insert failed")
            return original_create(self, *args, **kwargs)

        monkeypatch.setattr(dao_cls, "_create", _create)

        with pytest.raises(RuntimeError):
            _place_order(lines=lines)

        monkeypatch.undo()
        assert _order_count() == 0
        assert _item_count() == 0


class _ContextRecorder:
    """Captures the bound log context at each event."""

    def __init__(self):
        self.seen = {}

    def info(self, event, **kw):
        self.seen[event] = structlog.contextvars.get_contextvars()


class TestPlaceOrderLogContext:
    def test_order_and_buyer_are_bound_while_placing(self, lines, monkeypatch):
        recorder = _ContextRecorder()
        monkeypatch.setattr(placement, "logger", recorder)

        order_id = _place_order(lines=lines)

        assert recorder.seen["Order placed"]["user_id"] == "user-005"
        assert recorder.seen["Order placed"]["order_id"] == order_id
        assert structlog.contextvars.get_contextvars() == {}

    def test_context_is_cleared_after_rejection(self, lines, monkeypatch):
        recorder = _ContextRecorder()
        monkeypatch.setattr(placement, "logger", recorder)

        with pytest.raises(ValidationError):
            _place_order(lines=[{"product_id": "999", "quantity": 1, "price": 1.0}])

        assert recorder.seen["Order rejected"]["user_id"] == "user-005"
        assert structlog.contextvars.get_contextvars() == {}
