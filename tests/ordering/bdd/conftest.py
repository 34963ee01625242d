"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json

import pytest
from ordering.catalogue.management import CreateProduct
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from protean import current_domain
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalogue():
    """Product ids by name, filled in by Given steps."""
    return {}


@pytest.fixture()
def outcome():
    """What the last When step produced: an order id or an error."""
    return {"order_id": None, "error": None}


@pytest.fixture()
def place_order(catalogue):
    """Place an order, naming products; unknown names get an unknown id."""

    def _place(buyer, lines):
        items = [
            {"product_id": catalogue.get(name, f"unknown-{name}"), "quantity": quantity, "price": price}
            for quantity, name, price in lines
        ]
        command = PlaceOrder(user_id=buyer, items=json.dumps(items))
        return current_domain.process(command, asynchronous=False)

    return _place


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('the catalogue contains a "{name}" priced {price:g}'))
def _(catalogue, name, price):
    catalogue[name] = current_domain.process(CreateProduct(name=name, price=price), asynchronous=False)


@given(parsers.parse('buyer "{buyer}" has placed an order for {quantity:d} "{name}" at {price:g}'))
def _(place_order, outcome, buyer, quantity, name, price):
    outcome["order_id"] = place_order(buyer, [(quantity, name, price)])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('the order status is "{status}"'))
def _(outcome, status):
    order = current_domain.repository_for(Order).get(outcome["order_id"])
    assert order.status == status
