"""Tests for the admin order board."""

import httpx
import pytest
from storefront_client.admin import AdminBoard, delivery_label
from storefront_client.clients import StorefrontApiClient
from storefront_service.models import OrderStatus


@pytest.fixture()
def notes():
    return []


@pytest.fixture()
def board(api, notes):
    return AdminBoard(api, notify=notes.append)


def test_refresh_lists_newest_first(board, store, new_order):
    ids = [store.create(new_order()).id for _ in range(3)]
    orders = board.refresh()
    assert [o.id for o in orders] == sorted(ids, reverse=True)


def test_set_status_updates_board(board, store, new_order, notes):
    order = store.create(new_order())
    board.refresh()

    updated = board.set_status(order.id, "Confirmed")

    assert updated.status == OrderStatus.CONFIRMED
    assert board.orders[0].status == OrderStatus.CONFIRMED
    assert store.get(order.id).status == OrderStatus.CONFIRMED
    assert notes == []


def test_missing_order_is_reported(board, notes):
    assert board.set_status(999999, OrderStatus.CONFIRMED) is None
    assert notes == ["Order 999999 no longer exists."]


def test_illegal_transition_is_reported(board, store, new_order, notes):
    order = store.create(new_order())
    assert board.set_status(order.id, "Delivered") is None
    assert notes == ["Cannot change status from Pending to Delivered"]
    assert store.get(order.id).status == OrderStatus.PENDING


def test_transport_errors_are_reported(unreachable_api, notes):
    board = AdminBoard(unreachable_api, notify=notes.append)
    assert board.refresh() == []
    assert board.set_status(1, "Confirmed") is None
    assert notes == ["Orders could not be loaded.", "Status of order 1 could not be updated."]


def test_server_error_is_reported(notes):
    def handler(request):
        return httpx.Response(500, json={"error": "Order could not be saved"})

    http_client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://storefront.test")
    board = AdminBoard(StorefrontApiClient(http_client=http_client), notify=notes.append)
    assert board.set_status(7, "Cancelled") is None
    assert notes == ["Status of order 7 could not be updated."]


def test_status_choices_follow_lifecycle(store, new_order):
    order = store.create(new_order())
    assert AdminBoard.status_choices(order) == [OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.CANCELLED]


def test_delivery_label(store, new_order):
    assert delivery_label(store.create(new_order())) == "Dhaka"
    assert delivery_label(store.create(new_order(deliveryArea="outside"))) == "Outside Dhaka"
