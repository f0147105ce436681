"""Tests for the order price breakdown."""

import pytest
from storefront_client.pricing import PriceBreakdown, delivery_charge, normalize_quantity, price
from storefront_service.models import DeliveryZone, Product


def _product(offer=850, regular=900):
    return Product(id=1, name="Jersey", regularPrice=regular, offerPrice=offer, image="j.webp")


def test_two_jerseys_inside_dhaka():
    catalog = [_product(offer=850, regular=900), Product(id=2, name="Spain", regularPrice=1100, offerPrice=1050, image="s.webp")]
    assert price(catalog[1], 2, "inside") == PriceBreakdown(subtotal=2100, delivery_charge=70, total=2170)


@pytest.mark.parametrize(
    "zone, charge",
    [
        ("inside", 70),
        ("outside", 130),
        (DeliveryZone.INSIDE, 70),
        (DeliveryZone.OUTSIDE, 130),
        (None, 0),
        ("", 0),
        ("mars", 0),
    ],
)
def test_delivery_charge_depends_only_on_zone(zone, charge):
    assert delivery_charge(zone) == charge
    for quantity in (1, 3):
        assert price(_product(), quantity, zone).delivery_charge == charge


@pytest.mark.parametrize("quantity", [1, 2, 5, 10])
def test_subtotal_is_offer_price_times_quantity(quantity):
    breakdown = price(_product(offer=1050, regular=1100), quantity, "outside")
    assert breakdown.subtotal == 1050 * quantity
    assert breakdown.total == breakdown.subtotal + 130


def test_subtotal_never_decreases_with_quantity():
    subtotals = [price(_product(), q).subtotal for q in range(1, 20)]
    assert subtotals == sorted(subtotals)


@pytest.mark.parametrize(
    "raw, expected",
    [(0, 1), (-4, 1), (None, 1), ("", 1), ("abc", 1), ("3", 3), (7, 7), ("2.5", 2), ("2pcs", 2), (" 4", 4), ("-2", 1), ("x2", 1)],
)
def test_quantity_below_one_or_unparsable_defaults_to_one(raw, expected):
    assert normalize_quantity(raw) == expected


def test_unset_zone_total_is_subtotal():
    breakdown = price(_product(offer=1300, regular=1350), 1)
    assert breakdown == PriceBreakdown(subtotal=1300, delivery_charge=0, total=1300)
