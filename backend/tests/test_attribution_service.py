"""
Revenue attribution and rollup tests.

Verifies:
- Mixed-owner orders split between scopes without leakage
- Orders count once per scope
- Global scope is line-item derived, not the stored grand total
- Dangling line references are skipped under a set scope and logged once
- Rollups group by one key per order and sort by value
"""

import logging
from datetime import datetime
from types import SimpleNamespace

import pytest

from insights.services.attribution_service import (
    RollupRow,
    attribute,
    log_dangling_lines,
    order_slice,
    rollup,
)
from insights.services.scope_service import ALL_ITEMS


def _order(order_id, lines, country="India"):
    return SimpleNamespace(
        id=order_id,
        created_at=datetime(2025, 3, 1),
        shipping_country=country,
        lines=[
            SimpleNamespace(order_id=order_id, product_id=pid, quantity=qty, unit_price_cents=price)
            for pid, qty, price in lines
        ],
    )


X_ITEMS = frozenset({1, 2})
Y_ITEMS = frozenset({3})


class TestAttribute:

    def test_non_leakage(self):
        order = _order(10, [(1, 1, 1000), (3, 1, 2000)])

        x = attribute([order], X_ITEMS)
        y = attribute([order], Y_ITEMS)

        assert (x.revenue_cents, x.order_count) == (1000, 1)
        assert (y.revenue_cents, y.order_count) == (2000, 1)
        assert x.revenue_cents + y.revenue_cents == 3000

    def test_counted_once_per_scope(self):
        order = _order(10, [(1, 2, 500), (2, 1, 250)])
        result = attribute([order], X_ITEMS)
        assert result.order_count == 1
        assert result.revenue_cents == 1250
        assert result.per_order == {10: 1250}

    def test_untouched_order_absent(self):
        orders = [_order(1, [(3, 1, 100)]), _order(2, [(1, 1, 100)])]
        result = attribute(orders, X_ITEMS)
        assert result.per_order == {2: 100}

    def test_empty_scope(self):
        result = attribute([_order(1, [(1, 1, 100)])], frozenset())
        assert result.order_count == 0
        assert result.revenue_cents == 0

    def test_global_scope_counts_every_line(self):
        orders = [_order(1, [(1, 1, 100), (3, 2, 50)]), _order(2, [(999, 1, 70)])]
        result = attribute(orders, ALL_ITEMS)
        assert result.order_count == 2
        assert result.revenue_cents == 270

    def test_zero_line_orders_contribute_nothing(self):
        result = attribute([_order(1, [])], ALL_ITEMS)
        assert result.order_count == 0
        assert result.revenue_cents == 0

    def test_idempotent(self):
        orders = [_order(1, [(1, 1, 100), (3, 1, 200)]), _order(2, [(2, 3, 10)])]
        first = attribute(orders, X_ITEMS)
        second = attribute(orders, X_ITEMS)
        assert first == second
        assert len(orders[0].lines) == 2

    def test_dangling_reference_skipped(self):
        order = _order(1, [(1, 1, 100), (77, 1, 900)])
        scope = frozenset({1, 77})

        result = attribute([order], scope, known_product_ids=frozenset({1, 2, 3}))

        assert result.revenue_cents == 100


class TestDanglingLines:

    def test_logged_once_per_pair(self, caplog):
        orders = [_order(1, [(1, 1, 100), (77, 1, 900), (77, 2, 900)]), _order(2, [(77, 1, 900)])]
        known = frozenset({1, 2, 3})

        with caplog.at_level(logging.WARNING, logger="insights.services.attribution_service"):
            found = log_dangling_lines(orders, X_ITEMS, known)
            attribute(orders, X_ITEMS, known)
            rollup(orders, X_ITEMS, lambda order: order.shipping_country, known)

        assert found == 2
        assert caplog.text.count("dangling") == 2

    def test_global_scope_logs_nothing(self, caplog):
        orders = [_order(1, [(77, 1, 900)])]
        with caplog.at_level(logging.WARNING, logger="insights.services.attribution_service"):
            assert log_dangling_lines(orders, ALL_ITEMS, frozenset({1})) == 0
        assert caplog.text == ""


class TestOrderSlice:

    def test_quantity_and_touched(self):
        part = order_slice(_order(5, [(1, 3, 100), (3, 1, 100)]), X_ITEMS)
        assert part.touched
        assert part.quantity == 3
        assert part.revenue_cents == 300

    def test_untouched(self):
        part = order_slice(_order(5, [(3, 1, 100)]), X_ITEMS)
        assert not part.touched
        assert part.revenue_cents == 0


class TestRollup:

    def test_groups_and_sorts(self):
        orders = [
            _order(1, [(1, 1, 100)], country="India"),
            _order(2, [(1, 1, 500)], country="Nepal"),
            _order(3, [(2, 1, 100), (3, 1, 10_000)], country="India"),
        ]

        rows = rollup(orders, X_ITEMS, lambda o: o.shipping_country)

        assert rows == [
            RollupRow(key="Nepal", total_cents=500, order_count=1),
            RollupRow(key="India", total_cents=200, order_count=2),
        ]

    def test_ties_broken_by_key(self):
        orders = [
            _order(1, [(1, 1, 100)], country="Zambia"),
            _order(2, [(1, 1, 100)], country="Austria"),
        ]
        rows = rollup(orders, X_ITEMS, lambda o: o.shipping_country)
        assert [row.key for row in rows] == ["Austria", "Zambia"]

    def test_missing_key(self):
        rows = rollup([_order(1, [(1, 1, 100)], country=None)], X_ITEMS, lambda o: o.shipping_country)
        assert rows[0].key == "Unknown"

    @pytest.mark.parametrize("scope,expected", [(X_ITEMS, 100), (Y_ITEMS, 900)])
    def test_only_in_scope_value(self, scope, expected):
        order = _order(1, [(1, 1, 100), (3, 1, 900)])
        rows = rollup([order], scope, lambda o: o.shipping_country)
        assert rows[0].total_cents == expected
        assert rows[0].order_count == 1
