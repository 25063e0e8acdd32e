# Overview: Line-item revenue attribution and dimension rollups for a product scope.

"""
Revenue Attribution

An order may hold lines from several owners. A scope sees only the lines
whose product id it contains: the order counts once for that scope, and only
the in-scope line value is added. The same order can therefore appear in the
totals of several disjoint scopes, each with its own slice.

Values are line-item derived (quantity * unit price) and never read the
order's stored grand total, which also carries tax and shipping.

All functions here are pure over the orders passed in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from insights.services.scope_service import is_global


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderSlice:
    order_id: int
    revenue_cents: int
    quantity: int
    touched: bool


@dataclass(frozen=True)
class Attribution:
    order_count: int = 0
    revenue_cents: int = 0
    per_order: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class RollupRow:
    key: str
    total_cents: int
    order_count: int


def line_in_scope(line, scope, known_product_ids=None) -> bool:
    if is_global(scope):
        return True
    if known_product_ids is not None and line.product_id not in known_product_ids:
        return False
    return line.product_id in scope


def log_dangling_lines(orders: Iterable, scope, known_product_ids=None) -> int:
    """
    Warn once per (order, product) pair whose product no longer exists.

    Lines like these are skipped by every set-scope pass; call this once per
    loaded order collection. Returns the number of distinct pairs found.
    """
    if is_global(scope) or known_product_ids is None:
        return 0

    seen = set()
    for order in orders:
        for line in order.lines:
            key = (order.id, line.product_id)
            if line.product_id in known_product_ids or key in seen:
                continue
            seen.add(key)
            logger.warning(
                "Skipping dangling line reference: order_id=%s product_id=%s",
                order.id, line.product_id,
            )
    return len(seen)


def order_slice(order, scope, known_product_ids=None) -> OrderSlice:
    """In-scope revenue, quantity and touched flag for one order."""
    revenue = 0
    quantity = 0
    touched = False
    for line in order.lines:
        if not line_in_scope(line, scope, known_product_ids):
            continue
        revenue += line.quantity * line.unit_price_cents
        quantity += line.quantity
        touched = True

    return OrderSlice(order_id=order.id, revenue_cents=revenue, quantity=quantity, touched=touched)


def touched_slices(orders: Iterable, scope, known_product_ids=None):
    """Yield (order, slice) for every order with at least one in-scope line."""
    for order in orders:
        part = order_slice(order, scope, known_product_ids)
        if part.touched:
            yield order, part


def attribute(orders: Iterable, scope, known_product_ids=None) -> Attribution:
    """
    Scoped order count and revenue.

    An order counts once if any of its lines is in scope. Orders without
    lines contribute nothing, including under the global scope.
    """
    order_count = 0
    revenue = 0
    per_order: dict[int, int] = {}

    for order, part in touched_slices(orders, scope, known_product_ids):
        order_count += 1
        revenue += part.revenue_cents
        per_order[order.id] = part.revenue_cents

    return Attribution(order_count=order_count, revenue_cents=revenue, per_order=per_order)


def rollup(
    orders: Iterable,
    scope,
    selector: Callable,
    known_product_ids=None,
) -> list[RollupRow]:
    """
    Group scoped revenue by selector(order).

    Each touched order lands under exactly one key. Rows are sorted by total
    descending, then by key.
    """
    totals: dict[str, int] = {}
    counts: dict[str, int] = {}

    for order, part in touched_slices(orders, scope, known_product_ids):
        key = selector(order)
        key = "Unknown" if key in (None, "") else str(key)
        totals[key] = totals.get(key, 0) + part.revenue_cents
        counts[key] = counts.get(key, 0) + 1

    rows = [RollupRow(key=key, total_cents=totals[key], order_count=counts[key]) for key in totals]
    rows.sort(key=lambda row: (-row.total_cents, row.key))
    return rows


def line_rollup(
    orders: Iterable,
    scope,
    selector: Callable,
    known_product_ids=None,
) -> dict[str, dict[str, int]]:
    """
    Group in-scope lines by selector(line), summing quantity and revenue.

    Used for breakdowns that are finer than one order, such as best sellers
    or revenue per owner role.
    """
    groups: dict[str, dict[str, int]] = {}
    for order in orders:
        for line in order.lines:
            if not line_in_scope(line, scope, known_product_ids):
                continue
            key = selector(line)
            bucket = groups.setdefault(key, {"quantity": 0, "revenue_cents": 0})
            bucket["quantity"] += line.quantity
            bucket["revenue_cents"] += line.quantity * line.unit_price_cents
    return groups
