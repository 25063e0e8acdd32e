# Overview: Dashboard read operations; overview and trend statistics for a principal.

"""
Dashboard Statistics

Every request runs the same pipeline:
    permission gate -> hierarchy scope -> product scope -> attribution

The hierarchy index and scopes are built fresh per call and passed down, so
product counts and revenue are always computed against the same scope.
Nothing is cached between requests.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select

from insights.extensions import db
from insights.models import Order, OrderLine, Product, User
from insights.permissions import ROLE_NAMES, TOP_LEVEL_ROLE
from insights.services.attribution_service import (
    attribute,
    line_rollup,
    log_dangling_lines,
    rollup,
    touched_slices,
)
from insights.services.calendar_service import (
    PERIOD_DEFAULT,
    available_years,
    buckets,
    current_year,
    fill_buckets,
    normalize_period,
    rolling_buckets,
    window,
)
from insights.services.hierarchy_service import load_hierarchy
from insights.services.permission_service import require_permission
from insights.services.scope_service import (
    ALL,
    ALL_ITEMS,
    count_products,
    is_global,
    known_product_ids,
    product_ids_owned_by,
    scoped_user_ids,
)
from insights.time_utils import to_utc_z, utcnow


REPORT_PERMISSION = "report_view"

GEO_FIELDS = {
    "country": "shipping_country",
    "state": "shipping_state",
    "city": "shipping_city",
}


class DashboardContext:
    """Scopes resolved once for a single dashboard request."""

    def __init__(self, user: User):
        self.user = user
        if user.role == TOP_LEVEL_ROLE:
            # Global scope counts every line, dangling ones included
            self.index = None
            self.user_scope = ALL
            self.product_scope = ALL_ITEMS
            self.known_ids = None
        else:
            self.index = load_hierarchy()
            self.user_scope = scoped_user_ids(user, self.index)
            self.product_scope = product_ids_owned_by(self.user_scope)
            self.known_ids = known_product_ids()

    @property
    def is_global(self) -> bool:
        return is_global(self.user_scope)

    def managed_user_ids(self):
        """Principals counted on the dashboard: descendants only, never self."""
        if self.is_global:
            return self.user_scope
        return self.user_scope - {self.user.id}


def _load_orders(ctx: DashboardContext) -> list[Order]:
    query = db.session.query(Order)
    if not ctx.is_global:
        if not ctx.product_scope:
            return []
        touching = select(OrderLine.order_id).where(
            OrderLine.product_id.in_(sorted(ctx.product_scope))
        )
        query = query.filter(Order.id.in_(touching))
    return query.order_by(Order.created_at.asc(), Order.id.asc()).all()


def _user_counts(ctx: DashboardContext) -> dict:
    query = db.session.query(User.role).filter(User.deleted_at.is_(None))
    if not ctx.is_global:
        ids = ctx.managed_user_ids()
        if not ids:
            return {"total": 0, **{role: 0 for role in ROLE_NAMES if role != TOP_LEVEL_ROLE}}
        query = query.filter(User.id.in_(sorted(ids)))

    roles = [row.role for row in query.all()]
    counts = {"total": len(roles)}
    for role in ROLE_NAMES:
        if role == TOP_LEVEL_ROLE:
            continue
        counts[role] = sum(1 for r in roles if r == role)
    return counts


def _resolve_year(year: int | None, as_of: datetime) -> int:
    return as_of.year if year is None else int(year)


def _scoped_years(ctx: DashboardContext, orders) -> set[int]:
    return {order.created_at.year for order, _ in touched_slices(orders, ctx.product_scope, ctx.known_ids)}


def _recent_orders(ctx: DashboardContext, orders, limit: int) -> list[dict]:
    touched = list(touched_slices(orders, ctx.product_scope, ctx.known_ids))
    touched.sort(key=lambda pair: (pair[0].created_at, pair[0].id), reverse=True)

    out = []
    for order, part in touched[:limit]:
        buyer = order.buyer
        out.append({
            "id": order.id,
            "created_at": to_utc_z(order.created_at),
            "status": order.status,
            "amount_cents": part.revenue_cents,
            "buyer": {
                "id": buyer.id,
                "name": buyer.name,
                "email": buyer.email,
            } if buyer else None,
        })
    return out


def _status_counts(ctx: DashboardContext, orders) -> list[dict]:
    counts: dict[str, int] = {}
    for order, _ in touched_slices(orders, ctx.product_scope, ctx.known_ids):
        counts[order.status] = counts.get(order.status, 0) + 1
    return [
        {"name": status, "value": count}
        for status, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def _geo_stats(ctx: DashboardContext, orders) -> dict:
    out = {}
    for dimension, column in GEO_FIELDS.items():
        rows = rollup(orders, ctx.product_scope, lambda order, c=column: getattr(order, c), ctx.known_ids)
        out[dimension] = [
            {"name": row.key, "value_cents": row.total_cents, "count": row.order_count}
            for row in rows
        ]
    return out


def overview_stats(
    user: User,
    year: int | None = None,
    as_of: datetime | None = None,
    *,
    recent_limit: int = 5,
) -> dict:
    """
    GetOverviewStats: scoped counts, revenue and breakdowns.

    Totals, status, geo and recent orders cover every scoped order.
    revenue_data is the default calendar view of the selected year.
    """
    require_permission(user, REPORT_PERMISSION, resource="dashboard.overview")

    as_of = as_of or utcnow()
    selected_year = _resolve_year(year, as_of)
    ctx = DashboardContext(user)

    orders = _load_orders(ctx)
    log_dangling_lines(orders, ctx.product_scope, ctx.known_ids)
    totals = attribute(orders, ctx.product_scope, ctx.known_ids)

    bucket_list = buckets(selected_year, PERIOD_DEFAULT, as_of)
    revenue_data = fill_buckets(bucket_list, orders, ctx.product_scope, ctx.known_ids)

    return {
        "users": _user_counts(ctx),
        "products": count_products(ctx.product_scope),
        "orders": {
            "total": totals.order_count,
            "total_amount_cents": totals.revenue_cents,
        },
        "revenue_data": [b.to_dict() for b in revenue_data],
        "status_data": _status_counts(ctx, orders),
        "recent_orders": _recent_orders(ctx, orders, recent_limit),
        "geo_stats": _geo_stats(ctx, orders),
        "available_years": available_years(_scoped_years(ctx, orders), as_of),
        "selected_year": selected_year,
    }


def _top_products(ctx: DashboardContext, orders, limit: int) -> list[dict]:
    groups = line_rollup(orders, ctx.product_scope, lambda line: line.product_id, ctx.known_ids)
    if not groups:
        return []

    names = {}
    owners = {}
    for product in db.session.query(Product).filter(Product.id.in_(sorted(groups))).all():
        names[product.id] = product.name
        owners[product.id] = product.owner_user_id

    # Fall back to the name captured on the line for items no longer in the catalog
    for order in orders:
        for line in order.lines:
            names.setdefault(line.product_id, line.name)

    ranked = sorted(groups.items(), key=lambda item: (-item[1]["quantity"], item[0]))
    return [
        {
            "product_id": product_id,
            "name": names.get(product_id, ""),
            "owner_user_id": owners.get(product_id),
            "quantity": totals["quantity"],
            "revenue_cents": totals["revenue_cents"],
        }
        for product_id, totals in ranked[:limit]
    ]


def _sales_by_role(ctx: DashboardContext, orders) -> list[dict]:
    owner_roles = dict(
        db.session.query(Product.id, User.role).join(User, User.id == Product.owner_user_id).all()
    )
    groups = line_rollup(
        orders,
        ctx.product_scope,
        lambda line: owner_roles.get(line.product_id),
        ctx.known_ids,
    )
    # Lines whose product no longer exists have no owner role
    groups.pop(None, None)
    return [
        {"name": role, "value_cents": totals["revenue_cents"]}
        for role, totals in sorted(groups.items(), key=lambda item: (-item[1]["revenue_cents"], item[0]))
    ]


def trend_stats(
    user: User,
    period: str | None = None,
    year: int | None = None,
    as_of: datetime | None = None,
    *,
    top_limit: int = 5,
) -> dict:
    """
    GetTrendStats: bucketed revenue for one period plus product and role breakdowns.

    With a year, buckets follow the calendar rules for that year. Without
    one, the trend is a rolling window ending at as_of and selected_year is
    None. top_products and sales_by_role cover only the window spanned by
    the buckets.
    """
    require_permission(user, REPORT_PERMISSION, resource="dashboard.trends")

    period = normalize_period(period)
    as_of = as_of or utcnow()
    ctx = DashboardContext(user)

    all_orders = _load_orders(ctx)
    log_dangling_lines(all_orders, ctx.product_scope, ctx.known_ids)
    years = _scoped_years(ctx, all_orders)

    if year is None:
        bucket_list = rolling_buckets(period, as_of, first_year=min(years, default=None))
    else:
        bucket_list = buckets(int(year), period, as_of)

    span = window(bucket_list)
    if span is None:
        orders = []
    else:
        orders = [order for order in all_orders if span[0] <= order.created_at < span[1]]

    trend = fill_buckets(bucket_list, orders, ctx.product_scope, ctx.known_ids)

    return {
        "trend": [b.to_dict() for b in trend],
        "top_products": _top_products(ctx, orders, top_limit),
        "sales_by_role": _sales_by_role(ctx, orders),
        "available_years": available_years(years | {current_year(period, as_of)}, as_of),
        "selected_year": None if year is None else int(year),
        "period": period,
    }
