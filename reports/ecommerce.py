"""
reports/ecommerce.py

E-commerce sales reports.

Only orders whose status is "completed" (case-insensitive) contribute to
revenue figures. Money and percentage columns are rounded to two places
on output; ordering, ranking and segmentation use unrounded values.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Any

from aggregation.aggregates import avg, count, count_distinct, sum_
from aggregation.grouping import group, index_by
from aggregation.ladders import CUSTOMER_SEGMENT
from aggregation.metrics import (
    format_pct,
    growth_delta,
    growth_pct,
    margin_pct,
    percentage,
    round_half_up,
    safe_ratio,
)
from aggregation.ordering import asc, desc, sort_rows
from aggregation.record import Record
from aggregation.window import Lag, Rank, RowNumber, over
from reports.base import (
    BaseReport,
    ReportContext,
    Tables,
    days_between,
    full_name,
    lookup_join,
    outer_union,
    status_is,
)

COMPLETED = "completed"

_ORDER_FIELDS = ("order_id", "customer_id", "order_date", "total_amount", "status")
_ITEM_FIELDS = ("order_item_id", "order_id", "product_id", "quantity", "unit_price")
_PRODUCT_FIELDS = ("product_id", "product_name", "category", "cost")
_CUSTOMER_FIELDS = ("customer_id", "first_name", "last_name", "registration_date")


def _completed_orders(tables: Tables) -> list[Record]:
    return [order for order in tables["orders"] if status_is(order, COMPLETED)]


def _month_label(order_date: date | None) -> str | None:
    if order_date is None:
        return None
    return f"{order_date.year:04d}-{order_date.month:02d}"


def _product(value: Any, factor: Any) -> Any:
    if value is None or factor is None:
        return None
    return value * factor


def _completed_lines(tables: Tables, context: ReportContext) -> list[Record]:
    """
    Order lines of completed orders joined to their products.

    Each line carries ``line_revenue`` (quantity * unit_price),
    ``line_cost`` (quantity * cost) and ``line_profit``.
    """
    completed_ids = {order["order_id"] for order in _completed_orders(tables)}
    items = [item for item in tables["order_items"] if item["order_id"] in completed_ids]
    products = index_by(tables["products"], "product_id", context.diagnostics)

    lines: list[Record] = []
    for line in lookup_join(items, products, on="product_id"):
        revenue = _product(line["quantity"], line["unit_price"])
        cost = _product(line["quantity"], line["cost"])
        lines.append(
            line.extend(
                line_revenue=revenue,
                line_cost=cost,
                line_profit=growth_delta(revenue, cost),
            )
        )
    return lines


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class MonthlyRevenueTrendReport(BaseReport):
    """Completed-order revenue per calendar month with month-over-month growth."""

    name = "monthly_revenue_trend"
    title = "Monthly Revenue Trend"
    columns = (
        "month",
        "total_orders",
        "revenue",
        "avg_order_value",
        "revenue_growth",
        "revenue_growth_pct",
    )
    requires = {"orders": _ORDER_FIELDS}

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        monthly = group(
            _completed_orders(tables),
            lambda order: _month_label(order.require("order_date")),
            context.diagnostics,
        )
        summaries = [
            Record(
                month=key[0],
                total_orders=count(partition, "order_id"),
                revenue=sum_(partition, "total_amount"),
                avg_order_value=avg(partition, "total_amount"),
            )
            for key, partition in monthly.items()
        ]
        trend = over(
            summaries,
            order_by="month",
            columns={"previous_revenue": Lag("revenue")},
        )
        return [
            Record(
                month=row["month"],
                total_orders=row["total_orders"],
                revenue=round_half_up(row["revenue"]),
                avg_order_value=round_half_up(row["avg_order_value"]),
                revenue_growth=round_half_up(growth_delta(row["revenue"], row["previous_revenue"])),
                revenue_growth_pct=format_pct(growth_pct(row["revenue"], row["previous_revenue"])),
            )
            for row in trend
        ]


class TopProductsReport(BaseReport):
    """Best-selling products by completed-order revenue."""

    name = "top_products"
    title = "Top Performing Products by Revenue"
    columns = (
        "product_name",
        "category",
        "units_sold",
        "total_revenue",
        "profit",
        "profit_margin_percent",
    )
    requires = {
        "orders": _ORDER_FIELDS,
        "order_items": _ITEM_FIELDS,
        "products": _PRODUCT_FIELDS,
    }

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        by_product = group(_completed_lines(tables, context), "product_id", context.diagnostics)
        totals = []
        for (product_id,), partition in by_product.items():
            first = partition.rows[0]
            revenue = sum_(partition, "line_revenue")
            profit = sum_(partition, "line_profit")
            totals.append(
                Record(
                    product_id=product_id,
                    product_name=first["product_name"],
                    category=first["category"],
                    units_sold=sum_(partition, "quantity"),
                    total_revenue=revenue,
                    profit=profit,
                    profit_margin_percent=percentage(profit, revenue),
                )
            )

        top = sort_rows(
            totals,
            [desc("total_revenue"), asc("product_name"), asc("product_id")],
            limit=context.settings.top_products_limit,
        )
        return [
            row.extend(
                total_revenue=round_half_up(row["total_revenue"]),
                profit=round_half_up(row["profit"]),
                profit_margin_percent=round_half_up(row["profit_margin_percent"]),
            )
            for row in top
        ]


def _customer_values(tables: Tables, context: ReportContext) -> list[Record]:
    """
    One row per customer with completed-order aggregates and segment.

    Customers without completed orders are kept with zero orders and NULL
    money aggregates.
    """
    customers = tables["customers"]
    by_customer = group(_completed_orders(tables), "customer_id", context.diagnostics)

    rows: list[Record] = []
    candidate_keys = [(customer["customer_id"],) for customer in customers]
    for customer, (_, partition) in zip(customers, outer_union(candidate_keys, by_customer)):
        total_orders = count(partition, "order_id") if partition else 0
        rows.append(
            Record(
                customer_id=customer["customer_id"],
                customer_name=full_name(customer["first_name"], customer["last_name"]),
                registration_date=customer["registration_date"],
                total_orders=total_orders,
                lifetime_value=sum_(partition, "total_amount") if partition else None,
                avg_order_value=avg(partition, "total_amount") if partition else None,
                days_since_registration=days_between(customer["registration_date"], context.as_of),
                customer_segment=CUSTOMER_SEGMENT.classify(total_orders),
            )
        )
    return rows


class CustomerLifetimeValueReport(BaseReport):
    """Per-customer lifetime value and loyalty segment."""

    name = "customer_lifetime_value"
    title = "Customer Lifetime Value Analysis"
    columns = (
        "customer_id",
        "customer_name",
        "registration_date",
        "total_orders",
        "lifetime_value",
        "avg_order_value",
        "days_since_registration",
        "customer_segment",
    )
    requires = {"customers": _CUSTOMER_FIELDS, "orders": _ORDER_FIELDS}

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        ordered = sort_rows(
            _customer_values(tables, context),
            [desc("lifetime_value"), asc("customer_id")],
        )
        return [
            row.extend(
                lifetime_value=round_half_up(row["lifetime_value"]),
                avg_order_value=round_half_up(row["avg_order_value"]),
            )
            for row in ordered
        ]


class CustomerSegmentSummaryReport(BaseReport):
    """Customer counts per loyalty segment, most loyal first."""

    name = "customer_segment_summary"
    title = "Customer Segment Summary"
    columns = ("customer_segment", "customer_count")
    requires = CustomerLifetimeValueReport.requires

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        segments = group(_customer_values(tables, context), "customer_segment", context.diagnostics)
        rows = [
            Record(customer_segment=segment, customer_count=count(partition))
            for (segment,), partition in segments.items()
        ]
        return sort_rows(
            rows,
            [asc(lambda row: CUSTOMER_SEGMENT.ordinal(row["customer_segment"]))],
        )


class CategoryPerformanceReport(BaseReport):
    """Revenue, profit and revenue rank per product category."""

    name = "category_performance"
    title = "Product Category Performance"
    columns = (
        "category",
        "product_count",
        "units_sold",
        "revenue",
        "profit",
        "profit_margin",
        "revenue_rank",
    )
    requires = TopProductsReport.requires

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        by_category = group(_completed_lines(tables, context), "category", context.diagnostics)
        metrics = []
        for (category,), partition in by_category.items():
            revenue = sum_(partition, "line_revenue")
            total_cost = sum_(partition, "line_cost")
            metrics.append(
                Record(
                    category=category,
                    product_count=count_distinct(partition, "product_id"),
                    units_sold=sum_(partition, "quantity"),
                    revenue=revenue,
                    profit=growth_delta(revenue, total_cost),
                    profit_margin=margin_pct(revenue, total_cost),
                )
            )

        ranked = over(metrics, columns={"revenue_rank": Rank("revenue", descending=True)})
        ordered = sort_rows(ranked, [desc("revenue"), asc("category")])
        return [
            row.extend(
                revenue=round_half_up(row["revenue"]),
                profit=round_half_up(row["profit"]),
                profit_margin=round_half_up(row["profit_margin"]),
            )
            for row in ordered
        ]


class CustomerRetentionReport(BaseReport):
    """
    Repeat-purchase behaviour across each customer's first orders.

    ``avg_days_between_orders`` is the exact mean of the day gaps rounded
    half-up to two places, not an integer-truncated average: gaps of 1 and
    2 days give 1.50.
    """

    name = "customer_retention"
    title = "Customer Retention Analysis"
    columns = ("order_number", "customer_count", "avg_days_between_orders")
    requires = {"orders": _ORDER_FIELDS}

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        sequenced = over(
            _completed_orders(tables),
            partition_by="customer_id",
            order_by="order_date",
            columns={
                "order_number": RowNumber(),
                "previous_order_date": Lag("order_date"),
            },
            diagnostics=context.diagnostics,
        )
        limit = context.settings.retention_max_order_number
        early = [
            row.extend(days_between_orders=days_between(row["previous_order_date"], row["order_date"]))
            for row in sequenced
            if row["order_number"] <= limit
        ]

        rows = [
            Record(
                order_number=order_number,
                customer_count=count(partition),
                avg_days_between_orders=round_half_up(avg(partition, "days_between_orders")),
            )
            for (order_number,), partition in group(early, "order_number").items()
        ]
        return sort_rows(rows, [asc("order_number")])


class SeasonalPatternReport(BaseReport):
    """Completed-order volume and revenue per calendar month across years."""

    name = "seasonal_pattern"
    title = "Seasonal Sales Pattern"
    columns = ("month", "month_name", "total_orders", "revenue", "avg_order_value")
    requires = {"orders": _ORDER_FIELDS}

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        by_month = group(
            _completed_orders(tables),
            lambda order: order.require("order_date").month if order["order_date"] else None,
            context.diagnostics,
        )
        rows = [
            Record(
                month=month,
                month_name=calendar.month_name[month] if month else None,
                total_orders=count(partition, "order_id"),
                revenue=round_half_up(sum_(partition, "total_amount")),
                avg_order_value=round_half_up(avg(partition, "total_amount")),
            )
            for (month,), partition in by_month.items()
        ]
        return sort_rows(rows, [asc("month")])


class GeographicDistributionReport(BaseReport):
    """Completed-order revenue per state and country."""

    name = "geographic_distribution"
    title = "Geographic Sales Distribution"
    columns = (
        "state",
        "country",
        "customer_count",
        "total_orders",
        "revenue",
        "avg_order_value",
        "revenue_per_customer",
    )
    requires = {
        "customers": ("customer_id", "state", "country"),
        "orders": _ORDER_FIELDS,
    }

    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        customers = index_by(tables["customers"], "customer_id", context.diagnostics)
        located = lookup_join(_completed_orders(tables), customers, on="customer_id")
        by_region = group(located, ("state", "country"), context.diagnostics)

        rows = []
        for (state, country), partition in by_region.items():
            customer_count = count_distinct(partition, "customer_id")
            revenue = sum_(partition, "total_amount")
            rows.append(
                Record(
                    state=state,
                    country=country,
                    customer_count=customer_count,
                    total_orders=count(partition, "order_id"),
                    revenue=revenue,
                    avg_order_value=avg(partition, "total_amount"),
                    revenue_per_customer=safe_ratio(revenue, customer_count),
                )
            )

        ordered = sort_rows(rows, [desc("revenue"), asc("state"), asc("country")])
        return [
            row.extend(
                revenue=round_half_up(row["revenue"]),
                avg_order_value=round_half_up(row["avg_order_value"]),
                revenue_per_customer=round_half_up(row["revenue_per_customer"]),
            )
            for row in ordered
        ]


ECOMMERCE_REPORTS: tuple[BaseReport, ...] = (
    MonthlyRevenueTrendReport(),
    TopProductsReport(),
    CustomerLifetimeValueReport(),
    CustomerSegmentSummaryReport(),
    CategoryPerformanceReport(),
    CustomerRetentionReport(),
    SeasonalPatternReport(),
    GeographicDistributionReport(),
)
