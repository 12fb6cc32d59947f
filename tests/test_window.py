"""
tests/test_window.py

Pytest unit tests for the window engine and ordering helpers.

Coverage
--------
- Lag: NULL on leading rows, previous value otherwise, custom offsets
- RowNumber: restarts per partition, strictly increasing by one
- Rank: shared ranks on ties with gaps afterwards, full-precision compare
- latest(): maximum ordering value, last-ingested tie break, empty input
- Multi-key sort with NULL placement and bounded top-k
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from aggregation.diagnostics import INVALID_WINDOW_KEY, Diagnostics
from aggregation.grouping import Partition
from aggregation.ordering import asc, desc, sort_rows, top_k
from aggregation.record import Record
from aggregation.window import (
    Lag,
    Rank,
    RowNumber,
    WindowSpec,
    apply_window,
    latest,
    over,
    rank_values,
)


@pytest.fixture()
def orders() -> list[Record]:
    return [
        Record(order_id=1, customer_id=7, order_date=date(2023, 3, 1), amount=30),
        Record(order_id=2, customer_id=8, order_date=date(2023, 1, 5), amount=10),
        Record(order_id=3, customer_id=7, order_date=date(2023, 1, 1), amount=10),
        Record(order_id=4, customer_id=7, order_date=date(2023, 2, 1), amount=20),
        Record(order_id=5, customer_id=8, order_date=date(2023, 2, 5), amount=40),
    ]


class TestLag:
    def test_first_row_is_null_then_previous_value(self, orders: list[Record]) -> None:
        rows = over(
            orders,
            partition_by="customer_id",
            order_by="order_date",
            columns={"previous_amount": Lag("amount")},
        )
        by_customer = [(r["customer_id"], r["amount"], r["previous_amount"]) for r in rows]
        assert by_customer == [
            (7, 10, None),
            (7, 20, 10),
            (7, 30, 20),
            (8, 10, None),
            (8, 40, 10),
        ]

    def test_lag_equals_value_at_previous_row(self, orders: list[Record]) -> None:
        rows = over(orders, order_by="order_date", columns={"prev": Lag("order_id")})
        for previous, current in zip(rows, rows[1:]):
            assert current["prev"] == previous["order_id"]
        assert rows[0]["prev"] is None

    def test_offset_two(self) -> None:
        rows = [Record(v=v) for v in (1, 2, 3, 4)]
        assert Lag("v", offset=2).compute(rows) == [None, None, 1, 2]

    def test_invalid_offset_raises(self) -> None:
        with pytest.raises(ValueError):
            Lag("v", offset=0).compute([Record(v=1)])

    def test_single_row_partition(self) -> None:
        pairs = apply_window(
            Partition(key=(1,), rows=(Record(v=5),)),
            WindowSpec(order_by="v"),
            Lag("v"),
        )
        assert pairs == [(Record(v=5), None)]


class TestRowNumber:
    def test_restarts_for_each_partition(self, orders: list[Record]) -> None:
        rows = over(
            orders,
            partition_by="customer_id",
            order_by="order_date",
            columns={"n": RowNumber()},
        )
        assert [(r["customer_id"], r["n"]) for r in rows] == [
            (7, 1), (7, 2), (7, 3), (8, 1), (8, 2),
        ]

    def test_ties_keep_ingestion_order(self) -> None:
        rows = [Record(id=i, d=date(2023, 1, 1)) for i in (3, 1, 2)]
        numbered = over(rows, order_by="d", columns={"n": RowNumber()})
        assert [(r["id"], r["n"]) for r in numbered] == [(3, 1), (1, 2), (2, 3)]

    def test_missing_ordering_field_is_excluded_and_counted(self) -> None:
        diagnostics = Diagnostics()
        rows = [Record(k=1, d=1), Record(k=1), Record(k=1, d=0)]
        numbered = over(
            rows,
            partition_by="k",
            order_by="d",
            columns={"n": RowNumber()},
            diagnostics=diagnostics,
        )
        assert [(r["d"], r["n"]) for r in numbered] == [(0, 1), (1, 2)]
        assert diagnostics.count(INVALID_WINDOW_KEY) == 1


class TestRank:
    def test_ties_share_rank_and_leave_gap(self) -> None:
        assert rank_values([100, 90, 90, 80]) == [1, 2, 2, 4]

    def test_ranks_align_with_input_positions(self) -> None:
        assert rank_values([80, 100, 90]) == [3, 1, 2]

    def test_ascending(self) -> None:
        assert rank_values([3, 1, 1, 2], descending=False) == [4, 1, 1, 3]

    def test_full_precision_comparison(self) -> None:
        values = [Decimal("10.004"), Decimal("10.001")]
        assert rank_values(values) == [1, 2]

    def test_nulls_rank_last_descending(self) -> None:
        assert rank_values([None, 5, 7]) == [3, 2, 1]

    def test_rank_function_over_records(self) -> None:
        rows = [Record(c="A", revenue=1000), Record(c="B", revenue=500)]
        ranked = over(rows, columns={"rank": Rank("revenue")})
        assert [r["rank"] for r in ranked] == [1, 2]

    def test_single_row(self) -> None:
        assert rank_values([42]) == [1]


class TestLatest:
    def test_picks_maximum_ordering_value(self, orders: list[Record]) -> None:
        assert latest(orders, "order_date")["order_id"] == 1

    def test_ties_go_to_last_ingested(self) -> None:
        rows = [
            Record(id=1, d=date(2024, 1, 1)),
            Record(id=2, d=date(2024, 1, 1)),
            Record(id=3, d=date(2023, 1, 1)),
        ]
        assert latest(rows, "d")["id"] == 2

    def test_empty_input_is_none(self) -> None:
        assert latest([], "d") is None

    def test_null_ordering_values_never_win(self) -> None:
        assert latest([Record(id=1, d=None)], "d") is None


class TestOrdering:
    def test_mixed_directions(self) -> None:
        rows = [
            Record(dept="B", salary=10),
            Record(dept="A", salary=10),
            Record(dept="A", salary=30),
        ]
        ordered = sort_rows(rows, [asc("dept"), desc("salary")])
        assert [(r["dept"], r["salary"]) for r in ordered] == [("A", 30), ("A", 10), ("B", 10)]

    def test_nulls_last_when_descending(self) -> None:
        rows = [Record(v=None), Record(v=1), Record(v=2)]
        assert [r["v"] for r in sort_rows(rows, [desc("v")])] == [2, 1, None]

    def test_nulls_first_when_ascending(self) -> None:
        rows = [Record(v=2), Record(v=None)]
        assert [r["v"] for r in sort_rows(rows, [asc("v")])] == [None, 2]

    def test_top_k_matches_full_sort(self) -> None:
        rows = [Record(id=i, v=v) for i, v in enumerate([5, 3, 9, 9, 1, 7])]
        order = [desc("v"), asc("id")]
        assert top_k(rows, order, 3) == sort_rows(rows, order)[:3]

    def test_zero_limit(self) -> None:
        assert sort_rows([Record(v=1)], [asc("v")], limit=0) == []

    def test_limit_keeps_input_order_on_full_ties(self) -> None:
        values = [1, 2, 1, 0, 2, 1, 1, 0, 1, 2, 0, 1]
        rows = [Record(id=i, v=v) for i, v in enumerate(values)]
        expected = [r["id"] for r in sort_rows(rows, [desc("v")])[:8]]
        assert expected == [1, 4, 9, 0, 2, 5, 6, 8]
        assert [r["id"] for r in sort_rows(rows, [desc("v")], limit=8)] == expected

    @pytest.mark.parametrize("limit", [1, 3, 5, 12])
    def test_limit_matches_truncated_full_sort(self, limit: int) -> None:
        rows = [Record(id=i, a=i % 3, b=i % 2) for i in range(12)]
        order = [asc("a"), desc("b")]
        assert sort_rows(rows, order, limit=limit) == sort_rows(rows, order)[:limit]
