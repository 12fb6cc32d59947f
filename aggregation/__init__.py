"""
Aggregation engine exports.
"""

from aggregation.aggregates import avg, count, count_distinct, count_where, max_, min_, stddev, sum_
from aggregation.diagnostics import Diagnostics
from aggregation.errors import AggregationError, EmptyPartitionError, MissingFieldError
from aggregation.grouping import Partition, group, index_by
from aggregation.ladders import (
    CUSTOMER_SEGMENT,
    PERFORMANCE_CATEGORY,
    TENURE_BRACKET,
    TURNOVER_RISK,
    Rung,
    ThresholdLadder,
    classify_trend,
)
from aggregation.metrics import (
    format_pct,
    growth_delta,
    growth_pct,
    margin_pct,
    percentage,
    round_half_up,
    safe_ratio,
)
from aggregation.ordering import OrderBy, asc, desc, sort_rows, top_k
from aggregation.record import Record
from aggregation.window import Lag, Rank, RowNumber, WindowSpec, apply_window, latest, over, rank_values

__all__ = [
    "Record",
    "Partition",
    "Diagnostics",
    "group",
    "index_by",
    "count",
    "count_where",
    "count_distinct",
    "sum_",
    "avg",
    "min_",
    "max_",
    "stddev",
    "Lag",
    "RowNumber",
    "Rank",
    "WindowSpec",
    "apply_window",
    "over",
    "rank_values",
    "latest",
    "OrderBy",
    "asc",
    "desc",
    "sort_rows",
    "top_k",
    "safe_ratio",
    "growth_delta",
    "growth_pct",
    "margin_pct",
    "percentage",
    "round_half_up",
    "format_pct",
    "Rung",
    "ThresholdLadder",
    "CUSTOMER_SEGMENT",
    "TURNOVER_RISK",
    "TENURE_BRACKET",
    "PERFORMANCE_CATEGORY",
    "classify_trend",
    "AggregationError",
    "MissingFieldError",
    "EmptyPartitionError",
]
