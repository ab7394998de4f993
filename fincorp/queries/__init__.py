"""Transaction view package."""

from fincorp.queries.view_filter import (
    describe_filter,
    end_of_day,
    filter_transactions,
    matches_search,
    start_of_day,
)

__all__ = [
    "describe_filter",
    "end_of_day",
    "filter_transactions",
    "matches_search",
    "start_of_day",
]
