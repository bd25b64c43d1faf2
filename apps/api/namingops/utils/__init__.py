"""Utility modules."""

from namingops.utils.pagination import (
    PaginationParams,
    get_pagination,
    paginate_query,
)

__all__ = [
    "PaginationParams",
    "get_pagination",
    "paginate_query",
]
