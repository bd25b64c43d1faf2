"""Pagination helpers for list endpoints."""

from dataclasses import dataclass

from fastapi import Query
from sqlalchemy.orm import Query as SQLAlchemyQuery

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


@dataclass
class PaginationParams:
    """Pagination parameters from query string."""
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def pages_for(self, total: int) -> int:
        if self.per_page <= 0:
            return 0
        return (total + self.per_page - 1) // self.per_page


def get_pagination(
    page: int = Query(DEFAULT_PAGE, ge=1, description="Page number (1-indexed)"),
    per_page: int = Query(
        DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, description=f"Items per page (max {MAX_PER_PAGE})"
    ),
) -> PaginationParams:
    """
    Pagination dependency.

    Usage:
        @router.get("/items")
        def list_items(pagination: PaginationParams = Depends(get_pagination)):
            ...
    """
    return PaginationParams(page=page, per_page=per_page)


def paginate_query(query: SQLAlchemyQuery, pagination: PaginationParams) -> tuple[list, int]:
    """
    Apply pagination to a SQLAlchemy query.

    Returns:
        (items, total_count)
    """
    total = query.order_by(None).count()
    items = query.offset(pagination.offset).limit(pagination.per_page).all()
    return items, total
