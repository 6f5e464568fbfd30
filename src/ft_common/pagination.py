"""Offset pagination shared by list endpoints."""

from pydantic import BaseModel


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def from_counts(cls, page: int, limit: int, total_items: int) -> "Pagination":
        total_pages = (total_items + limit - 1) // limit if total_items else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total_items,
            items_per_page=limit,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def like_pattern(term: str) -> str:
    """Wrap a search term for ILIKE, escaping its wildcard characters."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
