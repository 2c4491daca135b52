"""Offset pagination over already-filtered, already-sorted result lists."""

import math
from dataclasses import dataclass, field
from typing import Any

from protean.exceptions import ValidationError

MAX_PAGE_SIZE = 100


@dataclass(slots=True)
class Page:
    items: list[Any] = field(default_factory=list)
    current_page: int = 1
    items_per_page: int = 10
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.items_per_page) if self.total_items else 0

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1

    def pagination(self) -> dict:
        return {
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "total_items": self.total_items,
            "items_per_page": self.items_per_page,
            "has_next_page": self.has_next_page,
            "has_prev_page": self.has_prev_page,
        }


def paginate(items: list[Any], page: int = 1, limit: int = 10) -> Page:
    if page < 1:
        raise ValidationError({"page": ["Page must be at least 1"]})
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError({"limit": [f"Limit must be between 1 and {MAX_PAGE_SIZE}"]})

    start = (page - 1) * limit
    return Page(
        items=items[start : start + limit],
        current_page=page,
        items_per_page=limit,
        total_items=len(items),
    )
