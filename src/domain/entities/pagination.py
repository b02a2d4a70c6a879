"""Paged result container."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


def clamp_page_params(page: int, page_size: int, max_page_size: int) -> tuple[int, int]:
    """Clamp page to >= 1 and page size to [1, max_page_size]."""
    return max(page, 1), min(max(page_size, 1), max_page_size)


@dataclass
class PagedResult(Generic[T]):
    """One page of a larger, already filtered and ordered record set."""

    current_page: int
    page_size: int
    total_count: int
    items: list[T] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

