"""Filtering, pagination and counting helpers for dashboard lists.

Items may be mappings (e.g. decoded JSON rows) or objects with attributes.
Every helper keeps the original relative order of the items it returns.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence


def get_field(item: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an attribute from an object."""
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def filter_by_text(items: Iterable[Any], query: Optional[str], fields: Sequence[str]) -> List[Any]:
    """Keep items where any of the named fields contains the query.

    Matching is a case-insensitive substring test. A blank query keeps
    everything.

    Example:
        >>> rows = [{"name": "Central School"}, {"name": "Gym"}]
        >>> filter_by_text(rows, "school", ["name"])
        [{'name': 'Central School'}]
    """
    items = list(items)
    needle = (query or "").strip().lower()
    if not needle:
        return items

    matched = []
    for item in items:
        for name in fields:
            value = get_field(item, name)
            if value is not None and needle in str(value).lower():
                matched.append(item)
                break
    return matched


def filter_by_field(items: Iterable[Any], name: str, value: Any) -> List[Any]:
    """Keep items whose field equals value; None or "all" keeps everything."""
    items = list(items)
    if value is None or value == "all":
        return items
    return [item for item in items if get_field(item, name) == value]


@dataclass
class Page:
    """One page of a list.

    Attributes:
        items: Items on this page
        page: 1-based page number
        page_size: Maximum items per page
        total_items: Items across all pages
        total_pages: Number of pages (0 for an empty list)
        start_index: Index of the first item on this page
        end_index: Index one past the last item on this page
    """

    items: List[Any] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total_items: int = 0
    total_pages: int = 0
    start_index: int = 0
    end_index: int = 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def paginate(items: Sequence[Any], page: int = 1, page_size: int = 10) -> Page:
    """Cut the window [(page-1)*page_size, page*page_size) out of items.

    The window is clamped to the list length, so a page past the end is
    empty rather than an error.

    Raises:
        ValueError: If page or page_size is less than 1
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    items = list(items)
    total = len(items)
    start = min((page - 1) * page_size, total)
    end = min(page * page_size, total)

    return Page(
        items=items[start:end],
        page=page,
        page_size=page_size,
        total_items=total,
        total_pages=math.ceil(total / page_size),
        start_index=start,
        end_index=end,
    )


def count_by(items: Iterable[Any], name: str) -> Dict[Any, int]:
    """Count items per value of a field.

    String values are lowercased before counting. Keys appear in the order
    they are first seen; items without the field are not counted.
    """
    counts: Dict[Any, int] = {}
    for item in items:
        value = get_field(item, name)
        if value is None:
            continue
        if isinstance(value, str):
            value = value.lower()
        counts[value] = counts.get(value, 0) + 1
    return counts
