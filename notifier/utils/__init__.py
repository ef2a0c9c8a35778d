"""List helpers shared by the API and the CLI."""

from .listing import Page, count_by, filter_by_field, filter_by_text, get_field, paginate

__all__ = [
    "Page",
    "count_by",
    "filter_by_field",
    "filter_by_text",
    "get_field",
    "paginate",
]
