"""Rendering helpers for the CalcHub lists."""

from calchub.widgets.listing import (
    FAVORITE_ICON,
    NOT_FAVORITE_ICON,
    escape_rich_text,
    highlight_range,
    render_calculator_option,
    render_category_option,
    render_search_result,
    render_section_option,
)

__all__ = [
    "FAVORITE_ICON",
    "NOT_FAVORITE_ICON",
    "escape_rich_text",
    "highlight_range",
    "render_calculator_option",
    "render_category_option",
    "render_search_result",
    "render_section_option",
]
