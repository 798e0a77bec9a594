"""List rendering helpers for calculators, sections, and search results."""

from __future__ import annotations

from rich.markup import escape as escape_markup

from calchub.models import Calculator, Category, MatchRange, SearchResult
from calchub.themes import THEME_COLORS

FAVORITE_ICON = "★"
NOT_FAVORITE_ICON = "☆"


def escape_rich_text(text: str) -> str:
    """Escape text for safe Rich markup rendering."""
    return escape_markup(text) if text else ""


def highlight_range(text: str, start: int, length: int, color: str) -> str:
    """Return escaped markup with ``text[start:start + length]`` emphasized."""
    if length <= 0 or start < 0 or start >= len(text):
        return escape_rich_text(text)
    end = min(len(text), start + length)
    return (
        escape_rich_text(text[:start])
        + f"[bold {color}]"
        + escape_rich_text(text[start:end])
        + "[/]"
        + escape_rich_text(text[end:])
    )


def _complexity_badge(calculator: Calculator) -> str:
    if calculator.complexity == "advanced":
        return f"[{THEME_COLORS['purple']}]advanced[/]"
    return f"[{THEME_COLORS['muted']}]simple[/]"


def render_calculator_option(
    calculator: Calculator,
    *,
    favorite: bool = False,
    title_range: MatchRange | None = None,
    show_category: bool = False,
) -> str:
    """Build the two-line markup for one calculator row."""
    star_color = THEME_COLORS["yellow"] if favorite else THEME_COLORS["muted"]
    star = f"[{star_color}]{FAVORITE_ICON if favorite else NOT_FAVORITE_ICON}[/]"
    if title_range is not None:
        title = highlight_range(
            calculator.title, title_range.start, title_range.length, THEME_COLORS["accent"]
        )
    else:
        title = escape_rich_text(calculator.title)
    meta_parts = [f"[{THEME_COLORS['muted']}]{escape_rich_text(calculator.description)}[/]"]
    if show_category:
        meta_parts.insert(
            0, f"[{THEME_COLORS['accent_alt']}]{escape_rich_text(calculator.category_title)}[/]"
        )
    return f"{star} [bold]{title}[/]  {_complexity_badge(calculator)}\n  " + " · ".join(
        meta_parts
    )


def render_search_result(result: SearchResult, *, favorite: bool = False) -> str:
    """Render a search hit, emphasizing the matched part of the title."""
    title_range = next((r for r in result.matched_ranges if r.field == "title"), None)
    return render_calculator_option(
        result.calculator,
        favorite=favorite,
        title_range=title_range,
        show_category=True,
    )


def render_section_option(label: str, count: int, icon: str, color: str) -> str:
    """Render one entry of the section (category) list."""
    return f"[{color}]{escape_rich_text(icon)}[/] {escape_rich_text(label)} [dim]({count})[/]"


def render_category_option(category: Category) -> str:
    return render_section_option(
        category.title, len(category.calculators), category.icon, category.color
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
