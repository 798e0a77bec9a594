"""Data models and constants for the CalcHub application."""

from __future__ import annotations

from dataclasses import dataclass, field

# Application identity: single source of truth for platformdirs config paths
CONFIG_APP_NAME = "calchub"

# Personalization limits
MAX_RECENT = 8

# Search result cap (the overlay shows one screenful)
SEARCH_RESULT_LIMIT = 8

# Theme ring, in cycling order
THEME_NAMES: tuple[str, ...] = ("dark", "light", "cyber")
DEFAULT_THEME_NAME = "dark"

COMPLEXITY_LEVELS = ("simple", "advanced")

# Persisted slot keys
FAVORITES_KEY = "calchub_favorites"
RECENT_KEY = "calchub_recent"
THEME_KEY = "calc-theme"


@dataclass(frozen=True, slots=True)
class Calculator:
    """A single calculator entry in the catalog."""

    id: str
    title: str
    description: str
    keywords: tuple[str, ...] = ()
    category_id: str = ""
    category_title: str = ""
    complexity: str = "simple"  # "simple" | "advanced"


@dataclass(frozen=True, slots=True)
class Category:
    """A named group of calculators, shown as one section of the directory."""

    id: str
    title: str
    description: str
    color: str
    icon: str
    calculators: tuple[Calculator, ...] = ()


@dataclass(frozen=True, slots=True)
class MatchRange:
    """Span of a field that matched a query.

    For the ``keywords`` field, offsets index into the keywords joined by ``", "``.
    """

    field: str
    start: int
    length: int


@dataclass(frozen=True, slots=True)
class SearchResult:
    """One ranked search hit. Lower score is a better match."""

    calculator: Calculator
    score: float
    matched_ranges: tuple[MatchRange, ...] = field(default_factory=tuple)


__all__ = [
    "COMPLEXITY_LEVELS",
    "CONFIG_APP_NAME",
    "DEFAULT_THEME_NAME",
    "FAVORITES_KEY",
    "MAX_RECENT",
    "RECENT_KEY",
    "SEARCH_RESULT_LIMIT",
    "THEME_KEY",
    "THEME_NAMES",
    "Calculator",
    "Category",
    "MatchRange",
    "SearchResult",
]
