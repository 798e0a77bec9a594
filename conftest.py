"""Shared test fixtures for CalcHub tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from calchub.catalog import Catalog, build_category
from calchub.config import MemoryStorage
from calchub.models import Calculator
from calchub.themes import DARK_THEME, THEME_COLORS

# ── Module-level dict isolation ──────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_theme_colors():
    """Restore THEME_COLORS after each test.

    The app's theme display swaps this palette in place. Without this fixture
    a test that cycles to light or cyber would leak colors into later tests.
    """
    yield
    THEME_COLORS.clear()
    THEME_COLORS.update(DARK_THEME)


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_calculator():
    """Factory fixture for creating Calculator instances with sensible defaults."""

    def _make(
        id: str = "tip",
        title: str = "Tip Calculator",
        description: str = "Split the bill and tip",
        keywords: Sequence[str] = ("tip", "gratuity"),
        category_id: str = "everyday",
        category_title: str = "Everyday",
        complexity: str = "simple",
    ) -> Calculator:
        return Calculator(
            id=id,
            title=title,
            description=description,
            keywords=tuple(keywords),
            category_id=category_id,
            category_title=category_title,
            complexity=complexity,
        )

    return _make


@pytest.fixture
def make_catalog():
    """Factory fixture for small catalogs.

    Takes ``{category_title: [(id, title, description, keywords), ...]}``;
    category ids are the lowercased first word of the title.
    """

    def _make(spec: dict[str, list[tuple[str, str, str, Sequence[str]]]]) -> Catalog:
        categories = []
        for title, rows in spec.items():
            category_id = title.split()[0].lower()
            categories.append(
                build_category(
                    category_id,
                    title,
                    f"{title} calculators",
                    "#66d9ef",
                    "#",
                    [(cid, ctitle, desc, list(kws), "simple") for cid, ctitle, desc, kws in rows],
                )
            )
        return Catalog(categories)

    return _make


@pytest.fixture
def small_catalog(make_catalog):
    """Three categories, seven calculators: enough for ranking and section tests."""
    return make_catalog(
        {
            "Finance": [
                ("loan_emi", "Loan EMI", "Monthly installment for a loan", ["emi", "loan"]),
                ("tip", "Tip Calculator", "Split the bill and tip", ["tip", "gratuity"]),
                ("roi", "ROI Calculator", "Return on investment", ["roi", "investment"]),
            ],
            "Health Fitness": [
                ("bmi", "BMI Calculator", "Body mass index", ["bmi", "weight"]),
                ("water", "Water Intake", "Daily hydration target", ["water", "hydration"]),
            ],
            "Developer Tools": [
                ("subnet", "Subnet Calculator", "CIDR and IP ranges", ["subnet", "cidr"]),
                ("hash", "Hash Generator", "MD5 and SHA digests", ["hash", "sha256"]),
            ],
        }
    )


@pytest.fixture
def memory_storage():
    """Factory fixture for MemoryStorage with optional initial slots."""

    def _make(initial: dict[str, str] | None = None, *, fail_writes: bool = False):
        return MemoryStorage(initial, fail_writes=fail_writes)

    return _make
