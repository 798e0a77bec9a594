"""Static calculator catalog: categories, calculators, and id lookups."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from calchub.models import COMPLEXITY_LEVELS, Calculator, Category

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when catalog configuration violates an id or field constraint."""


def build_category(
    id: str,
    title: str,
    description: str,
    color: str,
    icon: str,
    calculators: Sequence[tuple[str, str, str, Sequence[str], str]],
) -> Category:
    """Build a Category from ``(id, title, description, keywords, complexity)`` rows.

    Each calculator is stamped with the owning category's id and title so the
    search index can match on the category name without a join.
    """
    calcs = tuple(
        Calculator(
            id=calc_id,
            title=calc_title,
            description=calc_desc,
            keywords=tuple(keywords),
            category_id=id,
            category_title=title,
            complexity=complexity,
        )
        for calc_id, calc_title, calc_desc, keywords, complexity in calculators
    )
    return Category(
        id=id,
        title=title,
        description=description,
        color=color,
        icon=icon,
        calculators=calcs,
    )


class Catalog:
    """Immutable, ordered registry of categories and their calculators."""

    __slots__ = ("_calculators", "_categories", "_calculators_by_id", "_categories_by_id")

    def __init__(self, categories: Iterable[Category]) -> None:
        self._categories: tuple[Category, ...] = tuple(categories)
        self._categories_by_id: dict[str, Category] = {}
        self._calculators_by_id: dict[str, Calculator] = {}
        for category in self._categories:
            if category.id in self._categories_by_id:
                raise CatalogError(f"Duplicate category id: {category.id!r}")
            self._categories_by_id[category.id] = category
            for calc in category.calculators:
                if calc.id in self._calculators_by_id:
                    raise CatalogError(f"Duplicate calculator id: {calc.id!r}")
                if calc.category_id != category.id:
                    raise CatalogError(
                        f"Calculator {calc.id!r} points at category {calc.category_id!r}, "
                        f"but is listed under {category.id!r}"
                    )
                if calc.complexity not in COMPLEXITY_LEVELS:
                    raise CatalogError(
                        f"Calculator {calc.id!r} has unknown complexity {calc.complexity!r}"
                    )
                self._calculators_by_id[calc.id] = calc
        self._calculators: tuple[Calculator, ...] = tuple(self._calculators_by_id.values())

    def list_categories(self) -> tuple[Category, ...]:
        """Return categories in declared order."""
        return self._categories

    def list_all_calculators(self) -> tuple[Calculator, ...]:
        """Return every calculator, category by category, in declared order."""
        return self._calculators

    def get_calculator(self, calculator_id: str) -> Calculator | None:
        return self._calculators_by_id.get(calculator_id)

    def get_category(self, category_id: str) -> Category | None:
        return self._categories_by_id.get(category_id)

    def resolve_ids(self, calculator_ids: Iterable[str]) -> list[Calculator]:
        """Map ids to calculators, preserving order and skipping unknown ids.

        Persisted favorites and recents can outlive catalog entries, so a
        missing id is not an error.
        """
        resolved: list[Calculator] = []
        for calc_id in calculator_ids:
            calc = self._calculators_by_id.get(calc_id)
            if calc is None:
                logger.debug("Skipping stale calculator id %r", calc_id)
                continue
            resolved.append(calc)
        return resolved

    def __contains__(self, calculator_id: object) -> bool:
        return calculator_id in self._calculators_by_id

    def __len__(self) -> int:
        return len(self._calculators)


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    build_category(
        "math",
        "Math & Academic",
        "Algebra, matrices, fractions & more",
        "#66d9ef",
        "∑",
        [
            ("basic_arithmetic", "Basic Arithmetic", "Add, subtract, multiply, divide",
             ["add", "subtract", "multiply", "divide", "basic"], "simple"),
            ("fraction", "Fraction Calculator", "Operations on fractions with simplification",
             ["fraction", "numerator", "denominator", "simplify"], "simple"),
            ("matrix", "Matrix Multiplier", "Multiply 2x2 and 3x3 matrices",
             ["matrix", "linear algebra", "multiply"], "advanced"),
            ("percentage", "Percentage Calculator", "Calculate percentages and changes",
             ["percent", "percentage", "increase", "decrease"], "simple"),
            ("scientific", "Scientific Calculator", "Trigonometry, logarithms, powers",
             ["sin", "cos", "tan", "log", "power", "sqrt"], "advanced"),
            ("rounding", "Rounding", "Round to decimal places or significant figures",
             ["sig fig", "significant figures", "decimal places", "round"], "simple"),
            ("quadratic", "Quadratic Solver", "Roots of ax² + bx + c = 0",
             ["quadratic", "roots", "equation", "discriminant"], "advanced"),
            ("gcd_lcm", "GCD & LCM", "Greatest common divisor and least common multiple",
             ["gcd", "lcm", "divisor", "multiple", "hcf"], "simple"),
        ],
    ),
    build_category(
        "finance",
        "Finance",
        "Loans, investments, taxes",
        "#a6e22e",
        "$",
        [
            ("compound_interest", "Compound Interest", "Calculate compound interest growth",
             ["compound", "interest", "investment", "savings"], "simple"),
            ("simple_interest", "Simple Interest", "Interest on a fixed principal",
             ["simple", "interest", "principal", "rate"], "simple"),
            ("mortgage", "Mortgage / EMI", "Loan payments with amortization schedule",
             ["mortgage", "emi", "loan", "home", "payment"], "advanced"),
            ("loan_emi", "Loan EMI", "Monthly instalment for a loan",
             ["emi", "loan", "instalment", "installment"], "simple"),
            ("tip", "Tip Calculator", "Split bills and calculate tips",
             ["tip", "bill", "split", "restaurant"], "simple"),
            ("currency", "Currency Converter", "Convert between currencies",
             ["currency", "exchange", "forex", "convert"], "simple"),
            ("roi", "ROI Calculator", "Return on investment analysis",
             ["roi", "return", "investment", "profit"], "simple"),
            ("inflation", "Inflation Calculator", "Purchasing power over time",
             ["inflation", "cpi", "purchasing power"], "simple"),
        ],
    ),
    build_category(
        "business",
        "Business & Marketing",
        "Margins, unit economics, ad metrics",
        "#fd971f",
        "▲",
        [
            ("break_even", "Break-Even Point", "Units and revenue needed to cover fixed costs",
             ["profitability", "fixed costs", "contribution margin", "units"], "simple"),
            ("profit_margin", "Profit Margin", "Gross and net margin from cost and price",
             ["margin", "markup", "profit", "gross"], "simple"),
            ("reorder_point", "Reorder Point", "When to reorder stock given lead time",
             ["inventory", "stock", "lead time", "safety stock", "eoq"], "advanced"),
            ("inventory_turnover", "Inventory Turnover", "How often inventory sells through",
             ["inventory", "turnover", "cogs", "days"], "simple"),
            ("roas", "ROAS Calculator", "Return on ad spend",
             ["roas", "ad spend", "advertising", "revenue"], "simple"),
            ("cpa", "CPA Calculator", "Cost per acquisition",
             ["cpa", "acquisition", "cost", "advertising"], "simple"),
            ("breakeven_cpa", "Breakeven CPA", "Maximum CPA before a sale loses money",
             ["cpa", "breakeven", "margin", "advertising"], "advanced"),
            ("ctr", "CTR Calculator", "Click-through rate from impressions",
             ["ctr", "clicks", "impressions", "rate"], "simple"),
        ],
    ),
    build_category(
        "health",
        "Health & Fitness",
        "BMI, TDEE, nutrition tracking",
        "#f92672",
        "♥",
        [
            ("bmi_tdee", "BMI & TDEE", "Body metrics and calorie needs",
             ["bmi", "tdee", "bmr", "calories", "weight", "health"], "simple"),
            ("calories", "Calorie Counter", "Track daily calorie intake",
             ["calorie", "food", "nutrition", "diet"], "simple"),
            ("water_intake", "Water Intake", "Daily water requirement calculator",
             ["water", "hydration", "drink"], "simple"),
            ("body_fat", "Body Fat %", "Estimate body fat percentage",
             ["body fat", "fitness", "composition"], "advanced"),
            ("one_rep_max", "One Rep Max", "Estimate your 1RM from a set",
             ["1rm", "strength", "lifting", "gym"], "simple"),
        ],
    ),
    build_category(
        "developer",
        "Developer Tools",
        "JSON, CSV, networking, encoding",
        "#ae81ff",
        "<>",
        [
            ("json_csv", "JSON ↔ CSV", "Convert between JSON and CSV formats",
             ["json", "csv", "convert", "data", "format"], "advanced"),
            ("subnet", "Subnet Calculator", "CIDR to netmask conversion",
             ["subnet", "cidr", "ip", "network", "netmask"], "advanced"),
            ("base_converter", "Base Converter", "Convert between number bases",
             ["binary", "hex", "decimal", "octal", "base"], "simple"),
            ("unix_timestamp", "Unix Timestamp", "Convert Unix timestamps",
             ["unix", "timestamp", "epoch", "date", "time"], "simple"),
            ("hash_generator", "Hash Generator", "Generate MD5, SHA hashes",
             ["hash", "md5", "sha", "checksum"], "advanced"),
            ("cron_expression", "Cron Expression", "Explain and preview cron schedules",
             ["cron", "schedule", "crontab"], "advanced"),
        ],
    ),
    build_category(
        "photography",
        "Photography",
        "Depth of field, exposure, print sizes",
        "#e6db74",
        "◉",
        [
            ("dof", "Depth of Field", "Calculate DOF and hyperfocal distance",
             ["dof", "depth", "field", "aperture", "focus", "photography"], "advanced"),
            ("exposure", "Exposure Triangle", "Balance ISO, aperture, shutter",
             ["exposure", "iso", "aperture", "shutter"], "advanced"),
            ("print_size", "Print Size", "Calculate print dimensions and DPI",
             ["print", "dpi", "resolution", "size"], "simple"),
            ("aspect_ratio", "Aspect Ratio", "Scale dimensions while keeping proportions",
             ["aspect", "ratio", "resize", "16:9"], "simple"),
        ],
    ),
    build_category(
        "statistics",
        "Statistics",
        "Sample size, probability, analysis",
        "#66d9ef",
        "σ",
        [
            ("sample_size", "Sample Size", "Calculate required sample size",
             ["sample", "size", "margin", "error", "confidence"], "advanced"),
            ("probability", "Probability", "Basic probability calculations",
             ["probability", "odds", "chance", "likelihood"], "simple"),
            ("mean_median", "Mean & Median", "Central tendency measures",
             ["mean", "median", "mode", "average"], "simple"),
            ("std_deviation", "Standard Deviation", "Measure data spread",
             ["standard", "deviation", "variance", "spread"], "advanced"),
        ],
    ),
    build_category(
        "units",
        "Unit Converters",
        "Length, weight, temperature, volume",
        "#a6e22e",
        "⇄",
        [
            ("length", "Length Converter", "Convert between length units",
             ["length", "meter", "feet", "inch", "mile", "km"], "simple"),
            ("weight", "Weight Converter", "Convert between weight units",
             ["weight", "kg", "pound", "ounce", "gram"], "simple"),
            ("temperature", "Temperature Converter", "Celsius, Fahrenheit, Kelvin",
             ["temperature", "celsius", "fahrenheit", "kelvin"], "simple"),
            ("volume", "Volume Converter", "Liters, gallons, cups, ml",
             ["volume", "liter", "gallon", "cup", "ml"], "simple"),
        ],
    ),
    build_category(
        "time",
        "Date & Time",
        "Age, duration, timezone, countdown",
        "#66d9ef",
        "◷",
        [
            ("age", "Age Calculator", "Calculate exact age from birthdate",
             ["age", "birthday", "years", "old"], "simple"),
            ("duration", "Duration Calculator", "Time between two dates",
             ["duration", "days", "between", "dates"], "simple"),
            ("timezone", "Timezone Converter", "Convert times between zones",
             ["timezone", "time", "zone", "convert"], "simple"),
        ],
    ),
    build_category(
        "electrical",
        "Electrical",
        "Ohm's law, power, resistance",
        "#fd971f",
        "ϟ",
        [
            ("ohms_law", "Ohm's Law", "Voltage, current, resistance",
             ["ohm", "voltage", "current", "resistance", "electrical"], "simple"),
            ("power", "Power Calculator", "Calculate electrical power",
             ["power", "watt", "electricity", "energy"], "simple"),
            ("led_resistor", "LED Resistor", "Calculate LED resistor value",
             ["led", "resistor", "circuit", "electronics"], "simple"),
        ],
    ),
    build_category(
        "everyday",
        "Everyday",
        "Discount, fuel, cooking conversions",
        "#a6e22e",
        "%",
        [
            ("discount", "Discount Calculator", "Calculate sale prices and savings",
             ["discount", "sale", "price", "savings", "percent off"], "simple"),
            ("fuel", "Fuel Cost", "Calculate trip fuel costs",
             ["fuel", "gas", "petrol", "mileage", "mpg"], "simple"),
            ("cooking", "Cooking Converter", "Recipe unit conversions",
             ["cooking", "recipe", "cups", "tablespoon", "teaspoon"], "simple"),
            ("paint", "Paint Calculator", "Litres of paint for a room",
             ["paint", "wall", "coverage", "room"], "simple"),
        ],
    ),
)

DEFAULT_CATALOG = Catalog(DEFAULT_CATEGORIES)


__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_CATEGORIES",
    "Catalog",
    "CatalogError",
    "build_category",
]
