CATEGORIES: tuple[str, ...] = (
    "Food",
    "Transportation",
    "Entertainment",
    "Utilities",
    "Healthcare",
    "Shopping",
    "Other",
)

DEFAULT_CATEGORY = "Other"
NO_CATEGORY = "None"

CATEGORY_ICONS: dict[str, str] = {
    "Food": "🍽",
    "Transportation": "🚗",
    "Entertainment": "🎬",
    "Utilities": "💡",
    "Healthcare": "🩺",
    "Shopping": "🛍",
    "Other": "•",
}

CATEGORY_COLORS: dict[str, str] = {
    "Food": "#FF6B6B",
    "Transportation": "#4ECDC4",
    "Entertainment": "#45B7D1",
    "Utilities": "#FFA07A",
    "Healthcare": "#98D8C8",
    "Shopping": "#F7DC6F",
    "Other": "#BB8FCE",
}

FALLBACK_COLOR = "#6C757D"

_LOOKUP = {name.lower(): name for name in CATEGORIES}


def normalize_category(value: str | None) -> str:
    """Map free-form input onto the closed category set. Unknown values become "Other"."""
    if not value or not isinstance(value, str):
        return DEFAULT_CATEGORY
    return _LOOKUP.get(value.strip().lower(), DEFAULT_CATEGORY)


def is_known_category(value: str | None) -> bool:
    return bool(value) and isinstance(value, str) and value.strip().lower() in _LOOKUP


def category_icon(name: str) -> str:
    return CATEGORY_ICONS.get(name, CATEGORY_ICONS[DEFAULT_CATEGORY])


def category_color(name: str) -> str:
    return CATEGORY_COLORS.get(name, FALLBACK_COLOR)


def categories_str() -> str:
    return ", ".join(CATEGORIES)
