from app.domain.models.aggregate import CategoryAggregate

DEFAULT_CATEGORIES = [
    "Food",
    "Travel",
    "Entertainment",
    "Shopping",
    "Bills",
    "Health",
    "Education",
    "Other",
]

# Display metadata is looked up by lower-cased category; grouping stays case-sensitive
CATEGORY_ICONS = {
    "food": "🍔",
    "travel": "✈️",
    "entertainment": "🎬",
    "shopping": "🛍️",
    "health": "⚕️",
    "healthcare": "⚕️",
    "education": "📚",
    "utilities": "💡",
    "bills": "📋",
}
DEFAULT_ICON = "📝"

ICON_BACKGROUND_COLORS = {
    "food": "#FEF08A",
    "travel": "#DBEAFE",
    "entertainment": "#FCE7F3",
    "shopping": "#DDD6FE",
    "health": "#E0E7FF",
    "utilities": "#CCFBF1",
}
DEFAULT_ICON_BACKGROUND = "#F3F4F6"

PROGRESS_COLORS = {
    "food": "#EAB308",
    "travel": "#0EA5E9",
    "entertainment": "#EC4899",
    "shopping": "#A855F7",
    "health": "#6366F1",
    "utilities": "#14B8A6",
}
DEFAULT_PROGRESS_COLOR = "#6B7280"


def icon_for_category(category: str) -> str:
    return CATEGORY_ICONS.get((category or "").lower(), DEFAULT_ICON)


def background_for_category(category: str) -> str:
    return ICON_BACKGROUND_COLORS.get((category or "").lower(), DEFAULT_ICON_BACKGROUND)


def progress_color_for_category(category: str) -> str:
    return PROGRESS_COLORS.get((category or "").lower(), DEFAULT_PROGRESS_COLOR)


def decorate_aggregate(aggregate: CategoryAggregate) -> CategoryAggregate:
    """
    Mutate the aggregate in-place with icon and colors for its category
    and return it.
    """
    aggregate.icon = icon_for_category(aggregate.category)
    aggregate.icon_background_color = background_for_category(aggregate.category)
    aggregate.progress_color = progress_color_for_category(aggregate.category)
    return aggregate
