"""Common dishes suggested to API clients."""

POPULAR_DISHES: tuple[str, ...] = (
    "chicken biryani",
    "paneer butter masala",
    "grilled salmon",
    "caesar salad",
    "macaroni and cheese",
    "beef stir fry",
    "chicken tikka masala",
    "pasta alfredo",
    "vegetable fried rice",
    "greek salad",
)


def popular_dishes() -> list[str]:
    """Return popular dish names in display order."""
    return list(POPULAR_DISHES)
