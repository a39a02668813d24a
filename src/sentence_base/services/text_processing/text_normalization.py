"""Text normalization utilities for submitted fields."""


def normalize_field(text: str) -> str:
    """
    Normalize a submitted field before it is stored.

    Rules:
    - Trim leading and trailing whitespace (including full-width spaces)
    - Keep interior whitespace, Japanese characters and punctuation as-is

    Args:
        text: Field value as submitted.

    Returns:
        Normalized text string.
    """
    return text.strip()
