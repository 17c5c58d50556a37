"""Shared utilities for price providers."""


def normalize_currency_code(code: str) -> str:
    """Normalize a currency code for the wire (lowercase)."""
    return code.strip().lower()


def to_float(value: object) -> float | None:
    """Coerce a JSON number to float; None for missing or non-numeric values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
