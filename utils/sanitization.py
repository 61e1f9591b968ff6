# utils/sanitization.py
from typing import Any


def has_value(value: Any) -> bool:
    """
    Presence test for untyped imported fields.
    Containers count as present even when empty; scalars use truthiness.
    """
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def to_text(value: Any) -> str:
    """
    Renders a scalar from an untyped document as text.
    2023.0 -> "2023", True -> "true", None -> "".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
