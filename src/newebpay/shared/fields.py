"""
Field value stringification.

Both the CheckValue canonical string and the encrypted PostData_ payload
end up as `Name=Value` text fed to a byte-exact primitive, so every value
goes through `stringify_value` before it is written out.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Tuple
from urllib.parse import quote_plus


def stringify_value(value: Any) -> str:
    """
    Render a field value the way the gateway expects it.

    Examples:
        100 → "100"
        100.0 → "100"
        Decimal("12.50") → "12.50"
        True → "1"
        datetime(2023, 11, 14, 22, 13, 20, tzinfo=utc) → "1700000000"
    """
    if isinstance(value, Enum):
        return stringify_value(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, datetime):
        return str(int(value.timestamp()))
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def www_form_component(text: str) -> str:
    """
    Percent-encode a value as an HTML form component.

    Spaces become `+`, `*` stays literal and `~` is escaped, which is what
    the gateway decrypts PostData_ with.
    """
    return quote_plus(text, safe="*").replace("~", "%7E")


def join_pairs(
    items: Iterable[Tuple[str, Any]],
    encode: Callable[[str], str] = lambda text: text,
) -> str:
    """Join (name, value) pairs as `Name=Value&Name=Value`."""
    return "&".join(
        f"{name}={encode(stringify_value(value))}" for name, value in items
    )


def form_encode(fields: Mapping[str, Any]) -> str:
    """
    URL-encode each value and join in insertion order.

    This is the plaintext of a PostData_ payload. Unlike the checksum
    canonical string it is not sorted.
    """
    return join_pairs(fields.items(), encode=www_form_component)


def present_fields(fields: Mapping[str, Any]) -> dict:
    """Copy of `fields` without None values."""
    return {name: value for name, value in fields.items() if value is not None}
