"""
Named rule transforms usable from bridge configuration.

Each transform takes the current value plus optional keyword arguments
declared under ``args`` in the rule configuration.
"""

from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable

from modelbridge.core.exceptions import BridgeConfigurationError


def uppercase(value: Any) -> str:
    return str(value).upper()


def lowercase(value: Any) -> str:
    return str(value).lower()


def strip(value: Any) -> str:
    return str(value).strip()


def to_number(value: Any) -> int | float:
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert boolean {value!r} to a number")
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def to_cents(value: Any) -> int:
    """Convert a decimal amount to integer minor units."""
    amount = Decimal(str(to_number(value)))
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def iso_date(value: Any) -> str:
    """Render a datetime, date, ISO string or epoch seconds as ISO-8601."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()
    return datetime.fromisoformat(str(value)).isoformat()


def split(value: Any, separator: str = ",") -> list[str]:
    return [part.strip() for part in str(value).split(separator) if part.strip()]


def join(value: Any, separator: str = ", ") -> str:
    if isinstance(value, (list, tuple)):
        return separator.join(str(v) for v in value)
    return str(value)


def default(value: Any, fallback: Any = None) -> Any:
    return fallback if value is None or value == "" else value


_TRANSFORMS: dict[str, Callable[..., Any]] = {
    "uppercase": uppercase,
    "lowercase": lowercase,
    "strip": strip,
    "to_number": to_number,
    "to_cents": to_cents,
    "iso_date": iso_date,
    "split": split,
    "join": join,
    "default": default,
}


def register_transform(name: str, func: Callable[..., Any]) -> None:
    """Make a transform available to bridge configuration under a name."""
    _TRANSFORMS[name] = func


def get_transform(name: str) -> Callable[..., Any]:
    """
    Raises:
        BridgeConfigurationError: If no transform has that name
    """
    try:
        return _TRANSFORMS[name]
    except KeyError:
        raise BridgeConfigurationError(
            f"Unknown transform: {name}. Available: {', '.join(sorted(_TRANSFORMS))}"
        ) from None


def list_transforms() -> list[str]:
    return sorted(_TRANSFORMS)
