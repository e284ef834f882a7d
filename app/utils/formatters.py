"""
Formatters utility.

Utility functions for formatting data in the app layer.
"""

from decimal import ROUND_HALF_UP, Decimal


def format_units(value: int, decimals: int) -> str:
    """
    Scale a raw integer token amount to a decimal string.

    Exact integer arithmetic, trailing zeros trimmed.

    Args:
        value: Raw amount in smallest units
        decimals: Token decimals

    Returns:
        Decimal string like "4000" or "1.25"
    """
    sign = "-" if value < 0 else ""
    if decimals == 0:
        return f"{sign}{abs(value)}"
    integer, fraction = divmod(abs(value), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0")
    if fraction_str:
        return f"{sign}{integer}.{fraction_str}"
    return f"{sign}{integer}"


def format_token_amount(amount: str | Decimal, places: int = 0) -> str:
    """
    Format a decimal amount with thousands separators.

    Args:
        amount: Decimal string or Decimal
        places: Fraction digits to keep (rounded half up)

    Returns:
        String like "12,345" or "12,345.67"
    """
    value = Decimal(str(amount))
    quantum = Decimal(1).scaleb(-places)
    value = value.quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{value:,.{places}f}"


def format_duration(seconds: float) -> str:
    """
    Format seconds as a short duration like "1h 2m 3s".

    Args:
        seconds: Duration in seconds

    Returns:
        Human-readable duration
    """
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def short_address(address: str, head: int = 6, tail: int = 4) -> str:
    """Shorten an address to 0x1234...abcd."""
    if len(address) <= head + tail:
        return address
    return f"{address[:head]}...{address[-tail:]}"
