from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_UP, Decimal, InvalidOperation
from typing import Union


Number = Union[str, int, float, Decimal]


def format_number(value: Number, decimal_places: int = 2, round_up: bool = True) -> Decimal:
    """Round a decimal string or number to a fixed number of places.

    round_up=True rounds away from zero, round_up=False truncates toward zero.
    The result is the value stored in the dataset.
    """
    if decimal_places < 0:
        raise ValueError(f"decimal_places must be >= 0, got {decimal_places}")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        if not d.is_finite():
            raise ValueError(f"not a finite number: {value!r}")
        return d.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_UP if round_up else ROUND_DOWN)
    except InvalidOperation as e:
        raise ValueError(f"not a decimal number: {value!r}") from e


def decimal_to_text(value: Decimal) -> str:
    # Plain notation without exponent or trailing zeros, e.g. 0.00010000 -> 0.0001, 1E+2 -> 100
    text = format(value.normalize(), "f")
    return "0" if text in ("-0", "") else text
