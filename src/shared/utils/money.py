from decimal import ROUND_HALF_UP, Decimal
from typing import Union


ZERO = Decimal("0")


def to_money(value: Union[Decimal, float, int, str, None]) -> Decimal:
    """
    Convert a raw amount to Decimal without rounding. Missing amounts count as 0.

    Examples:
        >>> to_money(None)
        Decimal('0')
        >>> to_money(0.1)
        Decimal('0.1')
        >>> to_money("150000")
        Decimal('150000')
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_whole(value: Union[Decimal, float, int, str, None]) -> Decimal:
    """
    Round monetary value to whole currency units (display only).

    Halves round away from zero for both signs: 1.5 -> 2, -1.5 -> -2.
    """
    rounded = to_money(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    # -0.4 must not display as "-0"
    return rounded if rounded != 0 else ZERO
