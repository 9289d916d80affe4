"""Centavo arithmetic helpers.

All amounts inside the statement core are integer centavos (1/100 of the
major currency unit). Conversion to major units happens only when the final
statement is built.

Example:
    >>> to_centavos("200.00")
    20000
    >>> centavos_to_major(3153)
    Decimal('31.53')
    >>> format_amount(123456)
    '1,234.56'
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from statement_ledger.services.errors import ValidationError

CENTAVOS_PER_UNIT = 100
TWO_PLACES = Decimal("0.01")


def ensure_centavos(
    value: object, field: str = "amount", *, allow_negative: bool = True, **context
) -> int:
    """
    Return value as an int number of centavos or fail.

    Accepts ints, integral Decimals and integral floats. Anything else
    (fractions of a centavo, bools, strings, None) means a store handed over
    money in the wrong unit, which would silently skew every balance after it.

    Args:
        value: Amount expected to be whole centavos
        field: Field name used in the error message
        allow_negative: Reject amounts below zero when False
        **context: client_id / unit_id / period forwarded to the error

    Returns:
        The amount as int

    Raises:
        ValidationError: If value is not a whole number of centavos, or is
            negative while allow_negative is False
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field} must be an integer centavo amount, got {value!r}", **context
        )

    if isinstance(value, int):
        centavos = value
    elif isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        centavos = int(value)
    elif isinstance(value, float) and value.is_integer():
        centavos = int(value)
    else:
        raise ValidationError(
            f"{field} must be an integer centavo amount, got {value!r}", **context
        )

    if not allow_negative and centavos < 0:
        raise ValidationError(f"{field} must not be negative, got {centavos}", **context)
    return centavos


def to_centavos(amount: Decimal | int | float | str, **context) -> int:
    """
    Convert a major-unit amount (e.g. pesos) to centavos.

    Raises:
        ValidationError: If amount is not a number or has sub-centavo precision
    """
    try:
        major = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Cannot convert {amount!r} to centavos", **context) from e

    return ensure_centavos(major * CENTAVOS_PER_UNIT, field="amount", **context)


def centavos_to_major(centavos: int) -> Decimal:
    """Convert centavos to a 2-decimal major-unit Decimal."""
    return (Decimal(centavos) / CENTAVOS_PER_UNIT).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_amount(centavos: int) -> str:
    """Format centavos as a major-unit string with thousand separators."""
    return f"{centavos_to_major(centavos):,.2f}"
