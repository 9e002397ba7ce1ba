"""Decimal helpers for monetary arithmetic.

All engine arithmetic runs on ``Decimal``. Values are only quantized at
result boundaries, so the 95-step break-even scan and multi-period sums do
not accumulate binary floating point drift.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

ZERO = Decimal("0")
CENTAVO = Decimal("0.01")

Numero = Union[Decimal, int, float, str]


def para_decimal(valor: Numero | None, padrao: Decimal = ZERO) -> Decimal:
    """
    Convert a number-like value to Decimal.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1") and not its
    binary expansion.

    Args:
        valor: Value to convert (None returns the default)
        padrao: Value used when ``valor`` is None

    Returns:
        Decimal value
    """
    if valor is None:
        return padrao
    if isinstance(valor, Decimal):
        return valor
    if isinstance(valor, float):
        return Decimal(str(valor))
    try:
        return Decimal(valor)
    except InvalidOperation as e:
        raise ValueError(f"Valor numérico inválido: {valor!r}") from e


def arredondar(valor: Decimal, casas: int = 2) -> Decimal:
    """
    Round half-up to a number of decimal places.

    Args:
        valor: Decimal value
        casas: Decimal places (default: 2, i.e. cents)

    Returns:
        Quantized Decimal
    """
    return valor.quantize(Decimal(1).scaleb(-casas), rounding=ROUND_HALF_UP)


def dividir(numerador: Decimal, denominador: Decimal) -> Decimal:
    """Divide, returning zero when the denominator is not positive."""
    if denominador <= 0:
        return ZERO
    return numerador / denominador
