"""Shared utilities for Regime Analyzer."""

from regime_analyzer.shared.money import (
    CENTAVO,
    ZERO,
    arredondar,
    dividir,
    para_decimal,
)
from regime_analyzer.shared.text import normalizar_titulo

__all__ = [
    # Money
    "CENTAVO",
    "ZERO",
    "arredondar",
    "dividir",
    "para_decimal",
    # Text
    "normalizar_titulo",
]
