"""Tax rules, rates and classification tables."""

from regime_analyzer.core.rules.cnae_rules import (
    PrefixRule,
    RuleTables,
    default_rule_tables,
)
from regime_analyzer.core.rules.tax_constants import (
    FAIXAS_SIMPLES,
    LIMITE_LUCRO_PRESUMIDO,
    LIMITE_SIMPLES_NACIONAL,
    calcular_irpf_mensal_2026,
)

__all__ = [
    "FAIXAS_SIMPLES",
    "LIMITE_LUCRO_PRESUMIDO",
    "LIMITE_SIMPLES_NACIONAL",
    "PrefixRule",
    "RuleTables",
    "calcular_irpf_mensal_2026",
    "default_rule_tables",
]
