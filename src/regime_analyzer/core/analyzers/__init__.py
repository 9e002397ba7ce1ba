"""Calculation engines for corporate tax regime comparison."""

from regime_analyzer.core.analyzers.advice import AdviceAggregator
from regime_analyzer.core.analyzers.breakeven import BreakEvenAnalyzer
from regime_analyzer.core.analyzers.opportunities import (
    calcular_beneficio_ecd,
    calcular_impacto_lc224,
    simular_jcp,
    simular_pro_labore_otimo,
    simular_regime_caixa,
)
from regime_analyzer.core.analyzers.presumido import PresumedRegimeCalculator
from regime_analyzer.core.analyzers.real import RealRegimeCalculator
from regime_analyzer.core.analyzers.rule_resolver import RuleResolver
from regime_analyzer.core.analyzers.simples import BracketCalculator, tabelas_simples_padrao
from regime_analyzer.core.analyzers.summary import SummaryBuilder, analyze_company
from regime_analyzer.core.analyzers.tips import TipsAnalyzer, gerar_dicas

__all__ = [
    "AdviceAggregator",
    "BracketCalculator",
    "BreakEvenAnalyzer",
    "PresumedRegimeCalculator",
    "RealRegimeCalculator",
    "RuleResolver",
    "SummaryBuilder",
    "TipsAnalyzer",
    "analyze_company",
    "calcular_beneficio_ecd",
    "calcular_impacto_lc224",
    "gerar_dicas",
    "simular_jcp",
    "simular_pro_labore_otimo",
    "simular_regime_caixa",
    "tabelas_simples_padrao",
]
