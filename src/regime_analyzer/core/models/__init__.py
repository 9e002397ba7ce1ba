"""Domain models for corporate tax regime comparison."""

from regime_analyzer.core.models.activity import ActivityCode, parse_categoria
from regime_analyzer.core.models.advice import (
    Dica,
    FonteEconomia,
    ModuleStatus,
    ResumoEconomia,
)
from regime_analyzer.core.models.brackets import BracketTable, Faixa
from regime_analyzer.core.models.enums import (
    Anexo,
    CategoriaAtividade,
    FonteRegra,
    NivelOportunidade,
    Regime,
    TipoDica,
    TipoFonte,
)
from regime_analyzer.core.models.opportunities import (
    DadosOportunidades,
    ImpactoLC224,
    ResultadoECD,
    ResultadoJCP,
    ResultadoProLabore,
    ResultadoRegimeCaixa,
    Socio,
)
from regime_analyzer.core.models.periods import DadosAnuais, PeriodoFiscal, dividir_periodos
from regime_analyzer.core.models.results import (
    AliquotaEfetiva,
    BreakEvenResult,
    Detalhamento,
    PontoMargem,
    ResultadoRegime,
)
from regime_analyzer.core.models.ruleset import RuleEntry, TaxRuleSet
from regime_analyzer.core.models.summary import AcaoEconomia, PerfilEmpresa, PosicaoRanking, Summary

# RegionTaxProfile lives in core.models.region; it depends on the rule
# constants and is imported from there directly.

__all__ = [
    "AcaoEconomia",
    "ActivityCode",
    "AliquotaEfetiva",
    "Anexo",
    "BracketTable",
    "BreakEvenResult",
    "CategoriaAtividade",
    "DadosAnuais",
    "DadosOportunidades",
    "Detalhamento",
    "Dica",
    "Faixa",
    "FonteEconomia",
    "FonteRegra",
    "ImpactoLC224",
    "ModuleStatus",
    "NivelOportunidade",
    "PerfilEmpresa",
    "PeriodoFiscal",
    "PontoMargem",
    "PosicaoRanking",
    "Regime",
    "ResultadoECD",
    "ResultadoJCP",
    "ResultadoProLabore",
    "ResultadoRegime",
    "ResultadoRegimeCaixa",
    "ResumoEconomia",
    "RuleEntry",
    "Socio",
    "Summary",
    "TaxRuleSet",
    "TipoDica",
    "TipoFonte",
    "dividir_periodos",
    "parse_categoria",
]
