"""Lucro Real calculator.

IRPJ and CSLL are charged on the actual profit, after the capped offset of
carried-forward losses; PIS/COFINS are non-cumulative (input credits).
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models.enums import Regime
from regime_analyzer.core.models.periods import PeriodoFiscal
from regime_analyzer.core.models.results import Detalhamento, ResultadoRegime
from regime_analyzer.core.models.ruleset import TaxRuleSet
from regime_analyzer.core.rules.tax_constants import (
    ALIQUOTA_CSLL,
    COFINS_NAO_CUMULATIVO,
    LIMITE_COMPENSACAO_PREJUIZO,
    PIS_NAO_CUMULATIVO,
    calcular_irpj,
)
from regime_analyzer.shared.formatters import format_currency
from regime_analyzer.shared.money import ZERO

logger = logging.getLogger(__name__)


def compensacao_prejuizo(lucro: Decimal, prejuizo: Decimal) -> Decimal:
    """
    Loss offset allowed for a period.

    Args:
        lucro: Taxable profit before the offset
        prejuizo: Carried-forward losses available

    Returns:
        min(prejuizo, 30% of lucro); zero when there is no profit
    """
    if lucro <= 0 or prejuizo <= 0:
        return ZERO
    return min(prejuizo, lucro * LIMITE_COMPENSACAO_PREJUIZO)


class RealRegimeCalculator:
    """Computes Lucro Real liabilities for a given profit margin."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def compute(
        self,
        periodo: PeriodoFiscal,
        margem: Decimal,
        ruleset: Optional[TaxRuleSet] = None,
    ) -> ResultadoRegime:
        """
        Compute the liability of one period.

        Args:
            periodo: Period figures
            margem: Profit margin as a fraction of gross revenue (0.2 = 20%)
            ruleset: Resolved activity ruleset; without it all revenue is
                treated as service revenue

        Returns:
            ResultadoRegime with every component rounded to cents
        """
        resultado, _ = self._calcular(periodo, margem, ruleset)
        return resultado

    def compute_year(
        self,
        periodos: Sequence[PeriodoFiscal],
        margem: Decimal,
        ruleset: Optional[TaxRuleSet] = None,
    ) -> ResultadoRegime:
        """
        Compute and aggregate several periods.

        The loss balance is consumed period by period and never exceeds
        30% of each period's profit.

        Args:
            periodos: Periods of the year
            margem: Profit margin as a fraction of gross revenue
            ruleset: Resolved activity ruleset

        Returns:
            Aggregated ResultadoRegime
        """
        saldo = sum((p.prejuizo_acumulado for p in periodos), ZERO)
        resultados = []
        for periodo in periodos:
            ajustado = periodo.model_copy(update={"prejuizo_acumulado": saldo})
            resultado, compensado = self._calcular(ajustado, margem, ruleset)
            saldo -= compensado
            resultados.append(resultado)
        return ResultadoRegime.somar(Regime.LUCRO_REAL, resultados)

    def _calcular(
        self,
        periodo: PeriodoFiscal,
        margem: Decimal,
        ruleset: Optional[TaxRuleSet],
    ) -> tuple[ResultadoRegime, Decimal]:
        receita = periodo.receita_bruta
        lucro = receita * margem
        compensado = compensacao_prejuizo(lucro, periodo.prejuizo_acumulado)
        base = lucro - compensado

        irpj, adicional = calcular_irpj(base, periodo.meses)
        if periodo.incentivo_regional:
            # Reduction covers the 15% IRPJ only, never the surtax
            irpj = irpj * (1 - self.config.reducao_irpj_incentivo)
        csll = max(ZERO, base) * ALIQUOTA_CSLL

        base_pis_cofins = max(ZERO, receita - periodo.exclusoes - periodo.base_creditos)
        servico = ruleset.servico if ruleset is not None else True

        detalhamento = Detalhamento(
            irpj=irpj,
            adicional_irpj=adicional,
            csll=csll,
            pis=base_pis_cofins * PIS_NAO_CUMULATIVO,
            cofins=base_pis_cofins * COFINS_NAO_CUMULATIVO,
            encargos_folha=periodo.folha_pagamento * self.config.aliquota_encargos,
            iss=periodo.receita_servico_efetiva(servico) * self.config.aliquota_iss,
        )

        avisos = ()
        if compensado > 0:
            avisos = (
                f"Compensação de prejuízo fiscal de {format_currency(compensado)} "
                "(limite de 30% do lucro do período).",
            )

        resultado = ResultadoRegime(
            regime=Regime.LUCRO_REAL,
            receita_bruta=receita,
            detalhamento=detalhamento.arredondado(),
            retencoes=periodo.total_retido,
            avisos=avisos,
        )
        return resultado, compensado
