"""Lucro Presumido calculator.

IRPJ and CSLL are charged on a presumed profit (a fixed share of gross
revenue, Lei 9.249/1995 Art. 15 and 20); PIS/COFINS are cumulative.
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
    COFINS_CUMULATIVO,
    LIMITE_LUCRO_PRESUMIDO,
    PIS_CUMULATIVO,
    calcular_irpj,
)
from regime_analyzer.shared.formatters import format_currency
from regime_analyzer.shared.money import ZERO

logger = logging.getLogger(__name__)


class PresumedRegimeCalculator:
    """Computes Lucro Presumido liabilities per period."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def compute(self, periodo: PeriodoFiscal, ruleset: TaxRuleSet) -> ResultadoRegime:
        """
        Compute the liability of one period.

        Args:
            periodo: Period figures (quarter by default)
            ruleset: Resolved activity ruleset (presumption rates)

        Returns:
            ResultadoRegime with every component rounded to cents
        """
        receita = periodo.receita_bruta
        limite = LIMITE_LUCRO_PRESUMIDO * periodo.meses / 12
        if receita > limite:
            return self._inelegivel(receita, limite)

        base_irpj = receita * ruleset.presuncao_irpj
        irpj, adicional = calcular_irpj(base_irpj, periodo.meses)
        csll = receita * ruleset.presuncao_csll * ALIQUOTA_CSLL

        base_pis_cofins = max(ZERO, receita - periodo.exclusoes)

        detalhamento = Detalhamento(
            irpj=irpj,
            adicional_irpj=adicional,
            csll=csll,
            pis=base_pis_cofins * PIS_CUMULATIVO,
            cofins=base_pis_cofins * COFINS_CUMULATIVO,
            encargos_folha=periodo.folha_pagamento * self.config.aliquota_encargos,
            iss=periodo.receita_servico_efetiva(ruleset.servico) * self.config.aliquota_iss,
        )

        return ResultadoRegime(
            regime=Regime.LUCRO_PRESUMIDO,
            receita_bruta=receita,
            detalhamento=detalhamento.arredondado(),
            retencoes=periodo.total_retido,
        )

    def compute_year(
        self, periodos: Sequence[PeriodoFiscal], ruleset: TaxRuleSet
    ) -> ResultadoRegime:
        """
        Compute and aggregate several periods (usually four quarters).

        Args:
            periodos: Periods of the year
            ruleset: Resolved activity ruleset

        Returns:
            Aggregated ResultadoRegime (ineligible if the year exceeds the ceiling)
        """
        receita = sum((p.receita_bruta for p in periodos), ZERO)
        if receita > LIMITE_LUCRO_PRESUMIDO:
            return self._inelegivel(receita, LIMITE_LUCRO_PRESUMIDO)

        return ResultadoRegime.somar(
            Regime.LUCRO_PRESUMIDO, (self.compute(p, ruleset) for p in periodos)
        )

    def base_presumida(self, receita: Decimal, ruleset: TaxRuleSet) -> Decimal:
        """Presumed IRPJ base for a revenue amount."""
        return receita * ruleset.presuncao_irpj

    @staticmethod
    def _inelegivel(receita: Decimal, limite: Decimal) -> ResultadoRegime:
        motivo = (
            f"Receita de {format_currency(receita)} excede o limite do Lucro Presumido "
            f"({format_currency(limite)})."
        )
        logger.info("Lucro Presumido inelegível: %s", motivo)
        return ResultadoRegime.inelegivel_para(Regime.LUCRO_PRESUMIDO, motivo, receita)
