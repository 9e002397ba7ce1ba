"""Break-even analysis between Lucro Presumido and Lucro Real.

The presumed-profit burden does not depend on the real margin, while the
real-profit burden grows with it. The analyzer samples the real-profit
burden at every integer margin and reports where the cheaper regime flips.
"""

import logging
from decimal import Decimal
from typing import Optional

from regime_analyzer.core.analyzers.real import RealRegimeCalculator
from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models.periods import PeriodoFiscal
from regime_analyzer.core.models.results import BreakEvenResult, PontoMargem
from regime_analyzer.core.models.ruleset import TaxRuleSet
from regime_analyzer.shared.formatters import format_percentage
from regime_analyzer.shared.money import ZERO, arredondar

logger = logging.getLogger(__name__)

RECOMENDACAO_SEM_RECEITA = "Receita bruta anual não informada. Impossível calcular break-even."
RECOMENDACAO_PRESUMIDO_SEMPRE = (
    "O Lucro Presumido é mais vantajoso em TODAS as margens de lucro simuladas. Mantenha o LP."
)
RECOMENDACAO_REAL_SEMPRE = (
    "O Lucro Real é mais vantajoso em TODAS as margens simuladas. Considere migrar para LR."
)
RECOMENDACAO_INDETERMINADA = (
    "Não foi possível determinar o break-even. Consulte seu contador para análise detalhada."
)
AVISO_SEM_DESPESAS = "Nenhuma despesa informada — resultado assume margem de 100%."
ALERTA_ABAIXO = "Sua margem real está ABAIXO do break-even. O Lucro Real pode ser mais vantajoso."
ALERTA_PROXIMO = "Sua margem real está próxima do break-even. Reavalie anualmente."


class BreakEvenAnalyzer:
    """Finds the margin at which Lucro Real stops (or starts) beating Lucro Presumido."""

    def __init__(
        self,
        calculadora_real: Optional[RealRegimeCalculator] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.config = config or (calculadora_real.config if calculadora_real else EngineConfig())
        self.calculadora_real = calculadora_real or RealRegimeCalculator(self.config)

    def find(
        self,
        receita_anual: Decimal,
        carga_presumido: Decimal,
        folha_anual: Decimal = ZERO,
        despesas_operacionais: Decimal = ZERO,
        base_creditos: Decimal = ZERO,
        prejuizo_acumulado: Decimal = ZERO,
        aliquotas: Optional[EngineConfig] = None,
        ruleset: Optional[TaxRuleSet] = None,
        incentivo_regional: bool = False,
        receita_servicos: Optional[Decimal] = None,
        receita_exportacao: Decimal = ZERO,
        receita_isenta: Decimal = ZERO,
        receita_st: Decimal = ZERO,
        margem_real: Optional[Decimal] = None,
    ) -> BreakEvenResult:
        """
        Scan margins and locate the break-even point.

        Never raises for a missing revenue: it returns a result without a
        series and an explanatory recommendation.

        Args:
            receita_anual: Annual gross revenue
            carga_presumido: Current annual Lucro Presumido total
            folha_anual: Annual payroll
            despesas_operacionais: Annual operating expenses
            base_creditos: Annual creditable input base for PIS/COFINS
            prejuizo_acumulado: Carried-forward losses
            aliquotas: Rate overrides for this scan
            ruleset: Activity ruleset (service share for ISS)
            incentivo_regional: SUDAM/SUDENE project
            receita_servicos: Annual service revenue (None = follow the activity type)
            receita_exportacao: Annual export revenue (outside the PIS/COFINS base)
            receita_isenta: Annual exempt revenue
            receita_st: Annual revenue under tax substitution
            margem_real: Known actual margin in percent (e.g. from accounting
                profit); takes precedence over the cost-based estimate

        Returns:
            BreakEvenResult
        """
        carga_presumido = arredondar(carga_presumido)
        if receita_anual <= 0:
            return BreakEvenResult(
                carga_presumido=carga_presumido,
                recomendacao=RECOMENDACAO_SEM_RECEITA,
            )

        config = aliquotas or self.config
        calculadora = (
            RealRegimeCalculator(aliquotas) if aliquotas is not None else self.calculadora_real
        )
        periodo = PeriodoFiscal(
            receita_bruta=receita_anual,
            folha_pagamento=folha_anual,
            base_creditos=base_creditos,
            prejuizo_acumulado=prejuizo_acumulado,
            incentivo_regional=incentivo_regional,
            receita_servicos=receita_servicos,
            receita_exportacao=receita_exportacao,
            receita_isenta=receita_isenta,
            receita_st=receita_st,
            meses=12,
        )

        margens = tuple(
            PontoMargem(
                margem=margem,
                carga_presumido=carga_presumido,
                carga_real=calculadora.compute(periodo, Decimal(margem) / 100, ruleset).total,
            )
            for margem in range(config.margem_minima, config.margem_maxima + 1)
        )

        margem_equilibrio = self._cruzamento(margens)
        vitorias_presumido = sum(1 for p in margens if p.carga_presumido < p.carga_real)
        vitorias_real = sum(1 for p in margens if p.carga_real < p.carga_presumido)
        presumido_sempre = vitorias_presumido == len(margens)
        real_sempre = vitorias_real == len(margens)

        aviso = None
        margem_assumida = False
        if margem_real is not None:
            margem_real = arredondar(margem_real, 1)
        elif despesas_operacionais > 0 or folha_anual > 0:
            margem_real = arredondar(
                (receita_anual - despesas_operacionais - folha_anual) / receita_anual * 100, 1
            )
        else:
            margem_real = Decimal("100")
            margem_assumida = True
            aviso = AVISO_SEM_DESPESAS

        # An assumed margin never drives alerts or recommendations
        alerta = None
        if margem_equilibrio is not None and not margem_assumida:
            if margem_real < margem_equilibrio:
                alerta = ALERTA_ABAIXO
            elif abs(margem_real - margem_equilibrio) <= config.janela_proximidade:
                alerta = ALERTA_PROXIMO

        recomendacao = self._recomendacao(
            presumido_sempre,
            real_sempre,
            margem_equilibrio,
            None if margem_assumida else margem_real,
        )

        logger.debug(
            "Break-even: margem %s, LP vence %d, LR vence %d",
            margem_equilibrio,
            vitorias_presumido,
            vitorias_real,
        )

        return BreakEvenResult(
            carga_presumido=carga_presumido,
            margem_equilibrio=margem_equilibrio,
            presumido_sempre_vantajoso=presumido_sempre,
            real_sempre_vantajoso=real_sempre,
            margem_real_estimada=margem_real,
            alerta=alerta,
            aviso=aviso,
            margem_assumida=margem_assumida,
            recomendacao=recomendacao,
            margens=margens,
        )

    @staticmethod
    def _cruzamento(margens: tuple[PontoMargem, ...]) -> Optional[int]:
        """First margin where 'Lucro Real is cheaper' differs from the previous sample."""
        for anterior, atual in zip(margens, margens[1:]):
            real_antes = anterior.carga_real < anterior.carga_presumido
            real_agora = atual.carga_real < atual.carga_presumido
            if real_antes != real_agora:
                return atual.margem
        return None

    @staticmethod
    def _recomendacao(
        presumido_sempre: bool,
        real_sempre: bool,
        margem_equilibrio: Optional[int],
        margem_real: Optional[Decimal],
    ) -> str:
        if presumido_sempre:
            return RECOMENDACAO_PRESUMIDO_SEMPRE
        if real_sempre:
            return RECOMENDACAO_REAL_SEMPRE
        if margem_equilibrio is not None and margem_real is not None:
            if margem_real >= margem_equilibrio:
                return (
                    f"Sua margem real estimada ({format_percentage(margem_real)}) está ACIMA "
                    f"do break-even ({margem_equilibrio}%). O Lucro Presumido é favorável."
                )
            return (
                f"Sua margem real estimada ({format_percentage(margem_real)}) está ABAIXO "
                f"do break-even ({margem_equilibrio}%). Avalie o Lucro Real."
            )
        if margem_equilibrio is not None:
            return (
                f"O break-even entre LP e LR ocorre na margem de {margem_equilibrio}%. "
                "Abaixo: LR é melhor. Acima: LP é melhor."
            )
        return RECOMENDACAO_INDETERMINADA
