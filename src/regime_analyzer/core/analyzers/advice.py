"""Savings aggregation across the opportunity simulators and tips."""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from regime_analyzer.core.models.advice import Dica, FonteEconomia, ResumoEconomia
from regime_analyzer.core.models.enums import NivelOportunidade, TipoDica, TipoFonte
from regime_analyzer.core.models.opportunities import (
    ResultadoECD,
    ResultadoJCP,
    ResultadoProLabore,
    ResultadoRegimeCaixa,
)
from regime_analyzer.core.models.results import BreakEvenResult
from regime_analyzer.core.rules.tax_constants import NIVEL_ALTO, NIVEL_MEDIO
from regime_analyzer.shared.formatters import format_currency, format_percentage
from regime_analyzer.shared.money import ZERO, arredondar
from regime_analyzer.shared.text import normalizar_titulo

logger = logging.getLogger(__name__)

FONTE_PRO_LABORE = "Otimização Pró-Labore"
FONTE_ECD = "Escrituração Contábil (ECD)"
FONTE_REGIME_CAIXA = "Regime de Caixa"
FONTE_LUCRO_REAL = "Migração para Lucro Real"
FONTE_JCP = "Juros sobre Capital Próprio (JCP)"


class AdviceAggregator:
    """Consolidates savings and deferrals without double counting.

    Sources are deduplicated by normalized title, and deferrals (cash basis)
    are kept apart from real savings.
    """

    def coletar_fontes(
        self,
        pro_labore: Sequence[ResultadoProLabore] = (),
        ecd: Optional[ResultadoECD] = None,
        regime_caixa: Optional[ResultadoRegimeCaixa] = None,
        breakeven: Optional[BreakEvenResult] = None,
        jcp: Optional[ResultadoJCP] = None,
    ) -> list[FonteEconomia]:
        """
        Turn simulator results into savings sources.

        Args:
            pro_labore: Optimal pró-labore simulation of each partner
            ecd: Bookkeeping benefit
            regime_caixa: Cash-basis deferral simulation
            breakeven: Break-even analysis (Lucro Real migration)
            jcp: Interest on equity simulation

        Returns:
            Sources with positive values only
        """
        fontes = []

        economia_pro_labore = sum((r.economia_anual for r in pro_labore), ZERO)
        if economia_pro_labore > 0:
            recomendacoes = " ".join(dict.fromkeys(r.recomendacao for r in pro_labore))
            fontes.append(
                FonteEconomia(
                    fonte=FONTE_PRO_LABORE,
                    valor=arredondar(economia_pro_labore),
                    descricao=f"Ajuste do pró-labore para o ponto ótimo tributário. {recomendacoes}",
                )
            )

        if ecd is not None and ecd.vale_a_pena and ecd.beneficio_liquido > 0:
            fontes.append(
                FonteEconomia(
                    fonte=FONTE_ECD,
                    valor=arredondar(ecd.beneficio_liquido),
                    descricao=(
                        "Ampliação da distribuição isenta de lucros via escrituração "
                        "contábil completa."
                    ),
                )
            )

        if regime_caixa is not None and regime_caixa.total_diferido > 0:
            fontes.append(
                FonteEconomia(
                    fonte=FONTE_REGIME_CAIXA,
                    valor=arredondar(regime_caixa.total_diferido),
                    tipo=TipoFonte.DIFERIMENTO,
                    descricao=(
                        "Diferimento de tributos pela adoção do regime de caixa. Não é economia "
                        "definitiva: o tributo é postergado."
                    ),
                )
            )

        if jcp is not None:
            economia_jcp = jcp.economia_vs_pro_labore + jcp.economia_irpj_csll
            if economia_jcp > 0:
                fontes.append(
                    FonteEconomia(
                        fonte=FONTE_JCP,
                        valor=arredondar(economia_jcp),
                        descricao=jcp.recomendacao,
                    )
                )

        migracao = self._economia_lucro_real(breakeven) if breakeven is not None else None
        if migracao is not None:
            fontes.append(migracao)

        return fontes

    @staticmethod
    def _economia_lucro_real(breakeven: BreakEvenResult) -> Optional[FonteEconomia]:
        margem_real = breakeven.margem_real_estimada
        equilibrio = breakeven.margem_equilibrio
        if breakeven.margem_assumida or margem_real is None or equilibrio is None:
            return None
        if margem_real >= equilibrio:
            return None

        ponto = breakeven.ponto_proximo(margem_real)
        if ponto is None:
            return None
        diferenca = arredondar(breakeven.carga_presumido - ponto.carga_real)
        if diferenca <= 0:
            return None

        return FonteEconomia(
            fonte=FONTE_LUCRO_REAL,
            valor=diferenca,
            descricao=(
                "Economia estimada se migrar para Lucro Real, considerando margem real atual "
                f"de {format_percentage(margem_real)}."
            ),
        )

    def build(
        self,
        fontes: Sequence[FonteEconomia],
        dicas: Sequence[Dica],
        carga_presumido: Decimal,
    ) -> ResumoEconomia:
        """
        Consolidate savings sources and saving tips.

        Args:
            fontes: Sources from the simulators
            dicas: Tips; positive ECONOMIA tips not yet applied become sources
            carga_presumido: Annual Lucro Presumido total (level denominator)

        Returns:
            ResumoEconomia
        """
        consolidadas: list[FonteEconomia] = []
        vistos: set[str] = set()

        def adicionar(fonte: FonteEconomia) -> None:
            chave = normalizar_titulo(fonte.fonte)
            if chave in vistos:
                logger.debug("Fonte duplicada ignorada: %s", fonte.fonte)
                return
            vistos.add(chave)
            consolidadas.append(fonte)

        for fonte in fontes:
            adicionar(fonte)

        for dica in dicas:
            if dica.tipo != TipoDica.ECONOMIA or dica.ja_aplicado:
                continue
            if dica.impacto_estimado is None or dica.impacto_estimado <= 0:
                continue
            adicionar(
                FonteEconomia(
                    fonte=dica.titulo,
                    valor=arredondar(dica.impacto_estimado),
                    descricao=dica.descricao,
                )
            )

        economia = arredondar(
            sum((f.valor for f in consolidadas if f.tipo == TipoFonte.ECONOMIA), ZERO)
        )
        diferimento = arredondar(
            sum((f.valor for f in consolidadas if f.tipo == TipoFonte.DIFERIMENTO), ZERO)
        )
        quantidade = sum(1 for f in consolidadas if f.tipo == TipoFonte.ECONOMIA)

        return ResumoEconomia(
            total_economia_anual=economia,
            total_diferimento=diferimento,
            fontes=tuple(consolidadas),
            itens=tuple(dicas),
            nivel_oportunidade=self.nivel(economia, carga_presumido),
            recomendacao_principal=self._recomendacao(
                bool(consolidadas), economia, diferimento, quantidade
            ),
        )

    @staticmethod
    def nivel(economia: Decimal, carga_presumido: Decimal) -> NivelOportunidade:
        """Opportunity level from the savings / presumed burden ratio."""
        if carga_presumido > 0:
            razao = economia / carga_presumido
            if razao > NIVEL_ALTO:
                return NivelOportunidade.ALTO
            if razao >= NIVEL_MEDIO:
                return NivelOportunidade.MEDIO
            return NivelOportunidade.BAIXO
        if economia > 0:
            return NivelOportunidade.MEDIO
        return NivelOportunidade.BAIXO

    @staticmethod
    def _recomendacao(
        tem_fontes: bool, economia: Decimal, diferimento: Decimal, quantidade: int
    ) -> str:
        if not tem_fontes:
            return (
                "Nenhuma oportunidade de economia significativa identificada com os dados "
                "informados."
            )
        if economia > 0:
            return (
                f"Economia potencial de {format_currency(economia)}/ano identificada em "
                f"{quantidade} fonte(s). Priorize as ações recomendadas."
            )
        if diferimento > 0:
            return (
                f"Diferimento tributário de {format_currency(diferimento)} possível via "
                "regime de caixa."
            )
        return ""
