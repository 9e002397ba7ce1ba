"""Simples Nacional calculator.

Effective rate from the progressive annex tables (LC 123/2006, Art. 18):

    aliquota_efetiva = (RBT12 x aliquota_nominal - parcela_deduzir) / RBT12

Above the last ceiling the company is ineligible; the rate is never clamped
to the top bracket.
"""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models.brackets import BracketTable, Faixa
from regime_analyzer.core.models.enums import Anexo, Regime
from regime_analyzer.core.models.periods import PeriodoFiscal
from regime_analyzer.core.models.region import RegionTaxProfile
from regime_analyzer.core.models.results import AliquotaEfetiva, Detalhamento, ResultadoRegime
from regime_analyzer.core.models.ruleset import TaxRuleSet
from regime_analyzer.core.rules.tax_constants import (
    ANEXO_ALTERNATIVO_FATOR_R,
    ANEXOS_CPP_FORA_DAS,
    FAIXAS_SIMPLES,
    NOMES_ANEXOS,
)
from regime_analyzer.shared.exceptions import RuleTableError
from regime_analyzer.shared.formatters import format_currency, format_rate
from regime_analyzer.shared.money import ZERO, dividir

logger = logging.getLogger(__name__)

MOTIVO_VEDADO = "Atividade vedada ao Simples Nacional (LC 123/2006, Art. 17)."


def tabelas_simples_padrao() -> dict[Anexo, BracketTable]:
    """
    Build the 2026 bracket tables of Anexos I to V.

    Returns:
        Validated tables keyed by annex

    Raises:
        RuleTableError: If a table has non-increasing ceilings
    """
    try:
        return {
            anexo: BracketTable(
                anexo=anexo,
                faixas=tuple(
                    Faixa(limite=limite, aliquota=aliquota, deducao=deducao)
                    for limite, aliquota, deducao in faixas
                ),
            )
            for anexo, faixas in FAIXAS_SIMPLES.items()
        }
    except PydanticValidationError as e:
        raise RuleTableError(f"Tabela do Simples Nacional inválida: {e}") from e


class BracketCalculator:
    """Computes Simples Nacional effective rates and DAS amounts."""

    def __init__(
        self,
        tables: Optional[dict[Anexo, BracketTable]] = None,
        limiar_fator_r: Optional[Decimal] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.config = config or EngineConfig()
        self.tables = tables if tables is not None else tabelas_simples_padrao()
        self.limiar_fator_r = (
            limiar_fator_r if limiar_fator_r is not None else self.config.limiar_fator_r
        )

    def effective_rate(
        self,
        anexo: Anexo,
        rbt12: Decimal,
        folha12: Optional[Decimal] = None,
        fator_r: bool = False,
    ) -> AliquotaEfetiva:
        """
        Look up the effective rate for a 12-month gross revenue.

        Args:
            anexo: Annex of the activity
            rbt12: Gross revenue of the last 12 months
            folha12: Payroll of the last 12 months (for the factor R)
            fator_r: Whether the activity is factor-R sensitive

        Returns:
            AliquotaEfetiva; ``inelegivel=True`` above the last ceiling or
            for a barred activity
        """
        if anexo == Anexo.VEDADO:
            return AliquotaEfetiva(inelegivel=True, motivo=MOTIVO_VEDADO)

        anexo_aplicado = anexo
        razao = None
        if fator_r and folha12 is not None and rbt12 > 0:
            razao = folha12 / rbt12
            if razao >= self.limiar_fator_r:
                anexo_aplicado = ANEXO_ALTERNATIVO_FATOR_R.get(anexo, anexo)

        if rbt12 <= 0:
            return AliquotaEfetiva(aliquota=ZERO, anexo_aplicado=anexo_aplicado, fator_r=razao)

        tabela = self.tables.get(anexo_aplicado)
        if tabela is None:
            raise RuleTableError(f"Sem tabela de faixas para o Anexo {anexo_aplicado.value}")

        for indice, faixa in enumerate(tabela.faixas, start=1):
            if rbt12 <= faixa.limite:
                return AliquotaEfetiva(
                    aliquota=faixa.aliquota_efetiva(rbt12),
                    anexo_aplicado=anexo_aplicado,
                    faixa=indice,
                    fator_r=razao,
                )

        return AliquotaEfetiva(
            inelegivel=True,
            anexo_aplicado=anexo_aplicado,
            fator_r=razao,
            motivo=(
                f"RBT12 de {format_currency(rbt12)} excede o limite do Simples Nacional "
                f"({format_currency(tabela.limite_maximo)})."
            ),
        )

    def valor_mensal(
        self,
        receita_periodo: Decimal,
        anexo: Anexo,
        rbt12: Decimal,
        folha12: Optional[Decimal] = None,
        fator_r: bool = False,
    ) -> Optional[Decimal]:
        """DAS for a period's revenue, or None when the company is ineligible."""
        resultado = self.effective_rate(anexo, rbt12, folha12, fator_r)
        if resultado.inelegivel:
            return None
        return receita_periodo * resultado.aliquota

    def compute(
        self,
        periodos: Sequence[PeriodoFiscal],
        ruleset: TaxRuleSet,
        rbt12: Optional[Decimal] = None,
        folha12: Optional[Decimal] = None,
        perfil: Optional[RegionTaxProfile] = None,
    ) -> ResultadoRegime:
        """
        Compute the Simples Nacional liability over a set of periods.

        RBT12 and payroll default to the period totals annualized.

        Args:
            periodos: Fiscal periods
            ruleset: Resolved activity ruleset
            rbt12: 12-month gross revenue used for the bracket lookup
            folha12: 12-month payroll used for the factor R
            perfil: State profile (ISS rate and sublimit)

        Returns:
            ResultadoRegime with DAS and the charges collected outside it
        """
        receita = sum((p.receita_bruta for p in periodos), ZERO)
        folha = sum((p.folha_pagamento for p in periodos), ZERO)
        meses = sum(p.meses for p in periodos)
        fator_anual = dividir(Decimal(12), Decimal(meses))

        if rbt12 is None:
            rbt12 = receita * fator_anual
        if folha12 is None:
            folha12 = folha * fator_anual

        if ruleset.vedado:
            motivo = ruleset.motivo_vedacao or MOTIVO_VEDADO
            logger.info("Simples Nacional inelegível para %s: %s", ruleset.codigo, motivo)
            return ResultadoRegime.inelegivel_para(Regime.SIMPLES_NACIONAL, motivo, receita)

        aliquota = self.effective_rate(ruleset.anexo, rbt12, folha12, ruleset.fator_r)
        if aliquota.inelegivel:
            logger.info("Simples Nacional inelegível para %s: %s", ruleset.codigo, aliquota.motivo)
            return ResultadoRegime.inelegivel_para(
                Regime.SIMPLES_NACIONAL, aliquota.motivo or MOTIVO_VEDADO, receita
            )

        avisos: list[str] = []
        if aliquota.anexo_aplicado != ruleset.anexo:
            avisos.append(
                f"Fator R de {format_rate(aliquota.fator_r)} atinge o mínimo de "
                f"{format_rate(self.limiar_fator_r, 0)}: tributação pelo "
                f"{NOMES_ANEXOS[aliquota.anexo_aplicado]}."
            )

        das = receita * aliquota.aliquota
        encargos = ZERO
        if aliquota.anexo_aplicado in ANEXOS_CPP_FORA_DAS:
            encargos = folha * self.config.aliquota_encargos
            avisos.append("Anexo IV: contribuição patronal (CPP) recolhida fora do DAS.")

        config = self.config.com_perfil(perfil) if perfil else self.config
        iss = ZERO
        if rbt12 > config.sublimite_simples:
            receita_servicos = sum(
                (p.receita_servico_efetiva(ruleset.servico) for p in periodos), ZERO
            )
            iss = receita_servicos * config.aliquota_iss
            icms = (
                f"alíquota interna padrão de ICMS em {perfil.nome}: {format_rate(perfil.icms_padrao)}"
                if perfil
                else "ICMS não calculado"
            )
            avisos.append(
                f"RBT12 acima do sublimite de {format_currency(config.sublimite_simples)}: "
                f"ISS e ICMS recolhidos fora do DAS ({icms})."
            )

        return ResultadoRegime(
            regime=Regime.SIMPLES_NACIONAL,
            receita_bruta=receita,
            detalhamento=Detalhamento(das=das, encargos_folha=encargos, iss=iss).arredondado(),
            avisos=tuple(avisos),
            anexo=aliquota.anexo_aplicado,
        )
