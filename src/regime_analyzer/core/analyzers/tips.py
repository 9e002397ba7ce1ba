"""Contextual tax planning tips."""

from decimal import Decimal
from typing import Optional

from regime_analyzer.core.models.advice import Dica
from regime_analyzer.core.models.enums import TipoDica
from regime_analyzer.core.models.region import RegionTaxProfile
from regime_analyzer.core.models.results import BreakEvenResult
from regime_analyzer.core.models.ruleset import TaxRuleSet
from regime_analyzer.core.rules.tax_constants import (
    ALIQUOTA_ADICIONAL_IRPJ,
    ALIQUOTA_IRPJ,
    CARGA_IRPJ_CSLL,
    LIMITE_ADICIONAL_ANUAL,
    PIS_COFINS_CUMULATIVO,
    PIS_COFINS_NAO_CUMULATIVO,
    REDUCAO_IRPJ_INCENTIVO,
)
from regime_analyzer.shared.formatters import format_currency, format_percentage
from regime_analyzer.shared.money import ZERO, arredondar


class TipsAnalyzer:
    """Builds advice items from the company profile and the break-even result.

    Tips are sorted alerts first, then savings, actions and information.
    """

    def __init__(
        self,
        receita_anual: Decimal,
        ruleset: TaxRuleSet,
        folha_anual: Decimal = ZERO,
        despesas_operacionais: Decimal = ZERO,
        base_creditos: Decimal = ZERO,
        receita_exportacao: Decimal = ZERO,
        receita_isenta: Decimal = ZERO,
        receita_st: Decimal = ZERO,
        incentivo_regional: bool = False,
        regiao: Optional[RegionTaxProfile] = None,
        numero_atividades: int = 1,
        tem_escrituracao: bool = False,
        tem_equipamentos: bool = False,
        tem_pd: bool = False,
        breakeven: Optional[BreakEvenResult] = None,
    ):
        self.receita = receita_anual
        self.ruleset = ruleset
        self.folha = folha_anual
        self.despesas = despesas_operacionais
        self.base_creditos = base_creditos
        self.receita_exportacao = receita_exportacao
        self.exclusoes = receita_exportacao + receita_isenta + receita_st
        self.incentivo_regional = incentivo_regional
        self.regiao = regiao
        self.numero_atividades = numero_atividades
        self.tem_escrituracao = tem_escrituracao
        self.tem_equipamentos = tem_equipamentos
        self.tem_pd = tem_pd
        self.breakeven = breakeven
        self.dicas: list[Dica] = []

    def analyze(self) -> list[Dica]:
        """Run every check and return the tips in display order."""
        self._check_margem_presuncao()
        self._check_incentivo_regional()
        self._check_regiao()
        self._dica_regime_caixa()
        self._check_atividades_mistas()
        self._check_pis_cofins()
        self._check_adicional_irpj()
        self._dica_reforma_tributaria()
        self._check_escrituracao()
        self._check_breakeven()
        self._check_investimentos()
        self._check_exportacao()

        return sorted(self.dicas, key=lambda d: d.tipo.ordem)

    def _check_margem_presuncao(self) -> None:
        """Compare the real margin with the presumption rate."""
        if self.receita <= 0 or (self.despesas <= 0 and self.folha <= 0):
            return

        margem = (self.receita - self.despesas - self.folha) / self.receita
        presuncao = self.ruleset.presuncao_irpj
        texto_margem = format_percentage(margem * 100)
        texto_presuncao = format_percentage(presuncao * 100)

        if margem > presuncao:
            impacto = arredondar(self.receita * (margem - presuncao) * CARGA_IRPJ_CSLL)
            self.dicas.append(
                Dica(
                    titulo="Margem real acima da presunção — LP é vantajoso",
                    descricao=(
                        f"Sua margem real ({texto_margem}) é superior ao percentual de presunção "
                        f"({texto_presuncao}). No Lucro Presumido, você tributa sobre uma base "
                        f"menor que o lucro efetivo. Economia estimada de "
                        f"{format_currency(impacto)}/ano em IRPJ+CSLL."
                    ),
                    tipo=TipoDica.ECONOMIA,
                    impacto_estimado=impacto,
                )
            )
        else:
            impacto = arredondar(self.receita * (presuncao - margem) * CARGA_IRPJ_CSLL)
            self.dicas.append(
                Dica(
                    titulo="Margem real abaixo da presunção — Atenção",
                    descricao=(
                        f"Sua margem real ({texto_margem}) é inferior ao percentual de presunção "
                        f"({texto_presuncao}). No LP, você tributa sobre base maior que o lucro "
                        f"efetivo. Custo extra estimado: {format_currency(impacto)}/ano. "
                        "Foque em aumentar margem ou avalie o Lucro Real."
                    ),
                    tipo=TipoDica.ALERTA,
                    impacto_estimado=impacto,
                )
            )

    def _check_incentivo_regional(self) -> None:
        """SUDAM/SUDENE IRPJ reduction (Lucro Real only)."""
        if not self.incentivo_regional:
            return

        tipo = self.regiao.tipo_incentivo if self.regiao and self.regiao.tipo_incentivo else ""
        irpj = self.receita * self.ruleset.presuncao_irpj * ALIQUOTA_IRPJ
        economia = arredondar(irpj * REDUCAO_IRPJ_INCENTIVO)
        self.dicas.append(
            Dica(
                titulo=f"Incentivo {tipo or 'SUDAM/SUDENE'} — Redução de 75% no IRPJ (Lucro Real)",
                descricao=(
                    "Empresas em área SUDAM/SUDENE podem obter redução de 75% do IRPJ no Lucro "
                    "Real (Lei 12.715/2012, Art. 1º). Economia potencial estimada: "
                    f"{format_currency(economia)}/ano. Avalie se o benefício compensa a "
                    "complexidade do LR."
                ),
                tipo=TipoDica.ECONOMIA,
                impacto_estimado=economia,
                # Already reflected in the Lucro Real total
                ja_aplicado=True,
            )
        )

    def _check_regiao(self) -> None:
        """Benefits available in the company's state."""
        if self.regiao is None:
            return

        if self.regiao.tem_incentivo_federal and not self.incentivo_regional:
            irpj = self.receita * self.ruleset.presuncao_irpj * ALIQUOTA_IRPJ
            economia = arredondar(irpj * self.regiao.reducao_irpj)
            self.dicas.append(
                Dica(
                    titulo=f"{self.regiao.nome} está em área {self.regiao.tipo_incentivo}",
                    descricao=(
                        f"Empresas da Região {self.regiao.regiao} com projeto aprovado pela "
                        f"{self.regiao.tipo_incentivo} podem reduzir 75% do IRPJ no Lucro Real "
                        "(MP 2.199-14/2001, Art. 1º). Redução estimada: "
                        f"{format_currency(economia)}/ano. Exige laudo constitutivo e projeto "
                        "de implantação, ampliação ou modernização."
                    ),
                    tipo=TipoDica.ACAO,
                    impacto_estimado=economia,
                )
            )

        if self.regiao.zfm:
            self.dicas.append(
                Dica(
                    titulo="Zona Franca de Manaus disponível no seu estado",
                    descricao=(
                        "Vendas para a Zona Franca de Manaus e áreas de livre comércio têm "
                        "isenção de PIS/COFINS (Lei 10.996/2004; Decreto-Lei 288/1967). Informe "
                        "essas receitas como isentas para excluí-las da base de cálculo."
                    ),
                    tipo=TipoDica.ACAO,
                )
            )

    def _dica_regime_caixa(self) -> None:
        self.dicas.append(
            Dica(
                titulo="Regime de Caixa disponível no Lucro Presumido",
                descricao=(
                    "O LP permite optar pelo regime de caixa para reconhecimento de receitas "
                    "(IN RFB 1.700/2017, Art. 223). O imposto é pago somente quando o cliente "
                    "efetivamente paga. Benefício especial para empresas com alta inadimplência "
                    "ou prazos longos de recebimento."
                ),
                tipo=TipoDica.INFO,
            )
        )

    def _check_atividades_mistas(self) -> None:
        if self.numero_atividades <= 1:
            return
        self.dicas.append(
            Dica(
                titulo="Atividades mistas — Classificação correta é essencial",
                descricao=(
                    f"Sua empresa possui {self.numero_atividades} atividades/receitas distintas. "
                    "Cada receita deve ser classificada no percentual de presunção correto "
                    "(Lei 9.249/95, Art. 15). Classificação incorreta pode gerar autuação fiscal "
                    "com multa de 75% + juros SELIC."
                ),
                tipo=TipoDica.ALERTA,
            )
        )

    def _check_pis_cofins(self) -> None:
        """Cumulative (LP) vs non-cumulative (LR) PIS/COFINS."""
        if self.base_creditos <= 0:
            return

        # Export, exempt and single-phase revenue stay out of both bases
        base = max(ZERO, self.receita - self.exclusoes)
        cumulativo = arredondar(base * PIS_COFINS_CUMULATIVO)
        nao_cumulativo = arredondar(
            max(ZERO, base - self.base_creditos) * PIS_COFINS_NAO_CUMULATIVO
        )
        if nao_cumulativo >= cumulativo:
            return

        economia = cumulativo - nao_cumulativo
        self.dicas.append(
            Dica(
                titulo="PIS/COFINS — Não-cumulativo pode ser mais vantajoso",
                descricao=(
                    f"Com créditos sobre {format_currency(self.base_creditos)} de insumos, o "
                    f"PIS/COFINS não-cumulativo (Lucro Real) custaria "
                    f"{format_currency(nao_cumulativo)} vs {format_currency(cumulativo)} no "
                    f"cumulativo (LP). Economia potencial: {format_currency(economia)}/ano."
                ),
                tipo=TipoDica.ECONOMIA,
                impacto_estimado=economia,
            )
        )

    def _check_adicional_irpj(self) -> None:
        if self.receita <= 0:
            return

        base = self.receita * self.ruleset.presuncao_irpj
        if base <= LIMITE_ADICIONAL_ANUAL:
            return

        adicional = arredondar((base - LIMITE_ADICIONAL_ANUAL) * ALIQUOTA_ADICIONAL_IRPJ)
        self.dicas.append(
            Dica(
                titulo="Adicional de IRPJ de 10% incide sobre sua empresa",
                descricao=(
                    f"Base presumida anual estimada de {format_currency(base)} excede o limite "
                    "de R$ 240.000 (R$ 60.000/trimestre). Adicional de 10% sobre o excedente: "
                    f"{format_currency(adicional)}/ano (RIR/2018, Art. 624)."
                ),
                tipo=TipoDica.ALERTA,
                impacto_estimado=adicional,
            )
        )

    def _dica_reforma_tributaria(self) -> None:
        self.dicas.append(
            Dica(
                titulo="Reforma Tributária — CBS e IBS (2026-2033)",
                descricao=(
                    "A Reforma Tributária (EC 132/2023) inicia a transição em 2026: CBS (federal) "
                    "substituirá PIS/COFINS e IBS (estadual/municipal) substituirá ICMS/ISS. "
                    "A transição é gradual até 2033. Acompanhe a regulamentação (LC 214/2025) "
                    "e planeje a adaptação."
                ),
                tipo=TipoDica.INFO,
            )
        )

    def _check_escrituracao(self) -> None:
        if self.tem_escrituracao:
            return
        self.dicas.append(
            Dica(
                titulo="Escrituração completa amplia distribuição de lucros",
                descricao=(
                    "Sem escrituração contábil completa (ECD), a distribuição isenta de lucros "
                    "fica limitada à base presumida menos impostos (IN RFB 1.700/2017, Art. 238). "
                    "Com ECD, pode distribuir o lucro contábil efetivo (se maior)."
                ),
                tipo=TipoDica.ACAO,
            )
        )

    def _check_breakeven(self) -> None:
        if self.breakeven is None or not self.breakeven.alerta:
            return
        self.dicas.append(
            Dica(
                titulo="Break-even LP vs LR requer atenção",
                descricao=(
                    f"{self.breakeven.alerta} {self.breakeven.recomendacao} Reavalie o regime "
                    "tributário anualmente com base em dados atualizados."
                ),
                tipo=TipoDica.ALERTA,
            )
        )

    def _check_investimentos(self) -> None:
        if not (self.tem_equipamentos or self.tem_pd):
            return

        beneficios = []
        if self.tem_equipamentos:
            beneficios.append("depreciação acelerada de equipamentos (Lei 11.196/2005, Art. 17)")
        if self.tem_pd:
            beneficios.append("incentivos da Lei do Bem para P&D (Lei 11.196/2005, Cap. III)")

        self.dicas.append(
            Dica(
                titulo="Investimentos/P&D — Benefícios exclusivos do Lucro Real",
                descricao=(
                    "Sua empresa possui investimentos que podem gerar benefícios tributários no "
                    f"Lucro Real: {'; '.join(beneficios)}. Esses incentivos NÃO estão disponíveis "
                    "no Lucro Presumido."
                ),
                tipo=TipoDica.ECONOMIA,
            )
        )

    def _check_exportacao(self) -> None:
        """Export revenue is already excluded from the PIS/COFINS base."""
        if self.receita_exportacao <= 0:
            return

        impacto = arredondar(self.receita_exportacao * PIS_COFINS_CUMULATIVO)
        self.dicas.append(
            Dica(
                titulo="Receitas de exportação fora da base de PIS/COFINS",
                descricao=(
                    f"{format_currency(self.receita_exportacao)} de receitas de exportação foram "
                    "excluídos da base de PIS/COFINS (Lei 10.833/2003, Art. 6º). O benefício já "
                    "está refletido nos totais calculados."
                ),
                tipo=TipoDica.INFO,
                impacto_estimado=impacto,
                ja_aplicado=True,
            )
        )


def gerar_dicas(receita_anual: Decimal, ruleset: TaxRuleSet, **kwargs) -> list[Dica]:
    """
    Convenience function to build the tips for a company.

    Args:
        receita_anual: Annual gross revenue
        ruleset: Resolved activity ruleset
        **kwargs: Optional TipsAnalyzer inputs

    Returns:
        Tips sorted alerts first
    """
    return TipsAnalyzer(receita_anual, ruleset, **kwargs).analyze()
