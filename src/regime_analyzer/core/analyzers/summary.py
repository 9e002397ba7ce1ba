"""Full company analysis: regimes, break-even, opportunities and advice."""

import logging
from decimal import Decimal, DecimalException
from typing import Any, Optional, Union

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
from regime_analyzer.core.analyzers.simples import BracketCalculator
from regime_analyzer.core.analyzers.tips import gerar_dicas
from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models.advice import ModuleStatus
from regime_analyzer.core.models.enums import Regime
from regime_analyzer.core.models.periods import DadosAnuais, dividir_periodos
from regime_analyzer.core.models.results import BreakEvenResult, ResultadoRegime
from regime_analyzer.core.models.ruleset import TaxRuleSet
from regime_analyzer.core.models.summary import AcaoEconomia, PerfilEmpresa, PosicaoRanking, Summary
from regime_analyzer.core.rules.cnae_rules import RuleTables, default_rule_tables
from regime_analyzer.core.rules.regions import perfil_regional
from regime_analyzer.shared.exceptions import AnalysisError
from regime_analyzer.shared.money import ZERO, arredondar, dividir

logger = logging.getLogger(__name__)

AVISO_GERAL = "Estimativa para planejamento tributário; não substitui a análise de um contador."
AVISO_MARGEM_ASSUMIDA = (
    "Despesas e folha não informadas: o Lucro Real foi calculado com margem de 100%."
)

REGIME_AVALIAR = "Avaliar com contador"

MODULO_PRO_LABORE = "Pró-labore ótimo"
MODULO_JCP = "JCP"
MODULO_REGIME_CAIXA = "Regime de caixa"
MODULO_ECD = "Escrituração contábil (ECD)"
MODULO_LC224 = "LC 224/2025"


class SummaryBuilder:
    """Runs the whole pipeline for a company profile.

    Builders hold only immutable collaborators, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        resolver: Optional[RuleResolver] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.resolver = resolver or RuleResolver(default_rule_tables())
        self.config = config or EngineConfig()
        self.aggregator = AdviceAggregator()

    def build(self, perfil: PerfilEmpresa) -> Summary:
        """
        Analyze a company.

        Args:
            perfil: Company profile

        Returns:
            Summary with the three regimes, ranking, break-even and advice

        Raises:
            AnalysisError: If an amount is too large to be computed
        """
        try:
            return self._build(perfil)
        except DecimalException as e:
            raise AnalysisError(f"Falha no cálculo: {e!r}") from e

    def _build(self, perfil: PerfilEmpresa) -> Summary:
        dados = perfil.dados
        regiao = perfil_regional(perfil.uf) if perfil.uf else None
        config = self.config.com_perfil(regiao) if regiao else self.config
        avisos: list[str] = [AVISO_GERAL]

        ruleset = self.resolver.resolve(perfil.codigo_cnae, perfil.categoria)
        if ruleset.estimado and ruleset.observacao:
            avisos.append(ruleset.observacao)
        logger.info("Analisando CNAE %s (%s)", ruleset.codigo or "-", ruleset.fonte.value)

        periodos = dividir_periodos(dados, 4)
        simples = BracketCalculator(config=config).compute(periodos, ruleset, perfil=regiao)
        presumido = PresumedRegimeCalculator(config).compute_year(periodos, ruleset)

        margem, assumida = self._margem_lucro_real(dados)
        if assumida:
            avisos.append(AVISO_MARGEM_ASSUMIDA)
        calculadora_real = RealRegimeCalculator(config)
        real = calculadora_real.compute_year(periodos, margem, ruleset)

        for resultado in (simples, presumido, real):
            for aviso in resultado.avisos:
                texto = (
                    f"{resultado.regime.nome} inelegível: {aviso}"
                    if resultado.inelegivel
                    else aviso
                )
                if texto not in avisos:
                    avisos.append(texto)

        carga_presumido = ZERO if presumido.inelegivel else presumido.total
        breakeven = None
        if not presumido.inelegivel:
            breakeven = BreakEvenAnalyzer(calculadora_real, config).find(
                receita_anual=dados.receita_bruta,
                carga_presumido=carga_presumido,
                folha_anual=dados.folha_pagamento,
                despesas_operacionais=dados.despesas_operacionais,
                base_creditos=dados.base_creditos,
                prejuizo_acumulado=dados.prejuizo_acumulado,
                ruleset=ruleset,
                incentivo_regional=dados.incentivo_regional,
                receita_servicos=dados.receita_servicos,
                receita_exportacao=dados.receita_exportacao,
                receita_isenta=dados.receita_isenta,
                receita_st=dados.receita_st,
                margem_real=margem * 100 if dados.lucro_contabil is not None else None,
            )

        oportunidades = self._oportunidades(perfil, presumido, ruleset)
        modulos = oportunidades.pop("modulos")
        for modulo in modulos:
            if not modulo.disponivel:
                avisos.append(f"Módulo {modulo.nome} indisponível: {modulo.motivo}")

        dicas = gerar_dicas(
            dados.receita_bruta,
            ruleset,
            folha_anual=dados.folha_pagamento,
            despesas_operacionais=dados.despesas_operacionais,
            base_creditos=dados.base_creditos,
            receita_exportacao=dados.receita_exportacao,
            receita_isenta=dados.receita_isenta,
            receita_st=dados.receita_st,
            incentivo_regional=dados.incentivo_regional,
            regiao=regiao,
            numero_atividades=dados.numero_atividades,
            tem_escrituracao=perfil.oportunidades.tem_escrituracao,
            tem_equipamentos=perfil.oportunidades.tem_equipamentos,
            tem_pd=perfil.oportunidades.tem_pd,
            breakeven=breakeven,
        )

        fontes = self.aggregator.coletar_fontes(
            pro_labore=oportunidades["pro_labore"],
            ecd=oportunidades["ecd"],
            regime_caixa=oportunidades["regime_caixa"],
            breakeven=breakeven,
            jcp=oportunidades["jcp"],
        )
        economia = self.aggregator.build(fontes, dicas, carga_presumido)

        acoes = sorted(economia.fontes, key=lambda f: f.valor, reverse=True)[:5]

        return Summary(
            razao_social=perfil.razao_social,
            ruleset=ruleset,
            receita_bruta_anual=dados.receita_bruta,
            margem_lucro_real=margem,
            simples=simples,
            presumido=presumido,
            real=real,
            ranking=ranking_regimes((simples, presumido, real)),
            breakeven=breakeven,
            economia=economia,
            dicas=tuple(dicas),
            top_dicas=tuple(d.titulo for d in dicas[:3]),
            acoes_economia=tuple(
                AcaoEconomia(acao=f.fonte, valor=f.valor, tipo=f.tipo) for f in acoes
            ),
            regime_recomendado=regime_recomendado(breakeven, config.janela_recomendacao),
            modulos=tuple(modulos),
            avisos=tuple(avisos),
            **oportunidades,
        )

    @staticmethod
    def _margem_lucro_real(dados: DadosAnuais) -> tuple[Decimal, bool]:
        """Margin used for Lucro Real and whether it was assumed (no cost data)."""
        if dados.receita_bruta <= 0:
            return ZERO, False
        if dados.lucro_contabil is not None:
            return max(ZERO, dividir(dados.lucro_contabil, dados.receita_bruta)), False
        if dados.despesas_operacionais > 0 or dados.folha_pagamento > 0:
            custos = dados.despesas_operacionais + dados.folha_pagamento
            return max(ZERO, (dados.receita_bruta - custos) / dados.receita_bruta), False
        return Decimal("1"), True

    def _oportunidades(
        self,
        perfil: PerfilEmpresa,
        presumido: ResultadoRegime,
        ruleset: TaxRuleSet,
    ) -> dict[str, Any]:
        """Run each opportunity simulator whose inputs are present."""
        dados = perfil.dados
        entrada = perfil.oportunidades
        modulos: list[ModuleStatus] = []

        detalhe = presumido.detalhamento
        tributos_federais = (
            detalhe.irpj + detalhe.adicional_irpj + detalhe.csll + detalhe.pis + detalhe.cofins
        )
        base_presumida = dados.receita_bruta * ruleset.presuncao_irpj
        lucro_distribuivel = max(ZERO, base_presumida - tributos_federais)

        pro_labore = ()
        if entrada.socios:
            pro_labore = tuple(
                simular_pro_labore_otimo(socio, lucro_distribuivel) for socio in entrada.socios
            )
            modulos.append(ModuleStatus(nome=MODULO_PRO_LABORE, disponivel=True))
        else:
            modulos.append(
                ModuleStatus(
                    nome=MODULO_PRO_LABORE, disponivel=False, motivo="Nenhum sócio informado."
                )
            )

        jcp = None
        if None not in (
            entrada.patrimonio_liquido,
            entrada.taxa_tjlp,
            entrada.lucro_liquido_ou_reservas,
        ):
            # Tax-free distribution left after the pró-labore adjustment
            economia_pro_labore = sum((r.economia_anual for r in pro_labore), ZERO)
            jcp = simular_jcp(
                entrada.patrimonio_liquido,
                entrada.taxa_tjlp,
                entrada.lucro_liquido_ou_reservas,
                data_referencia=entrada.data_jcp,
                lucro_distribuivel_restante=max(ZERO, lucro_distribuivel - economia_pro_labore),
            )
            modulos.append(ModuleStatus(nome=MODULO_JCP, disponivel=True))
        else:
            modulos.append(
                ModuleStatus(
                    nome=MODULO_JCP,
                    disponivel=False,
                    motivo="Patrimônio líquido, TJLP e lucro/reservas são necessários.",
                )
            )

        regime_caixa = None
        if entrada.faturamento_mensal is not None and entrada.recebimento_mensal is not None:
            regime_caixa = simular_regime_caixa(
                entrada.faturamento_mensal, entrada.recebimento_mensal, ruleset
            )
            modulos.append(ModuleStatus(nome=MODULO_REGIME_CAIXA, disponivel=True))
        else:
            modulos.append(
                ModuleStatus(
                    nome=MODULO_REGIME_CAIXA,
                    disponivel=False,
                    motivo="Faturamento e recebimento mensais não informados.",
                )
            )

        ecd = None
        if entrada.tem_escrituracao:
            modulos.append(
                ModuleStatus(
                    nome=MODULO_ECD,
                    disponivel=False,
                    motivo="Empresa já possui escrituração completa.",
                )
            )
        elif dados.lucro_contabil is None:
            modulos.append(
                ModuleStatus(
                    nome=MODULO_ECD, disponivel=False, motivo="Lucro contábil não informado."
                )
            )
        else:
            ecd = calcular_beneficio_ecd(
                base_presumida,
                dados.lucro_contabil,
                tributos_federais,
                entrada.custo_anual_ecd or ZERO,
            )
            modulos.append(ModuleStatus(nome=MODULO_ECD, disponivel=True))

        lc224 = None
        if presumido.inelegivel:
            modulos.append(
                ModuleStatus(
                    nome=MODULO_LC224, disponivel=False, motivo="Lucro Presumido inelegível."
                )
            )
        else:
            lc224 = calcular_impacto_lc224(dados.receita_bruta, ruleset, entrada.ano_calendario)
            modulos.append(ModuleStatus(nome=MODULO_LC224, disponivel=True))

        return {
            "pro_labore": pro_labore,
            "jcp": jcp,
            "regime_caixa": regime_caixa,
            "ecd": ecd,
            "lc224": lc224,
            "modulos": modulos,
        }


def ranking_regimes(resultados: tuple[ResultadoRegime, ...]) -> tuple[PosicaoRanking, ...]:
    """
    Rank eligible regimes from cheapest to most expensive.

    Args:
        resultados: Regime results (ineligible ones are left out)

    Returns:
        Ranking with the saving of each regime against the most expensive one
    """
    elegiveis = sorted((r for r in resultados if not r.inelegivel), key=lambda r: r.total)
    if not elegiveis:
        return ()
    mais_caro = elegiveis[-1].total
    return tuple(
        PosicaoRanking(
            posicao=posicao,
            regime=resultado.regime,
            total=resultado.total,
            economia_vs_mais_caro=arredondar(mais_caro - resultado.total),
        )
        for posicao, resultado in enumerate(elegiveis, start=1)
    )


def regime_recomendado(breakeven: Optional[BreakEvenResult], janela: Decimal) -> str:
    """
    Recommended regime between Lucro Presumido and Lucro Real.

    Args:
        breakeven: Break-even result
        janela: Points around the break-even margin where no regime is favored

    Returns:
        Regime name, or "Avaliar com contador" (also when the margin was
        assumed for lack of cost data)
    """
    if breakeven is None:
        return REGIME_AVALIAR
    if breakeven.presumido_sempre_vantajoso:
        return Regime.LUCRO_PRESUMIDO.nome
    if breakeven.real_sempre_vantajoso:
        return Regime.LUCRO_REAL.nome

    if breakeven.margem_assumida:
        return REGIME_AVALIAR

    margem = breakeven.margem_real_estimada
    equilibrio = breakeven.margem_equilibrio
    if margem is not None and equilibrio is not None:
        if margem > equilibrio + janela:
            return Regime.LUCRO_PRESUMIDO.nome
        if margem < equilibrio - janela:
            return Regime.LUCRO_REAL.nome
    return REGIME_AVALIAR


def analyze_company(
    perfil: Union[PerfilEmpresa, dict[str, Any]],
    config: Optional[EngineConfig] = None,
    tables: Optional[RuleTables] = None,
) -> Summary:
    """
    Convenience function to analyze a company.

    Args:
        perfil: PerfilEmpresa or raw dict (JSON profile)
        config: Engine configuration
        tables: Rule tables (default: shipped tables)

    Returns:
        Summary

    Raises:
        MissingInputError: If the annual gross revenue is missing
        AnalysisError: If an amount is too large to be computed
    """
    if isinstance(perfil, dict):
        perfil = PerfilEmpresa.from_dict(perfil)
    resolver = RuleResolver(tables or default_rule_tables())
    return SummaryBuilder(resolver, config).build(perfil)
