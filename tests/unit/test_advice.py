"""Tests for contextual tips and savings aggregation."""

from decimal import Decimal

from regime_analyzer.core.analyzers import (
    AdviceAggregator,
    BreakEvenAnalyzer,
    TipsAnalyzer,
    calcular_beneficio_ecd,
    gerar_dicas,
    simular_jcp,
    simular_pro_labore_otimo,
    simular_regime_caixa,
)
from regime_analyzer.core.analyzers.advice import (
    FONTE_ECD,
    FONTE_JCP,
    FONTE_LUCRO_REAL,
    FONTE_PRO_LABORE,
    FONTE_REGIME_CAIXA,
)
from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models import (
    Dica,
    FonteEconomia,
    NivelOportunidade,
    Socio,
    TipoDica,
    TipoFonte,
)
from regime_analyzer.core.rules.regions import perfil_regional

RECEITA = Decimal("1200000")


def _titulos(dicas: list[Dica]) -> list[str]:
    return [d.titulo for d in dicas]


class TestTipsAnalyzer:
    """Tests for TipsAnalyzer."""

    def test_margin_above_presumption(self, ruleset_ti):
        dicas = gerar_dicas(
            RECEITA,
            ruleset_ti,
            folha_anual=Decimal("240000"),
            despesas_operacionais=Decimal("360000"),
        )
        margem = next(d for d in dicas if d.titulo.startswith("Margem real acima"))

        assert margem.tipo == TipoDica.ECONOMIA
        assert margem.impacto_estimado == Decimal("51840.00")

    def test_margin_below_presumption(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti, despesas_operacionais=Decimal("1100000"))
        margem = next(d for d in dicas if d.titulo.startswith("Margem real abaixo"))

        assert margem.tipo == TipoDica.ALERTA

    def test_no_margin_tip_without_costs(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti)
        assert not any(t.startswith("Margem real") for t in _titulos(dicas))

    def test_alerts_first(self, ruleset_ti):
        dicas = gerar_dicas(
            RECEITA,
            ruleset_ti,
            folha_anual=Decimal("240000"),
            despesas_operacionais=Decimal("360000"),
        )
        ordens = [d.tipo.ordem for d in dicas]

        assert ordens == sorted(ordens)
        assert dicas[0].tipo == TipoDica.ALERTA
        assert dicas[-1].tipo == TipoDica.INFO

    def test_surtax_alert(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti)
        adicional = next(d for d in dicas if d.titulo.startswith("Adicional de IRPJ"))

        assert adicional.impacto_estimado == Decimal("14400.00")

    def test_no_surtax_alert_for_small_base(self, ruleset_comercio):
        dicas = gerar_dicas(RECEITA, ruleset_comercio)
        assert not any(t.startswith("Adicional de IRPJ") for t in _titulos(dicas))

    def test_regional_incentive_already_applied(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti, incentivo_regional=True)
        incentivo = next(d for d in dicas if "SUDAM" in d.titulo)

        assert incentivo.ja_aplicado
        assert incentivo.impacto_estimado == Decimal("43200.00")

    def test_sudam_area(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti, regiao=perfil_regional("PA"))
        area = next(d for d in dicas if d.titulo == "Pará está em área SUDAM")

        assert area.tipo == TipoDica.ACAO
        assert area.impacto_estimado == Decimal("43200.00")
        assert not area.ja_aplicado

    def test_sudene_area_with_incentive_applied(self, ruleset_ti):
        dicas = gerar_dicas(
            RECEITA, ruleset_ti, incentivo_regional=True, regiao=perfil_regional("BA")
        )
        titulos = _titulos(dicas)

        assert "Incentivo SUDENE — Redução de 75% no IRPJ (Lucro Real)" in titulos
        assert "Bahia está em área SUDENE" not in titulos

    def test_zona_franca(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti, regiao=perfil_regional("AM"))
        zfm = next(d for d in dicas if "Zona Franca de Manaus" in d.titulo)

        assert zfm.tipo == TipoDica.ACAO
        assert "Lei 10.996/2004" in zfm.descricao
        assert "Amazonas está em área SUDAM" in _titulos(dicas)

    def test_no_regional_tips_outside_incentive_areas(self, ruleset_ti):
        sp = gerar_dicas(RECEITA, ruleset_ti, regiao=perfil_regional("SP"))
        sem_regiao = gerar_dicas(RECEITA, ruleset_ti)

        assert _titulos(sp) == _titulos(sem_regiao)

    def test_mixed_activities(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti, numero_atividades=2)
        assert any(t.startswith("Atividades mistas") for t in _titulos(dicas))

    def test_pis_cofins_credits(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti, base_creditos=Decimal("1000000"))
        pis_cofins = next(d for d in dicas if d.titulo.startswith("PIS/COFINS"))

        assert pis_cofins.impacto_estimado == Decimal("25300.00")

    def test_pis_cofins_credits_exclude_export(self, ruleset_ti):
        """Export revenue stays out of both PIS/COFINS bases."""
        dicas = gerar_dicas(
            RECEITA,
            ruleset_ti,
            base_creditos=Decimal("800000"),
            receita_exportacao=Decimal("200000"),
        )
        pis_cofins = next(d for d in dicas if d.titulo.startswith("PIS/COFINS"))

        # 1.000.000 x 3,65% vs 200.000 x 9,25%
        assert pis_cofins.impacto_estimado == Decimal("18000.00")

    def test_few_credits_no_tip(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti, base_creditos=Decimal("100000"))
        assert not any(t.startswith("PIS/COFINS") for t in _titulos(dicas))

    def test_bookkeeping_action(self, ruleset_ti):
        sem = gerar_dicas(RECEITA, ruleset_ti)
        com = gerar_dicas(RECEITA, ruleset_ti, tem_escrituracao=True)

        assert any(d.tipo == TipoDica.ACAO for d in sem)
        assert not any(d.tipo == TipoDica.ACAO for d in com)

    def test_investments(self, ruleset_ti):
        dicas = TipsAnalyzer(RECEITA, ruleset_ti, tem_equipamentos=True, tem_pd=True).analyze()
        investimentos = next(d for d in dicas if d.titulo.startswith("Investimentos"))

        assert "depreciação acelerada" in investimentos.descricao
        assert "Lei do Bem" in investimentos.descricao

    def test_export_revenue_info(self, ruleset_ti):
        dicas = gerar_dicas(RECEITA, ruleset_ti, receita_exportacao=Decimal("100000"))
        exportacao = next(d for d in dicas if "exportação" in d.titulo)

        assert exportacao.tipo == TipoDica.INFO
        assert exportacao.ja_aplicado

    def test_break_even_alert(self, ruleset_ti):
        breakeven = BreakEvenAnalyzer().find(
            RECEITA,
            Decimal("210360"),
            despesas_operacionais=Decimal("1100000"),
            ruleset=ruleset_ti,
        )
        dicas = gerar_dicas(RECEITA, ruleset_ti, breakeven=breakeven)

        assert any(t.startswith("Break-even") for t in _titulos(dicas))


class TestAdviceAggregator:
    """Tests for AdviceAggregator."""

    def test_duplicate_titles_counted_once(self):
        fontes = [FonteEconomia(fonte=FONTE_PRO_LABORE, valor=Decimal("1000"))]
        dicas = [
            Dica(
                titulo="otimizacao  PRO-LABORE",
                descricao="duplicada",
                tipo=TipoDica.ECONOMIA,
                impacto_estimado=Decimal("500"),
            )
        ]
        resumo = AdviceAggregator().build(fontes, dicas, Decimal("100000"))

        assert resumo.total_economia_anual == Decimal("1000.00")
        assert len(resumo.fontes) == 1

    def test_deferral_is_not_savings(self):
        fontes = [
            FonteEconomia(fonte="Economia", valor=Decimal("1000")),
            FonteEconomia(
                fonte=FONTE_REGIME_CAIXA, valor=Decimal("5000"), tipo=TipoFonte.DIFERIMENTO
            ),
        ]
        resumo = AdviceAggregator().build(fontes, [], Decimal("100000"))

        assert resumo.total_economia_anual == Decimal("1000.00")
        assert resumo.total_diferimento == Decimal("5000.00")
        assert [f.fonte for f in resumo.fontes_economia] == ["Economia"]

    def test_applied_and_alert_tips_excluded(self):
        dicas = [
            Dica(
                titulo="Aplicada",
                descricao="",
                tipo=TipoDica.ECONOMIA,
                impacto_estimado=Decimal("900"),
                ja_aplicado=True,
            ),
            Dica(titulo="Alerta", descricao="", tipo=TipoDica.ALERTA, impacto_estimado=Decimal("800")),
            Dica(titulo="Sem impacto", descricao="", tipo=TipoDica.ECONOMIA),
            Dica(
                titulo="Economia",
                descricao="",
                tipo=TipoDica.ECONOMIA,
                impacto_estimado=Decimal("700"),
            ),
        ]
        resumo = AdviceAggregator().build([], dicas, Decimal("100000"))

        assert resumo.total_economia_anual == Decimal("700.00")
        assert [f.fonte for f in resumo.fontes] == ["Economia"]
        assert len(resumo.itens) == 4

    def test_nivel(self):
        nivel = AdviceAggregator.nivel

        assert nivel(Decimal("20000"), Decimal("100000")) == NivelOportunidade.ALTO
        assert nivel(Decimal("15000"), Decimal("100000")) == NivelOportunidade.MEDIO
        assert nivel(Decimal("5000"), Decimal("100000")) == NivelOportunidade.MEDIO
        assert nivel(Decimal("4900"), Decimal("100000")) == NivelOportunidade.BAIXO
        assert nivel(Decimal("100"), Decimal("0")) == NivelOportunidade.MEDIO
        assert nivel(Decimal("0"), Decimal("0")) == NivelOportunidade.BAIXO

    def test_recommendation_texts(self):
        agregador = AdviceAggregator()

        vazio = agregador.build([], [], Decimal("100000"))
        assert vazio.recomendacao_principal.startswith("Nenhuma oportunidade")

        diferimento = agregador.build(
            [FonteEconomia(fonte="Caixa", valor=Decimal("5000"), tipo=TipoFonte.DIFERIMENTO)],
            [],
            Decimal("100000"),
        )
        assert diferimento.recomendacao_principal.startswith("Diferimento tributário")

        economia = agregador.build(
            [FonteEconomia(fonte="A", valor=Decimal("5000"))], [], Decimal("100000")
        )
        assert "1 fonte(s)" in economia.recomendacao_principal

    def test_coletar_fontes(self, ruleset_ti):
        socio = Socio(pro_labore_atual=Decimal("5000"))
        pro_labore = simular_pro_labore_otimo(socio, Decimal("100000"))
        ecd = calcular_beneficio_ecd(
            Decimal("384000"), Decimal("600000"), Decimal("150000"), Decimal("10000")
        )
        caixa = simular_regime_caixa(
            [Decimal("100000")] * 12, [Decimal("80000")] * 12, ruleset_ti
        )
        breakeven = BreakEvenAnalyzer().find(
            RECEITA,
            Decimal("210360"),
            despesas_operacionais=Decimal("1100000"),
            ruleset=ruleset_ti,
        )

        fontes = AdviceAggregator().coletar_fontes(
            pro_labore=(pro_labore, pro_labore),
            ecd=ecd,
            regime_caixa=caixa,
            breakeven=breakeven,
        )
        por_nome = {f.fonte: f for f in fontes}

        # Partners' savings add up
        assert por_nome[FONTE_PRO_LABORE].valor == pro_labore.economia_anual * 2
        assert por_nome[FONTE_ECD].valor == Decimal("206000.00")
        assert por_nome[FONTE_REGIME_CAIXA].tipo == TipoFonte.DIFERIMENTO
        # Real margin 8,3% -> Lucro Real burden at 8%: 194.040
        assert por_nome[FONTE_LUCRO_REAL].valor == Decimal("16320.00")

    def test_no_sources_without_inputs(self):
        assert AdviceAggregator().coletar_fontes() == []

    def test_jcp_source(self):
        jcp = simular_jcp(Decimal("1000000"), Decimal("0.07"), Decimal("200000"))
        fontes = AdviceAggregator().coletar_fontes(jcp=jcp)

        assert len(fontes) == 1
        assert fontes[0].fonte == FONTE_JCP
        assert fontes[0].valor == Decimal("6767.20")
        assert fontes[0].tipo == TipoFonte.ECONOMIA

    def test_no_jcp_source_while_distribution_is_free(self):
        jcp = simular_jcp(
            Decimal("1000000"),
            Decimal("0.07"),
            Decimal("200000"),
            lucro_distribuivel_restante=Decimal("50000"),
        )
        assert AdviceAggregator().coletar_fontes(jcp=jcp) == []

    def test_migration_with_custom_scan_range(self, ruleset_ti):
        """The Lucro Real burden is read at the company's margin, not a list position."""
        config = EngineConfig(margem_minima=5)
        breakeven = BreakEvenAnalyzer(config=config).find(
            RECEITA,
            Decimal("210360"),
            despesas_operacionais=Decimal("1100000"),
            ruleset=ruleset_ti,
        )
        fontes = AdviceAggregator().coletar_fontes(breakeven=breakeven)

        assert fontes[0].fonte == FONTE_LUCRO_REAL
        assert fontes[0].valor == Decimal("16320.00")

    def test_no_migration_on_assumed_margin(self, ruleset_ti):
        breakeven = BreakEvenAnalyzer().find(
            RECEITA,
            Decimal("210360"),
            despesas_operacionais=Decimal("1100000"),
            ruleset=ruleset_ti,
        ).model_copy(update={"margem_assumida": True})

        assert AdviceAggregator().coletar_fontes(breakeven=breakeven) == []
