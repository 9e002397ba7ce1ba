"""Tests for the Lucro Presumido x Lucro Real break-even analyzer."""

from decimal import Decimal

from regime_analyzer.core.analyzers import BreakEvenAnalyzer, RealRegimeCalculator
from regime_analyzer.core.analyzers.breakeven import (
    ALERTA_ABAIXO,
    ALERTA_PROXIMO,
    AVISO_SEM_DESPESAS,
    RECOMENDACAO_PRESUMIDO_SEMPRE,
    RECOMENDACAO_REAL_SEMPRE,
    RECOMENDACAO_SEM_RECEITA,
)
from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models import DadosAnuais, Regime, dividir_periodos

RECEITA = Decimal("1200000")
# Lucro Presumido total of a R$ 1,2M software company (see test_presumido_real)
CARGA_LP = Decimal("210360")


class TestBreakEvenAnalyzer:
    """Tests for BreakEvenAnalyzer.find."""

    def test_zero_revenue(self):
        """Missing revenue returns a result without a series."""
        resultado = BreakEvenAnalyzer().find(Decimal("0"), Decimal("1000"))

        assert resultado.margem_equilibrio is None
        assert resultado.margens == ()
        assert resultado.recomendacao == RECOMENDACAO_SEM_RECEITA

    def test_scan_range(self, ruleset_ti):
        resultado = BreakEvenAnalyzer().find(RECEITA, CARGA_LP, ruleset=ruleset_ti)

        assert len(resultado.margens) == 95
        assert resultado.margens[0].margem == 1
        assert resultado.margens[-1].margem == 95

    def test_crossover_margin(self, ruleset_ti):
        """Lucro Real wins up to 13% and loses from 14% on."""
        resultado = BreakEvenAnalyzer().find(RECEITA, CARGA_LP, ruleset=ruleset_ti)

        assert resultado.margem_equilibrio == 14
        assert resultado.ponto(13).carga_real == Decimal("208440.00")
        assert resultado.ponto(14).carga_real == Decimal("211320.00")
        assert resultado.ponto(13).vencedor == Regime.LUCRO_REAL
        assert resultado.ponto(14).vencedor == Regime.LUCRO_PRESUMIDO
        assert not resultado.presumido_sempre_vantajoso
        assert not resultado.real_sempre_vantajoso

    def test_no_expenses_assumes_full_margin(self, ruleset_ti):
        resultado = BreakEvenAnalyzer().find(RECEITA, CARGA_LP, ruleset=ruleset_ti)

        assert resultado.margem_real_estimada == Decimal("100")
        assert resultado.aviso == AVISO_SEM_DESPESAS
        assert resultado.alerta is None
        assert resultado.margem_assumida
        assert "ocorre na margem de 14%" in resultado.recomendacao

    def test_margin_above_break_even(self, ruleset_ti):
        resultado = BreakEvenAnalyzer().find(
            RECEITA,
            CARGA_LP,
            folha_anual=Decimal("240000"),
            despesas_operacionais=Decimal("360000"),
            ruleset=ruleset_ti,
        )

        assert resultado.margem_real_estimada == Decimal("50.0")
        assert resultado.alerta is None
        assert resultado.aviso is None
        assert "ACIMA" in resultado.recomendacao

    def test_margin_below_break_even(self, ruleset_ti):
        resultado = BreakEvenAnalyzer().find(
            RECEITA,
            CARGA_LP,
            despesas_operacionais=Decimal("1100000"),
            ruleset=ruleset_ti,
        )

        assert resultado.margem_real_estimada == Decimal("8.3")
        assert resultado.alerta == ALERTA_ABAIXO
        assert "ABAIXO" in resultado.recomendacao

    def test_margin_near_break_even(self, ruleset_ti):
        resultado = BreakEvenAnalyzer().find(
            RECEITA,
            CARGA_LP,
            despesas_operacionais=Decimal("996000"),
            ruleset=ruleset_ti,
        )

        assert resultado.margem_real_estimada == Decimal("17.0")
        assert resultado.alerta == ALERTA_PROXIMO

    def test_presumido_always_cheaper(self, ruleset_comercio):
        """A zero presumed burden beats Lucro Real at every margin."""
        resultado = BreakEvenAnalyzer().find(RECEITA, Decimal("0"), ruleset=ruleset_comercio)

        assert resultado.presumido_sempre_vantajoso
        assert resultado.margem_equilibrio is None
        assert resultado.recomendacao == RECOMENDACAO_PRESUMIDO_SEMPRE

    def test_real_always_cheaper(self, ruleset_ti):
        resultado = BreakEvenAnalyzer().find(RECEITA, Decimal("10000000"), ruleset=ruleset_ti)

        assert resultado.real_sempre_vantajoso
        assert resultado.margem_equilibrio is None
        assert resultado.recomendacao == RECOMENDACAO_REAL_SEMPRE

    def test_custom_margin_range(self, ruleset_ti):
        config = EngineConfig(margem_minima=10, margem_maxima=20)
        resultado = BreakEvenAnalyzer(config=config).find(RECEITA, CARGA_LP, ruleset=ruleset_ti)

        assert [p.margem for p in resultado.margens] == list(range(10, 21))
        assert resultado.margem_equilibrio == 14

    def test_rate_override(self, ruleset_ti):
        """Rate overrides passed to find() replace the analyzer config."""
        sem_iss = EngineConfig(aliquota_iss=Decimal("0"))
        resultado = BreakEvenAnalyzer().find(
            RECEITA, CARGA_LP, aliquotas=sem_iss, ruleset=ruleset_ti
        )

        assert resultado.ponto(13).carga_real == Decimal("148440.00")

    def test_assumed_margin_not_compared(self, ruleset_ti):
        """Without costs the placeholder margin is not compared with the break-even."""
        resultado = BreakEvenAnalyzer().find(RECEITA, CARGA_LP, ruleset=ruleset_ti)

        assert resultado.margem_assumida
        assert resultado.margem_equilibrio == 14
        assert resultado.alerta is None
        assert "ACIMA" not in resultado.recomendacao

    def test_explicit_margin(self, ruleset_ti):
        """A margin from the accounting profit replaces the cost estimate."""
        resultado = BreakEvenAnalyzer().find(
            RECEITA, CARGA_LP, ruleset=ruleset_ti, margem_real=Decimal("8.33")
        )

        assert resultado.margem_real_estimada == Decimal("8.3")
        assert not resultado.margem_assumida
        assert resultado.aviso is None
        assert resultado.alerta == ALERTA_ABAIXO

    def test_exclusions_match_real_calculator(self, ruleset_ti):
        """Scanned burdens use the same PIS/COFINS exclusions as the Lucro Real result."""
        dados = DadosAnuais(
            receita_bruta=Decimal("1000000"),
            despesas_operacionais=Decimal("800000"),
            receita_exportacao=Decimal("500000"),
        )
        resultado = BreakEvenAnalyzer().find(
            dados.receita_bruta,
            Decimal("0"),
            despesas_operacionais=dados.despesas_operacionais,
            ruleset=ruleset_ti,
            receita_exportacao=dados.receita_exportacao,
        )
        real = RealRegimeCalculator().compute_year(
            dividir_periodos(dados, 4), Decimal("0.2"), ruleset_ti
        )

        assert resultado.ponto(20).carga_real == real.total
        assert real.total == Decimal("144250.00")

    def test_closest_point(self, ruleset_ti):
        config = EngineConfig(margem_minima=5, margem_maxima=30)
        resultado = BreakEvenAnalyzer(config=config).find(RECEITA, CARGA_LP, ruleset=ruleset_ti)

        assert resultado.ponto_proximo(Decimal("8.3")).margem == 8
        assert resultado.ponto_proximo(Decimal("13.5")).margem == 14
        assert resultado.ponto_proximo(Decimal("2")).margem == 5
        assert resultado.ponto_proximo(Decimal("80")).margem == 30
