"""Tests for the Lucro Presumido and Lucro Real calculators."""

from decimal import Decimal

import pytest

from regime_analyzer.core.analyzers import PresumedRegimeCalculator, RealRegimeCalculator
from regime_analyzer.core.analyzers.real import compensacao_prejuizo
from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models import DadosAnuais, PeriodoFiscal, Regime, dividir_periodos
from regime_analyzer.core.rules.tax_constants import calcular_irpj


class TestCalcularIrpj:
    """Tests for the IRPJ + surtax helper."""

    def test_quarter_below_threshold(self):
        assert calcular_irpj(Decimal("60000"), 3) == (Decimal("9000"), Decimal("0"))

    def test_quarter_surtax(self):
        irpj, adicional = calcular_irpj(Decimal("96000"), 3)

        assert irpj == Decimal("14400")
        assert adicional == Decimal("3600")

    def test_threshold_prorated_by_months(self):
        """The surtax threshold is R$ 20.000 per month."""
        _, mensal = calcular_irpj(Decimal("30000"), 1)
        _, anual = calcular_irpj(Decimal("300000"), 12)

        assert mensal == Decimal("1000")
        assert anual == Decimal("6000")

    def test_negative_base(self):
        assert calcular_irpj(Decimal("-1000"), 3) == (Decimal("0"), Decimal("0"))


class TestPresumedRegimeCalculator:
    """Tests for PresumedRegimeCalculator."""

    def test_service_quarter(self, trimestre, ruleset_ti):
        """32% presumption, surtax above R$ 60.000 and ISS on service revenue."""
        resultado = PresumedRegimeCalculator().compute(trimestre, ruleset_ti)
        detalhe = resultado.detalhamento

        assert resultado.regime == Regime.LUCRO_PRESUMIDO
        assert detalhe.irpj == Decimal("14400.00")
        assert detalhe.adicional_irpj == Decimal("3600.00")
        assert detalhe.csll == Decimal("8640.00")
        assert detalhe.pis == Decimal("1950.00")
        assert detalhe.cofins == Decimal("9000.00")
        assert detalhe.iss == Decimal("15000.00")
        assert resultado.total == Decimal("52590.00")

    def test_commerce_quarter(self, trimestre, ruleset_comercio):
        """8%/12% presumption and no ISS for commerce."""
        resultado = PresumedRegimeCalculator().compute(trimestre, ruleset_comercio)

        assert resultado.detalhamento.irpj == Decimal("3600.00")
        assert resultado.detalhamento.adicional_irpj == Decimal("0")
        assert resultado.detalhamento.csll == Decimal("3240.00")
        assert resultado.detalhamento.iss == Decimal("0")
        assert resultado.total == Decimal("17790.00")

    def test_iss_only_on_service_share(self, ruleset_ti):
        periodo = PeriodoFiscal(
            receita_bruta=Decimal("300000"), receita_servicos=Decimal("100000"), meses=3
        )
        resultado = PresumedRegimeCalculator().compute(periodo, ruleset_ti)

        assert resultado.detalhamento.iss == Decimal("5000.00")

    def test_service_share_cannot_exceed_revenue(self):
        with pytest.raises(ValueError):
            PeriodoFiscal(receita_bruta=Decimal("100"), receita_servicos=Decimal("200"))

    def test_export_revenue_excluded_from_pis_cofins(self, ruleset_ti):
        periodo = PeriodoFiscal(
            receita_bruta=Decimal("300000"), receita_exportacao=Decimal("100000"), meses=3
        )
        resultado = PresumedRegimeCalculator().compute(periodo, ruleset_ti)

        assert resultado.detalhamento.pis == Decimal("1300.00")
        assert resultado.detalhamento.cofins == Decimal("6000.00")
        # IRPJ still uses the full revenue
        assert resultado.detalhamento.irpj == Decimal("14400.00")

    def test_withholdings_reduce_amount_payable(self, ruleset_ti):
        periodo = PeriodoFiscal(
            receita_bruta=Decimal("300000"),
            irrf_retido=Decimal("1000"),
            csll_retida=Decimal("500"),
            meses=3,
        )
        resultado = PresumedRegimeCalculator().compute(periodo, ruleset_ti)

        assert resultado.total == Decimal("52590.00")
        assert resultado.retencoes == Decimal("1500.00")
        assert resultado.a_recolher == Decimal("51090.00")

    def test_payroll_charges(self, ruleset_comercio):
        periodo = PeriodoFiscal(
            receita_bruta=Decimal("300000"), folha_pagamento=Decimal("30000"), meses=3
        )
        resultado = PresumedRegimeCalculator().compute(periodo, ruleset_comercio)

        assert resultado.detalhamento.encargos_folha == Decimal("7050.00")

    def test_quarter_limit_prorated(self, ruleset_ti):
        """A quarter above R$ 19,5M (78M / 4) is ineligible."""
        periodo = PeriodoFiscal(receita_bruta=Decimal("20000000"), meses=3)
        resultado = PresumedRegimeCalculator().compute(periodo, ruleset_ti)

        assert resultado.inelegivel
        assert "excede" in resultado.motivo_inelegibilidade

    def test_year(self, ruleset_ti):
        periodos = dividir_periodos(DadosAnuais(receita_bruta=Decimal("1200000")), 4)
        resultado = PresumedRegimeCalculator().compute_year(periodos, ruleset_ti)

        assert resultado.total == Decimal("210360.00")
        assert resultado.receita_bruta == Decimal("1200000")
        assert resultado.aliquota_efetiva == Decimal("0.1753")

    def test_year_above_limit(self, ruleset_ti):
        periodos = dividir_periodos(DadosAnuais(receita_bruta=Decimal("80000000")), 4)
        resultado = PresumedRegimeCalculator().compute_year(periodos, ruleset_ti)

        assert resultado.inelegivel
        assert resultado.total == Decimal("0")

    def test_custom_iss_rate(self, trimestre, ruleset_ti):
        config = EngineConfig(aliquota_iss=Decimal("0.02"))
        resultado = PresumedRegimeCalculator(config).compute(trimestre, ruleset_ti)

        assert resultado.detalhamento.iss == Decimal("6000.00")


class TestCompensacaoPrejuizo:
    """Tests for the 30% loss offset cap."""

    def test_capped_at_30_percent(self):
        assert compensacao_prejuizo(Decimal("100000"), Decimal("50000")) == Decimal("30000")

    def test_limited_by_balance(self):
        assert compensacao_prejuizo(Decimal("100000"), Decimal("10000")) == Decimal("10000")

    def test_no_profit(self):
        assert compensacao_prejuizo(Decimal("0"), Decimal("5000")) == Decimal("0")
        assert compensacao_prejuizo(Decimal("-100"), Decimal("5000")) == Decimal("0")


class TestRealRegimeCalculator:
    """Tests for RealRegimeCalculator."""

    def test_quarter(self, trimestre, ruleset_ti):
        """20% margin: no surtax, non-cumulative PIS/COFINS."""
        resultado = RealRegimeCalculator().compute(trimestre, Decimal("0.2"), ruleset_ti)
        detalhe = resultado.detalhamento

        assert resultado.regime == Regime.LUCRO_REAL
        assert detalhe.irpj == Decimal("9000.00")
        assert detalhe.adicional_irpj == Decimal("0")
        assert detalhe.csll == Decimal("5400.00")
        assert detalhe.pis == Decimal("4950.00")
        assert detalhe.cofins == Decimal("22800.00")
        assert detalhe.iss == Decimal("15000.00")
        assert resultado.total == Decimal("57150.00")

    def test_credits_reduce_pis_cofins(self, ruleset_ti):
        periodo = PeriodoFiscal(
            receita_bruta=Decimal("300000"), base_creditos=Decimal("100000"), meses=3
        )
        resultado = RealRegimeCalculator().compute(periodo, Decimal("0.2"), ruleset_ti)

        assert resultado.detalhamento.pis == Decimal("3300.00")
        assert resultado.detalhamento.cofins == Decimal("15200.00")

    def test_loss_offset(self, ruleset_ti):
        periodo = PeriodoFiscal(
            receita_bruta=Decimal("300000"), prejuizo_acumulado=Decimal("50000"), meses=3
        )
        resultado = RealRegimeCalculator().compute(periodo, Decimal("0.2"), ruleset_ti)

        # 60.000 profit, 18.000 offset
        assert resultado.detalhamento.irpj == Decimal("6300.00")
        assert resultado.detalhamento.csll == Decimal("3780.00")
        assert any("prejuízo" in aviso for aviso in resultado.avisos)

    def test_loss_balance_carried_across_quarters(self, ruleset_ti):
        dados = DadosAnuais(
            receita_bruta=Decimal("1200000"), prejuizo_acumulado=Decimal("50000")
        )
        resultado = RealRegimeCalculator().compute_year(
            dividir_periodos(dados, 4), Decimal("0.2"), ruleset_ti
        )

        # Offsets 18.000 + 18.000 + 14.000 + 0 = 50.000
        assert resultado.detalhamento.irpj == Decimal("28500.00")
        assert resultado.detalhamento.csll == Decimal("17100.00")

    def test_regional_incentive_spares_surtax(self, ruleset_ti):
        """The 75% reduction applies to the 15% IRPJ only."""
        periodo = PeriodoFiscal(
            receita_bruta=Decimal("900000"), incentivo_regional=True, meses=3
        )
        resultado = RealRegimeCalculator().compute(periodo, Decimal("0.2"), ruleset_ti)

        assert resultado.detalhamento.irpj == Decimal("6750.00")
        assert resultado.detalhamento.adicional_irpj == Decimal("12000.00")

    def test_negative_margin(self, trimestre, ruleset_ti):
        resultado = RealRegimeCalculator().compute(trimestre, Decimal("-0.1"), ruleset_ti)

        assert resultado.detalhamento.irpj == Decimal("0")
        assert resultado.detalhamento.csll == Decimal("0")
        assert resultado.detalhamento.pis > 0

    def test_without_ruleset_assumes_service(self, trimestre):
        resultado = RealRegimeCalculator().compute(trimestre, Decimal("0.2"))
        assert resultado.detalhamento.iss == Decimal("15000.00")

    def test_commerce_has_no_iss(self, trimestre, ruleset_comercio):
        resultado = RealRegimeCalculator().compute(trimestre, Decimal("0.2"), ruleset_comercio)
        assert resultado.detalhamento.iss == Decimal("0")
