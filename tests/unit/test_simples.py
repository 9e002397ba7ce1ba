"""Tests for the Simples Nacional bracket calculator."""

from decimal import Decimal

import pytest

from regime_analyzer.core.analyzers import BracketCalculator, tabelas_simples_padrao
from regime_analyzer.core.models import (
    Anexo,
    BracketTable,
    DadosAnuais,
    Faixa,
    Regime,
    dividir_periodos,
)
from regime_analyzer.core.rules.regions import perfil_regional


def _ano(receita: str, folha: str = "0") -> list:
    return dividir_periodos(
        DadosAnuais(receita_bruta=Decimal(receita), folha_pagamento=Decimal(folha)), 4
    )


class TestBracketTables:
    """Tests for the bracket table structure."""

    @pytest.mark.parametrize("anexo", [Anexo.I, Anexo.II, Anexo.III, Anexo.IV, Anexo.V])
    def test_continuity_at_inner_boundaries(self, anexo):
        """Adjacent brackets give the same rate at the first four ceilings."""
        faixas = tabelas_simples_padrao()[anexo].faixas
        for k in range(4):
            limite = faixas[k].limite
            assert faixas[k].aliquota_efetiva(limite) == faixas[k + 1].aliquota_efetiva(limite)

    def test_ceilings_strictly_increasing(self):
        """Tables with a repeated ceiling are rejected."""
        with pytest.raises(ValueError):
            BracketTable(
                anexo=Anexo.I,
                faixas=(
                    Faixa(limite=Decimal("100"), aliquota=Decimal("0.04")),
                    Faixa(limite=Decimal("100"), aliquota=Decimal("0.05")),
                ),
            )

    def test_vedado_has_no_table(self):
        with pytest.raises(ValueError):
            BracketTable(
                anexo=Anexo.VEDADO,
                faixas=(Faixa(limite=Decimal("100"), aliquota=Decimal("0.04")),),
            )

    def test_limite_maximo(self):
        assert tabelas_simples_padrao()[Anexo.III].limite_maximo == Decimal("4800000")


class TestEffectiveRate:
    """Tests for BracketCalculator.effective_rate."""

    def test_first_bracket_is_nominal(self):
        resultado = BracketCalculator().effective_rate(Anexo.III, Decimal("180000"))

        assert resultado.aliquota == Decimal("0.06")
        assert resultado.faixa == 1

    def test_fourth_bracket(self):
        """(1.000.000 x 16% - 35.640) / 1.000.000 = 12,436%."""
        resultado = BracketCalculator().effective_rate(Anexo.III, Decimal("1000000"))

        assert resultado.aliquota == Decimal("0.12436")
        assert resultado.faixa == 4
        assert resultado.anexo_aplicado == Anexo.III

    def test_last_ceiling_still_eligible(self):
        resultado = BracketCalculator().effective_rate(Anexo.III, Decimal("4800000"))

        assert not resultado.inelegivel
        assert resultado.faixa == 6
        assert resultado.aliquota == Decimal("0.195")

    def test_above_limit_is_ineligible(self):
        """Revenue above R$ 4,8M is never clamped to the top bracket."""
        resultado = BracketCalculator().effective_rate(Anexo.I, Decimal("4800000.01"))

        assert resultado.inelegivel
        assert resultado.aliquota == Decimal("0")
        assert "excede" in resultado.motivo

    def test_zero_revenue(self):
        """Zero RBT12 gives a zero rate, not an error."""
        resultado = BracketCalculator().effective_rate(Anexo.III, Decimal("0"))

        assert resultado.aliquota == Decimal("0")
        assert not resultado.inelegivel

    def test_vedado(self):
        resultado = BracketCalculator().effective_rate(Anexo.VEDADO, Decimal("100000"))
        assert resultado.inelegivel

    def test_fator_r_switches_to_anexo_iii(self):
        """Payroll at exactly 28% of revenue moves Anexo V to Anexo III."""
        resultado = BracketCalculator().effective_rate(
            Anexo.V, Decimal("1000000"), Decimal("280000"), fator_r=True
        )

        assert resultado.anexo_aplicado == Anexo.III
        assert resultado.aliquota == Decimal("0.12436")
        assert resultado.fator_r == Decimal("0.28")

    def test_fator_r_below_threshold(self):
        resultado = BracketCalculator().effective_rate(
            Anexo.V, Decimal("1000000"), Decimal("279999"), fator_r=True
        )

        assert resultado.anexo_aplicado == Anexo.V
        assert resultado.aliquota == Decimal("0.1879")

    def test_fator_r_ignored_for_insensitive_activity(self):
        resultado = BracketCalculator().effective_rate(
            Anexo.V, Decimal("1000000"), Decimal("500000"), fator_r=False
        )
        assert resultado.anexo_aplicado == Anexo.V

    def test_custom_threshold(self):
        calculadora = BracketCalculator(limiar_fator_r=Decimal("0.20"))
        resultado = calculadora.effective_rate(
            Anexo.V, Decimal("1000000"), Decimal("250000"), fator_r=True
        )
        assert resultado.anexo_aplicado == Anexo.III

    def test_valor_mensal(self):
        calculadora = BracketCalculator()

        assert calculadora.valor_mensal(
            Decimal("100000"), Anexo.III, Decimal("1000000")
        ) == Decimal("12436")
        assert calculadora.valor_mensal(Decimal("100000"), Anexo.III, Decimal("5000000")) is None


class TestSimplesCompute:
    """Tests for the yearly Simples Nacional liability."""

    def test_anexo_v_without_payroll(self, ruleset_ti):
        resultado = BracketCalculator().compute(_ano("1200000"), ruleset_ti)

        assert resultado.regime == Regime.SIMPLES_NACIONAL
        assert resultado.anexo == Anexo.V
        assert resultado.detalhamento.das == Decimal("228900.00")
        assert resultado.total == Decimal("228900.00")

    def test_fator_r_notice(self, ruleset_ti):
        resultado = BracketCalculator().compute(_ano("1200000", "360000"), ruleset_ti)

        assert resultado.anexo == Anexo.III
        assert resultado.detalhamento.das == Decimal("156360.00")
        assert any("Fator R" in aviso for aviso in resultado.avisos)

    def test_anexo_iv_payroll_charges(self, resolver):
        """Anexo IV pays the employer contribution outside the DAS."""
        ruleset = resolver.resolve("4120-4/00")
        resultado = BracketCalculator().compute(_ano("1200000", "240000"), ruleset)

        assert resultado.detalhamento.das == Decimal("128220.00")
        assert resultado.detalhamento.encargos_folha == Decimal("56400.00")
        assert resultado.total == Decimal("184620.00")

    def test_vedado_is_ineligible(self, resolver):
        resultado = BracketCalculator().compute(_ano("1200000"), resolver.resolve("6421-2/00"))

        assert resultado.inelegivel
        assert resultado.motivo_inelegibilidade

    def test_above_limit_is_ineligible(self, ruleset_comercio):
        resultado = BracketCalculator().compute(_ano("5000000"), ruleset_comercio)

        assert resultado.inelegivel
        assert resultado.receita_bruta == Decimal("5000000")

    def test_iss_above_sublimit(self, resolver):
        """Service revenue above R$ 3,6M pays ISS outside the DAS."""
        ruleset = resolver.resolve("6920-6/01")
        resultado = BracketCalculator().compute(_ano("4000000"), ruleset)

        assert resultado.detalhamento.das == Decimal("672000.00")
        assert resultado.detalhamento.iss == Decimal("200000.00")
        assert any("sublimite" in aviso for aviso in resultado.avisos)

    def test_no_iss_for_commerce_above_sublimit(self, ruleset_comercio):
        resultado = BracketCalculator().compute(_ano("4000000"), ruleset_comercio)

        assert resultado.detalhamento.das == Decimal("382000.00")
        assert resultado.detalhamento.iss == Decimal("0")

    def test_regional_iss_rate(self, resolver):
        """A state profile changes the ISS rate used above the sublimit."""
        ruleset = resolver.resolve("6920-6/01")
        perfil = perfil_regional("SP")
        resultado = BracketCalculator().compute(_ano("4000000"), ruleset, perfil=perfil)

        assert resultado.detalhamento.iss == Decimal("4000000") * perfil.iss_capital
        assert any("18,00%" in aviso and "São Paulo" in aviso for aviso in resultado.avisos)

    def test_rbt12_override(self, ruleset_comercio):
        """An explicit RBT12 drives the bracket lookup."""
        periodos = dividir_periodos(DadosAnuais(receita_bruta=Decimal("100000")), 12)[:1]
        resultado = BracketCalculator().compute(
            periodos, ruleset_comercio, rbt12=Decimal("1000000")
        )

        # (1.000.000 x 10,7% - 22.500) / 1.000.000 = 8,45%
        assert resultado.total == Decimal("704.17")
