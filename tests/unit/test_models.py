"""Tests for domain models, configuration and shared helpers."""

import json
from decimal import Decimal
from pathlib import Path

import pytest

from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models import (
    ActivityCode,
    CategoriaAtividade,
    DadosAnuais,
    Detalhamento,
    Regime,
    ResultadoRegime,
    TipoDica,
    dividir_periodos,
    parse_categoria,
)
from regime_analyzer.core.rules.regions import REGION_PROFILES, perfil_regional
from regime_analyzer.shared.exceptions import ConfigurationError, MissingInputError, ValidationError
from regime_analyzer.shared.formatters import format_currency, format_percentage, format_rate
from regime_analyzer.shared.money import arredondar, dividir, para_decimal
from regime_analyzer.shared.text import normalizar_titulo


class TestActivityCode:
    """Tests for ActivityCode and category parsing."""

    def test_parse_digits(self):
        codigo = ActivityCode.parse("6201501")

        assert codigo.codigo == "6201-5/01"
        assert codigo.digitos == "6201501"
        assert str(codigo) == "6201-5/01"

    def test_parse_with_category(self):
        codigo = ActivityCode.parse("4711-3/02", "comércio")
        assert codigo.categoria == CategoriaAtividade.COMERCIO

    @pytest.mark.parametrize(
        "valor,esperado",
        [
            ("Indústria", CategoriaAtividade.INDUSTRIA),
            ("fabricação de móveis", CategoriaAtividade.INDUSTRIA),
            ("SERVIÇO", CategoriaAtividade.SERVICO),
            ("3", CategoriaAtividade.SERVICO),
            (1, CategoriaAtividade.COMERCIO),
            (CategoriaAtividade.INDUSTRIA, CategoriaAtividade.INDUSTRIA),
            (None, None),
            ("xyz", None),
            ("", None),
        ],
    )
    def test_parse_categoria(self, valor, esperado):
        assert parse_categoria(valor) == esperado


class TestPeriods:
    """Tests for fiscal period splitting."""

    def test_quarters_sum_to_year(self):
        dados = DadosAnuais(
            receita_bruta=Decimal("1000000"),
            folha_pagamento=Decimal("120000"),
            prejuizo_acumulado=Decimal("5000"),
        )
        periodos = dividir_periodos(dados, 4)

        assert len(periodos) == 4
        assert all(p.meses == 3 for p in periodos)
        assert sum(p.receita_bruta for p in periodos) == Decimal("1000000")
        assert sum(p.folha_pagamento for p in periodos) == Decimal("120000")
        assert periodos[0].prejuizo_acumulado == Decimal("5000")
        assert periodos[1].prejuizo_acumulado == Decimal("0")

    def test_invalid_split(self):
        with pytest.raises(ValueError):
            dividir_periodos(DadosAnuais(receita_bruta=Decimal("1")), 3)

    def test_negative_revenue_rejected(self):
        with pytest.raises(ValueError):
            DadosAnuais(receita_bruta=Decimal("-1"))


class TestResults:
    """Tests for regime result models."""

    def test_detalhamento_total(self):
        detalhe = Detalhamento(irpj=Decimal("10"), csll=Decimal("5"), das=Decimal("1.5"))
        assert detalhe.total == Decimal("16.5")

    def test_somar(self):
        parcial = ResultadoRegime(
            regime=Regime.LUCRO_PRESUMIDO,
            receita_bruta=Decimal("100"),
            detalhamento=Detalhamento(irpj=Decimal("10.004")),
            avisos=("aviso",),
        )
        total = ResultadoRegime.somar(Regime.LUCRO_PRESUMIDO, [parcial, parcial])

        assert total.receita_bruta == Decimal("200")
        assert total.total == Decimal("20.01")
        assert total.avisos == ("aviso",)

    def test_somar_propagates_ineligibility(self):
        inelegivel = ResultadoRegime.inelegivel_para(Regime.LUCRO_PRESUMIDO, "limite")
        elegivel = ResultadoRegime(regime=Regime.LUCRO_PRESUMIDO)

        total = ResultadoRegime.somar(Regime.LUCRO_PRESUMIDO, [elegivel, inelegivel])

        assert total.inelegivel
        assert total.motivo_inelegibilidade == "limite"

    def test_a_recolher_never_negative(self):
        resultado = ResultadoRegime(
            regime=Regime.LUCRO_REAL,
            detalhamento=Detalhamento(irpj=Decimal("100")),
            retencoes=Decimal("150"),
        )
        assert resultado.a_recolher == Decimal("0")

    def test_aliquota_efetiva_zero_revenue(self):
        assert ResultadoRegime(regime=Regime.LUCRO_REAL).aliquota_efetiva == Decimal("0")

    def test_tip_order(self):
        assert [t.ordem for t in TipoDica] == [0, 1, 2, 3]
        assert Regime.LUCRO_REAL.nome == "Lucro Real"


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.aliquota_encargos == Decimal("0.235")
        assert config.margem_minima == 1
        assert config.margem_maxima == 95

    def test_invalid_margin_range(self):
        with pytest.raises(ValueError):
            EngineConfig(margem_minima=50, margem_maxima=10)

    def test_com_perfil_incentive_area(self):
        config = EngineConfig(reducao_irpj_incentivo=Decimal("0.5")).com_perfil(
            perfil_regional("BA")
        )
        assert config.reducao_irpj_incentivo == Decimal("0.75")

    def test_com_perfil_keeps_reduction_elsewhere(self):
        config = EngineConfig(reducao_irpj_incentivo=Decimal("0.5")).com_perfil(
            perfil_regional("SP")
        )
        assert config.reducao_irpj_incentivo == Decimal("0.5")

    def test_from_json(self, tmp_path: Path):
        arquivo = tmp_path / "config.json"
        arquivo.write_text(json.dumps({"aliquota_iss": "0.03"}), encoding="utf-8")

        config = EngineConfig.from_json(arquivo)

        assert config.aliquota_iss == Decimal("0.03")
        assert config.inss_patronal == Decimal("0.20")

    def test_from_json_invalid(self, tmp_path: Path):
        arquivo = tmp_path / "config.json"
        arquivo.write_text('{"aliquota_iss": "0.50"}', encoding="utf-8")

        with pytest.raises(ConfigurationError):
            EngineConfig.from_json(arquivo)

    def test_from_json_malformed(self, tmp_path: Path):
        arquivo = tmp_path / "config.json"
        arquivo.write_text("{", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            EngineConfig.from_json(arquivo)


class TestRegions:
    """Tests for state profiles."""

    def test_all_states(self):
        assert len(REGION_PROFILES) == 27

    def test_lookup_case_insensitive(self):
        perfil = perfil_regional(" ba ")

        assert perfil.sigla == "BA"
        assert perfil.tem_incentivo_federal
        assert perfil.tipo_incentivo == "SUDENE"
        assert perfil.reducao_irpj == Decimal("0.75")

    def test_no_incentive(self):
        perfil = perfil_regional("SP")

        assert perfil.tipo_incentivo == ""
        assert perfil.reducao_irpj == Decimal("0")

    def test_unknown_state(self):
        with pytest.raises(ValidationError):
            perfil_regional("XX")


class TestSharedHelpers:
    """Tests for money, text and formatting helpers."""

    def test_para_decimal(self):
        assert para_decimal(0.1) == Decimal("0.1")
        assert para_decimal("12.50") == Decimal("12.50")
        assert para_decimal(None) == Decimal("0")
        assert para_decimal(None, Decimal("5")) == Decimal("5")

    def test_para_decimal_invalid(self):
        with pytest.raises(ValueError):
            para_decimal("abc")

    def test_arredondar_half_up(self):
        assert arredondar(Decimal("2.675")) == Decimal("2.68")
        assert arredondar(Decimal("8.35"), 1) == Decimal("8.4")

    def test_dividir_by_zero(self):
        assert dividir(Decimal("10"), Decimal("0")) == Decimal("0")

    def test_normalizar_titulo(self):
        assert normalizar_titulo("Otimização  Pró-Labore ") == "otimizacao pro-labore"

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "R$ 1.234,50"
        assert format_currency(Decimal("-1000000")) == "-R$ 1.000.000,00"

    def test_format_percentage(self):
        assert format_percentage(Decimal("15.5")) == "15,5%"
        assert format_rate(Decimal("0.1125")) == "11,25%"

    def test_missing_input_message(self):
        erro = MissingInputError("receita_bruta", "analisar")

        assert erro.campo == "receita_bruta"
        assert "receita_bruta" in str(erro)
        assert isinstance(erro, ValidationError)
