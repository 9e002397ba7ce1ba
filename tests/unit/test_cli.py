"""Tests for the Typer command line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from regime_analyzer import __version__
from regime_analyzer.cli.app import app

runner = CliRunner()


@pytest.fixture
def perfil_json(tmp_path: Path) -> Path:
    arquivo = tmp_path / "empresa.json"
    arquivo.write_text(
        json.dumps(
            {
                "razao_social": "Software Ltda",
                "codigo_cnae": "6201-5/01",
                "dados": {
                    "receita_bruta": "1200000",
                    "folha_pagamento": "240000",
                    "despesas_operacionais": "360000",
                },
            }
        ),
        encoding="utf-8",
    )
    return arquivo


class TestVersion:
    """Tests for the --version flag."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"Regime Analyzer v{__version__}" in result.output


class TestResolverCommand:
    """Tests for the resolver command."""

    def test_table_output(self):
        result = runner.invoke(app, ["resolver", "4930-2/01"])

        assert result.exit_code == 0
        assert "Enquadramento CNAE" in result.output
        assert "4930-2/01" in result.output

    def test_json_output(self):
        result = runner.invoke(app, ["resolver", "4930201", "--output", "json"])
        dados = json.loads(result.output)

        assert result.exit_code == 0
        assert dados["codigo"] == "4930-2/01"
        assert dados["vedado"] is False


class TestTabelasCommand:
    """Tests for the tabelas command."""

    def test_statistics(self):
        result = runner.invoke(app, ["tabelas"])

        assert result.exit_code == 0
        assert "Tabelas de Regras CNAE" in result.output
        assert "Anexo" in result.output

    def test_invalid_tables_file(self, tmp_path: Path):
        arquivo = tmp_path / "tabelas.json"
        arquivo.write_text("{", encoding="utf-8")

        result = runner.invoke(app, ["tabelas", "--arquivo", str(arquivo)])

        assert result.exit_code == 1
        assert "Erro:" in result.output


class TestSimplesCommand:
    """Tests for the simples command."""

    def test_effective_rate(self):
        result = runner.invoke(app, ["simples", "-r", "1000000"])

        assert result.exit_code == 0
        assert "12,44%" in result.output

    def test_monthly_das(self):
        result = runner.invoke(app, ["simples", "-r", "1000000", "-m", "100000"])

        assert result.exit_code == 0
        assert "R$ 12.436,00" in result.output

    def test_above_limit(self):
        result = runner.invoke(app, ["simples", "-r", "5000000"])

        assert result.exit_code == 1
        assert "Inelegível" in result.output


class TestCompararCommand:
    """Tests for the comparar command."""

    def test_json_output(self):
        result = runner.invoke(
            app,
            [
                "comparar",
                "-c",
                "6201-5/01",
                "-r",
                "1200000",
                "-f",
                "240000",
                "-d",
                "360000",
                "-o",
                "json",
            ],
        )
        dados = json.loads(result.output)

        assert result.exit_code == 0
        assert dados["presumido"]["total"] == "266760.00"
        assert dados["regime_recomendado"] == "Lucro Presumido"

    def test_table_output(self):
        result = runner.invoke(app, ["comparar", "-c", "6201-5/01", "-r", "1200000"])

        assert result.exit_code == 0
        assert "Carga Tributária Anual" in result.output
        assert "Regime recomendado" in result.output

    def test_invalid_state(self):
        result = runner.invoke(
            app, ["comparar", "-c", "6201-5/01", "-r", "1200000", "--uf", "XX"]
        )
        assert result.exit_code == 1


class TestAnalisarCommand:
    """Tests for the analisar command."""

    def test_analyze_file(self, perfil_json: Path):
        result = runner.invoke(app, ["analisar", str(perfil_json)])

        assert result.exit_code == 0
        assert "Analisando empresa.json" in result.output
        assert "Software Ltda" in result.output

    def test_analyze_file_json(self, perfil_json: Path):
        result = runner.invoke(app, ["analisar", str(perfil_json), "-o", "json"])
        dados = json.loads(result.output)

        assert dados["simples"]["total"] == "228900.00"

    def test_missing_revenue(self, tmp_path: Path):
        arquivo = tmp_path / "vazio.json"
        arquivo.write_text('{"codigo_cnae": "6201-5/01", "dados": {}}', encoding="utf-8")

        result = runner.invoke(app, ["analisar", str(arquivo)])

        assert result.exit_code == 1
        assert "receita_bruta" in result.output

    def test_not_an_object(self, tmp_path: Path):
        arquivo = tmp_path / "lista.json"
        arquivo.write_text("[]", encoding="utf-8")

        result = runner.invoke(app, ["analisar", str(arquivo)])

        assert result.exit_code == 1

    def test_invalid_config(self, perfil_json: Path, tmp_path: Path):
        config = tmp_path / "config.json"
        config.write_text('{"aliquota_iss": "0.50"}', encoding="utf-8")

        result = runner.invoke(app, ["analisar", str(perfil_json), "--config", str(config)])

        assert result.exit_code == 1
