"""Main Typer application for Regime Analyzer."""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from regime_analyzer import __version__
from regime_analyzer.cli.console import (
    console,
    log_console,
    print_error,
    print_success,
    print_warning,
)
from regime_analyzer.core.analyzers import BracketCalculator, RuleResolver, SummaryBuilder
from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models import Anexo, NivelOportunidade, ResultadoRegime, Summary, TipoFonte
from regime_analyzer.core.models.summary import PerfilEmpresa
from regime_analyzer.core.rules.cnae_rules import RuleTables, default_rule_tables
from regime_analyzer.shared.exceptions import RegimeAnalyzerError
from regime_analyzer.shared.formatters import format_currency, format_percentage, format_rate
from regime_analyzer.shared.money import para_decimal

app = typer.Typer(
    name="regime-analyzer",
    help="Comparador de regimes tributários para pessoas jurídicas",
    add_completion=True,
    no_args_is_help=True,
)

NIVEL_ESTILO = {
    NivelOportunidade.BAIXO: "nivel_baixo",
    NivelOportunidade.MEDIO: "nivel_medio",
    NivelOportunidade.ALTO: "nivel_alto",
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"Regime Analyzer v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Mostra a versão e sai",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Exibe o log detalhado do cálculo"),
    ] = False,
) -> None:
    """Regime Analyzer - Simples Nacional, Lucro Presumido e Lucro Real."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=log_console, show_path=False)],
        force=True,
    )


def _carregar_tabelas(tabelas: Optional[Path]) -> RuleTables:
    return RuleTables.from_json(tabelas) if tabelas else default_rule_tables()


@app.command()
def resolver(
    codigo: Annotated[str, typer.Argument(help="Código CNAE (ex.: 6201-5/01 ou 6201501)")],
    categoria: Annotated[
        Optional[str],
        typer.Option("--categoria", "-c", help="Categoria: comercio, industria ou servico"),
    ] = None,
    tabelas: Annotated[
        Optional[Path],
        typer.Option("--tabelas", help="Arquivo JSON com tabelas de regras CNAE", exists=True),
    ] = None,
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Formato de saída: table, json"),
    ] = "table",
) -> None:
    """Mostra o enquadramento tributário de um código CNAE."""
    try:
        resolvedor = RuleResolver(_carregar_tabelas(tabelas))
        ruleset = resolvedor.resolve(codigo, categoria)
        monofasico = resolvedor.produto_monofasico(codigo)
    except RegimeAnalyzerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if output == "json":
        print(json.dumps(ruleset.model_dump(), indent=2, default=str, ensure_ascii=False))
        return

    linhas = [
        f"[header]CNAE:[/header] {ruleset.codigo or '-'}",
        f"[header]Descrição:[/header] {ruleset.descricao or '-'}",
        f"[header]Anexo Simples:[/header] {ruleset.anexo.value}"
        + (" (sujeito ao Fator R)" if ruleset.fator_r else ""),
        f"[header]Presunção IRPJ:[/header] {format_rate(ruleset.presuncao_irpj, 1)}",
        f"[header]Presunção CSLL:[/header] {format_rate(ruleset.presuncao_csll, 1)}",
        f"[header]Prestação de serviço:[/header] {'Sim' if ruleset.servico else 'Não'}",
        f"[header]Origem da regra:[/header] {ruleset.fonte.value}",
    ]
    if ruleset.vedado:
        linhas.append(f"[inelegivel]Vedado ao Simples:[/inelegivel] {ruleset.motivo_vedacao}")
    if monofasico:
        linhas.append(f"[header]PIS/COFINS monofásico:[/header] {monofasico}")

    console.print()
    console.print(Panel.fit("\n".join(linhas), title="Enquadramento CNAE", border_style="blue"))
    if ruleset.observacao:
        print_warning(ruleset.observacao)


@app.command()
def tabelas(
    arquivo: Annotated[
        Optional[Path],
        typer.Option("--arquivo", "-a", help="Arquivo JSON com tabelas de regras CNAE", exists=True),
    ] = None,
) -> None:
    """Exibe estatísticas das tabelas de regras CNAE."""
    try:
        estatisticas = RuleResolver(_carregar_tabelas(arquivo)).estatisticas()
    except RegimeAnalyzerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print()
    console.print(
        Panel.fit(
            f"[header]Versão:[/header] {estatisticas['versao']}\n"
            f"[header]Códigos exatos:[/header] {estatisticas['codigos_exatos']}\n"
            f"[header]Prefixos:[/header] {estatisticas['prefixos']}\n"
            f"[header]Categorias:[/header] {estatisticas['categorias']}\n"
            f"[header]Produtos monofásicos:[/header] {estatisticas['monofasicos']}\n"
            f"[header]Vedados ao Simples:[/header] {estatisticas['vedados']}\n"
            f"[header]Sujeitos ao Fator R:[/header] {estatisticas['fator_r']}",
            title="Tabelas de Regras CNAE",
            border_style="blue",
        )
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Anexo")
    table.add_column("Códigos", justify="right")
    for anexo, quantidade in estatisticas["por_anexo"].items():
        table.add_row(anexo, str(quantidade))
    console.print(table)


@app.command()
def simples(
    receita_12m: Annotated[
        float,
        typer.Option("--receita-12m", "-r", help="Receita bruta dos últimos 12 meses (RBT12)"),
    ],
    anexo: Annotated[
        Anexo,
        typer.Option("--anexo", "-a", help="Anexo do Simples Nacional"),
    ] = Anexo.III,
    folha_12m: Annotated[
        Optional[float],
        typer.Option("--folha-12m", "-f", help="Folha de salários dos últimos 12 meses"),
    ] = None,
    fator_r: Annotated[
        bool,
        typer.Option("--fator-r", help="Atividade sujeita ao Fator R"),
    ] = False,
    receita_mes: Annotated[
        Optional[float],
        typer.Option("--receita-mes", "-m", help="Receita do mês para cálculo do DAS"),
    ] = None,
) -> None:
    """Calcula a alíquota efetiva do Simples Nacional."""
    try:
        calculadora = BracketCalculator()
        rbt12 = para_decimal(receita_12m)
        folha12 = para_decimal(folha_12m) if folha_12m is not None else None
        resultado = calculadora.effective_rate(anexo, rbt12, folha12, fator_r)
    except (RegimeAnalyzerError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    if resultado.inelegivel:
        print_error(f"Inelegível ao Simples Nacional. {resultado.motivo}")
        raise typer.Exit(1)

    linhas = [
        f"[header]RBT12:[/header] {format_currency(rbt12)}",
        f"[header]Anexo aplicado:[/header] {resultado.anexo_aplicado.value}",
        f"[header]Faixa:[/header] {resultado.faixa or '-'}",
        f"[header]Alíquota efetiva:[/header] [value]{format_rate(resultado.aliquota)}[/value]",
    ]
    if resultado.fator_r is not None:
        linhas.append(f"[header]Fator R:[/header] {format_rate(resultado.fator_r)}")
    if receita_mes is not None:
        das = para_decimal(receita_mes) * resultado.aliquota
        linhas.append(f"[header]DAS do mês:[/header] [currency]{format_currency(das)}[/currency]")

    console.print()
    console.print(Panel.fit("\n".join(linhas), title="Simples Nacional", border_style="blue"))


@app.command()
def comparar(
    codigo: Annotated[str, typer.Option("--codigo", "-c", help="Código CNAE da atividade")],
    receita_anual: Annotated[
        float, typer.Option("--receita-anual", "-r", help="Receita bruta anual")
    ],
    folha_anual: Annotated[
        float, typer.Option("--folha-anual", "-f", help="Folha de pagamento anual")
    ] = 0.0,
    despesas: Annotated[
        float, typer.Option("--despesas", "-d", help="Despesas operacionais anuais")
    ] = 0.0,
    creditos: Annotated[
        float, typer.Option("--creditos", help="Base de créditos de PIS/COFINS (insumos)")
    ] = 0.0,
    prejuizo: Annotated[
        float, typer.Option("--prejuizo", help="Prejuízo fiscal acumulado")
    ] = 0.0,
    categoria: Annotated[
        Optional[str],
        typer.Option("--categoria", help="Categoria: comercio, industria ou servico"),
    ] = None,
    uf: Annotated[Optional[str], typer.Option("--uf", help="UF da empresa")] = None,
    incentivo: Annotated[
        bool, typer.Option("--incentivo", help="Projeto com incentivo SUDAM/SUDENE")
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="Arquivo JSON de configuração", exists=True),
    ] = None,
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Formato de saída: table, json"),
    ] = "table",
) -> None:
    """Compara os três regimes para uma atividade e receita anual."""
    dados = {
        "codigo_cnae": codigo,
        "categoria": categoria,
        "uf": uf,
        "dados": {
            "receita_bruta": para_decimal(receita_anual),
            "folha_pagamento": para_decimal(folha_anual),
            "despesas_operacionais": para_decimal(despesas),
            "base_creditos": para_decimal(creditos),
            "prejuizo_acumulado": para_decimal(prejuizo),
            "incentivo_regional": incentivo,
        },
    }
    _executar_analise(dados, _carregar_config_cli(config), None, output)


@app.command()
def analisar(
    arquivo: Annotated[
        Path,
        typer.Argument(
            help="Arquivo JSON com o perfil da empresa",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="Arquivo JSON de configuração", exists=True),
    ] = None,
    tabelas: Annotated[
        Optional[Path],
        typer.Option("--tabelas", help="Arquivo JSON com tabelas de regras CNAE", exists=True),
    ] = None,
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Formato de saída: table, json"),
    ] = "table",
) -> None:
    """Executa a análise completa a partir de um perfil em JSON."""
    try:
        dados = json.loads(arquivo.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print_error(f"Não foi possível ler {arquivo.name}: {e}")
        raise typer.Exit(1)
    if not isinstance(dados, dict):
        print_error(f"{arquivo.name} deve conter um objeto JSON")
        raise typer.Exit(1)

    if output != "json":
        console.print()
        console.print(f"[muted]Analisando {arquivo.name}...[/muted]")
    _executar_analise(dados, _carregar_config_cli(config), tabelas, output)


def _carregar_config_cli(config: Optional[Path]) -> EngineConfig:
    try:
        return EngineConfig.from_json(config) if config else EngineConfig()
    except RegimeAnalyzerError as e:
        print_error(str(e))
        raise typer.Exit(1)


def _executar_analise(
    dados: dict, config: EngineConfig, tabelas: Optional[Path], output: str
) -> None:
    try:
        perfil = PerfilEmpresa.from_dict(dados)
        resolvedor = RuleResolver(_carregar_tabelas(tabelas))
        summary = SummaryBuilder(resolvedor, config).build(perfil)
    except RegimeAnalyzerError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        print_error(f"Erro inesperado: {e}")
        raise typer.Exit(1)

    if output == "json":
        print(json.dumps(summary.model_dump(), indent=2, default=str, ensure_ascii=False))
        return

    _display_summary(summary)


def _display_summary(summary: Summary) -> None:
    """Render a Summary as rich panels and tables."""
    ruleset = summary.ruleset

    console.print()
    console.print(
        Panel.fit(
            f"[header]Empresa:[/header] {summary.razao_social or '-'}\n"
            f"[header]CNAE:[/header] {ruleset.codigo or '-'} ({ruleset.fonte.value})\n"
            f"[header]Anexo Simples:[/header] {ruleset.anexo.value}\n"
            f"[header]Presunção IRPJ/CSLL:[/header] "
            f"{format_rate(ruleset.presuncao_irpj, 1)} / {format_rate(ruleset.presuncao_csll, 1)}\n"
            f"[header]Receita bruta anual:[/header] {format_currency(summary.receita_bruta_anual)}",
            title="Regime Analyzer - Empresa",
            border_style="blue",
        )
    )

    _display_regimes(summary.resultados)

    if summary.ranking:
        console.print()
        console.print("[header]Ranking:[/header]")
        for posicao in summary.ranking:
            economia = (
                f" [muted](economia de {format_currency(posicao.economia_vs_mais_caro)})[/muted]"
                if posicao.economia_vs_mais_caro > 0
                else ""
            )
            console.print(
                f"  {posicao.posicao}. {posicao.regime.nome}: "
                f"{format_currency(posicao.total)}{economia}"
            )

    breakeven = summary.breakeven
    if breakeven is not None:
        equilibrio = (
            format_percentage(Decimal(breakeven.margem_equilibrio), 0)
            if breakeven.margem_equilibrio is not None
            else "-"
        )
        margem = (
            format_percentage(breakeven.margem_real_estimada)
            if breakeven.margem_real_estimada is not None
            else "-"
        )
        linhas = [
            f"[header]Margem de equilíbrio:[/header] {equilibrio}",
            f"[header]Margem real estimada:[/header] {margem}",
            f"[header]Recomendação:[/header] {breakeven.recomendacao}",
        ]
        if breakeven.alerta:
            linhas.append(f"[warning]{breakeven.alerta}[/warning]")
        console.print()
        console.print(
            Panel.fit(
                "\n".join(linhas),
                title="Break-even Lucro Presumido x Lucro Real",
                border_style="blue",
            )
        )

    economia = summary.economia
    console.print()
    estilo = NIVEL_ESTILO[economia.nivel_oportunidade]
    console.print(
        Panel.fit(
            f"[header]Economia anual potencial:[/header] "
            f"[currency]{format_currency(economia.total_economia_anual)}[/currency]\n"
            f"[header]Diferimento possível:[/header] {format_currency(economia.total_diferimento)}\n"
            f"[header]Nível de oportunidade:[/header] "
            f"[{estilo}]{economia.nivel_oportunidade.value.upper()}[/{estilo}]\n"
            f"{economia.recomendacao_principal}",
            title="Oportunidades de Economia",
            border_style="green",
        )
    )

    if summary.acoes_economia:
        acoes_table = Table(show_header=True, header_style="bold")
        acoes_table.add_column("Ação", style="cyan")
        acoes_table.add_column("Tipo")
        acoes_table.add_column("Valor/ano", justify="right", style="green")
        for acao in summary.acoes_economia:
            tipo = "Diferimento" if acao.tipo == TipoFonte.DIFERIMENTO else "Economia"
            acoes_table.add_row(acao.acao, tipo, format_currency(acao.valor))
        console.print(acoes_table)

    if summary.dicas:
        console.print()
        console.print("[header]Dicas:[/header]")
        for dica in summary.dicas:
            impacto = (
                f" [muted]({format_currency(dica.impacto_estimado)}/ano)[/muted]"
                if dica.impacto_estimado
                else ""
            )
            console.print(
                f"  [highlight]•[/highlight] {dica.titulo} [muted]({dica.tipo.value})[/muted]{impacto}"
            )

    if summary.avisos:
        console.print()
        console.print("[header]Avisos:[/header]")
        for aviso in summary.avisos:
            console.print(f"  [yellow]•[/yellow] {aviso}")

    console.print()
    print_success(f"Regime recomendado: {summary.regime_recomendado}")


def _display_regimes(resultados: tuple[ResultadoRegime, ...]) -> None:
    table = Table(show_header=True, header_style="bold", title="Carga Tributária Anual")
    table.add_column("Tributo", style="cyan")
    for resultado in resultados:
        table.add_column(resultado.regime.nome, justify="right")

    def linha(rotulo: str, campo: str) -> None:
        valores = [
            "-" if r.inelegivel else format_currency(getattr(r.detalhamento, campo))
            for r in resultados
        ]
        table.add_row(rotulo, *valores)

    linha("DAS", "das")
    linha("IRPJ", "irpj")
    linha("Adicional IRPJ", "adicional_irpj")
    linha("CSLL", "csll")
    linha("PIS", "pis")
    linha("COFINS", "cofins")
    linha("ISS", "iss")
    linha("Encargos folha", "encargos_folha")

    table.add_row(
        "[bold]Total[/bold]",
        *[
            "[inelegivel]Inelegível[/inelegivel]"
            if r.inelegivel
            else f"[bold]{format_currency(r.total)}[/bold]"
            for r in resultados
        ],
    )
    table.add_row(
        "Alíquota efetiva",
        *["-" if r.inelegivel else format_rate(r.aliquota_efetiva) for r in resultados],
    )
    table.add_row(
        "A recolher",
        *["-" if r.inelegivel else format_currency(r.a_recolher) for r in resultados],
    )

    console.print()
    console.print(table)


if __name__ == "__main__":
    app()
