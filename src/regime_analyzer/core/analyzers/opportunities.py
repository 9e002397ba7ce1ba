"""Tax planning opportunity simulators.

Each simulator is independent and pure:
- Optimal pró-labore (owner compensation)
- JCP (interest on equity)
- Cash-basis revenue recognition (deferral only)
- Full bookkeeping (ECD) for larger tax-free distributions
- LC 224/2025 presumption uplift above R$ 5M/year
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from regime_analyzer.core.models.opportunities import (
    CenarioProLabore,
    ImpactoLC224,
    ResultadoECD,
    ResultadoJCP,
    ResultadoProLabore,
    ResultadoRegimeCaixa,
    Socio,
    TrimestreLC224,
)
from regime_analyzer.core.models.ruleset import TaxRuleSet
from regime_analyzer.core.rules.tax_constants import (
    ALIQUOTA_CSLL,
    CARGA_IRPJ_CSLL,
    COFINS_CUMULATIVO,
    LC224_ACRESCIMO,
    LC224_LIMITE_ANUAL,
    LC224_PRIMEIRO_TRIMESTRE_2026,
    LIMITE_JCP_LUCRO,
    PASSO_PRO_LABORE,
    PIS_CUMULATIVO,
    PRO_LABORE_MAXIMO_SIMULACAO,
    SALARIO_MINIMO_2026,
    aliquota_irrf_jcp,
    calcular_inss_patronal,
    calcular_inss_socio,
    calcular_irpf_mensal_2026,
    calcular_irpj,
)
from regime_analyzer.shared.formatters import format_currency
from regime_analyzer.shared.money import ZERO, arredondar

logger = logging.getLogger(__name__)


# === Pró-labore ===


def _cenario_pro_labore(
    pro_labore: Decimal, socio: Socio, lucro_do_socio: Decimal
) -> CenarioProLabore:
    inss_patronal = calcular_inss_patronal(pro_labore)
    inss_retido = ZERO if socio.tem_outro_vinculo_clt else calcular_inss_socio(pro_labore)
    irpf = calcular_irpf_mensal_2026(pro_labore, inss_retido, socio.dependentes_irpf)
    return CenarioProLabore(
        pro_labore_mensal=pro_labore,
        inss_patronal_mensal=arredondar(inss_patronal),
        inss_retido_mensal=arredondar(inss_retido),
        irpf_mensal=arredondar(irpf),
        liquido_mensal=arredondar(pro_labore - inss_retido - irpf),
        lucro_distribuivel_socio=lucro_do_socio,
        tributos_anuais=arredondar((inss_patronal + inss_retido + irpf) * 12),
    )


def simular_pro_labore_otimo(socio: Socio, lucro_distribuivel: Decimal) -> ResultadoProLabore:
    """
    Simulate monthly pró-labore levels and find the cheapest one.

    Levels go from the minimum wage up to R$ 30.000 in R$ 250 steps. The
    annual tax of a level is 12 x (employer INSS + partner INSS + IRPF).

    Args:
        socio: Partner data (current pró-labore, dependents, other INSS link)
        lucro_distribuivel: Annual tax-free distributable profit of the company

    Returns:
        ResultadoProLabore with all scenarios, the optimum and the current one
    """
    lucro_do_socio = arredondar(lucro_distribuivel * socio.participacao)

    cenarios = []
    pro_labore = SALARIO_MINIMO_2026
    while pro_labore <= PRO_LABORE_MAXIMO_SIMULACAO:
        cenarios.append(_cenario_pro_labore(pro_labore, socio, lucro_do_socio))
        pro_labore += PASSO_PRO_LABORE

    otimo = min(cenarios, key=lambda c: c.tributos_anuais)

    referencia = socio.pro_labore_atual if socio.pro_labore_atual is not None else SALARIO_MINIMO_2026
    atual = next((c for c in cenarios if c.pro_labore_mensal == referencia), None)
    if atual is None:
        atual = min(cenarios, key=lambda c: abs(c.pro_labore_mensal - referencia))

    if otimo.pro_labore_mensal == SALARIO_MINIMO_2026:
        recomendacao = (
            f"O pró-labore ótimo é o salário mínimo ({format_currency(SALARIO_MINIMO_2026)}). "
            "Distribua o restante como lucros isentos."
        )
    else:
        recomendacao = f"O pró-labore ótimo é {format_currency(otimo.pro_labore_mensal)}/mês."

    return ResultadoProLabore(
        cenarios=tuple(cenarios),
        otimo=otimo,
        atual=atual,
        economia_anual=arredondar(atual.tributos_anuais - otimo.tributos_anuais),
        recomendacao=recomendacao,
    )


# === JCP ===


def simular_jcp(
    patrimonio_liquido: Decimal,
    taxa_tjlp: Decimal,
    lucro_liquido_ou_reservas: Decimal,
    data_referencia: date = date(2026, 6, 30),
    lucro_distribuivel_restante: Decimal = ZERO,
    deduz_irpj_csll: bool = False,
) -> ResultadoJCP:
    """
    Simulate interest on equity (JCP) and compare it with pró-labore.

    Args:
        patrimonio_liquido: Company equity
        taxa_tjlp: TJLP rate as a fraction
        lucro_liquido_ou_reservas: Profit or reserves (50% deduction limit)
        data_referencia: Payment date (IRRF is 17,5% from 01/04/2026)
        lucro_distribuivel_restante: Tax-free distribution still available
        deduz_irpj_csll: Company is on Lucro Real, where JCP is deductible

    Returns:
        ResultadoJCP
    """
    jcp_maximo_pl = arredondar(patrimonio_liquido * taxa_tjlp)
    limite_deducao = arredondar(lucro_liquido_ou_reservas * LIMITE_JCP_LUCRO)
    jcp = min(jcp_maximo_pl, limite_deducao)

    aliquota = aliquota_irrf_jcp(data_referencia)
    irrf = arredondar(jcp * aliquota)
    liquido = jcp - irrf

    inss_socio = calcular_inss_socio(jcp)
    irpf = calcular_irpf_mensal_2026(jcp, inss_socio)
    liquido_pro_labore = arredondar(jcp - inss_socio - irpf)

    economia = arredondar(jcp * CARGA_IRPJ_CSLL) if deduz_irpj_csll else ZERO

    vantagem = ZERO
    if lucro_distribuivel_restante > 0:
        recomendacao = (
            "Use primeiro a distribuição de lucros isentos (custo ZERO). "
            "JCP só faz sentido quando o limite isento se esgota."
        )
    elif liquido > liquido_pro_labore:
        vantagem = arredondar(liquido - liquido_pro_labore)
        recomendacao = (
            "JCP é mais vantajoso que pró-labore adicional. "
            f"Economia: {format_currency(vantagem)}."
        )
    else:
        recomendacao = "Pró-labore é mais vantajoso que JCP neste cenário."

    return ResultadoJCP(
        jcp_bruto=jcp,
        jcp_maximo_pl=jcp_maximo_pl,
        limite_deducao=limite_deducao,
        aliquota_irrf=aliquota,
        irrf_retido=irrf,
        jcp_liquido=liquido,
        liquido_via_pro_labore=liquido_pro_labore,
        economia_vs_pro_labore=vantagem,
        economia_irpj_csll=economia,
        recomendacao=recomendacao,
    )


# === Regime de caixa ===


def _tributos_trimestre(receita: Decimal, ruleset: TaxRuleSet) -> Decimal:
    base_irpj = arredondar(receita * ruleset.presuncao_irpj)
    irpj, adicional = calcular_irpj(base_irpj, 3)
    csll = arredondar(receita * ruleset.presuncao_csll) * ALIQUOTA_CSLL
    pis_cofins = receita * (PIS_CUMULATIVO + COFINS_CUMULATIVO)
    return arredondar(irpj + adicional) + arredondar(csll) + arredondar(pis_cofins)


def simular_regime_caixa(
    faturamento_mensal: Sequence[Decimal],
    recebimento_mensal: Sequence[Decimal],
    ruleset: TaxRuleSet,
) -> ResultadoRegimeCaixa:
    """
    Compare accrual and cash-basis recognition under Lucro Presumido.

    The cash basis changes WHEN taxes are paid, not how much: the result
    is a deferral, never a saving.

    Args:
        faturamento_mensal: Twelve monthly invoiced amounts
        recebimento_mensal: Twelve monthly received amounts
        ruleset: Resolved activity ruleset (presumption rates)

    Returns:
        ResultadoRegimeCaixa with the accrual-minus-cash difference per quarter

    Raises:
        ValueError: If either series does not have 12 months
    """
    if len(faturamento_mensal) != 12 or len(recebimento_mensal) != 12:
        raise ValueError("informe exatamente 12 valores mensais")

    diferencas = []
    for trimestre in range(4):
        meses = slice(trimestre * 3, trimestre * 3 + 3)
        competencia = sum(faturamento_mensal[meses], ZERO)
        caixa = sum(recebimento_mensal[meses], ZERO)
        diferencas.append(
            _tributos_trimestre(competencia, ruleset) - _tributos_trimestre(caixa, ruleset)
        )

    total_diferido = arredondar(sum(diferencas, ZERO))
    if total_diferido > 0:
        recomendacao = (
            f"Regime de Caixa posterga {format_currency(total_diferido)} em tributos no ano. "
            "Benefício de fluxo de caixa, não de redução de imposto."
        )
    else:
        recomendacao = (
            "Regime de Competência é mais favorável neste cenário "
            "(recebimentos superam faturamento)."
        )

    return ResultadoRegimeCaixa(
        total_faturado=arredondar(sum(faturamento_mensal, ZERO)),
        total_recebido=arredondar(sum(recebimento_mensal, ZERO)),
        diferenca_trimestral=tuple(diferencas),
        total_diferido=total_diferido,
        recomendacao=recomendacao,
    )


# === ECD ===


def calcular_beneficio_ecd(
    base_presumida: Decimal,
    lucro_contabil: Decimal,
    tributos_federais: Decimal,
    custo_ecd: Decimal,
) -> ResultadoECD:
    """
    Benefit of full bookkeeping for tax-free profit distribution.

    Without ECD the tax-free distribution is limited to the presumed base
    minus federal taxes; with ECD it is the accounting profit minus taxes.

    Args:
        base_presumida: Annual presumed IRPJ base
        lucro_contabil: Annual accounting profit
        tributos_federais: Annual IRPJ + CSLL + PIS + COFINS
        custo_ecd: Annual bookkeeping cost

    Returns:
        ResultadoECD
    """
    limite_presumido = arredondar(max(ZERO, base_presumida - tributos_federais))
    limite_contabil = arredondar(max(ZERO, lucro_contabil - tributos_federais))
    extra = max(ZERO, limite_contabil - limite_presumido)
    beneficio = arredondar(extra - custo_ecd)
    vale_a_pena = beneficio > 0

    if vale_a_pena:
        recomendacao = (
            f"Com ECD, distribua {format_currency(extra)} a mais por ano como lucro isento. "
            f"Benefício líquido (descontando custo da ECD): {format_currency(beneficio)}/ano."
        )
    elif custo_ecd > 0:
        recomendacao = (
            f"O custo da ECD ({format_currency(custo_ecd)}) supera o benefício de "
            f"{format_currency(extra)}. Não recomendado."
        )
    else:
        recomendacao = (
            "O lucro contábil não excede a base presumida. "
            "ECD não gera benefício adicional na distribuição."
        )

    return ResultadoECD(
        limite_presumido=limite_presumido,
        limite_contabil=limite_contabil,
        distribuicao_extra=extra,
        custo_ecd=custo_ecd,
        beneficio_liquido=beneficio,
        vale_a_pena=vale_a_pena,
        recomendacao=recomendacao,
    )


# === LC 224/2025 ===


def _lc224_vigente(ano: int, trimestre: int) -> bool:
    if ano > 2026:
        return True
    return ano == 2026 and trimestre >= LC224_PRIMEIRO_TRIMESTRE_2026


def calcular_impacto_lc224(
    receita_anual: Decimal,
    ruleset: TaxRuleSet,
    ano_calendario: int = 2026,
) -> Optional[ImpactoLC224]:
    """
    Estimate the LC 224/2025 uplift of the presumed base.

    Revenue above R$ 5M/year (R$ 1,25M per quarter, cumulative) has its
    presumption increased by 10% of the rate, from 01/04/2026.

    Args:
        receita_anual: Annual gross revenue, split evenly across quarters
        ruleset: Resolved activity ruleset
        ano_calendario: Calendar year

    Returns:
        ImpactoLC224, or None when revenue is within the limit or nothing changes
    """
    if receita_anual <= LC224_LIMITE_ANUAL:
        return None

    presuncao = ruleset.presuncao_irpj
    majorada = presuncao * (1 + LC224_ACRESCIMO)
    receita_trimestre = receita_anual / 4
    limite_trimestre = LC224_LIMITE_ANUAL / 4

    trimestres = []
    impacto_total = ZERO
    for numero in range(1, 5):
        sem_lc224 = receita_trimestre * presuncao
        excedente = ZERO
        if _lc224_vigente(ano_calendario, numero):
            acumulado_antes = max(ZERO, receita_trimestre * (numero - 1) - limite_trimestre * (numero - 1))
            acumulado_agora = max(ZERO, receita_trimestre * numero - limite_trimestre * numero)
            excedente = max(ZERO, min(acumulado_agora - acumulado_antes, receita_trimestre))
        com_lc224 = (receita_trimestre - excedente) * presuncao + excedente * majorada

        trimestres.append(
            TrimestreLC224(
                trimestre=numero,
                base_sem_lc224=arredondar(sem_lc224),
                base_com_lc224=arredondar(com_lc224),
            )
        )
        impacto_total += arredondar(com_lc224 - sem_lc224)

    impacto_total = arredondar(impacto_total)
    if impacto_total == 0:
        return None

    imposto_extra = arredondar(impacto_total * CARGA_IRPJ_CSLL)
    logger.info("LC 224/2025: base presumida +%s", impacto_total)

    return ImpactoLC224(
        receita_bruta_anual=receita_anual,
        trimestres=tuple(trimestres),
        impacto_total_base=impacto_total,
        imposto_extra_estimado=imposto_extra,
        alerta=(
            f"A LC 224/2025 aumenta a base presumida em {format_currency(impacto_total)}/ano, "
            f"gerando imposto extra estimado de {format_currency(imposto_extra)}. "
            "Vigência a partir de 01/04/2026 (2º trimestre). "
            "Receitas até R$ 5M/ano permanecem sem acréscimo."
        ),
    )
