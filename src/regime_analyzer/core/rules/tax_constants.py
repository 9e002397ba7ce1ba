"""Tax constants and limits for corporate regime comparison.

Values are based on Brazilian federal legislation in force for 2026.
Sources:
- LC 123/2006 (Simples Nacional), Anexos I a V
- Lei 9.249/1995, Art. 15 e 20 (Lucro Presumido)
- RIR/2018 (Decreto 9.580/2018), Art. 257-261, 580-601, 624
- Lei 10.637/2002 e Lei 10.833/2003 (PIS/COFINS não cumulativo)
- Lei 15.270/2025 (redutor IRPF 2026), LC 224/2025
"""

from datetime import date
from decimal import Decimal

from regime_analyzer.core.models.enums import Anexo

# === IRPJ / CSLL ===

ALIQUOTA_IRPJ = Decimal("0.15")
ALIQUOTA_ADICIONAL_IRPJ = Decimal("0.10")
# Surtax threshold per month; prorated by period length (quarter = 60k)
LIMITE_ADICIONAL_MENSAL = Decimal("20000")
LIMITE_ADICIONAL_TRIMESTRAL = LIMITE_ADICIONAL_MENSAL * 3
LIMITE_ADICIONAL_ANUAL = LIMITE_ADICIONAL_MENSAL * 12

ALIQUOTA_CSLL = Decimal("0.09")

# Rough IRPJ + CSLL load used by the tip estimates (15% + 9%)
CARGA_IRPJ_CSLL = ALIQUOTA_IRPJ + ALIQUOTA_CSLL

# Loss carry-forward cap: 30% of the taxable profit per period
LIMITE_COMPENSACAO_PREJUIZO = Decimal("0.30")

# SUDAM / SUDENE reduction of the base IRPJ (Lucro Real only)
REDUCAO_IRPJ_INCENTIVO = Decimal("0.75")

# === PIS / COFINS ===

PIS_CUMULATIVO = Decimal("0.0065")
COFINS_CUMULATIVO = Decimal("0.03")
PIS_COFINS_CUMULATIVO = PIS_CUMULATIVO + COFINS_CUMULATIVO

PIS_NAO_CUMULATIVO = Decimal("0.0165")
COFINS_NAO_CUMULATIVO = Decimal("0.076")
PIS_COFINS_NAO_CUMULATIVO = PIS_NAO_CUMULATIVO + COFINS_NAO_CUMULATIVO

# === Payroll charges ===

INSS_PATRONAL = Decimal("0.20")
ALIQUOTA_RAT_PADRAO = Decimal("0.03")
ALIQUOTA_TERCEIROS_PADRAO = Decimal("0.005")

# === Municipal service tax ===

ALIQUOTA_ISS_PADRAO = Decimal("0.05")

# === Regime limits ===

LIMITE_SIMPLES_NACIONAL = Decimal("4800000")
SUBLIMITE_ICMS_ISS = Decimal("3600000")
LIMITE_MICROEMPRESA = Decimal("360000")
LIMITE_LUCRO_PRESUMIDO = Decimal("78000000")

# === Factor R ===
# Payroll / revenue (12 months) at or above this switches Anexo V to III
LIMIAR_FATOR_R = Decimal("0.28")
ANEXO_ALTERNATIVO_FATOR_R = {Anexo.V: Anexo.III}

# === Break-even search ===

MARGEM_MINIMA = 1
MARGEM_MAXIMA = 95
JANELA_PROXIMIDADE = Decimal("5")  # points around the break-even margin
JANELA_RECOMENDACAO = Decimal("10")

# === Opportunity level thresholds (savings / presumed burden) ===

NIVEL_ALTO = Decimal("0.15")
NIVEL_MEDIO = Decimal("0.05")

# === Simples Nacional brackets ===
# Format: (limite_rbt12, aliquota_nominal, parcela_deduzir)

FAIXAS_SIMPLES: dict[Anexo, tuple[tuple[Decimal, Decimal, Decimal], ...]] = {
    Anexo.I: (  # Comércio
        (Decimal("180000"), Decimal("0.04"), Decimal("0")),
        (Decimal("360000"), Decimal("0.073"), Decimal("5940")),
        (Decimal("720000"), Decimal("0.095"), Decimal("13860")),
        (Decimal("1800000"), Decimal("0.107"), Decimal("22500")),
        (Decimal("3600000"), Decimal("0.143"), Decimal("87300")),
        (Decimal("4800000"), Decimal("0.19"), Decimal("378000")),
    ),
    Anexo.II: (  # Indústria
        (Decimal("180000"), Decimal("0.045"), Decimal("0")),
        (Decimal("360000"), Decimal("0.078"), Decimal("5940")),
        (Decimal("720000"), Decimal("0.10"), Decimal("13860")),
        (Decimal("1800000"), Decimal("0.112"), Decimal("22500")),
        (Decimal("3600000"), Decimal("0.147"), Decimal("85500")),
        (Decimal("4800000"), Decimal("0.30"), Decimal("720000")),
    ),
    Anexo.III: (  # Serviços (inclui Fator R >= 28%)
        (Decimal("180000"), Decimal("0.06"), Decimal("0")),
        (Decimal("360000"), Decimal("0.112"), Decimal("9360")),
        (Decimal("720000"), Decimal("0.135"), Decimal("17640")),
        (Decimal("1800000"), Decimal("0.16"), Decimal("35640")),
        (Decimal("3600000"), Decimal("0.21"), Decimal("125640")),
        (Decimal("4800000"), Decimal("0.33"), Decimal("648000")),
    ),
    Anexo.IV: (  # Serviços com CPP fora do DAS
        (Decimal("180000"), Decimal("0.045"), Decimal("0")),
        (Decimal("360000"), Decimal("0.09"), Decimal("8100")),
        (Decimal("720000"), Decimal("0.102"), Decimal("12420")),
        (Decimal("1800000"), Decimal("0.14"), Decimal("39780")),
        (Decimal("3600000"), Decimal("0.22"), Decimal("183780")),
        (Decimal("4800000"), Decimal("0.33"), Decimal("828000")),
    ),
    Anexo.V: (  # Serviços intelectuais (Fator R < 28%)
        (Decimal("180000"), Decimal("0.155"), Decimal("0")),
        (Decimal("360000"), Decimal("0.18"), Decimal("4500")),
        (Decimal("720000"), Decimal("0.195"), Decimal("9900")),
        (Decimal("1800000"), Decimal("0.205"), Decimal("17100")),
        (Decimal("3600000"), Decimal("0.23"), Decimal("62100")),
        (Decimal("4800000"), Decimal("0.305"), Decimal("540000")),
    ),
}

NOMES_ANEXOS = {
    Anexo.I: "Anexo I - Comércio",
    Anexo.II: "Anexo II - Indústria",
    Anexo.III: "Anexo III - Serviços",
    Anexo.IV: "Anexo IV - Serviços (CPP fora do DAS)",
    Anexo.V: "Anexo V - Serviços intelectuais",
}

# Anexo IV is the only schedule whose DAS excludes the employer contribution
ANEXOS_CPP_FORA_DAS = frozenset({Anexo.IV})

# === Owner compensation (pró-labore) 2026 ===

SALARIO_MINIMO_2026 = Decimal("1621.00")
TETO_INSS_2026 = Decimal("8475.55")
INSS_CONTRIBUINTE_INDIVIDUAL = Decimal("0.11")
PRO_LABORE_MAXIMO_SIMULACAO = Decimal("30000")
PASSO_PRO_LABORE = Decimal("250")

DEDUCAO_DEPENDENTE_IRPF = Decimal("189.59")
DESCONTO_SIMPLIFICADO_IRPF = Decimal("607.20")

# Monthly IRPF table 2026: (limite, aliquota, parcela_deduzir); None = no ceiling
FAIXAS_IRPF_MENSAL_2026: tuple[tuple[Decimal | None, Decimal, Decimal], ...] = (
    (Decimal("2428.80"), Decimal("0"), Decimal("0")),
    (Decimal("2826.65"), Decimal("0.075"), Decimal("182.16")),
    (Decimal("3751.05"), Decimal("0.15"), Decimal("394.16")),
    (Decimal("4664.68"), Decimal("0.225"), Decimal("675.49")),
    (None, Decimal("0.275"), Decimal("908.73")),
)

# Lei 15.270/2025 reducer, applied on the GROSS pró-labore
REDUTOR_LIMITE_ISENCAO = Decimal("5000")
REDUTOR_LIMITE_PARCIAL = Decimal("7350")
REDUTOR_VALOR = Decimal("978.62")
REDUTOR_COEFICIENTE = Decimal("0.133145")

# === JCP (juros sobre capital próprio) ===

ALIQUOTA_IRRF_JCP = Decimal("0.15")
ALIQUOTA_IRRF_JCP_LC224 = Decimal("0.175")
VIGENCIA_IRRF_JCP_LC224 = date(2026, 4, 1)
LIMITE_JCP_LUCRO = Decimal("0.50")

# === LC 224/2025 (presumption uplift above R$ 5M/year) ===

LC224_LIMITE_ANUAL = Decimal("5000000")
LC224_ACRESCIMO = Decimal("0.10")
LC224_PRIMEIRO_TRIMESTRE_2026 = 2  # effective from 01/04/2026


def calcular_irpf_mensal_2026(
    pro_labore: Decimal,
    inss_descontado: Decimal = Decimal("0"),
    dependentes: int = 0,
) -> Decimal:
    """
    Calculate the monthly IRPF withheld on a pró-labore in 2026.

    Uses the larger of (INSS + dependents) or the simplified discount, the
    progressive table and the Lei 15.270/2025 reducer, which is computed on
    the gross amount and never exceeds the tax itself.

    Args:
        pro_labore: Gross monthly pró-labore
        inss_descontado: Partner INSS withheld
        dependentes: Number of IRPF dependents

    Returns:
        Monthly IRPF due (never negative)
    """
    deducoes = inss_descontado + DEDUCAO_DEPENDENTE_IRPF * dependentes
    base = max(Decimal("0"), pro_labore - max(deducoes, DESCONTO_SIMPLIFICADO_IRPF))

    imposto = Decimal("0")
    for limite, aliquota, deducao in FAIXAS_IRPF_MENSAL_2026:
        if limite is None or base <= limite:
            imposto = base * aliquota - deducao
            break
    imposto = max(Decimal("0"), imposto)

    if pro_labore <= REDUTOR_LIMITE_ISENCAO:
        redutor = imposto
    elif pro_labore <= REDUTOR_LIMITE_PARCIAL:
        redutor = max(Decimal("0"), REDUTOR_VALOR - REDUTOR_COEFICIENTE * pro_labore)
        redutor = min(redutor, imposto)
    else:
        redutor = Decimal("0")

    return max(Decimal("0"), imposto - redutor)


def calcular_inss_socio(pro_labore: Decimal) -> Decimal:
    """Partner INSS: 11% of the pró-labore, capped at the INSS ceiling."""
    return min(pro_labore, TETO_INSS_2026) * INSS_CONTRIBUINTE_INDIVIDUAL


def calcular_inss_patronal(pro_labore: Decimal) -> Decimal:
    """Employer INSS on pró-labore: 20%, no ceiling."""
    return pro_labore * INSS_PATRONAL


def aliquota_irrf_jcp(data_referencia: date) -> Decimal:
    """IRRF rate on JCP for a payment date (17.5% from 01/04/2026)."""
    if data_referencia >= VIGENCIA_IRRF_JCP_LC224:
        return ALIQUOTA_IRRF_JCP_LC224
    return ALIQUOTA_IRRF_JCP


def calcular_irpj(base: Decimal, meses: int) -> tuple[Decimal, Decimal]:
    """
    Calculate IRPJ and its surtax for a period.

    Args:
        base: Taxable base (presumed or real profit)
        meses: Period length; the surtax threshold is R$ 20.000 per month

    Returns:
        Tuple (irpj_15, adicional_10), both zero for a non-positive base
    """
    base = max(Decimal("0"), base)
    adicional = max(Decimal("0"), base - LIMITE_ADICIONAL_MENSAL * meses) * ALIQUOTA_ADICIONAL_IRPJ
    return base * ALIQUOTA_IRPJ, adicional
