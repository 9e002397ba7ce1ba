"""Input and result models for the opportunity simulators."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from regime_analyzer.shared.money import ZERO


class Socio(BaseModel):
    """A managing partner receiving pró-labore."""

    model_config = ConfigDict(frozen=True)

    nome: str = Field(default="Sócio")
    participacao: Decimal = Field(default=Decimal("1"), gt=0, le=1)
    pro_labore_atual: Optional[Decimal] = Field(default=None, ge=0)
    tem_outro_vinculo_clt: bool = Field(
        default=False, description="Already contributes INSS up to the ceiling elsewhere"
    )
    dependentes_irpf: int = Field(default=0, ge=0)


class CenarioProLabore(BaseModel):
    """One simulated monthly pró-labore level."""

    model_config = ConfigDict(frozen=True)

    pro_labore_mensal: Decimal
    inss_patronal_mensal: Decimal
    inss_retido_mensal: Decimal
    irpf_mensal: Decimal
    liquido_mensal: Decimal
    lucro_distribuivel_socio: Decimal
    tributos_anuais: Decimal


class ResultadoProLabore(BaseModel):
    """Owner compensation optimisation result."""

    model_config = ConfigDict(frozen=True)

    cenarios: tuple[CenarioProLabore, ...]
    otimo: CenarioProLabore
    atual: CenarioProLabore
    economia_anual: Decimal
    recomendacao: str


class ResultadoJCP(BaseModel):
    """Interest on equity (JCP) simulation."""

    model_config = ConfigDict(frozen=True)

    jcp_bruto: Decimal
    jcp_maximo_pl: Decimal
    limite_deducao: Decimal
    aliquota_irrf: Decimal
    irrf_retido: Decimal
    jcp_liquido: Decimal
    liquido_via_pro_labore: Decimal
    economia_vs_pro_labore: Decimal = Field(
        default=ZERO,
        description="Extra net amount to the partner versus additional pró-labore",
    )
    economia_irpj_csll: Decimal = Field(
        default=ZERO, description="IRPJ + CSLL saved by deducting JCP (Lucro Real)"
    )
    recomendacao: str


class ResultadoRegimeCaixa(BaseModel):
    """Cash-basis vs accrual comparison (Lucro Presumido)."""

    model_config = ConfigDict(frozen=True)

    total_faturado: Decimal
    total_recebido: Decimal
    diferenca_trimestral: tuple[Decimal, ...] = Field(..., description="Accrual minus cash, per quarter")
    total_diferido: Decimal = Field(..., description="Postponed tax, not a reduction")
    recomendacao: str


class ResultadoECD(BaseModel):
    """Benefit of full bookkeeping (ECD) for tax-free profit distribution."""

    model_config = ConfigDict(frozen=True)

    limite_presumido: Decimal
    limite_contabil: Decimal
    distribuicao_extra: Decimal
    custo_ecd: Decimal
    beneficio_liquido: Decimal
    vale_a_pena: bool
    recomendacao: str


class TrimestreLC224(BaseModel):
    """Presumed base with and without the LC 224/2025 uplift for one quarter."""

    model_config = ConfigDict(frozen=True)

    trimestre: int = Field(..., ge=1, le=4)
    base_sem_lc224: Decimal
    base_com_lc224: Decimal

    @property
    def impacto(self) -> Decimal:
        return self.base_com_lc224 - self.base_sem_lc224


class ImpactoLC224(BaseModel):
    """Annual impact of the LC 224/2025 presumption uplift."""

    model_config = ConfigDict(frozen=True)

    receita_bruta_anual: Decimal
    trimestres: tuple[TrimestreLC224, ...]
    impacto_total_base: Decimal
    imposto_extra_estimado: Decimal
    alerta: str


class DadosOportunidades(BaseModel):
    """Optional inputs that enable the opportunity simulators."""

    socios: tuple[Socio, ...] = Field(default=())
    patrimonio_liquido: Optional[Decimal] = Field(default=None, ge=0)
    taxa_tjlp: Optional[Decimal] = Field(default=None, ge=0)
    lucro_liquido_ou_reservas: Optional[Decimal] = Field(default=None, ge=0)
    data_jcp: date = Field(default=date(2026, 6, 30))
    faturamento_mensal: Optional[tuple[Decimal, ...]] = Field(default=None)
    recebimento_mensal: Optional[tuple[Decimal, ...]] = Field(default=None)
    custo_anual_ecd: Optional[Decimal] = Field(default=None, ge=0)
    tem_escrituracao: bool = Field(default=False)
    tem_equipamentos: bool = Field(default=False)
    tem_pd: bool = Field(default=False)
    ano_calendario: int = Field(default=2026)

    @field_validator("faturamento_mensal", "recebimento_mensal")
    @classmethod
    def _doze_meses(cls, valor: Optional[tuple[Decimal, ...]]) -> Optional[tuple[Decimal, ...]]:
        if valor is not None and len(valor) != 12:
            raise ValueError("informe exatamente 12 valores mensais")
        return valor
