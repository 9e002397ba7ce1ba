"""Fiscal period input models."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from regime_analyzer.shared.money import ZERO


class PeriodoFiscal(BaseModel):
    """Financial figures for one fiscal period (month, quarter or year).

    Income-type taxes are assessed per quarter and turnover taxes per month;
    the surtax threshold is prorated by ``meses``.
    """

    model_config = ConfigDict(frozen=True)

    receita_bruta: Decimal = Field(..., ge=0, description="Gross revenue of the period")
    receita_servicos: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Service share of revenue (None = follow the activity type)",
    )
    folha_pagamento: Decimal = Field(default=ZERO, ge=0, description="Payroll")
    base_creditos: Decimal = Field(
        default=ZERO, ge=0, description="Creditable input base for PIS/COFINS"
    )
    prejuizo_acumulado: Decimal = Field(
        default=ZERO, ge=0, description="Carried-forward tax losses available"
    )
    incentivo_regional: bool = Field(default=False, description="SUDAM/SUDENE project")

    # Turnover tax exclusions (zero-rated, removed from the base)
    receita_exportacao: Decimal = Field(default=ZERO, ge=0)
    receita_isenta: Decimal = Field(default=ZERO, ge=0)
    receita_st: Decimal = Field(
        default=ZERO, ge=0, description="Revenue under tax substitution / single-phase"
    )

    # Taxes already withheld by customers
    irrf_retido: Decimal = Field(default=ZERO, ge=0)
    csll_retida: Decimal = Field(default=ZERO, ge=0)
    pis_retido: Decimal = Field(default=ZERO, ge=0)
    cofins_retida: Decimal = Field(default=ZERO, ge=0)

    meses: int = Field(default=3, ge=1, le=12, description="Period length in months")

    @model_validator(mode="after")
    def _check_split(self) -> "PeriodoFiscal":
        if self.receita_servicos is not None and self.receita_servicos > self.receita_bruta:
            raise ValueError("receita_servicos não pode exceder receita_bruta")
        return self

    @property
    def exclusoes(self) -> Decimal:
        """Revenue excluded from the PIS/COFINS base."""
        return self.receita_exportacao + self.receita_isenta + self.receita_st

    @property
    def total_retido(self) -> Decimal:
        """Sum of all withheld federal taxes."""
        return self.irrf_retido + self.csll_retida + self.pis_retido + self.cofins_retida

    def receita_servico_efetiva(self, atividade_servico: bool) -> Decimal:
        """Service revenue share, defaulting to the activity type when no split is given."""
        if self.receita_servicos is not None:
            return self.receita_servicos
        return self.receita_bruta if atividade_servico else ZERO


def dividir_periodos(
    anual: "DadosAnuais",
    quantidade: int = 4,
) -> list[PeriodoFiscal]:
    """
    Split annual figures into equal periods.

    Args:
        anual: Annual figures
        quantidade: 1 (year), 4 (quarters) or 12 (months)

    Returns:
        List of periods whose sums equal the annual figures
    """
    if quantidade not in (1, 4, 12):
        raise ValueError("quantidade deve ser 1, 4 ou 12")

    meses = 12 // quantidade
    divisor = Decimal(quantidade)

    def parte(valor: Optional[Decimal]) -> Optional[Decimal]:
        return None if valor is None else valor / divisor

    periodos = []
    for indice in range(quantidade):
        periodos.append(
            PeriodoFiscal(
                receita_bruta=anual.receita_bruta / divisor,
                receita_servicos=parte(anual.receita_servicos),
                folha_pagamento=anual.folha_pagamento / divisor,
                base_creditos=anual.base_creditos / divisor,
                # Loss balance goes to the first period; compute_year carries the rest
                prejuizo_acumulado=anual.prejuizo_acumulado if indice == 0 else ZERO,
                incentivo_regional=anual.incentivo_regional,
                receita_exportacao=anual.receita_exportacao / divisor,
                receita_isenta=anual.receita_isenta / divisor,
                receita_st=anual.receita_st / divisor,
                irrf_retido=anual.irrf_retido / divisor,
                csll_retida=anual.csll_retida / divisor,
                pis_retido=anual.pis_retido / divisor,
                cofins_retida=anual.cofins_retida / divisor,
                meses=meses,
            )
        )
    return periodos


class DadosAnuais(PeriodoFiscal):
    """Annual company figures (a 12-month period plus expense data)."""

    meses: int = Field(default=12, ge=12, le=12)
    despesas_operacionais: Decimal = Field(default=ZERO, ge=0)
    lucro_contabil: Optional[Decimal] = Field(
        default=None, description="Accounting profit, when bookkeeping exists"
    )
    numero_atividades: int = Field(default=1, ge=1)

