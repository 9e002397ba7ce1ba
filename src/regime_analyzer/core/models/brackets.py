"""Simples Nacional bracket table models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from regime_analyzer.core.models.enums import Anexo
from regime_analyzer.shared.money import ZERO


class Faixa(BaseModel):
    """One progressive bracket: ceiling, nominal rate and deduction."""

    model_config = ConfigDict(frozen=True)

    limite: Decimal = Field(..., gt=0, description="RBT12 ceiling of the bracket")
    aliquota: Decimal = Field(..., ge=0, le=1, description="Nominal rate")
    deducao: Decimal = Field(default=ZERO, ge=0, description="Parcela a deduzir")

    def aliquota_efetiva(self, rbt12: Decimal) -> Decimal:
        """(RBT12 x nominal - deduction) / RBT12, floored at zero."""
        if rbt12 <= 0:
            return ZERO
        return max(ZERO, (rbt12 * self.aliquota - self.deducao) / rbt12)


class BracketTable(BaseModel):
    """Ordered brackets of one annex, with strictly increasing ceilings."""

    model_config = ConfigDict(frozen=True)

    anexo: Anexo
    faixas: tuple[Faixa, ...] = Field(..., min_length=1)

    @field_validator("anexo")
    @classmethod
    def _anexo_tributavel(cls, valor: Anexo) -> Anexo:
        if valor == Anexo.VEDADO:
            raise ValueError("VEDADO não possui tabela de faixas")
        return valor

    @field_validator("faixas")
    @classmethod
    def _limites_crescentes(cls, valor: tuple[Faixa, ...]) -> tuple[Faixa, ...]:
        for anterior, atual in zip(valor, valor[1:]):
            if atual.limite <= anterior.limite:
                raise ValueError(
                    f"limites devem ser estritamente crescentes ({anterior.limite} >= {atual.limite})"
                )
        return valor

    @property
    def limite_maximo(self) -> Decimal:
        return self.faixas[-1].limite
