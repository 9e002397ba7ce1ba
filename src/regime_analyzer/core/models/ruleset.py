"""Tax ruleset models: the result of classifying an activity code."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from regime_analyzer.core.models.enums import Anexo, FonteRegra


class RuleEntry(BaseModel):
    """One row of a rule table (exact, prefix, category or default)."""

    model_config = ConfigDict(frozen=True)

    anexo: Anexo = Field(..., description="Simples Nacional schedule or VEDADO")
    fator_r: bool = Field(default=False, description="Subject to the factor-R switch")
    presuncao_irpj: Decimal = Field(..., ge=0, le=1, description="IRPJ presumption rate")
    presuncao_csll: Decimal = Field(..., ge=0, le=1, description="CSLL presumption rate")
    vedado: bool = Field(default=False, description="Barred from Simples Nacional")
    motivo_vedacao: Optional[str] = Field(default=None)
    observacao: Optional[str] = Field(default=None)
    servico: bool = Field(
        default=True, description="Revenue is service revenue (bears ISS)"
    )
    descricao: Optional[str] = Field(default=None)


class TaxRuleSet(BaseModel):
    """Applicable tax treatment for an activity.

    Every field is always present; optional texts are explicitly None.
    """

    model_config = ConfigDict(frozen=True)

    codigo: str = Field(..., description="Normalized activity code")
    anexo: Anexo
    fator_r: bool
    presuncao_irpj: Decimal
    presuncao_csll: Decimal
    vedado: bool
    motivo_vedacao: Optional[str]
    observacao: Optional[str]
    fonte: FonteRegra = Field(..., description="Resolver tier that produced this ruleset")
    servico: bool
    descricao: Optional[str]

    @classmethod
    def from_entry(
        cls,
        entry: RuleEntry,
        codigo: str,
        fonte: FonteRegra,
        observacao: Optional[str] = None,
    ) -> "TaxRuleSet":
        """Materialize a table row for a given code and tier."""
        return cls(
            codigo=codigo,
            anexo=entry.anexo,
            fator_r=entry.fator_r,
            presuncao_irpj=entry.presuncao_irpj,
            presuncao_csll=entry.presuncao_csll,
            vedado=entry.vedado,
            motivo_vedacao=entry.motivo_vedacao,
            observacao=observacao if observacao is not None else entry.observacao,
            fonte=fonte,
            servico=entry.servico,
            descricao=entry.descricao,
        )

    @property
    def estimado(self) -> bool:
        """True when the ruleset came from a low-confidence fallback tier."""
        return self.fonte in (FonteRegra.CATEGORIA, FonteRegra.PADRAO)
