"""Advice and savings aggregation models."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from regime_analyzer.core.models.enums import NivelOportunidade, TipoDica, TipoFonte
from regime_analyzer.shared.money import ZERO


class Dica(BaseModel):
    """A contextual advice item."""

    model_config = ConfigDict(frozen=True)

    titulo: str = Field(..., description="Advice title")
    descricao: str = Field(..., description="Detailed description")
    tipo: TipoDica = Field(default=TipoDica.INFO)
    impacto_estimado: Optional[Decimal] = Field(
        default=None, description="Estimated annual impact"
    )
    ja_aplicado: bool = Field(
        default=False, description="Benefit already reflected in the regime totals"
    )


class FonteEconomia(BaseModel):
    """One contribution to the savings summary."""

    model_config = ConfigDict(frozen=True)

    fonte: str = Field(..., description="Source title")
    valor: Decimal = Field(..., ge=0)
    tipo: TipoFonte = Field(default=TipoFonte.ECONOMIA)
    descricao: str = Field(default="")


class ResumoEconomia(BaseModel):
    """Consolidated savings opportunities."""

    model_config = ConfigDict(frozen=True)

    total_economia_anual: Decimal = Field(default=ZERO, description="True tax reduction")
    total_diferimento: Decimal = Field(
        default=ZERO, description="Postponed tax (never counted as savings)"
    )
    fontes: tuple[FonteEconomia, ...] = Field(default=())
    itens: tuple[Dica, ...] = Field(default=())
    nivel_oportunidade: NivelOportunidade = Field(default=NivelOportunidade.BAIXO)
    recomendacao_principal: str = Field(default="")

    @property
    def fontes_economia(self) -> list[FonteEconomia]:
        """Sources that are real savings."""
        return [f for f in self.fontes if f.tipo == TipoFonte.ECONOMIA]


class ModuleStatus(BaseModel):
    """Availability of an optional opportunity simulator for a request."""

    model_config = ConfigDict(frozen=True)

    nome: str
    disponivel: bool
    motivo: Optional[str] = Field(default=None, description="Why it is unavailable")
