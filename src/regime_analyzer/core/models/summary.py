"""Company profile input and consolidated summary models."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from regime_analyzer.core.models.activity import parse_categoria
from regime_analyzer.core.models.advice import Dica, ModuleStatus, ResumoEconomia
from regime_analyzer.core.models.enums import CategoriaAtividade, Regime, TipoFonte
from regime_analyzer.core.models.opportunities import (
    DadosOportunidades,
    ImpactoLC224,
    ResultadoECD,
    ResultadoJCP,
    ResultadoProLabore,
    ResultadoRegimeCaixa,
)
from regime_analyzer.core.models.periods import DadosAnuais
from regime_analyzer.core.models.results import BreakEvenResult, ResultadoRegime
from regime_analyzer.core.models.ruleset import TaxRuleSet
from regime_analyzer.shared.exceptions import MissingInputError, ValidationError


class PerfilEmpresa(BaseModel):
    """Everything needed to analyze one company."""

    razao_social: str = Field(default="")
    codigo_cnae: str = Field(default="", description="CNAE code in any format")
    categoria: Optional[CategoriaAtividade] = Field(default=None)
    uf: Optional[str] = Field(default=None, min_length=2, max_length=2)
    dados: DadosAnuais
    oportunidades: DadosOportunidades = Field(default_factory=DadosOportunidades)

    @field_validator("categoria", mode="before")
    @classmethod
    def _parse_categoria(cls, valor: Any) -> Optional[CategoriaAtividade]:
        return parse_categoria(valor)

    @field_validator("uf", mode="before")
    @classmethod
    def _upper_uf(cls, valor: Any) -> Any:
        return valor.strip().upper() if isinstance(valor, str) else valor

    @classmethod
    def from_dict(cls, dados: dict[str, Any]) -> "PerfilEmpresa":
        """
        Build a profile from raw (JSON) data.

        Args:
            dados: Raw profile

        Returns:
            Validated PerfilEmpresa

        Raises:
            MissingInputError: If the annual gross revenue is missing
            ValidationError: If any other field is invalid
        """
        anuais = dados.get("dados")
        if not isinstance(anuais, dict) or anuais.get("receita_bruta") is None:
            raise MissingInputError("receita_bruta", "analisar")
        try:
            return cls.model_validate(dados)
        except PydanticValidationError as e:
            raise ValidationError(f"Perfil da empresa inválido: {e}") from e


class PosicaoRanking(BaseModel):
    """One eligible regime in the cost ranking."""

    model_config = ConfigDict(frozen=True)

    posicao: int = Field(..., ge=1)
    regime: Regime
    total: Decimal
    economia_vs_mais_caro: Decimal


class AcaoEconomia(BaseModel):
    """A savings action ranked by value."""

    model_config = ConfigDict(frozen=True)

    acao: str
    valor: Decimal
    tipo: TipoFonte


class Summary(BaseModel):
    """Consolidated analysis of a company."""

    model_config = ConfigDict(frozen=True)

    razao_social: str = Field(default="")
    ruleset: TaxRuleSet
    receita_bruta_anual: Decimal
    margem_lucro_real: Decimal = Field(..., description="Margin used for Lucro Real (fraction)")

    simples: ResultadoRegime
    presumido: ResultadoRegime
    real: ResultadoRegime
    ranking: tuple[PosicaoRanking, ...] = Field(default=())

    breakeven: Optional[BreakEvenResult] = Field(default=None)
    economia: ResumoEconomia
    dicas: tuple[Dica, ...] = Field(default=())
    top_dicas: tuple[str, ...] = Field(default=())
    acoes_economia: tuple[AcaoEconomia, ...] = Field(default=())
    regime_recomendado: str

    pro_labore: tuple[ResultadoProLabore, ...] = Field(default=())
    jcp: Optional[ResultadoJCP] = Field(default=None)
    regime_caixa: Optional[ResultadoRegimeCaixa] = Field(default=None)
    ecd: Optional[ResultadoECD] = Field(default=None)
    lc224: Optional[ImpactoLC224] = Field(default=None)
    modulos: tuple[ModuleStatus, ...] = Field(default=())

    avisos: tuple[str, ...] = Field(default=(), description="Disclaimers")

    @property
    def melhor_regime(self) -> Optional[Regime]:
        """Cheapest eligible regime."""
        return self.ranking[0].regime if self.ranking else None

    @property
    def resultados(self) -> tuple[ResultadoRegime, ...]:
        return (self.simples, self.presumido, self.real)
