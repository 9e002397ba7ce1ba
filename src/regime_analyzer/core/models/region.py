"""Regional tax profile model (one record per state)."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from regime_analyzer.core.rules.tax_constants import (
    ALIQUOTA_ISS_PADRAO,
    REDUCAO_IRPJ_INCENTIVO,
    SUBLIMITE_ICMS_ISS,
)


class RegionTaxProfile(BaseModel):
    """State-level parameters consumed by the generic calculators.

    Region data is plain configuration; there is no per-state code.
    """

    model_config = ConfigDict(frozen=True)

    sigla: str = Field(..., min_length=2, max_length=2)
    nome: str
    regiao: str
    icms_padrao: Decimal = Field(..., ge=0, le=1)
    iss_capital: Decimal = Field(default=ALIQUOTA_ISS_PADRAO, ge=0, le=1)
    sudam: bool = Field(default=False)
    sudene: bool = Field(default=False)
    zfm: bool = Field(default=False, description="Zona Franca de Manaus")
    sublimite_simples: Decimal = Field(default=SUBLIMITE_ICMS_ISS, gt=0)

    @property
    def tem_incentivo_federal(self) -> bool:
        """SUDAM or SUDENE area."""
        return self.sudam or self.sudene

    @property
    def tipo_incentivo(self) -> str:
        if self.sudam:
            return "SUDAM"
        if self.sudene:
            return "SUDENE"
        return ""

    @property
    def reducao_irpj(self) -> Decimal:
        """IRPJ reduction factor available to Lucro Real projects in the area."""
        return REDUCAO_IRPJ_INCENTIVO if self.tem_incentivo_federal else Decimal("0")
