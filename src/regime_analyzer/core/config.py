"""Engine configuration.

Rates that vary per company or municipality are collected in one explicit
config object that is passed to the calculators. Defaults come from
``tax_constants``.
"""

import json
import logging
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, model_validator

from regime_analyzer.core.models.region import RegionTaxProfile
from regime_analyzer.core.rules.tax_constants import (
    ALIQUOTA_ISS_PADRAO,
    ALIQUOTA_RAT_PADRAO,
    ALIQUOTA_TERCEIROS_PADRAO,
    INSS_PATRONAL,
    JANELA_PROXIMIDADE,
    JANELA_RECOMENDACAO,
    LIMIAR_FATOR_R,
    MARGEM_MAXIMA,
    MARGEM_MINIMA,
    REDUCAO_IRPJ_INCENTIVO,
    SUBLIMITE_ICMS_ISS,
)
from regime_analyzer.shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class EngineConfig(BaseModel):
    """Tunable parameters for a calculation run."""

    model_config = ConfigDict(frozen=True)

    aliquota_iss: Decimal = Field(default=ALIQUOTA_ISS_PADRAO, ge=0, le=Decimal("0.05"))
    aliquota_rat: Decimal = Field(default=ALIQUOTA_RAT_PADRAO, ge=0, le=Decimal("0.06"))
    aliquota_terceiros: Decimal = Field(default=ALIQUOTA_TERCEIROS_PADRAO, ge=0, le=Decimal("0.10"))
    inss_patronal: Decimal = Field(default=INSS_PATRONAL, ge=0, le=1)
    limiar_fator_r: Decimal = Field(default=LIMIAR_FATOR_R, gt=0, lt=1)
    margem_minima: int = Field(default=MARGEM_MINIMA, ge=1)
    margem_maxima: int = Field(default=MARGEM_MAXIMA, le=100)
    janela_proximidade: Decimal = Field(default=JANELA_PROXIMIDADE, ge=0)
    janela_recomendacao: Decimal = Field(default=JANELA_RECOMENDACAO, ge=0)
    reducao_irpj_incentivo: Decimal = Field(default=REDUCAO_IRPJ_INCENTIVO, ge=0, le=1)
    sublimite_simples: Decimal = Field(default=SUBLIMITE_ICMS_ISS, gt=0)

    @model_validator(mode="after")
    def _check_margens(self) -> "EngineConfig":
        if self.margem_minima > self.margem_maxima:
            raise ValueError("margem_minima deve ser <= margem_maxima")
        return self

    @property
    def aliquota_encargos(self) -> Decimal:
        """Employer INSS + RAT + third-party contributions."""
        return self.inss_patronal + self.aliquota_rat + self.aliquota_terceiros

    def com_perfil(self, perfil: RegionTaxProfile) -> "EngineConfig":
        """Copy using a state's ISS rate, sublimit and incentive reduction."""
        atualizacoes = {
            "aliquota_iss": perfil.iss_capital,
            "sublimite_simples": perfil.sublimite_simples,
        }
        if perfil.tem_incentivo_federal:
            atualizacoes["reducao_irpj_incentivo"] = perfil.reducao_irpj
        return self.model_copy(update=atualizacoes)

    @classmethod
    def from_json(cls, path: Path) -> "EngineConfig":
        """
        Load configuration from a JSON file.

        Missing keys keep their defaults.

        Args:
            path: JSON file path

        Returns:
            EngineConfig

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        try:
            dados = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Não foi possível ler {path}: {e}") from e
        try:
            config = cls.model_validate(dados)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Configuração inválida em {path}: {e}") from e
        logger.info("Configuração carregada de %s", path)
        return config
