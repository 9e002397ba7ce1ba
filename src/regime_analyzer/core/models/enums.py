"""Enumerations for corporate tax regime models."""

from enum import Enum


class CategoriaAtividade(str, Enum):
    """Coarse activity category (used by the category fallback tier)."""

    COMERCIO = "comercio"
    INDUSTRIA = "industria"
    SERVICO = "servico"


class Anexo(str, Enum):
    """Simples Nacional schedule (Anexos I-V of LC 123/2006)."""

    I = "I"  # noqa: E741
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"
    VEDADO = "VEDADO"  # Activity barred from Simples Nacional


class FonteRegra(str, Enum):
    """Which resolver tier produced a ruleset."""

    EXATA = "exata"
    PREFIXO = "prefixo"
    CATEGORIA = "categoria"
    PADRAO = "padrao"


class Regime(str, Enum):
    """Corporate tax regimes."""

    SIMPLES_NACIONAL = "simples_nacional"
    LUCRO_PRESUMIDO = "lucro_presumido"
    LUCRO_REAL = "lucro_real"

    @property
    def nome(self) -> str:
        """Display name."""
        return {
            Regime.SIMPLES_NACIONAL: "Simples Nacional",
            Regime.LUCRO_PRESUMIDO: "Lucro Presumido",
            Regime.LUCRO_REAL: "Lucro Real",
        }[self]


class TipoDica(str, Enum):
    """Advice item category, in display order."""

    ALERTA = "alerta"
    ECONOMIA = "economia"
    ACAO = "acao"
    INFO = "info"

    @property
    def ordem(self) -> int:
        """Sort key: alerts first, informational last."""
        return list(TipoDica).index(self)


class TipoFonte(str, Enum):
    """Whether an opportunity reduces tax or only postpones it."""

    ECONOMIA = "economia"
    DIFERIMENTO = "diferimento"


class NivelOportunidade(str, Enum):
    """Savings opportunity level relative to the presumed-profit burden."""

    BAIXO = "baixo"
    MEDIO = "medio"
    ALTO = "alto"
