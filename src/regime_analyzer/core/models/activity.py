"""Activity code (CNAE) model."""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from regime_analyzer.core.models.enums import CategoriaAtividade
from regime_analyzer.shared.text import remover_acentos

_SEPARADORES = re.compile(r"[\s\-/.]")
_NAO_DIGITOS = re.compile(r"\D")

# Free-form category labels accepted by ``parse_categoria``
_ROTULOS_COMERCIO = ("comercio", "varejo", "atacado", "revenda", "loja")
_ROTULOS_INDUSTRIA = ("industria", "fabricacao", "fabricante", "transformacao", "manufatura")
_ROTULOS_SERVICO = ("servico", "prestacao")


def normalizar_codigo(codigo: str) -> str:
    """Strip whitespace and separators (``-``, ``/``, ``.``) from a code."""
    return _SEPARADORES.sub("", codigo or "")


def apenas_digitos(codigo: str) -> str:
    """Keep only the digits of a code."""
    return _NAO_DIGITOS.sub("", codigo or "")


def formatar_cnae(digitos: str) -> str:
    """Format 7 digits as ``DDDD-D/DD``; other lengths are returned as-is."""
    if len(digitos) == 7:
        return f"{digitos[:4]}-{digitos[4]}/{digitos[5:]}"
    return digitos


def parse_categoria(valor: object) -> Optional[CategoriaAtividade]:
    """
    Map a free-form category label to CategoriaAtividade.

    Accepts enum members, values ("servico"), accented labels ("Serviço",
    "Comércio varejista") and the numeric shorthands 1/2/3.

    Args:
        valor: Raw category

    Returns:
        Matching category, or None when the label is not recognized
    """
    if valor is None:
        return None
    if isinstance(valor, CategoriaAtividade):
        return valor

    rotulo = re.sub(r"[^a-z0-9]", "", remover_acentos(str(valor)).lower())
    if not rotulo:
        return None
    if rotulo in ("1", "i", "com", "comercial") or any(r in rotulo for r in _ROTULOS_COMERCIO):
        return CategoriaAtividade.COMERCIO
    if rotulo in ("2", "ii", "ind", "industrial") or any(r in rotulo for r in _ROTULOS_INDUSTRIA):
        return CategoriaAtividade.INDUSTRIA
    if rotulo in ("3", "iii", "serv") or any(r in rotulo for r in _ROTULOS_SERVICO):
        return CategoriaAtividade.SERVICO
    return None


class ActivityCode(BaseModel):
    """A normalized CNAE activity code. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    codigo: str = Field(..., description="Canonical form, e.g. 4930-2/01")
    digitos: str = Field(..., description="Digits only, e.g. 4930201")
    categoria: Optional[CategoriaAtividade] = Field(
        default=None, description="Coarse category used by the fallback tier"
    )

    @classmethod
    def parse(cls, codigo: str, categoria: object = None) -> "ActivityCode":
        """Build an ActivityCode from raw user input."""
        digitos = apenas_digitos(codigo)
        canonico = formatar_cnae(digitos) if digitos else normalizar_codigo(codigo)
        return cls(codigo=canonico, digitos=digitos, categoria=parse_categoria(categoria))

    def __str__(self) -> str:
        return self.codigo
