"""CNAE rule tables and the RuleTables configuration object.

Tables are plain data: an exact code map, a prefix rule list (CNAE
division/group/class), a per-category fallback and an absolute default.
``default_rule_tables()`` builds the shipped version; hosts can load a
different version with ``RuleTables.from_json``.

Sources: LC 123/2006 (Anexos e vedações, Art. 17), Lei 9.249/1995 Art. 15
(presunções), IBGE CNAE 2.3.
"""

import logging
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from regime_analyzer.core.models.activity import apenas_digitos
from regime_analyzer.core.models.enums import Anexo, CategoriaAtividade
from regime_analyzer.core.models.ruleset import RuleEntry
from regime_analyzer.shared.exceptions import RuleTableError

logger = logging.getLogger(__name__)

VERSAO_TABELAS = "2026.02"

NOTA_CATEGORIA = "Regra estimada por categoria — consulte um contador para confirmação"
NOTA_PADRAO = "CNAE não mapeado — usando regra padrão. Consulte um contador."

_ANEXOS_SERVICO = frozenset({Anexo.III, Anexo.IV, Anexo.V})


class PrefixRule(BaseModel):
    """Rule applied to every code starting with ``prefixo``."""

    model_config = ConfigDict(frozen=True)

    prefixo: str = Field(..., min_length=1, pattern=r"^\d+$")
    regra: RuleEntry


class RuleTables(BaseModel):
    """Versioned, read-only rule tables consumed by RuleResolver."""

    model_config = ConfigDict(frozen=True)

    versao: str = Field(default=VERSAO_TABELAS)
    exatas: dict[str, RuleEntry] = Field(default_factory=dict)
    prefixos: tuple[PrefixRule, ...] = Field(default=())
    categorias: dict[CategoriaAtividade, RuleEntry] = Field(default_factory=dict)
    padrao: RuleEntry
    monofasicos: dict[str, str] = Field(
        default_factory=dict, description="Single-phase PIS/COFINS products by code"
    )

    @field_validator("exatas", "monofasicos", mode="before")
    @classmethod
    def _normalizar_chaves(cls, valor: dict) -> dict:
        if not isinstance(valor, dict):
            return valor
        normalizado = {}
        for chave, item in valor.items():
            digitos = apenas_digitos(str(chave))
            if not digitos:
                raise ValueError(f"código inválido na tabela: {chave!r}")
            if digitos in normalizado:
                raise ValueError(f"código duplicado na tabela: {chave!r}")
            normalizado[digitos] = item
        return normalizado

    @field_validator("prefixos")
    @classmethod
    def _prefixos_unicos(cls, valor: tuple[PrefixRule, ...]) -> tuple[PrefixRule, ...]:
        vistos = set()
        for regra in valor:
            if regra.prefixo in vistos:
                raise ValueError(f"prefixo duplicado: {regra.prefixo}")
            vistos.add(regra.prefixo)
        return valor

    def prefixos_ordenados(self) -> list[PrefixRule]:
        """Prefix rules, longest prefix first, ties broken alphabetically."""
        return sorted(self.prefixos, key=lambda p: (-len(p.prefixo), p.prefixo))

    @classmethod
    def from_json(cls, path: Path) -> "RuleTables":
        """
        Load rule tables from a JSON file.

        Args:
            path: JSON file with the RuleTables fields

        Returns:
            Validated RuleTables

        Raises:
            RuleTableError: If the file is missing or malformed
        """
        try:
            tabelas = cls.model_validate_json(path.read_bytes())
        except OSError as e:
            raise RuleTableError(f"Não foi possível ler {path}: {e}") from e
        except PydanticValidationError as e:
            raise RuleTableError(f"Tabela de regras inválida em {path}: {e}") from e
        logger.info(
            "Tabelas %s carregadas: %d códigos, %d prefixos",
            tabelas.versao,
            len(tabelas.exatas),
            len(tabelas.prefixos),
        )
        return tabelas


def _regra(
    anexo: str,
    fator_r: bool,
    irpj: str,
    csll: str,
    obs: Optional[str] = None,
) -> RuleEntry:
    return RuleEntry(
        anexo=Anexo(anexo),
        fator_r=fator_r,
        presuncao_irpj=Decimal(irpj),
        presuncao_csll=Decimal(csll),
        observacao=obs,
        servico=Anexo(anexo) in _ANEXOS_SERVICO,
    )


def _vedado(irpj: str, csll: str, motivo: str) -> RuleEntry:
    # Barred activities keep their presumption; 32% marks a service activity
    return RuleEntry(
        anexo=Anexo.VEDADO,
        fator_r=False,
        presuncao_irpj=Decimal(irpj),
        presuncao_csll=Decimal(csll),
        vedado=True,
        motivo_vedacao=motivo,
        servico=Decimal(irpj) >= Decimal("0.32"),
    )


def _prefixo(prefixo: str, descricao: str, regra: RuleEntry) -> PrefixRule:
    return PrefixRule(prefixo=prefixo, regra=regra.model_copy(update={"descricao": descricao}))


# === Exact codes ===

EXATAS: dict[str, RuleEntry] = {
    "4711-3/01": _regra("I", False, "0.08", "0.12"),
    "4711-3/02": _regra("I", False, "0.08", "0.12"),
    "4712-1/00": _regra("I", False, "0.08", "0.12"),
    "4721-1/02": _regra("I", False, "0.08", "0.12"),
    "4721-1/04": _regra("I", False, "0.08", "0.12"),
    "4729-6/01": _regra("I", False, "0.08", "0.12"),
    "4729-6/99": _regra("I", False, "0.08", "0.12"),
    "4723-7/00": _regra("I", False, "0.08", "0.12"),
    "4744-0/01": _regra("I", False, "0.08", "0.12"),
    "4744-0/02": _regra("I", False, "0.08", "0.12"),
    "4744-0/03": _regra("I", False, "0.08", "0.12"),
    "4744-0/04": _regra("I", False, "0.08", "0.12"),
    "4744-0/05": _regra("I", False, "0.08", "0.12"),
    "4744-0/99": _regra("I", False, "0.08", "0.12"),
    "4753-9/00": _regra("I", False, "0.08", "0.12"),
    "4751-2/01": _regra("I", False, "0.08", "0.12"),
    "4754-7/01": _regra("I", False, "0.08", "0.12"),
    "4771-7/01": _regra("I", False, "0.08", "0.12", obs="Monofásico: PIS/COFINS zerados sobre medicamentos"),
    "4771-7/02": _regra("I", False, "0.08", "0.12"),
    "4771-7/03": _regra("I", False, "0.08", "0.12"),
    "4781-4/00": _regra("I", False, "0.08", "0.12"),
    "4782-2/01": _regra("I", False, "0.08", "0.12"),
    "4511-1/01": _regra("I", False, "0.08", "0.12"),
    "4511-1/02": _regra("I", False, "0.08", "0.12"),
    "4512-9/01": _regra("I", False, "0.08", "0.12"),
    "4512-9/02": _regra("I", False, "0.08", "0.12"),
    "4530-7/01": _regra("I", False, "0.08", "0.12"),
    "4530-7/02": _regra("I", False, "0.08", "0.12"),
    "4530-7/03": _regra("I", False, "0.08", "0.12", obs="Monofásico: autopeças podem ter PIS/COFINS zerados"),
    "4530-7/04": _regra("I", False, "0.08", "0.12"),
    "4530-7/05": _regra("I", False, "0.08", "0.12"),
    "4530-7/06": _regra("I", False, "0.08", "0.12"),
    "4541-2/01": _regra("I", False, "0.08", "0.12"),
    "4541-2/02": _regra("I", False, "0.08", "0.12"),
    "4542-1/01": _regra("I", False, "0.08", "0.12"),
    "4542-1/02": _regra("I", False, "0.08", "0.12"),
    "4543-9/00": _regra("I", False, "0.08", "0.12"),
    "4731-8/00": _regra("I", False, "0.016", "0.12", obs="Revenda de combustíveis: presunção IRPJ reduzida (1,6%). Monofásico."),
    "4732-6/00": _regra("I", False, "0.016", "0.12", obs="Lubrificantes: presunção IRPJ 1,6%"),
    "4772-5/00": _regra("I", False, "0.08", "0.12", obs="Monofásico: cosméticos/perfumaria com PIS/COFINS zerados"),
    "4784-9/00": _regra("I", False, "0.016", "0.12", obs="Revenda GLP: presunção 1,6%"),
    "4761-0/01": _regra("I", False, "0.08", "0.12"),
    "4761-0/02": _regra("I", False, "0.08", "0.12"),
    "4761-0/03": _regra("I", False, "0.08", "0.12"),
    "4771-7/04": _regra("I", False, "0.08", "0.12"),
    "4789-0/01": _regra("I", False, "0.08", "0.12"),
    "4789-0/02": _regra("I", False, "0.08", "0.12"),
    "4789-0/04": _regra("I", False, "0.08", "0.12"),
    "4789-0/05": _regra("I", False, "0.08", "0.12"),
    "4789-0/07": _regra("I", False, "0.08", "0.12"),
    "4789-0/08": _regra("I", False, "0.08", "0.12"),
    "4789-0/09": _regra("I", False, "0.08", "0.12"),
    "4789-0/99": _regra("I", False, "0.08", "0.12"),
    "4691-5/00": _regra("I", False, "0.08", "0.12"),
    "4693-1/00": _regra("I", False, "0.08", "0.12"),
    "4713-0/01": _regra("I", False, "0.08", "0.12"),
    "4713-0/02": _regra("I", False, "0.08", "0.12"),
    "4713-0/04": _regra("I", False, "0.08", "0.12"),
    "4713-0/05": _regra("I", False, "0.08", "0.12"),
    "1091-1/01": _regra("II", False, "0.08", "0.12"),
    "1091-1/02": _regra("II", False, "0.08", "0.12"),
    "1092-9/00": _regra("II", False, "0.08", "0.12"),
    "1093-7/01": _regra("II", False, "0.08", "0.12"),
    "1099-6/99": _regra("II", False, "0.08", "0.12"),
    "1411-8/01": _regra("II", False, "0.08", "0.12"),
    "1411-8/02": _regra("II", False, "0.08", "0.12"),
    "1412-6/01": _regra("II", False, "0.08", "0.12"),
    "1412-6/02": _regra("II", False, "0.08", "0.12"),
    "1412-6/03": _regra("II", False, "0.08", "0.12"),
    "2539-0/01": _regra("II", False, "0.08", "0.12"),
    "2511-0/00": _regra("II", False, "0.08", "0.12"),
    "2512-8/00": _regra("II", False, "0.08", "0.12"),
    "2542-0/00": _regra("II", False, "0.08", "0.12"),
    "2543-8/00": _regra("II", False, "0.08", "0.12"),
    "2599-3/99": _regra("II", False, "0.08", "0.12"),
    "1610-2/01": _regra("II", False, "0.08", "0.12"),
    "1610-2/02": _regra("II", False, "0.08", "0.12"),
    "1621-8/00": _regra("II", False, "0.08", "0.12"),
    "1622-6/01": _regra("II", False, "0.08", "0.12"),
    "1622-6/02": _regra("II", False, "0.08", "0.12"),
    "1629-3/01": _regra("II", False, "0.08", "0.12"),
    "1629-3/02": _regra("II", False, "0.08", "0.12"),
    "3101-2/00": _regra("II", False, "0.08", "0.12"),
    "3102-1/00": _regra("II", False, "0.08", "0.12"),
    "3103-9/00": _regra("II", False, "0.08", "0.12"),
    "3104-7/00": _regra("II", False, "0.08", "0.12"),
    "1811-3/01": _regra("II", False, "0.08", "0.12"),
    "1812-1/00": _regra("II", False, "0.08", "0.12"),
    "1813-0/01": _regra("II", False, "0.08", "0.12"),
    "2330-3/01": _regra("II", False, "0.08", "0.12"),
    "2330-3/02": _regra("II", False, "0.08", "0.12"),
    "2330-3/03": _regra("II", False, "0.08", "0.12"),
    "2330-3/04": _regra("II", False, "0.08", "0.12"),
    "2330-3/05": _regra("II", False, "0.08", "0.12"),
    "2330-3/99": _regra("II", False, "0.08", "0.12"),
    "4520-0/01": _regra("III", False, "0.32", "0.32", obs="Oficina mecânica"),
    "4520-0/02": _regra("III", False, "0.32", "0.32"),
    "4520-0/03": _regra("III", False, "0.32", "0.32"),
    "4520-0/04": _regra("III", False, "0.32", "0.32"),
    "4520-0/05": _regra("III", False, "0.32", "0.32"),
    "4520-0/06": _regra("III", False, "0.32", "0.32"),
    "4520-0/07": _regra("III", False, "0.32", "0.32"),
    "4520-0/08": _regra("III", False, "0.32", "0.32"),
    "4321-5/00": _regra("III", False, "0.32", "0.32"),
    "4322-3/01": _regra("III", False, "0.32", "0.32"),
    "4322-3/02": _regra("III", False, "0.32", "0.32"),
    "4322-3/03": _regra("III", False, "0.32", "0.32"),
    "4329-1/01": _regra("III", False, "0.32", "0.32"),
    "4329-1/02": _regra("III", False, "0.32", "0.32"),
    "4329-1/03": _regra("III", False, "0.32", "0.32"),
    "4329-1/04": _regra("III", False, "0.32", "0.32"),
    "4329-1/05": _regra("III", False, "0.32", "0.32"),
    "4329-1/99": _regra("III", False, "0.32", "0.32"),
    "9511-8/00": _regra("III", False, "0.32", "0.32"),
    "9512-6/00": _regra("III", False, "0.32", "0.32"),
    "9521-5/00": _regra("III", False, "0.32", "0.32"),
    "9529-1/01": _regra("III", False, "0.32", "0.32"),
    "9529-1/02": _regra("III", False, "0.32", "0.32"),
    "9529-1/03": _regra("III", False, "0.32", "0.32"),
    "9529-1/04": _regra("III", False, "0.32", "0.32"),
    "9529-1/05": _regra("III", False, "0.32", "0.32"),
    "9529-1/99": _regra("III", False, "0.32", "0.32"),
    "6920-6/01": _regra("III", False, "0.32", "0.32"),
    "8511-2/00": _regra("III", False, "0.32", "0.32"),
    "8512-1/00": _regra("III", False, "0.32", "0.32"),
    "8513-9/00": _regra("III", False, "0.32", "0.32"),
    "8520-1/00": _regra("III", False, "0.32", "0.32"),
    "8531-7/00": _regra("III", False, "0.32", "0.32"),
    "8532-5/00": _regra("III", False, "0.32", "0.32"),
    "8533-3/00": _regra("III", False, "0.32", "0.32"),
    "8541-4/00": _regra("III", False, "0.32", "0.32"),
    "8542-2/00": _regra("III", False, "0.32", "0.32"),
    "8550-3/01": _regra("III", False, "0.32", "0.32"),
    "8550-3/02": _regra("III", False, "0.32", "0.32"),
    "8591-1/00": _regra("III", False, "0.32", "0.32"),
    "8592-9/01": _regra("III", False, "0.32", "0.32"),
    "8592-9/02": _regra("III", False, "0.32", "0.32"),
    "8592-9/03": _regra("III", False, "0.32", "0.32"),
    "8592-9/99": _regra("III", False, "0.32", "0.32"),
    "8593-7/00": _regra("III", False, "0.32", "0.32"),
    "8599-6/01": _regra("III", False, "0.32", "0.32"),
    "8599-6/02": _regra("III", False, "0.32", "0.32"),
    "8599-6/03": _regra("III", False, "0.32", "0.32"),
    "8599-6/04": _regra("III", False, "0.32", "0.32"),
    "8599-6/05": _regra("III", False, "0.32", "0.32"),
    "8599-6/99": _regra("III", False, "0.32", "0.32"),
    "4930-2/01": _regra("III", False, "0.08", "0.12", obs="Transporte rodoviário de cargas: presunção IRPJ 8% (Lei 9.249/95)"),
    "4930-2/02": _regra("III", False, "0.08", "0.12"),
    "4930-2/03": _regra("III", False, "0.08", "0.12"),
    "4930-2/04": _regra("III", False, "0.08", "0.12"),
    "4921-3/01": _regra("III", False, "0.16", "0.12", obs="Transporte municipal de passageiros: presunção IRPJ 16%"),
    "4921-3/02": _regra("III", False, "0.16", "0.12"),
    "4922-1/01": _regra("III", False, "0.16", "0.12"),
    "4922-1/02": _regra("III", False, "0.16", "0.12"),
    "4922-1/03": _regra("III", False, "0.16", "0.12"),
    "4923-0/01": _regra("III", False, "0.16", "0.12"),
    "4923-0/02": _regra("III", False, "0.16", "0.12"),
    "4924-8/00": _regra("III", False, "0.16", "0.12"),
    "4929-9/01": _regra("III", False, "0.16", "0.12"),
    "4929-9/02": _regra("III", False, "0.16", "0.12"),
    "4929-9/03": _regra("III", False, "0.16", "0.12"),
    "4929-9/04": _regra("III", False, "0.16", "0.12"),
    "4929-9/99": _regra("III", False, "0.16", "0.12"),
    "5510-8/01": _regra("III", False, "0.32", "0.32"),
    "5510-8/02": _regra("III", False, "0.32", "0.32"),
    "5590-6/01": _regra("III", False, "0.32", "0.32"),
    "5590-6/02": _regra("III", False, "0.32", "0.32"),
    "5590-6/03": _regra("III", False, "0.32", "0.32"),
    "5611-2/01": _regra("III", False, "0.32", "0.32"),
    "5611-2/02": _regra("III", False, "0.32", "0.32"),
    "5611-2/03": _regra("III", False, "0.32", "0.32"),
    "5612-1/00": _regra("III", False, "0.32", "0.32"),
    "7911-2/00": _regra("III", False, "0.32", "0.32"),
    "7912-1/00": _regra("III", False, "0.32", "0.32"),
    "9311-5/00": _regra("III", False, "0.32", "0.32"),
    "9312-3/00": _regra("III", False, "0.32", "0.32"),
    "9313-1/00": _regra("III", False, "0.32", "0.32"),
    "9319-1/01": _regra("III", False, "0.32", "0.32"),
    "9319-1/99": _regra("III", False, "0.32", "0.32"),
    "9601-7/01": _regra("III", False, "0.32", "0.32"),
    "9601-7/02": _regra("III", False, "0.32", "0.32"),
    "9602-5/01": _regra("III", False, "0.32", "0.32"),
    "9602-5/02": _regra("III", False, "0.32", "0.32"),
    "9603-3/01": _regra("III", False, "0.32", "0.32"),
    "9603-3/02": _regra("III", False, "0.32", "0.32"),
    "9603-3/03": _regra("III", False, "0.32", "0.32"),
    "9603-3/04": _regra("III", False, "0.32", "0.32"),
    "9603-3/05": _regra("III", False, "0.32", "0.32"),
    "9609-2/02": _regra("III", False, "0.32", "0.32"),
    "9609-2/04": _regra("III", False, "0.32", "0.32"),
    "9609-2/05": _regra("III", False, "0.32", "0.32"),
    "9609-2/06": _regra("III", False, "0.32", "0.32"),
    "9609-2/07": _regra("III", False, "0.32", "0.32"),
    "9609-2/08": _regra("III", False, "0.32", "0.32"),
    "9609-2/99": _regra("III", False, "0.32", "0.32"),
    "6810-2/01": _regra("III", False, "0.08", "0.12", obs="Atividade imobiliária (compra/venda): presunção IRPJ 8%"),
    "6810-2/02": _regra("III", False, "0.32", "0.32", obs="Aluguel de imóveis próprios: presunção 32%"),
    "6810-2/03": _regra("III", False, "0.32", "0.32"),
    "7711-0/00": _regra("III", False, "0.32", "0.32", obs="Locação de bens móveis: presunção 32%"),
    "7719-5/01": _regra("III", False, "0.32", "0.32"),
    "7719-5/02": _regra("III", False, "0.32", "0.32"),
    "7719-5/99": _regra("III", False, "0.32", "0.32"),
    "5310-5/01": _regra("III", False, "0.32", "0.32"),
    "5310-5/02": _regra("III", False, "0.32", "0.32"),
    "5320-2/01": _regra("III", False, "0.32", "0.32"),
    "5320-2/02": _regra("III", False, "0.32", "0.32"),
    "6622-3/00": _regra("III", False, "0.32", "0.32"),
    "6201-5/01": _regra("V", True, "0.32", "0.32"),
    "6201-5/02": _regra("V", True, "0.32", "0.32"),
    "6202-3/00": _regra("V", True, "0.32", "0.32"),
    "6203-1/00": _regra("V", True, "0.32", "0.32"),
    "6204-0/00": _regra("V", True, "0.32", "0.32"),
    "6209-1/00": _regra("V", True, "0.32", "0.32"),
    "6311-9/00": _regra("V", True, "0.32", "0.32"),
    "6319-4/00": _regra("V", True, "0.32", "0.32"),
    "7111-1/00": _regra("V", True, "0.32", "0.32"),
    "7112-0/00": _regra("V", True, "0.32", "0.32"),
    "7119-7/01": _regra("V", True, "0.32", "0.32"),
    "7119-7/02": _regra("V", True, "0.32", "0.32"),
    "7119-7/03": _regra("V", True, "0.32", "0.32"),
    "7119-7/04": _regra("V", True, "0.32", "0.32"),
    "7119-7/99": _regra("V", True, "0.32", "0.32"),
    "7120-1/00": _regra("V", True, "0.32", "0.32", obs="Testes, análises técnicas, cartografia, georeferenciamento"),
    "7490-1/04": _regra("V", True, "0.32", "0.32", obs="Atividades de gerenciamento ambiental"),
    "7020-4/00": _regra("V", True, "0.32", "0.32"),
    "7210-0/00": _regra("V", True, "0.32", "0.32"),
    "7220-7/00": _regra("V", True, "0.32", "0.32"),
    "7311-4/00": _regra("V", True, "0.32", "0.32"),
    "7312-2/00": _regra("V", True, "0.32", "0.32"),
    "7319-0/01": _regra("V", True, "0.32", "0.32"),
    "7319-0/02": _regra("V", True, "0.32", "0.32"),
    "7319-0/03": _regra("V", True, "0.32", "0.32"),
    "7319-0/04": _regra("V", True, "0.32", "0.32"),
    "7319-0/99": _regra("V", True, "0.32", "0.32"),
    "7320-3/00": _regra("V", True, "0.32", "0.32"),
    "7410-2/01": _regra("V", True, "0.32", "0.32"),
    "7410-2/02": _regra("V", True, "0.32", "0.32"),
    "7410-2/03": _regra("V", True, "0.32", "0.32"),
    "7410-2/99": _regra("V", True, "0.32", "0.32"),
    "7420-0/01": _regra("V", True, "0.32", "0.32"),
    "7420-0/02": _regra("V", True, "0.32", "0.32"),
    "7420-0/03": _regra("V", True, "0.32", "0.32"),
    "7420-0/04": _regra("V", True, "0.32", "0.32"),
    "7490-1/01": _regra("V", True, "0.32", "0.32"),
    "7490-1/02": _regra("V", True, "0.32", "0.32"),
    "7490-1/03": _regra("V", True, "0.32", "0.32"),
    "7490-1/05": _regra("V", True, "0.32", "0.32"),
    "7490-1/99": _regra("V", True, "0.32", "0.32"),
    "7500-1/00": _regra("V", True, "0.32", "0.32"),
    "6920-6/02": _regra("V", True, "0.32", "0.32", obs="Auditoria e consultoria contábil: Fator R"),
    "6910-8/00": _regra("V", True, "0.32", "0.32"),
    "6391-7/00": _regra("V", True, "0.32", "0.32"),
    "6399-2/00": _regra("V", True, "0.32", "0.32"),
    "8610-1/01": _regra("V", True, "0.08", "0.12", obs="Hospital geral: presunção hospitalar 8%"),
    "8610-1/02": _regra("V", True, "0.08", "0.12"),
    "8621-6/01": _regra("V", True, "0.08", "0.12"),
    "8621-6/02": _regra("V", True, "0.08", "0.12"),
    "8622-4/00": _regra("V", True, "0.08", "0.12"),
    "8630-5/01": _regra("V", True, "0.08", "0.12"),
    "8630-5/02": _regra("V", True, "0.08", "0.12"),
    "8630-5/03": _regra("V", True, "0.08", "0.12", obs="Consulta médica ambulatorial"),
    "8630-5/04": _regra("V", True, "0.08", "0.12", obs="Odontologia"),
    "8630-5/06": _regra("V", True, "0.08", "0.12", obs="Vacinação e imunização"),
    "8630-5/07": _regra("V", True, "0.08", "0.12"),
    "8630-5/99": _regra("V", True, "0.08", "0.12"),
    "8640-2/01": _regra("V", True, "0.08", "0.12"),
    "8640-2/02": _regra("V", True, "0.08", "0.12"),
    "8640-2/03": _regra("V", True, "0.08", "0.12"),
    "8640-2/04": _regra("V", True, "0.08", "0.12"),
    "8640-2/05": _regra("V", True, "0.08", "0.12"),
    "8640-2/06": _regra("V", True, "0.08", "0.12"),
    "8640-2/07": _regra("V", True, "0.08", "0.12"),
    "8640-2/08": _regra("V", True, "0.08", "0.12"),
    "8640-2/09": _regra("V", True, "0.08", "0.12"),
    "8640-2/10": _regra("V", True, "0.08", "0.12"),
    "8640-2/11": _regra("V", True, "0.08", "0.12"),
    "8640-2/12": _regra("V", True, "0.08", "0.12"),
    "8640-2/13": _regra("V", True, "0.08", "0.12"),
    "8640-2/14": _regra("V", True, "0.08", "0.12"),
    "8640-2/99": _regra("V", True, "0.08", "0.12"),
    "8650-0/01": _regra("V", True, "0.08", "0.12", obs="Psicologia"),
    "8650-0/02": _regra("V", True, "0.08", "0.12", obs="Fonoaudiologia"),
    "8650-0/03": _regra("V", True, "0.08", "0.12", obs="Terapia ocupacional"),
    "8650-0/04": _regra("V", True, "0.08", "0.12", obs="Fisioterapia"),
    "8650-0/05": _regra("V", True, "0.08", "0.12", obs="Quiropraxia"),
    "8650-0/06": _regra("V", True, "0.08", "0.12", obs="Nutrição"),
    "8650-0/07": _regra("V", True, "0.08", "0.12", obs="Optometria"),
    "8650-0/99": _regra("V", True, "0.08", "0.12"),
    "8660-7/00": _regra("V", True, "0.08", "0.12"),
    "8690-9/01": _regra("V", True, "0.08", "0.12"),
    "8690-9/02": _regra("V", True, "0.08", "0.12"),
    "8690-9/03": _regra("V", True, "0.08", "0.12"),
    "8690-9/99": _regra("V", True, "0.08", "0.12"),
    "9001-9/01": _regra("V", True, "0.32", "0.32"),
    "9001-9/02": _regra("V", True, "0.32", "0.32"),
    "9001-9/03": _regra("V", True, "0.32", "0.32"),
    "9001-9/99": _regra("V", True, "0.32", "0.32"),
    "9002-7/01": _regra("V", True, "0.32", "0.32"),
    "9002-7/02": _regra("V", True, "0.32", "0.32"),
    "4110-7/00": _regra("IV", False, "0.08", "0.12", obs="Incorporação imobiliária: presunção 8%"),
    "4120-4/00": _regra("IV", False, "0.32", "0.32", obs="Construção de edifícios: Anexo IV, CPP fora do DAS"),
    "4211-1/01": _regra("IV", False, "0.32", "0.32"),
    "4211-1/02": _regra("IV", False, "0.32", "0.32"),
    "4212-0/00": _regra("IV", False, "0.32", "0.32"),
    "4213-8/00": _regra("IV", False, "0.32", "0.32"),
    "4221-9/01": _regra("IV", False, "0.32", "0.32"),
    "4221-9/02": _regra("IV", False, "0.32", "0.32"),
    "4221-9/03": _regra("IV", False, "0.32", "0.32"),
    "4221-9/04": _regra("IV", False, "0.32", "0.32"),
    "4221-9/05": _regra("IV", False, "0.32", "0.32"),
    "4222-7/01": _regra("IV", False, "0.32", "0.32"),
    "4223-5/00": _regra("IV", False, "0.32", "0.32"),
    "4291-0/00": _regra("IV", False, "0.32", "0.32"),
    "4292-8/01": _regra("IV", False, "0.32", "0.32"),
    "4292-8/02": _regra("IV", False, "0.32", "0.32"),
    "4299-5/01": _regra("IV", False, "0.32", "0.32"),
    "4299-5/99": _regra("IV", False, "0.32", "0.32"),
    "4311-8/01": _regra("IV", False, "0.32", "0.32"),
    "4311-8/02": _regra("IV", False, "0.32", "0.32"),
    "4312-6/00": _regra("IV", False, "0.32", "0.32"),
    "4313-4/00": _regra("IV", False, "0.32", "0.32"),
    "4319-3/00": _regra("IV", False, "0.32", "0.32"),
    "4330-4/01": _regra("IV", False, "0.32", "0.32"),
    "4330-4/02": _regra("IV", False, "0.32", "0.32"),
    "4330-4/03": _regra("IV", False, "0.32", "0.32"),
    "4330-4/04": _regra("IV", False, "0.32", "0.32"),
    "4330-4/05": _regra("IV", False, "0.32", "0.32"),
    "4330-4/99": _regra("IV", False, "0.32", "0.32"),
    "4391-6/00": _regra("IV", False, "0.32", "0.32"),
    "4399-1/01": _regra("IV", False, "0.32", "0.32"),
    "4399-1/02": _regra("IV", False, "0.32", "0.32"),
    "4399-1/03": _regra("IV", False, "0.32", "0.32"),
    "4399-1/04": _regra("IV", False, "0.32", "0.32"),
    "4399-1/05": _regra("IV", False, "0.32", "0.32"),
    "4399-1/99": _regra("IV", False, "0.32", "0.32"),
    "6911-7/01": _regra("IV", False, "0.32", "0.32", obs="Advocacia: Anexo IV, CPP fora do DAS"),
    "6911-7/02": _regra("IV", False, "0.32", "0.32"),
    "6911-7/03": _regra("IV", False, "0.32", "0.32"),
    "8011-1/01": _regra("IV", False, "0.32", "0.32", obs="Vigilância e segurança: Anexo IV"),
    "8012-9/00": _regra("IV", False, "0.32", "0.32"),
    "8020-0/01": _regra("IV", False, "0.32", "0.32"),
    "8020-0/02": _regra("IV", False, "0.32", "0.32"),
    "8111-7/00": _regra("IV", False, "0.32", "0.32"),
    "8112-5/00": _regra("IV", False, "0.32", "0.32"),
    "8121-4/00": _regra("IV", False, "0.32", "0.32", obs="Limpeza: Anexo IV, CPP fora do DAS"),
    "8122-2/00": _regra("IV", False, "0.32", "0.32"),
    "8129-0/00": _regra("IV", False, "0.32", "0.32"),
    "6421-2/00": _vedado("0.32", "0.32", "Bancos comerciais: atividade financeira vedada (art. 3° §4° LC 123/2006)"),
    "6422-1/00": _vedado("0.32", "0.32", "Bancos múltiplos: atividade financeira vedada"),
    "6423-9/00": _vedado("0.32", "0.32", "Caixa econômica: vedado"),
    "6424-7/01": _vedado("0.32", "0.32", "Cooperativa de crédito: vedada ao Simples"),
    "6431-0/00": _vedado("0.32", "0.32", "Bancos múltiplos sem carteira comercial"),
    "6432-8/00": _vedado("0.32", "0.32", "Bancos de investimento"),
    "6433-6/00": _vedado("0.32", "0.32", "Bancos de desenvolvimento"),
    "6434-4/00": _vedado("0.32", "0.32", "Factoring (fomento mercantil)"),
    "6435-2/01": _vedado("0.32", "0.32", "Sociedade de crédito imobiliário"),
    "6435-2/02": _vedado("0.32", "0.32", "Associação de poupança e empréstimo"),
    "6435-2/03": _vedado("0.32", "0.32", "Companhia hipotecária"),
    "6436-1/00": _vedado("0.32", "0.32", "Sociedade de crédito, financiamento e investimento (financeira)"),
    "6437-9/00": _vedado("0.32", "0.32", "Sociedade de crédito ao microempreendedor"),
    "6438-7/01": _vedado("0.32", "0.32", "Banco de câmbio"),
    "6440-9/00": _vedado("0.32", "0.32", "Arrendamento mercantil"),
    "6450-6/00": _vedado("0.32", "0.32", "Sociedade de capitalização"),
    "6611-8/01": _vedado("0.32", "0.32", "Bolsas de valores"),
    "6611-8/02": _vedado("0.32", "0.32", "Bolsas de mercadorias e futuros"),
    "6612-6/01": _vedado("0.32", "0.32", "Corretora de títulos e valores mobiliários"),
    "6612-6/02": _vedado("0.32", "0.32", "Distribuidora de títulos e valores mobiliários"),
    "6612-6/03": _vedado("0.32", "0.32", "Corretora de câmbio"),
    "6612-6/04": _vedado("0.32", "0.32", "Corretora de contratos de mercadorias"),
    "6612-6/05": _vedado("0.32", "0.32", "Agente de investimentos"),
    "6613-4/00": _vedado("0.32", "0.32", "Administração de cartões de crédito"),
    "6511-1/01": _vedado("0.32", "0.32", "Seguros de vida"),
    "6511-1/02": _vedado("0.32", "0.32", "Seguros não vida"),
    "6512-0/00": _vedado("0.32", "0.32", "Seguros saúde"),
    "6520-1/00": _vedado("0.32", "0.32", "Previdência complementar"),
    "6530-8/00": _vedado("0.32", "0.32", "Resseguros"),
    "1210-7/00": _vedado("0.08", "0.12", "Processamento industrial do fumo"),
    "1220-4/01": _vedado("0.08", "0.12", "Fabricação de cigarros"),
    "1220-4/02": _vedado("0.08", "0.12", "Fabricação de cigarrilhas e charutos"),
    "1220-4/03": _vedado("0.08", "0.12", "Fabricação de fumo de mascar e rapé"),
    "1220-4/99": _vedado("0.08", "0.12", "Fabricação de outros produtos de fumo"),
    "2550-1/01": _vedado("0.08", "0.12", "Fabricação de armas de fogo (exceto de uso militar)"),
    "2550-1/02": _vedado("0.08", "0.12", "Fabricação de munição"),
    "1111-9/01": _vedado("0.08", "0.12", "Fabricação de aguardente de cana"),
    "1111-9/02": _vedado("0.08", "0.12", "Fabricação de outras aguardentes e bebidas destiladas"),
    "1112-7/00": _vedado("0.08", "0.12", "Fabricação de vinho"),
    "1113-5/01": _vedado("0.08", "0.12", "Fabricação de malte"),
    "1113-5/02": _vedado("0.08", "0.12", "Fabricação de cerveja e chope"),
}

# === Prefix rules (division / group / class) ===

PREFIXOS: tuple[PrefixRule, ...] = tuple(
    _prefixo(prefixo, descricao, regra)
    for prefixo, descricao, regra in (
        ("01", "Agricultura e pecuária", _regra("II", False, "0.08", "0.12")),
        ("02", "Produção florestal", _regra("II", False, "0.08", "0.12")),
        ("03", "Pesca e aquicultura", _regra("II", False, "0.08", "0.12")),
        ("05", "Extração de carvão mineral", _regra("II", False, "0.08", "0.12")),
        ("06", "Extração de petróleo e gás", _regra("II", False, "0.08", "0.12")),
        ("07", "Extração de minerais metálicos", _regra("II", False, "0.08", "0.12")),
        ("08", "Extração de minerais não metálicos", _regra("II", False, "0.08", "0.12")),
        ("09", "Serviços de apoio à extração mineral", _regra("III", False, "0.32", "0.32")),
        ("10", "Fabricação de alimentos", _regra("II", False, "0.08", "0.12")),
        ("1121", "Fabricação de águas e refrigerantes", _regra("II", False, "0.08", "0.12")),
        ("1122", "Fabricação de chá e mate", _regra("II", False, "0.08", "0.12")),
        ("13", "Fabricação têxtil", _regra("II", False, "0.08", "0.12")),
        ("14", "Confecção de artigos do vestuário", _regra("II", False, "0.08", "0.12")),
        ("15", "Couro, artigos para viagem e calçados", _regra("II", False, "0.08", "0.12")),
        ("16", "Madeira", _regra("II", False, "0.08", "0.12")),
        ("17", "Celulose e papel", _regra("II", False, "0.08", "0.12")),
        ("18", "Impressão e reprodução", _regra("II", False, "0.08", "0.12")),
        ("19", "Derivados de petróleo e biocombustíveis", _regra("II", False, "0.08", "0.12")),
        ("20", "Químicos", _regra("II", False, "0.08", "0.12")),
        ("21", "Farmacêuticos", _regra("II", False, "0.08", "0.12")),
        ("22", "Borracha e plástico", _regra("II", False, "0.08", "0.12")),
        ("23", "Minerais não metálicos", _regra("II", False, "0.08", "0.12")),
        ("24", "Metalurgia", _regra("II", False, "0.08", "0.12")),
        ("25", "Produtos de metal", _regra("II", False, "0.08", "0.12")),
        ("26", "Informática e eletrônicos", _regra("II", False, "0.08", "0.12")),
        ("27", "Máquinas e equipamentos elétricos", _regra("II", False, "0.08", "0.12")),
        ("28", "Máquinas e equipamentos", _regra("II", False, "0.08", "0.12")),
        ("29", "Veículos automotores", _regra("II", False, "0.08", "0.12")),
        ("30", "Outros equipamentos de transporte", _regra("II", False, "0.08", "0.12")),
        ("31", "Móveis", _regra("II", False, "0.08", "0.12")),
        ("32", "Fabricação de produtos diversos", _regra("II", False, "0.08", "0.12")),
        ("33", "Manutenção e reparação de máquinas", _regra("III", False, "0.32", "0.32")),
        ("35", "Eletricidade e gás", _regra("III", False, "0.32", "0.32")),
        ("36", "Captação e distribuição de água", _regra("III", False, "0.32", "0.32")),
        ("37", "Esgoto e gestão de resíduos", _regra("III", False, "0.32", "0.32")),
        ("38", "Coleta e reciclagem", _regra("III", False, "0.32", "0.32")),
        ("39", "Descontaminação e recuperação ambiental", _regra("III", False, "0.32", "0.32")),
        ("41", "Construção de edifícios", _regra("IV", False, "0.32", "0.32")),
        ("42", "Obras de infraestrutura", _regra("IV", False, "0.32", "0.32")),
        ("431", "Demolição e preparação do terreno", _regra("IV", False, "0.32", "0.32")),
        ("432", "Instalações (elétrica, hidráulica): Anexo III", _regra("III", False, "0.32", "0.32")),
        ("433", "Obras de acabamento", _regra("IV", False, "0.32", "0.32")),
        ("439", "Outros serviços especializados para construção", _regra("IV", False, "0.32", "0.32")),
        ("45", "Comércio e reparação de veículos", _regra("I", False, "0.08", "0.12")),
        ("46", "Comércio atacadista", _regra("I", False, "0.08", "0.12")),
        ("47", "Comércio varejista", _regra("I", False, "0.08", "0.12")),
        ("491", "Transporte ferroviário", _regra("III", False, "0.16", "0.12")),
        ("4921", "Transporte rodoviário de passageiros (municipal)", _regra("III", False, "0.16", "0.12")),
        ("4922", "Transporte rodoviário de passageiros (intermunicipal)", _regra("III", False, "0.16", "0.12")),
        ("4923", "Transporte de passageiros (táxi/app)", _regra("III", False, "0.16", "0.12")),
        ("4924", "Transporte escolar", _regra("III", False, "0.16", "0.12")),
        ("4929", "Outros transportes de passageiros", _regra("III", False, "0.16", "0.12")),
        ("4930", "Transporte rodoviário de cargas (presunção 8%)", _regra("III", False, "0.08", "0.12")),
        ("50", "Transporte aquaviário", _regra("III", False, "0.16", "0.12")),
        ("51", "Transporte aéreo", _regra("III", False, "0.16", "0.12")),
        ("52", "Armazenamento e atividades auxiliares de transporte", _regra("III", False, "0.32", "0.32")),
        ("53", "Correio e entregas", _regra("III", False, "0.32", "0.32")),
        ("55", "Alojamento (hotéis, pousadas)", _regra("III", False, "0.32", "0.32")),
        ("56", "Alimentação (restaurantes, bares)", _regra("III", False, "0.32", "0.32")),
        ("58", "Edição e edição integrada à impressão", _regra("III", False, "0.32", "0.32")),
        ("59", "Cinema, som e vídeo", _regra("V", True, "0.32", "0.32")),
        ("60", "Rádio e televisão", _regra("III", False, "0.32", "0.32")),
        ("61", "Telecomunicações", _regra("III", False, "0.32", "0.32")),
        ("62", "TI (software, consultoria)", _regra("V", True, "0.32", "0.32")),
        ("63", "Serviços de informação", _regra("V", True, "0.32", "0.32")),
        ("64", "Financeiras", _vedado("0.32", "0.32", "Atividade financeira: vedada ao Simples")),
        ("65", "Seguros", _vedado("0.32", "0.32", "Seguros e previdência: vedados ao Simples")),
        ("6621", "Avaliação de riscos e perdas", _regra("III", False, "0.32", "0.32")),
        ("6622", "Corretagem de seguros (permitido)", _regra("III", False, "0.32", "0.32")),
        ("6629", "Atividades auxiliares de seguros", _regra("III", False, "0.32", "0.32")),
        ("68", "Atividades imobiliárias", _regra("III", False, "0.32", "0.32")),
        ("6911", "Advocacia: Anexo IV", _regra("IV", False, "0.32", "0.32")),
        ("6920", "Contabilidade: Anexo III", _regra("III", False, "0.32", "0.32")),
        ("70", "Consultoria em gestão", _regra("V", True, "0.32", "0.32")),
        ("71", "Engenharia e arquitetura", _regra("V", True, "0.32", "0.32")),
        ("72", "Pesquisa e desenvolvimento", _regra("V", True, "0.32", "0.32")),
        ("73", "Publicidade e pesquisa de mercado", _regra("V", True, "0.32", "0.32")),
        ("74", "Atividades profissionais diversas", _regra("V", True, "0.32", "0.32")),
        ("75", "Veterinária", _regra("V", True, "0.32", "0.32")),
        ("77", "Locação de bens", _regra("III", False, "0.32", "0.32")),
        ("78", "Agências de emprego", _regra("III", False, "0.32", "0.32")),
        ("79", "Agências de viagem / turismo", _regra("III", False, "0.32", "0.32")),
        ("80", "Vigilância e segurança: Anexo IV", _regra("IV", False, "0.32", "0.32")),
        ("811", "Administração de condomínios", _regra("IV", False, "0.32", "0.32")),
        ("812", "Limpeza: Anexo IV", _regra("IV", False, "0.32", "0.32")),
        ("82", "Serviços administrativos e complementares", _regra("III", False, "0.32", "0.32")),
        ("84", "Administração pública", _regra("III", False, "0.32", "0.32")),
        ("85", "Educação", _regra("III", False, "0.32", "0.32")),
        ("86", "Saúde (presunção hospitalar 8%)", _regra("V", True, "0.08", "0.12")),
        ("87", "Residencial para cuidados", _regra("III", False, "0.32", "0.32")),
        ("88", "Assistência social", _regra("III", False, "0.32", "0.32")),
        ("90", "Atividades artísticas e culturais", _regra("V", True, "0.32", "0.32")),
        ("91", "Bibliotecas, museus e patrimônio", _regra("III", False, "0.32", "0.32")),
        ("92", "Jogos de azar e apostas", _regra("III", False, "0.32", "0.32")),
        ("93", "Atividades esportivas e de recreação", _regra("III", False, "0.32", "0.32")),
        ("94", "Organizações associativas", _regra("III", False, "0.32", "0.32")),
        ("95", "Reparação de equipamentos", _regra("III", False, "0.32", "0.32")),
        ("96", "Serviços pessoais", _regra("III", False, "0.32", "0.32")),
        ("97", "Serviços domésticos", _regra("III", False, "0.32", "0.32")),
        ("99", "Organismos internacionais", _regra("III", False, "0.32", "0.32")),
    )
)

# === Category fallback ===

CATEGORIAS: dict[CategoriaAtividade, RuleEntry] = {
    CategoriaAtividade.COMERCIO: _regra("I", False, "0.08", "0.12").model_copy(
        update={"servico": False, "descricao": "Comércio varejista e atacadista"}
    ),
    CategoriaAtividade.INDUSTRIA: _regra("II", False, "0.08", "0.12").model_copy(
        update={"descricao": "Indústria e transformação"}
    ),
    CategoriaAtividade.SERVICO: _regra("III", True, "0.32", "0.32").model_copy(
        update={"descricao": "Prestação de serviços em geral"}
    ),
}

# === Absolute default ===

PADRAO = _regra("III", False, "0.32", "0.32").model_copy(
    update={"descricao": "Regra padrão (serviços)"}
)

# === Single-phase PIS/COFINS (monofásicos) ===

MONOFASICOS: dict[str, str] = {
    "4731-8/00": "Combustíveis",
    "4732-6/00": "Lubrificantes",
    "4771-7/01": "Farmácia (medicamentos)",
    "4772-5/00": "Cosméticos e perfumaria",
    "4530-7/03": "Autopeças",
    "4530-7/05": "Autopeças (motocicletas)",
    "4511-1/01": "Veículos (automóveis)",
    "4511-1/02": "Veículos (caminhonetas)",
    "4512-9/01": "Veículos (caminhões)",
    "4541-2/01": "Motocicletas",
    "4784-9/00": "GLP e gás",
    "4723-7/00": "Bebidas (revenda)",
}


@lru_cache(maxsize=1)
def default_rule_tables() -> RuleTables:
    """Build the shipped rule tables (validated once, then reused)."""
    return RuleTables(
        versao=VERSAO_TABELAS,
        exatas=EXATAS,
        prefixos=PREFIXOS,
        categorias=CATEGORIAS,
        padrao=PADRAO,
        monofasicos=MONOFASICOS,
    )
