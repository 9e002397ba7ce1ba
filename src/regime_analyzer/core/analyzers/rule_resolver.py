"""CNAE rule resolver.

Resolution runs through four tiers and always returns a fully populated
ruleset:

1. Exact code match
2. Longest prefix match (division, group or class)
3. Category fallback (comércio, indústria, serviço)
4. Absolute default (Anexo III, 32% presumption)
"""

import logging
from collections import Counter
from functools import lru_cache
from typing import Optional, Union

from regime_analyzer.core.models.activity import (
    ActivityCode,
    apenas_digitos,
    formatar_cnae,
    normalizar_codigo,
    parse_categoria,
)
from regime_analyzer.core.models.enums import CategoriaAtividade, FonteRegra
from regime_analyzer.core.models.ruleset import TaxRuleSet
from regime_analyzer.core.rules.cnae_rules import NOTA_CATEGORIA, NOTA_PADRAO, RuleTables

logger = logging.getLogger(__name__)

CodigoEntrada = Union[str, ActivityCode, None]


class RuleResolver:
    """Resolves activity codes to tax rulesets.

    The resolver holds no state besides an optional bounded cache keyed by
    (digits, category); ``cache_size=0`` disables it without changing any
    result.
    """

    def __init__(self, tables: RuleTables, cache_size: int = 256):
        self.tables = tables
        self._prefixos = tables.prefixos_ordenados()
        self._resolver = lru_cache(maxsize=cache_size)(self._resolver_sem_cache)

    def resolve(self, code: CodigoEntrada, categoria: object = None) -> TaxRuleSet:
        """
        Resolve the tax ruleset of an activity code.

        Never raises: unknown or empty codes fall through to the category
        and default tiers, with an explanatory note.

        Args:
            code: CNAE code in any format ("4930-2/01", "4930201") or ActivityCode
            categoria: Optional category (enum or free-form label)

        Returns:
            TaxRuleSet with every field present
        """
        if isinstance(code, ActivityCode):
            digitos = code.digitos
            categoria = categoria if categoria is not None else code.categoria
        else:
            digitos = apenas_digitos(normalizar_codigo(code or ""))
        return self._resolver(digitos, parse_categoria(categoria))

    def _resolver_sem_cache(
        self, digitos: str, categoria: Optional[CategoriaAtividade]
    ) -> TaxRuleSet:
        codigo = formatar_cnae(digitos)

        if digitos:
            regra = self.tables.exatas.get(digitos)
            if regra is not None:
                logger.debug("CNAE %s resolvido por código exato", codigo)
                return TaxRuleSet.from_entry(regra, codigo, FonteRegra.EXATA)

            for prefixo in self._prefixos:
                if digitos.startswith(prefixo.prefixo):
                    logger.debug("CNAE %s resolvido pelo prefixo %s", codigo, prefixo.prefixo)
                    return TaxRuleSet.from_entry(prefixo.regra, codigo, FonteRegra.PREFIXO)

        if categoria is not None and categoria in self.tables.categorias:
            logger.info("CNAE %s não mapeado, usando categoria %s", codigo or "-", categoria.value)
            return TaxRuleSet.from_entry(
                self.tables.categorias[categoria],
                codigo,
                FonteRegra.CATEGORIA,
                observacao=NOTA_CATEGORIA,
            )

        logger.info("CNAE %s não mapeado, usando regra padrão", codigo or "-")
        return TaxRuleSet.from_entry(
            self.tables.padrao, codigo, FonteRegra.PADRAO, observacao=NOTA_PADRAO
        )

    def produto_monofasico(self, code: CodigoEntrada) -> Optional[str]:
        """Single-phase PIS/COFINS product sold under the code, if any."""
        digitos = code.digitos if isinstance(code, ActivityCode) else apenas_digitos(code or "")
        return self.tables.monofasicos.get(digitos)

    def is_monofasico(self, code: CodigoEntrada) -> bool:
        """True when the activity sells single-phase PIS/COFINS products."""
        return self.produto_monofasico(code) is not None

    def estatisticas(self) -> dict[str, object]:
        """
        Summarize the loaded tables.

        Returns:
            Dict with table version, tier sizes and exact codes per annex
        """
        por_anexo = Counter(regra.anexo.value for regra in self.tables.exatas.values())
        return {
            "versao": self.tables.versao,
            "codigos_exatos": len(self.tables.exatas),
            "prefixos": len(self.tables.prefixos),
            "categorias": len(self.tables.categorias),
            "monofasicos": len(self.tables.monofasicos),
            "vedados": sum(1 for r in self.tables.exatas.values() if r.vedado),
            "fator_r": sum(1 for r in self.tables.exatas.values() if r.fator_r),
            "por_anexo": dict(sorted(por_anexo.items())),
        }

    def cache_info(self):
        """Hit/miss counters of the resolution cache."""
        return self._resolver.cache_info()
