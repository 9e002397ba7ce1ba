"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from regime_analyzer.core.analyzers import RuleResolver
from regime_analyzer.core.config import EngineConfig
from regime_analyzer.core.models import DadosAnuais, PeriodoFiscal, TaxRuleSet
from regime_analyzer.core.rules import default_rule_tables


@pytest.fixture
def resolver() -> RuleResolver:
    """Resolver over the shipped rule tables."""
    return RuleResolver(default_rule_tables())


@pytest.fixture
def config() -> EngineConfig:
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def ruleset_ti(resolver: RuleResolver) -> TaxRuleSet:
    """Software development (Anexo V, factor R, 32% presumption)."""
    return resolver.resolve("6201-5/01")


@pytest.fixture
def ruleset_comercio(resolver: RuleResolver) -> TaxRuleSet:
    """Retail (Anexo I, 8%/12% presumption, no ISS)."""
    return resolver.resolve("4711-3/02")


@pytest.fixture
def ruleset_transporte(resolver: RuleResolver) -> TaxRuleSet:
    """Road freight transport (8%/12% presumption)."""
    return resolver.resolve("4930-2/01")


@pytest.fixture
def trimestre() -> PeriodoFiscal:
    """Quarter with R$ 300.000 revenue and no other data."""
    return PeriodoFiscal(receita_bruta=Decimal("300000"), meses=3)


@pytest.fixture
def dados_anuais() -> DadosAnuais:
    """Service company with R$ 1,2M revenue, payroll and expenses."""
    return DadosAnuais(
        receita_bruta=Decimal("1200000"),
        folha_pagamento=Decimal("240000"),
        despesas_operacionais=Decimal("360000"),
    )
