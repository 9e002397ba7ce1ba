"""Regime calculation result models."""

from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from regime_analyzer.core.models.enums import Anexo, Regime
from regime_analyzer.shared.money import ZERO, arredondar, dividir


class Detalhamento(BaseModel):
    """Breakdown of a regime total by tax kind."""

    model_config = ConfigDict(frozen=True)

    irpj: Decimal = Field(default=ZERO, description="Base income tax (after incentives)")
    adicional_irpj: Decimal = Field(default=ZERO, description="10% surtax")
    csll: Decimal = Field(default=ZERO, description="Social contribution on profit")
    pis: Decimal = Field(default=ZERO)
    cofins: Decimal = Field(default=ZERO)
    encargos_folha: Decimal = Field(default=ZERO, description="Employer payroll charges")
    iss: Decimal = Field(default=ZERO, description="Municipal service tax")
    das: Decimal = Field(default=ZERO, description="Simples Nacional unified payment")

    @computed_field
    @property
    def total(self) -> Decimal:
        """Sum of all tax kinds."""
        return (
            self.irpj
            + self.adicional_irpj
            + self.csll
            + self.pis
            + self.cofins
            + self.encargos_folha
            + self.iss
            + self.das
        )

    def __add__(self, other: "Detalhamento") -> "Detalhamento":
        return Detalhamento(
            **{campo: getattr(self, campo) + getattr(other, campo) for campo in _CAMPOS}
        )

    def arredondado(self) -> "Detalhamento":
        """Copy with every component rounded to cents."""
        return Detalhamento(**{campo: arredondar(getattr(self, campo)) for campo in _CAMPOS})


_CAMPOS = (
    "irpj",
    "adicional_irpj",
    "csll",
    "pis",
    "cofins",
    "encargos_folha",
    "iss",
    "das",
)


class ResultadoRegime(BaseModel):
    """Tax liability of one regime over one or more periods.

    ``inelegivel=True`` means the regime cannot be used at all; it is never
    reported as a zero-tax result.
    """

    model_config = ConfigDict(frozen=True)

    regime: Regime
    receita_bruta: Decimal = Field(default=ZERO)
    detalhamento: Detalhamento = Field(default_factory=Detalhamento)
    inelegivel: bool = Field(default=False)
    motivo_inelegibilidade: Optional[str] = Field(default=None)
    retencoes: Decimal = Field(default=ZERO, description="Taxes already withheld")
    avisos: tuple[str, ...] = Field(default=(), description="Disclaimers and warnings")
    anexo: Optional[Anexo] = Field(default=None, description="Schedule used (Simples only)")

    @computed_field
    @property
    def total(self) -> Decimal:
        """Total tax burden, rounded to cents."""
        return arredondar(self.detalhamento.total)

    @computed_field
    @property
    def aliquota_efetiva(self) -> Decimal:
        """Total burden over gross revenue (0 when revenue is 0)."""
        return dividir(self.total, self.receita_bruta)

    @computed_field
    @property
    def a_recolher(self) -> Decimal:
        """Amount still payable after withholdings (never negative)."""
        return max(ZERO, self.total - arredondar(self.retencoes))

    @classmethod
    def inelegivel_para(
        cls, regime: Regime, motivo: str, receita_bruta: Decimal = ZERO
    ) -> "ResultadoRegime":
        """Explicit ineligibility marker."""
        return cls(
            regime=regime,
            receita_bruta=receita_bruta,
            inelegivel=True,
            motivo_inelegibilidade=motivo,
            avisos=(motivo,),
        )

    @classmethod
    def somar(cls, regime: Regime, resultados: Iterable["ResultadoRegime"]) -> "ResultadoRegime":
        """
        Aggregate per-period results into one result.

        If any period is ineligible the aggregate is ineligible.

        Args:
            regime: Regime of the aggregate
            resultados: Per-period results

        Returns:
            Aggregated result with per-kind totals rounded to cents
        """
        detalhamento = Detalhamento()
        receita = ZERO
        retencoes = ZERO
        avisos: list[str] = []
        anexo = None

        for resultado in resultados:
            if resultado.inelegivel:
                return cls.inelegivel_para(
                    regime, resultado.motivo_inelegibilidade or "", resultado.receita_bruta
                )
            detalhamento = detalhamento + resultado.detalhamento
            receita += resultado.receita_bruta
            retencoes += resultado.retencoes
            anexo = resultado.anexo or anexo
            for aviso in resultado.avisos:
                if aviso not in avisos:
                    avisos.append(aviso)

        return cls(
            regime=regime,
            receita_bruta=receita,
            detalhamento=detalhamento.arredondado(),
            retencoes=arredondar(retencoes),
            avisos=tuple(avisos),
            anexo=anexo,
        )


class AliquotaEfetiva(BaseModel):
    """Simples Nacional effective rate lookup result."""

    model_config = ConfigDict(frozen=True)

    aliquota: Decimal = Field(default=ZERO, description="Effective rate (fraction)")
    inelegivel: bool = Field(default=False)
    anexo_aplicado: Optional[Anexo] = Field(default=None)
    faixa: Optional[int] = Field(default=None, description="1-based bracket index")
    fator_r: Optional[Decimal] = Field(default=None, description="Payroll / revenue ratio")
    motivo: Optional[str] = Field(default=None)


class PontoMargem(BaseModel):
    """One sample of the break-even scan."""

    model_config = ConfigDict(frozen=True)

    margem: int = Field(..., ge=1, le=100)
    carga_presumido: Decimal
    carga_real: Decimal

    @property
    def vencedor(self) -> Optional[Regime]:
        """Cheaper regime at this margin (None on a tie)."""
        if self.carga_presumido < self.carga_real:
            return Regime.LUCRO_PRESUMIDO
        if self.carga_real < self.carga_presumido:
            return Regime.LUCRO_REAL
        return None


class BreakEvenResult(BaseModel):
    """Presumed vs real profit break-even analysis."""

    model_config = ConfigDict(frozen=True)

    carga_presumido: Decimal = Field(..., description="Current presumed-profit total")
    margem_equilibrio: Optional[int] = Field(
        default=None, description="First margin where the cheaper regime flips"
    )
    presumido_sempre_vantajoso: bool = Field(default=False)
    real_sempre_vantajoso: bool = Field(default=False)
    margem_real_estimada: Optional[Decimal] = Field(
        default=None, description="Estimated actual margin in percent"
    )
    alerta: Optional[str] = Field(default=None, description="Margin below or near break-even")
    aviso: Optional[str] = Field(default=None, description="Data-quality warning")
    margem_assumida: bool = Field(
        default=False, description="No cost data: the 100% margin is a placeholder"
    )
    recomendacao: str = Field(...)
    margens: tuple[PontoMargem, ...] = Field(default=())

    def ponto(self, margem: int) -> Optional[PontoMargem]:
        """Sample for a given integer margin, if it was scanned."""
        for ponto in self.margens:
            if ponto.margem == margem:
                return ponto
        return None

    def ponto_proximo(self, margem: Decimal) -> Optional[PontoMargem]:
        """Scanned sample closest to a (possibly fractional) margin in percent."""
        if not self.margens:
            return None
        alvo = int(arredondar(margem, 0))
        return self.ponto(alvo) or min(self.margens, key=lambda p: abs(p.margem - alvo))
