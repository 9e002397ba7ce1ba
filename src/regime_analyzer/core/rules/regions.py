"""Regional profiles per state (reference rates).

ICMS is the standard internal rate and ISS the capital's general rate.
Only the parameters used by the calculators are kept here.
"""

from decimal import Decimal

from regime_analyzer.core.models.region import RegionTaxProfile
from regime_analyzer.shared.exceptions import ValidationError


def _uf(
    sigla: str,
    nome: str,
    regiao: str,
    icms: str,
    sudam: bool = False,
    sudene: bool = False,
    zfm: bool = False,
) -> RegionTaxProfile:
    return RegionTaxProfile(
        sigla=sigla,
        nome=nome,
        regiao=regiao,
        icms_padrao=Decimal(icms),
        sudam=sudam,
        sudene=sudene,
        zfm=zfm,
    )


REGION_PROFILES: dict[str, RegionTaxProfile] = {
    perfil.sigla: perfil
    for perfil in (
        _uf("AC", "Acre", "Norte", "0.19", sudam=True),
        _uf("AL", "Alagoas", "Nordeste", "0.19", sudene=True),
        _uf("AP", "Amapá", "Norte", "0.18", sudam=True),
        _uf("AM", "Amazonas", "Norte", "0.20", sudam=True, zfm=True),
        _uf("BA", "Bahia", "Nordeste", "0.205", sudene=True),
        _uf("CE", "Ceará", "Nordeste", "0.20", sudene=True),
        _uf("DF", "Distrito Federal", "Centro-Oeste", "0.20"),
        _uf("ES", "Espírito Santo", "Sudeste", "0.17"),
        _uf("GO", "Goiás", "Centro-Oeste", "0.19"),
        _uf("MA", "Maranhão", "Nordeste", "0.22", sudam=True, sudene=True),
        _uf("MT", "Mato Grosso", "Centro-Oeste", "0.17", sudam=True),
        _uf("MS", "Mato Grosso do Sul", "Centro-Oeste", "0.17"),
        _uf("MG", "Minas Gerais", "Sudeste", "0.18"),
        _uf("PA", "Pará", "Norte", "0.19", sudam=True),
        _uf("PB", "Paraíba", "Nordeste", "0.20", sudene=True),
        _uf("PR", "Paraná", "Sul", "0.195"),
        _uf("PE", "Pernambuco", "Nordeste", "0.205", sudene=True),
        _uf("PI", "Piauí", "Nordeste", "0.21", sudene=True),
        _uf("RJ", "Rio de Janeiro", "Sudeste", "0.22"),
        _uf("RN", "Rio Grande do Norte", "Nordeste", "0.20", sudene=True),
        _uf("RS", "Rio Grande do Sul", "Sul", "0.17"),
        _uf("RO", "Rondônia", "Norte", "0.195", sudam=True),
        _uf("RR", "Roraima", "Norte", "0.20", sudam=True),
        _uf("SC", "Santa Catarina", "Sul", "0.17"),
        _uf("SP", "São Paulo", "Sudeste", "0.18"),
        _uf("SE", "Sergipe", "Nordeste", "0.19", sudene=True),
        _uf("TO", "Tocantins", "Norte", "0.20", sudam=True),
    )
}


def perfil_regional(uf: str) -> RegionTaxProfile:
    """
    Look up the profile of a state.

    Args:
        uf: Two-letter state code (case insensitive)

    Returns:
        The state's RegionTaxProfile

    Raises:
        ValidationError: If the state code is unknown
    """
    sigla = (uf or "").strip().upper()
    try:
        return REGION_PROFILES[sigla]
    except KeyError:
        raise ValidationError(f"UF desconhecida: {uf!r}") from None
