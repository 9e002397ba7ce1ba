"""Custom exceptions for Regime Analyzer."""


class RegimeAnalyzerError(Exception):
    """Base exception for all Regime Analyzer errors."""

    pass


class ValidationError(RegimeAnalyzerError):
    """Input data validation error."""

    pass


class MissingInputError(ValidationError):
    """A mandatory numeric input was not supplied."""

    def __init__(self, campo: str, operacao: str | None = None) -> None:
        self.campo = campo
        self.operacao = operacao
        prefixo = f"{operacao}: " if operacao else ""
        super().__init__(f'{prefixo}campo obrigatório "{campo}" não informado.')


class ConfigurationError(RegimeAnalyzerError):
    """Invalid engine configuration."""

    pass


class RuleTableError(ConfigurationError):
    """Rule or bracket table is malformed."""

    pass


class AnalysisError(RegimeAnalyzerError):
    """Error during analysis."""

    pass
