from app.core.enums import BattleStage


class PokeFusionError(Exception):
    """Base class for all errors raised by the battle pipeline."""


class RetryableError(PokeFusionError):
    """A failed LLM attempt that may succeed if the whole call is repeated."""


class EmptyCompletionError(RetryableError):
    def __init__(self) -> None:
        super().__init__("No content in response")


class CompletionParseError(RetryableError):
    pass


class SchemaValidationError(RetryableError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Validation failed: {', '.join(errors)}")


class GenerationTimeoutError(RetryableError):
    pass


class GenerationTransportError(RetryableError):
    pass


class CatalogError(PokeFusionError):
    """PokeAPI request failed. Never retried."""

    summary = "Failed to fetch Pokemon data"


class PokemonListError(CatalogError):
    summary = "Failed to fetch Pokemon list"


class InvalidRequestError(PokeFusionError):
    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class BattleStageError(PokeFusionError):
    def __init__(self, stage: BattleStage, cause: BaseException) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage.value} failed: {cause}")
