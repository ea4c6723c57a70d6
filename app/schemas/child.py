from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from app.core.enums import PokemonType
from app.schemas.common import CamelModel


def _normalize_type_tag(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


TypeTag = Annotated[PokemonType, BeforeValidator(_normalize_type_tag)]


class ChildStats(CamelModel):
    hp: int = Field(ge=1, le=255)
    attack: int = Field(ge=1, le=255)
    defense: int = Field(ge=1, le=255)
    special_attack: int = Field(ge=1, le=255)
    special_defense: int = Field(ge=1, le=255)
    speed: int = Field(ge=1, le=255)


class SignatureMove(CamelModel):
    name: str
    type: TypeTag
    power: int = Field(ge=0, le=200)
    description: str


class GeneratedChild(CamelModel):
    """A fusion Pokemon produced by the generator model."""

    name: str = Field(min_length=1, max_length=50)
    types: list[TypeTag] = Field(min_length=1, max_length=2)
    stats: ChildStats
    abilities: list[str] = Field(min_length=1, max_length=2)
    signature_move: SignatureMove
    description: str
