from pydantic import Field

from app.core.enums import PokemonType
from app.schemas.common import CamelModel


class PokemonStats(CamelModel):
    hp: int = Field(ge=0, le=255)
    attack: int = Field(ge=0, le=255)
    defense: int = Field(ge=0, le=255)
    special_attack: int = Field(ge=0, le=255)
    special_defense: int = Field(ge=0, le=255)
    speed: int = Field(ge=0, le=255)


class PokemonSpecies(CamelModel):
    """Taxonomy fields from /pokemon-species."""

    is_legendary: bool | None = None
    is_mythical: bool | None = None
    flavor_text: str | None = None
    egg_groups: list[str] | None = None
    genus: str | None = None


class PokemonParent(CamelModel):
    """A Pokemon fetched from PokeAPI, used as breeding input."""

    id: int = Field(ge=1)
    name: str = Field(min_length=1)
    height: int = Field(default=0, ge=0)  # decimeters
    weight: int = Field(default=0, ge=0)  # hectograms
    types: list[PokemonType] = Field(min_length=1, max_length=2)
    stats: PokemonStats
    abilities: list[str] = Field(min_length=1)
    # Empty string when PokeAPI has no sprite
    sprite: str = ""

    # From /pokemon-species, best effort
    is_legendary: bool | None = None
    is_mythical: bool | None = None
    flavor_text: str | None = None
    egg_groups: list[str] | None = None
    genus: str | None = None


class PokemonListItem(CamelModel):
    id: int
    name: str


class PokemonListResponse(CamelModel):
    pokemon: list[PokemonListItem]
    total: int
    limit: int
    offset: int
