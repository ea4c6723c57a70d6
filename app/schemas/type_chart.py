from dataclasses import dataclass, field

from app.core.enums import PokemonType
from app.schemas.common import CamelModel


@dataclass(frozen=True, slots=True)
class TypeRelation:
    """Damage relations of one type, as reported by PokeAPI's /type endpoint."""

    double_damage_to: frozenset[PokemonType] = field(default_factory=frozenset)
    half_damage_to: frozenset[PokemonType] = field(default_factory=frozenset)
    no_damage_to: frozenset[PokemonType] = field(default_factory=frozenset)
    double_damage_from: frozenset[PokemonType] = field(default_factory=frozenset)
    half_damage_from: frozenset[PokemonType] = field(default_factory=frozenset)
    no_damage_from: frozenset[PokemonType] = field(default_factory=frozenset)


type TypeRelationTable = dict[PokemonType, TypeRelation]


class EffectivenessSummary(CamelModel):
    weak_to: list[PokemonType] = []
    resistant_to: list[PokemonType] = []
    immune_to: list[PokemonType] = []
