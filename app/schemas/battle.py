from typing import Annotated, Literal

from pydantic import Field, StringConstraints

from app.core.enums import MAX_POKEMON_ID
from app.schemas.child import GeneratedChild
from app.schemas.common import CamelModel
from app.schemas.pokemon import PokemonParent

PokemonId = Annotated[int, Field(ge=1, le=MAX_POKEMON_ID)]


class BattleJudgment(CamelModel):
    """Verdict produced by the judge model."""

    winner: Literal["child1", "child2"]
    confidence: float = Field(ge=0, le=100)
    reasoning: str = Field(min_length=50, max_length=2000)
    key_factors: list[Annotated[str, StringConstraints(min_length=1)]] = Field(
        min_length=1, max_length=5
    )
    rule_violations: list[str] | None = None


class ParentPairSelection(CamelModel):
    parent1_id: PokemonId
    parent2_id: PokemonId


class BattleRequest(CamelModel):
    pair_a: ParentPairSelection
    pair_b: ParentPairSelection


class ParentPair(CamelModel):
    parent1: PokemonParent
    parent2: PokemonParent


class BattleParents(CamelModel):
    pair_a: ParentPair
    pair_b: ParentPair


class BattleChildren(CamelModel):
    child1: GeneratedChild
    child2: GeneratedChild


class BattleResponse(CamelModel):
    parents: BattleParents
    children: BattleChildren
    battle: BattleJudgment
