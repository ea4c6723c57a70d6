import asyncio
from collections.abc import Sequence

from fastapi import Request
from loguru import logger

from app.core.enums import PokemonType
from app.core.exceptions import CatalogError
from app.schemas.type_chart import EffectivenessSummary, TypeRelation, TypeRelationTable
from app.services.pokeapi import PokeAPIService


class TypeChart:
    """Type effectiveness lookups over a table loaded once from PokeAPI.

    Until ``load`` has completed every lookup is neutral (1x), so callers never
    have to care whether the table is available.
    """

    def __init__(self, table: TypeRelationTable | None = None) -> None:
        self._table = table

    @property
    def table(self) -> TypeRelationTable | None:
        return self._table

    @property
    def is_loaded(self) -> bool:
        return self._table is not None

    def reset(self) -> None:
        self._table = None

    async def _fetch_relation(
        self, pokeapi: PokeAPIService, pokemon_type: PokemonType
    ) -> TypeRelation | None:
        try:
            return await pokeapi.fetch_type_relation(pokemon_type)
        except CatalogError as e:
            logger.error(f"Failed to load matchup for type {pokemon_type.value}: {e}")
            return None

    async def load(self, pokeapi: PokeAPIService) -> TypeRelationTable:
        """Fetch all 18 type relations concurrently. Only the first call fetches."""
        if self._table is not None:
            return self._table

        types = list(PokemonType)
        relations = await asyncio.gather(*(self._fetch_relation(pokeapi, t) for t in types))
        table = {t: r for t, r in zip(types, relations, strict=True) if r is not None}

        # Another load may have finished while this one was awaiting
        if self._table is None:
            self._table = table
        logger.info(f"Loaded type matchups: {len(self._table)}/{len(types)} types")
        return self._table

    def effectiveness(
        self, attack_type: PokemonType, defense_types: Sequence[PokemonType]
    ) -> float:
        """Damage multiplier of ``attack_type`` against a Pokemon of ``defense_types``."""
        if self._table is None:
            return 1

        relation = self._table.get(attack_type)
        if relation is None:
            return 1

        multiplier = 1.0
        for defense_type in defense_types:
            if defense_type in relation.no_damage_to:
                multiplier *= 0
            elif defense_type in relation.double_damage_to:
                multiplier *= 2
            elif defense_type in relation.half_damage_to:
                multiplier *= 0.5
        return multiplier

    def summary(self, defense_types: Sequence[PokemonType]) -> EffectivenessSummary:
        weak_to: list[PokemonType] = []
        resistant_to: list[PokemonType] = []
        immune_to: list[PokemonType] = []

        for attack_type in PokemonType:
            multiplier = self.effectiveness(attack_type, defense_types)
            if multiplier == 0:
                immune_to.append(attack_type)
            elif multiplier >= 2:
                weak_to.append(attack_type)
            elif multiplier <= 0.5:
                resistant_to.append(attack_type)

        return EffectivenessSummary(
            weak_to=weak_to, resistant_to=resistant_to, immune_to=immune_to
        )


def get_type_chart(request: Request) -> TypeChart:
    """The process-wide chart created by the app lifespan."""
    chart: TypeChart | None = getattr(request.app.state, "type_chart", None)
    if chart is None:
        # Lifespan did not run (e.g. under a bare ASGI transport); stay neutral.
        chart = TypeChart()
        request.app.state.type_chart = chart
    return chart
