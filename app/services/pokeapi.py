import asyncio
import re
from typing import Annotated, Any

import httpx
from fastapi import Depends
from loguru import logger

from app.core.enums import PokemonType
from app.core.exceptions import CatalogError, PokemonListError, SchemaValidationError
from app.core.http import get_pokeapi_client
from app.schemas.pokemon import PokemonListItem, PokemonParent, PokemonSpecies, PokemonStats
from app.schemas.type_chart import TypeRelation
from app.utils.validation import validate_with_schema

# PokeAPI stat name -> PokemonStats field
STAT_FIELDS = {
    "hp": "hp",
    "attack": "attack",
    "defense": "defense",
    "special-attack": "special_attack",
    "special-defense": "special_defense",
    "speed": "speed",
}
VALID_TYPES = frozenset(PokemonType)
POKEMON_URL_ID = re.compile(r"/pokemon/(\d+)/?$")
FLAVOR_TEXT_BREAKS = re.compile(r"[\n\f\r]+")


def _english_entry(entries: list[dict[str, Any]], key: str) -> str | None:
    for entry in entries:
        if entry.get("language", {}).get("name") == "en":
            return entry.get(key)
    return None


def transform_species(data: dict[str, Any]) -> PokemonSpecies:
    """Extract the optional taxonomy fields from a /pokemon-species payload."""
    flavor_text = _english_entry(data.get("flavor_text_entries", []), "flavor_text")
    if isinstance(flavor_text, str):
        flavor_text = FLAVOR_TEXT_BREAKS.sub(" ", flavor_text)

    return validate_with_schema(
        {
            "is_legendary": data.get("is_legendary"),
            "is_mythical": data.get("is_mythical"),
            "flavor_text": flavor_text,
            "egg_groups": [group["name"] for group in data.get("egg_groups", [])],
            "genus": _english_entry(data.get("genera", []), "genus"),
        },
        PokemonSpecies,
    )


def transform_pokemon(data: dict[str, Any], species: PokemonSpecies | None = None) -> PokemonParent:
    """Convert a raw /pokemon payload (and optional species taxonomy) to a PokemonParent."""
    stats_map = {s["stat"]["name"]: s["base_stat"] for s in data.get("stats", [])}
    stats = PokemonStats(
        **{field: stats_map.get(name, 0) for name, field in STAT_FIELDS.items()}
    )

    # New types PokeAPI may add are dropped
    types = [
        PokemonType(t["type"]["name"])
        for t in data.get("types", [])
        if t["type"]["name"] in VALID_TYPES
    ] or [PokemonType.NORMAL]

    sprites = data.get("sprites") or {}
    artwork = (sprites.get("other") or {}).get("official-artwork") or {}
    sprite = artwork.get("front_default") or sprites.get("front_default") or ""

    return PokemonParent(
        id=data["id"],
        name=data["name"],
        height=data.get("height") or 0,
        weight=data.get("weight") or 0,
        types=types,
        stats=stats,
        abilities=[a["ability"]["name"] for a in data.get("abilities", [])],
        sprite=sprite,
        **(species.model_dump() if species else {}),
    )


def transform_type_relation(data: dict[str, Any]) -> TypeRelation:
    relations = data["damage_relations"]

    def names(key: str) -> frozenset[PokemonType]:
        return frozenset(
            PokemonType(t["name"]) for t in relations.get(key, []) if t["name"] in VALID_TYPES
        )

    return TypeRelation(
        double_damage_to=names("double_damage_to"),
        half_damage_to=names("half_damage_to"),
        no_damage_to=names("no_damage_to"),
        double_damage_from=names("double_damage_from"),
        half_damage_from=names("half_damage_from"),
        no_damage_from=names("no_damage_from"),
    )


class PokeAPIService:
    """Client for the PokeAPI catalog. Errors are never retried here."""

    def __init__(self, client: Annotated[httpx.AsyncClient, Depends(get_pokeapi_client)]) -> None:
        self.client = client

    async def _get_json(self, path: str, what: str, **params: Any) -> Any:
        try:
            response = await self.client.get(path, params=params or None)
        except httpx.TimeoutException:
            msg = f"Timed out fetching {what}"
            raise CatalogError(msg) from None
        except httpx.HTTPError as e:
            msg = f"Failed to fetch {what}: {e}"
            raise CatalogError(msg) from e

        if not response.is_success:
            msg = f"Failed to fetch {what}: {response.status_code} {response.reason_phrase}"
            raise CatalogError(msg)

        try:
            return response.json()
        except ValueError as e:
            msg = f"Failed to fetch {what}: invalid JSON body"
            raise CatalogError(msg) from e

    async def _fetch_species(self, pokemon_id: int) -> PokemonSpecies | None:
        try:
            data = await self._get_json(f"/pokemon-species/{pokemon_id}", f"species {pokemon_id}")
            return transform_species(data)
        except (CatalogError, SchemaValidationError, AttributeError, KeyError, TypeError) as e:
            logger.warning(f"Species data unavailable for Pokemon {pokemon_id}: {e}")
            return None

    async def fetch_pokemon(self, pokemon_id: int) -> PokemonParent:
        """Fetch a Pokemon with its species data when available.

        The species request is cancelled if the primary request fails.
        """
        try:
            async with asyncio.TaskGroup() as tg:
                primary = tg.create_task(
                    self._get_json(f"/pokemon/{pokemon_id}", f"Pokemon {pokemon_id}")
                )
                species = tg.create_task(self._fetch_species(pokemon_id))
        except ExceptionGroup as eg:
            raise eg.exceptions[0]

        try:
            return transform_pokemon(primary.result(), species.result())
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            msg = f"Unexpected PokeAPI payload for Pokemon {pokemon_id}: {e}"
            raise CatalogError(msg) from e

    async def fetch_pokemon_list(
        self, limit: int = 151, offset: int = 0
    ) -> tuple[list[PokemonListItem], int]:
        """Fetch one page of Pokemon names and the total count."""
        try:
            data = await self._get_json("/pokemon", "Pokemon list", limit=limit, offset=offset)
        except CatalogError as e:
            raise PokemonListError(str(e)) from e

        try:
            pokemon: list[PokemonListItem] = []
            for index, result in enumerate(data["results"]):
                match = POKEMON_URL_ID.search(result.get("url") or "")
                pokemon_id = int(match.group(1)) if match else offset + index + 1
                pokemon.append(PokemonListItem(id=pokemon_id, name=result["name"]))
            return pokemon, int(data["count"])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            msg = f"Unexpected PokeAPI payload for Pokemon list: {e}"
            raise PokemonListError(msg) from e

    async def fetch_type_relation(self, pokemon_type: PokemonType) -> TypeRelation:
        data = await self._get_json(f"/type/{pokemon_type.value}", f"type {pokemon_type.value}")
        try:
            return transform_type_relation(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            msg = f"Unexpected PokeAPI payload for type {pokemon_type.value}: {e}"
            raise CatalogError(msg) from e
