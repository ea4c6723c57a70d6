from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.core.enums import MAX_POKEMON_ID
from app.schemas.pokemon import PokemonListResponse, PokemonParent
from app.services.pokeapi import PokeAPIService

router = APIRouter(prefix="/pokemon", tags=["pokemon"])


@router.get("")
async def get_pokemon_list(
    service: Annotated[PokeAPIService, Depends()],
    limit: Annotated[int, Query(ge=1, le=MAX_POKEMON_ID)] = 151,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> PokemonListResponse:
    pokemon, total = await service.fetch_pokemon_list(limit=limit, offset=offset)
    return PokemonListResponse(pokemon=pokemon, total=total, limit=limit, offset=offset)


@router.get("/{pokemon_id}")
async def get_pokemon(
    pokemon_id: Annotated[int, Path(ge=1, le=MAX_POKEMON_ID)],
    service: Annotated[PokeAPIService, Depends()],
) -> PokemonParent:
    return await service.fetch_pokemon(pokemon_id)
