import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import httpx

from app.services.pokeapi import PokeAPIService

BASE_URL = "https://pokeapi.test/api/v2"

STAT_NAMES = ("hp", "attack", "defense", "special-attack", "special-defense", "speed")


def pokemon_payload(
    pokemon_id: int,
    name: str,
    types: list[str],
    stats: tuple[int, int, int, int, int, int] = (45, 49, 49, 65, 65, 45),
    abilities: tuple[str, ...] = ("overgrow",),
) -> dict[str, Any]:
    return {
        "id": pokemon_id,
        "name": name,
        "height": 7,
        "weight": 69,
        "types": [{"slot": i + 1, "type": {"name": t}} for i, t in enumerate(types)],
        "stats": [
            {"base_stat": value, "stat": {"name": stat}}
            for stat, value in zip(STAT_NAMES, stats, strict=True)
        ],
        "abilities": [{"ability": {"name": a}} for a in abilities],
        "sprites": {
            "front_default": f"https://sprites.test/{pokemon_id}.png",
            "other": {"official-artwork": {"front_default": f"https://art.test/{pokemon_id}.png"}},
        },
    }


def species_payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "is_legendary": False,
        "is_mythical": False,
        "flavor_text_entries": [
            {"flavor_text": "Ein Text.", "language": {"name": "de"}},
            {
                "flavor_text": "When several of\nthese POKéMON\ngather, their\felectricity could\n"
                "build and cause\nlightning storms.",
                "language": {"name": "en"},
            },
        ],
        "egg_groups": [{"name": "ground"}, {"name": "fairy"}],
        "genera": [{"genus": "Mouse Pokémon", "language": {"name": "en"}}],
    }
    data.update(overrides)
    return data


STARTERS = {
    1: pokemon_payload(1, "bulbasaur", ["grass", "poison"]),
    4: pokemon_payload(4, "charmander", ["fire"], (39, 52, 43, 60, 50, 65), ("blaze",)),
    7: pokemon_payload(7, "squirtle", ["water"], (44, 48, 65, 50, 64, 43), ("torrent",)),
    10: pokemon_payload(10, "caterpie", ["bug"], (45, 30, 35, 20, 20, 45), ("shield-dust",)),
}


def catalog_handler(
    pokemon: dict[int, dict[str, Any]],
    species: dict[int, dict[str, Any]] | None = None,
    calls: list[str] | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """MockTransport handler serving /pokemon/{id} and /pokemon-species/{id}; 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request.url.path)
        *_, resource, key = request.url.path.rstrip("/").split("/")
        if resource == "pokemon" and key.isdigit() and int(key) in pokemon:
            return httpx.Response(200, json=pokemon[int(key)])
        if resource == "pokemon-species" and species and key.isdigit() and int(key) in species:
            return httpx.Response(200, json=species[int(key)])
        return httpx.Response(404, text="Not Found")

    return handler


def make_pokeapi(handler: Callable[[httpx.Request], httpx.Response]) -> PokeAPIService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return PokeAPIService(client)


def child_json(name: str, types: list[str], move_type: str, **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": name,
        "types": types,
        "stats": {
            "hp": 60,
            "attack": 70,
            "defense": 65,
            "specialAttack": 80,
            "specialDefense": 70,
            "speed": 75,
        },
        "abilities": ["blaze"],
        "signatureMove": {
            "name": "Verdant Flare",
            "type": move_type,
            "power": 90,
            "description": "Scorches the target with burning pollen.",
        },
        "description": "A fiery sprout that loves sunlight.",
    }
    data.update(overrides)
    return data


def judgment_json(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "winner": "child1",
        "confidence": 72,
        "reasoning": "Child 1 outspeeds Child 2 and its fire-type signature move is super "
        "effective, so it should win most exchanges.",
        "keyFactors": ["Speed advantage", "Type advantage"],
        "ruleViolations": [],
    }
    data.update(overrides)
    return data


def completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeCompletions:
    """Stands in for ``AsyncOpenAI().chat.completions``.

    ``replies`` maps a model id to the queue of things it returns, in order: a
    dict (sent as JSON), a raw string, None (empty content) or an exception.
    """

    def __init__(self, replies: dict[str, list[Any]]) -> None:
        self.replies = {model: list(queue) for model, queue in replies.items()}
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        reply = self.replies[kwargs["model"]].pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        return completion(reply)


def fake_openai(replies: dict[str, list[Any]]) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(replies)))
