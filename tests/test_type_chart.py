import itertools

import httpx
import pytest

from app.core.enums import PokemonType as T
from app.schemas.type_chart import TypeRelation
from app.services.type_chart import TypeChart
from tests.helpers import make_pokeapi

# Attacking half of the Gen 6+ chart, enough for the combinations below.
ATTACKS: dict[T, tuple[set[T], set[T], set[T]]] = {
    # type: (double_damage_to, half_damage_to, no_damage_to)
    T.NORMAL: (set(), {T.ROCK, T.STEEL}, {T.GHOST}),
    T.FIRE: ({T.GRASS, T.ICE, T.BUG, T.STEEL}, {T.FIRE, T.WATER, T.ROCK, T.DRAGON}, set()),
    T.WATER: ({T.FIRE, T.GROUND, T.ROCK}, {T.WATER, T.GRASS, T.DRAGON}, set()),
    T.ELECTRIC: ({T.WATER, T.FLYING}, {T.ELECTRIC, T.GRASS, T.DRAGON}, {T.GROUND}),
    T.GRASS: (
        {T.WATER, T.GROUND, T.ROCK},
        {T.FIRE, T.GRASS, T.POISON, T.FLYING, T.BUG, T.DRAGON, T.STEEL},
        set(),
    ),
    T.ICE: ({T.GRASS, T.GROUND, T.FLYING, T.DRAGON}, {T.FIRE, T.WATER, T.ICE, T.STEEL}, set()),
    T.FIGHTING: (
        {T.NORMAL, T.ICE, T.ROCK, T.DARK, T.STEEL},
        {T.POISON, T.FLYING, T.PSYCHIC, T.BUG, T.FAIRY},
        {T.GHOST},
    ),
    T.POISON: ({T.GRASS, T.FAIRY}, {T.POISON, T.GROUND, T.ROCK, T.GHOST}, {T.STEEL}),
    T.GROUND: (
        {T.FIRE, T.ELECTRIC, T.POISON, T.ROCK, T.STEEL},
        {T.GRASS, T.BUG},
        {T.FLYING},
    ),
    T.GHOST: ({T.PSYCHIC, T.GHOST}, {T.DARK}, {T.NORMAL}),
    T.DRAGON: ({T.DRAGON}, {T.STEEL}, {T.FAIRY}),
}


def relation(double: set[T], half: set[T], none: set[T]) -> TypeRelation:
    return TypeRelation(
        double_damage_to=frozenset(double),
        half_damage_to=frozenset(half),
        no_damage_to=frozenset(none),
    )


@pytest.fixture
def chart() -> TypeChart:
    return TypeChart({t: relation(*rels) for t, rels in ATTACKS.items()})


def type_payload(name: str) -> dict:
    double, half, none = ATTACKS.get(T(name), (set(), set(), set()))
    return {
        "name": name,
        "damage_relations": {
            "double_damage_to": [{"name": t.value} for t in double],
            "half_damage_to": [{"name": t.value} for t in half],
            "no_damage_to": [{"name": t.value} for t in none],
            "double_damage_from": [{"name": "stellar"}],
            "half_damage_from": [],
            "no_damage_from": [],
        },
    }


class TestEffectiveness:
    @pytest.mark.parametrize(
        ("attack", "defense", "expected"),
        [
            (T.FIRE, [T.GRASS], 2),
            (T.FIRE, [T.WATER], 0.5),
            (T.FIRE, [T.NORMAL], 1),
            (T.FIRE, [T.GRASS, T.STEEL], 4),
            (T.FIRE, [T.WATER, T.ROCK], 0.25),
            (T.FIRE, [T.GRASS, T.WATER], 1),
            (T.ELECTRIC, [T.GROUND], 0),
            (T.ELECTRIC, [T.WATER, T.GROUND], 0),
            (T.GROUND, [T.FLYING, T.FIRE], 0),
            (T.NORMAL, [T.GHOST, T.STEEL], 0),
            (T.ICE, [T.DRAGON, T.FLYING], 4),
        ],
    )
    def test_multipliers(self, chart, attack, defense, expected):
        assert chart.effectiveness(attack, defense) == expected

    def test_immunity_dominates_regardless_of_order(self, chart):
        # electric: water is super effective, grass resisted, ground immune
        for defense in itertools.permutations([T.WATER, T.GROUND]):
            assert chart.effectiveness(T.ELECTRIC, list(defense)) == 0
        for defense in itertools.permutations([T.GRASS, T.GROUND]):
            assert chart.effectiveness(T.ELECTRIC, list(defense)) == 0

    def test_always_a_known_multiplier(self, chart):
        allowed = {0, 0.25, 0.5, 1, 2, 4}
        for attack in T:
            for first in T:
                assert chart.effectiveness(attack, [first]) in allowed
                for second in T:
                    if second != first:
                        assert chart.effectiveness(attack, [first, second]) in allowed

    def test_neutral_when_not_loaded(self):
        assert TypeChart().effectiveness(T.ELECTRIC, [T.GROUND]) == 1

    def test_neutral_when_attack_type_missing(self, chart):
        assert chart.effectiveness(T.FAIRY, [T.DRAGON]) == 1


class TestSummary:
    def test_single_type(self, chart):
        summary = chart.summary([T.GROUND])

        assert set(summary.immune_to) == {T.ELECTRIC}
        assert set(summary.weak_to) == {T.WATER, T.GRASS, T.ICE}
        assert T.POISON in summary.resistant_to

    def test_sets_are_disjoint_and_never_neutral(self, chart):
        for first, second in itertools.combinations(T, 2):
            defense = [first, second]
            summary = chart.summary(defense)
            weak, resist, immune = (
                set(summary.weak_to),
                set(summary.resistant_to),
                set(summary.immune_to),
            )

            assert not weak & resist
            assert not weak & immune
            assert not resist & immune
            assert len(summary.weak_to) == len(weak)
            for attack in weak | resist | immune:
                assert chart.effectiveness(attack, defense) != 1

    def test_empty_when_not_loaded(self):
        summary = TypeChart().summary([T.FIRE])
        assert summary.weak_to == summary.resistant_to == summary.immune_to == []

    def test_serializes_camel_case(self, chart):
        data = chart.summary([T.GROUND]).model_dump(by_alias=True)
        assert set(data) == {"weakTo", "resistantTo", "immuneTo"}


@pytest.mark.anyio
class TestLoad:
    async def test_fetches_all_18_types_once(self):
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(200, json=type_payload(request.url.path.rsplit("/", 1)[-1]))

        chart = TypeChart()
        table = await chart.load(make_pokeapi(handler))

        assert len(calls) == 18
        assert set(table) == set(T)
        # Unknown types like "stellar" are dropped
        assert table[T.FIRE].double_damage_from == frozenset()
        assert chart.effectiveness(T.ELECTRIC, [T.GROUND]) == 0

        again = await chart.load(make_pokeapi(handler))
        assert again is table
        assert len(calls) == 18

    async def test_failed_types_are_omitted(self):
        def handler(request: httpx.Request) -> httpx.Response:
            name = request.url.path.rsplit("/", 1)[-1]
            if name in {"fire", "ghost"}:
                return httpx.Response(500, text="boom")
            if name == "dragon":
                raise httpx.ConnectTimeout("timed out")
            return httpx.Response(200, json=type_payload(name))

        chart = TypeChart()
        table = await chart.load(make_pokeapi(handler))

        assert len(table) == 15
        assert T.FIRE not in table
        assert chart.effectiveness(T.FIRE, [T.GRASS]) == 1
        assert chart.effectiveness(T.WATER, [T.FIRE]) == 2

    async def test_malformed_payloads_are_omitted(self):
        def handler(request: httpx.Request) -> httpx.Response:
            name = request.url.path.rsplit("/", 1)[-1]
            if name == "fire":
                return httpx.Response(200, json={"name": "fire", "damage_relations": []})
            if name == "water":
                return httpx.Response(200, json=["water"])
            if name == "ghost":
                return httpx.Response(200, json={"name": "ghost"})
            return httpx.Response(200, json=type_payload(name))

        chart = TypeChart()
        table = await chart.load(make_pokeapi(handler))

        assert set(table) == set(T) - {T.FIRE, T.WATER, T.GHOST}
        assert chart.effectiveness(T.FIRE, [T.GRASS]) == 1
        assert chart.effectiveness(T.ELECTRIC, [T.GROUND]) == 0

    async def test_total_failure_degrades_to_neutral(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="down")

        chart = TypeChart()
        assert await chart.load(make_pokeapi(handler)) == {}
        assert chart.is_loaded
        assert chart.effectiveness(T.ELECTRIC, [T.GROUND]) == 1

    async def test_reset_allows_reload(self, chart):
        chart.reset()
        assert not chart.is_loaded
        assert chart.effectiveness(T.FIRE, [T.GRASS]) == 1
