from enum import StrEnum


class PokemonType(StrEnum):
    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    ELECTRIC = "electric"
    GRASS = "grass"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"
    DARK = "dark"
    STEEL = "steel"
    FAIRY = "fairy"


class BattleStage(StrEnum):
    FETCH_PARENTS = "fetch_parents"
    GENERATE_CHILDREN = "generate_children"
    JUDGE_BATTLE = "judge_battle"


# National Dex size
MAX_POKEMON_ID = 1025
