from typing import Annotated

from fastapi import Depends
from loguru import logger

from app.core.config import settings
from app.schemas.child import GeneratedChild
from app.schemas.pokemon import PokemonParent
from app.services.llm import LLMClient


class FusionService:
    """Breeds a fusion child from two parents using the generator model."""

    def __init__(self, llm: Annotated[LLMClient, Depends()]) -> None:
        self.llm = llm

    def _format_parent(self, label: str, parent: PokemonParent) -> str:
        s = parent.stats
        lines = [
            f"{label}:",
            f"- Name: {parent.name}",
            f"- Types: {', '.join(parent.types)}",
            f"- Stats: HP={s.hp}, Attack={s.attack}, Defense={s.defense}, "
            f"Sp.Atk={s.special_attack}, Sp.Def={s.special_defense}, Speed={s.speed}",
            f"- Abilities: {', '.join(parent.abilities)}",
        ]
        if parent.genus:
            lines.append(f"- Category: {parent.genus}")
        if parent.is_legendary or parent.is_mythical:
            lines.append(f"- Rarity: {'Mythical' if parent.is_mythical else 'Legendary'}")
        if parent.flavor_text:
            lines.append(f"- Pokedex entry: {parent.flavor_text}")
        return "\n".join(lines)

    def _build_generator_message(self, parent1: PokemonParent, parent2: PokemonParent) -> str:
        return f"""You are a Pokemon breeding expert. Given two parent Pokemon, create a unique offspring that combines their traits.

{self._format_parent("Parent 1", parent1)}

{self._format_parent("Parent 2", parent2)}

Generate a child Pokemon with:
1. A creative fusion name combining both parents (max 50 characters)
2. 1-2 types inherited or combined from parents, using only the 18 official types
3. Stats that blend parent stats creatively (each stat between 1-255)
4. 1-2 abilities derived from or inspired by parent abilities
5. A unique signature move that combines parent typings with:
   - A creative name
   - A type (one of the 18 official types, related to the child's types)
   - Power between 0-200
   - A brief description of the move
6. A short description of the child Pokemon (2-3 sentences)

Respond with ONLY valid JSON in this exact format:
{{
  "name": "string",
  "types": ["string"],
  "stats": {{
    "hp": number,
    "attack": number,
    "defense": number,
    "specialAttack": number,
    "specialDefense": number,
    "speed": number
  }},
  "abilities": ["string"],
  "signatureMove": {{
    "name": "string",
    "type": "string",
    "power": number,
    "description": "string"
  }},
  "description": "string"
}}"""

    async def generate_child(self, parent1: PokemonParent, parent2: PokemonParent) -> GeneratedChild:
        logger.info(f"Generating child of {parent1.name} and {parent2.name}")
        prompt = self._build_generator_message(parent1, parent2)
        child = await self.llm.request_structured(prompt, GeneratedChild, settings.generator_model)
        logger.info(f"{parent1.name} + {parent2.name} -> {child.name}")
        return child
