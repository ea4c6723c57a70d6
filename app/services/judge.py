from typing import Annotated

from fastapi import Depends
from loguru import logger

from app.core.config import settings
from app.schemas.battle import BattleJudgment
from app.schemas.child import GeneratedChild
from app.services.llm import LLMClient
from app.services.type_chart import TypeChart, get_type_chart


class JudgeService:
    """Asks the judge model to predict the winner between two fusion children."""

    def __init__(
        self,
        llm: Annotated[LLMClient, Depends()],
        type_chart: Annotated[TypeChart, Depends(get_type_chart)],
    ) -> None:
        self.llm = llm
        self.type_chart = type_chart

    def _format_child(self, label: str, child: GeneratedChild) -> str:
        s = child.stats
        move = child.signature_move
        return f"""{label}:
- Name: {child.name}
- Types: {", ".join(child.types)}
- Stats: HP={s.hp}, Attack={s.attack}, Defense={s.defense}, Sp.Atk={s.special_attack}, Sp.Def={s.special_defense}, Speed={s.speed}
- Abilities: {", ".join(child.abilities)}
- Signature Move: {move.name} ({move.type}, Power: {move.power}) - {move.description}"""

    def _format_matchups(self, child1: GeneratedChild, child2: GeneratedChild) -> str:
        """Deterministic type facts, or an empty string when the chart is unavailable."""
        if not self.type_chart.is_loaded:
            return ""

        lines = ["Type matchup facts (computed from the official type chart):"]
        for label, attacker, defender in (
            ("Child 1", child1, child2),
            ("Child 2", child2, child1),
        ):
            move = attacker.signature_move
            multiplier = self.type_chart.effectiveness(move.type, defender.types)
            lines.append(f"- {label}'s {move.name} ({move.type}) deals {multiplier:g}x damage")

        for label, child in (("Child 1", child1), ("Child 2", child2)):
            summary = self.type_chart.summary(child.types)
            lines.append(
                f"- {label} is weak to [{', '.join(summary.weak_to)}], "
                f"resists [{', '.join(summary.resistant_to)}], "
                f"immune to [{', '.join(summary.immune_to)}]"
            )
        return "\n".join(lines) + "\n\n"

    def _build_judge_message(self, child1: GeneratedChild, child2: GeneratedChild) -> str:
        return f"""You are a Pokemon battle analyst. Analyze a hypothetical battle between two fusion Pokemon and predict the winner.

{self._format_child("Child 1 (from Pair A)", child1)}

{self._format_child("Child 2 (from Pair B)", child2)}

{self._format_matchups(child1, child2)}Consider:
1. Type matchups and advantages/disadvantages
2. Stat distributions (speed determines who attacks first)
3. Signature moves and their effectiveness against the opponent
4. Ability synergies and potential counters
5. Any rule violations or unrealistic attributes

Provide your prediction with:
- Winner: either "child1" or "child2"
- Confidence level: 0-100 (how certain you are)
- Reasoning: detailed explanation (50-2000 characters)
- Key factors: 1-5 main reasons for your prediction
- Rule violations: any issues with the Pokemon attributes (empty array if none)

Respond with ONLY valid JSON in this exact format:
{{
  "winner": "child1" or "child2",
  "confidence": number,
  "reasoning": "string",
  "keyFactors": ["string"],
  "ruleViolations": ["string"] or []
}}"""

    async def judge(self, child1: GeneratedChild, child2: GeneratedChild) -> BattleJudgment:
        logger.info(f"Judging {child1.name} vs {child2.name}")
        prompt = self._build_judge_message(child1, child2)
        judgment = await self.llm.request_structured(prompt, BattleJudgment, settings.judge_model)
        logger.info(f"Winner: {judgment.winner} ({judgment.confidence:g}% confidence)")
        return judgment
