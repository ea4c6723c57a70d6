import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends
from loguru import logger

from app.core.enums import BattleStage
from app.core.exceptions import BattleStageError
from app.schemas.battle import (
    BattleChildren,
    BattleParents,
    BattleRequest,
    BattleResponse,
    ParentPair,
)
from app.services.fusion import FusionService
from app.services.judge import JudgeService
from app.services.pokeapi import PokeAPIService


@asynccontextmanager
async def _stage(stage: BattleStage) -> AsyncIterator[None]:
    """Time a pipeline stage and turn any failure into a BattleStageError."""
    logger.info(f"━━━ {stage.value} ━━━")
    start = time.perf_counter()
    try:
        yield
    except Exception as e:
        # A task group may hold several failures; the first one is reported.
        cause: BaseException = e
        while isinstance(cause, BaseExceptionGroup):
            cause = cause.exceptions[0]
        logger.error(f"{stage.value} failed after {time.perf_counter() - start:.2f}s: {cause}")
        raise BattleStageError(stage, cause) from cause
    logger.info(f"{stage.value} done in {time.perf_counter() - start:.2f}s")


class BattleService:
    """Runs the fetch -> breed -> judge pipeline for one battle request."""

    def __init__(
        self,
        pokeapi: Annotated[PokeAPIService, Depends()],
        fusion: Annotated[FusionService, Depends()],
        judge: Annotated[JudgeService, Depends()],
    ) -> None:
        self.pokeapi = pokeapi
        self.fusion = fusion
        self.judge = judge

    async def _fetch_parents(self, request: BattleRequest) -> BattleParents:
        async with asyncio.TaskGroup() as tg:
            a1 = tg.create_task(self.pokeapi.fetch_pokemon(request.pair_a.parent1_id))
            a2 = tg.create_task(self.pokeapi.fetch_pokemon(request.pair_a.parent2_id))
            b1 = tg.create_task(self.pokeapi.fetch_pokemon(request.pair_b.parent1_id))
            b2 = tg.create_task(self.pokeapi.fetch_pokemon(request.pair_b.parent2_id))

        return BattleParents(
            pair_a=ParentPair(parent1=a1.result(), parent2=a2.result()),
            pair_b=ParentPair(parent1=b1.result(), parent2=b2.result()),
        )

    async def _generate_children(self, parents: BattleParents) -> BattleChildren:
        async with asyncio.TaskGroup() as tg:
            child1 = tg.create_task(
                self.fusion.generate_child(parents.pair_a.parent1, parents.pair_a.parent2)
            )
            child2 = tg.create_task(
                self.fusion.generate_child(parents.pair_b.parent1, parents.pair_b.parent2)
            )

        return BattleChildren(child1=child1.result(), child2=child2.result())

    async def run_battle(self, request: BattleRequest) -> BattleResponse:
        """Fetch parents, breed both children, then judge them.

        Any failure aborts the whole battle with a BattleStageError naming the stage.
        """
        async with _stage(BattleStage.FETCH_PARENTS):
            parents = await self._fetch_parents(request)

        async with _stage(BattleStage.GENERATE_CHILDREN):
            children = await self._generate_children(parents)

        async with _stage(BattleStage.JUDGE_BATTLE):
            battle = await self.judge.judge(children.child1, children.child2)

        logger.info("Battle complete")
        return BattleResponse(parents=parents, children=children, battle=battle)
