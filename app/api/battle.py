from typing import Annotated

from fastapi import APIRouter, Depends

from app.schemas.battle import BattleRequest, BattleResponse
from app.services.battle import BattleService

router = APIRouter(prefix="/battle", tags=["battle"])


@router.post("")
async def create_battle(
    battle_request: BattleRequest, service: Annotated[BattleService, Depends()]
) -> BattleResponse:
    return await service.run_battle(battle_request)
