from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.core.enums import PokemonType
from app.core.exceptions import InvalidRequestError
from app.schemas.type_chart import EffectivenessSummary
from app.services.type_chart import TypeChart, get_type_chart

router = APIRouter(prefix="/types", tags=["types"])


@router.get("/effectiveness")
async def get_type_effectiveness(
    type_chart: Annotated[TypeChart, Depends(get_type_chart)],
    types: Annotated[list[PokemonType], Query()],
) -> EffectivenessSummary:
    """Weaknesses, resistances and immunities of a Pokemon with the given types."""
    if not 1 <= len(types) <= 2:  # noqa: PLR2004
        msg = "A Pokemon has one or two types"
        raise InvalidRequestError(msg, f"types: got {len(types)}")
    return type_chart.summary(types)
