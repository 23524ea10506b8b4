"""HTTP routes for the heartforge API.

Missing characters and rejected input become HTTP errors through the
handlers registered in :mod:`heartforge.api.app`.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, Field

from heartforge.api.runtime import ApiState, CharacterService
from heartforge.domain import models as dm
from heartforge.domain.enums import LoadoutMode, LoadoutPile

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class CharacterSummary(BaseModel):
    id: int
    name: str
    class_name: str
    class_domains: list[str]
    level: int
    tier: str


class CharacterDetail(CharacterSummary):
    history: list[dict[str, object]]
    loadout: dict[str, object]


class CreateCharacterRequest(BaseModel):
    name: str = Field(min_length=1)
    class_name: str = Field(min_length=1)
    class_domains: list[str] | None = None


class LevelUpRequest(BaseModel):
    selections: dict[str, int] = Field(default_factory=dict)
    notes: str | None = None
    select_any: bool = False


class ValidationSummary(BaseModel):
    ok: bool
    total_cost: int
    error: str | None
    option_key: str | None


class LevelUpPreview(BaseModel):
    target_level: int
    tier: str
    budget: int
    automatic_benefits: list[str]
    result: ValidationSummary
    options: list[dict[str, object]]


class ModeRequest(BaseModel):
    mode: LoadoutMode


class ToggleRequest(BaseModel):
    card_name: str = Field(min_length=1)
    pile: LoadoutPile = LoadoutPile.ACTIVE


class ToggleResponse(BaseModel):
    outcome: str
    card_name: str
    changed: bool
    loadout: dict[str, object]


class HomebrewCardRequest(BaseModel):
    name: str = Field(min_length=1)
    domain: str = Field(min_length=1)
    level: int = Field(ge=1, le=10)
    type: str = "Ability"
    description: str = ""
    hope_cost: int | None = Field(default=None, ge=0)
    recall_cost: int | None = Field(default=None, ge=0)
    pile: LoadoutPile | None = None


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {"status": "ok", "rules_version": state.settings.rules_version}


@router.get("/rules/tiers/{level}")
async def tier_overview(level: int, state: ApiStateDep) -> dict[str, object]:
    return CharacterService.tier_overview(level, state.rules)


@router.get("/characters", response_model=list[CharacterSummary])
async def list_characters(state: ApiStateDep) -> list[CharacterSummary]:
    characters = state.characters.list_characters()
    return [CharacterSummary.model_validate(CharacterService.to_summary_dict(c)) for c in characters]


@router.post(
    "/characters",
    response_model=CharacterDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_character(request: CreateCharacterRequest, state: ApiStateDep) -> CharacterDetail:
    character = state.characters.create_character(
        request.name, request.class_name, class_domains=request.class_domains
    )
    return CharacterDetail.model_validate(CharacterService.to_detail_dict(character, state.rules))


@router.get("/characters/{character_id}", response_model=CharacterDetail)
async def get_character(character_id: int, state: ApiStateDep) -> CharacterDetail:
    character = state.characters.get_character(dm.CharacterID(character_id))
    return CharacterDetail.model_validate(CharacterService.to_detail_dict(character, state.rules))


@router.delete("/characters/{character_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_character(character_id: int, state: ApiStateDep) -> None:
    state.characters.delete_character(dm.CharacterID(character_id))


@router.post("/characters/{character_id}/level-up/preview", response_model=LevelUpPreview)
async def preview_level_up(
    character_id: int, request: LevelUpRequest, state: ApiStateDep
) -> LevelUpPreview:
    payload = state.characters.preview_level_up(
        dm.CharacterID(character_id), request.selections, select_any=request.select_any
    )
    return LevelUpPreview.model_validate(payload)


@router.post("/characters/{character_id}/level-up", response_model=CharacterDetail)
async def commit_level_up(
    character_id: int, request: LevelUpRequest, state: ApiStateDep
) -> CharacterDetail:
    character, result = state.characters.commit_level_up(
        dm.CharacterID(character_id),
        request.selections,
        notes=request.notes,
        select_any=request.select_any,
    )
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=CharacterService.to_result_dict(result),
        )
    return CharacterDetail.model_validate(CharacterService.to_detail_dict(character, state.rules))


@router.post("/characters/{character_id}/level-up/undo", response_model=CharacterDetail)
async def undo_level_up(character_id: int, state: ApiStateDep) -> CharacterDetail:
    character, _entry = state.characters.undo_level_up(dm.CharacterID(character_id))
    return CharacterDetail.model_validate(CharacterService.to_detail_dict(character, state.rules))


@router.get("/characters/{character_id}/loadout")
async def get_loadout(character_id: int, state: ApiStateDep) -> dict[str, object]:
    character = state.characters.get_character(dm.CharacterID(character_id))
    return CharacterService.to_loadout_dict(character, state.rules)


@router.get("/characters/{character_id}/loadout/available")
async def available_cards(
    character_id: int,
    state: ApiStateDep,
    domains: Annotated[list[str] | None, Query(alias="domain")] = None,
) -> list[dict[str, object]]:
    cards = state.characters.available_cards(dm.CharacterID(character_id), domains=domains)
    return [
        {
            "name": card.name,
            "domain": card.domain,
            "level": card.level,
            "type": card.type,
            "recall_cost": card.effective_recall_cost,
            "is_homebrew": card.is_homebrew,
        }
        for card in cards
    ]


@router.post("/characters/{character_id}/loadout/mode")
async def set_loadout_mode(
    character_id: int, request: ModeRequest, state: ApiStateDep
) -> dict[str, object]:
    character = state.characters.set_loadout_mode(dm.CharacterID(character_id), request.mode)
    return CharacterService.to_loadout_dict(character, state.rules)


@router.post("/characters/{character_id}/loadout/toggle", response_model=ToggleResponse)
async def toggle_card(
    character_id: int, request: ToggleRequest, state: ApiStateDep
) -> ToggleResponse:
    character, result = state.characters.toggle_card(
        dm.CharacterID(character_id), request.card_name, request.pile
    )
    return ToggleResponse(
        outcome=str(result.outcome),
        card_name=result.card_name,
        changed=result.changed,
        loadout=CharacterService.to_loadout_dict(character, state.rules),
    )


@router.post(
    "/characters/{character_id}/loadout/homebrew",
    status_code=status.HTTP_201_CREATED,
)
async def add_homebrew_card(
    character_id: int, request: HomebrewCardRequest, state: ApiStateDep
) -> dict[str, object]:
    card = dm.DomainCardLite(
        name=request.name,
        domain=request.domain,
        level=request.level,
        type=request.type,
        description=request.description,
        hope_cost=request.hope_cost,
        recall_cost=request.recall_cost,
        is_homebrew=True,
    )
    character, result = state.characters.add_homebrew_card(
        dm.CharacterID(character_id), card, pile=request.pile
    )
    return {
        "outcome": str(result.outcome) if result is not None else None,
        "loadout": CharacterService.to_loadout_dict(character, state.rules),
    }
