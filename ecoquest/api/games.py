# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from ecoquest.common.errors import BadRequestError, NotFoundError
from ecoquest.domain import catalog, schemas


router = APIRouter(prefix="/games", tags=["games"])


@router.get("", response_model=schemas.GameListResponse)
def list_games(category: Optional[str] = Query(None)):
    if category is not None and category not in catalog.CATEGORIES:
        raise BadRequestError(code="GAME_CATEGORY_INVALID", message=f"unknown category: {category}")
    games = [schemas.GameOut(**g.to_dict()) for g in catalog.list_games(category)]
    return schemas.GameListResponse(games=games)


@router.get("/{game_id}", response_model=schemas.GameOut)
def get_game(game_id: str):
    game = catalog.get_game_by_id(game_id)
    if game is None:
        raise NotFoundError(code="GAME_NOT_FOUND", message="game not found")
    return schemas.GameOut(**game.to_dict())
