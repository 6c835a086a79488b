# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

CATEGORIES = ("recycling", "climate", "habits", "wildlife", "fun")


@dataclass(frozen=True)
class GameDef:
    id: str
    name: str
    category: str
    description: str
    difficulty: str
    points: int
    icon: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


GAMES: List[GameDef] = [
    # Recycling
    GameDef("waste-segregation", "Waste Segregation", "recycling", "Drag items into the correct bins.", "Easy", 5, "♻️"),
    GameDef("recycling-factory", "Recycling Factory Puzzle", "recycling", "Reorder the factory line correctly.", "Medium", 20, "🏭"),
    GameDef("ocean-cleanup", "Ocean Cleanup", "recycling", "Collect plastic, avoid fish.", "Easy", 10, "🚤"),
    # Climate & Pollution
    GameDef("air-catcher", "Air Pollution Catcher", "climate", "Catch clean air, avoid smoke.", "Easy", 10, "🌬️"),
    GameDef("carbon-choices", "Carbon Footprint Choices", "climate", "Pick eco-friendly options.", "Medium", 10, "🌍"),
    GameDef("flood-defender", "Flood Defender", "climate", "Protect the city for 3 rounds.", "Hard", 30, "🌊"),
    # Daily Habits
    GameDef("eco-home", "Eco-Home Challenge", "habits", "Fix bad habits in a room.", "Easy", 8, "🏡"),
    GameDef("eco-shopping", "Eco-Shopping", "habits", "Choose sustainable products.", "Medium", 15, "🛒"),
    GameDef("energy-quiz", "Energy Saver Quiz Race", "habits", "Timed energy-saving questions.", "Medium", 15, "⚡"),
    # Plant & Wildlife
    GameDef("tree-planting", "Tree Planting Simulator", "wildlife", "Grow a tree step by step.", "Easy", 20, "🌱"),
    GameDef("wildlife-rescue", "Wildlife Rescue Adventure", "wildlife", "Guide animals to safety.", "Medium", 15, "🦊"),
    GameDef("pollinator-garden", "Pollinator Garden Builder", "wildlife", "Build a bee-friendly garden.", "Medium", 20, "🐝"),
    # Fun / Mixed
    GameDef("eco-crossword", "Eco-Crossword", "fun", "Solve sustainability words.", "Medium", 15, "🧩"),
    GameDef("trivia-wheel", "Sustainability Trivia Wheel", "fun", "Spin and answer!", "Hard", 20, "🎡"),
    GameDef("eco-runner", "Eco-Runner", "fun", "Endless runner: collect eco-items.", "Medium", 10, "🏃"),
]

_BY_ID: Dict[str, GameDef] = {g.id: g for g in GAMES}


def get_game_by_id(game_id: str) -> Optional[GameDef]:
    return _BY_ID.get(game_id)


def list_games(category: Optional[str] = None) -> List[GameDef]:
    if category is None:
        return list(GAMES)
    return [g for g in GAMES if g.category == category]
