from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, TypeAlias

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Snapshot payload: opaque data-URL string (e.g. "data:image/png;base64,...").
CanvasData: TypeAlias = str


class _Wire(BaseModel):
    # Python side uses snake_case, the wire uses camelCase.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateGameResponse(_Wire):
    game_id: str
    player1_id: str
    player2_id: str


class GameState(_Wire):
    game_id: str
    player1_id: str
    player2_id: str
    current_player_id: str
    canvas_data: Optional[CanvasData] = None
    status: Literal["waiting", "active"]


class MoveRequest(_Wire):
    player_id: str = Field(min_length=1)
    canvas_data: CanvasData


class MoveAck(BaseModel):
    success: bool = True


class MoveRecord(_Wire):
    move_id: str
    seq: int
    player_id: str
    canvas_data: CanvasData
    created_at: datetime


class MoveHistory(_Wire):
    game_id: str
    moves: list[MoveRecord]
