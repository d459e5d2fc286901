from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from drawity.errors import GameNotFound, PlayerNotInGame, TurnMismatch
from drawity.protocol.constants import (
    ERR_GAME_NOT_FOUND,
    ERR_INTERNAL,
    ERR_NOT_YOUR_TURN,
    ERR_PLAYER_NOT_IN_GAME,
)
from drawity.protocol.messages import (
    CreateGameResponse,
    GameState,
    MoveAck,
    MoveHistory,
    MoveRecord,
    MoveRequest,
)

from .config import Settings, get_settings
from .db import get_db, init_db
from .game_page import render_game_html, render_home_html
from .models import Game
from .store import GameStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Drawity", lifespan=lifespan)


def get_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> GameStore:
    return GameStore(db, enforce_turn_order=settings.enforce_turn_order)


def _game_state(game: Game) -> GameState:
    return GameState(
        game_id=game.id,
        player1_id=game.player1_id,
        player2_id=game.player2_id,
        current_player_id=game.current_player_id,
        canvas_data=game.canvas_data,
        status=game.status,
    )


# -------------------------------------------------
# Errors: {"error": <message>}, never any internal detail
# -------------------------------------------------


@app.exception_handler(GameNotFound)
async def _game_not_found(request: Request, exc: GameNotFound):
    return JSONResponse({"error": ERR_GAME_NOT_FOUND}, status_code=404)


@app.exception_handler(PlayerNotInGame)
async def _player_not_in_game(request: Request, exc: PlayerNotInGame):
    return JSONResponse({"error": ERR_PLAYER_NOT_IN_GAME}, status_code=404)


@app.exception_handler(TurnMismatch)
async def _turn_mismatch(request: Request, exc: TurnMismatch):
    return JSONResponse({"error": ERR_NOT_YOUR_TURN}, status_code=409)


@app.exception_handler(SQLAlchemyError)
async def _storage_failure(request: Request, exc: SQLAlchemyError):
    logger.error(
        "storage failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse({"error": ERR_INTERNAL}, status_code=500)


# -------------------------------------------------
# JSON API
# -------------------------------------------------


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.post("/games", response_model=CreateGameResponse)
def create_game(store: GameStore = Depends(get_store)):
    game = store.create_game()
    return CreateGameResponse(
        game_id=game.id, player1_id=game.player1_id, player2_id=game.player2_id
    )


@app.get("/games/{game_id}", response_model=GameState)
def read_game(
    game_id: str,
    store: GameStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    game = store.get_game(game_id)
    if settings.debug_log_msgs:
        logger.debug("poll game=%s turn=%s status=%s", game.id, game.current_player_id, game.status)
    return _game_state(game)


@app.post("/games/{game_id}/moves", response_model=MoveAck)
def submit_move(game_id: str, body: MoveRequest, store: GameStore = Depends(get_store)):
    # Either player of the game may move; turn order is only checked when enabled.
    store.submit_move(game_id, body.player_id, body.canvas_data)
    return MoveAck(success=True)


@app.get("/games/{game_id}/moves", response_model=MoveHistory)
def list_moves(game_id: str, store: GameStore = Depends(get_store)):
    moves = store.list_moves(game_id)
    return MoveHistory(
        game_id=game_id,
        moves=[
            MoveRecord(
                move_id=m.id,
                seq=m.seq,
                player_id=m.player_id,
                canvas_data=m.canvas_data,
                created_at=m.created_at,
            )
            for m in moves
        ],
    )


# -------------------------------------------------
# Pages
# -------------------------------------------------


@app.get("/", response_class=HTMLResponse)
def home():
    return HTMLResponse(render_home_html())


@app.get("/game/{game_id}/{player_id}", response_class=HTMLResponse)
def game_room(game_id: str, player_id: str, settings: Settings = Depends(get_settings)):
    return HTMLResponse(
        render_game_html(
            game_id,
            player_id,
            poll_interval_ms=settings.poll_interval_ms,
            width=settings.canvas_width,
            height=settings.canvas_height,
        )
    )
