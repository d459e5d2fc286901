from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from drawity.errors import GameNotFound, PlayerNotInGame, TurnMismatch
from drawity.protocol.constants import STATUS_ACTIVE, STATUS_WAITING

from .models import Game, Move

logger = logging.getLogger(__name__)


class GameStore:
    """
    Game/move persistence on top of a SQLAlchemy session.

    - **enforce_turn_order**: when False (default) a move is accepted from either
      player of the game, regardless of whose turn the record says it is.
    """

    def __init__(self, db: Session, *, enforce_turn_order: bool = False):
        self.db = db
        self.enforce_turn_order = enforce_turn_order

    # -------------------------------------------------
    # Lifecycle
    # -------------------------------------------------

    def create_game(self) -> Game:
        player1_id = uuid.uuid4().hex
        player2_id = uuid.uuid4().hex
        game = Game(
            player1_id=player1_id,
            player2_id=player2_id,
            current_player_id=player1_id,
            canvas_data=None,
            status=STATUS_WAITING,
        )
        self.db.add(game)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("created game %s (p1=%s p2=%s)", game.id, player1_id, player2_id)
        return game

    def get_game(self, game_id: str) -> Game:
        game = self.db.get(Game, game_id)
        if game is None:
            raise GameNotFound(game_id)
        return game

    # -------------------------------------------------
    # Moves
    # -------------------------------------------------

    def submit_move(self, game_id: str, player_id: str, canvas_data: str) -> Move:
        """
        Append a move, hand the turn to the other player and store the snapshot.

        Nothing is written when the game or the player does not resolve.
        """
        try:
            game = self.db.scalars(
                select(Game).where(Game.id == game_id).with_for_update()
            ).one_or_none()
            if game is None:
                raise GameNotFound(game_id)
            if not game.has_player(player_id):
                raise PlayerNotInGame(game_id, player_id)
            if self.enforce_turn_order and player_id != game.current_player_id:
                raise TurnMismatch(game_id, player_id, game.current_player_id)

            last_seq = self.db.scalar(
                select(func.max(Move.seq)).where(Move.game_id == game_id)
            )
            move = Move(
                game_id=game_id,
                seq=(last_seq or 0) + 1,
                player_id=player_id,
                canvas_data=canvas_data,
            )
            self.db.add(move)

            game.current_player_id = game.other_player(player_id)
            game.canvas_data = canvas_data
            game.status = STATUS_ACTIVE
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "game %s: move #%d by %s, turn -> %s",
            game_id,
            move.seq,
            player_id,
            game.current_player_id,
        )
        return move

    def list_moves(self, game_id: str) -> list[Move]:
        self.get_game(game_id)
        return list(
            self.db.scalars(select(Move).where(Move.game_id == game_id).order_by(Move.seq))
        )

    def count_moves(self, game_id: str) -> int:
        return self.db.scalar(select(func.count()).select_from(Move).where(Move.game_id == game_id))
