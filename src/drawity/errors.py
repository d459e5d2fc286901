from __future__ import annotations


class DrawityError(Exception):
    """Base class for game errors shared by the server and the client."""


class GameNotFound(DrawityError):
    def __init__(self, game_id: str):
        super().__init__(f"game {game_id} not found")
        self.game_id = game_id


class PlayerNotInGame(DrawityError):
    def __init__(self, game_id: str, player_id: str):
        super().__init__(f"player {player_id} is not part of game {game_id}")
        self.game_id = game_id
        self.player_id = player_id


class TurnMismatch(DrawityError):
    """Raised only when turn order enforcement is switched on."""

    def __init__(
        self,
        game_id: str,
        player_id: str | None = None,
        current_player_id: str | None = None,
        *,
        message: str | None = None,
    ):
        if message is None:
            if player_id and current_player_id:
                message = (
                    f"player {player_id} moved in game {game_id}"
                    f" but it is {current_player_id}'s turn"
                )
            else:
                message = f"out-of-turn move in game {game_id}"
        super().__init__(message)
        self.game_id = game_id
        self.player_id = player_id
        self.current_player_id = current_player_id


class ApiError(DrawityError):
    """Client-side: non-success response or transport failure."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status
