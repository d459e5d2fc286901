from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from drawity.protocol.messages import GameState


@dataclass
class ClientState:
    """
    Local view of one game, as seen by one player.

    `pending_canvas` is the optimistic hint set when the player finishes a move:
    drawing is disabled right away, before the server has confirmed anything.
    Only `reconcile` clears it, once a poll shows the server has moved past the
    snapshot the move was drawn over, or the submit failed.
    """

    game_id: str
    player_id: str

    # last confirmed server view
    current_player_id: Optional[str] = None
    status: Optional[str] = None
    server_canvas: Optional[str] = None
    canvas_data: Optional[str] = None  # last snapshot rendered locally

    # optimistic turn flip
    pending_canvas: Optional[str] = None
    base_canvas: Optional[str] = None  # server snapshot when the move was sent
    submit_confirmed: bool = False
    submit_failed: bool = False

    @property
    def is_my_turn(self) -> bool:
        if self.pending_canvas is not None:
            return False
        return self.current_player_id == self.player_id

    @property
    def drawing_enabled(self) -> bool:
        return self.is_my_turn

    def mark_submitted(self, canvas_data: str) -> None:
        self.pending_canvas = canvas_data
        self.base_canvas = self.server_canvas
        self.submit_confirmed = False
        self.submit_failed = False

    def mark_submit_confirmed(self) -> None:
        if self.pending_canvas is not None:
            self.submit_confirmed = True

    def mark_submit_failed(self) -> None:
        if self.pending_canvas is not None:
            self.submit_failed = True

    def _clear_pending(self) -> None:
        self.pending_canvas = None
        self.base_canvas = None
        self.submit_confirmed = False
        self.submit_failed = False

    def reconcile(self, game: GameState) -> Optional[str]:
        """
        Merge a poll result into the local state.

        Returns the snapshot to render onto the local surface, or None when the
        local content should be left alone.
        """
        was_my_turn = self.is_my_turn

        if self.pending_canvas is not None:
            # accepted, and the record has changed since: the opponent already replied
            moved_on = self.submit_confirmed and game.canvas_data != self.base_canvas
            if game.canvas_data == self.pending_canvas:
                # our own snapshot: already on screen
                self.canvas_data = game.canvas_data
                self._clear_pending()
            elif game.current_player_id != self.player_id or moved_on or self.submit_failed:
                self._clear_pending()
            # else: submit in flight or stale read; keep the hint

        self.current_player_id = game.current_player_id
        self.status = game.status
        self.server_canvas = game.canvas_data

        if not game.canvas_data or game.canvas_data == self.canvas_data:
            return None
        turn_just_started = self.is_my_turn and not was_my_turn
        if not self.is_my_turn or turn_just_started:
            self.canvas_data = game.canvas_data
            return game.canvas_data
        return None
