from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint

from drawity.protocol.constants import STATUS_WAITING

from .db import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Game(Base):
    __tablename__ = "games"

    id = Column(String(32), primary_key=True, default=_new_id)
    player1_id = Column(String(32), nullable=False, default=_new_id)
    player2_id = Column(String(32), nullable=False, default=_new_id)
    # Always equals player1_id or player2_id.
    current_player_id = Column(String(32), nullable=False)
    canvas_data = Column(Text, nullable=True)  # opaque data URL
    status = Column(String(16), nullable=False, default=STATUS_WAITING)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def has_player(self, player_id: str) -> bool:
        return player_id in (self.player1_id, self.player2_id)

    def other_player(self, player_id: str) -> str:
        return self.player2_id if player_id == self.player1_id else self.player1_id


class Move(Base):
    """Append-only snapshot log; one row per submitted move."""

    __tablename__ = "moves"
    __table_args__ = (UniqueConstraint("game_id", "seq", name="uq_moves_game_seq"),)

    id = Column(String(32), primary_key=True, default=_new_id)
    game_id = Column(String(32), ForeignKey("games.id"), nullable=False, index=True)
    seq = Column(Integer, nullable=False)
    player_id = Column(String(32), nullable=False)
    canvas_data = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
