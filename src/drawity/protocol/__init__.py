from .constants import (
    DEFAULT_POLL_INTERVAL_MS,
    STATUS_ACTIVE,
    STATUS_WAITING,
)
from .messages import (
    CreateGameResponse,
    GameState,
    MoveAck,
    MoveHistory,
    MoveRecord,
    MoveRequest,
)

__all__ = [
    "DEFAULT_POLL_INTERVAL_MS",
    "STATUS_ACTIVE",
    "STATUS_WAITING",
    "CreateGameResponse",
    "GameState",
    "MoveAck",
    "MoveHistory",
    "MoveRecord",
    "MoveRequest",
]
