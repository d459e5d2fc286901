from .api import GameClient
from .poller import Poller
from .state import ClientState

__all__ = ["ClientState", "GameClient", "Poller"]
