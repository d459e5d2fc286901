from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request

from drawity.errors import ApiError, GameNotFound, TurnMismatch
from drawity.protocol.messages import CreateGameResponse, GameState, MoveHistory, MoveRequest

logger = logging.getLogger(__name__)


class GameClient:
    """
    Blocking JSON client for the game HTTP API.

    Calls from async code go through `asyncio.to_thread` (see `Poller`).
    """

    def __init__(self, base_url: str, *, timeout_s: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    def _url(self, *parts: str) -> str:
        return self.base_url + "/" + "/".join(urllib.parse.quote(p, safe="") for p in parts)

    def _request(self, method: str, url: str, body: dict | None = None) -> dict:
        data = json.dumps(body).encode("utf-8") if body is not None else None
        req = urllib.request.Request(
            url,
            data=data,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            method=method,
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            raise self._error_from_response(e, url) from e
        except (urllib.error.URLError, TimeoutError) as e:
            raise ApiError(f"{method} {url} failed: {e}") from e
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ApiError(f"{method} {url} returned invalid JSON: {e}") from e

    @staticmethod
    def _error_from_response(e: urllib.error.HTTPError, url: str) -> Exception:
        message = e.reason
        try:
            body = json.loads(e.read().decode("utf-8"))
            message = body.get("error") or message
        except (ValueError, AttributeError):
            pass
        # /games/{gameId}/... -> gameId is the segment after "games"
        path = urllib.parse.urlparse(url).path.split("/")
        game_id = path[path.index("games") + 1] if "games" in path[:-1] else ""
        game_id = urllib.parse.unquote(game_id)
        if e.code == 404:
            return GameNotFound(game_id)
        if e.code == 409:
            return TurnMismatch(game_id, message=f"game {game_id}: {message}")
        return ApiError(f"HTTP {e.code}: {message}", status=e.code)

    # -------------------------------------------------
    # Endpoints
    # -------------------------------------------------

    def create_game(self) -> CreateGameResponse:
        return CreateGameResponse.model_validate(self._request("POST", self._url("games")))

    def get_game(self, game_id: str) -> GameState:
        return GameState.model_validate(self._request("GET", self._url("games", game_id)))

    def submit_move(self, game_id: str, player_id: str, canvas_data: str) -> None:
        body = MoveRequest(player_id=player_id, canvas_data=canvas_data).model_dump(by_alias=True)
        resp = self._request("POST", self._url("games", game_id, "moves"), body)
        if not resp.get("success"):
            raise ApiError(f"move rejected: {resp}")
        logger.debug("submitted move for game %s as %s", game_id, player_id)

    def list_moves(self, game_id: str) -> MoveHistory:
        return MoveHistory.model_validate(self._request("GET", self._url("games", game_id, "moves")))
