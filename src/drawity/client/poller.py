from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Optional, Union

from drawity.errors import DrawityError
from drawity.protocol.constants import DEFAULT_POLL_INTERVAL_MS

from .api import GameClient
from .state import ClientState

logger = logging.getLogger(__name__)

# on_update(state, snapshot_to_render_or_None)
UpdateCallback = Callable[[ClientState, Optional[str]], Union[None, Awaitable[None]]]


class Poller:
    """
    Cooperative polling loop for one player's view of a game.

    Every `interval_s` the game record is fetched and merged into `state`; the
    callback then sees the state plus the snapshot to render (if any). Failed
    fetches/submits are logged and dropped; the next tick re-syncs.
    """

    def __init__(
        self,
        client: GameClient,
        state: ClientState,
        *,
        interval_s: float = DEFAULT_POLL_INTERVAL_MS / 1000.0,
        on_update: UpdateCallback | None = None,
    ):
        self.client = client
        self.state = state
        self.interval_s = interval_s
        self.on_update = on_update
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self._loop())
        assert self._task is not None
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _loop(self) -> None:
        while True:
            await self.tick()
            await asyncio.sleep(self.interval_s)

    async def tick(self) -> bool:
        """One poll; returns False if the fetch failed."""
        try:
            game = await asyncio.to_thread(self.client.get_game, self.state.game_id)
        except DrawityError as e:
            logger.warning("poll of game %s failed: %s", self.state.game_id, e)
            return False
        snapshot = self.state.reconcile(game)
        if self.on_update is not None:
            res = self.on_update(self.state, snapshot)
            if asyncio.iscoroutine(res):
                await res
        return True

    async def finish_move(self, canvas_data: str) -> bool:
        """Flip the local turn immediately, then submit; returns True on success."""
        self.state.mark_submitted(canvas_data)
        try:
            await asyncio.to_thread(
                self.client.submit_move, self.state.game_id, self.state.player_id, canvas_data
            )
        except DrawityError as e:
            logger.warning("submit to game %s failed: %s", self.state.game_id, e)
            self.state.mark_submit_failed()
            return False
        self.state.mark_submit_confirmed()
        return True
