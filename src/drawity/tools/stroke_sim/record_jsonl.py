from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Optional, TextIO

from drawity.client import ClientState, GameClient, Poller
from drawity.protocol.constants import DEFAULT_POLL_INTERVAL_MS

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class ChangeRecorder:
    """Poll callback that appends a JSONL line whenever the game record changes."""

    def __init__(self, out: TextIO, *, echo: bool = False):
        self.out = out
        self.echo = echo
        self._last: tuple | None = None
        self._last_canvas: str | None = None
        self.count = 0

    def __call__(self, state: ClientState, snapshot: Optional[str]) -> None:
        if snapshot is not None:
            self._last_canvas = snapshot
        key = (state.current_player_id, state.status, self._last_canvas)
        if key == self._last:
            return
        self._last = key
        rec = {
            "ts": _now_ms(),
            "currentPlayerId": state.current_player_id,
            "status": state.status,
            "canvasData": self._last_canvas,
        }
        if self.echo:
            print(f"[record] turn={state.current_player_id} status={state.status}")
        self.out.write(json.dumps(rec, ensure_ascii=False) + "\n")
        self.out.flush()
        self.count += 1


async def record(
    client: GameClient,
    game_id: str,
    out_path: Path,
    *,
    interval_s: float,
    echo: bool,
    max_ticks: int | None = None,
) -> int:
    """
    Record game changes as seen by a spectator. Returns the number of lines written.

    The spectator id matches neither player, so every new snapshot is rendered.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("a", encoding="utf-8") as f:
        recorder = ChangeRecorder(f, echo=echo)
        state = ClientState(game_id=game_id, player_id="")
        poller = Poller(client, state, interval_s=interval_s, on_update=recorder)
        if max_ticks is None:
            try:
                await poller.start()
            finally:
                await poller.stop()
        else:
            for i in range(max_ticks):
                await poller.tick()
                if i + 1 < max_ticks:
                    await asyncio.sleep(interval_s)
    return recorder.count


def main() -> None:
    ap = argparse.ArgumentParser(description="Record a game's state changes to a JSONL file.")
    ap.add_argument("--server", default="http://127.0.0.1:8000", help="Server base URL")
    ap.add_argument("--game", required=True, help="Game id")
    ap.add_argument("--out", required=True, help="Output JSONL path")
    ap.add_argument("--interval-ms", type=int, default=DEFAULT_POLL_INTERVAL_MS, help="Poll interval")
    ap.add_argument("--ticks", type=int, default=None, help="Stop after N polls")
    ap.add_argument("--print", action="store_true", help="Print changes to stdout")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    asyncio.run(
        record(
            GameClient(args.server),
            args.game,
            Path(args.out),
            interval_s=args.interval_ms / 1000.0,
            echo=args.print,
            max_ticks=args.ticks,
        )
    )


if __name__ == "__main__":
    main()
