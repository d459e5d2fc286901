from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from drawity.canvas import Canvas
from drawity.client import GameClient

logger = logging.getLogger(__name__)


def load_strokes(jsonl_path: Path) -> list[dict]:
    """
    Read strokes from JSONL, one per line:
      {"tool": "pen", "color": "#111827", "pts": [[x, y], ...]}
    with x,y normalized to [0,1]. Blank lines and lines without points are skipped.
    """
    strokes: list[dict] = []
    for line in jsonl_path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        obj = json.loads(line)
        pts = obj.get("pts") if isinstance(obj, dict) else None
        if not isinstance(pts, list) or not pts:
            continue
        strokes.append(
            {
                "tool": obj.get("tool") or "pen",
                "color": obj.get("color") or "#111827",
                "pts": [p for p in pts if isinstance(p, list) and len(p) >= 2],
            }
        )
    return strokes


def render_strokes(canvas: Canvas, strokes: list[dict]) -> None:
    for s in strokes:
        pts = [(float(p[0]) * (canvas.width - 1), float(p[1]) * (canvas.height - 1)) for p in s["pts"]]
        canvas.draw_stroke(s["tool"], s["color"], pts)


def replay(
    client: GameClient,
    game_id: str,
    player_id: str,
    jsonl_path: Path,
    *,
    width: int = 800,
    height: int = 600,
) -> str:
    """
    Draw the recorded strokes on top of the game's current snapshot and submit
    the result as one move. Returns the submitted snapshot.
    """
    game = client.get_game(game_id)
    if game.canvas_data:
        canvas = Canvas.from_snapshot(game.canvas_data)
    else:
        canvas = Canvas(width, height)

    strokes = load_strokes(jsonl_path)
    render_strokes(canvas, strokes)
    snapshot = canvas.snapshot()
    client.submit_move(game_id, player_id, snapshot)
    logger.info("replayed %d strokes into game %s as %s", len(strokes), game_id, player_id)
    return snapshot


def main() -> None:
    ap = argparse.ArgumentParser(description="Replay stroke JSONL into a game as one move.")
    ap.add_argument("--server", default="http://127.0.0.1:8000", help="Server base URL")
    ap.add_argument("--game", required=True, help="Game id")
    ap.add_argument("--player", required=True, help="Player id to submit as")
    ap.add_argument("--in", dest="inp", required=True, help="Input JSONL path")
    ap.add_argument("--width", type=int, default=800, help="Canvas width for a blank game")
    ap.add_argument("--height", type=int, default=600, help="Canvas height for a blank game")
    ap.add_argument("--timeout", type=float, default=10.0, help="HTTP timeout (s)")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    replay(
        GameClient(args.server, timeout_s=args.timeout),
        args.game,
        args.player,
        Path(args.inp),
        width=args.width,
        height=args.height,
    )


if __name__ == "__main__":
    main()
