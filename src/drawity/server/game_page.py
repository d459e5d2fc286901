from __future__ import annotations

# ruff: noqa: E501
import html
import json

from drawity.canvas.tools import TOOLS
from drawity.protocol.constants import DEFAULT_POLL_INTERVAL_MS


def _js(value) -> str:
    # JSON literal that is safe inside a <script> block
    return json.dumps(value).replace("</", "<\\/")


def render_home_html() -> str:
    """Landing page: one button that creates a game and jumps into it as player 1."""
    return """
<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width,initial-scale=1" />
    <title>Drawity</title>
    <style>
      html, body { height: 100%; margin: 0; font-family: ui-sans-serif, system-ui, -apple-system; }
      main { max-width: 28rem; margin: 0 auto; padding: 4rem 1.5rem; text-align: center; }
      button { width: 100%; padding: 1rem; font-size: 1.1rem; border-radius: 1rem; border: 0; background: #4f46e5; color: #fff; cursor: pointer; }
      button:disabled { opacity: 0.7; cursor: not-allowed; }
    </style>
  </head>
  <body>
    <main>
      <h1>Drawity</h1>
      <p>Start a creative journey with friends!</p>
      <button id="start">Start New Game</button>
    </main>
    <script>
      const btn = document.getElementById("start");
      btn.addEventListener("click", async () => {
        btn.disabled = true;
        btn.textContent = "Creating game...";
        try {
          const resp = await fetch("/games", { method: "POST" });
          const data = await resp.json();
          if (resp.ok) {
            window.location.href = `/game/${data.gameId}/${data.player1Id}`;
            return;
          }
          console.error("Failed to create game:", data.error);
        } catch (err) {
          console.error("Error creating game:", err);
        }
        btn.disabled = false;
        btn.textContent = "Start New Game";
      });
    </script>
  </body>
</html>
"""


def render_game_html(
    game_id: str,
    player_id: str,
    *,
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    width: int = 800,
    height: int = 600,
) -> str:
    """
    Game room (single page app).

    The page polls `GET /games/{id}`, renders the opponent's snapshot and posts
    its own canvas on "Finish move". Tool parameters come from `drawity.canvas.TOOLS`
    so the browser and the Pillow renderer agree.
    """
    tools = {
        name: {
            "width": t.width,
            "opacity": t.opacity,
            "composite": t.composite,
            "sprayRadius": t.spray_radius,
            "sprayDensity": t.spray_density,
        }
        for name, t in TOOLS.items()
    }
    shown_id = html.escape(game_id)
    tool_options = "".join(f'<option value="{name}">{name}</option>' for name in TOOLS)
    return f"""
<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width,initial-scale=1" />
    <title>Drawity: game {shown_id}</title>
    <style>
      body {{ margin: 0; font-family: ui-sans-serif, system-ui, -apple-system; background: #f3f4f6; }}
      #bar {{ padding: 10px 12px; display: flex; gap: 16px; align-items: center; flex-wrap: wrap; }}
      #bar code {{ color: #4f46e5; }}
      #board {{ display: block; margin: 0 auto; background: #fff; touch-action: none; box-shadow: 0 1px 4px rgba(0,0,0,0.2); }}
      #board.locked {{ cursor: not-allowed; }}
    </style>
  </head>
  <body>
    <div id="bar">
      <div><strong>Game</strong>: <code>{shown_id}</code></div>
      <div>You are: <span id="role">…</span></div>
      <div id="status">loading…</div>
      <select id="tool">{tool_options}</select>
      <input id="color" type="color" value="#111827" />
      <button id="finish" disabled>Finish move</button>
      <div id="share" style="font-size:12px;"></div>
    </div>
    <canvas id="board" width="{width}" height="{height}" class="locked"></canvas>
    <script>
      const GAME_ID = {_js(game_id)};
      const PLAYER_ID = {_js(player_id)};
      const POLL_MS = {int(poll_interval_ms)};
      const TOOLS = {json.dumps(tools)};

      const board = document.getElementById("board");
      const ctx = board.getContext("2d");
      const statusEl = document.getElementById("status");
      const roleEl = document.getElementById("role");
      const shareEl = document.getElementById("share");
      const toolEl = document.getElementById("tool");
      const colorEl = document.getElementById("color");
      const finishBtn = document.getElementById("finish");

      // Explicit client state; only poll() and finishMove() touch it.
      const state = {{
        currentPlayerId: null,
        status: null,
        canvasData: null,     // last snapshot rendered locally
        serverCanvas: null,   // last snapshot the server reported
        pendingCanvas: null,  // optimistic hint: move sent, not yet confirmed
        baseCanvas: null,     // server snapshot when the move was sent
        submitConfirmed: false,
        submitFailed: false,
      }};

      function isMyTurn() {{
        if (state.pendingCanvas !== null) return false;
        return state.currentPlayerId === PLAYER_ID;
      }}

      function clearPending() {{
        state.pendingCanvas = null;
        state.baseCanvas = null;
        state.submitConfirmed = false;
        state.submitFailed = false;
      }}

      // Returns the snapshot to render, or null.
      function reconcile(game) {{
        const wasMyTurn = isMyTurn();
        if (state.pendingCanvas !== null) {{
          // accepted, and the record has changed since: the opponent already replied
          const movedOn = state.submitConfirmed && game.canvasData !== state.baseCanvas;
          if (game.canvasData === state.pendingCanvas) {{
            state.canvasData = game.canvasData;
            clearPending();
          }} else if (game.currentPlayerId !== PLAYER_ID || movedOn || state.submitFailed) {{
            clearPending();
          }}
        }}
        state.currentPlayerId = game.currentPlayerId;
        state.status = game.status;
        state.serverCanvas = game.canvasData;
        if (!game.canvasData || game.canvasData === state.canvasData) return null;
        const justStarted = isMyTurn() && !wasMyTurn;
        if (!isMyTurn() || justStarted) {{
          state.canvasData = game.canvasData;
          return game.canvasData;
        }}
        return null;
      }}

      function renderSnapshot(dataUrl) {{
        const img = new Image();
        img.onload = () => {{
          ctx.save();
          ctx.globalCompositeOperation = "source-over";
          ctx.globalAlpha = 1;
          ctx.clearRect(0, 0, board.width, board.height);
          ctx.drawImage(img, 0, 0, board.width, board.height);
          ctx.restore();
        }};
        img.src = dataUrl;
      }}

      function updateUi() {{
        const mine = isMyTurn();
        finishBtn.disabled = !mine;
        board.classList.toggle("locked", !mine);
        if (state.pendingCanvas !== null) statusEl.textContent = "move sent…";
        else if (mine) statusEl.textContent = "your turn: draw, then finish your move";
        else statusEl.textContent = "waiting for the other player…";
      }}

      // ---- drawing ----
      const buf = document.createElement("canvas");
      buf.width = board.width;
      buf.height = board.height;
      const bufCtx = buf.getContext("2d");

      let stroke = null; // {{ tool, color, last, base }}

      function toXY(ev) {{
        const r = board.getBoundingClientRect();
        return [(ev.clientX - r.left) * (board.width / r.width), (ev.clientY - r.top) * (board.height / r.height)];
      }}

      function line(c, a, b, color, width) {{
        c.strokeStyle = color;
        c.lineWidth = width;
        c.lineCap = "round";
        c.lineJoin = "round";
        c.beginPath();
        c.moveTo(a[0], a[1]);
        c.lineTo(b[0], b[1]);
        c.stroke();
      }}

      function spray(c, p, tool, color) {{
        c.fillStyle = color;
        for (let i = 0; i < tool.sprayDensity; i++) {{
          const ang = Math.random() * 2 * Math.PI;
          const r = tool.sprayRadius * Math.sqrt(Math.random());
          c.fillRect(Math.round(p[0] + r * Math.cos(ang)), Math.round(p[1] + r * Math.sin(ang)), 1, 1);
        }}
      }}

      function segment(a, b) {{
        const t = stroke.tool;
        if (t.sprayDensity > 0) {{
          spray(ctx, b, t, stroke.color);
        }} else if (t.composite === "destination-out") {{
          ctx.save();
          ctx.globalCompositeOperation = "destination-out";
          line(ctx, a, b, "rgba(0,0,0,1)", t.width);
          ctx.restore();
        }} else if (t.opacity < 1) {{
          // whole stroke lives in the offscreen buffer at full strength
          line(bufCtx, a, b, stroke.color, t.width);
          ctx.putImageData(stroke.base, 0, 0);
          ctx.save();
          ctx.globalAlpha = t.opacity;
          ctx.drawImage(buf, 0, 0);
          ctx.restore();
        }} else {{
          line(ctx, a, b, stroke.color, t.width);
        }}
      }}

      board.addEventListener("pointerdown", (ev) => {{
        if (!isMyTurn()) return;
        board.setPointerCapture(ev.pointerId);
        const tool = TOOLS[toolEl.value] || TOOLS.pen;
        const p = toXY(ev);
        stroke = {{ tool, color: colorEl.value, last: p, base: null }};
        if (tool.opacity < 1 && tool.composite !== "destination-out") {{
          bufCtx.clearRect(0, 0, buf.width, buf.height);
          stroke.base = ctx.getImageData(0, 0, board.width, board.height);
        }}
        segment(p, p);
      }});
      board.addEventListener("pointermove", (ev) => {{
        if (!stroke) return;
        const p = toXY(ev);
        segment(stroke.last, p);
        stroke.last = p;
      }});
      for (const name of ["pointerup", "pointercancel", "pointerleave"]) {{
        board.addEventListener(name, () => {{ stroke = null; }});
      }}

      // ---- turn exchange ----
      async function finishMove() {{
        if (!isMyTurn()) return;
        stroke = null;
        const data = board.toDataURL("image/png");
        state.pendingCanvas = data;
        state.baseCanvas = state.serverCanvas;
        state.submitConfirmed = false;
        state.submitFailed = false;
        updateUi();
        try {{
          const resp = await fetch(`/games/${{encodeURIComponent(GAME_ID)}}/moves`, {{
            method: "POST",
            headers: {{ "Content-Type": "application/json" }},
            body: JSON.stringify({{ playerId: PLAYER_ID, canvasData: data }}),
          }});
          if (!resp.ok) {{
            console.error("Failed to submit move:", resp.status);
            state.submitFailed = true;
          }} else if (state.pendingCanvas === data) {{
            state.submitConfirmed = true;
          }}
        }} catch (err) {{
          console.error("Error submitting move:", err);
          state.submitFailed = true;
        }}
      }}
      finishBtn.addEventListener("click", finishMove);

      async function poll() {{
        let game;
        try {{
          const resp = await fetch(`/games/${{encodeURIComponent(GAME_ID)}}`);
          if (!resp.ok) {{
            console.error("Failed to fetch game:", resp.status);
            if (resp.status === 404) statusEl.textContent = "game not found";
            return;
          }}
          game = await resp.json();
        }} catch (err) {{
          console.error("Error fetching game:", err);
          return;
        }}
        if (PLAYER_ID === game.player1Id) roleEl.textContent = "Player 1";
        else if (PLAYER_ID === game.player2Id) roleEl.textContent = "Player 2";
        else roleEl.textContent = "Unknown Player";
        if (PLAYER_ID === game.player1Id) {{
          shareEl.textContent = `Invite: ${{location.origin}}/game/${{game.gameId}}/${{game.player2Id}}`;
        }}
        const snap = reconcile(game);
        if (snap) renderSnapshot(snap);
        updateUi();
      }}

      poll();
      const timer = setInterval(poll, POLL_MS);
      window.addEventListener("pagehide", () => clearInterval(timer));
    </script>
  </body>
</html>
"""
