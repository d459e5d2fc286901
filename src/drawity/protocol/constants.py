# Game status tags and wire defaults (canonical list lives here)

STATUS_WAITING = "waiting"
STATUS_ACTIVE = "active"

DEFAULT_POLL_INTERVAL_MS = 2000

# Canvas snapshots travel as data URLs; the server never decodes them.
SNAPSHOT_MIME = "image/png"
SNAPSHOT_PREFIX = f"data:{SNAPSHOT_MIME};base64,"

# Error bodies: {"error": <message>}
ERR_GAME_NOT_FOUND = "Game not found"
ERR_PLAYER_NOT_IN_GAME = "Player not in game"
ERR_NOT_YOUR_TURN = "Not your turn"
ERR_INTERNAL = "Internal server error"
