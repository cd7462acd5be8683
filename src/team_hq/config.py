"""Configuration and constants for team-hq."""

import os
from pathlib import Path

# Remote chat-log endpoint
HQ_URL = os.environ.get("HQ_URL", "https://thht-hq.onrender.com")
HTTP_TIMEOUT = 10.0

# Storage paths
OPENCLAW_DIR = Path(os.environ.get("OPENCLAW_DIR", Path.home() / ".openclaw"))
AGENTS_DIR = OPENCLAW_DIR / "agents"
OPENCLAW_CONFIG = OPENCLAW_DIR / "openclaw.json"

DATA_DIR = Path(
    os.environ.get("HQ_DATA_DIR", Path.home() / ".local" / "share" / "team-hq")
)
STATE_FILE = DATA_DIR / "sync-state.json"
TAKEAWAYS_FILE = DATA_DIR / "takeaways.json"

# Roster used when no OpenClaw config is available (deployed environment)
FALLBACK_AGENTS = [
    {"id": "main", "name": "William Strong"},
    {"id": "ryan-chen", "name": "Ryan Chen"},
]
PRIMARY_AGENT_ID = "main"

# Classification settings
MIN_TEXT_LENGTH = 5
MAX_TEXT_LENGTH = 500
CONTROL_MARKERS = ("HEARTBEAT", "NO_REPLY")

# Sync settings
DEFAULT_WINDOW_HOURS = 24
MAX_SYNCED_FINGERPRINTS = 500
SEND_DELAY = 0.2  # Seconds between successful sends

# Dashboard settings
ONLINE_WINDOW_SECONDS = 5 * 60
MAX_SESSIONS_LISTED = 50
