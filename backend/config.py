import os
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:5173")
SOUND_ASSETS_PATH = Path(
    os.environ.get("SOUND_ASSETS_PATH", Path(__file__).parent / "data" / "sound_assets.json")
)
# When set, assets are fetched from this URL instead of SOUND_ASSETS_PATH
SOUND_ASSETS_URL = os.environ.get("SOUND_ASSETS_URL") or None
BRIEFING_TIMEZONE = ZoneInfo(os.environ.get("BRIEFING_TIMEZONE", "UTC"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
