# src/config/settings.py

"""Central configuration for the campuskart client."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the campuskart client."""

    # --- Remote API ---
    API_BASE_URL: str = os.getenv(
        "CAMPUSKART_API_URL", "http://localhost:54321/functions/v1/server"
    )
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Retry count for idempotent GETs only

    # --- Auth provider ---
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "http://localhost:54321")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
    ACCESS_TOKEN: str = os.getenv("CAMPUSKART_ACCESS_TOKEN", "")

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
        "Content-Type": "application/json",
    }

    # --- Messaging ---
    CONTACT_MESSAGE_TEMPLATE: str = "Hi! I'm interested in your {title}"

    # --- Views ---
    VIEWS: list[dict[str, str]] = [
        {"id": "products", "label": "Browse"},
        {"id": "messages", "label": "Messages"},
        {"id": "profile", "label": "Profile"},
        {"id": "upload", "label": "Sell"},
    ]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
