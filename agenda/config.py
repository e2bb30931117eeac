import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./agenda.db")

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Frontend base URL, also the default CORS origin
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", FRONTEND_URL).split(",")
    if origin.strip()
]

# Calendar defaults (HH:MM, 24h clock)
BUSINESS_HOURS_START = os.getenv("BUSINESS_HOURS_START", "08:00")
BUSINESS_HOURS_END = os.getenv("BUSINESS_HOURS_END", "18:00")
SLOT_INTERVAL_MINUTES = int(os.getenv("SLOT_INTERVAL_MINUTES", "30"))
WEEK_SLOT_INTERVAL_MINUTES = int(os.getenv("WEEK_SLOT_INTERVAL_MINUTES", "60"))
# "sunday" or "monday"
WEEK_STARTS_ON = os.getenv("WEEK_STARTS_ON", "sunday").lower()

# When false, any appointment status may be set from any other status
STRICT_STATUS_TRANSITIONS = os.getenv("STRICT_STATUS_TRANSITIONS", "true").lower() == "true"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
