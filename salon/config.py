import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./salon.db")

# CORS origins for the booking front-end and the admin calendar
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000"
).split(",")

# Salon-wide defaults, copied into the SalonConfig row the first time it is read
DEFAULT_CANCELLATION_WINDOW_HOURS = int(os.getenv("DEFAULT_CANCELLATION_WINDOW_HOURS", "12"))
STRICT_RESIZE = os.getenv("STRICT_RESIZE", "false").lower() == "true"

# Calendar granularity
SLOT_INTERVAL_MINUTES = 15
MIN_APPOINTMENT_MINUTES = 15
MAX_BLOCK_MINUTES = 480
MAX_APPOINTMENT_MINUTES = 24 * 60

# Duration assumed for appointments whose service record cannot be resolved
UNKNOWN_SERVICE_FALLBACK_MINUTES = int(os.getenv("UNKNOWN_SERVICE_FALLBACK_MINUTES", "60"))

# One loyalty point per this many currency units spent
LOYALTY_POINTS_DIVISOR = int(os.getenv("LOYALTY_POINTS_DIVISOR", "10"))

# Max seconds a writer waits for a professional/day calendar lock
LOCK_TIMEOUT_SECONDS = float(os.getenv("LOCK_TIMEOUT_SECONDS", "10"))
