import os
from pathlib import Path

# Project root = repository checkout
PROJECT_ROOT = Path(__file__).resolve().parents[2]

DATA_DIR = PROJECT_ROOT / "data"
RECIPES_DB = Path(os.getenv("RECIPES_DB", str(DATA_DIR / "recipes.sqlite3")))

# --- Version / build metadata (override via systemd env) ---
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
GIT_SHA = os.getenv("GIT_SHA", "unknown")
BUILD_DATE = os.getenv("BUILD_DATE", "unknown")

# --- HTTP surface ---
API_PREFIX = os.getenv("API_PREFIX", "").rstrip("/")
CORS_ORIGINS = [s.strip() for s in os.getenv("CORS_ORIGINS", "*").split(",") if s.strip()]

# Page size used when the client sends no usable `limit`
LIST_DEFAULT_LIMIT = int(os.getenv("LIST_DEFAULT_LIMIT", "10"))
SEARCH_DEFAULT_LIMIT = int(os.getenv("SEARCH_DEFAULT_LIMIT", "15"))

# Upper bound for a single store round-trip (seconds)
STORE_TIMEOUT_S = float(os.getenv("STORE_TIMEOUT_S", "5"))

IMPORT_BATCH_SIZE = int(os.getenv("IMPORT_BATCH_SIZE", "100"))
