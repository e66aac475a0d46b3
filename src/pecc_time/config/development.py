import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "pecc_time"),
}

SERVER_PORT = int(os.getenv("SERVER_PORT", "3001"))

# Client side: where the session talks to, and where it falls back to
API_BASE_URL = os.getenv("API_BASE_URL", f"http://localhost:{SERVER_PORT}/api")
REMOTE_TIMEOUT_SECONDS = float(os.getenv("REMOTE_TIMEOUT_SECONDS", "10"))
ASSISTANT_TIMEOUT_SECONDS = float(os.getenv("ASSISTANT_TIMEOUT_SECONDS", "15"))
LOCAL_CACHE_DIR = os.getenv("LOCAL_CACHE_DIR", ".pecc_time_cache")

GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")

DEBUG = True

# If enabled, the server applies schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo users on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
