import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "pecc_time_test"),
}

SERVER_PORT = 3001

API_BASE_URL = "http://testserver/api"
REMOTE_TIMEOUT_SECONDS = 1.0
ASSISTANT_TIMEOUT_SECONDS = 1.0
LOCAL_CACHE_DIR = os.getenv("LOCAL_CACHE_DIR", ".pecc_time_test_cache")

GOOGLE_API_KEY = None

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
