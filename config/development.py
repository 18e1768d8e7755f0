import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "epf_payroll"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

ETF_RATE = os.getenv("ETF_RATE", "0.03")
OT_MULTIPLIER = os.getenv("OT_MULTIPLIER", "1.5")
# nearest_start | first
SHIFT_SELECTION = os.getenv("SHIFT_SELECTION", "nearest_start")
# Unset means random OT is not reproducible between runs
RANDOM_SEED = os.getenv("RANDOM_SEED")
MAX_SHIFT_SPAN_HOURS = int(os.getenv("MAX_SHIFT_SPAN_HOURS", "20"))

GENERATION_MAX_WORKERS = int(os.getenv("GENERATION_MAX_WORKERS", "4"))
GENERATION_TIMEOUT_BASE_SECONDS = float(os.getenv("GENERATION_TIMEOUT_BASE_SECONDS", "10"))
GENERATION_TIMEOUT_PER_EMPLOYEE_SECONDS = float(os.getenv("GENERATION_TIMEOUT_PER_EMPLOYEE_SECONDS", "0.5"))

REFERENCE_LOOKUP_URL = os.getenv("REFERENCE_LOOKUP_URL", "https://www.cbsl.lk/EPFCRef/")
REFERENCE_LOOKUP_TIMEOUT = float(os.getenv("REFERENCE_LOOKUP_TIMEOUT", "15"))
