import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "epf_payroll_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

ETF_RATE = "0.03"
OT_MULTIPLIER = "1.5"
SHIFT_SELECTION = "nearest_start"
RANDOM_SEED = "test-seed"
MAX_SHIFT_SPAN_HOURS = 20

GENERATION_MAX_WORKERS = 4
GENERATION_TIMEOUT_BASE_SECONDS = 10.0
GENERATION_TIMEOUT_PER_EMPLOYEE_SECONDS = 0.5

REFERENCE_LOOKUP_URL = "https://www.cbsl.lk/EPFCRef/"
REFERENCE_LOOKUP_TIMEOUT = 5.0
