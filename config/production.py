import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timekeeping_db"),
}

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s %(levelname)s %(name)s: %(message)s")

OVERTIME_EXPIRATION_DAYS = int(os.getenv("OVERTIME_EXPIRATION_DAYS", "180"))
TIME_BANK_EXPIRY_WARNING_DAYS = int(os.getenv("TIME_BANK_EXPIRY_WARNING_DAYS", "30"))
BUSINESS_DAYS_PER_WEEK = int(os.getenv("BUSINESS_DAYS_PER_WEEK", "5"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
