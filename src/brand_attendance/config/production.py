import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "24"))

DATA_DIR = os.getenv("DATA_DIR", "databases")
DB_CONFIG = {
    "data_dir": DATA_DIR,
    "attendance_db": os.getenv("ATTENDANCE_DB", "attendance.db"),
    "auth_db": os.getenv("AUTH_DB", "auth.db"),
}

BRANDS_DIR = os.getenv("BRANDS_DIR") or None
BRAND = os.getenv("BRAND") or None
BRAND_SELECTION_FILE = os.getenv("BRAND_SELECTION_FILE", os.path.join(DATA_DIR, "brand-selection.json"))

BACKUP_RETENTION = {
    "daily": int(os.getenv("BACKUP_RETENTION_DAILY", "7")),
    "weekly": int(os.getenv("BACKUP_RETENTION_WEEKLY", "4")),
    "monthly": int(os.getenv("BACKUP_RETENTION_MONTHLY", "12")),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
DEMO_MODE = False
