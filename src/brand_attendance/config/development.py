import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "24"))

DATA_DIR = os.getenv("DATA_DIR", "databases")
DB_CONFIG = {
    "data_dir": DATA_DIR,
    "attendance_db": os.getenv("ATTENDANCE_DB", "attendance.db"),
    "auth_db": os.getenv("AUTH_DB", "auth.db"),
}

# Brand JSON lives in the package unless BRANDS_DIR points elsewhere.
BRANDS_DIR = os.getenv("BRANDS_DIR") or None
BRAND = os.getenv("BRAND") or None
BRAND_SELECTION_FILE = os.getenv("BRAND_SELECTION_FILE", os.path.join(DATA_DIR, "brand-selection.json"))

BACKUP_RETENTION = {
    "daily": int(os.getenv("BACKUP_RETENTION_DAILY", "7")),
    "weekly": int(os.getenv("BACKUP_RETENTION_WEEKLY", "4")),
    "monthly": int(os.getenv("BACKUP_RETENTION_MONTHLY", "12")),
}

DEBUG = True

# If enabled, app creates tables and runs pending migrations on startup (idempotent).
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Seed default groups, roles, admin user and time codes.
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
# Wipe employees/entries/allocations and load demo rows.
DEMO_MODE = bool(int(os.getenv("DEMO_MODE", "0")))
