import os

SECRET_KEY = "test-secret"
JWT_SECRET = SECRET_KEY
JWT_EXPIRES_HOURS = 24

DATA_DIR = os.getenv("DATA_DIR", os.path.join("build", "test-databases"))
DB_CONFIG = {
    "data_dir": DATA_DIR,
    "attendance_db": "attendance.db",
    "auth_db": "auth.db",
}

BRANDS_DIR = os.getenv("BRANDS_DIR") or None
BRAND = os.getenv("BRAND") or None
BRAND_SELECTION_FILE = os.path.join(DATA_DIR, "brand-selection.json")

BACKUP_RETENTION = {"daily": 7, "weekly": 4, "monthly": 12}

DEBUG = False
TESTING = True

AUTO_INIT_DB = True
AUTO_SEED_DB = False
DEMO_MODE = False
