import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Backing store: connection URL + privileged key (the DB password).
DATABASE_URL = os.getenv("DATABASE_URL", "mysql://root@localhost:3306/laundryops")
DATABASE_SERVICE_KEY = os.getenv("DATABASE_SERVICE_KEY") or os.getenv("DATABASE_SERVICE_ROLE_KEY", "")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
SESSION_COOKIE_SECURE = bool(int(os.getenv("SESSION_COOKIE_SECURE", "0")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
