SECRET_KEY = "test-secret"

# Tests inject an in-memory store; no database is configured here.
DATABASE_URL = ""
DATABASE_SERVICE_KEY = ""

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
SESSION_COOKIE_SECURE = False

AUTO_INIT_DB = False
AUTO_SEED_DB = False
