import os
from dotenv import load_dotenv

# Load environment variables from the .env file located in the project root
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), '..', '.env'))

# Runtime environment ("development" or "production")
APP_ENV = os.getenv("APP_ENV", "development")

# Session tokens
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-in-production")
JWT_ALGORITHM = "HS256"
TOKEN_TTL_DAYS = int(os.getenv("TOKEN_TTL_DAYS", "7"))

# Single admin account
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@fireguard.com")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")
DEV_ADMIN_PASSWORD = "admin123"

# Google Sheets store
GOOGLE_SHEETS_ID = os.getenv("GOOGLE_SHEETS_ID")
GOOGLE_SERVICE_ACCOUNT_EMAIL = os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL")
GOOGLE_PRIVATE_KEY = os.getenv("GOOGLE_PRIVATE_KEY")
SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Accept enquiries without persisting them when no store is configured (demo only)
ALLOW_UNPERSISTED_ENQUIRIES = os.getenv("ALLOW_UNPERSISTED_ENQUIRIES", "false").lower() in ("1", "true", "yes")

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:8501")
API_VERSION = "1.0.0"

# Bind address for the `fireguard-api` command
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

# Validation rules
PHONE_REGEX = r"^[6-9][0-9]{9}$"
NOTES_MAX_LENGTH = 500
MIN_PASSWORD_LENGTH = 6


def is_production() -> bool:
    return APP_ENV == "production"
