import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./moment.db")

# "sql" keeps documents in DATABASE_URL, "firestore" uses the Firebase project
STORE_BACKEND = os.getenv("STORE_BACKEND", "sql").lower()

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
# Path to a service account JSON file; Application Default Credentials otherwise
FIREBASE_CREDENTIALS_PATH = os.getenv("FIREBASE_CREDENTIALS_PATH")

# Shared secret for the initial admin bootstrap (POST /auth/set-admin/{uid})
ADMIN_SECRET = os.getenv("ADMIN_SECRET")

# Cloudflare R2 Configuration
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "moment")
# Public bucket domain (e.g. https://media.moment.events); presigned URLs are used when unset
R2_PUBLIC_URL = os.getenv("R2_PUBLIC_URL", "").rstrip("/")

MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))
MAX_UPLOAD_FILES = 10

# Reject unknown statuses and illegal transitions on bookings and providers.
# Set to false to accept any status string.
ENFORCE_STATUS_TRANSITIONS = os.getenv("ENFORCE_STATUS_TRANSITIONS", "true").lower() == "true"

# Frontend base URL (used for CORS defaults)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    f"{FRONTEND_URL},http://localhost:3001,http://localhost:3002",
).split(",")

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
