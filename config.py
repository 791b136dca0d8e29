# config.py
import os
from dotenv import load_dotenv

load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DB = os.getenv("MONGODB_DB", "prompt_course_db")
# "mongo" or "memory"
STORE_BACKEND = os.getenv("STORE_BACKEND", "mongo").lower()

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Per-batch write limit of the document store
BATCH_WRITE_LIMIT = int(os.getenv("BATCH_WRITE_LIMIT", "500"))
BULK_IMPORT_MAX_DOCS = int(os.getenv("BULK_IMPORT_MAX_DOCS", "500"))

DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
SEARCH_SCAN_LIMIT = int(os.getenv("SEARCH_SCAN_LIMIT", "200"))

# "desc" lists the most recently created lesson first
ENGAGEMENT_ORDER = os.getenv("ENGAGEMENT_ORDER", "desc").lower()

ROADMAP_UNLOCK_THRESHOLD = int(os.getenv("ROADMAP_UNLOCK_THRESHOLD", "50"))

REPORT_MESSAGE_MAX_LENGTH = int(os.getenv("REPORT_MESSAGE_MAX_LENGTH", "5000"))
