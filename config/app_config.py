import os
from dotenv import load_dotenv

load_dotenv()

# Auth
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your-secret-key-here")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", 60 * 24 * 7))
JWT_REFRESH_EXPIRE_DAYS = int(os.getenv("JWT_REFRESH_EXPIRE_DAYS", 30))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

# CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:8080,http://localhost:8081,http://localhost:3000",
    ).split(",")
    if origin.strip()
]

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50

# Messaging
MESSAGE_HISTORY_LIMIT = int(os.getenv("MESSAGE_HISTORY_LIMIT", 100))

# Venue dashboard
ACTIVITY_FEED_LIMIT = int(os.getenv("ACTIVITY_FEED_LIMIT", 20))

# Campaign housekeeping worker
SCHEDULER_INTERVAL_MINUTES = int(os.getenv("SCHEDULER_INTERVAL_MINUTES", 15))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
