import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"
LOG_FORMAT = os.getenv("LOG_FORMAT", "console" if DEBUG else "json").lower()

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS")
if not ALLOWED_ORIGINS_RAW:
    raise ValueError("ALLOWED_ORIGINS must be set in the environment")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",")
]

# Bank data aggregation provider
PROVIDER_BASE_URL = os.getenv(
    "PROVIDER_BASE_URL", "https://bankaccountdata.gocardless.com/api/v2/"
)
PROVIDER_SECRET_ID = os.getenv("PROVIDER_SECRET_ID")
PROVIDER_SECRET_KEY = os.getenv("PROVIDER_SECRET_KEY")
PROVIDER_TIMEOUT_SECONDS = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "30"))

TRANSACTIONS_LOOKBACK_DAYS = int(os.getenv("TRANSACTIONS_LOOKBACK_DAYS", "30"))
TRANSACTIONS_CACHE_TTL_SECONDS = int(os.getenv("TRANSACTIONS_CACHE_TTL_SECONDS", "300"))
