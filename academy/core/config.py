import logging
import sys

from academy.core.logging import InterceptHandler
from loguru import logger
from starlette.config import Config
from starlette.datastructures import Secret

# Load .env
config = Config(".env")

# Core App Settings
API_PREFIX = "/api"
VERSION = "0.1.0"

DEBUG: bool = config("DEBUG", cast=bool, default=False)
DESCRIPTION: str = config("DESCRIPTION", default="Student and member enrollment for the academy")
DOCS_URL: str = config("DOCS_URL", default="/api/docs")
PROJECT_NAME: str = config("PROJECT_NAME", default="academy-enrollment")

# JWT / Admin session
# Load SECRET_KEY as Starlette Secret, fallback default included
try:
    SECRET_KEY: Secret = config("SECRET_KEY", cast=Secret)
except Exception:
    SECRET_KEY = Secret("testsecretkey1234567890")

ALGORITHM: str = config("ALGORITHM", default="HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = config("ACCESS_TOKEN_EXPIRE_MINUTES", cast=int, default=30)
JWT_ISSUER: str = config("JWT_ISSUER", default="academy-enrollment")

ADMIN_PHONE: str = config("ADMIN_PHONE", default="")
ADMIN_PASSWORD: Secret = config("ADMIN_PASSWORD", cast=Secret, default="")
# argon2 hash; takes precedence over ADMIN_PASSWORD when set
ADMIN_PASSWORD_HASH: str = config("ADMIN_PASSWORD_HASH", default="")

# Database
DATABASE_URL: str = config("DATABASE_URL", default="")
DB_ECHO: bool = config("DB_ECHO", cast=bool, default=False)
CREATE_TABLES: bool = config("CREATE_TABLES", cast=bool, default=False)

# Connection Pooling
MAX_CONNECTIONS_COUNT: int = config("MAX_CONNECTIONS_COUNT", cast=int, default=10)
MIN_CONNECTIONS_COUNT: int = config("MIN_CONNECTIONS_COUNT", cast=int, default=5)

# Blob storage
BLOB_READ_WRITE_TOKEN: Secret = config("BLOB_READ_WRITE_TOKEN", cast=Secret, default="")
BLOB_API_URL: str = config("BLOB_API_URL", default="https://blob.vercel-storage.com")
BLOB_API_VERSION: str = config("BLOB_API_VERSION", default="7")
BLOB_ADD_RANDOM_SUFFIX: bool = config("BLOB_ADD_RANDOM_SUFFIX", cast=bool, default=True)
BLOB_TIMEOUT_SECONDS: float = config("BLOB_TIMEOUT_SECONDS", cast=float, default=30.0)

# Logging
LOGGING_LEVEL = logging.DEBUG if DEBUG else logging.INFO
logging.basicConfig(
    handlers=[InterceptHandler(level=LOGGING_LEVEL)],
    level=LOGGING_LEVEL,
)
logger.configure(handlers=[{"sink": sys.stderr, "level": LOGGING_LEVEL}])

if not DATABASE_URL:
    logger.error("DATABASE_URL is not defined in environment variables")
if not str(BLOB_READ_WRITE_TOKEN):
    logger.warning("BLOB_READ_WRITE_TOKEN is not defined; uploads will fail")
if not ADMIN_PHONE:
    logger.warning("ADMIN_PHONE is not defined; admin login is disabled")
