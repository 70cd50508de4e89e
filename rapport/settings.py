import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    # Optional shared key for every route (x-api-key). Empty disables the check.
    API_KEY: str = os.getenv("API_KEY", "")

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    # Every key the service writes lives under this namespace
    KEY_PREFIX: str = os.getenv("KEY_PREFIX", "rapport")

    # Accounts created with this key get the admin flag. Empty disables admin signup.
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

    # Session Context
    SESSION_HEADER: str = os.getenv("SESSION_HEADER", "x-session-token")
    SESSION_TTL_SEC: int = int(os.getenv("SESSION_TTL_SEC", str(7 * 24 * 3600)))
    # argon2id cost parameters (argon2-cffi defaults)
    PASSWORD_TIME_COST: int = int(os.getenv("PASSWORD_TIME_COST", "3"))
    PASSWORD_MEMORY_COST: int = int(os.getenv("PASSWORD_MEMORY_COST", "65536"))
    PASSWORD_PARALLELISM: int = int(os.getenv("PASSWORD_PARALLELISM", "4"))

    # Admin listings (verified users, verification requests)
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "50"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "500"))

    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"
    METRICS_ENABLED: bool = os.getenv("METRICS_ENABLED", "true").lower() == "true"

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

settings = Settings()
