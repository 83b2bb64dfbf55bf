import os

# ✅ Environment
APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# Empty LOG_DIR logs to the console only
LOG_DIR = os.getenv("LOG_DIR", "logs")
API_PREFIX = os.getenv("API_PREFIX", "/api")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./content_agent.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
SESSION_TTL_DAYS = int(os.getenv("SESSION_TTL_DAYS", "7"))

# ✅ Auth rate limiting (per client IP)
AUTH_RATE_LIMIT_REQUESTS = int(os.getenv("AUTH_RATE_LIMIT_REQUESTS", "20"))
AUTH_RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("AUTH_RATE_LIMIT_WINDOW_SECONDS", "60"))
# Only honour X-Forwarded-For behind a proxy that overwrites it
TRUST_PROXY_HEADERS = os.getenv("TRUST_PROXY_HEADERS", "0") == "1"

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_TEXT_MODEL = os.getenv("OPENAI_TEXT_MODEL", "gpt-4o-mini")
OPENAI_IMAGE_MODEL = os.getenv("OPENAI_IMAGE_MODEL", "dall-e-3")
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "60"))

# ✅ Mock generation (used when no API key is configured)
AI_MOCK_MODE = os.getenv("AI_MOCK_MODE", "0") == "1" or not OPENAI_API_KEY
MOCK_DELAY_MIN_SECONDS = float(os.getenv("MOCK_DELAY_MIN_SECONDS", "0.5"))
MOCK_DELAY_MAX_SECONDS = float(os.getenv("MOCK_DELAY_MAX_SECONDS", "1.5"))


def is_production() -> bool:
    return APP_ENV.lower() == "production"
