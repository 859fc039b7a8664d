import os


def _csv(v: str):
    return [x.strip() for x in (v or "").split(",") if x.strip()]


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return int(v)


DEV_SECRET_KEY = "dev-secret-change-me"


class Config:
    # Flask 보안 키 (익명 세션 토큰 / 인증 토큰 서명에도 사용)
    SECRET_KEY = os.getenv("SECRET_KEY", DEV_SECRET_KEY)

    ENV = os.getenv("FLASK_ENV", "production")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///support_reply.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 280,
    }
    AUTO_CREATE_TABLES = _env_bool("AUTO_CREATE_TABLES", True)

    # 제공자(LLM)
    PROVIDER_DEFAULT = os.getenv("PROVIDER_DEFAULT", "openai").lower()
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
    CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-3-5-haiku-latest")
    UPSTREAM_TIMEOUT_SECONDS = _env_int("UPSTREAM_TIMEOUT_SECONDS", 15)
    COMPLETION_TEMPERATURE = float(os.getenv("COMPLETION_TEMPERATURE", "0.5"))
    COMPLETION_MAX_TOKENS = _env_int("COMPLETION_MAX_TOKENS", 400)

    # 익명 식별 쿠키
    ANON_COOKIE = os.getenv("ANON_COOKIE", "sr_anon")
    ANON_SESSION_TTL_SECONDS = _env_int("ANON_SESSION_TTL_SECONDS", 60 * 60 * 24 * 30)
    # memory | redis
    ANON_LEDGER_BACKEND = os.getenv("ANON_LEDGER_BACKEND", "memory").lower()

    # 인증 제공자 토큰
    AUTH_TOKEN_TTL_SECONDS = _env_int("AUTH_TOKEN_TTL_SECONDS", 60 * 60 * 24 * 7)

    # -------------------------
    # CORS
    # -------------------------
    CORS_ORIGINS = [o.rstrip("/") for o in _csv(os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    ))]

    # -------------------------
    # Rate limiting (Flask-Limiter 표준 키)
    # -------------------------
    REDIS_URL = os.getenv("REDIS_URL", "")
    RATELIMIT_STORAGE_URI = REDIS_URL if REDIS_URL else "memory://"
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "200 per hour")
    RATELIMIT_ENABLED = _env_bool("RATELIMIT_ENABLED", True)
    GENERATE_RATE_LIMIT = os.getenv("GENERATE_RATE_LIMIT", "60/minute")

    MAX_PAYLOAD_BYTES = 64 * 1024

    # /api/debug/* (pro 전환 등): 운영에서는 끈다
    DEBUG_ENDPOINTS_ENABLED = _env_bool("DEBUG_ENDPOINTS_ENABLED", False)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
