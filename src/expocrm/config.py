"""
ExpoCRM Configuration

Configuration class for the ExpoCRM lead capture backend.
"""
import os
from pathlib import Path
from urllib.parse import quote_plus
from dotenv import load_dotenv

# Load .env file from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


class Config:
    """Configuration class for ExpoCRM API"""

    # Base paths
    BASE_DIR = Path(__file__).parent.parent.parent
    PACKAGE_DIR = Path(__file__).parent
    PROMPTS_DIR = PACKAGE_DIR / "prompts"

    # Database settings (hosted PostgreSQL)
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME", "expocrm")
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "")
    POSTGRES_DSN = os.getenv("POSTGRES_DSN", "")

    DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", "2"))
    DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", "10"))

    # API settings
    API_HOST = os.getenv("API_HOST", "127.0.0.1")
    API_PORT = int(os.getenv("API_PORT", "8100"))
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # LLM proxy (OpenAI-compatible, e.g. LiteLLM)
    LLM_BASE_URL = os.getenv("LLM_BASE_URL", "http://localhost:4000")
    LLM_API_KEY = os.getenv("LLM_API_KEY", "")
    DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "gemini-2.5-flash")
    VISION_MODEL = os.getenv("VISION_MODEL", DEFAULT_MODEL)
    AUDIO_MODEL = os.getenv("AUDIO_MODEL", DEFAULT_MODEL)
    LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "120"))

    # Web search (optional)
    TAVILY_API_KEY = os.getenv("TAVILY_API_KEY", "")
    TAVILY_BASE_URL = os.getenv("TAVILY_BASE_URL", "https://api.tavily.com")

    # JWT settings (tokens are issued by the hosted auth provider)
    JWT_SECRET = os.getenv("JWT_SECRET", "expocrm-secret-key-change-in-production")
    JWT_ALGORITHM = "HS256"
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

    # SMTP (sending email drafts)
    SMTP_HOST = os.getenv("SMTP_HOST", "")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER = os.getenv("SMTP_USER", "")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
    SMTP_FROM_NAME = os.getenv("SMTP_FROM_NAME", "ExpoCRM")

    # Business rules
    RESEARCH_CACHE_HOURS = int(os.getenv("RESEARCH_CACHE_HOURS", "24"))
    PROFILE_CACHE_SECONDS = int(os.getenv("PROFILE_CACHE_SECONDS", "300"))
    CAPTURE_MATCH_WINDOW_SECONDS = int(os.getenv("CAPTURE_MATCH_WINDOW_SECONDS", "30"))

    # Marketing asset retrieval (pgvector collection, Ollama embeddings)
    EMBEDDING_BASE_URL = os.getenv("EMBEDDING_BASE_URL", "")
    EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "nomic-embed-text-v2-moe:latest")
    VECTOR_PORT = os.getenv("VECTOR_PORT", DB_PORT)
    ASSET_COLLECTION = os.getenv("ASSET_COLLECTION", "marketing_assets")

    @staticmethod
    def get_postgres_dsn() -> str:
        """Get PostgreSQL DSN with password handling"""
        if Config.POSTGRES_DSN:
            return Config.POSTGRES_DSN
        if Config.DB_PASSWORD:
            password = quote_plus(Config.DB_PASSWORD)
            return f"postgresql://{Config.DB_USER}:{password}@{Config.DB_HOST}:{Config.DB_PORT}/{Config.DB_NAME}"
        return f"postgresql://{Config.DB_USER}@{Config.DB_HOST}:{Config.DB_PORT}/{Config.DB_NAME}"

    @staticmethod
    def get_vector_dsn() -> str:
        """Get the SQLAlchemy DSN (psycopg 3 driver) of the vector store"""
        if Config.POSTGRES_DSN:
            dsn = Config.POSTGRES_DSN
        elif Config.DB_PASSWORD:
            password = quote_plus(Config.DB_PASSWORD)
            dsn = f"postgresql://{Config.DB_USER}:{password}@{Config.DB_HOST}:{Config.VECTOR_PORT}/{Config.DB_NAME}"
        else:
            dsn = f"postgresql://{Config.DB_USER}@{Config.DB_HOST}:{Config.VECTOR_PORT}/{Config.DB_NAME}"
        for scheme in ("postgresql://", "postgres://"):
            if dsn.startswith(scheme):
                return "postgresql+psycopg://" + dsn[len(scheme):]
        return dsn
