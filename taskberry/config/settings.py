# taskberry/config/settings.py
# Runtime configuration for the Taskberry API

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings read from the environment"""

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskberry.db")
    DATABASE_SSLMODE = os.getenv("DATABASE_SSLMODE")  # e.g. "require" on Render

    # Bearer tokens are issued by the identity service; we only verify them
    AUTH = {
        'secret_key': os.getenv('SECRET_KEY', 'change-me'),
        'algorithm': os.getenv('ALGORITHM', 'HS256'),
        'access_token_expire_minutes': int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', 60 * 24)),
    }

    # Server
    SERVER = {
        'host': os.getenv('HOST', '0.0.0.0'),
        'port': int(os.getenv('PORT', '8000')),
        'reload': os.getenv('RELOAD', 'true').lower() == 'true',
        'log_level': os.getenv('LOG_LEVEL', 'INFO').upper(),
    }

    # First super admin, created by create_tables.py
    BOOTSTRAP = {
        'super_admin_name': os.getenv('SUPER_ADMIN_NAME', 'Super Admin'),
        'super_admin_email': os.getenv('SUPER_ADMIN_EMAIL', 'admin@example.com'),
    }

    DEFAULT_CORS_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]

    @classmethod
    def get_cors_origins(cls) -> List[str]:
        """Get allowed CORS origins, falling back to local development hosts"""
        raw = os.getenv('CORS_ORIGINS', '')
        origins = [origin.strip() for origin in raw.split(',') if origin.strip()]
        return origins or cls.DEFAULT_CORS_ORIGINS

    @classmethod
    def is_sqlite(cls) -> bool:
        return cls.DATABASE_URL.startswith("sqlite")


settings = Settings()
