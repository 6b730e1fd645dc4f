from __future__ import annotations
"""Process-level settings.

Built once at startup and handed to ``create_app``; the JWT secret lives here
and nowhere else.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict
import os

from dotenv import load_dotenv

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    database_url: str = 'sqlite:///tableside.db'
    default_page_limit: int = DEFAULT_LIMIT
    max_page_limit: int = MAX_LIMIT
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, **overrides: Any) -> 'Settings':
        load_dotenv()
        settings = cls(
            jwt_secret_key=os.getenv('JWT_SECRET_KEY', 'dev-secret'),
            database_url=os.getenv('DATABASE_URL', 'sqlite:///tableside.db'),
            default_page_limit=int(os.getenv('PAGE_LIMIT_DEFAULT', DEFAULT_LIMIT)),
            max_page_limit=int(os.getenv('PAGE_LIMIT_MAX', MAX_LIMIT)),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        )
        return replace(settings, **overrides) if overrides else settings

    def to_flask_config(self) -> Dict[str, Any]:
        return {
            'JWT_SECRET_KEY': self.jwt_secret_key,
            'DATABASE_URL': self.database_url,
            'PAGE_LIMIT_DEFAULT': self.default_page_limit,
            'PAGE_LIMIT_MAX': self.max_page_limit,
        }


def normalize_pagination(limit_raw, offset_raw, default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT):
    try:
        limit = int(limit_raw) if limit_raw is not None else default_limit
        offset = int(offset_raw) if offset_raw is not None else 0
    except ValueError:
        raise ValueError('limit/offset must be int')
    limit = max(1, min(limit, max_limit))
    offset = max(0, offset)
    return limit, offset


__all__ = ['Settings', 'normalize_pagination', 'DEFAULT_LIMIT', 'MAX_LIMIT']
