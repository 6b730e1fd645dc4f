from __future__ import annotations
from datetime import datetime, timezone
import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
