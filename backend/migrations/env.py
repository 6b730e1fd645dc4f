from __future__ import annotations
from logging.config import fileConfig
from pathlib import Path
import sys

from alembic import context
from sqlalchemy import engine_from_config, pool

BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.append(str(BACKEND_DIR))

from tableside.config.settings import Settings  # noqa: E402
from tableside.models.base import Base  # noqa: E402
import tableside.models.vendor  # noqa: E402,F401
import tableside.models.menu_item  # noqa: E402,F401
import tableside.models.order  # noqa: E402,F401
import tableside.models.audit  # noqa: E402,F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Same DATABASE_URL resolution (.env, then environment) as the running app
config.set_main_option('sqlalchemy.url', Settings.from_env().database_url)
target_metadata = Base.metadata


def run_offline(url: str):
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()


def run_online():
    engine = engine_from_config(config.get_section(config.config_ini_section), prefix='sqlalchemy.', poolclass=pool.NullPool)
    with engine.connect() as connection:
        # batch mode lets ALTERs run on SQLite, the default backend
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline(config.get_main_option('sqlalchemy.url'))
else:
    run_online()
