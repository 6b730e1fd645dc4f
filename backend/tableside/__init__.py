from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from typing import Optional, Dict, Any
import logging

from .config.settings import Settings
from .errors import OrderError

db_engine = None
SessionLocal = None
jwt = JWTManager()


def create_app(settings: Optional[Settings] = None, config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    settings = settings or Settings.from_env()
    app = Flask(__name__)

    app.config.update(settings.to_flask_config())
    app.config['SETTINGS'] = settings
    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    app.logger.setLevel(settings.log_level)
    logging.getLogger('tableside').setLevel(settings.log_level)

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)

    from .routes.orders import orders_bp
    app.register_blueprint(orders_bp, url_prefix='/orders')

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    @app.teardown_appcontext
    def remove_session(exc):  # type: ignore
        SessionLocal.remove()

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {
                'error': {
                    'status': e.code,
                    'title': e.name,
                    'detail': e.description,
                }
            }
            if isinstance(e, OrderError):
                payload['error']['type'] = e.type
            return payload, e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return {
            'error': {
                'status': 500,
                'title': 'Internal Server Error',
                'detail': 'Unexpected error'
            }
        }, 500

    return app


def get_db():
    return SessionLocal()
