"""Application factory and blueprint registration."""
from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from supabase import Client

from .api.account.routes import bp as account_bp
from .api.articles.routes import bp as articles_bp
from .api.auth.routes import bp as auth_bp
from .api.community.routes import bp as community_bp
from .api.feed.routes import bp as feed_bp
from .api.health.routes import bp as health_bp
from .api.profiles.routes import bp as profiles_bp
from .api.write.routes import bp as write_bp
from .config import BaseConfig
from .docs.routes import bp as docs_bp
from .errors import register_error_handlers
from .integrations.supabase_client import supabase_ext
from .logger import setup_logging
from .state import init_state


def create_app(config: BaseConfig | None = None, supabase_client: Client | None = None) -> Flask:
    """Create and configure the Flask application.

    ``supabase_client`` replaces the client built from configuration; the
    session store is started before the app is returned.
    """
    config = config or BaseConfig()
    config.validate()
    setup_logging(config.LOG_LEVEL)

    app = Flask(__name__)
    app.config.from_object(config)
    CORS(app, resources={r"/api/*": {"origins": config.FRONTEND_ORIGIN}})

    # Init extensions
    supabase_ext.init_app(app, client=supabase_client)
    init_state(app)

    # Register blueprints
    app.register_blueprint(health_bp, url_prefix="/api/health")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(feed_bp, url_prefix="/api")
    app.register_blueprint(account_bp, url_prefix="/api")
    app.register_blueprint(articles_bp, url_prefix="/api/articles")
    app.register_blueprint(write_bp, url_prefix="/api/write")
    app.register_blueprint(profiles_bp, url_prefix="/api/profiles")
    app.register_blueprint(community_bp, url_prefix="/api/community")
    app.register_blueprint(docs_bp)

    # Global error handlers
    register_error_handlers(app)
    return app
