# backend/salesboard/__init__.py
from functools import partial

from flask import Flask, request

from .config import Config
from .extensions import db


def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    # Visibility maps and projected rows are ordered by column
    app.json.sort_keys = False

    # Initialize extensions
    db.init_app(app)

    # Import models so create_all sees every table
    from . import models  # noqa: F401
    from .seed import seed_demo_data, seed_customer_visibility

    with app.app_context():
        db.create_all()
        if app.config.get("SEED_DEMO_DATA"):
            seed_demo_data()
        else:
            seed_customer_visibility()
            db.session.commit()

    # Background AI analysis, one job per admin session
    from .services.analysis_service import AnalysisRunner, summarize

    if not app.config.get("GEMINI_API_KEY"):
        app.logger.warning(
            "Gemini API key not found. AI features will be disabled. "
            "Please set the GEMINI_API_KEY (or API_KEY) environment variable."
        )
    summarizer = partial(
        summarize,
        api_key=app.config.get("GEMINI_API_KEY"),
        model=app.config.get("GEMINI_MODEL"),
        logger=app.logger,
    )
    app.extensions["analysis_runner"] = AnalysisRunner(summarizer=summarizer, logger=app.logger)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.records import records_bp
    from .routes.visibility import visibility_bp
    from .routes.users import users_bp
    from .routes.customer import customer_bp
    from .routes.analysis import analysis_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(records_bp)
    app.register_blueprint(visibility_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(customer_bp)
    app.register_blueprint(analysis_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config.get("CORS_ALLOWED_ORIGINS", set()):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
