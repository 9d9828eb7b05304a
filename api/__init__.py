import logging

from flask import Flask, current_app
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)
from services.member_service import MemberService
from utils.security import Argon2PasswordEncoder

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Member API",
        "version": "1.0.0",
        "description": "REST API for member registration, profiles and JWT authentication.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

password_encoder = Argon2PasswordEncoder()

logger = logging.getLogger(__name__)


def undelivered_temp_password(login_id: str, email: str, password: str) -> None:
    """Default delivery hook: nothing is sent, so the temporary password is lost."""
    logger.warning("No delivery configured; temporary password for %s was not sent", login_id)


def get_member_service() -> MemberService:
    """The MemberService bound to the current app."""
    return current_app.extensions["member_service"]


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Each call rebinds the shared storage to the configured DATABASE_URL.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))

    storage.reload(app.config["DATABASE_URL"], echo=app.config.get("SQLALCHEMY_ECHO", False))
    app.extensions["member_service"] = MemberService.from_app(app, storage, password_encoder)
    # Called as send_temp_password(login_id, email, password); replace to plug in mail delivery
    app.extensions.setdefault("send_temp_password", undelivered_temp_password)
    if app.config.get("ADMIN_PASSWORD"):
        app.extensions["member_service"].seed_admin(app.config["ADMIN_PASSWORD"], app.config.get("ADMIN_EMAIL"))
        storage.close()

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    from .health import bp as health_bp
    from .members import bp as members_bp
    from .auth import bp as auth_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(members_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Member API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
