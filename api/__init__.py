import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .context import Container
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def swagger_template(app: Flask) -> dict:
    return {
        "swagger": "2.0",
        "info": {
            "title": "Boredom Busters API",
            "version": app.config["API_VERSION"],
            "description": "Discover and share activities. Authenticated with short-lived access "
                           "tokens and rotating refresh tokens.",
        },
        "basePath": "/",
        "schemes": ["http", "https"],
        "securityDefinitions": {
            "Bearer": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "Access token with the `Bearer ` prefix, e.g. \"Bearer eyJhbGciOi...\".",
            }
        },
    }


SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def configure_logging(app: Flask):
    """Root logging for the process; repeated app creation (tests) keeps the first handler."""
    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"), format=LOG_FORMAT)
    logging.getLogger().setLevel(app.config.get("LOG_LEVEL", "INFO"))


def register_blueprints(app: Flask):
    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .activities import bp as activities_bp

    prefix = app.config["API_PREFIX"]
    for blueprint in (health_bp, auth_bp, users_bp, activities_bp):
        app.register_blueprint(blueprint, url_prefix=prefix)


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory.

    Binds the shared DBStorage to the configured database and builds the
    service container. Raises ConfigurationError before serving anything
    when the token signing secrets are missing or identical.
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    configure_logging(app)

    storage.configure(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()
    app.extensions["container"] = Container(app.config, storage)

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})
    Swagger(app, template=swagger_template(app), config=SWAGGER_CONFIG)
    register_error_handlers(app)
    register_blueprints(app)

    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Boredom Busters API",
            "docs": "/apidocs/",
            "health": f"{app.config['API_PREFIX']}/health",
        }, 200

    log.info("Application created (env=%s, prefix=%s)", config_name or app.config.get("APP_ENV"),
             app.config["API_PREFIX"])
    return app
