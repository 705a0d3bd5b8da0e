"""
Development server: ``python -m api``.

Production runs the same factory under a multi-worker WSGI server, e.g.
``gunicorn "api:create_app()"``.
"""
import logging
import os
import sys

from . import create_app
from utils.security import ConfigurationError

log = logging.getLogger("api")


def main() -> int:
    try:
        app = create_app(os.getenv("APP_ENV"))
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.ERROR)
        log.error("Failed to start the application: %s", exc)
        return 1

    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("PORT", os.getenv("FLASK_RUN_PORT", "8000")))
    debug = os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", False))).lower() in ("1", "true", "yes")
    log.info("Serving on http://%s:%d", host, port)
    # threaded: argon2 hashing blocks only the request's own thread
    app.run(host=host, port=port, debug=debug, threaded=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
