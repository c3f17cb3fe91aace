import logging

from flask import Flask
from flask_cors import CORS

from core import config
from routes.annotations_api import annotations_bp
from routes.auth_api import auth_bp
from routes.bible_api import bible_bp
from routes.search_api import search_bp
from routes.status_api import status_bp
from routes.strongs_api import strongs_bp
from services.scripture import BibleStore, StoreError
from services.scripture.search import SEARCH_FAILED_NOTICE
from utils.app_services import STORE_KEY
from utils.errors import backend_unavailable

logger = logging.getLogger(__name__)


def create_app(overrides: dict = None) -> Flask:
    """
    Build the API app.

    Args:
        overrides: Config values replacing those from core.config
                   (tests pass BIBLE_DB_PATH, SECRET_KEY, ...)
    """
    app = Flask(__name__)

    # Needed for session cookies
    app.config.update(config.as_flask_config())
    if overrides:
        app.config.update(overrides)

    # CORS must support credentials for login sessions
    CORS(app, supports_credentials=True, origins=config.CORS_ORIGINS)

    # One store per app; routes reach it through utils.app_services
    app.extensions[STORE_KEY] = BibleStore(app.config["BIBLE_DB_PATH"])

    app.register_blueprint(status_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(bible_bp)
    app.register_blueprint(search_bp)
    app.register_blueprint(strongs_bp)
    app.register_blueprint(annotations_bp)

    @app.errorhandler(StoreError)
    def handle_store_error(e):
        logger.error(f"Backend failure: {e}")
        return backend_unavailable(str(e), notice=SEARCH_FAILED_NOTICE)

    logger.info(f"API ready, database {app.config['BIBLE_DB_PATH']}")
    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    create_app().run(host="127.0.0.1", port=5055)
