from flask import Flask
from dotenv import load_dotenv
import logging
import os

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from extensions import db  # noqa: E402  (load_dotenv needs to run first)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(app: Flask) -> None:
    """Route store events to ``LOG_FILE`` (if set) at ``LOG_LEVEL``."""

    catalog_logger = logging.getLogger("catalog")
    catalog_logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    log_file = app.config.get("LOG_FILE")
    if not log_file:
        return
    log_path = os.path.abspath(log_file)
    for handler in catalog_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == log_path:
            return
    handler = logging.FileHandler(log_path)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    catalog_logger.addHandler(handler)


def create_app(overrides=None) -> Flask:
    """Application factory for the component catalog."""

    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    _configure_logging(app)

    # init extensions
    db.init_app(app)

    from catalog.components import EXTENSION_KEY, build_store
    app.extensions[EXTENSION_KEY] = build_store(app.config["COMPONENT_STORE"])
    app.logger.info("Component store backend: %s", app.config["COMPONENT_STORE"])

    # DB
    with app.app_context():
        # Важно: модели должны быть импортированы до create_all()
        from catalog.components import models as component_models  # noqa: F401

        db.create_all()

    return app
