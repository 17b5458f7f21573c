import logging
import os
from contextlib import contextmanager

from flask import Flask

from nutristore.extensions import db, migrate
from nutristore.config import engine_options
from nutristore import models  # noqa: F401  (registers tables on db.metadata)

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "migrations")


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object("nutristore.config.Config")

    if test_config:
        app.config.update(test_config)
        if "SQLALCHEMY_DATABASE_URI" in test_config and "SQLALCHEMY_ENGINE_OPTIONS" not in test_config:
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options(app.config["SQLALCHEMY_DATABASE_URI"])

    logging.getLogger("nutristore").setLevel(app.config["LOG_LEVEL"])

    # Initialize database
    db.init_app(app)

    # Initialize Flask-Migrate
    migrate.init_app(app, db, directory=MIGRATIONS_DIR)

    return app


@contextmanager
def open_store(test_config=None, create_schema=False):
    """
    Open an isolated store for the duration of a ``with`` block.

    The database connection is released when the block exits, even on error.
    """
    app = create_app(test_config)
    with app.app_context():
        try:
            if create_schema:
                db.create_all()
            yield app
        finally:
            db.session.remove()
            db.engine.dispose()
