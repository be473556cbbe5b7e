from flask import Flask

from govdash.config import Config
from govdash.errors import register_error_handlers
from govdash.extensions import db, migrate
from govdash.routes import register_routes
from govdash.seed import register_seed_command


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    migrate.init_app(app, db)

    register_error_handlers(app)
    register_routes(app)
    register_seed_command(app)
    return app


__all__ = ["db", "migrate", "create_app"]
