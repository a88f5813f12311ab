import logging

from flask import Flask, jsonify

from library_app.config import Config
from library_app.extensions import db, migrate, jwt, mail

from library_app.controllers.web_controller import web_bp
from library_app.controllers.web_api_controller import web_api_bp
from library_app.db_objects_mssql import ensure_db_objects_mssql


def create_app(config_object=Config, overrides=None):
    app = Flask(__name__)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # 1) db first, models registered on the metadata
    db.init_app(app)
    from library_app.models import (  # noqa: F401
        author, book, borrow_request, category, favorite, notification_log, publisher, review, user
    )

    # 2) database-side guards (MSSQL only)
    ensure_db_objects_mssql(app)

    # 3) other extensions
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)

    # 4) web/UI blueprints
    from library_app.controllers.admin_author_controller import admin_authors_bp
    from library_app.controllers.auth_controller import auth_bp, auth_api_bp
    from library_app.controllers.author_controller import authors_bp
    from library_app.controllers.book_controller import books_bp
    from library_app.controllers.user_controller import users_bp
    app.register_blueprint(web_bp)
    app.register_blueprint(web_api_bp)
    app.register_blueprint(books_bp)
    app.register_blueprint(authors_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(admin_authors_bp)

    # 5) token based API blueprints
    from library_app.controllers.catalog_controller import catalog_bp
    from library_app.controllers.notification_controller import notif_bp
    app.register_blueprint(auth_api_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(notif_bp)

    @app.context_processor
    def inject_current_user():
        from library_app.services.borrow_cart import BorrowCart
        from library_app.utils.auth import current_user
        return {"current_user": current_user(), "borrow_cart": BorrowCart()}

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    # return reminders
    from library_app.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
