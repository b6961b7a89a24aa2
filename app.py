from flask import Flask, jsonify
from dotenv import load_dotenv
import os
from extensions import db, migrate, login_manager
from errors import register_error_handlers
from logging_config import setup_logging, get_logger

logger = get_logger(__name__)


def create_app(overrides=None):
    # Setup Flask
    load_dotenv()

    app = Flask(__name__)
    app.config['SECRET_KEY'] = os.getenv("SECRET_KEY", "secret_key")
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv("DATABASE_URL", "sqlite:///cardoo.db")
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Excess claim documents
    app.config["UPLOAD_FOLDER_DOCUMENTS"] = os.getenv(
        "UPLOAD_FOLDER_DOCUMENTS",
        os.path.join(os.path.dirname(__file__), "static", "uploads", "documents"),
    )
    app.config["MAX_DOCUMENT_SIZE"] = int(os.getenv("MAX_DOCUMENT_SIZE", 10 * 1024 * 1024))  # 10MB/file
    app.config["MAX_CONTENT_LENGTH"] = 5 * app.config["MAX_DOCUMENT_SIZE"] + 1024 * 1024  # five files + form
    app.config["EXCESS_WINDOW_DAYS"] = int(os.getenv("EXCESS_WINDOW_DAYS", 60))

    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO")
    app.config["LOG_FORMAT"] = os.getenv("LOG_FORMAT", "standard")

    if overrides:
        app.config.update(overrides)

    setup_logging(app.config["LOG_LEVEL"], app.config["LOG_FORMAT"])

    # Init db, migrate, login
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Import models after db is ready
    from models import Account

    @login_manager.user_loader
    def load_user(account_id):
        return db.session.get(Account, int(account_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Unauthorized"}), 401

    register_error_handlers(app)

    # Blueprints
    from blueprints.auth.routes import auth_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")

    from blueprints.bookings.routes import bookings_bp
    app.register_blueprint(bookings_bp, url_prefix="/bookings")

    from blueprints.excesses.routes import excesses_bp
    app.register_blueprint(excesses_bp, url_prefix="/excesses")

    from blueprints.finance.routes import finance_bp
    app.register_blueprint(finance_bp, url_prefix="/finance")

    from blueprints.bank_cards.routes import bank_cards_bp
    app.register_blueprint(bank_cards_bp, url_prefix="/bank-cards")

    from blueprints.notifications.routes import notifications_bp
    app.register_blueprint(notifications_bp, url_prefix="/notifications")

    from blueprints.admin.routes import admin_bp
    app.register_blueprint(admin_bp, url_prefix="/admin")

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    logger.info("Cardoo app created (db=%s)", app.config["SQLALCHEMY_DATABASE_URI"].split("://", 1)[0])
    return app


if __name__ == "__main__":
    create_app().run(debug=True)
