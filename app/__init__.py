import logging

from flask import Flask, jsonify

from .config import Config
from .controllers.auth import bp as auth_bp
from .controllers.cars import bp as cars_bp
from .controllers.rentals import bp as rentals_bp
from .controllers.users import bp as users_bp
from .errors import register_error_handlers
from .models.store import Store
from .services.user_service import UserService


def create_app(config=None):
    """
    Application factory. `config` may be a settings class or a mapping of
    overrides applied on top of `Config`.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if isinstance(config, dict):
        app.config.update(config)
    elif config is not None:
        app.config.from_object(config)

    logging.basicConfig(format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger("app").setLevel(app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # load data.pkl or start empty
    store = Store.configure(app.config["DATA_PATH"], autosave=app.config["APP_ENV"] != "test")
    if app.config.get("ADMIN_EMAIL") and app.config.get("ADMIN_PASSWORD"):
        UserService.ensure_admin(app.config["ADMIN_EMAIL"], app.config["ADMIN_PASSWORD"], store=store)

    app.register_blueprint(auth_bp)
    app.register_blueprint(cars_bp)
    app.register_blueprint(rentals_bp)
    app.register_blueprint(users_bp)
    register_error_handlers(app)

    @app.get("/")
    def home():
        return jsonify({"success": True, "message": "Car Rental API is running"})

    return app
