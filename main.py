from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from auth import verifier_from_config
from errors import AppError
from models import db
from storage import create_storage
from utils import logger, setup_logger

from auth_routes import auth_bp
from event_routes import events_bp
from harambee_routes import harambees_bp
from rental_routes import rentals_bp
from alert_routes import alerts_bp


def create_app(config_object='config.Config', storage=None, token_verifier=None):
    app = Flask(__name__)
    app.config.from_object(config_object)
    setup_logger(level=app.config.get('LOG_LEVEL', 'INFO'))

    CORS(app, supports_credentials=True, origins=app.config['CORS_ORIGINS'])

    backend = app.config['STORAGE_BACKEND']
    if backend == 'sql':
        db.init_app(app)
        with app.app_context():
            db.create_all()

    app.extensions['storage'] = storage or create_storage(backend)
    app.extensions['token_verifier'] = token_verifier or verifier_from_config(app.config)

    for blueprint in (auth_bp, events_bp, harambees_bp, rentals_bp, alerts_bp):
        app.register_blueprint(blueprint, url_prefix='/api')

    register_error_handlers(app)

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({"name": "Jamii Connect API", "status": "ok", "storage": backend})

    logger.info(f"Application ready with {backend} storage")
    return app


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(error):
        if error.status_code >= 500:
            logger.error(f"Request failed: {error.message}")
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f"Unhandled error: {error}")
        return jsonify({"message": "Internal server error"}), 500


if __name__ == "__main__":
    create_app('config.DevelopmentConfig').run(debug=True)
