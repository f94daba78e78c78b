from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

from extensions import db, migrate, jwt
from config import Config
from routes import register_blueprints
from services.session_service import register_jwt_callbacks
from utils.errors import register_error_handlers
from utils.logging_config import configure_logging

load_dotenv()  # charge les variables d'environnement depuis .env


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    CORS(app,
         origins=app.config["CORS_ORIGINS"],
         allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
         methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
         supports_credentials=True)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_jwt_callbacks(jwt)

    register_error_handlers(app)
    register_blueprints(app)

    app.logger.info("Application started (guard=%s)", app.config["GUARD_NAME"])
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, port=5001)
