import logging
import os
import sys
from dotenv import load_dotenv

# Loads the environment from DOTENV_PATH, or .env by default
# Example:
# export FLASK_APP=app.py
# export FLASK_ENV=production
# export DOTENV_PATH=.env.prod

load_dotenv(dotenv_path=os.getenv("DOTENV_PATH", ".env"), override=True)

from flask import Flask
from config import DevelopmentConfig, TestingConfig, ProductionConfig
from models import db
from flask_migrate import Migrate
from blueprints import register_blueprints
from errors import register_error_handlers

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def configure_logging(level):
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=log_level, handlers=[handler])

def select_config():
    env = os.getenv("FLASK_ENV", "production")
    if env == "development":
        return DevelopmentConfig
    if env == "testing":
        return TestingConfig
    return ProductionConfig

def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or select_config())

    configure_logging(app.config["LOG_LEVEL"])
    db.init_app(app)
    Migrate(app, db)
    register_error_handlers(app)
    register_blueprints(app)

    logging.getLogger(__name__).info("App created (env=%s)", os.getenv("FLASK_ENV", "production"))
    return app

if __name__ == '__main__':
    create_app().run(host="0.0.0.0", port=5001, debug=True)
