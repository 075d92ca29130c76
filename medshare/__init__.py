import os
from flask import Flask
from config import config
from medshare.extensions import db, bcrypt, migrate, jwt, cors
from medshare.services import EXTENSION_KEY, build_services
from medshare.utils.error_handlers import register_error_handlers
from medshare.commands import register_commands

def create_app(config_name=None):
    """Application factory. A bad ENCRYPTION_KEY raises ConfigurationError here."""
    config_name = config_name or os.getenv('FLASK_CONFIG', 'default')
    config_class = config[config_name]

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    cors.init_app(app,
                  origins=app.config['ALLOWED_ORIGINS'],
                  allow_headers=['Content-Type', 'Authorization'],
                  methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'])

    config_class.init_app(app)

    # Models must be imported before create_all and migrations see them
    from medshare.models import account_models, contact_models, medical_models, system_models  # noqa: F401

    # Needs bcrypt initialized for the dummy digest
    app.extensions[EXTENSION_KEY] = build_services(app)

    # Register blueprints
    from medshare.api import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    # Register error handlers and commands
    register_error_handlers(app)
    register_commands(app)

    return app
