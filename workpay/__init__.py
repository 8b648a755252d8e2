import logging
import os
from flask import Flask, request
from flask_babel import Babel
from flask_cors import CORS
from .models import db
from .errors import register_error_handlers

SUPPORTED_LOCALES = ['en']

DEFAULT_ALLOWED_ORIGINS = [
    'http://localhost:5173',  # Vite dev server
    'http://localhost:3000',
    'http://localhost:8081',
    'http://127.0.0.1:5173',
    'http://127.0.0.1:3000',
    'http://127.0.0.1:8081'
]


def get_locale():
    selected_locale = request.args.get('lang')
    if selected_locale in SUPPORTED_LOCALES:
        return selected_locale
    return request.accept_languages.best_match(SUPPORTED_LOCALES) or 'en'


def _allowed_origins():
    raw = os.getenv('ALLOWED_ORIGINS')
    if not raw:
        return DEFAULT_ALLOWED_ORIGINS
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


def create_app(test_config=None):
    app = Flask(__name__)

    # Load configurations
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv("DATABASE_URL", "sqlite:///workpay.db")
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['APP_ENV'] = os.getenv('APP_ENV', 'development')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO').upper()
    app.config['ALLOWED_ORIGINS'] = _allowed_origins()
    # 'zero' pays nothing for deactivated products, 'keep' uses their stored rate
    app.config['INACTIVE_PRODUCT_RATE'] = os.getenv('INACTIVE_PRODUCT_RATE', 'zero').lower()

    app.config['BABEL_DEFAULT_LOCALE'] = 'en'
    app.config['BABEL_SUPPORTED_LOCALES'] = SUPPORTED_LOCALES
    app.config['MAX_CONTENT_LENGTH'] = 10 * 1024 * 1024  # 10MB max request body

    if test_config:
        app.config.update(test_config)

    if app.config['INACTIVE_PRODUCT_RATE'] not in ('zero', 'keep'):
        raise ValueError("INACTIVE_PRODUCT_RATE must be 'zero' or 'keep'")

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    app.logger.setLevel(app.config['LOG_LEVEL'])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config['ALLOWED_ORIGINS']}},
        supports_credentials=True,
        methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
        allow_headers=['Content-Type', 'Authorization', 'Accept']
    )

    Babel(app, locale_selector=get_locale)

    # Initialize database
    db.init_app(app)

    @app.before_request
    def log_request():
        app.logger.debug("%s %s - Origin: %s", request.method, request.path, request.headers.get('Origin'))

    # Register blueprints
    from .routes import (main_blueprint, workers_blueprint, products_blueprint, expenses_blueprint,
                         production_blueprint, powerloom_blueprint, export_logs_blueprint,
                         settings_blueprint, reports_blueprint)
    app.register_blueprint(main_blueprint)
    app.register_blueprint(workers_blueprint)
    app.register_blueprint(products_blueprint)
    app.register_blueprint(expenses_blueprint)
    app.register_blueprint(production_blueprint)
    app.register_blueprint(powerloom_blueprint)
    app.register_blueprint(export_logs_blueprint)
    app.register_blueprint(settings_blueprint)
    app.register_blueprint(reports_blueprint)

    register_error_handlers(app)

    with app.app_context():
        db.create_all()

    return app
