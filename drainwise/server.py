import logging
import os
import traceback
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_limiter.errors import RateLimitExceeded
from werkzeug.exceptions import HTTPException

# Load environment variables from .env file
load_dotenv()

from drainwise.config import get_config
from drainwise.extensions import db, limiter
from drainwise.seed_data import seed_categories_command
from drainwise.services.autosave_service import AutoSaveCoordinator
from drainwise.utils.request_logger import RequestLogger

logger = logging.getLogger(__name__)

blueprints = [
    ('pr2_clean', '/api'),
    ('standard_category', '/api'),
    ('sector_standards', '/api'),
]


def configure_logging(app):
    handlers = [logging.StreamHandler()]
    if app.config.get('LOG_TO_FILE'):
        os.makedirs(app.config['LOG_DIR'], exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(app.config['LOG_DIR'], 'app.log')))
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        handlers=handlers,
    )


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(error):
        logger.error(f"404 error for path: {request.path}")
        if request.path.startswith('/api/'):
            return jsonify({'error': 'API endpoint not found', 'path': request.path}), 404
        return jsonify({'error': 'Page not found', 'path': request.path}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        logger.error(f"405 Method Not Allowed for {request.method} {request.url}")
        return jsonify({'error': 'Method not allowed', 'path': request.path}), 405

    @app.errorhandler(RateLimitExceeded)
    def ratelimit_handler(e):
        logger.warning(f"Rate limit exceeded for {request.method} {request.url}")
        return jsonify({'error': 'Rate limit exceeded. Please try again later.'}), 429

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return jsonify({'error': e.description}), e.code
        logger.error(f"Unhandled exception for {request.method} {request.url}: {e}")
        logger.error(traceback.format_exc())
        return jsonify({'error': 'Internal server error'}), 500


def create_app(config_class=None):
    app = Flask(__name__)
    app.config.from_object(config_class or get_config())
    # Option maps are ordered; keep their key order in responses
    app.json.sort_keys = False

    configure_logging(app)
    logger.info("Database connected: %s", "sqlite" if "sqlite" in app.config.get("SQLALCHEMY_DATABASE_URI", "") else "non-sqlite")

    db.init_app(app)
    limiter.init_app(app)
    CORS(app, supports_credentials=True, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}})

    with app.app_context():
        from drainwise.models.pr2_configuration import PR2Configuration  # noqa: F401
        from drainwise.models.standard_category import StandardCategory  # noqa: F401
        if app.config.get('AUTO_CREATE_TABLES'):
            storage_path = app.config.get('STORAGE_PATH')
            if storage_path:
                os.makedirs(storage_path, exist_ok=True)
            db.create_all()
            logger.info("Database tables verified")

    for blueprint_name, prefix in blueprints:
        module = __import__(f'drainwise.api.{blueprint_name}', fromlist=[f'{blueprint_name}_bp'])
        blueprint = getattr(module, f'{blueprint_name}_bp')
        app.register_blueprint(blueprint, url_prefix=prefix)
        logger.info(f"Registered blueprint: {blueprint_name} with prefix: {prefix}")

    app.before_request(RequestLogger.before_request)
    app.after_request(RequestLogger.after_request)
    register_error_handlers(app)

    AutoSaveCoordinator().init_app(app)
    app.cli.add_command(seed_categories_command)

    @app.route('/')
    def root():
        return {'status': 'ok', 'message': 'Drainwise pricing API is running. Available endpoints: /api/*'}

    @app.route('/api/health-check')
    def health_check():
        healthy = db.health_check()
        return jsonify({
            'status': 'ok' if healthy else 'degraded',
            'database': 'connected' if healthy else 'unavailable',
            'pool': db.get_pool_stats(),
        }), 200 if healthy else 503

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host=app.config.get('FLASK_HOST', '127.0.0.1'), port=app.config.get('FLASK_PORT', 5000),
            debug=app.config.get('DEBUG', False), use_reloader=False)
