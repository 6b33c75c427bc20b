from flask import Flask, jsonify
from spacebook.config import DevelopmentConfig
from spacebook.errors import ServiceError
from spacebook.extensions import db, migrate

def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Models must be imported for create_all / migrations to see them
    from spacebook import models  # noqa: F401

    # Register Blueprints
    from spacebook.api.routes.auth import auth_bp
    from spacebook.api.routes.spaces import spaces_bp
    from spacebook.api.routes.reservations import reservations_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(spaces_bp, url_prefix='/api/spaces')
    app.register_blueprint(reservations_bp, url_prefix='/api/reservations')

    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(500)
    def handle_server_error(error):
        db.session.rollback()
        return jsonify({'error': 'Server Error'}), 500

    @app.route('/health')
    def health():
        return {"status": "ok", "app": "spacebook"}

    return app
