from flask import Flask, jsonify
from flask_cors import CORS


def create_app(controller=None, config=None):
    app = Flask(__name__)
    CORS(app)  # Allow cross-origin requests

    app.config.from_mapping(CONTROLLER=controller)

    if config:
        app.config.from_mapping(config)

    register_error_handlers(app)

    from routes.sync_routes import sync_bp
    from routes.lighting_routes import lighting_bp

    app.register_blueprint(sync_bp)
    app.register_blueprint(lighting_bp)

    return app


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"status": "error", "message": "Resource not found"}), 404

    @app.errorhandler(500)
    def server_error(error):
        return jsonify({"status": "error", "message": "Internal server error"}), 500

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({"status": "error", "message": "Bad request"}), 400
