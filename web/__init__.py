"""Flask application factory for the licence seat API."""

from flask import Flask, jsonify

from seats.errors import ConnectivityError, QueryToolError


def create_app(config=None, monitor=None):
    """Create and configure the Flask application.

    Args:
        config: Extra Flask config applied before start-up (e.g. ``TESTING``).
        monitor: ``LicenceMonitor`` to serve; built from settings if omitted.
    """
    app = Flask(__name__)
    if config:
        app.config.update(config)

    if monitor is None:
        from seats.monitor import build_monitor
        monitor = build_monitor()
    app.extensions["licence_monitor"] = monitor

    from web.routes.api import bp as api_bp

    app.register_blueprint(api_bp, url_prefix="/api/v1")

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({"error": "Internal server error"}), 500

    @app.errorhandler(ConnectivityError)
    def licence_server_unavailable(e):
        return jsonify({"error": e.message, "kind": "connectivity"}), 503

    @app.errorhandler(QueryToolError)
    def query_tool_missing(e):
        return jsonify({"error": str(e), "kind": "query_tool"}), 500

    @app.route("/health")
    def health_check():
        return jsonify({"status": "healthy", "version": "0.1.0"}), 200

    # Start scheduler (only in non-testing mode)
    from config.settings import SCHEDULER_ENABLED
    if SCHEDULER_ENABLED and not app.config.get("TESTING"):
        from web.scheduler import init_scheduler
        init_scheduler(app)

    return app
