"""Backend service lookup for request handlers and scheduled jobs."""

from flask import current_app


def get_monitor(app=None):
    """The ``LicenceMonitor`` bound to ``app`` (default: current app)."""
    app = app or current_app
    return app.extensions["licence_monitor"]
