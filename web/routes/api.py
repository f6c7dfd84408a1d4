"""REST API v1: JSON endpoints for licence seat usage."""

from flask import Blueprint, jsonify, request

from web.services import get_monitor

bp = Blueprint("api", __name__)


def _error(message, status=400):
    return jsonify({"error": message}), status


def _flag(name):
    return request.args.get(name, "").lower() in ("1", "true", "yes")


# ── Status ───────────────────────────────────────────────────────────

@bp.route("/status")
def status():
    return jsonify(get_monitor().status())


@bp.route("/refresh", methods=["POST"])
def refresh():
    """Refresh now; ``?force=1`` bypasses the once-per-interval throttle."""
    monitor = get_monitor()
    refreshed = monitor.refresh(force=_flag("force"))
    return jsonify({
        "refreshed": refreshed,
        "available": monitor.check_watches() if refreshed else [],
        "status": monitor.status(),
    })


# ── Licences ─────────────────────────────────────────────────────────

@bp.route("/licences")
def list_licences():
    monitor = get_monitor()
    licences = monitor.licences
    names = monitor.visible_products(show_all=_flag("all"), licences=licences)
    return jsonify([licences.get(n).to_dict() for n in names])


@bp.route("/licences/<name>")
def get_licence(name):
    licences = get_monitor().licences
    licence = licences.get(name)
    if licence is None:
        return _error("Licence not found", 404)
    data = licence.to_dict()
    data["summary"] = licences.usage_summary(name)
    return jsonify(data)


@bp.route("/licences/<name>/users")
def licence_users(name):
    return jsonify({"licence": name, "users": list(get_monitor().users_of(name))})


# ── Seat watch ───────────────────────────────────────────────────────

@bp.route("/watches")
def list_watches():
    return jsonify(get_monitor().watches())


@bp.route("/licences/<name>/watch", methods=["POST"])
def watch_licence(name):
    monitor = get_monitor()
    if name not in monitor.licences:
        return _error("Licence not found", 404)
    if not monitor.watch(name):
        return jsonify({"licence": name, "watching": False, "available": True})
    return jsonify({"licence": name, "watching": True, "available": False}), 201


@bp.route("/licences/<name>/watch", methods=["DELETE"])
def unwatch_licence(name):
    if not get_monitor().unwatch(name):
        return _error("Not watching this licence", 404)
    return jsonify({"licence": name, "watching": False})
