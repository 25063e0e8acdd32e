from flask import Blueprint, current_app, g, jsonify, request

from insights.decorators import require_auth, require_permission
from insights.errors import ConfigurationError, InsightsError
from insights.services import dashboard_service


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


def error_response(exc: InsightsError):
    """Map an engine error to its JSON body and status code."""
    if isinstance(exc, ConfigurationError):
        current_app.logger.error("Configuration error: %s (path=%s)", exc, request.path)
    return jsonify({"error": str(exc), "code": exc.code}), exc.status_code


def _year_arg():
    raw = request.args.get("year")
    if raw in (None, ""):
        return None, None
    try:
        return int(raw), None
    except ValueError:
        return None, (jsonify({"error": "year must be an integer", "code": "invalid_period"}), 400)


@dashboard_bp.get("/overview")
@require_auth
@require_permission(dashboard_service.REPORT_PERMISSION)
def overview():
    year, error = _year_arg()
    if error:
        return error

    try:
        stats = dashboard_service.overview_stats(
            g.current_user,
            year=year,
            recent_limit=current_app.config["DASHBOARD_RECENT_ORDERS"],
        )
        return jsonify(stats), 200
    except InsightsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to build dashboard overview")
        return jsonify({"error": "Internal server error"}), 500


@dashboard_bp.get("/trends")
@require_auth
@require_permission(dashboard_service.REPORT_PERMISSION)
def trends():
    year, error = _year_arg()
    if error:
        return error

    try:
        stats = dashboard_service.trend_stats(
            g.current_user,
            period=request.args.get("period"),
            year=year,
            top_limit=current_app.config["DASHBOARD_TOP_PRODUCTS"],
        )
        return jsonify(stats), 200
    except InsightsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to build dashboard trends")
        return jsonify({"error": "Internal server error"}), 500
