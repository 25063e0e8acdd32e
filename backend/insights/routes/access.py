from flask import Blueprint, current_app, g, jsonify

from insights.decorators import require_auth
from insights.errors import InsightsError
from insights.permissions import get_permission_definition
from insights.routes.dashboard import error_response
from insights.services import hierarchy_service, permission_service


access_bp = Blueprint("access", __name__, url_prefix="/api/access")


@access_bp.get("/permissions/<string:permission_code>")
@require_auth
def has_permission(permission_code: str):
    """Whether the caller holds a permission code, with its registry entry."""
    user = g.current_user
    return jsonify({
        "user_id": user.id,
        "permission": permission_code,
        "granted": permission_service.has_permission(user, permission_code),
        "definition": get_permission_definition(permission_code),
    }), 200


@access_bp.get("/can-manage/<int:user_id>")
@require_auth
def can_manage(user_id: int):
    """Whether the caller's role outranks the target's."""
    try:
        target = hierarchy_service.get_principal(user_id)
        return jsonify({
            "user_id": g.current_user.id,
            "target_user_id": target.id,
            "can_manage": hierarchy_service.can_manage(g.current_user, target),
        }), 200
    except InsightsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to evaluate can-manage")
        return jsonify({"error": "Internal server error"}), 500


@access_bp.get("/hierarchy/<int:superior_id>/<int:subordinate_id>")
@require_auth
def is_in_hierarchy(superior_id: int, subordinate_id: int):
    """
    Whether superior_id is an ancestor of subordinate_id.

    Callers may only ask about pairs inside their own subtree.
    """
    try:
        index = hierarchy_service.load_hierarchy()
        hierarchy_service.ensure_hierarchy_access(g.current_user, superior_id, index)
        index.get(superior_id)
        return jsonify({
            "superior_id": superior_id,
            "subordinate_id": subordinate_id,
            "in_hierarchy": index.is_in_hierarchy(superior_id, subordinate_id),
        }), 200
    except InsightsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to evaluate hierarchy membership")
        return jsonify({"error": "Internal server error"}), 500
