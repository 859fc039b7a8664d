from flask import Blueprint, current_app, jsonify

from auth.entitlements import get_verified_credentials
from auth.profiles import ProfileRepository
from core.http_utils import no_store
from domain.errors import AuthRequired

api_debug_bp = Blueprint("api_debug", __name__)


# DEBUG_ENDPOINTS_ENABLED 일 때만 등록됨 (routes/__init__.py)
@api_debug_bp.route("/api/debug/set-pro", methods=["POST"])
def api_debug_set_pro():
    creds = get_verified_credentials()
    if not creds:
        current_app.logger.info("set-pro rejected: no authenticated caller")
        raise AuthRequired()

    user_id, email = creds
    profile = ProfileRepository().set_pro(user_id, True, email=email)
    current_app.logger.info("pro status activated user_id=%s", user_id)
    return no_store(jsonify({
        "success": True,
        "message": "Pro status activated successfully",
        "pro": bool(profile.pro),
    }), 200)
