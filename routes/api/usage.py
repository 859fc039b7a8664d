from flask import Blueprint, current_app, jsonify

from auth.identity import resolve_identity
from core.http_utils import nocache

api_usage_bp = Blueprint("api_usage", __name__)


@api_usage_bp.route("/api/usage", methods=["GET"])
@nocache
def api_usage_status():
    """
    오늘(UTC) 사용량 조회: quota 를 소비하지 않는다
    - 로그인: (user_id, day) durable counter
    - 익명:   (session_id, day) anonymous ledger
    """
    identity = resolve_identity()
    snapshot = current_app.quota_ledger.snapshot(identity)
    return jsonify({**snapshot.to_dict(), "tier": identity.tier})
