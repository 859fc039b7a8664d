# -------------------- 라우트 --------------------
from flask import Blueprint, current_app, jsonify, request

from auth.identity import resolve_identity
from core.extensions import limiter
from core.http_utils import no_store
from services.reply_service import ReplyPipeline

api_generate_bp = Blueprint("api_generate", __name__)


def _generate_limit():
    return current_app.config.get("GENERATE_RATE_LIMIT") or "60/minute"


# JSON API: per-IP 레이트리밋 + tier 별 일일 한도(ReplyPipeline)
@api_generate_bp.route("/api/generate", methods=["POST"])
@limiter.limit(_generate_limit)
def api_generate():
    raw = request.get_json(silent=True)
    identity = resolve_identity()

    pipeline = ReplyPipeline(
        current_app.quota_ledger,
        current_app.completion_client_factory,
        current_app.config,
    )
    result = pipeline.run(identity, raw)
    return no_store(jsonify(result.to_dict()), 200)
