from flask import current_app, jsonify, g
from werkzeug.exceptions import HTTPException

from core.http_utils import no_store
from domain.errors import SupportReplyError, UpstreamError


def register_error_handlers(app):

    @app.errorhandler(SupportReplyError)
    def _support_reply_error(e: SupportReplyError):
        if isinstance(e, UpstreamError) and e.detail:
            current_app.logger.error("upstream detail status=%s: %s", e.status_code, e.detail)
        current_app.logger.info(
            "error kind=%s status=%s retryable=%s", e.kind.value, e.http_status, e.retryable,
        )
        return no_store(jsonify(e.to_payload()), e.http_status)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return no_store(jsonify({"error": e.description or e.name}), e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        current_app.logger.exception(
            "unexpected error request_id=%s", getattr(g, "request_id", "-"),
        )
        return no_store(jsonify({"error": "Internal server error"}), 500)
