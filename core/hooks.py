import re
import time
import uuid

from flask import request, g, abort, current_app

from cookie.cookie import set_anon_cookie
from core.http_utils import elapsed_ms

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


# -------------------- 요청 식별/타이밍 --------------------

def assign_request_id():
    incoming = (request.headers.get("X-Request-ID") or "").strip()
    g.request_id = incoming if _REQUEST_ID_RE.match(incoming) else uuid.uuid4().hex[:12]
    g.request_started_at = time.perf_counter()


def guard_payload_size():
    limit = current_app.config.get("MAX_PAYLOAD_BYTES") or 0
    if limit and request.content_length and request.content_length > limit:
        abort(413)


# -------------------- 응답 후처리 --------------------

def persist_anon_cookie(resp):
    # 이번 요청에서 새로 발급된 익명 토큰만 세팅 (거절 응답 포함)
    token = getattr(g, "anon_token_to_set", None)
    if token:
        set_anon_cookie(resp, token)
    return resp


def log_request(resp):
    rid = getattr(g, "request_id", None)
    if rid:
        resp.headers["X-Request-ID"] = rid
    started = getattr(g, "request_started_at", None)
    if started is not None and not request.path.startswith("/health"):
        current_app.logger.info(
            "%s %s -> %s in %dms", request.method, request.path, resp.status_code, elapsed_ms(started),
        )
    return resp


def register_hooks(app):
    app.before_request(assign_request_id)
    app.before_request(guard_payload_size)
    app.after_request(persist_anon_cookie)
    app.after_request(log_request)
