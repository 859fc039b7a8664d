import logging
import secrets
import uuid
from datetime import timedelta

from flask import request, current_app, g

from cookie.tokens import ANON_SALT, TokenSigner
from domain.identity import Anonymous
from utils.time_utils import _utcnow

logger = logging.getLogger(__name__)


def anon_signer() -> TokenSigner:
    return TokenSigner(current_app.config["SECRET_KEY"], salt=ANON_SALT)


def _mint_session_id() -> str:
    return f"{uuid.uuid4().hex}{secrets.token_hex(4)}"


def ensure_anon_session() -> Anonymous:
    """
    익명 세션 쿠키를 '항상 같은 규칙'으로 보장한다.
    - 유효한 서명 + 만료 전: 기존 session_id 사용 (is_new=False)
    - 없거나 / 서명 무효 / 만료: 새 session_id 발급 (is_new=True)
    A newly minted token is parked on g so the after-request hook sets it.
    """
    cfg = current_app.config
    ttl = int(cfg["ANON_SESSION_TTL_SECONDS"])
    signer = anon_signer()

    cur = request.cookies.get(cfg["ANON_COOKIE"])
    verified = signer.verify(cur, max_age=ttl)
    if verified:
        payload, issued_at = verified
        sid = payload.get("sid") if isinstance(payload, dict) else None
        if sid:
            return Anonymous(
                session_id=sid,
                issued_at=issued_at,
                expires_at=issued_at + timedelta(seconds=ttl),
            )
    if cur:
        logger.info("anonymous token rejected, minting a new session")

    sid = _mint_session_id()
    token = signer.sign({"sid": sid})
    now = _utcnow()
    g.anon_token_to_set = token
    return Anonymous(
        session_id=sid,
        issued_at=now,
        expires_at=now + timedelta(seconds=ttl),
        is_new=True,
    )


def set_anon_cookie(resp, token: str):
    cfg = current_app.config
    # http 로컬 개발환경에서도 동작하도록 secure 자동 전환
    is_secure = request.is_secure or cfg.get("ENV") not in ("development", "testing")
    resp.set_cookie(
        cfg["ANON_COOKIE"],
        token,
        max_age=int(cfg["ANON_SESSION_TTL_SECONDS"]),
        httponly=True,
        secure=is_secure,
        samesite="Lax",
    )
    return resp
