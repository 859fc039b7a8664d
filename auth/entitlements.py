from typing import Optional, Tuple

from flask import current_app, request, session

from cookie.tokens import AUTH_SALT, TokenSigner

# 인증 제공자(외부)가 발급한 세션을 검증해 (user_id, email) 을 돌려준다.
# 두 경로 모두 서명 검증을 거친다:
#   - Authorization: Bearer <token>  (공유 secret + AUTH_SALT 로 서명된 토큰)
#   - Flask session["user"]           (로그인 플로우가 세팅한 서명 쿠키 세션)
# 검증 실패는 예외가 아니라 None → 익명 처리


def auth_signer() -> TokenSigner:
    return TokenSigner(current_app.config["SECRET_KEY"], salt=AUTH_SALT)


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def verify_bearer_credentials() -> Optional[Tuple[str, str]]:
    token = _bearer_token()
    if not token:
        return None
    verified = auth_signer().verify(token, max_age=int(current_app.config["AUTH_TOKEN_TTL_SECONDS"]))
    if not verified:
        current_app.logger.info("bearer token rejected")
        return None
    payload, _ = verified
    if not isinstance(payload, dict) or not payload.get("user_id"):
        return None
    return str(payload["user_id"]), str(payload.get("email") or "")


def verify_session_credentials() -> Optional[Tuple[str, str]]:
    sess = session.get("user") or {}
    uid = sess.get("user_id") if isinstance(sess, dict) else None
    if not uid:
        return None
    return str(uid), str(sess.get("email") or "")


def get_verified_credentials() -> Optional[Tuple[str, str]]:
    return verify_bearer_credentials() or verify_session_credentials()


def issue_auth_token(user_id: str, email: str = "") -> str:
    """Signs a bearer credential in the format verify_bearer_credentials expects."""
    return auth_signer().sign({"user_id": user_id, "email": email})
