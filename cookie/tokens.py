from datetime import datetime
from typing import Any, Optional, Tuple

from itsdangerous import BadData, URLSafeTimedSerializer

from utils.time_utils import from_timestamp

ANON_SALT = "anon-session-v1"
AUTH_SALT = "auth-session-v1"


class TokenSigner:
    """
    서명 토큰 발급/검증 (itsdangerous)
      - sign(payload)            -> token
      - verify(token, max_age)   -> (payload, issued_at) | None
    Verification failures never raise; callers treat None as "no token".
    """

    def __init__(self, secret_key: str, salt: str):
        if not secret_key:
            raise ValueError("TokenSigner requires a secret key")
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)

    def sign(self, payload: Any) -> str:
        return self._serializer.dumps(payload)

    def verify(self, token: Optional[str], max_age: Optional[int] = None) -> Optional[Tuple[Any, datetime]]:
        if not token:
            return None
        try:
            payload, issued = self._serializer.loads(token, max_age=max_age, return_timestamp=True)
        except BadData:
            # bad signature, expired, or garbled payload
            return None
        return payload, from_timestamp(issued)
