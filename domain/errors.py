from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    QUOTA_EXCEEDED = "quota_exceeded"
    CONFIGURATION = "configuration"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_ERROR = "upstream_error"
    AUTH_REQUIRED = "auth_required"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorPolicy:
    http_status: int
    retryable: bool = False
    client_caused: bool = False


ERROR_POLICIES: Dict[ErrorKind, ErrorPolicy] = {
    ErrorKind.VALIDATION: ErrorPolicy(400, client_caused=True),
    ErrorKind.QUOTA_EXCEEDED: ErrorPolicy(429, client_caused=True),
    ErrorKind.CONFIGURATION: ErrorPolicy(500),
    ErrorKind.UPSTREAM_TIMEOUT: ErrorPolicy(408, retryable=True),
    ErrorKind.UPSTREAM_ERROR: ErrorPolicy(502, retryable=True),
    ErrorKind.AUTH_REQUIRED: ErrorPolicy(401, client_caused=True),
    ErrorKind.INTERNAL: ErrorPolicy(500),
}


class SupportReplyError(Exception):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message

    @property
    def policy(self) -> ErrorPolicy:
        return ERROR_POLICIES[self.kind]

    @property
    def http_status(self) -> int:
        return self.policy.http_status

    @property
    def retryable(self) -> bool:
        return self.policy.retryable

    def to_payload(self) -> dict:
        return {"error": self.message}


class ValidationError(SupportReplyError):
    kind = ErrorKind.VALIDATION


class QuotaExceeded(SupportReplyError):
    kind = ErrorKind.QUOTA_EXCEEDED

    def __init__(self, *, limit: Optional[int], used: int, pro: bool, anonymous: bool):
        if pro:
            message = "You've reached today's fair-use ceiling. Please try again tomorrow."
        elif anonymous:
            message = ("You've used all your anonymous generations today. "
                       "Sign in for 20/day or upgrade for unlimited.")
        else:
            message = "You've used all your free generations today. Upgrade for unlimited access."
        super().__init__(message)
        self.limit = limit
        self.used = used
        self.pro = pro

    def to_payload(self) -> dict:
        return {
            "error": "DAILY_LIMIT_REACHED",
            "limit": self.limit,
            "remaining": 0,
            "pro": self.pro,
            "message": self.message,
        }


class ConfigurationError(SupportReplyError):
    kind = ErrorKind.CONFIGURATION

    def __init__(self, setting: str, code: str = "MISSING_API_KEY"):
        super().__init__("Missing server configuration")
        self.setting = setting
        self.code = code

    def to_payload(self) -> dict:
        return {
            "error": self.message,
            "code": self.code,
            "message": f"Please set {self.setting} in the server environment",
        }


class UpstreamTimeout(SupportReplyError):
    kind = ErrorKind.UPSTREAM_TIMEOUT

    def __init__(self, timeout_seconds: float):
        super().__init__("Request timeout - please try again")
        self.timeout_seconds = timeout_seconds

    def to_payload(self) -> dict:
        return {"error": self.message, "code": "UPSTREAM_TIMEOUT"}


class UpstreamError(SupportReplyError):
    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(self, status_code: Optional[int] = None, detail: str = ""):
        super().__init__("Failed to generate replies")
        self.status_code = status_code
        # logged only; never part of the wire payload
        self.detail = detail

    @property
    def retryable(self) -> bool:
        # 4xx from the provider (bad key, bad model) will not heal on retry
        if self.status_code is not None and 400 <= self.status_code < 500 and self.status_code != 429:
            return False
        return True

    def to_payload(self) -> dict:
        return {"error": self.message, "code": "UPSTREAM_ERROR"}


class AuthRequired(SupportReplyError):
    kind = ErrorKind.AUTH_REQUIRED

    def __init__(self):
        super().__init__("AUTH_REQUIRED")
