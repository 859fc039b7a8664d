"""
validation.py: /api/generate 입력 검증 + 정화
Pure functions: the same raw payload always yields the same GenerationRequest.
"""

import re

from jsonschema import Draft7Validator

from domain.errors import ValidationError
from domain.policies import MESSAGE_MIN_CHARS, MESSAGE_MAX_CHARS
from domain.schema import api_generate_schema, GenerationRequest, Tone, TONE_ALLOW, LANGUAGE_AUTO

_TAG_RE = re.compile(r"<[^>]*>")

MSG_MESSAGE_REQUIRED = "Message is required and must be a string"
MSG_MESSAGE_TOO_SHORT = f"Message must be at least {MESSAGE_MIN_CHARS} characters long"
MSG_TONE_INVALID = f"Tone must be one of: {', '.join(TONE_ALLOW)}"
MSG_LANGUAGE_INVALID = "Language must be a string"
MSG_BODY_INVALID = "Request body must be a JSON object"

_generate_validator = Draft7Validator(api_generate_schema)


# -------------------- 유틸 함수 --------------------
def sanitize_message(value: str) -> str:
    """HTML 태그 제거 → 공백 trim. Length is checked on this result."""
    return _TAG_RE.sub("", value).strip()


def _schema_error_message(err) -> str:
    # required 누락은 path 가 비어 있고 message 에 필드명이 들어있다
    if err.validator == "required":
        missing = err.message.split("'")[1] if "'" in err.message else ""
        return MSG_TONE_INVALID if missing == "tone" else MSG_MESSAGE_REQUIRED
    field = err.path[0] if err.path else None
    if field == "message":
        return MSG_MESSAGE_REQUIRED
    if field == "tone":
        return MSG_TONE_INVALID
    if field == "language":
        return MSG_LANGUAGE_INVALID
    return MSG_BODY_INVALID


def _validate_schema(data):
    """JSON Schema 검증 (필수 필드, 타입, enum)"""
    if not isinstance(data, dict):
        raise ValidationError(MSG_BODY_INVALID)
    # message 관련 오류를 tone 보다 먼저 보고한다
    errors = sorted(
        _generate_validator.iter_errors(data),
        key=lambda e: (0 if _schema_error_message(e) == MSG_MESSAGE_REQUIRED else 1),
    )
    if errors:
        raise ValidationError(_schema_error_message(errors[0]))


# -------------------- 메인 --------------------
def validate_generate_request(raw) -> GenerationRequest:
    """
    raw JSON -> GenerationRequest, or ValidationError.
      - message: tags stripped, trimmed, rejected under 10 chars, cut to 2500
      - tone: Friendly | Professional | Concise
      - language: optional, any string, defaults to "auto"
    """
    _validate_schema(raw)

    message = sanitize_message(raw["message"])
    if len(message) < MESSAGE_MIN_CHARS:
        raise ValidationError(MSG_MESSAGE_TOO_SHORT)
    if len(message) > MESSAGE_MAX_CHARS:
        message = message[:MESSAGE_MAX_CHARS]

    language = (raw.get("language") or "").strip() or LANGUAGE_AUTO

    return GenerationRequest(
        message=message,
        tone=Tone.from_wire(raw["tone"]),
        language=language,
    )
