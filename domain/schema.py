from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# ===== 입력 검증: 허용 값(enum) =====
class Tone(str, Enum):
    FRIENDLY = "friendly"
    PROFESSIONAL = "professional"
    CONCISE = "concise"

    @property
    def wire_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_wire(cls, raw: str) -> "Tone":
        return cls(raw.lower())


TONE_ALLOW = [t.wire_name for t in Tone]
LANGUAGE_AUTO = "auto"

# -------------------- 입력 양식 스키마 --------------------
# ===== JSON API( /api/generate ) POST 스키마 =====
api_generate_schema = {
    "type": "object",
    "properties": {
        "message": {"type": "string"},
        "tone": {"type": "string", "enum": TONE_ALLOW},
        "language": {"type": ["string", "null"]},
    },
    "required": ["message", "tone"],
    "additionalProperties": True,
}


@dataclass(frozen=True)
class GenerationRequest:
    message: str
    tone: Tone
    language: str = LANGUAGE_AUTO


@dataclass(frozen=True)
class QuotaSnapshot:
    limit: Optional[int]
    used: int
    pro: bool

    @property
    def remaining(self) -> Optional[int]:
        if self.limit is None:
            return None
        return max(0, self.limit - self.used)

    def to_dict(self) -> dict:
        return {
            "limit": self.limit,
            "used": self.used,
            "remaining": self.remaining,
            "pro": self.pro,
        }


@dataclass(frozen=True)
class GenerationResponse:
    drafts: List[str] = field(default_factory=list)
    quota: Optional[QuotaSnapshot] = None

    def to_dict(self) -> dict:
        return {
            "drafts": list(self.drafts),
            "quota": self.quota.to_dict() if self.quota else None,
        }
