from dataclasses import dataclass
from datetime import datetime
from typing import Union


@dataclass(frozen=True)
class Anonymous:
    session_id: str
    issued_at: datetime
    expires_at: datetime
    # True when the token was minted for this request and must be persisted
    is_new: bool = False

    @property
    def tier(self) -> str:
        return "anonymous"

    @property
    def quota_key(self) -> str:
        return self.session_id


@dataclass(frozen=True)
class Authenticated:
    user_id: str
    email: str
    tier: str  # "free" | "pro"

    @property
    def quota_key(self) -> str:
        return self.user_id

    @property
    def is_pro(self) -> bool:
        return self.tier == "pro"


CallerIdentity = Union[Anonymous, Authenticated]
