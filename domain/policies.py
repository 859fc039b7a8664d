# policies.py
# daily=None means "no displayed limit"; safety_cap still applies.
LIMITS = {
    "anonymous": {"daily": 5},
    "free": {"daily": 20},
    "pro": {"daily": None, "safety_cap": 1000},
}

DRAFT_COUNT = 3
DRAFT_WORD_BUDGET = 150

MESSAGE_MIN_CHARS = 10
MESSAGE_MAX_CHARS = 2500

FALLBACK_DRAFT = "Thank you for your message. I'm here to help and will get back to you shortly."


def display_limit(tier: str):
    return LIMITS[tier]["daily"]


def enforced_limit(tier: str) -> int:
    """Ceiling actually checked by the ledger."""
    policy = LIMITS[tier]
    if policy["daily"] is None:
        return policy["safety_cap"]
    return policy["daily"]
