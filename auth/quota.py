import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Dict, Hashable, Optional

from auth.profiles import ProfileRepository
from domain.identity import Anonymous, Authenticated, CallerIdentity
from domain.policies import display_limit, enforced_limit
from domain.schema import QuotaSnapshot
from utils.time_utils import utc_today

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    used: int


# =========================
#   Per-key locking
# =========================
class KeyedLocks:
    """One lock per key; a short-lived guard only protects the lock table."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}

    def get(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def discard_where(self, predicate) -> None:
        with self._guard:
            for key in [k for k in self._locks if predicate(k)]:
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


# =========================
#   Anonymous ledger backends
# =========================
class MemoryAnonymousLedger:
    """
    Per-process counter keyed by (session_id, day).
    Counts vanish on restart and are not shared between workers.

    Counts live in one bucket per day; buckets are only added or dropped
    under the day guard.
    """

    def __init__(self):
        self._buckets: Dict[date, Dict[str, int]] = {}
        self._locks = KeyedLocks()
        self._day: Optional[date] = None
        self._day_guard = threading.Lock()

    def _bucket(self, day: date) -> Dict[str, int]:
        with self._day_guard:
            if self._day is None or day > self._day:
                for stale in [d for d in self._buckets if d < day]:
                    del self._buckets[stale]
                self._locks.discard_where(lambda k: k[1] < day)
                self._day = day
            return self._buckets.setdefault(day, {})

    def check_and_increment(self, session_id: str, day: date, limit: int) -> QuotaDecision:
        bucket = self._bucket(day)
        with self._locks.get((session_id, day)):
            count = bucket.get(session_id, 0)
            if count >= limit:
                return QuotaDecision(allowed=False, used=count)
            count += 1
            bucket[session_id] = count
            return QuotaDecision(allowed=True, used=count)

    def peek(self, session_id: str, day: date) -> int:
        return self._buckets.get(day, {}).get(session_id, 0)


# KEYS[1]=counter key, ARGV[1]=limit, ARGV[2]=ttl seconds
_CHECK_AND_INCR_LUA = """
local current = tonumber(redis.call('GET', KEYS[1]) or '0')
local limit = tonumber(ARGV[1])
if current >= limit then
  return {0, current}
end
current = redis.call('INCR', KEYS[1])
if current == 1 then
  redis.call('EXPIRE', KEYS[1], tonumber(ARGV[2]))
end
return {1, current}
"""


class RedisAnonymousLedger:
    """
    Shared anonymous counter for multi-instance deployments.
    The Lua script runs atomically inside Redis, so the check and the
    increment can't interleave across processes.
    """

    KEY_PREFIX = "support-reply:anon"
    TTL_SECONDS = 2 * 24 * 60 * 60

    def __init__(self, redis_client):
        self.redis_client = redis_client
        self._script = redis_client.register_script(_CHECK_AND_INCR_LUA)

    def _key(self, session_id: str, day: date) -> str:
        return f"{self.KEY_PREFIX}:{session_id}:{day.isoformat()}"

    def check_and_increment(self, session_id: str, day: date, limit: int) -> QuotaDecision:
        allowed, used = self._script(
            keys=[self._key(session_id, day)],
            args=[limit, self.TTL_SECONDS],
        )
        return QuotaDecision(allowed=bool(int(allowed)), used=int(used))

    def peek(self, session_id: str, day: date) -> int:
        raw = self.redis_client.get(self._key(session_id, day))
        return int(raw or 0)


def create_anonymous_ledger(config):
    backend = (config.get("ANON_LEDGER_BACKEND") or "memory").lower()
    if backend == "redis":
        import redis

        url = config.get("REDIS_URL")
        if not url:
            raise RuntimeError("ANON_LEDGER_BACKEND=redis requires REDIS_URL")
        logger.info("anonymous ledger using Redis at %s", url)
        return RedisAnonymousLedger(redis.Redis.from_url(url, decode_responses=True))
    logger.warning("anonymous ledger is in-process memory (counts reset on restart)")
    return MemoryAnonymousLedger()


# =========================
#   Quota ledger (facade)
# =========================
class QuotaLedger:
    """
    check_and_increment(identity) -> QuotaDecision
      - anonymous: (session_id, UTC day) in the anonymous backend
      - authenticated: (user_id, UTC day) in the durable store
    Rejections never mutate the counter.
    """

    def __init__(self, anonymous_ledger, profiles_factory=ProfileRepository, clock=utc_today):
        self.anonymous_ledger = anonymous_ledger
        self.profiles_factory = profiles_factory
        self.clock = clock
        # serialises same-user requests inside this process; the conditional
        # upsert keeps the cap exact across processes
        self._user_locks = KeyedLocks()
        self._locks_day: Optional[date] = None
        self._locks_day_guard = threading.Lock()

    def check_and_increment(self, identity: CallerIdentity) -> QuotaDecision:
        day = self.clock()
        limit = enforced_limit(identity.tier)

        if isinstance(identity, Anonymous):
            decision = self.anonymous_ledger.check_and_increment(identity.session_id, day, limit)
        elif isinstance(identity, Authenticated):
            decision = self._check_and_increment_user(identity.user_id, day, limit)
        else:
            raise TypeError(f"unknown identity {identity!r}")

        logger.info(
            "quota tier=%s key=%s day=%s allowed=%s used=%s limit=%s",
            identity.tier, identity.quota_key, day, decision.allowed, decision.used, limit,
        )
        return decision

    def _prune_user_locks(self, day: date) -> None:
        with self._locks_day_guard:
            if self._locks_day is not None and day <= self._locks_day:
                return
            self._user_locks.discard_where(lambda k: k[1] < day)
            self._locks_day = day

    def _check_and_increment_user(self, user_id: str, day: date, limit: int) -> QuotaDecision:
        profiles = self.profiles_factory()
        self._prune_user_locks(day)
        with self._user_locks.get((user_id, day)):
            count = profiles.get_daily_count(user_id, day)
            if count >= limit:
                return QuotaDecision(allowed=False, used=count)
            new_count = profiles.increment_daily_count(user_id, day, limit=limit)
            if new_count is None:
                # another process took the last unit between read and upsert
                return QuotaDecision(allowed=False, used=profiles.get_daily_count(user_id, day))
            return QuotaDecision(allowed=True, used=new_count)

    def used_today(self, identity: CallerIdentity) -> int:
        day = self.clock()
        if isinstance(identity, Anonymous):
            return self.anonymous_ledger.peek(identity.session_id, day)
        return self.profiles_factory().get_daily_count(identity.user_id, day)

    def snapshot(self, identity: CallerIdentity, used: Optional[int] = None) -> QuotaSnapshot:
        if used is None:
            used = self.used_today(identity)
        return QuotaSnapshot(
            limit=display_limit(identity.tier),
            used=used,
            pro=isinstance(identity, Authenticated) and identity.is_pro,
        )
