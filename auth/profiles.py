import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from domain.models import db, Profile, DailyUsage, utcnow

logger = logging.getLogger(__name__)


def _upsert_insert(dialect_name: str):
    if dialect_name == "postgresql":
        return postgresql.insert
    if dialect_name == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"atomic upsert not supported for dialect '{dialect_name}'")


class ProfileRepository:
    """
    Profile store + durable per-user daily counter.
    Every public method commits its own unit of work.
    """

    def __init__(self, session=None):
        self.session = session or db.session

    # -------------------- profiles --------------------

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.session.execute(
            select(Profile).where(Profile.user_id == user_id)
        ).scalar_one_or_none()

    def create_profile(self, user_id: str, email: str = "") -> Profile:
        """
        Idempotent insert. Losing the insert race means another request
        already created the row, so it is re-read instead.
        """
        try:
            profile = Profile(user_id=user_id, email=email or None, pro=False)
            self.session.add(profile)
            self.session.commit()
            logger.info("profile created user_id=%s", user_id)
            return profile
        except IntegrityError:
            self.session.rollback()
            existing = self.get_profile(user_id)
            if existing is None:
                raise
            return existing

    def get_or_create_profile(self, user_id: str, email: str = "") -> Profile:
        profile = self.get_profile(user_id)
        if profile is not None:
            return profile
        return self.create_profile(user_id, email)

    def set_pro(self, user_id: str, pro: bool = True, email: str = "") -> Profile:
        profile = self.get_or_create_profile(user_id, email)
        profile.pro = bool(pro)
        self.session.commit()
        return profile

    # -------------------- daily usage --------------------

    def get_daily_count(self, user_id: str, day: date) -> int:
        count = self.session.execute(
            select(DailyUsage.count).where(
                DailyUsage.user_id == user_id,
                DailyUsage.day == day,
            )
        ).scalar_one_or_none()
        return int(count or 0)

    def increment_daily_count(self, user_id: str, day: date, limit: Optional[int] = None) -> Optional[int]:
        """
        INSERT ... ON CONFLICT (user_id, day) DO UPDATE SET count = count + 1
        as one statement, returning the post-increment count.

        With `limit`, the update only applies while count < limit; a refused
        update returns None and leaves the row untouched.
        """
        dialect = self.session.get_bind().dialect.name
        insert = _upsert_insert(dialect)
        table = DailyUsage.__table__
        now = utcnow()

        stmt = insert(table).values(user_id=user_id, day=day, count=1, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.user_id, table.c.day],
            set_={"count": table.c["count"] + 1, "updated_at": now},
            where=(table.c["count"] < limit) if limit is not None else None,
        ).returning(table.c["count"])

        new_count = self.session.execute(stmt).scalar_one_or_none()
        self.session.commit()
        return None if new_count is None else int(new_count)
