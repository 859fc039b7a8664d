# models.py
from datetime import datetime, timezone
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Index, UniqueConstraint

db = SQLAlchemy()


def utcnow():
    # naive UTC, matching the DateTime columns below
    return datetime.now(timezone.utc).replace(tzinfo=None)


# =========================
#       Core: Profiles
# =========================
class Profile(db.Model):
    """
    Tier record for an authenticated user.
    Created lazily (pro=False) on the user's first authenticated request.
    """
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(255), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), nullable=True)
    pro = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


# =========================
#    DailyUsage (authenticated: UTC day)
# =========================
class DailyUsage(db.Model):
    __tablename__ = "daily_usage"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(255), nullable=False, index=True)
    day = db.Column(db.Date, nullable=False, index=True)
    count = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "day", name="uq_daily_usage_user_day"),
        Index("idx_daily_usage_day", "day"),
    )
