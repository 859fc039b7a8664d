from datetime import date
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from auth.profiles import ProfileRepository
from domain.models import DailyUsage, Profile, db

DAY = date(2026, 3, 14)


@pytest.fixture
def repo(app):
    with app.app_context():
        yield ProfileRepository()


def test_get_or_create_profile_is_idempotent(repo):
    first = repo.get_or_create_profile("u-1", "u-1@example.com")
    second = repo.get_or_create_profile("u-1", "other@example.com")

    assert first.id == second.id
    assert second.pro is False
    assert second.email == "u-1@example.com"
    assert Profile.query.count() == 1


def test_create_profile_rereads_after_losing_insert_race(repo):
    repo.create_profile("u-1")

    # a second insert for the same user violates the unique constraint
    profile = repo.create_profile("u-1", "late@example.com")

    assert profile.user_id == "u-1"
    assert Profile.query.count() == 1


def test_create_profile_reraises_when_row_never_appears(repo):
    with patch.object(repo.session, "commit", side_effect=IntegrityError("insert", {}, Exception("boom"))):
        with pytest.raises(IntegrityError):
            repo.create_profile("ghost")


def test_set_pro_creates_and_flags(repo):
    profile = repo.set_pro("u-2", True, email="u-2@example.com")

    assert profile.pro is True
    assert repo.get_profile("u-2").pro is True
    assert repo.set_pro("u-2", False).pro is False


def test_increment_daily_count_upserts(repo):
    assert repo.get_daily_count("u-1", DAY) == 0
    assert repo.increment_daily_count("u-1", DAY) == 1
    assert repo.increment_daily_count("u-1", DAY) == 2
    assert repo.get_daily_count("u-1", DAY) == 2
    assert repo.get_daily_count("u-1", date(2026, 3, 15)) == 0


def test_conditional_increment_refuses_at_limit(repo):
    db.session.add(DailyUsage(user_id="u-1", day=DAY, count=20))
    db.session.commit()

    assert repo.increment_daily_count("u-1", DAY, limit=20) is None
    assert repo.get_daily_count("u-1", DAY) == 20
    assert repo.increment_daily_count("u-1", DAY, limit=21) == 21

