"""
Unit tests for the usage service.
Tests limit math, append-only logging, history and analytics.
"""
import threading
from datetime import datetime, timedelta

import pytest

from content_agent.core.exceptions import QuotaExceeded, ValidationError
from content_agent.core.quota_guard import require_quota
from content_agent.db.init_db import init_db
from content_agent.db.models.usage import UsageLog
from content_agent.db.session import build_engine, build_session_factory
from content_agent.services import auth_service
from content_agent.services.usage_service import (
    check_limit,
    current_usage,
    get_month_usage,
    get_plan_for_user,
    get_usage_for_response,
    log_usage,
    month_bounds,
    previous_month_keys,
    usage_analytics,
    usage_history,
)


def test_current_usage_empty(db, test_user):
    """Test every resource reports 0 before anything is logged."""
    assert current_usage(db, test_user) == {"words": 0, "images": 0, "video_minutes": 0}


def test_log_usage_accumulates(db, test_user):
    log_usage(db, test_user.id, "words", 120)
    log_usage(db, test_user.id, "words", 80)
    log_usage(db, test_user.id, "images", 1)

    assert current_usage(db, test_user) == {"words": 200, "images": 1, "video_minutes": 0}


def test_log_usage_rejects_bad_input(db, test_user):
    with pytest.raises(ValidationError):
        log_usage(db, test_user.id, "tokens", 10)
    with pytest.raises(ValidationError):
        log_usage(db, test_user.id, "words", 0)
    with pytest.raises(ValidationError):
        log_usage(db, test_user.id, "words", -5)

    assert db.query(UsageLog).count() == 0


def test_log_usage_sets_month_key(db, test_user):
    entry = log_usage(db, test_user.id, "video_minutes", 3)
    assert entry.month_key == entry.created_at.strftime("%Y-%m")


def test_other_months_do_not_count(db, test_user):
    """Test entries from a previous month are outside the current period."""
    last_month = datetime.utcnow().replace(day=1) - timedelta(days=1)
    db.add(UsageLog(
        user_id=test_user.id,
        resource_type="words",
        amount=9000,
        month_key=UsageLog.get_month_key(last_month),
        created_at=last_month,
    ))
    db.commit()

    assert current_usage(db, test_user)["words"] == 0
    assert get_month_usage(db, test_user.id, UsageLog.get_month_key(last_month))["words"] == 9000


def test_check_limit_free_plan(db, test_user):
    """Test check_limit math: free plan words limit is 10000."""
    log_usage(db, test_user.id, "words", 9500)

    result = check_limit(db, test_user, "words", 400)
    assert result == {
        "resource_type": "words",
        "plan": "free",
        "allowed": True,
        "used": 9500,
        "limit": 10000,
        "remaining": 500,
    }

    assert check_limit(db, test_user, "words", 500)["allowed"] is True
    assert check_limit(db, test_user, "words", 501)["allowed"] is False


def test_check_limit_does_not_mutate(db, test_user):
    check_limit(db, test_user, "images", 10)
    check_limit(db, test_user, "images", 100)

    assert db.query(UsageLog).count() == 0


def test_remaining_clamped_at_zero(db, test_user):
    """Test logging past the limit is allowed and remaining never goes negative."""
    log_usage(db, test_user.id, "images", 60)

    result = check_limit(db, test_user, "images", 1)
    assert result["used"] == 60
    assert result["remaining"] == 0
    assert result["allowed"] is False


def test_pro_plan_limits(db, test_user, set_plan):
    set_plan(test_user, "pro")
    log_usage(db, test_user.id, "words", 20000)

    result = check_limit(db, test_user, "words", 1)
    assert result["plan"] == "pro"
    assert result["limit"] == 50000
    assert result["remaining"] == 30000
    assert result["allowed"] is True


def test_enterprise_unlimited(db, test_user, set_plan):
    set_plan(test_user, "enterprise")
    log_usage(db, test_user.id, "words", 5_000_000)

    result = check_limit(db, test_user, "words", 1_000_000)
    assert result["allowed"] is True
    assert result["limit"] is None
    assert result["remaining"] is None
    assert result["used"] == 5_000_000


def test_expired_subscription_falls_back_to_free(db, test_user, set_plan):
    set_plan(test_user, "pro")
    test_user.subscription_expires_at = datetime.utcnow() - timedelta(days=1)
    db.commit()

    assert get_plan_for_user(test_user) == "free"
    assert check_limit(db, test_user, "words", 1)["limit"] == 10000


def test_require_quota_raises_with_details(db, test_user):
    log_usage(db, test_user.id, "words", 10000)

    with pytest.raises(QuotaExceeded) as exc_info:
        require_quota(db, test_user, "words", 1)

    body = exc_info.value.to_dict()
    assert exc_info.value.status_code == 429
    assert body["error"] == "quota_exceeded"
    assert body["resource_type"] == "words"
    assert body["limit"] == 10000
    assert body["used"] == 10000
    assert body["remaining"] == 0


def test_usage_for_response(db, test_user):
    log_usage(db, test_user.id, "images", 3)

    data = get_usage_for_response(db, test_user)
    assert data["plan"] == "free"
    assert data["month_key"] == UsageLog.get_month_key()
    assert data["period_start"] <= datetime.utcnow() < data["period_end"]
    assert data["resources"]["images"] == {"limit": 50, "used": 3, "remaining": 47, "unlimited": False}


def test_month_helpers():
    assert month_bounds("2026-12") == (datetime(2026, 12, 1), datetime(2027, 1, 1))
    assert previous_month_keys(3, now=datetime(2026, 2, 15)) == ["2025-12", "2026-01", "2026-02"]


def test_usage_history_daily_buckets(db, test_user):
    now = datetime.utcnow()
    db.add_all([
        UsageLog(user_id=test_user.id, resource_type="words", amount=100,
                 month_key=UsageLog.get_month_key(now), created_at=now),
        UsageLog(user_id=test_user.id, resource_type="words", amount=50,
                 month_key=UsageLog.get_month_key(now - timedelta(days=2)), created_at=now - timedelta(days=2)),
        UsageLog(user_id=test_user.id, resource_type="images", amount=2,
                 month_key=UsageLog.get_month_key(now - timedelta(days=40)), created_at=now - timedelta(days=40)),
    ])
    db.commit()

    history = usage_history(db, test_user.id, "7d", now=now)

    assert len(history) == 7
    assert history[-1]["date"] == now.strftime("%Y-%m-%d")
    assert history[-1]["words"] == 100
    assert history[-3]["words"] == 50
    assert sum(day["images"] for day in history) == 0

    with pytest.raises(ValidationError):
        usage_history(db, test_user.id, "90d")


def test_usage_analytics(db, test_user):
    log_usage(db, test_user.id, "words", 250)

    data = usage_analytics(db, test_user, months=3)

    assert data["plan"] == "free"
    assert [m["month_key"] for m in data["months"]] == previous_month_keys(3)
    assert data["months"][-1]["words"] == 250
    assert data["months"][0]["words"] == 0
    assert data["content_types"] == {}
    assert data["generations"] == {}


def test_concurrent_logging_loses_nothing(tmp_path):
    """Test N threads logging for the same user produce exactly the sum of their amounts."""
    engine = build_engine(f"sqlite:///{tmp_path / 'usage.db'}")
    init_db(engine)
    SessionLocal = build_session_factory(engine)

    setup_session = SessionLocal()
    _, user = auth_service.register(setup_session, "threads@example.com", "SecurePass123", "Thread", "Tester")
    user_id = user.id
    setup_session.close()

    amounts = list(range(1, 21))
    errors = []

    def worker(amount):
        session = SessionLocal()
        try:
            log_usage(session, user_id, "words", amount)
        except Exception as e:
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=worker, args=(amount,)) for amount in amounts]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    check_session = SessionLocal()
    try:
        assert errors == []
        assert get_month_usage(check_session, user_id, UsageLog.get_month_key())["words"] == sum(amounts)
        assert check_session.query(UsageLog).count() == len(amounts)
    finally:
        check_session.close()
        engine.dispose()
