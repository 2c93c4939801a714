from account_service.app.services import rate_limiter as limits
from account_service.app.services.rate_limiter import RateLimiter

FIFTEEN_MINUTES_MS = 15 * 60 * 1000


def test_login_rule_denies_sixth_attempt(rate_limiter):
    results = [rate_limiter.check_rule("login", "10.0.0.1", limits.LOGIN) for _ in range(6)]

    assert [r.allowed for r in results] == [True] * 5 + [False]
    assert [r.remaining for r in results] == [4, 3, 2, 1, 0, 0]
    assert results[0].retry_after is None
    assert results[5].retry_after == 15 * 60


def test_window_restarts_after_reset_time(rate_limiter, clock):
    for _ in range(6):
        rate_limiter.check("login:10.0.0.1", FIFTEEN_MINUTES_MS, 5)

    clock.advance(minutes=15, seconds=1)
    result = rate_limiter.check("login:10.0.0.1", FIFTEEN_MINUTES_MS, 5)

    assert result.allowed
    assert result.remaining == 4


def test_retry_after_rounds_up(rate_limiter, clock):
    rate_limiter.check("signup:ip", 60 * 1000, 1)
    clock.advance(seconds=30, milliseconds=500)

    result = rate_limiter.check("signup:ip", 60 * 1000, 1)

    assert not result.allowed
    assert result.retry_after == 30


def test_keys_are_independent(rate_limiter):
    for _ in range(5):
        rate_limiter.check_rule("login", "10.0.0.1", limits.LOGIN)

    assert not rate_limiter.check_rule("login", "10.0.0.1", limits.LOGIN).allowed
    assert rate_limiter.check_rule("login", "10.0.0.2", limits.LOGIN).allowed
    assert rate_limiter.check_rule("signup", "10.0.0.1", limits.SIGNUP).allowed


def test_check_rule_uses_action_and_client_key(rate_limiter):
    rate_limiter.check_rule("password_reset", "10.0.0.9", limits.PASSWORD_RESET)

    result = rate_limiter.check("password_reset:10.0.0.9", limits.PASSWORD_RESET.window_ms, 3)

    assert result.remaining == 1


def test_cleanup_removes_only_expired_counters(rate_limiter, clock):
    rate_limiter.check("short", 1000, 10)
    rate_limiter.check("long", 60 * 60 * 1000, 10)

    clock.advance(seconds=2)
    removed = rate_limiter.cleanup()

    assert removed == 1
    assert len(rate_limiter) == 1


def test_presets():
    assert (limits.LOGIN.window_ms, limits.LOGIN.max_requests) == (15 * 60 * 1000, 5)
    assert (limits.PASSWORD_RESET.window_ms, limits.PASSWORD_RESET.max_requests) == (60 * 60 * 1000, 3)
    assert (limits.SIGNUP.window_ms, limits.SIGNUP.max_requests) == (60 * 60 * 1000, 5)
    assert (limits.GENERAL.window_ms, limits.GENERAL.max_requests) == (60 * 1000, 60)


def test_default_clock_is_wall_time():
    limiter = RateLimiter()
    result = limiter.check("key", 1000, 1)
    assert result.allowed
    limiter.reset()
    assert len(limiter) == 0
