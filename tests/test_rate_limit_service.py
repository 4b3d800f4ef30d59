import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.enums import UserRole
from app.errors import AuthError, RateLimitError
from app.database import InMemoryStore
from app.services import AuthService, RateLimitService, RateLimitPolicy


class FakeClock:
    def __init__(self):
        self.now = 1_700_000_000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def limiter(clock):
    return RateLimitService(InMemoryStore(), clock=clock)


def test_check_counts_requests_within_window(limiter, clock):
    policy = RateLimitPolicy("album-ops", max_requests=3, window_seconds=60)

    results = [limiter.check("1.2.3.4", policy) for _ in range(4)]

    assert [r.success for r in results] == [True, True, True, False]
    assert [r.remaining for r in results] == [2, 1, 0, 0]
    assert results[-1].reset_time == int((clock.now + 60) * 1000)

def test_window_resets(limiter, clock):
    policy = RateLimitPolicy("album-ops", max_requests=1, window_seconds=60)
    assert limiter.check("ip", policy).success
    assert not limiter.check("ip", policy).success

    clock.now += 61
    assert limiter.check("ip", policy).success

def test_identifiers_and_policies_are_independent(limiter):
    upload = RateLimitPolicy("photo-upload", max_requests=1, window_seconds=60)
    albums = RateLimitPolicy("album-ops", max_requests=1, window_seconds=60)
    assert limiter.check("a", upload).success
    assert limiter.check("b", upload).success
    assert limiter.check("a", albums).success

def test_enforce_raises_with_reset_time(limiter):
    policy = RateLimitPolicy("photo-upload", max_requests=1, window_seconds=3600)
    limiter.enforce("ip", policy)
    with pytest.raises(RateLimitError) as exc_info:
        limiter.enforce("ip", policy)
    assert exc_info.value.limit == 1
    assert exc_info.value.remaining == 0
    assert exc_info.value.reset_time > 0

def test_login_failures_lock_after_limit(limiter, clock):
    policy = RateLimitPolicy("login-admin", max_requests=5, window_seconds=300)
    for _ in range(4):
        limiter.record_failure("ip", policy)
    assert limiter.is_limited("ip", policy) is None

    limiter.record_failure("ip", policy)
    assert limiter.is_limited("ip", policy) == int((clock.now + 300) * 1000)

    clock.now += 301
    assert limiter.is_limited("ip", policy) is None

def test_clear_resets_login_counter(limiter):
    policy = RateLimitPolicy("login-viewer", max_requests=2, window_seconds=300)
    limiter.record_failure("ip", policy)
    limiter.record_failure("ip", policy)
    limiter.clear("ip", policy)
    assert limiter.is_limited("ip", policy) is None

def test_presets_from_settings(test_settings):
    limiter = RateLimitService.from_settings(test_settings, InMemoryStore())
    assert limiter.policy("photo-upload").max_requests == 20
    assert limiter.policy("album-ops").max_requests == 50
    assert limiter.policy("login-admin").window_seconds == 300
    assert limiter.clock is time.time

def test_reserve_attempt_stops_at_limit(limiter):
    policy = RateLimitPolicy("login-admin", max_requests=3, window_seconds=300)
    assert [limiter.reserve_attempt("ip", policy) for _ in range(4)] == [1, 2, 3, None]
    assert limiter.is_limited("ip", policy) is not None

def test_concurrent_login_burst_cannot_exceed_limit(test_settings):
    class SlowSecurity:
        release = threading.Event()

        def check_password(self, supplied, expected, label):
            # Todos los intentos quedan en vuelo a la vez
            self.release.wait(0.3)
            return False

    limiter = RateLimitService.from_settings(test_settings, InMemoryStore())
    auth = AuthService(test_settings, SlowSecurity(), limiter)

    def attempt(_):
        try:
            auth.login("wrong-password", UserRole.ADMIN, "10.0.0.9")
        except RateLimitError:
            return "limited"
        except AuthError:
            return "rejected"

    with ThreadPoolExecutor(max_workers=12) as pool:
        outcomes = list(pool.map(attempt, range(12)))

    assert outcomes.count("rejected") == test_settings.LOGIN_MAX_ATTEMPTS
    assert outcomes.count("limited") == 12 - test_settings.LOGIN_MAX_ATTEMPTS
