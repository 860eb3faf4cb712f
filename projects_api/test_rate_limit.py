"""
projects_api/test_rate_limit.py

Fixed-window limiter behavior with a controllable clock, and the 429
response on the auth routes.

Run:
    pytest projects_api/test_rate_limit.py -v
"""

from projects_api.rate_limit import RateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_limiter(max_requests=3, window_seconds=60, sweep_seconds=30):
    clock = FakeClock()
    limiter = RateLimiter(
        max_requests=max_requests,
        window_seconds=window_seconds,
        sweep_seconds=sweep_seconds,
        clock=clock,
    )
    return limiter, clock


class TestRateLimiter:
    def test_allows_up_to_max_then_blocks(self):
        limiter, _ = make_limiter(max_requests=3)

        results = [limiter.hit("1.2.3.4") for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert [r.remaining for r in results] == [2, 1, 0, 0]

    def test_keys_are_independent(self):
        limiter, _ = make_limiter(max_requests=1)

        assert limiter.hit("a").allowed
        assert not limiter.hit("a").allowed
        assert limiter.hit("b").allowed

    def test_window_restarts_after_expiry(self):
        limiter, clock = make_limiter(max_requests=1, window_seconds=60)
        limiter.hit("a")
        assert not limiter.hit("a").allowed

        clock.advance(61)

        status = limiter.hit("a")
        assert status.allowed
        assert status.reset_at == clock.now + 60

    def test_window_does_not_slide(self):
        limiter, clock = make_limiter(max_requests=2, window_seconds=60)
        first = limiter.hit("a")

        clock.advance(30)
        second = limiter.hit("a")

        assert second.reset_at == first.reset_at

    def test_sweep_drops_expired_windows(self):
        limiter, clock = make_limiter(window_seconds=10, sweep_seconds=30)
        limiter.hit("a")
        limiter.hit("b")
        assert len(limiter) == 2

        clock.advance(31)
        limiter.hit("c")

        assert len(limiter) == 1

    def test_sweep_waits_for_interval(self):
        limiter, clock = make_limiter(window_seconds=10, sweep_seconds=30)
        limiter.hit("a")

        clock.advance(15)
        limiter.hit("b")

        # "a" expired but no sweep has run yet
        assert len(limiter) == 2

    def test_headers(self):
        limiter, clock = make_limiter(max_requests=5, window_seconds=60)
        clock.now = 1000.5

        headers = limiter.hit("a").headers()

        assert headers == {
            "X-RateLimit-Limit": "5",
            "X-RateLimit-Remaining": "4",
            "X-RateLimit-Reset": "1061",
        }

    def test_reset_clears_all_windows(self):
        limiter, _ = make_limiter(max_requests=1)
        limiter.hit("a")

        limiter.reset()

        assert len(limiter) == 0
        assert limiter.hit("a").allowed


class TestAuthRateLimit:
    def test_auth_responses_carry_headers(self, client):
        response = client.post(
            "/auth/register",
            json={"name": "Header Check", "email": "headers@example.com", "password": "password123"},
        )

        assert response.status_code == 201
        assert response.headers["X-RateLimit-Limit"] == "20"
        assert response.headers["X-RateLimit-Remaining"] == "19"
        assert "X-RateLimit-Reset" in response.headers

    def test_exceeding_limit_returns_429(self, app, client):
        app.state.auth_rate_limiter = RateLimiter(max_requests=2, window_seconds=900)
        body = {"email": "nobody@example.com", "password": "whatever1"}

        assert client.post("/auth/login", json=body).status_code == 401
        assert client.post("/auth/login", json=body).status_code == 401
        response = client.post("/auth/login", json=body)

        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": "Too many requests. Please try again later.",
            },
        }
        assert response.headers["X-RateLimit-Limit"] == "2"
        assert response.headers["X-RateLimit-Remaining"] == "0"

    def test_register_and_login_share_a_window(self, app, client):
        app.state.auth_rate_limiter = RateLimiter(max_requests=1, window_seconds=900)

        client.post(
            "/auth/register",
            json={"name": "Someone", "email": "someone@example.com", "password": "password123"},
        )
        response = client.post("/auth/login", json={"email": "someone@example.com", "password": "password123"})

        assert response.status_code == 429

    def test_project_routes_are_not_limited(self, app, client, user_a):
        app.state.auth_rate_limiter = RateLimiter(max_requests=1, window_seconds=900)

        for _ in range(3):
            response = client.get("/projects", headers={"Authorization": f"Bearer {user_a['token']}"})
            assert response.status_code == 200
            assert "X-RateLimit-Limit" not in response.headers

    def test_failed_login_still_carries_headers(self, client):
        response = client.post("/auth/login", json={"email": "nobody@example.com", "password": "whatever1"})

        assert response.status_code == 401
        assert response.headers["X-RateLimit-Remaining"] == "19"

    def test_rejected_body_still_carries_headers(self, client):
        response = client.post("/auth/register", json={})

        assert response.status_code == 400
        assert response.headers["X-RateLimit-Limit"] == "20"
        assert response.headers["X-RateLimit-Remaining"] == "19"
