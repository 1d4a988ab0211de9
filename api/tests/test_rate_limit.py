import pytest
from fastapi import HTTPException

from cats_social.services import rate_limit
from cats_social.services.rate_limit import RequestBudget


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_budget_blocks_until_window_passes():
    clock = FakeClock()
    budget = RequestBudget(clock)
    assert budget.spend("login:ip:1.2.3.4", 2, 10) == 0
    assert budget.spend("login:ip:1.2.3.4", 2, 10) == 0
    assert budget.spend("login:ip:1.2.3.4", 2, 10) == 10

    clock.now += 10
    assert budget.spend("login:ip:1.2.3.4", 2, 10) == 0


def test_drained_buckets_are_evicted():
    clock = FakeClock()
    budget = RequestBudget(clock)
    for n in range(50):
        budget.spend(f"login:ip:10.0.0.{n}", 5, 10)
    assert len(budget) == 50

    clock.now += rate_limit.SWEEP_INTERVAL_SECONDS
    budget.spend("login:ip:10.0.1.1", 5, 10)
    assert len(budget) == 1


def test_busy_bucket_survives_sweep():
    clock = FakeClock()
    budget = RequestBudget(clock)
    budget.spend("match_create:user:a", 5, 120)
    clock.now += rate_limit.SWEEP_INTERVAL_SECONDS
    budget.spend("match_create:user:b", 5, 120)
    assert len(budget) == 2


def test_match_budget_is_per_user(monkeypatch):
    monkeypatch.setattr(rate_limit, "budget", RequestBudget(FakeClock()))
    dep = rate_limit.limit_per_user("match_create", 1, 60).dependency

    dep(current_user={"id": "owner-1"})
    dep(current_user={"id": "owner-2"})
    with pytest.raises(HTTPException) as exc:
        dep(current_user={"id": "owner-1"})
    assert exc.value.status_code == 429
    assert exc.value.headers["Retry-After"] == "60"
